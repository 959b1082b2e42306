import os
from pathlib import Path
from unittest.mock import patch

import pytest

from boletas.errors import RenderError
from boletas.storage.local import LocalStorage


def _age(path: Path, seconds_ago: int) -> None:
    stamp = 1_700_000_000 - seconds_ago
    os.utime(path, (stamp, stamp))


class TestLocalStorage:
    def test_save_creates_file(self, tmp_path):
        storage = LocalStorage(tmp_path)
        path = storage.save("000001", b"%PDF-content")

        assert (tmp_path / "boleta-000001.pdf").read_bytes() == b"%PDF-content"
        assert path == (tmp_path / "boleta-000001.pdf").resolve()

    def test_creates_base_dir(self, tmp_path):
        new_dir = tmp_path / "new_dir"
        LocalStorage(new_dir)
        assert new_dir.exists()

    def test_get_returns_file_data(self, tmp_path):
        storage = LocalStorage(tmp_path)
        storage.save("000007", b"hello-pdf")
        assert storage.get("000007") == b"hello-pdf"

    def test_rejects_non_positive_retention(self, tmp_path):
        with pytest.raises(ValueError):
            LocalStorage(tmp_path, keep=0)

    def test_list_documents_newest_first(self, tmp_path):
        storage = LocalStorage(tmp_path)
        for i, number in enumerate(["000001", "000002", "000003"]):
            path = tmp_path / f"boleta-{number}.pdf"
            path.write_bytes(b"x")
            _age(path, 100 - i)
        names = [p.name for p in storage.list_documents()]
        assert names == ["boleta-000003.pdf", "boleta-000002.pdf", "boleta-000001.pdf"]

    def test_retention_keeps_five_most_recent(self, tmp_path):
        storage = LocalStorage(tmp_path, keep=5)
        for i in range(1, 7):
            path = tmp_path / f"boleta-{i:06d}.pdf"
            path.write_bytes(b"old")
            _age(path, 100 - i)

        storage.save("000007", b"new")

        names = sorted(p.name for p in tmp_path.glob("*.pdf"))
        assert names == [f"boleta-{i:06d}.pdf" for i in range(3, 8)]

    def test_new_document_survives_even_with_older_mtime(self, tmp_path):
        storage = LocalStorage(tmp_path, keep=2)
        for i in range(1, 4):
            (tmp_path / f"boleta-{i:06d}.pdf").write_bytes(b"old")

        with patch("boletas.storage.local.LocalStorage.list_documents") as mock_list:
            mock_list.side_effect = lambda: sorted(tmp_path.glob("*.pdf"), reverse=True)
            storage.save("000000", b"new")

        remaining = sorted(p.name for p in tmp_path.glob("*.pdf"))
        assert remaining == ["boleta-000000.pdf", "boleta-000003.pdf"]

    def test_never_exceeds_retention(self, tmp_path):
        storage = LocalStorage(tmp_path, keep=5)
        for i in range(1, 12):
            storage.save(f"{i:06d}", b"pdf")
            assert len(list(tmp_path.glob("*.pdf"))) <= 5
        assert (tmp_path / "boleta-000011.pdf").exists()

    def test_ignores_non_pdf_files(self, tmp_path):
        (tmp_path / "notes.txt").write_text("keep me")
        storage = LocalStorage(tmp_path, keep=1)
        storage.save("000001", b"a")
        storage.save("000002", b"b")
        assert (tmp_path / "notes.txt").exists()
        assert [p.name for p in tmp_path.glob("*.pdf")] == ["boleta-000002.pdf"]

    def test_write_failure_raises_render_error(self, tmp_path):
        storage = LocalStorage(tmp_path)
        with patch("pathlib.Path.write_bytes", side_effect=OSError("read-only")):
            with pytest.raises(RenderError, match="read-only"):
                storage.save("000001", b"data")

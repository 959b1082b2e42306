import pytest
from PIL import Image

from boletas.errors import PhotoProcessingError
from boletas.photos.optimizer import PhotoOptimizer


class TestPhotoOptimizer:
    def test_empty_input(self, tmp_path):
        assert PhotoOptimizer(tmp_path / "opt").optimize([]) == []

    @pytest.mark.parametrize(
        "size",
        [(4000, 3000), (3000, 4000), (2048, 600), (500, 2000), (1024, 768)],
    )
    def test_fits_inside_bounds_keeping_aspect(self, tmp_path, make_image, size):
        source = make_image(tmp_path / "src.jpg", size=size)
        [out] = PhotoOptimizer(tmp_path / "opt").optimize([source])

        with Image.open(out) as img:
            assert img.format == "JPEG"
            assert img.width <= 1024
            assert img.height <= 768
            assert img.width / img.height == pytest.approx(size[0] / size[1], rel=0.01)

    def test_never_upscales(self, tmp_path, make_image):
        source = make_image(tmp_path / "small.jpg", size=(320, 240))
        [out] = PhotoOptimizer(tmp_path / "opt").optimize([source])
        with Image.open(out) as img:
            assert img.size == (320, 240)

    def test_preserves_order_and_count(self, tmp_path, make_image):
        sources = [make_image(tmp_path / f"src{i}.jpg", size=(100 + i, 100)) for i in range(4)]
        outputs = PhotoOptimizer(tmp_path / "opt").optimize(sources)
        assert len(outputs) == 4
        for i, out in enumerate(outputs):
            assert f"src{i}" in out.name
            with Image.open(out) as img:
                assert img.width == 100 + i

    def test_unique_names_on_repeated_calls(self, tmp_path, make_image):
        source = make_image(tmp_path / "src.jpg")
        optimizer = PhotoOptimizer(tmp_path / "opt")
        first = optimizer.optimize([source, source])
        second = optimizer.optimize([source])
        assert len({*first, *second}) == 3

    def test_converts_transparent_png(self, tmp_path, make_image):
        source = make_image(tmp_path / "logo.png", mode="RGBA", fmt="PNG", color=(0, 255, 0, 128))
        [out] = PhotoOptimizer(tmp_path / "opt").optimize([source])
        assert out.suffix == ".jpg"
        with Image.open(out) as img:
            assert img.mode == "RGB"

    def test_custom_bounds_and_quality(self, tmp_path, make_image):
        source = make_image(tmp_path / "src.jpg", size=(1000, 1000))
        optimizer = PhotoOptimizer(tmp_path / "opt", max_size=(200, 100), quality=30)
        [out] = optimizer.optimize([source])
        with Image.open(out) as img:
            assert img.size == (100, 100)

    def test_unreadable_source_aborts_and_cleans_up(self, tmp_path, make_image):
        good = make_image(tmp_path / "good.jpg")
        bad = tmp_path / "bad.jpg"
        bad.write_bytes(b"definitely not an image")
        out_dir = tmp_path / "opt"

        with pytest.raises(PhotoProcessingError, match="bad.jpg"):
            PhotoOptimizer(out_dir).optimize([good, bad])
        assert list(out_dir.iterdir()) == []

    def test_oversized_source_aborts_and_cleans_up(self, tmp_path, make_image, monkeypatch):
        good = make_image(tmp_path / "good.jpg", size=(100, 100))
        big = make_image(tmp_path / "big.jpg", size=(400, 400))
        out_dir = tmp_path / "opt"
        # Pillow raises DecompressionBombError above twice this limit
        monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 50_000)

        with pytest.raises(PhotoProcessingError, match="big.jpg"):
            PhotoOptimizer(out_dir).optimize([good, big])
        assert list(out_dir.iterdir()) == []

    def test_missing_source_aborts(self, tmp_path):
        with pytest.raises(PhotoProcessingError):
            PhotoOptimizer(tmp_path / "opt").optimize([tmp_path / "nope.jpg"])

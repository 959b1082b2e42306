"""Email a rendered receipt to the client over SMTP."""

from __future__ import annotations

import logging
import smtplib
import ssl
from email.message import EmailMessage
from email.utils import formataddr
from pathlib import Path

from boletas.constants import RECEIPT_TITLE, format_timestamp, local_now, receipt_filename
from boletas.errors import TransportError

logger = logging.getLogger(__name__)


class ReceiptMailer:
    def __init__(
        self,
        host: str,
        port: int = 465,
        secure: bool = True,
        username: str = "",
        password: str = "",
        bcc: str = "",
        from_name: str = "",
        timeout: float = 30.0,
        verify_tls: bool = True,
    ) -> None:
        self.host = host
        self.port = port
        self.secure = secure
        self.username = username
        self.password = password
        self.bcc = bcc
        self.from_name = from_name
        self.timeout = timeout
        self.verify_tls = verify_tls

    def _tls_context(self) -> ssl.SSLContext:
        context = ssl.create_default_context()
        if not self.verify_tls:
            context.check_hostname = False
            context.verify_mode = ssl.CERT_NONE
        return context

    def build_message(self, to_address: str, document_path: Path, receipt_number: str) -> EmailMessage:
        sent_at = format_timestamp(local_now())

        msg = EmailMessage()
        msg["From"] = formataddr((self.from_name, self.username)) if self.from_name else self.username
        msg["To"] = to_address
        if self.bcc:
            msg["Bcc"] = self.bcc
        msg["Subject"] = f"{RECEIPT_TITLE} N° {receipt_number} - {sent_at}"
        msg.set_content(f"Adjunto encontrarás la boleta número {receipt_number} generada el {sent_at}")
        msg.add_attachment(
            document_path.read_bytes(),
            maintype="application",
            subtype="pdf",
            filename=receipt_filename(receipt_number),
        )
        return msg

    def _connect(self) -> smtplib.SMTP:
        if self.secure:
            return smtplib.SMTP_SSL(self.host, self.port, timeout=self.timeout, context=self._tls_context())
        server = smtplib.SMTP(self.host, self.port, timeout=self.timeout)
        server.ehlo()
        if server.has_extn("starttls"):
            server.starttls(context=self._tls_context())
            server.ehlo()
        return server

    def send(self, to_address: str, document_path: str | Path, receipt_number: str) -> None:
        """Send the receipt. SMTP and socket failures raise ``TransportError``; nothing is retried."""
        msg = self.build_message(to_address, Path(document_path), receipt_number)
        try:
            with self._connect() as server:
                if self.username:
                    server.login(self.username, self.password)
                server.send_message(msg)
        except (smtplib.SMTPException, OSError) as exc:
            logger.error("Email for receipt %s to %s failed: %s", receipt_number, to_address, exc)
            raise TransportError(f"Could not email receipt {receipt_number} to {to_address}: {exc}") from exc
        logger.info("Receipt %s emailed to %s via %s:%d", receipt_number, to_address, self.host, self.port)

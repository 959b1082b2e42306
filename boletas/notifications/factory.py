from boletas.notifications.mailer import ReceiptMailer
from boletas.settings import settings


def get_mailer() -> ReceiptMailer:
    return ReceiptMailer(
        host=settings.smtp_host,
        port=settings.smtp_port,
        secure=settings.smtp_secure,
        username=settings.smtp_user,
        password=settings.smtp_password,
        bcc=settings.smtp_bcc,
        from_name=settings.smtp_from_name,
        timeout=settings.smtp_timeout,
        verify_tls=settings.smtp_verify_tls,
    )

import logging
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_prefix="BOLETAS_", extra="ignore")

    host: str = "0.0.0.0"
    port: int = 5000

    smtp_host: str = ""
    smtp_port: int = 465
    smtp_secure: bool = True
    smtp_user: str = ""
    smtp_password: str = ""
    smtp_bcc: str = ""
    smtp_from_name: str = "JYM Electromecánica"
    smtp_timeout: float = 30.0
    smtp_verify_tls: bool = True

    data_dir: str = "./data"
    upload_dir: str = ""
    optimized_dir: str = ""
    output_dir: str = ""
    counter_path: str = ""
    clients_path: str = ""
    logo_path: str = ""

    max_photos: int = 8
    photo_max_width: int = 1024
    photo_max_height: int = 768
    photo_quality: int = 70

    receipt_retention: int = 5
    counter_reset_on_corruption: bool = True

    timezone: str = "America/Santiago"

    log_level: str = "INFO"
    log_json: bool = False

    def _under_data_dir(self, explicit: str, default: str) -> Path:
        if explicit:
            return Path(explicit)
        return Path(self.data_dir) / default

    def get_upload_dir(self) -> Path:
        return self._under_data_dir(self.upload_dir, "uploads/fotos")

    def get_optimized_dir(self) -> Path:
        return self._under_data_dir(self.optimized_dir, "uploads/fotos-opt")

    def get_output_dir(self) -> Path:
        return self._under_data_dir(self.output_dir, "boletas")

    def get_counter_path(self) -> Path:
        return self._under_data_dir(self.counter_path, "boleta-counter.json")

    def get_clients_path(self) -> Path:
        return self._under_data_dir(self.clients_path, "clientes.json")

    def get_logo_path(self) -> Path | None:
        if not self.logo_path:
            return None
        return Path(self.logo_path)

    def smtp_configured(self) -> bool:
        if not self.smtp_host:
            logger.warning(
                "BOLETAS_SMTP_HOST is not set — receipts cannot be emailed. "
                "Set BOLETAS_SMTP_HOST in your environment or .env file."
            )
            return False
        return True


settings = Settings()

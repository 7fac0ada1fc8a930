from pydantic import field_validator
from pydantic_settings import BaseSettings

from kaiheila_webhook.models.pipeline import PipelineConfig
from kaiheila_webhook.utils.padding import zero_padding


class Settings(BaseSettings):
    # Encryption (KOOK developer console -> Webhook -> Encrypt Key)
    webhook_key: str | None = None
    ignore_decrypt_error: bool = True

    # Verify Token from the same console page
    verify_token: str | None = None

    # Duplicate suppression window for the `sn` sequence number
    sn_window_seconds: int = 600

    # HTTP ingress
    host: str = "0.0.0.0"
    port: int = 8600
    webhook_path: str = "/webhook"  # "" = intercept every POST

    # App
    log_level: str = "INFO"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    @field_validator("port")
    @classmethod
    def _positive_port(cls, value: int) -> int:
        if value <= 0:
            raise ValueError(f"port must be positive, got {value}")
        return value

    @field_validator("sn_window_seconds")
    @classmethod
    def _positive_window(cls, value: int) -> int:
        if value <= 0:
            raise ValueError(f"sn_window_seconds must be positive, got {value}")
        return value

    def pipeline_config(self) -> PipelineConfig:
        return PipelineConfig(
            key=zero_padding(self.webhook_key) if self.webhook_key else None,
            verify_token=self.verify_token,
            ignore_decrypt_error=self.ignore_decrypt_error,
            port=self.port,
            sn_window_ms=self.sn_window_seconds * 1000,
        )

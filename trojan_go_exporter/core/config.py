import logging

from pydantic import computed_field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

SELF_METRICS_PATH = "/metrics"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", env_prefix="TROJAN_GO_EXPORTER_"
    )
    APP_NAME: str = "trojan_go_exporter"

    LISTEN: str = ":9550"
    METRICS_PATH: str = "/scrape"
    TROJAN_GO_ENDPOINT: str = "127.0.0.1:10000"
    SCRAPE_TIMEOUT: int = 3
    LOG_LEVEL: str = "INFO"

    @field_validator("SCRAPE_TIMEOUT")
    @classmethod
    def _positive_timeout(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("scrape timeout must be greater than zero")
        return value

    @field_validator("LISTEN")
    @classmethod
    def _valid_listen(cls, value: str) -> str:
        _, sep, port = value.rpartition(":")
        if not sep or not port.isdigit() or not 0 < int(port) < 65536:
            raise ValueError(f"listen address must look like [ADDR]:PORT, got {value!r}")
        return value

    @field_validator("LOG_LEVEL")
    @classmethod
    def _known_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level: {value!r}")
        return level

    @model_validator(mode="after")
    def _distinct_paths(self) -> "Settings":
        if self.metrics_url_path == SELF_METRICS_PATH:
            raise ValueError(
                f"metrics path must not collide with {SELF_METRICS_PATH}"
            )
        return self

    @computed_field(return_type=str)
    @property
    def listen_host(self) -> str:
        host = self.LISTEN.rpartition(":")[0].strip("[]")
        return host or "0.0.0.0"

    @computed_field(return_type=int)
    @property
    def listen_port(self) -> int:
        return int(self.LISTEN.rpartition(":")[2])

    @computed_field(return_type=str)
    @property
    def metrics_url_path(self) -> str:
        value = (self.METRICS_PATH or "/scrape").strip() or "/scrape"
        if not value.startswith("/"):
            value = f"/{value}"
        path = value.rstrip("/")
        return path or "/scrape"

    @computed_field(return_type=float)
    @property
    def scrape_timeout_seconds(self) -> float:
        return float(self.SCRAPE_TIMEOUT)

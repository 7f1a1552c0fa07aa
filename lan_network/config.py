from __future__ import annotations

import logging

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Any publicly routed address works; nothing is ever sent to it
    probe_host: str = Field("8.8.8.8", alias="PROBE_HOST")
    probe_port: int = Field(53, alias="PROBE_PORT")

    dhcp_timeout: float = Field(0.25, alias="DHCP_TIMEOUT")
    dhcp_client_port: int = Field(68, alias="DHCP_CLIENT_PORT")
    dhcp_server_port: int = Field(67, alias="DHCP_SERVER_PORT")

    sync_timeout: float = Field(2.0, alias="SYNC_TIMEOUT")

    host: str = Field("127.0.0.1", alias="HOST")
    port: int = Field(8080, alias="PORT")
    log_level: str = Field("WARNING", alias="LOG_LEVEL")


settings = Settings()


def configure_logging(level: str | None = None) -> None:
    # stderr only: the worker's stdout must stay pure JSON
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format=LOG_FORMAT,
    )

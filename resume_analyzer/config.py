import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv


class ConfigurationError(RuntimeError):
    """Raised when required storage settings are missing."""


@dataclass(frozen=True)
class Settings:
    storage_connection_string: str
    storage_container: str = "resumes"
    cosmos_endpoint: Optional[str] = None
    cosmos_key: Optional[str] = None
    cosmos_database: str = "ResumeDB"
    cosmos_container: str = "Analyses"
    database_url: Optional[str] = None
    log_level: str = "INFO"

    @property
    def use_cosmos(self) -> bool:
        return bool(self.cosmos_endpoint and self.cosmos_key)

    @classmethod
    def from_env(cls) -> "Settings":
        """Read settings from the environment (and a local .env file, if present)."""
        load_dotenv()

        connection_string = os.getenv("AZURE_STORAGE_CONNECTION_STRING", "")
        if not connection_string:
            raise ConfigurationError(
                "AZURE_STORAGE_CONNECTION_STRING environment variable is required."
            )

        settings = cls(
            storage_connection_string=connection_string,
            storage_container=os.getenv("AZURE_STORAGE_CONTAINER", "resumes"),
            cosmos_endpoint=os.getenv("COSMOS_ENDPOINT") or None,
            cosmos_key=os.getenv("COSMOS_KEY") or None,
            cosmos_database=os.getenv("COSMOS_DATABASE", "ResumeDB"),
            cosmos_container=os.getenv("COSMOS_CONTAINER", "Analyses"),
            database_url=os.getenv("DATABASE_URL") or None,
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )

        if not settings.use_cosmos and not settings.database_url:
            raise ConfigurationError(
                "Either COSMOS_ENDPOINT and COSMOS_KEY or DATABASE_URL is required."
            )
        return settings


def configure_logging(level: str) -> None:
    """Give the package's loggers a handler and apply LOG_LEVEL to them.

    basicConfig does nothing when the host (uvicorn --log-config, pytest)
    has already configured the root logger.
    """
    logging.basicConfig(format="%(asctime)s - %(levelname)s - %(name)s - %(message)s")
    logging.getLogger("resume_analyzer").setLevel(level)

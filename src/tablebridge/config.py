"""Application configuration."""

import logging
import os
from pathlib import Path

from pydantic import BaseModel, Field

DEFAULT_MAX_UPLOAD_BYTES = 10 * 1024 * 1024


class ApiConfig(BaseModel):
    """Ingestion API server settings."""

    base_url: str = Field(
        default_factory=lambda: os.environ.get("TABLEBRIDGE_API_URL", "http://localhost:8080/api")
    )
    # None means no client-side timeout; the transport decides.
    timeout_seconds: float | None = None
    max_upload_bytes: int = Field(
        default_factory=lambda: int(
            os.environ.get("TABLEBRIDGE_MAX_UPLOAD_SIZE", str(DEFAULT_MAX_UPLOAD_BYTES))
        )
    )


class WorkflowConfig(BaseModel):
    """Workflow defaults."""

    preview_row_limit: int = Field(default=100, ge=1)
    default_delimiter: str = ","
    host: str = "127.0.0.1"
    port: int = Field(default=9000, ge=1, le=65535)
    database: str = "default"
    user: str = "default"


class UIConfig(BaseModel):
    """UI settings."""

    theme: str = "dark"


class AppConfig(BaseModel):
    """Main application configuration."""

    api: ApiConfig = Field(default_factory=ApiConfig)
    workflow: WorkflowConfig = Field(default_factory=WorkflowConfig)
    ui: UIConfig = Field(default_factory=UIConfig)
    log_level: str = Field(
        default_factory=lambda: os.environ.get("TABLEBRIDGE_LOG_LEVEL", "INFO")
    )
    log_file: Path = Field(
        default_factory=lambda: Path(
            os.environ.get(
                "TABLEBRIDGE_LOG_FILE", str(Path.home() / ".tablebridge" / "tablebridge.log")
            )
        )
    )

    @classmethod
    def load(cls, config_path: Path | None = None) -> "AppConfig":
        """Load configuration from file or defaults."""
        if config_path is None:
            config_path = Path.home() / ".tablebridge" / "config.toml"

        if config_path.exists():
            try:
                import tomllib

                with open(config_path, "rb") as f:
                    data = tomllib.load(f)
                return cls.model_validate(data)
            except Exception as e:
                logging.getLogger(__name__).warning(
                    f"Ignoring unreadable config file {config_path}: {e}"
                )

        return cls()


def configure_logging(config: AppConfig) -> None:
    """Send log records to the configured file; the TUI owns the terminal."""
    config.log_file.parent.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        filename=config.log_file,
        level=config.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        force=True,
    )


# Global config instance
_config: AppConfig | None = None


def get_config() -> AppConfig:
    """Get or create the global config instance."""
    global _config
    if _config is None:
        _config = AppConfig.load()
    return _config

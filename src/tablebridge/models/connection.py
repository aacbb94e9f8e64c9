"""Connection and file models for the two sides of a transfer."""

from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator


class SourceKind(str, Enum):
    """Which side of the transfer data is read from."""

    DATABASE = "database"
    FILE = "file"

    @property
    def other(self) -> "SourceKind":
        """Return the complementary kind."""
        if self is SourceKind.DATABASE:
            return SourceKind.FILE
        return SourceKind.DATABASE

    @property
    def display_name(self) -> str:
        """Human-readable name."""
        names = {
            SourceKind.DATABASE: "ClickHouse",
            SourceKind.FILE: "Flat File",
        }
        return names[self]


class ConnectionProfile(BaseModel):
    """ClickHouse connection parameters.

    Fields are not checked against the server until an operation uses them.
    """

    model_config = ConfigDict(validate_assignment=True)

    host: str = "127.0.0.1"
    port: int = Field(default=9000, ge=1, le=65535)
    database: str = "default"
    user: str = "default"
    credential: SecretStr = SecretStr("")

    @property
    def display_host(self) -> str:
        """Return host:port for display."""
        return f"{self.host}:{self.port}"

    @property
    def target_key(self) -> tuple[str, int, str]:
        """Identify the server and database tables are listed from."""
        return (self.host, self.port, self.database)

    def to_payload(self) -> dict[str, Any]:
        """Build the request body understood by the ingestion API."""
        return {
            "host": self.host,
            "port": self.port,
            "database": self.database,
            "user": self.user,
            "jwtToken": self.credential.get_secret_value(),
        }


class SelectedFile(BaseModel):
    """A local file picked as the source of an import."""

    name: str = Field(..., min_length=1)
    local_path: Path
    uploaded_path: str | None = None

    @classmethod
    def from_path(cls, path: Path) -> "SelectedFile":
        """Create a selection from a local path."""
        return cls(name=path.name, local_path=path)

    @property
    def is_uploaded(self) -> bool:
        """Whether the server already holds a copy."""
        return self.uploaded_path is not None


class FileProfile(BaseModel):
    """Flat file settings."""

    model_config = ConfigDict(validate_assignment=True)

    output_path: str = ""
    delimiter: str = ","
    selected_file: SelectedFile | None = None

    @field_validator("delimiter", mode="before")
    @classmethod
    def _normalize_delimiter(cls, value: Any) -> Any:
        if value == "\\t":
            return "\t"
        if isinstance(value, str) and len(value) != 1:
            raise ValueError("Delimiter must be a single character")
        return value

"""Server configuration loaded from environment variables."""
import os
from typing import Dict, Optional

from pydantic import BaseModel, Field, field_validator

ENV_PREFIX = "RPCROUTE_"
LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class ServerSettings(BaseModel):
    """Settings for the JSON-RPC server.

    ``show_errors`` controls whether failure details (exception type,
    message and backtrace) are sent to callers in error responses.
    """

    host: str = "0.0.0.0"
    port: int = Field(default=8999, ge=1, le=65535)
    show_errors: bool = False
    batch_concurrency: bool = False
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return level

    @classmethod
    def from_env(cls, environ: Optional[Dict[str, str]] = None) -> "ServerSettings":
        """Build settings from ``RPCROUTE_*`` variables; unset ones keep defaults.

        Raises:
            pydantic.ValidationError: if a variable holds an invalid value
        """
        environ = os.environ if environ is None else environ
        values = {}
        for name in cls.model_fields:
            value = environ.get(f"{ENV_PREFIX}{name.upper()}")
            if value is not None:
                values[name] = value
        return cls(**values)

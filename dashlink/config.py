"""Configuration for dashlink."""

import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, Field

_TRUE_VALUES = {"1", "true", "yes", "on"}


class DashlinkConfig(BaseModel):
    """Dashlink configuration with Pydantic validation."""

    # Storage paths
    data_dir: Path = Field(default=Path("data"))
    log_dir: Path = Field(default=Path("logs"))

    # File naming
    calendars_filename: str = Field(default="calendars.json")
    linked_events_filename: str = Field(default="linked-events.json")
    travel_filename: str = Field(default="travel.json")
    local_filename: str = Field(default="local.json")
    experiences_filename: str = Field(default="experiences.json")
    log_filename: str = Field(default="dashlink.log")

    # Feed handling
    fetch_timeout: float = Field(default=30.0, gt=0)
    unfold_lines: bool = Field(default=False)
    default_calendar_color: str = Field(default="#3b82f6")

    # HTTP server
    host: str = Field(default="127.0.0.1")
    port: int = Field(default=3000, ge=1, le=65535)

    @classmethod
    def from_env(cls) -> "DashlinkConfig":
        """Load configuration from environment variables and .env file."""
        load_dotenv()

        config_dict = {}

        # Storage paths
        if "DATA_DIR" in os.environ:
            config_dict["data_dir"] = Path(os.environ["DATA_DIR"])
        if "LOG_DIR" in os.environ:
            config_dict["log_dir"] = Path(os.environ["LOG_DIR"])

        # File naming
        if "LOG_FILENAME" in os.environ:
            config_dict["log_filename"] = os.environ["LOG_FILENAME"]

        # Feed handling
        if "FETCH_TIMEOUT" in os.environ:
            try:
                timeout = float(os.environ["FETCH_TIMEOUT"])
                if timeout > 0:
                    config_dict["fetch_timeout"] = timeout
            except ValueError:
                pass  # Keep default if invalid
        if "UNFOLD_LINES" in os.environ:
            config_dict["unfold_lines"] = (
                os.environ["UNFOLD_LINES"].strip().lower() in _TRUE_VALUES
            )
        if "DEFAULT_CALENDAR_COLOR" in os.environ:
            config_dict["default_calendar_color"] = os.environ[
                "DEFAULT_CALENDAR_COLOR"
            ]

        # HTTP server
        if "HOST" in os.environ:
            config_dict["host"] = os.environ["HOST"]
        if "PORT" in os.environ:
            try:
                port = int(os.environ["PORT"])
                if 1 <= port <= 65535:
                    config_dict["port"] = port
            except ValueError:
                pass

        return cls(**config_dict)

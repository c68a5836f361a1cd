"""
pdbconverter - Configuration
============================

Runtime configuration of the command-line tools and the table-based
database reader. Configuration can come from:
- Default values (defined here)
- Environment variables
- Command-line options, which override both

Copyright (c) 2026 pdbconverter Authors & Contributors
"""

from dataclasses import dataclass
from datetime import timezone, tzinfo
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError
import logging
import os

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class ConverterConfig:
    """
    Configuration for reading and dumping databases.

    Attributes:
        log_level: Root log level name (default: WARNING)
        default_timezone: Time zone for table rows that carry none (default: UTC)
        default_converter: Converter used when none is given (default: raw)
    """

    log_level: str = "WARNING"
    default_timezone: str = "UTC"
    default_converter: str = "raw"

    @classmethod
    def from_env(cls) -> "ConverterConfig":
        """
        Create ConverterConfig from environment variables.

        Environment variables (all optional):
            PDBCONV_LOG_LEVEL: Log level name (e.g., "DEBUG")
            PDBCONV_TIMEZONE: IANA time zone name (e.g., "Europe/Berlin")
            PDBCONV_CONVERTER: Converter name (e.g., "memo")

        Returns:
            ConverterConfig with values from environment variables
        """
        config = cls()

        if level := os.environ.get("PDBCONV_LOG_LEVEL"):
            level = level.upper()
            if level in LOG_LEVELS:
                config.log_level = level
            else:
                logger.warning(f"Ignoring invalid PDBCONV_LOG_LEVEL: {level}")

        if zone := os.environ.get("PDBCONV_TIMEZONE"):
            config.default_timezone = zone

        if converter := os.environ.get("PDBCONV_CONVERTER"):
            config.default_converter = converter.lower()

        return config

    def get_timezone(self, name: Optional[str] = None) -> tzinfo:
        """
        Resolve a time zone name.

        Falls back to the default time zone if name is empty or unknown,
        and to UTC if the default itself is unknown.
        """
        for candidate in (name, self.default_timezone):
            if not candidate:
                continue
            try:
                return ZoneInfo(candidate)
            except (ZoneInfoNotFoundError, ValueError):
                logger.debug(f"Unknown time zone '{candidate}'")
        return timezone.utc


"""
simread Configuration
=====================

Configuration for loading and displaying Simple Code images. Values can
come from:
- Default values (defined here)
- Environment variables
- Command-line options (applied by the CLI on top of the above)

Environment variables (all optional):
    SIMREAD_MAX_FILE_SIZE: Reject files of this many bytes or more
    SIMREAD_HIDE_PROGRAM_BYTES: "1"/"true"/"yes" to hide data payloads
    SIMREAD_PAYLOAD_BYTES_PER_LINE: Payload bytes shown per output line
"""

from dataclasses import dataclass
import logging
import os

logger = logging.getLogger(__name__)

# Largest accepted image is one byte below this (1MB)
DEFAULT_MAX_FILE_SIZE = 1_000_000

DEFAULT_PAYLOAD_BYTES_PER_LINE = 16

_TRUE_VALUES = ("1", "true", "yes", "on")


@dataclass
class SimreadConfig:
    """
    Configuration for a simread session.

    Attributes:
        max_file_size: Files at or above this size are rejected before reading
        hide_program_bytes: Replace data record payloads with a placeholder
        payload_bytes_per_line: Payload bytes rendered per output line
    """
    max_file_size: int = DEFAULT_MAX_FILE_SIZE
    hide_program_bytes: bool = False
    payload_bytes_per_line: int = DEFAULT_PAYLOAD_BYTES_PER_LINE

    @classmethod
    def from_env(cls) -> "SimreadConfig":
        """
        Create SimreadConfig from environment variables.

        Invalid numeric values are logged and the default is kept.

        Returns:
            SimreadConfig with values from environment variables
        """
        config = cls()

        if max_size := os.environ.get("SIMREAD_MAX_FILE_SIZE"):
            try:
                value = int(max_size, 0)
            except ValueError:
                logger.warning(f"Ignoring invalid SIMREAD_MAX_FILE_SIZE: {max_size!r}")
            else:
                if value > 0:
                    config.max_file_size = value
                else:
                    logger.warning(
                        f"Ignoring non-positive SIMREAD_MAX_FILE_SIZE: {value}"
                    )

        if hide := os.environ.get("SIMREAD_HIDE_PROGRAM_BYTES"):
            config.hide_program_bytes = hide.strip().lower() in _TRUE_VALUES

        if per_line := os.environ.get("SIMREAD_PAYLOAD_BYTES_PER_LINE"):
            try:
                value = int(per_line)
            except ValueError:
                logger.warning(
                    f"Ignoring invalid SIMREAD_PAYLOAD_BYTES_PER_LINE: {per_line!r}"
                )
            else:
                if value > 0:
                    config.payload_bytes_per_line = value
                else:
                    logger.warning(
                        f"Ignoring non-positive SIMREAD_PAYLOAD_BYTES_PER_LINE: {value}"
                    )

        return config

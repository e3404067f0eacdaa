"""tfindex utilities package."""

from .constants import ERROR_LOG_FILE, TFINDEX_DIR
from .error_handler import handle_exceptions
from .exit_codes import ExitCodes
from .logging import logger

__all__ = [
    "TFINDEX_DIR",
    "ERROR_LOG_FILE",
    "handle_exceptions",
    "ExitCodes",
    "logger",
]

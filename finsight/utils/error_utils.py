"""
Error handling utilities for Finsight.

This module provides centralized error handling and logging for the finance
tracker. It includes the exception hierarchy used at the I/O boundaries
(record store, data files, remote advisor models) and a decorator for
consistent error reporting in helper utilities.
"""

import os
import traceback
import logging
from functools import wraps
import sys
from datetime import datetime

# Configure logging; no file handler on serverless (read-only filesystem)
_handlers = [logging.StreamHandler(sys.stdout)]
if not os.getenv("VERCEL"):
    _handlers.append(logging.FileHandler("finsight.log"))

logging.basicConfig(
    level=logging.DEBUG if os.getenv("FINSIGHT_DEBUG") else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=_handlers,
)

logger = logging.getLogger(__name__)


class FinsightError(Exception):
    """Base exception class for Finsight errors"""

    def __init__(self, message, details=None):
        self.message = message
        self.details = details
        self.timestamp = datetime.now()
        super().__init__(self.message)


class RecordStoreError(FinsightError):
    """Raised when a user document cannot be read from or written to the store"""


class DataFormatError(FinsightError):
    """Raised when an imported backup file does not have the expected shape"""


class AdvisorError(FinsightError):
    """
    Raised when the advisor cannot obtain a reply from any remote model.

    Attributes:
        attempts: List of "model: reason" strings, one per model tried
        fatal: True when a non-retryable failure aborted the fallback loop
    """

    def __init__(self, message, attempts=None, fatal=False):
        self.attempts = list(attempts or [])
        self.fatal = fatal
        super().__init__(message, {"attempts": self.attempts, "fatal": fatal})


def error_handler(func):
    """Decorator for handling errors and providing detailed information"""

    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except FinsightError:
            raise
        except Exception as e:
            exc_type, exc_value, exc_tb = sys.exc_info()
            tb = traceback.extract_tb(exc_tb)

            # Get the most relevant parts of the traceback
            error_location = f"{tb[-1].filename}:{tb[-1].lineno}"
            error_function = tb[-1].name

            error_details = {
                "error_type": exc_type.__name__,
                "location": error_location,
                "function": error_function,
                "arguments": {"args": str(args), "kwargs": str(kwargs)},
                "traceback": traceback.format_exc(),
            }

            logger.error(f"Error in {error_location} - {error_function}: {str(e)}")
            logger.debug(f"Detailed error information: {error_details}")

            raise FinsightError(
                f"Error in {error_function} at {error_location}: {str(e)}",
                error_details,
            )

    return wrapper

"""Global logging and error handling utilities"""
import logging
import sys
from typing import Callable, Optional

# Detect debug mode - True if running from source, False if packaged
DEBUG_MODE = not getattr(sys, 'frozen', False)

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

_error_reporter: Optional[Callable[[str, str], None]] = None


def configure_logging(level=logging.INFO):
    """Install the stdout handler used by every entry point"""
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stdout)


def set_error_reporter(reporter: Optional[Callable[[str, str], None]]):
    """Register a callback(title, message) that shows errors to the user

    The GUI registers a message box here; the CLI leaves it unset.
    """
    global _error_reporter
    _error_reporter = reporter


def loggerRaise(e: Exception, user_message: str = None, title: str = "Error"):
    """Handle exceptions with an optional user-facing report in release mode

    Args:
        e: The exception to handle
        user_message: User-friendly message to report (optional)
        title: Title for the report

    In DEBUG_MODE:
        - Just raises the exception (shows full traceback)

    In RELEASE_MODE:
        - Logs the full traceback
        - Hands the user message (or exception string) to the error reporter
        - Then raises the exception
    """
    if DEBUG_MODE:
        raise e

    logging.getLogger('Editor').error(f"{title}: {e}", exc_info=e)

    message = user_message if user_message else str(e)
    if _error_reporter:
        _error_reporter(title, message)
    else:
        print(f"ERROR (no reporter): {title} - {message}", file=sys.stderr)

    raise e

"""
Logging Configuration Module

Thread-safe logging for the CMS service: a queue-based handler so request
threads and the background view counter never interleave lines, plus
silencing of the chatty HTTP and AWS client libraries.
"""

import logging
import logging.handlers
import sys
from queue import Queue
from typing import Optional

NOISY_LOGGERS = [
    "httpx",
    "httpcore",
    "hpack",
    "urllib3",
    "botocore",
    "boto3",
    "s3transfer",
    "postgrest",
    "supabase",
    "werkzeug",
]


class ThreadSafeLoggingConfig:
    """Queue-based logging configuration."""

    def __init__(self):
        self._log_listener: Optional[logging.handlers.QueueListener] = None
        self._log_queue: Optional[Queue] = None

    def setup_logging(self, debug: bool = False) -> None:
        """
        Route all records through a QueueHandler drained by one listener thread.

        Args:
            debug: Whether to enable debug logging
        """
        if self._log_listener:
            self.stop()

        self._log_queue = Queue()
        queue_handler = logging.handlers.QueueHandler(self._log_queue)

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s")
        )

        self._log_listener = logging.handlers.QueueListener(
            self._log_queue, console_handler, respect_handler_level=True
        )
        self._log_listener.start()

        root_logger = logging.getLogger()
        root_logger.handlers.clear()
        root_logger.addHandler(queue_handler)
        root_logger.setLevel(logging.DEBUG if debug else logging.INFO)

        if not debug:
            self._silence_noisy_libraries()

    def _silence_noisy_libraries(self) -> None:
        """Silence noisy third-party libraries."""
        class _MuteHttpFilter(logging.Filter):
            def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
                name = record.name or ""
                if name.startswith("httpx") or name.startswith("httpcore"):
                    return False
                msg = record.getMessage()
                if isinstance(msg, str) and msg.startswith(("HTTP Request:", "HTTP Response:")):
                    return False
                return True

        for handler in logging.getLogger().handlers:
            handler.addFilter(_MuteHttpFilter())

        for name in NOISY_LOGGERS:
            logger = logging.getLogger(name)
            if name in ("httpx", "httpcore", "hpack"):
                logger.setLevel(logging.CRITICAL)
                logger.disabled = True
            else:
                logger.setLevel(logging.WARNING)
            logger.handlers.clear()
            logger.addHandler(logging.NullHandler())
            logger.propagate = False

    def stop(self) -> None:
        """Stop the logging listener and cleanup."""
        if self._log_listener:
            self._log_listener.stop()
            self._log_listener = None
        self._log_queue = None


logging_config = ThreadSafeLoggingConfig()


def setup_logging(debug: bool = False) -> None:
    logging_config.setup_logging(debug)


def stop_logging() -> None:
    logging_config.stop()

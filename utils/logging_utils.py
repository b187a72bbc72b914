import logging
from typing import Optional, Union

from config import get_settings


class UnicodeConsoleHandler(logging.StreamHandler):
    """Console handler that degrades to ASCII on terminals without Unicode."""

    def emit(self, record):
        try:
            msg = self.format(record)
            self.stream.write(msg + self.terminator)
            self.flush()
        except UnicodeEncodeError:
            fallback_msg = record.getMessage().encode('ascii', 'replace').decode('ascii')
            formatted = self.format(logging.LogRecord(
                record.name, record.levelno, record.pathname, record.lineno,
                fallback_msg, None, record.exc_info, record.funcName
            ))
            self.stream.write(formatted + self.terminator)
            self.flush()
        except Exception:
            self.handleError(record)


def setup_logging(
    verbose: bool = False,
    log_file: Optional[str] = None,
    log_to_dir: bool = False
) -> logging.Logger:
    """Configure logging settings with optional file output.

    Args:
        verbose (bool): If True, sets logging level to DEBUG
        log_file (Optional[str]): Path to log file if file logging is desired
        log_to_dir (bool): Without ``log_file``, write to ``lyricsync.log`` in the settings log directory

    Returns:
        logging.Logger: Configured logger instance
    """
    settings = get_settings()
    level: Union[int, str] = logging.DEBUG if verbose else settings.LOG_LEVEL.upper()

    formatter = logging.Formatter(settings.LOG_FORMAT)

    console_handler = UnicodeConsoleHandler()
    console_handler.setFormatter(formatter)
    handlers = [console_handler]

    if not log_file and log_to_dir:
        log_file = str(settings.get_log_file())

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    logging.basicConfig(level=level, handlers=handlers, force=True)

    logger = logging.getLogger('lyricsync')
    logger.debug("Logging setup complete")
    return logger

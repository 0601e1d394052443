import logging
import os
from datetime import datetime

from .config import Config

_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logger(config: Config | None = None,
                 console_level: int | None = None) -> logging.Logger:
    """Attach a timestamped log file under ``config.LOG_DIR`` to the
    ``zoautil`` logger. Calling it again reuses the existing file.

    ``console_level`` additionally echoes records at that level to stderr.
    """
    config = config or Config.load()
    logger = logging.getLogger("zoautil")
    logger.setLevel(logging.DEBUG)

    if not any(isinstance(h, logging.FileHandler) for h in logger.handlers):
        os.makedirs(config.LOG_DIR, exist_ok=True)
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = os.path.join(config.LOG_DIR, f"zoautil_{timestamp}.log")

        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(logging.Formatter(_FORMAT, datefmt="%H:%M:%S"))
        logger.addHandler(fh)

    has_console = any(type(h) is logging.StreamHandler for h in logger.handlers)
    if console_level is not None and not has_console:
        sh = logging.StreamHandler()
        sh.setLevel(console_level)
        sh.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
        logger.addHandler(sh)

    return logger

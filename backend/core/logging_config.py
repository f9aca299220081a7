import logging
import os
from pathlib import Path
from logging.handlers import RotatingFileHandler

# Logs directory, overridable with LOG_DIR
log_dir = Path(os.getenv("LOG_DIR") or (Path(__file__).parent.parent / "logs"))
log_dir.mkdir(parents=True, exist_ok=True)

# Log file path
log_file = log_dir / "app.log"


def setup_logging():
    """
    Set up centralized logging configuration.
    Configures logging to output to both console and file.
    """
    logger = logging.getLogger()
    level_name = os.getenv("LOG_LEVEL", "INFO").upper()
    logger.setLevel(getattr(logging, level_name, logging.INFO))

    # Clear any existing handlers
    logger.handlers.clear()

    formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=10*1024*1024,
        backupCount=5,
        encoding='utf-8'
    )
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    # The Gemini SDK is chatty at INFO
    logging.getLogger("google").setLevel(logging.WARNING)

    logger.info("Logging system initialized (level=%s, dir=%s)", level_name, log_dir)


def get_agent_log_dir(area: str) -> Path:
    """Directory used to dump complete model output for one area (flows, scenarios, ...)."""
    path = log_dir / area
    path.mkdir(parents=True, exist_ok=True)
    return path


# Initialize logging when this module is imported
setup_logging()

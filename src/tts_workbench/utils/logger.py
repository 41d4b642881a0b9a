import logging
import sys

LOGGER_NAME = "TTSWorkbench"
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logger(name=LOGGER_NAME, console_level=logging.INFO):
    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG)

    # Handlers are attached once even if this runs again (tests, reloads)
    if not logger.handlers:
        console = logging.StreamHandler(sys.stdout)
        console.setLevel(console_level)
        console.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(console)

    return logger


def set_console_level(level):
    """Change how much reaches stdout (the CLI's --verbose)."""
    for handler in logger.handlers:
        if isinstance(handler, logging.StreamHandler):
            handler.setLevel(level)


logger = setup_logger()

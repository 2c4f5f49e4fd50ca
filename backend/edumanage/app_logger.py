import logging, os

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
_DEFAULT_LEVEL = os.getenv("EDUMANAGE_LOG_LEVEL", "INFO").upper()


def setup_logging():
    logger = logging.getLogger("edumanage")
    logger.setLevel(getattr(logging, _DEFAULT_LEVEL, logging.INFO))

    # One console handler even when the app is created several times (tests)
    if not any(isinstance(h, logging.StreamHandler) for h in logger.handlers):
        ch = logging.StreamHandler()
        ch.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(ch)

    logger.propagate = False
    return logger


def get_logger(name=None):
    base = logging.getLogger("edumanage")
    return base.getChild(name) if name else base


logger = setup_logging()

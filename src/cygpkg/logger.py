import logging

from .errors import FatalError

LOGGER_NAME = "cygpkg"


class Colors:
    RESET = "\033[0m"
    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    CYAN = "\033[36m"
    BOLD = "\033[1m"


class ColorFormatter(logging.Formatter):
    COLOR_MAP = {
        logging.DEBUG: Colors.CYAN,
        logging.INFO: Colors.GREEN,
        logging.WARNING: Colors.YELLOW,
        logging.ERROR: Colors.RED,
        logging.CRITICAL: Colors.RED + Colors.BOLD,
    }

    def format(self, record):
        color = self.COLOR_MAP.get(record.levelno, Colors.RESET)
        message = super().format(record)
        return f"{color}{message}{Colors.RESET}"


class VerbosityFilter(logging.Filter):
    """DEBUG needs --debug, INFO needs --verbose. Everything else passes."""

    def __init__(self, debug: bool = False, verbose: bool = False) -> None:
        super().__init__()
        self.debug = debug
        self.verbose = verbose

    def filter(self, record):
        if record.levelno == logging.DEBUG:
            return self.debug
        if record.levelno == logging.INFO:
            return self.verbose
        return True


def _verbosity_filter(logger: logging.Logger) -> VerbosityFilter:
    for f in logger.filters:
        if isinstance(f, VerbosityFilter):
            return f
    f = VerbosityFilter()
    logger.addFilter(f)
    return f


def setup_logger(name=LOGGER_NAME):
    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG)
    _verbosity_filter(logger)
    # Prevent adding multiple handlers in case of repeated calls
    if not logger.handlers:
        ch = logging.StreamHandler()
        ch.setLevel(logging.DEBUG)
        ch.setFormatter(ColorFormatter("%(levelname)s: %(message)s"))
        logger.addHandler(ch)
    return logger


def configure_verbosity(debug: bool, verbose: bool, name=LOGGER_NAME) -> None:
    f = _verbosity_filter(setup_logger(name))
    f.debug = debug
    f.verbose = verbose


LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
}


def log(level: str, message: str, *args) -> None:
    """
    Log by severity name. ERROR does not return: it raises FatalError,
    which the CLI prints before exiting non-zero.
    """
    logger = setup_logger()
    levelno = LEVELS.get(str(level).upper())
    if levelno is None:
        logger.warning("Unknown log level '%s' for message: %s", level, message % args if args else message)
        return
    if levelno == logging.ERROR:
        raise FatalError(message % args if args else message)
    logger.log(levelno, message, *args)

import logging
import sys

_QUIET_LOGGERS = ("httpx", "httpcore")

_BRIEF_FORMAT = "%(levelname)s: %(message)s"
_DETAILED_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def log_level(*, verbose: bool = False, quiet: bool = False) -> int:
    if verbose and quiet:
        raise ValueError("verbose and quiet are mutually exclusive")
    if verbose:
        return logging.DEBUG
    if quiet:
        return logging.ERROR
    return logging.INFO


def configure_logging(*, verbose: bool = False, quiet: bool = False) -> None:
    """Send log records to stderr so they never mix with rendered tables.

    Verbose runs log at DEBUG with timestamps and logger names and let HTTP
    client chatter through; otherwise only the level and message are shown.
    """
    level = log_level(verbose=verbose, quiet=quiet)
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level)

    handler = logging.StreamHandler(sys.stderr)
    if verbose:
        handler.setFormatter(logging.Formatter(_DETAILED_FORMAT, datefmt="%H:%M:%S"))
    else:
        handler.setFormatter(logging.Formatter(_BRIEF_FORMAT))
    root.addHandler(handler)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.NOTSET if verbose else logging.WARNING)

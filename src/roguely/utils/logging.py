import logging
import sys
from typing import IO, Optional, Union

DEFAULT_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s: %(message)s"


def configure_logging(
    level: Union[int, str] = logging.INFO,
    stream: Optional[IO[str]] = None,
    fmt: str = DEFAULT_FORMAT,
) -> logging.Handler:
    """Route every roguely logger through one handler on the root logger.

    Logs go to stderr unless ``stream`` is given, keeping stdout free for
    command output such as ``--json`` dumps. Calling this again replaces the
    previous handler rather than stacking another one.
    """
    if isinstance(level, str):
        level = level.upper()
    handler = logging.StreamHandler(stream=stream or sys.stderr)
    handler.setFormatter(logging.Formatter(fmt=fmt, datefmt="%H:%M:%S"))

    root = logging.getLogger()
    root.setLevel(level)
    for h in list(root.handlers):
        root.removeHandler(h)
    root.addHandler(handler)
    return handler

"""Logging helpers.

`PprintLogger` wraps a standard `logging.Logger` so that structured payloads
(rectification counters, ingestion results, simplified resources) can be
passed straight to the log calls and come out readable.
"""

import inspect
import logging
from pprint import pformat
from typing import Any, Mapping

from pydantic import BaseModel

LOG_FORMAT = "%(asctime)s - %(name)s:%(lineno)d - %(levelname)s - %(message)s"


class PprintLogger:
    """A logger wrapper that pretty-prints non-string messages.

    Pydantic models are rendered with model_dump_json(), other containers
    with pprint.pformat(). Strings pass through untouched so %-style
    arguments keep working.
    """

    def __init__(self, logger: logging.Logger):
        self._logger = logger

    def _format_message(self, msg: Any, pprint: bool = True) -> Any:
        if isinstance(msg, str) or not pprint:
            return msg
        if isinstance(msg, BaseModel):
            return msg.model_dump_json(indent=2)
        return pformat(msg, width=120, sort_dicts=False)

    def _log(self, level: int, msg: Any, *args, pprint: bool = True, **kwargs) -> None:
        if not self._logger.isEnabledFor(level):
            return
        self._logger.log(level, self._format_message(msg, pprint=pprint), *args, stacklevel=3, **kwargs)

    def debug(self, msg: Any, *args, pprint: bool = True, **kwargs) -> None:
        self._log(logging.DEBUG, msg, *args, pprint=pprint, **kwargs)

    def info(self, msg: Any, *args, pprint: bool = True, **kwargs) -> None:
        self._log(logging.INFO, msg, *args, pprint=pprint, **kwargs)

    def warning(self, msg: Any, *args, pprint: bool = True, **kwargs) -> None:
        self._log(logging.WARNING, msg, *args, pprint=pprint, **kwargs)

    def error(self, msg: Any, *args, pprint: bool = True, **kwargs) -> None:
        self._log(logging.ERROR, msg, *args, pprint=pprint, **kwargs)

    def exception(self, msg: Any, *args, pprint: bool = True, **kwargs) -> None:
        kwargs.setdefault("exc_info", True)
        self._log(logging.ERROR, msg, *args, pprint=pprint, **kwargs)

    def counters(self, title: str, counters: Mapping[str, int], level: int = logging.INFO) -> None:
        """Log a counter table, one `label: count` line per entry."""
        if not self._logger.isEnabledFor(level):
            return
        lines = [f"{title}:"] + [f"  {label}: {count}" for label, count in counters.items()]
        self._logger.log(level, "\n".join(lines), stacklevel=2)

    def __getattr__(self, name: str) -> Any:
        return getattr(self._logger, name)


def setup_logging(name: str | None = None, level: int | str | None = None) -> PprintLogger:
    """Return a PprintLogger for `name` (defaults to the caller's module).

    A single stream handler is attached to the top-level package logger;
    module loggers propagate to it. When `level` is None the logger keeps
    whatever level it already has.
    """
    if name is None:
        frame = inspect.currentframe().f_back  # type: ignore[union-attr]
        name = frame.f_globals.get("__name__", "dcatgraph")  # type: ignore[union-attr]
    logger = logging.getLogger(name)
    if level is not None:
        logger.setLevel(level)
    package_logger = logging.getLogger(name.split(".")[0])
    if not package_logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        package_logger.addHandler(handler)
    return PprintLogger(logger)

"""Logging for the ``fractview`` package logger.

Render threads log straight to the package handlers. Direct-render pool
workers are separate processes, so they hand their records to a queue that a
:class:`~logging.handlers.QueueListener` in the parent drains.
"""

import logging
import logging.handlers
import multiprocessing as mp
from typing import Optional

_LOGGER_NAME = "fractview"
_FORMAT = "%(asctime)s.%(msecs)03dZ %(processName)s/%(threadName)s %(levelname)s %(name)s - %(message)s"
_LOG_FILE_BYTES = 5 * 1024 * 1024
_LOG_FILE_BACKUPS = 5


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """``fractview`` itself, or ``fractview.<name>`` for a module logger."""
    if name:
        return logging.getLogger(f"{_LOGGER_NAME}.{name}")
    return logging.getLogger(_LOGGER_NAME)


def _reset(logger: logging.Logger, level: int) -> None:
    logger.setLevel(level)
    logger.propagate = False
    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()


def configure_root_logging(
    *,
    level: int = logging.INFO,
    console: bool = True,
    log_file: Optional[str] = "render.log",
) -> logging.Logger:
    logger = get_logger()
    _reset(logger, level)
    fmt = logging.Formatter(fmt=_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S")
    handlers = []
    if console:
        handlers.append(logging.StreamHandler())
    if log_file:
        handlers.append(
            logging.handlers.RotatingFileHandler(
                log_file, maxBytes=_LOG_FILE_BYTES, backupCount=_LOG_FILE_BACKUPS, encoding="utf-8"
            )
        )
    for h in handlers:
        h.setLevel(level)
        h.setFormatter(fmt)
        logger.addHandler(h)
    return logger


def create_log_queue() -> mp.Queue:
    return mp.Queue(-1)


def start_queue_listener(queue, listener_logger: logging.Logger) -> logging.handlers.QueueListener:
    listener = logging.handlers.QueueListener(queue, *listener_logger.handlers, respect_handler_level=True)
    listener.start()
    return listener


def logging_initialiser(queue, level: int) -> None:
    """Pool initialiser: route this process's ``fractview`` records into ``queue``.

    Without a queue the worker keeps whatever logging it inherited.
    """
    if queue is None:
        return
    logger = get_logger()
    _reset(logger, level)
    qh = logging.handlers.QueueHandler(queue)
    qh.setLevel(level)
    logger.addHandler(qh)

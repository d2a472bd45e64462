import logging
import logging.handlers
import queue

from fractview.util.logging_setup import configure_root_logging, get_logger, logging_initialiser, start_queue_listener


def test_module_loggers_hang_off_the_package_logger():
    assert get_logger().name == "fractview"
    assert get_logger("task").parent is get_logger()


def test_file_logging_replaces_previous_handlers(tmp_path):
    log_file = tmp_path / "render.log"
    configure_root_logging(level=logging.DEBUG, console=True, log_file=None)
    logger = configure_root_logging(level=logging.INFO, console=False, log_file=str(log_file))

    assert [type(h) for h in logger.handlers] == [logging.handlers.RotatingFileHandler]
    assert not logger.propagate
    get_logger("progressive").info("Session %s start", 7)
    get_logger("progressive").debug("hidden")
    for h in logger.handlers:
        h.flush()

    text = log_file.read_text(encoding="utf-8")
    assert "INFO fractview.progressive - Session 7 start" in text
    assert "hidden" not in text


def test_initialiser_without_queue_leaves_logging_alone():
    logger = get_logger()
    before = list(logger.handlers)
    logging_initialiser(None, logging.DEBUG)
    assert logger.handlers == before
    assert logger.propagate


def test_initialiser_routes_records_into_queue():
    records = queue.Queue()
    logging_initialiser(records, logging.DEBUG)

    logger = get_logger()
    assert [type(h) for h in logger.handlers] == [logging.handlers.QueueHandler]
    get_logger("direct").debug("band %s done", 3)

    record = records.get_nowait()
    assert record.name == "fractview.direct"
    assert record.getMessage() == "band 3 done"


def test_queue_listener_forwards_to_package_handlers(tmp_path):
    log_file = tmp_path / "render.log"
    logger = configure_root_logging(level=logging.INFO, console=False, log_file=str(log_file))
    records = queue.Queue()
    listener = start_queue_listener(records, logger)
    try:
        records.put(logging.makeLogRecord({"name": "fractview.direct", "levelno": logging.INFO,
                                           "levelname": "INFO", "msg": "from a worker"}))
    finally:
        listener.stop()

    assert "from a worker" in log_file.read_text(encoding="utf-8")

import logging
from contextlib import contextmanager

from library_api.app.core.logging_config import setup_logging


@contextmanager
def bare_root_logger():
    """Temporarily strip the root logger of handlers and restore it after."""
    root = logging.getLogger()
    saved_handlers = root.handlers[:]
    saved_level = root.level
    root.handlers.clear()
    try:
        yield root
    finally:
        for handler in root.handlers:
            handler.close()
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)


def test_setup_logging_writes_service_messages_to_file(tmp_path):
    logfile = tmp_path / "library.log"

    with bare_root_logger() as root:
        setup_logging("debug", str(logfile))

        assert root.level == logging.DEBUG
        assert len(root.handlers) == 2
        logging.getLogger("library_api.app.services.book_service").info("Loaned %r", "A")
        for handler in root.handlers:
            handler.flush()

    assert "[INFO] library_api.app.services.book_service: Loaned 'A'" in logfile.read_text()


def test_setup_logging_keeps_existing_handlers():
    existing = logging.NullHandler()

    with bare_root_logger() as root:
        root.addHandler(existing)
        setup_logging("INFO")

        assert root.handlers == [existing]


def test_unknown_level_falls_back_to_info():
    with bare_root_logger() as root:
        setup_logging("chatty")

        assert root.level == logging.INFO

import json
import logging

from credkit.logging import flush_logging, setup_logging


def test_setup_logging_writes_json_to_file(tmp_path):
    path = tmp_path / "workers" / "cipher.log"
    setup_logging("debug", str(path))
    try:
        logging.getLogger("credkit.test").info("hello", extra={"service": "cipher"})
        for handler in logging.getLogger().handlers:
            handler.flush()
        line = path.read_text(encoding="utf-8").strip().splitlines()[-1]
        payload = json.loads(line)
        assert payload["message"] == "hello"
        assert payload["service"] == "cipher"
        assert payload["levelname"] == "INFO"
        assert logging.getLogger().level == logging.DEBUG
    finally:
        for handler in logging.getLogger().handlers:
            handler.close()
        logging.getLogger().handlers.clear()


def test_setup_logging_replaces_handlers():
    setup_logging()
    setup_logging()
    assert len(logging.getLogger().handlers) == 1
    flush_logging()
    logging.getLogger().handlers.clear()

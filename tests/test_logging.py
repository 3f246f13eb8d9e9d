import logging
from pathlib import Path

from integration_operator.foundation.logging_utils import quiet_logger, setup_operational_logger


def test_operational_logger_writes_utf8_file(tmp_path: Path):
    logger, log_file = setup_operational_logger(str(tmp_path / "logs"), "run-1")

    logger.info("Applied trait → %s", "service")
    for handler in logger.handlers:
        handler.flush()

    assert Path(log_file).name == "run-1_oplog.log"
    content = Path(log_file).read_text(encoding="utf-8")
    assert "Operational logging initialized for run run-1" in content
    assert "| INFO | Applied trait → service" in content
    assert "Operational log file:" in content


def test_operational_logger_does_not_stack_handlers(tmp_path: Path):
    setup_operational_logger(str(tmp_path), "run-2")
    logger, _ = setup_operational_logger(str(tmp_path), "run-2")

    assert len(logger.handlers) == 2
    assert logger.propagate is False


def test_quiet_logger_drops_records():
    logger = quiet_logger("test.quiet")

    assert [type(h) for h in logger.handlers] == [logging.NullHandler]
    assert logger.propagate is False


def test_quiet_logger_keeps_handlers_attached_by_the_application():
    logger = logging.getLogger("test.quiet.embedded")
    logger.handlers.clear()
    logger.propagate = True
    attached = logging.StreamHandler()
    logger.addHandler(attached)

    try:
        same = quiet_logger("test.quiet.embedded")

        assert same.handlers == [attached]
        assert same.propagate is True
    finally:
        logger.removeHandler(attached)

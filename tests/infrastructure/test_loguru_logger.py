from __future__ import annotations

from loguru import logger

from httpsteps.infrastructure.logging.log_setup import setup_console_logging
from httpsteps.infrastructure.logging.loguru_logger import LoguruLogger


def test_loguru_logger_records_event_and_fields() -> None:
    # Arrange
    records = []
    logger.enable("httpsteps")
    sink_id = logger.add(lambda msg: records.append(msg.record), level="DEBUG")

    try:
        # Act
        LoguruLogger().bind(run_id="r1").info("step.end", ok=True)
    finally:
        logger.remove(sink_id)
        logger.disable("httpsteps")

    # Assert
    assert len(records) == 1
    record = records[0]
    assert record["level"].name == "INFO"
    assert record["extra"]["event"] == "step.end"
    assert record["extra"]["run_id"] == "r1"
    assert record["message"].startswith("step.end ")


def test_disabled_by_default() -> None:
    records = []
    sink_id = logger.add(lambda msg: records.append(msg), level="DEBUG")
    try:
        LoguruLogger().error("http.call_failed", error="x")
    finally:
        logger.remove(sink_id)

    assert records == []


def test_setup_console_logging_prints(capsys) -> None:
    setup_console_logging(level="INFO")
    try:
        LoguruLogger().info("http.response", status=200)
        LoguruLogger().debug("http.body_received", length=1)
    finally:
        logger.disable("httpsteps")

    out = capsys.readouterr().out
    assert "http.response" in out
    assert "http.body_received" not in out


def test_setup_console_logging_uses_configured_level(capsys, monkeypatch, tmp_path) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HTTPSTEPS_LOG_LEVEL", "error")

    setup_console_logging()
    try:
        LoguruLogger().info("http.response", status=200)
        LoguruLogger().error("http.call_failed", error="refused")
    finally:
        logger.disable("httpsteps")

    out = capsys.readouterr().out
    assert "http.response" not in out
    assert "http.call_failed" in out

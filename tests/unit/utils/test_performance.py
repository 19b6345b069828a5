"""Tests for the stage timer."""

from loguru import logger

from portfolio_rag.utils.performance import timer


def capture():
    records = []
    handler_id = logger.add(lambda message: records.append(message.record), level="DEBUG")
    return records, handler_id


def test_timer_logs_elapsed_time():
    records, handler_id = capture()
    try:
        with timer("Embedding 3 chunks"):
            pass
    finally:
        logger.remove(handler_id)

    assert len(records) == 1
    assert records[0]["message"].startswith("Embedding 3 chunks took ")
    assert records[0]["level"].name == "DEBUG"


def test_timer_logs_even_when_block_raises():
    records, handler_id = capture()
    try:
        try:
            with timer("Failing stage", log_level="info"):
                raise RuntimeError("boom")
        except RuntimeError:
            pass
    finally:
        logger.remove(handler_id)

    assert records[0]["level"].name == "INFO"


def test_timer_threshold_suppresses_fast_blocks():
    records, handler_id = capture()
    try:
        with timer("Fast stage", threshold_ms=60_000):
            pass
    finally:
        logger.remove(handler_id)

    assert records == []

from loguru import logger

from pairswap import logging as pairswap_logging


def test_swap_event_filter_only_accepts_bound_records():
    assert pairswap_logging._is_swap_event({"extra": {"SWAP_EVENT": True}})
    assert not pairswap_logging._is_swap_event({"extra": {}})


def test_swap_events_reach_a_filtered_sink():
    captured: list[str] = []
    sink_id = logger.add(captured.append, filter=pairswap_logging._is_swap_event, format="{message}")
    try:
        pairswap_logging.log.info("quote only")
        pairswap_logging.log.bind(SWAP_EVENT=True).info("approve tx=0xabc")
    finally:
        logger.remove(sink_id)

    assert [message.strip() for message in captured] == ["approve tx=0xabc"]


def test_console_level_prefers_process_environment(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "debug")
    assert pairswap_logging._console_level("WARNING") == "DEBUG"

    monkeypatch.delenv("LOG_LEVEL")
    assert pairswap_logging._console_level("warning") == "WARNING"
    assert pairswap_logging._console_level(None) == "INFO"

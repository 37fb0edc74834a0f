"""Unit tests for console/sink.py."""

from __future__ import annotations

import logging

from console.sink import LoggingEventSink, MemoryEventSink


def test_memory_sink_is_bounded() -> None:
    sink = MemoryEventSink(max_entries=3)
    for i in range(5):
        sink.push("info", f"line {i}")
    assert len(sink) == 3
    assert [e.message for e in sink.entries()] == ["line 2", "line 3", "line 4"]


def test_memory_sink_filters_by_level_and_query() -> None:
    sink = MemoryEventSink()
    sink.push("info", "Rank changed")
    sink.push("error", "Rank refused")
    sink.push("warn", "slow backend")
    assert [e.message for e in sink.entries(level="error")] == ["Rank refused"]
    assert [e.message for e in sink.entries(query="RANK")] == ["Rank changed", "Rank refused"]
    assert sink.entries(level="warn", query="rank") == []


def test_unknown_level_stored_as_info() -> None:
    sink = MemoryEventSink()
    sink.push("debug", "x")
    assert sink.entries()[0].level == "info"


def test_clear() -> None:
    sink = MemoryEventSink()
    sink.push("info", "x")
    sink.clear()
    assert len(sink) == 0


def test_logging_sink_maps_levels(caplog) -> None:
    sink = LoggingEventSink()
    with caplog.at_level(logging.INFO, logger="safecord.console"):
        sink.push("warn", "careful")
        sink.push("error", "broken")
    assert [(r.levelno, r.getMessage()) for r in caplog.records] == [
        (logging.WARNING, "careful"),
        (logging.ERROR, "broken"),
    ]

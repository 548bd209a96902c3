"""Tests for event sinks."""

import pytest

from wavextract.adapter.events import (
    ON_CURRENT_EXTRACTED_WAVEFORM_DATA,
    EventSink,
    RecordingEventSink,
    SessionEventSink,
)


def progress(session_key: str, value: float) -> dict:
    return {"waveformData": [value], "progress": value, "sessionKey": session_key}


class TestRecordingEventSink:
    """In-memory recording."""

    def test_records_in_order(self):
        sink = RecordingEventSink()
        sink.dispatch(ON_CURRENT_EXTRACTED_WAVEFORM_DATA, progress("a", 0.5))
        sink.dispatch(ON_CURRENT_EXTRACTED_WAVEFORM_DATA, progress("a", 1.0))
        assert [payload["progress"] for _, payload in sink.events] == [0.5, 1.0]

    def test_latest_and_events_for_are_per_session(self):
        sink = RecordingEventSink()
        sink.dispatch(ON_CURRENT_EXTRACTED_WAVEFORM_DATA, progress("a", 0.5))
        sink.dispatch(ON_CURRENT_EXTRACTED_WAVEFORM_DATA, progress("b", 0.25))
        sink.dispatch(ON_CURRENT_EXTRACTED_WAVEFORM_DATA, progress("a", 1.0))

        assert sink.latest("a")["progress"] == 1.0
        assert sink.latest("b")["progress"] == 0.25
        assert sink.latest("c") is None
        assert len(sink.events_for("a")) == 2

    def test_other_event_names_not_tracked_as_progress(self):
        sink = RecordingEventSink()
        sink.dispatch("somethingElse", progress("a", 0.5))
        assert len(sink.events) == 1
        assert sink.latest("a") is None
        assert sink.events_for("a") == []

    def test_forget_drops_session(self):
        sink = RecordingEventSink()
        sink.dispatch(ON_CURRENT_EXTRACTED_WAVEFORM_DATA, progress("a", 0.5))
        sink.dispatch(ON_CURRENT_EXTRACTED_WAVEFORM_DATA, progress("b", 0.5))
        sink.forget("a")
        assert sink.latest("a") is None
        assert sink.events_for("a") == []
        assert len(sink.events_for("b")) == 1

    def test_events_returns_copy(self):
        sink = RecordingEventSink()
        sink.events.append(("x", {}))
        assert sink.events == []

    def test_history_caps_event_log(self):
        """Only the newest `history` events are kept."""
        sink = RecordingEventSink(history=2)
        for value in (0.25, 0.5, 0.75):
            sink.dispatch(ON_CURRENT_EXTRACTED_WAVEFORM_DATA, progress("a", value))
        assert [payload["progress"] for _, payload in sink.events] == [0.5, 0.75]
        assert sink.latest("a")["progress"] == 0.75

    def test_zero_history_keeps_latest_only(self):
        sink = RecordingEventSink(history=0)
        sink.dispatch(ON_CURRENT_EXTRACTED_WAVEFORM_DATA, progress("a", 0.5))
        assert sink.events == []
        assert sink.latest("a")["progress"] == 0.5

    def test_max_sessions_drops_least_recent(self):
        """The latest payload is retained for at most `max_sessions` keys."""
        sink = RecordingEventSink(max_sessions=2)
        sink.dispatch(ON_CURRENT_EXTRACTED_WAVEFORM_DATA, progress("a", 0.5))
        sink.dispatch(ON_CURRENT_EXTRACTED_WAVEFORM_DATA, progress("b", 0.5))
        sink.dispatch(ON_CURRENT_EXTRACTED_WAVEFORM_DATA, progress("a", 1.0))
        sink.dispatch(ON_CURRENT_EXTRACTED_WAVEFORM_DATA, progress("c", 0.5))
        assert sink.latest("b") is None
        assert sink.latest("a")["progress"] == 1.0
        assert sink.latest("c") is not None

    def test_forget_keeps_history_bound(self):
        sink = RecordingEventSink(history=2)
        sink.dispatch(ON_CURRENT_EXTRACTED_WAVEFORM_DATA, progress("a", 0.5))
        sink.forget("b")
        for value in (0.25, 0.5, 0.75):
            sink.dispatch(ON_CURRENT_EXTRACTED_WAVEFORM_DATA, progress("b", value))
        assert len(sink.events) == 2


class TestSessionEventSink:
    """Teardown suppression."""

    def test_forwards_until_torn_down(self):
        inner = RecordingEventSink()
        sink = SessionEventSink(inner)

        sink.dispatch(ON_CURRENT_EXTRACTED_WAVEFORM_DATA, progress("a", 0.5))
        sink.mark_torn_down()
        sink.dispatch(ON_CURRENT_EXTRACTED_WAVEFORM_DATA, progress("a", 1.0))

        assert sink.is_torn_down
        assert len(inner.events) == 1


def test_event_sink_is_abstract():
    """EventSink cannot be instantiated directly."""
    with pytest.raises(TypeError):
        EventSink()

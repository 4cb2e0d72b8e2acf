"""
Tests for the event reporter.
"""

import pytest

from expense_pumpkin.models.events import TrackerEventBuilder, TrackerEventType
from expense_pumpkin.reporting import EventReporter, RecordingReporter


class TestEventReporter:
    """Tests for EventReporter."""

    def test_subscribers_receive_events(self):
        """Test every subscriber is called."""
        reporter = EventReporter()
        seen = []
        reporter.subscribe(seen.append)
        event = TrackerEventBuilder.expenses_cleared(2)

        reporter.report(event)

        assert seen == [event]

    def test_unsubscribe(self):
        """Test an unsubscribed handler hears nothing."""
        reporter = EventReporter()
        seen = []
        unsubscribe = reporter.subscribe(seen.append)
        unsubscribe()
        reporter.report(TrackerEventBuilder.expenses_cleared(0))
        assert seen == []

    def test_failing_subscriber_does_not_break_reporting(self):
        """Test later subscribers still run after one raises."""
        reporter = EventReporter()
        seen = []

        def broken(event):
            raise RuntimeError("boom")

        reporter.subscribe(broken)
        reporter.subscribe(seen.append)
        reporter.report(TrackerEventBuilder.quota_exceeded("k", "full"))

        assert len(seen) == 1

    def test_recording_reporter(self):
        """Test recorded events can be filtered by type."""
        reporter = RecordingReporter()
        reporter.report(TrackerEventBuilder.expenses_cleared(1))
        reporter.report(TrackerEventBuilder.migration_failed("no valid records"))
        assert [e.event_type for e in reporter.of_type(TrackerEventType.MIGRATION_FAILED)] == [
            TrackerEventType.MIGRATION_FAILED
        ]
        assert len(reporter.events) == 2


if __name__ == "__main__":
    pytest.main([__file__, "-v"])

"""Event reporting package."""

from expense_pumpkin.reporting.reporter import EventHandler, EventReporter, RecordingReporter

__all__ = ["EventHandler", "EventReporter", "RecordingReporter"]

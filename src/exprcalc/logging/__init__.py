"""Structured event logging for exprcalc.

Provides a unified event schema, filesystem NDJSON sink, and safe
emit helpers that never raise uncaught exceptions.
"""

from exprcalc.logging.events import (
    EventLevel,
    EventType,
    ExprEvent,
    emit,
    emit_error,
    emit_info,
    emit_warning,
    make_expression_event,
    reset_sink,
    set_project_dir,
    truncate_context,
)
from exprcalc.logging.sink import EventSink

__all__ = [
    "EventLevel",
    "EventSink",
    "EventType",
    "ExprEvent",
    "emit",
    "emit_error",
    "emit_info",
    "emit_warning",
    "make_expression_event",
    "reset_sink",
    "set_project_dir",
    "truncate_context",
]

"""Unified event schema and module-level emit helpers.

All timestamps use UTC ISO-8601 with ``Z`` suffix.  The ``emit()``
family of functions is safe to call from any context -- failures are
swallowed and printed to stderr.
"""

from __future__ import annotations

import sys
import time
import traceback
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class EventLevel(str, Enum):
    info = "info"
    warning = "warning"
    error = "error"


class EventType(str, Enum):
    # Session lifecycle
    session_started = "session_started"
    session_ended = "session_ended"

    # Parsing
    parse_completed = "parse_completed"
    parse_failed = "parse_failed"

    # Evaluation
    eval_completed = "eval_completed"
    eval_failed = "eval_failed"

    # NaN / infinity / large magnitude
    result_warning = "result_warning"


# ---------------------------------------------------------------------------
# Error codes
# ---------------------------------------------------------------------------

LEX_ERROR = "lex_error"
PARSE_ERROR = "parse_error"
EVAL_ERROR = "eval_error"
INPUT_ERROR = "input_error"


# ---------------------------------------------------------------------------
# Context sanitizing
# ---------------------------------------------------------------------------

_MAX_VALUE_LEN = 256


def truncate_context(context: dict[str, Any]) -> dict[str, Any]:
    """Return a copy of *context* with long string values truncated.

    Expressions typed at the prompt are unbounded; event lines are not.
    """
    out: dict[str, Any] = {}
    for k, v in context.items():
        if isinstance(v, dict):
            out[k] = truncate_context(v)
        elif isinstance(v, str) and len(v) > _MAX_VALUE_LEN:
            out[k] = v[:_MAX_VALUE_LEN] + "...[truncated]"
        else:
            out[k] = v
    return out


# ---------------------------------------------------------------------------
# Attribution invariants
# ---------------------------------------------------------------------------

_EXPRESSION_REQUIRED = {"expression"}

_EVENT_REQUIRED_KEYS: dict[str, set[str]] = {
    EventType.session_started.value: set(),
    EventType.session_ended.value: set(),
    EventType.parse_completed.value: _EXPRESSION_REQUIRED,
    EventType.parse_failed.value: _EXPRESSION_REQUIRED,
    EventType.eval_completed.value: _EXPRESSION_REQUIRED,
    EventType.eval_failed.value: set(),  # may fail while reading variables
    EventType.result_warning.value: {"status"},
}


def _validate_attribution(event: ExprEvent) -> ExprEvent:
    """Check required context keys; downgrade to warning if missing."""
    event_type = event.event_type.value if isinstance(event.event_type, EventType) else event.event_type
    required = _EVENT_REQUIRED_KEYS.get(event_type, set())
    if not required:
        return event
    missing = required - set(event.context.keys())
    if missing:
        ctx = dict(event.context)
        ctx["_missing_attribution"] = sorted(missing)
        return event.model_copy(update={"level": EventLevel.warning, "context": ctx})
    return event


# ---------------------------------------------------------------------------
# Helper constructors for consistent attribution
# ---------------------------------------------------------------------------


def make_expression_event(
    event_type: EventType,
    level: EventLevel,
    message: str,
    *,
    expression: str,
    ast: str | None = None,
    variables: list[str] | None = None,
    error_code: str | None = None,
    extra: dict[str, Any] | None = None,
) -> ExprEvent:
    """Build an event with guaranteed expression attribution context."""
    ctx: dict[str, Any] = {"expression": expression}
    if ast is not None:
        ctx["ast"] = ast
    if variables is not None:
        ctx["variables"] = list(variables)
    if extra:
        ctx.update(extra)
    return ExprEvent(
        level=level,
        event_type=event_type,
        message=message,
        context=ctx,
        error_code=error_code,
    )


# ---------------------------------------------------------------------------
# Event model
# ---------------------------------------------------------------------------


def _utc_now() -> str:
    """Return current UTC timestamp in ISO-8601 with Z suffix."""
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ")


class ExprEvent(BaseModel):
    """A single structured log event."""

    schema_version: int = 1
    ts: str = Field(default_factory=_utc_now)
    level: EventLevel
    event_type: EventType
    context: dict[str, Any] = Field(default_factory=dict)
    message: str = ""
    error_code: str | None = None


# ---------------------------------------------------------------------------
# Module-level sink reference
# ---------------------------------------------------------------------------

# Lazily initialised when ``set_project_dir`` is called.
_sink: Any = None  # EventSink | None


def set_project_dir(project_dir: Any) -> None:
    """Configure the module-level event sink for a project directory.

    This should be called early in a CLI command.  If it is never called,
    or ``logging_enabled`` is false in ``exprcalc.yaml``, ``emit()``
    silently discards events.

    Reads ``logging_fsync`` and ``logging_tail_bytes`` from the project
    config to configure the sink.
    """
    global _sink
    from pathlib import Path

    from exprcalc.logging.sink import EventSink
    from exprcalc.project import load_project_config

    try:
        cfg = load_project_config(Path(project_dir))
    except (OSError, ValueError):
        _stderr_warning(f"could not read config in {project_dir}; using defaults")
        cfg = {}

    if not cfg.get("logging_enabled", True):
        _sink = None
        return

    tb = cfg.get("logging_tail_bytes")
    _sink = EventSink(
        Path(project_dir),
        fsync=bool(cfg.get("logging_fsync", False)),
        tail_bytes=int(tb) if tb is not None else None,
    )


def reset_sink() -> None:
    """Detach the module-level sink (events are discarded afterwards)."""
    global _sink
    _sink = None


def _get_sink() -> Any:
    """Return the module-level sink, or None."""
    return _sink


# ---------------------------------------------------------------------------
# Rate-limited stderr warnings
# ---------------------------------------------------------------------------

_last_stderr_ts: float | None = None
_STDERR_INTERVAL_SECS = 60.0


def _stderr_warning(msg: str) -> None:
    """Print a warning to stderr, rate-limited to one per 60 seconds."""
    global _last_stderr_ts
    now = time.monotonic()
    if _last_stderr_ts is not None and now - _last_stderr_ts < _STDERR_INTERVAL_SECS:
        return
    _last_stderr_ts = now
    try:
        print(f"[exprcalc] {msg}", file=sys.stderr)
    except Exception:
        pass


# ---------------------------------------------------------------------------
# Safe emit helpers
# ---------------------------------------------------------------------------


def emit(event: ExprEvent, *, session_id: str | None = None) -> None:
    """Write an event to the global log and optionally to a per-session log.

    **Never raises.**  On failure, prints a rate-limited warning to stderr.

    Truncates long context values and validates attribution before writing.
    """
    try:
        sink = _get_sink()
        if sink is None:
            return
        event = event.model_copy(update={"context": truncate_context(event.context)})
        event = _validate_attribution(event)
        sink.write(event, session_id=session_id)
    except Exception:
        _stderr_warning(f"logging failed: {traceback.format_exc()}")


def emit_info(
    event_type: EventType,
    message: str,
    context: dict[str, Any] | None = None,
    *,
    session_id: str | None = None,
) -> None:
    """Convenience: emit an info-level event."""
    emit(
        ExprEvent(
            level=EventLevel.info,
            event_type=event_type,
            message=message,
            context=context or {},
        ),
        session_id=session_id,
    )


def emit_warning(
    event_type: EventType,
    message: str,
    context: dict[str, Any] | None = None,
    *,
    error_code: str | None = None,
    session_id: str | None = None,
) -> None:
    """Convenience: emit a warning-level event."""
    emit(
        ExprEvent(
            level=EventLevel.warning,
            event_type=event_type,
            message=message,
            context=context or {},
            error_code=error_code,
        ),
        session_id=session_id,
    )


def emit_error(
    event_type: EventType,
    message: str,
    context: dict[str, Any] | None = None,
    *,
    error_code: str | None = None,
    session_id: str | None = None,
) -> None:
    """Convenience: emit an error-level event."""
    emit(
        ExprEvent(
            level=EventLevel.error,
            event_type=event_type,
            message=message,
            context=context or {},
            error_code=error_code,
        ),
        session_id=session_id,
    )

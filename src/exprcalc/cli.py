"""Command-line interface for exprcalc (interactive prompt + one-shot commands)."""

from __future__ import annotations

import json
import math
import uuid
from pathlib import Path
from typing import Any

import click

from exprcalc import __version__
from exprcalc.diagnostics import classify_result, format_result, result_warning
from exprcalc.formulas import (
    EvalError,
    ExprError,
    LexError,
    evaluate,
    extract_free_variables,
    parse,
    render,
)
from exprcalc.functions.registry import builtin_names
from exprcalc.logging.events import (
    EVAL_ERROR,
    INPUT_ERROR,
    LEX_ERROR,
    PARSE_ERROR,
    EventLevel,
    EventType,
    emit,
    emit_info,
    emit_warning,
    make_expression_event,
    reset_sink,
    set_project_dir,
)
from exprcalc.project import DEFAULT_CONFIG, load_project_config, write_default_config


class VariableInputError(ValueError):
    """The operator typed something that is not a number for a variable."""


@click.group()
@click.version_option(version=__version__, prog_name="exprcalc")
@click.option(
    "--project",
    "project_dir",
    default=None,
    type=click.Path(file_okay=False),
    help="Directory holding exprcalc.yaml and logs/. Logging is off without it.",
)
@click.pass_context
def main(ctx: click.Context, project_dir: str | None) -> None:
    """exprcalc -- parse and evaluate arithmetic expressions.

    Supports + - * / ^, unary signs, the constants pi and e, variables,
    and the functions sin, cos, tan, sqrt, log, abs, clamp.
    """
    if project_dir is not None:
        path = Path(project_dir)
        try:
            config = load_project_config(path)
        except ValueError as e:
            raise click.ClickException(str(e))
        set_project_dir(path)
    else:
        reset_sink()
        config = dict(DEFAULT_CONFIG)
    ctx.obj = {"config": config, "project_dir": project_dir}


# ---------------------------------------------------------------------------
# helpers
# ---------------------------------------------------------------------------


def _parse_overrides(overrides: tuple[str, ...]) -> dict[str, float]:
    values: dict[str, float] = {}
    for item in overrides:
        if "=" not in item:
            raise click.ClickException(f"Invalid --set format: {item!r}. Use name=value.")
        k, v = item.split("=", 1)
        try:
            values[k.strip()] = float(v)
        except ValueError:
            raise click.ClickException(f"Incorrect value for the variable '{k.strip()}': {v!r}")
    return values


def _error_code(exc: ExprError) -> str:
    if isinstance(exc, LexError):
        return LEX_ERROR
    if isinstance(exc, EvalError):
        return EVAL_ERROR
    return PARSE_ERROR


def _prompt_line(label: str) -> str:
    return click.prompt(label, default="", show_default=False, prompt_suffix=": ")


def _prompt_for_variables(names: list[str]) -> dict[str, float]:
    """Ask the operator for one value per free variable."""
    context: dict[str, float] = {}
    for name in names:
        raw = _prompt_line(f"Enter value for the variable '{name}'").strip()
        try:
            context[name] = float(raw)
        except ValueError:
            raise VariableInputError(f"Incorrect value for the variable '{name}'") from None
    return context


def _report_result(value: float, config: dict[str, Any], expression: str, session_id: str | None) -> None:
    status = classify_result(value, config["large_result_threshold"])
    warning = result_warning(status)
    if warning is not None:
        click.echo(warning, err=True)
        emit_warning(
            EventType.result_warning,
            warning,
            {"expression": expression, "status": status.value},
            session_id=session_id,
        )
    click.echo(f"Answer: {format_result(value, config['precision'])}")


def _evaluate_line(line: str, config: dict[str, Any], session_id: str) -> None:
    """Parse, prompt for variables, evaluate and print one expression."""
    try:
        tree = parse(line)
    except ExprError as e:
        emit(make_expression_event(
            EventType.parse_failed, EventLevel.error, str(e),
            expression=line, error_code=_error_code(e),
        ), session_id=session_id)
        raise

    rendered = render(tree)
    names = extract_free_variables(tree)
    emit(make_expression_event(
        EventType.parse_completed, EventLevel.info, "parsed",
        expression=line, ast=rendered, variables=names,
    ), session_id=session_id)
    click.echo(f"AST: {rendered}")

    context = _prompt_for_variables(names)
    try:
        value = evaluate(tree, context)
    except EvalError as e:
        emit(make_expression_event(
            EventType.eval_failed, EventLevel.error, str(e),
            expression=line, ast=rendered, error_code=EVAL_ERROR,
            extra={"kind": e.kind.value},
        ), session_id=session_id)
        raise

    emit(make_expression_event(
        EventType.eval_completed, EventLevel.info, "evaluated",
        expression=line, ast=rendered, extra={"result": _json_number(value)},
    ), session_id=session_id)
    _report_result(value, config, line, session_id)


def _json_number(value: float) -> float | str:
    return value if math.isfinite(value) else str(value)


# ---------------------------------------------------------------------------
# Interactive prompt
# ---------------------------------------------------------------------------


@main.command()
@click.pass_obj
def repl(obj: dict[str, Any]) -> None:
    """Read expressions interactively until 'exit' or end of input."""
    config = obj["config"]
    session_id = uuid.uuid4().hex[:12]
    emit_info(EventType.session_started, "session started", session_id=session_id)

    click.echo(
        "Expression evaluator with functions("
        + ", ".join(builtin_names())
        + "), constants(pi, e) and variables"
    )
    click.echo("Enter 'exit' to finish\n")

    while True:
        try:
            line = _prompt_line("Expression").strip()
        except click.Abort:
            click.echo()
            break
        if line.lower() == "exit":
            click.echo("Goodbye!")
            break
        if not line:
            click.echo("Error! Empty input. Try again!", err=True)
            continue
        try:
            _evaluate_line(line, config, session_id)
        except ExprError as e:
            click.echo(f"Error! {e}\n", err=True)
        except VariableInputError as e:
            emit(make_expression_event(
                EventType.eval_failed, EventLevel.error, str(e),
                expression=line, error_code=INPUT_ERROR,
            ), session_id=session_id)
            click.echo(f"Error! {e}\n", err=True)
        except click.Abort:
            click.echo()
            break
        else:
            click.echo()

    emit_info(EventType.session_ended, "session ended", session_id=session_id)


# ---------------------------------------------------------------------------
# One-shot commands
# ---------------------------------------------------------------------------


@main.command("eval")
@click.argument("expression")
@click.option("--set", "overrides", multiple=True, help="Variable value as name=value.")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_obj
def eval_cmd(obj: dict[str, Any], expression: str, overrides: tuple[str, ...], as_json: bool) -> None:
    """Evaluate EXPRESSION with variables supplied via --set."""
    config = obj["config"]
    context = _parse_overrides(overrides)
    try:
        tree = parse(expression)
        value = evaluate(tree, context)
    except ExprError as e:
        event_type = EventType.eval_failed if isinstance(e, EvalError) else EventType.parse_failed
        emit(make_expression_event(
            event_type, EventLevel.error, str(e),
            expression=expression, error_code=_error_code(e),
        ))
        raise click.ClickException(str(e))

    status = classify_result(value, config["large_result_threshold"])
    emit(make_expression_event(
        EventType.eval_completed, EventLevel.info, "evaluated",
        expression=expression, ast=render(tree),
        extra={"result": _json_number(value), "status": status.value},
    ))

    if as_json:
        click.echo(json.dumps({
            "expression": expression,
            "ast": render(tree),
            "result": _json_number(value),
            "status": status.value,
        }, indent=2))
        return
    _report_result(value, config, expression, None)


@main.command("ast")
@click.argument("expression")
def ast_cmd(expression: str) -> None:
    """Print the canonical parenthesized form of EXPRESSION."""
    try:
        tree = parse(expression)
    except ExprError as e:
        raise click.ClickException(str(e))
    click.echo(render(tree))


@main.command("vars")
@click.argument("expression")
def vars_cmd(expression: str) -> None:
    """List the free variables of EXPRESSION in order of appearance."""
    try:
        tree = parse(expression)
    except ExprError as e:
        raise click.ClickException(str(e))
    for name in extract_free_variables(tree):
        click.echo(name)


@main.command()
@click.argument("directory", type=click.Path(file_okay=False))
def init(directory: str) -> None:
    """Write a default exprcalc.yaml into DIRECTORY."""
    try:
        path = write_default_config(Path(directory))
    except FileExistsError as e:
        raise click.ClickException(str(e))
    click.echo(f"Created {path}")


@main.command()
@click.option("--level", default=None, type=click.Choice(["info", "warning", "error"]), help="Filter by level.")
@click.option("--type", "event_type", default=None, help="Filter by event type.")
@click.option("--limit", default=50, show_default=True, help="Maximum number of events.")
@click.pass_obj
def events(obj: dict[str, Any], level: str | None, event_type: str | None, limit: int) -> None:
    """Show recent logged events, most recent first (requires --project)."""
    from exprcalc.logging.sink import EventSink

    if obj["project_dir"] is None:
        raise click.ClickException("events requires --project")
    sink = EventSink(Path(obj["project_dir"]))
    for event in sink.read_global(level=level, event_type=event_type, limit=limit):
        click.echo(json.dumps(event, sort_keys=True))


if __name__ == "__main__":
    main()

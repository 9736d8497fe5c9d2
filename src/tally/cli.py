"""
tally command-line interface.

Commands:
    run     Evaluate a file line by line and dump the variables
    eval    Evaluate an expression given on the command line
    parse   Show how an expression is parsed
    repl    Interactive session

The core library never halts or retries; whether a failing line stops a
batch run is decided here (see ``--keep-going`` and ``error_policy``).
"""

from __future__ import annotations

import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table
from rich.text import Text

from tally import __version__
from tally.core.config import ErrorPolicy, TallyConfig, load_config
from tally.core.errors import LexError, TallyError
from tally.core.expression_lang import Environment, evaluate, interpret, iter_lines, parse
from tally.core.expression_lang.parser import parse_tokens
from tally.core.ir.values import Value, format_value, value_kind

logger = logging.getLogger(__name__)

console = Console()

app = typer.Typer(
    help="tally: evaluate arithmetic expressions with variables.",
    no_args_is_help=True,
)

REPL_PROMPT = "tally> "
REPL_QUIT = (":quit", ":q")


def version_callback(value: bool) -> None:
    """Print the version and exit."""
    if value:
        typer.echo(f"tally {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool | None = typer.Option(
        None,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    config_path: Path | None = typer.Option(
        None, "--config", "-c", help="Path to tally.toml (default: ./tally.toml if present)"
    ),
) -> None:
    """tally CLI main callback for global options."""
    try:
        config = load_config(config_path)
    except TallyError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    level = "DEBUG" if verbose else config.log_level
    logging.basicConfig(
        level=getattr(logging, level),
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = config


def _config(ctx: typer.Context) -> TallyConfig:
    config = ctx.obj
    if isinstance(config, TallyConfig):
        return config
    return TallyConfig()


def _print_value(value: Value) -> None:
    console.print(Text(format_value(value)))


def print_variables(env: Environment) -> None:
    """Print the current bindings as a table."""
    bindings = env.user_bindings()
    if not bindings:
        console.print("[dim]No variables.[/dim]")
        return

    table = Table(title="Variables")
    table.add_column("Name", style="cyan")
    table.add_column("Type", style="dim")
    table.add_column("Value")

    for name in sorted(bindings):
        value = bindings[name]
        table.add_row(Text(name), str(value_kind(value)), Text(format_value(value)))

    console.print(table)


@app.command("run")
def run_command(
    ctx: typer.Context,
    file: Path = typer.Argument(..., help="Source file, one expression per line"),
    keep_going: bool | None = typer.Option(
        None,
        "--keep-going/--halt",
        help="Continue after a failing line (default from config: halt)",
    ),
    show_vars: bool | None = typer.Option(
        None, "--show-vars/--no-show-vars", help="Print the variable table at the end"
    ),
) -> None:
    """Evaluate a file line by line against one environment.

    The file is tokenized before any line runs, so a lexing error anywhere
    stops the run before the first line, even with --keep-going.
    """
    config = _config(ctx)
    if keep_going is None:
        keep_going = config.error_policy == ErrorPolicy.CONTINUE
    if show_vars is None:
        show_vars = config.show_vars

    try:
        source = file.read_text(encoding="utf-8")
    except OSError as e:
        typer.echo(f"Error: Cannot read {file}: {e}", err=True)
        raise typer.Exit(code=1)

    env = Environment()
    name = str(file)
    failures = 0

    try:
        for line_number, tokens in iter_lines(source, name):
            try:
                value = evaluate(parse_tokens(tokens, source, name), env)
            except TallyError as e:
                failures += 1
                typer.echo(f"Error: {e}", err=True)
                if not keep_going:
                    logger.info("Halting %s at line %d", name, line_number)
                    break
                continue
            _print_value(value)
    except LexError as e:
        failures += 1
        typer.echo(f"Error: {e}", err=True)

    if show_vars:
        print_variables(env)

    if failures:
        raise typer.Exit(code=1)


@app.command("eval")
def eval_command(
    expression: str = typer.Argument(..., help="Expression to evaluate"),
    show_vars: bool = typer.Option(
        False, "--show-vars/--no-show-vars", help="Print the variable table afterwards"
    ),
) -> None:
    """Evaluate an expression and print its value."""
    env = Environment()
    try:
        value = interpret(expression, env)
    except TallyError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    _print_value(value)
    if show_vars:
        print_variables(env)


@app.command("parse")
def parse_command(
    expression: str = typer.Argument(..., help="Expression to parse"),
) -> None:
    """Print the fully parenthesized parse tree of an expression."""
    try:
        tree = parse(expression)
    except TallyError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)
    console.print(Text(str(tree)))


@app.command("repl")
def repl_command(
    ctx: typer.Context,
    show_vars: bool | None = typer.Option(
        None, "--show-vars/--no-show-vars", help="Print the variable table after each line"
    ),
) -> None:
    """Read expressions interactively until EOF or :quit.

    Errors are reported and the session continues with its variables intact.
    """
    if show_vars is None:
        show_vars = _config(ctx).show_vars

    env = Environment()
    while True:
        try:
            line = console.input(REPL_PROMPT)
        except (EOFError, KeyboardInterrupt):
            console.print()
            break

        if line.strip() in REPL_QUIT:
            break
        if not line.strip():
            continue

        try:
            value = interpret(line, env)
        except TallyError as e:
            typer.echo(f"Error: {e}", err=True)
            continue

        _print_value(value)
        if show_vars:
            print_variables(env)


def main() -> None:
    """Console script entry point."""
    app()


if __name__ == "__main__":
    main()

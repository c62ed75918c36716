"""
sandcalc CLI.

Thin wrapper around the expression pipeline:
- eval:   evaluate an expression (or one line read from stdin)
- tokens: show the token stream
- tree:   show the parsed expression tree
"""

from __future__ import annotations

import logging
import math
import sys
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.tree import Tree

from sandcalc import __version__
from sandcalc.core.errors import CalcError, CalcSyntaxError, ManifestError
from sandcalc.core.expression_lang import calculate, parse_expr, tokenize
from sandcalc.core.ir.expressions import BinaryExpr, Expr
from sandcalc.core.manifest import CalcManifest, load_manifest, resolve_manifest_path

app = typer.Typer(
    help="Evaluate arithmetic expressions.",
    no_args_is_help=True,
)

console = Console()

PROMPT = "Enter something to calculate:"


def format_result(value: float, precision: int | None = None) -> str:
    """Render a result for display."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    if precision is not None:
        return f"{value:.{precision}f}"
    if value.is_integer() and abs(value) < 1e16:
        return str(int(value))
    return repr(value)


def version_callback(value: bool) -> None:
    if value:
        typer.echo(f"sandcalc version {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool = typer.Option(
        False,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Log each pipeline stage to stderr.",
    ),
) -> None:
    """Evaluate arithmetic expressions."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")


def _load_manifest(config: Path | None) -> CalcManifest:
    path = resolve_manifest_path(config, Path.cwd())
    if path is None:
        return CalcManifest()
    try:
        return load_manifest(path)
    except ManifestError as e:
        console.print(f"[red]Config error:[/red] {escape(e.message)}")
        raise typer.Exit(code=2) from e


def _report(error: CalcError) -> None:
    console.print(f"[red]Error:[/red] {escape(error.message)}")
    if error.context is not None:
        console.print(escape(error.context.format()), style="dim", highlight=False)


def _build_tree(expr: Expr, tree: Tree) -> None:
    # Left child is pushed last so it is added to its branch first
    stack: list[tuple[Expr, Tree]] = [(expr, tree)]
    while stack:
        node, parent = stack.pop()
        if isinstance(node, BinaryExpr):
            branch = parent.add(escape(node.op.value))
            stack.append((node.right, branch))
            stack.append((node.left, branch))
        else:
            parent.add(format_result(node.value))


@app.command(name="eval")
def eval_command(
    expression: str | None = typer.Argument(
        None,
        help="Expression to evaluate. Read from stdin when omitted.",
    ),
    config: Path | None = typer.Option(  # noqa: B008
        None,
        "--config",
        "-c",
        help="Path to sandcalc.toml (default: $SANDCALC_CONFIG or nearest sandcalc.toml)",
    ),
    precision: int | None = typer.Option(
        None,
        "--precision",
        "-p",
        min=0,
        help="Digits after the decimal point (overrides display.precision)",
    ),
) -> None:
    """Evaluate an expression and print the answer."""
    manifest = _load_manifest(config)

    if expression is None:
        typer.echo(PROMPT)
        expression = sys.stdin.readline()
    expression = expression.strip()

    try:
        answer = calculate(expression, manifest.constant_table())
    except CalcSyntaxError as e:
        _report(e)
        raise typer.Exit(code=1) from e

    if precision is None:
        precision = manifest.display.precision
    console.print(f"Answer: {format_result(answer, precision)}", highlight=False)


@app.command(name="tokens")
def tokens_command(
    expression: str = typer.Argument(..., help="Expression to tokenize"),
) -> None:
    """Print the token stream for an expression."""
    source = expression.strip()

    try:
        tokens = tokenize(source)
    except CalcSyntaxError as e:
        _report(e.with_source(source))
        raise typer.Exit(code=1) from e

    for tok in tokens:
        value = "" if tok.value is None else repr(tok.value)
        console.print(f"{tok.pos:>4}  {tok.kind.name:<8}{escape(value)}", highlight=False)


@app.command(name="tree")
def tree_command(
    expression: str = typer.Argument(..., help="Expression to parse"),
    config: Path | None = typer.Option(  # noqa: B008
        None,
        "--config",
        "-c",
        help="Path to sandcalc.toml (default: $SANDCALC_CONFIG or nearest sandcalc.toml)",
    ),
) -> None:
    """Print the parsed expression tree."""
    manifest = _load_manifest(config)
    source = expression.strip()

    root = Tree(escape(source), highlight=False)
    try:
        expr = parse_expr(source, manifest.constant_table())
        _build_tree(expr, root)
    except CalcSyntaxError as e:
        _report(e.with_source(source))
        raise typer.Exit(code=1) from e
    except RecursionError:
        _report(CalcSyntaxError("Expression nested too deeply"))
        raise typer.Exit(code=1) from None

    console.print(root)


def main() -> None:
    app()


if __name__ == "__main__":
    main()

import logging
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from ..refs.codec import RangeTokenCodec
from ..refs.lexer import RangeLexer
from ..refs.normalizer import canonicalize
from ..refs.tokenizer import ReferenceNode, tokenize
from ..refs.validator import SequenceValidator
from ..domain.errors import LexError
from .config_commands import app as config_app

app = typer.Typer()
console = Console()

# add config subcommand
app.add_typer(config_app, name="config", help="Show or change synchronizer settings")

@app.callback()
def main_callback(verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging")):
    """tools for range reference text."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=console, show_path=False)],
        )

@app.command("tokenize")
def tokenize_command(text: str):
    """split TEXT into literal runs and range references."""
    nodes = tokenize(text)
    if nodes is None:
        # tokenize() swallows the reason, ask the lexer for it
        try:
            RangeLexer().tokenize(text)
        except LexError as e:
            console.print(f"[red]Not parseable:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    table = Table(title="Sequence")
    table.add_column("Kind", style="cyan")
    table.add_column("Text", style="white")
    table.add_column("Start", style="dim", justify="right")
    table.add_column("End", style="dim", justify="right")
    for node in nodes:
        if isinstance(node, ReferenceNode):
            table.add_row("reference", escape(node.token), str(node.start), str(node.end))
        else:
            table.add_row("literal", escape(repr(node.text)), str(node.start), str(node.end))
    console.print(table)

@app.command("canonicalize")
def canonicalize_command(
    text: str,
    across_sheet: bool = typer.Option(False, "--across-sheet", help="Keep sheet and workbook qualifiers"),
):
    """print the canonical form of TEXT."""
    result = canonicalize(text, across_sheet)
    if result is None:
        console.print("[red]Not parseable[/red]")
        raise typer.Exit(1)
    console.print(result, markup=False, highlight=False)

@app.command()
def decode(token: str):
    """show the range descriptor for one reference TOKEN."""
    d = RangeTokenCodec().decode(token)
    if d.is_degenerate:
        console.print(f"[red]Not a range reference:[/red] {escape(token)}")
        raise typer.Exit(1)

    table = Table(title=escape(token))
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="white")
    for key, value in d.model_dump(mode="json").items():
        table.add_row(key, str(value))
    console.print(table)

@app.command()
def verify(
    text: str,
    only_one: bool = typer.Option(False, "--only-one", help="Accept a single range only"),
):
    """check that TEXT is a list of pure range references."""
    passed = SequenceValidator().is_range_list(tokenize(text), only_one_range=only_one)
    if passed:
        console.print("[green]✓[/green] valid range list")
    else:
        console.print("[red]✗[/red] not a range list")
        raise typer.Exit(1)

if __name__ == "__main__":
    app()

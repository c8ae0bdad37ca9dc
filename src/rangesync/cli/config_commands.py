import typer
from rich.console import Console
from rich.table import Table

from .. import config
from ..domain.errors import ConfigError

app = typer.Typer()
console = Console()


@app.command("show")
def show_settings():
    """show the active synchronizer settings."""
    settings = config.load_settings()

    table = Table(title="Settings")
    table.add_column("Key", style="cyan")
    table.add_column("Value", style="white")

    for key, field in config.KEYS.items():
        value = getattr(settings, field)
        if isinstance(value, list):
            value = ",".join(value)
        table.add_row(key, str(value))

    console.print(table)
    console.print(f"[dim]config file: {config.CONFIG_FILE}[/dim]")


@app.command("set")
def set_setting(key: str, value: str):
    """
    set a synchronizer setting.

    delays are in milliseconds; the palette is a comma separated list of colors.
    """
    try:
        config.set_setting(key.upper(), value)
    except ConfigError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    console.print(f"[green]✓[/green] {key.upper()}={value}")


if __name__ == "__main__":
    app()

"""Console output for CLI commands."""

from rich.console import Console, ConsoleRenderable


class CLIConsole:
    """Rich console wrapper for consistent CLI output."""

    def __init__(self) -> None:
        """Initialize the CLI console."""
        self.console = Console()

    def print(self, msg: ConsoleRenderable | str | None = None) -> None:
        self.console.print(msg)

    def print_json(self, data: object) -> None:
        self.console.print_json(data=data)

    def info(self, msg: str) -> None:
        self.console.print(f"[cyan]ℹ[/cyan]  {msg}")

    def ok(self, msg: str) -> None:
        self.console.print(f"[green]✅[/green] {msg}")

    def error(self, msg: str) -> None:
        self.console.print(f"[red]❌[/red] {msg}")


console = CLIConsole()

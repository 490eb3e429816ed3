"""Rich console shared by CLI commands."""

from functools import lru_cache

from rich.console import Console


class WardenConsole(Console):
    def error(self, message: str, hint: str | None = None) -> None:
        self.print(f"[bold red]Error:[/bold red] {message}")
        if hint:
            self.print(f"[dim]{hint}[/dim]")

    def success(self, message: str) -> None:
        self.print(f"[green]✓[/green] {message}")


@lru_cache(maxsize=1)
def get_console() -> WardenConsole:
    return WardenConsole(stderr=False, highlight=False)

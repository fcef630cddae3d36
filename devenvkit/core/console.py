"""
Coloured console output for the bootstrap.

Reporter prints the human-facing progress lines (step headers, success,
warning and error markers) through a Rich Console. When output is not a
terminal Rich drops the colour codes on its own.
"""

from contextlib import contextmanager
from typing import Dict, Iterable, Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.theme import Theme

DEVENV_THEME = Theme(
    {
        "devenv.step": "bold blue",
        "devenv.ok": "green",
        "devenv.warning": "bold yellow",
        "devenv.error": "red",
        "devenv.path": "blue",
        "devenv.title": "bold",
    }
)


def create_console(
    *, no_color: bool = False, file=None, width: Optional[int] = None
) -> Console:
    """
    Create a Console using the DevEnvKit theme.

    Args:
        no_color: Disable ANSI escape codes (used in tests)
        file: Output stream (stdout if None)
        width: Override terminal width
    """
    return Console(
        file=file,
        theme=DEVENV_THEME,
        no_color=no_color,
        highlight=False,
        width=width,
    )


class Reporter:
    """User-facing progress output."""

    def __init__(self, console: Optional[Console] = None, quiet: bool = False):
        self.console = console or create_console()
        self.quiet = quiet

    def _print(self, markup: str) -> None:
        self.console.print(markup)

    def step(self, message: str) -> None:
        if not self.quiet:
            self._print(f"\n[devenv.step]==>[/] {escape(message)}")

    def success(self, message: str) -> None:
        if not self.quiet:
            self._print(f"[devenv.ok]✓[/] {escape(message)}")

    def warning(self, message: str) -> None:
        self._print(f"[devenv.warning]⚠[/] {escape(message)}")

    def error(self, message: str) -> None:
        self._print(f"[devenv.error]✗[/] {escape(message)}")

    def info(self, message: str = "") -> None:
        if not self.quiet:
            self._print(escape(message))

    def bullets(self, items: Iterable[str], indent: str = "  ") -> None:
        for item in items:
            self.info(f"{indent}• {item}")

    def banner(self, *lines: str, width: int = 40) -> None:
        if self.quiet:
            return
        self._print("=" * width)
        for line in lines:
            self._print(f"  {escape(line)}")
        self._print("=" * width)

    def heading(self, text: str) -> None:
        if not self.quiet:
            self._print(f"[devenv.warning]{escape(text)}[/]")

    def highlight(self, label: str, value: str) -> None:
        """Print a label followed by a value in the path colour."""
        if not self.quiet:
            self._print(f"{escape(label)}[devenv.path]{escape(value)}[/]")

    def table(self, title: str, rows: Dict[str, str]) -> None:
        """Print a two-column table (e.g., the step summary)."""
        if self.quiet:
            return
        table = Table(title=title, show_header=False, title_justify="left")
        table.add_column(style="devenv.title")
        table.add_column()
        for key, value in rows.items():
            table.add_row(escape(key), value)
        self.console.print(table)

    @contextmanager
    def progress(self, label: str):
        """
        Show a live status line while a download runs.

        Yields a callback for download_file(progress_callback=...). The last
        reported progress is printed once the block finishes.

        Example:
            >>> with reporter.progress("Downloading flake.nix...") as on_progress:
            ...     download_file(url, dest, progress_callback=on_progress)
        """
        if self.quiet:
            yield lambda progress: None
            return

        reports = []
        with self.console.status(escape(label)) as status:

            def update(progress) -> None:
                reports.append(progress)
                status.update(f"{escape(label)} {escape(str(progress))}")

            yield update

        if reports:
            self.info(f"{label} {reports[-1]}")

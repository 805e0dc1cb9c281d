from __future__ import annotations

import argparse
from dataclasses import dataclass, field
from typing import List, Tuple

from rich.console import Console
from rich.table import Table


def _section(title: str) -> Table:
    return Table(
        title=title,
        title_justify="left",
        title_style="bold bright_cyan",
        show_header=False,
        box=None,
        padding=(0, 2),
    )


@dataclass
class CommandHelp:
    """Examples, environment variables and tips rendered below a command's options."""

    examples: List[Tuple[str, str]] = field(default_factory=list)
    env_vars: List[Tuple[str, str]] = field(default_factory=list)
    tips: List[str] = field(default_factory=list)

    def tables(self) -> List[Table]:
        tables: List[Table] = []
        if self.examples:
            table = _section("Examples")
            table.add_column("Description", style="bright_white")
            table.add_column("Command", style="bright_yellow")
            for description, command in self.examples:
                table.add_row(description, f"$ {command}")
            tables.append(table)
        if self.env_vars:
            table = _section("Environment Variables")
            table.add_column("Variable", style="bright_green bold", no_wrap=True)
            table.add_column("Description", style="bright_white")
            for name, description in self.env_vars:
                table.add_row(name, description)
            tables.append(table)
        if self.tips:
            table = _section("Tips")
            table.add_column("Tip", style="bright_white")
            for tip in self.tips:
                table.add_row(f"* {tip}")
            tables.append(table)
        return tables

    def render(self, console: Console) -> str:
        """Render every non-empty section; styling is dropped when ``console`` is not a terminal."""
        with console.capture() as capture:
            for table in self.tables():
                console.print()
                console.print(table)
        return capture.get()


class RichHelpFormatter(argparse.HelpFormatter):
    """Plain argparse help followed by the bound :class:`CommandHelp` sections."""

    command_help: CommandHelp = CommandHelp()

    def __init__(self, prog: str, console: Console | None = None, **kwargs) -> None:
        super().__init__(prog, **kwargs)
        self.console = console or Console()

    def format_help(self) -> str:
        return super().format_help() + self.command_help.render(self.console)


def formatter_for(command_help: CommandHelp) -> type[RichHelpFormatter]:
    """Return a formatter class bound to ``command_help`` for use as ``formatter_class``."""
    return type("BoundRichHelpFormatter", (RichHelpFormatter,), {"command_help": command_help})

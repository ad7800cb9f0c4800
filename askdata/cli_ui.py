# cli_ui.py
import platform
from datetime import datetime
from decimal import Decimal

from rich import box
from rich.align import Align
from rich.console import Console, Group
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table
from rich.text import Text

from askdata.agent import FinalAnswer


def print_startup_ui(
    model: str,
    base_url: str,
    listen: str,
    version: str = "",
    app_name: str = "AskData",
    show_system: bool = True,
    console: Console | None = None,
) -> None:
    console = console or Console()
    now = datetime.now().strftime("%Y-%m-%d %H:%M:%S")

    title = Text.assemble(("🤖 ", "bold cyan"), (app_name, "bold cyan"))
    if version:
        title.append(f"  v{version}", style="dim")

    table = Table.grid(padding=(0, 1))
    table.add_column(justify="right", style="bold magenta", width=10)
    table.add_column(style="white")
    table.add_row("Model", f"[bold green]{model}[/bold green]")
    table.add_row("Base URL", f"[bold blue]{base_url}[/bold blue]")
    table.add_row("Listening", f"[bold]{listen}[/bold]  (POST /api/ask)")
    table.add_row("Time", f"[dim]{now}[/dim]")

    if show_system:
        sys_info = f"{platform.system()} {platform.release()} · Python {platform.python_version()}"
        table.add_row("System", f"[dim]{sys_info}[/dim]")

    console.print(
        Panel(
            Align.center(Group(title, Text(""), table)),
            box=box.ROUNDED,
            border_style="cyan",
            padding=(1, 2),
            width=min(console.width, 96),
        )
    )


def _cell(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, Decimal):
        return f"{value:,}"
    return str(value)


def print_answer(answer: FinalAnswer, console: Console | None = None) -> None:
    """Render one answer: explanation, SQL, chart hint and the chart points."""
    console = console or Console()

    console.print(Panel(Text(answer.answer or "(no explanation)"), title="Answer", border_style="green"))
    console.print(Panel(Syntax(answer.sql, "sql", word_wrap=True), title="SQL", border_style="blue"))
    console.print(Text.assemble(("Chart: ", "bold magenta"), answer.chart or "-"))

    if not answer.data:
        console.print("[dim]Query returned no rows.[/dim]")
        return

    columns = list(answer.data[0].keys())
    table = Table(box=box.SIMPLE_HEAVY, show_lines=False)
    for column in columns:
        table.add_column(column)
    for row in answer.data:
        table.add_row(*(_cell(row.get(c)) for c in columns))
    console.print(table)


def print_error(error: str, details: str | None = None, console: Console | None = None) -> None:
    console = console or Console(stderr=True)
    body = Text(error)
    if details:
        body.append(f"\n{details}", style="dim")
    console.print(Panel(body, title="Error", border_style="red"))

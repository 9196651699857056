"""
Terminal rendering for admin list screens
"""

import json
from typing import Any, Dict

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from skillswap.list_controller import ListController, ViewState


STATUS_STYLES = {
    "pending": "yellow",
    "replied": "blue",
    "resolved": "green",
    "approved": "green",
    "rejected": "red",
    "open": "yellow",
}


def format_cell(value: Any, max_width: int = 60) -> str:
    """Flatten one item field into a single table cell"""
    if value is None or value == "":
        return "-"
    if isinstance(value, bool):
        return "yes" if value else "no"
    if isinstance(value, list):
        value = ", ".join(format_cell(v, max_width) for v in value)
    elif isinstance(value, dict):
        value = value.get("username") or value.get("email") or value.get("name") or json.dumps(value)
    text = " ".join(str(value).split())
    if len(text) > max_width:
        text = text[: max_width - 1] + "…"
    return text


class ListRenderer:
    """Renders a ListController's state: spinner, error banner, empty notice or table"""

    def __init__(self, console: Console = None):
        self.console = console or Console()

    def render(self, controller: ListController) -> None:
        state = controller.view_state
        name = controller.endpoint.name

        if state == ViewState.LOADING:
            self.console.print(f"[dim]Loading {name}...[/dim]")
            return

        if state == ViewState.ERROR:
            self.console.print(Panel(
                f"[red]{controller.error}[/red]",
                title="Error",
                border_style="red"
            ))
            return

        if state == ViewState.EMPTY:
            self.console.print(f"[dim]No {name} found[/dim]")
            return

        self.console.print(self.build_table(controller))

        footer = f"[dim]Page {controller.current_page} of {controller.total_pages}"
        if controller.page.total is not None:
            footer += f" · {controller.page.total} total"
        footer += "[/dim]"
        self.console.print(footer)
        if controller.loading_more:
            self.console.print("[dim]Loading more...[/dim]")

    def build_table(self, controller: ListController) -> Table:
        endpoint = controller.endpoint
        columns = endpoint.columns or tuple(
            k for k in (controller.items[0].keys() if controller.items else ()) if not k.startswith("_")
        )

        table = Table(title=endpoint.name.title(), show_header=True, header_style="bold cyan")
        table.add_column("ID", style="dim")
        for column in columns:
            table.add_column(column)

        for item in controller.items:
            cells = [format_cell(item.get(endpoint.id_field), max_width=24)]
            for column in columns:
                cell = format_cell(item.get(column))
                style = STATUS_STYLES.get(cell) if column == "status" else None
                cells.append(f"[{style}]{cell}[/{style}]" if style else cell)
            table.add_row(*cells)

        return table

    def render_stats(self, stats: Dict[str, int]) -> None:
        self.console.print(Panel(
            f"Total: [bold]{stats.get('total', 0)}[/bold]   "
            f"Pending: [yellow]{stats.get('pending', 0)}[/yellow]   "
            f"Replied: [blue]{stats.get('replied', 0)}[/blue]   "
            f"Resolved: [green]{stats.get('resolved', 0)}[/green]",
            title="Help & Support",
            border_style="cyan"
        ))


def to_json(controller: ListController) -> str:
    """Machine-readable snapshot of the list"""
    payload: Dict[str, Any] = {
        "endpoint": controller.endpoint.name,
        "filters": {
            "status": controller.filters.status,
            "search": controller.filters.search_query,
            "period": controller.filters.time_period.value,
            "date": controller.filters.selected_date.isoformat() if controller.filters.selected_date else None,
            **controller.filters.extra,
        },
        "currentPage": controller.current_page,
        "totalPages": controller.total_pages,
        "total": controller.page.total,
        "error": controller.error or None,
        "items": controller.items,
    }
    return json.dumps(payload, indent=2, default=str)


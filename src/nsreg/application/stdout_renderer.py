"""Render namespace listings to the terminal using rich."""

from collections.abc import Iterable, Sequence

import pandas as pd
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from nsreg.domain.models import Namespace, NamespacePage

_MAX_PREVIEW_ROWS = 20


def _format_time(namespace: Namespace) -> str:
    return namespace.created_at.strftime("%Y-%m-%d %H:%M:%S")


def namespace_table(namespaces: Iterable[Namespace], *, title: str) -> Table:
    """Build a table with one row per namespace."""
    table = Table(title=title, box=box.SIMPLE_HEAVY, show_lines=False)
    table.add_column("id", justify="right", style="cyan")
    table.add_column("namespace", style="bold")
    table.add_column("cluster", justify="right")
    table.add_column("owner")
    table.add_column("created")
    for ns in namespaces:
        table.add_row(
            str(ns.id),
            ns.name,
            str(ns.cluster_code),
            ns.owner_name or str(ns.owner_id),
            _format_time(ns),
        )
    return table


def render_namespaces(
    console: Console, namespaces: Sequence[Namespace], *, title: str
) -> None:
    """Print namespaces or an empty-state line."""
    if not namespaces:
        console.print(f"[yellow]{title}: no namespaces[/yellow]")
        return
    console.print(namespace_table(namespaces, title=title))


def render_page(console: Console, page: NamespacePage) -> None:
    """Print a page of namespaces with paging footer."""
    render_namespaces(console, page.items, title="Namespaces")
    console.print(
        f"page {page.page_no}/{max(page.total_pages, 1)} "
        f"(size {page.page_size}, total {page.total})"
    )


def render_dataframe(console: Console, frame: pd.DataFrame, *, title: str) -> None:
    """Print a dataframe preview in a panel."""
    if frame.empty:
        console.print(Panel("No rows.", title=title, border_style="yellow"))
        return
    table = Table(box=box.SIMPLE_HEAVY)
    for column in frame.columns:
        table.add_column(str(column))
    for row in frame.head(_MAX_PREVIEW_ROWS).itertuples(index=False):
        table.add_row(*("" if pd.isna(v) else str(v) for v in row))
    console.print(Panel(table, title=title, border_style="cyan"))
    hidden = len(frame) - _MAX_PREVIEW_ROWS
    if hidden > 0:
        console.print(f"[dim]... {hidden} more rows[/dim]")

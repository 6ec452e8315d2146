"""Output formatting for catalog and token listings."""

from __future__ import annotations

import csv
import json
import sys
from enum import Enum
from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.table import Table

console = Console(stderr=True)

Rows = list[dict[str, Any]] | dict[str, Any]


class OutputFormat(str, Enum):
    TABLE = "table"
    JSON = "json"
    CSV = "csv"


def print_output(
    data: Rows,
    fmt: OutputFormat = OutputFormat.TABLE,
    columns: list[str] | None = None,
    title: str | None = None,
) -> None:
    """Print rows in the requested format.

    Args:
        data: A list of row dicts, or a single dict.
        fmt: Output format (table, json, csv).
        columns: Columns to show in table/csv mode. None = keys of the first row.
        title: Optional title for table output.
    """
    if fmt == OutputFormat.JSON:
        print_json(data)
    elif fmt == OutputFormat.CSV:
        print_csv(data, columns)
    else:
        print_table(data, columns, title)


def _as_rows(data: Rows) -> list[dict[str, Any]]:
    return [data] if isinstance(data, dict) else data


def _columns_for(rows: list[dict[str, Any]], columns: list[str] | None) -> list[str]:
    if columns is not None:
        return columns
    seen: dict[str, None] = {}
    for row in rows:
        seen.update(dict.fromkeys(row))
    return list(seen)


def print_json(data: Any) -> None:
    """Print data as formatted JSON to stdout."""
    json.dump(data, sys.stdout, indent=2, default=str)
    sys.stdout.write("\n")


def print_table(data: Rows, columns: list[str] | None = None, title: str | None = None) -> None:
    """Print rows as a Rich table on stderr."""
    rows = _as_rows(data)
    if not rows:
        console.print("[dim]No results.[/dim]")
        return

    table = Table(title=title, show_lines=False)
    columns = _columns_for(rows, columns)
    for col in columns:
        table.add_column(col, overflow="fold")
    for row in rows:
        table.add_row(*[escape(str(row.get(col, ""))) for col in columns])

    console.print(table)


def print_csv(data: Rows, columns: list[str] | None = None) -> None:
    """Print rows as CSV to stdout."""
    rows = _as_rows(data)
    if not rows:
        return

    writer = csv.DictWriter(sys.stdout, fieldnames=_columns_for(rows, columns), extrasaction="ignore")
    writer.writeheader()
    writer.writerows(rows)

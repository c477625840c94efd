"""
Output rendering for command results.

Projected responses are printed either as indented JSON (``default`` and
``json`` modes) or as a boxed table (``table`` mode).
"""

import json
from typing import Any, Dict, List, Optional, Sequence, Union

from rich import box
from rich.console import Console
from rich.table import Table

from .config import OutputMode, parse_output_mode
from .projection import project_data


def format_cell(value: Any) -> str:
    """Format one table cell. Missing and null values are empty cells."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return json.dumps(value)


def build_table(rows: List[Dict[str, Any]], fields: Sequence[str]) -> Table:
    """Build a table with one column per field and one row per resource."""
    table = Table(box=box.SQUARE, show_header=True)
    for name in fields:
        table.add_column(name, overflow="fold")
    for row in rows:
        table.add_row(*(format_cell(row.get(name)) for name in fields))
    return table


def render(
    data: Union[Dict[str, Any], List[Dict[str, Any]], None],
    fields: Sequence[str],
    mode: Union[str, OutputMode] = OutputMode.DEFAULT,
    console: Optional[Console] = None
) -> None:
    """
    Project and print a response.

    Args:
        data: Data member of a response envelope
        fields: Fields to display, in order
        mode: Output mode
        console: Target console (stdout if not provided)
    """
    console = console or Console()
    mode = parse_output_mode(mode)
    projected = project_data(data, fields)

    if mode is OutputMode.TABLE:
        if projected is None:
            rows = []
        elif isinstance(projected, list):
            rows = projected
        else:
            rows = [projected]
        console.print(build_table(rows, fields))
        return

    console.print(
        json.dumps({'data': projected}, indent=2, ensure_ascii=False),
        markup=False,
        highlight=False,
        soft_wrap=True
    )

"""Render rows and values for the command line in the formats operators ask for."""

import csv
import io
import json
import pprint
from typing import Any, Iterable, List, Mapping, Sequence

import yaml
from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

ITEM_FORMATS = ("table", "json", "csv", "count", "yaml")
VALUE_FORMATS = ("var_export", "json", "yaml")


def _cell(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (list, tuple)) and all(isinstance(item, (int, str)) for item in value):
        return ", ".join(str(item) for item in value)
    return json.dumps(value)


def render_table(items: Sequence[Mapping[str, Any]], fields: Sequence[str]) -> str:
    table = Table(box=box.ROUNDED)
    for name in fields:
        table.add_column(name, overflow="fold")
    for item in items:
        table.add_row(*(Text(_cell(item.get(name))) for name in fields))

    buffer = io.StringIO()
    console = Console(file=buffer, width=160, no_color=True, highlight=False)
    console.print(table)
    return buffer.getvalue().rstrip("\n")


def render_csv(items: Iterable[Mapping[str, Any]], fields: Sequence[str]) -> str:
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=list(fields), lineterminator="\n")
    writer.writeheader()
    for item in items:
        writer.writerow({name: _cell(item.get(name)) for name in fields})
    return buffer.getvalue().rstrip("\n")


def format_items(items: List[Mapping[str, Any]], fields: Sequence[str], fmt: str = "table") -> str:
    """Format a list of rows as table, json, csv, count or yaml."""
    rows = [{name: item.get(name) for name in fields} for item in items]

    if fmt == "table":
        return render_table(rows, fields)
    if fmt == "json":
        return json.dumps(rows)
    if fmt == "csv":
        return render_csv(rows, fields)
    if fmt == "count":
        return str(len(rows))
    if fmt == "yaml":
        return yaml.safe_dump(rows, default_flow_style=False, sort_keys=False).rstrip("\n")
    raise ValueError(f"Unsupported format {fmt!r}; expected one of {', '.join(ITEM_FORMATS)}")


def format_value(value: Any, fmt: str = "var_export") -> str:
    """Format a single option value as a Python literal, json or yaml."""
    if fmt == "var_export":
        return pprint.pformat(value, sort_dicts=False)
    if fmt == "json":
        return json.dumps(value)
    if fmt == "yaml":
        return yaml.safe_dump(value, default_flow_style=False, sort_keys=False).rstrip("\n")
    raise ValueError(f"Unsupported format {fmt!r}; expected one of {', '.join(VALUE_FORMATS)}")

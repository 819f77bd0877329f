"""Terminal (and HTML) tables for diff results, rendered with rich."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Sequence

from rich.console import Console
from rich.table import Table
from rich.text import Text

from .exceptions import OutputError
from .models import (
    ArrayDiff,
    ArrayDiffDesc,
    DiffCategory,
    DiffCollection,
    KeyDiff,
    TypeDiff,
    ValueDiff,
    WorkingContext,
)
from .utils import sanitize_json_str

logger = logging.getLogger(__name__)

CHECKMARK = "✓"
MULTIPLY = "×"

TABLE_TITLES = {
    DiffCategory.KEY: "Key Differences",
    DiffCategory.TYPE: "Type Differences",
    DiffCategory.VALUE: "Value Differences",
    DiffCategory.ARRAY: "Array Differences",
}


def _create_table(category: DiffCategory, context: WorkingContext) -> Table:
    file_a, file_b = context.get_file_names()
    table = Table(title=TABLE_TITLES[category], show_lines=True)
    table.add_column("Key", style="cyan", max_width=80)
    table.add_column(file_a, max_width=80)
    table.add_column(file_b, max_width=80)
    return table


def check_has(file_name: str, key_diff: KeyDiff) -> Text:
    """Presence marker of a key for one file."""
    if key_diff.has == file_name:
        return Text(CHECKMARK, style="green")
    return Text(MULTIPLY, style="red")


def create_key_table(data: Sequence[KeyDiff], context: WorkingContext) -> Table:
    table = _create_table(DiffCategory.KEY, context)
    file_a, file_b = context.get_file_names()
    for kd in data:
        table.add_row(Text(kd.key), check_has(file_a, kd), check_has(file_b, kd))
    return table


def create_type_table(data: Sequence[TypeDiff], context: WorkingContext) -> Table:
    table = _create_table(DiffCategory.TYPE, context)
    for td in data:
        table.add_row(Text(td.key), Text(td.type1), Text(td.type2))
    return table


def create_value_table(data: Sequence[ValueDiff], context: WorkingContext) -> Table:
    table = _create_table(DiffCategory.VALUE, context)
    for vd in data:
        table.add_row(
            Text(vd.key),
            Text(sanitize_json_str(vd.value1)),
            Text(sanitize_json_str(vd.value2)),
        )
    return table


def get_array_table_cells(descriptor: ArrayDiffDesc, value: str) -> tuple[Text, Text]:
    """
    Cells for one array diff: the value goes in the column of the side the
    descriptor names, marked as held or missed; the other column stays empty.
    """
    if descriptor in (ArrayDiffDesc.A_HAS, ArrayDiffDesc.B_HAS):
        marker = (f"{CHECKMARK} ", "green")
    else:
        marker = (f"{MULTIPLY} ", "red")
    cell = Text.assemble(marker, value)

    if descriptor in (ArrayDiffDesc.A_HAS, ArrayDiffDesc.A_MISSES):
        return cell, Text("")
    return Text(""), cell


def create_array_table(data: Sequence[ArrayDiff], context: WorkingContext) -> Table:
    table = _create_table(DiffCategory.ARRAY, context)
    for ad in data:
        a_cell, b_cell = get_array_table_cells(ad.descriptor, sanitize_json_str(ad.value))
        table.add_row(Text(ad.key), a_cell, b_cell)
    return table


def build_tables(collection: DiffCollection, context: WorkingContext) -> list[Table]:
    """Build one table per checked category that has at least one diff."""
    tables = []
    if collection.key_diffs:
        tables.append(create_key_table(collection.key_diffs, context))
    if collection.type_diffs:
        tables.append(create_type_table(collection.type_diffs, context))
    if collection.value_diffs:
        tables.append(create_value_table(collection.value_diffs, context))
    if collection.array_diffs:
        tables.append(create_array_table(collection.array_diffs, context))
    return tables


def render_tables(
    collection: DiffCollection,
    context: WorkingContext,
    console: Optional[Console] = None
) -> int:
    """
    Print the tables of a collection.

    Returns:
        Number of tables printed
    """
    console = console or Console()
    tables = build_tables(collection, context)

    if not tables:
        console.print("[green]No differences found.[/green]")

    for table in tables:
        console.print(table)

    return len(tables)


def save_html(console: Console, path: str | Path):
    """Write everything a recording console printed to an HTML file."""
    try:
        console.save_html(str(path))
    except OSError as e:
        raise OutputError(f"Could not write {path}: {e}", str(path))
    logger.info("HTML report written to %s", path)

"""Row writers for the CLI reports."""

from __future__ import annotations

import csv
from enum import StrEnum
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence
    from typing import TextIO

TABLE_MIN_WIDTH: Final[int] = 10
TABLE_PADDING: Final[int] = 1
TABLE_SEPARATOR: Final[str] = "|"


class OutputFormat(StrEnum):
    SPACE_SEPARATED = "space-separated"
    TAB_SEPARATED = "tab-separated"
    CSV = "csv"
    TABLE = "table"


_DELIMITERS: Final[dict[OutputFormat, str]] = {
    OutputFormat.SPACE_SEPARATED: " ",
    OutputFormat.TAB_SEPARATED: "\t",
    OutputFormat.CSV: ",",
}


def write_rows(rows: Iterable[Sequence[str]], out: TextIO, output_format: OutputFormat) -> None:
    if output_format is OutputFormat.TABLE:
        write_table(rows, out)
        return
    writer = csv.writer(out, delimiter=_DELIMITERS[output_format], lineterminator="\n")
    writer.writerows(rows)


def write_table(rows: Iterable[Sequence[str]], out: TextIO) -> None:
    """Write rows as aligned columns separated by ``|``; the last column is not padded."""

    materialized = [list(row) for row in rows]
    widths: list[int] = []
    for row in materialized:
        for position, cell in enumerate(row[:-1]):
            width = max(TABLE_MIN_WIDTH, len(cell) + TABLE_PADDING)
            if position == len(widths):
                widths.append(width)
            else:
                widths[position] = max(widths[position], width)

    for row in materialized:
        if not row:
            out.write("\n")
            continue
        padded = (cell.ljust(widths[position]) for position, cell in enumerate(row[:-1]))
        out.write("".join(f"{cell}{TABLE_SEPARATOR}" for cell in padded) + row[-1] + "\n")

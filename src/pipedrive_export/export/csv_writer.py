"""Write uniform row mappings as CSV."""

import csv
import json
from collections.abc import Mapping, Sequence
from typing import Any, TextIO


def _cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False, separators=(",", ":"), default=str)
    return str(value)


def write_rows(target: TextIO, rows: Sequence[Mapping[str, Any]]) -> int:
    """
    Write a header from the first row's keys, then one line per row.
    Values are looked up by header key so every line has the same column order.
    Writes nothing for an empty sequence. Returns the number of data rows written.
    """
    if not rows:
        return 0
    header = list(rows[0].keys())
    writer = csv.writer(target)
    writer.writerow(header)
    for row in rows:
        writer.writerow([_cell(row.get(key)) for key in header])
    return len(rows)

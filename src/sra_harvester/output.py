"""Write output rows as tab-separated text."""

import io
from typing import Iterable, TextIO

from sra_harvester.models import OUTPUT_COLUMNS, Row


def write_tsv(rows: Iterable[Row], filepath: str) -> int:
    with open(filepath, "w", newline="", encoding="utf-8") as fh:
        return write_rows(rows, fh)


def write_rows(rows: Iterable[Row], fh: TextIO) -> int:
    """Write the header and one line per row; return the number of rows.

    Values are written verbatim: no quoting and no escaping.
    """
    fh.write("\t".join(OUTPUT_COLUMNS) + "\n")
    count = 0
    for row in rows:
        fh.write("\t".join(row.to_dict().values()) + "\n")
        count += 1
    return count


def rows_to_bytes(rows: Iterable[Row]) -> bytes:
    """Serialize rows to bytes (for Streamlit download button)."""
    buf = io.StringIO()
    write_rows(rows, buf)
    return buf.getvalue().encode("utf-8")

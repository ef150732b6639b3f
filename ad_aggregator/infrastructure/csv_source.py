"""Infrastructure adapter that streams records from a delimited text file."""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Iterator, List, Union

from ad_aggregator.ingestion import RowDecodeError

SourceItem = Union[List[str], RowDecodeError]


def iter_csv_records(path: str | Path, delimiter: str = ",") -> Iterator[SourceItem]:
    """Yield each non-blank record of the file, header first.

    A record the csv reader cannot parse (e.g. a field over the size limit)
    is yielded as a RowDecodeError carrying its record position, header = 1,
    and reading resumes with the next record. The file is read lazily; only
    one record is held at a time.
    """
    csv_path = Path(path)
    if not csv_path.exists():
        raise FileNotFoundError(f"Input CSV file not found: {csv_path}")
    if not csv_path.is_file():
        raise IsADirectoryError(f"Input CSV path is not a file: {csv_path}")

    # utf-8-sig drops a leading BOM so the first header name matches exactly.
    with csv_path.open("r", encoding="utf-8-sig", newline="") as handle:
        reader = csv.reader(handle, delimiter=delimiter)
        position = 0
        failed_at_line = -1
        while True:
            try:
                record = next(reader)
            except StopIteration:
                return
            except csv.Error as exc:
                if reader.line_num == failed_at_line:
                    raise ValueError(f"Malformed CSV near line {reader.line_num} of {csv_path}: {exc}") from exc
                failed_at_line = reader.line_num
                position += 1
                yield RowDecodeError(position, f"unreadable record: {exc}")
                continue
            if not record:
                continue
            position += 1
            yield record

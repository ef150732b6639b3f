"""Row decoding and reduction of the input stream into a metrics store."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable, List, Sequence, Union

from .config import BAD_ROW_POLICIES, BadRowPolicy
from .domain.models import CampaignRow
from .domain.store import MetricsStore

REQUIRED_COLUMNS: tuple[str, ...] = ("campaign_id", "impressions", "clicks", "spend", "conversions")
INT64_MAX = 2**63 - 1
MAX_SKIPPED_ERROR_SAMPLES = 20

_INT_PATTERN = re.compile(r"[+-]?[0-9]+")
_DECIMAL_PATTERN = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


class MissingColumnsError(ValueError):
    """Header lacks one or more required columns."""

    def __init__(self, missing: Sequence[str], header: Sequence[str]) -> None:
        self.missing = list(missing)
        self.header = list(header)
        super().__init__(
            f"Missing required columns: {self.missing}; "
            f"need {list(REQUIRED_COLUMNS)}, got {self.header}"
        )


class RowDecodeError(ValueError):
    """A data row could not be decoded. position is 1-based, header = 1."""

    def __init__(self, position: int, message: str, column: str | None = None, value: str | None = None) -> None:
        self.position = position
        self.column = column
        self.value = value
        super().__init__(f"line {position}: {message}")


@dataclass(frozen=True)
class ColumnIndex:
    campaign_id: int
    impressions: int
    clicks: int
    spend: int
    conversions: int
    width: int


@dataclass
class IngestStats:
    rows_read: int = 0
    rows_aggregated: int = 0
    rows_skipped: int = 0
    skipped_errors: List[str] = field(default_factory=list)

    def record_skip(self, error: RowDecodeError) -> None:
        self.rows_skipped += 1
        if len(self.skipped_errors) < MAX_SKIPPED_ERROR_SAMPLES:
            self.skipped_errors.append(str(error))


def map_columns(header: Sequence[str]) -> ColumnIndex:
    positions: dict[str, int] = {}
    for idx, name in enumerate(header):
        if name in REQUIRED_COLUMNS and name not in positions:
            positions[name] = idx

    missing = [name for name in REQUIRED_COLUMNS if name not in positions]
    if missing:
        raise MissingColumnsError(missing, header)
    return ColumnIndex(
        campaign_id=positions["campaign_id"],
        impressions=positions["impressions"],
        clicks=positions["clicks"],
        spend=positions["spend"],
        conversions=positions["conversions"],
        width=len(header),
    )


def _parse_count(raw: str, column: str, position: int) -> int:
    if not _INT_PATTERN.fullmatch(raw):
        raise RowDecodeError(position, f"bad {column} {raw!r}: not a base-10 integer", column, raw)
    value = int(raw)
    if value > INT64_MAX or value < -INT64_MAX - 1:
        raise RowDecodeError(position, f"bad {column} {raw!r}: out of 64-bit range", column, raw)
    if value < 0:
        raise RowDecodeError(position, f"bad {column} {raw!r}: must be non-negative", column, raw)
    return value


def _parse_amount(raw: str, column: str, position: int) -> Decimal:
    if not _DECIMAL_PATTERN.fullmatch(raw):
        raise RowDecodeError(position, f"bad {column} {raw!r}: not a decimal number", column, raw)
    if not math.isfinite(float(raw)):
        raise RowDecodeError(position, f"bad {column} {raw!r}: out of range", column, raw)
    value = Decimal(raw)
    if value < 0:
        raise RowDecodeError(position, f"bad {column} {raw!r}: must be non-negative", column, raw)
    return value


def decode_row(record: Sequence[str], columns: ColumnIndex, position: int) -> CampaignRow:
    if len(record) != columns.width:
        raise RowDecodeError(position, f"wrong number of fields: expected {columns.width}, got {len(record)}")

    campaign_id = record[columns.campaign_id]
    if campaign_id == "":
        raise RowDecodeError(position, "empty campaign_id", "campaign_id", campaign_id)

    return CampaignRow(
        campaign_id=str(campaign_id),
        impressions=_parse_count(record[columns.impressions], "impressions", position),
        clicks=_parse_count(record[columns.clicks], "clicks", position),
        spend=_parse_amount(record[columns.spend], "spend", position),
        conversions=_parse_count(record[columns.conversions], "conversions", position),
    )


def aggregate_rows(
    records: Iterable[Union[Sequence[str], RowDecodeError]],
    store: MetricsStore,
    on_bad_row: BadRowPolicy = "fail",
) -> IngestStats:
    """Stream header-first records into store.

    The header is validated before any data row is touched. Under the
    "fail" policy the first undecodable row raises RowDecodeError; under
    "skip" it is counted in the returned stats and the pass continues.
    A source may yield a RowDecodeError in place of a record it could not
    read at all; that item goes through the same policy.
    """
    if on_bad_row not in BAD_ROW_POLICIES:
        raise ValueError(f"on_bad_row must be one of {list(BAD_ROW_POLICIES)}, got {on_bad_row!r}")

    iterator = iter(records)
    header = next(iterator, None)
    if header is None:
        raise MissingColumnsError(REQUIRED_COLUMNS, [])
    if isinstance(header, RowDecodeError):
        raise header
    columns = map_columns(header)

    stats = IngestStats()
    position = 1
    for record in iterator:
        position += 1
        stats.rows_read += 1
        try:
            if isinstance(record, RowDecodeError):
                raise record
            row = decode_row(record, columns, position)
        except RowDecodeError as exc:
            if on_bad_row == "fail":
                raise
            stats.record_skip(exc)
            continue
        store.add(row.campaign_id, row.impressions, row.clicks, row.conversions, row.spend)
        stats.rows_aggregated += 1
    return stats

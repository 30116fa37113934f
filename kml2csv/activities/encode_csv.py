"""CSV encoding of geometry records.

Renders records under the fixed header
``Type,Name,Description,Latitude,Longitude,Altitude,GroupID,VertexIndex``.

Text fields are quoted only when they contain a delimiter, a double
quote or a line break; numbers use the shortest text that parses back
to the same float, with integral values written without a trailing
``.0``. Rows are joined with ``\\n`` and no trailing newline is added.
"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING

from kml2csv.core.constants import CSV_DELIMITER, CSV_HEADER, CSV_ROW_SEPARATOR

if TYPE_CHECKING:
    from collections.abc import Iterable

    from kml2csv.models.record import GeometryRecord

logger = logging.getLogger("kml2csv.activities.encode_csv")

_QUOTE = '"'
_SPECIAL_CHARACTERS = frozenset({CSV_DELIMITER, _QUOTE, "\n", "\r"})


def escape_field(value: str) -> str:
    """Quote *value* if it contains a delimiter, quote or line break.

    Internal double quotes are doubled. Empty strings render as nothing.
    """
    if not value:
        return ""
    if _SPECIAL_CHARACTERS.isdisjoint(value):
        return value
    return _QUOTE + value.replace(_QUOTE, _QUOTE * 2) + _QUOTE


def format_number(value: float | int) -> str:
    """Render a number as stable, round-trippable text.

    ``1.0`` → ``"1"``, ``-0.0`` → ``"0"``, ``0.1`` → ``"0.1"``,
    ``1e-07`` → ``"1e-07"``. Non-finite values use Python's ``repr``.
    """
    if isinstance(value, int):
        return str(value)
    if math.isfinite(value) and value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    return repr(value)


def encode_row(record: GeometryRecord) -> str:
    """Render one record as a CSV data row."""
    vertex_index = "" if record.vertex_index is None else format_number(record.vertex_index)
    return CSV_DELIMITER.join(
        (
            record.kind.value,
            escape_field(record.name),
            escape_field(record.description),
            format_number(record.latitude),
            format_number(record.longitude),
            format_number(record.altitude),
            format_number(record.group_id),
            vertex_index,
        )
    )


def encode_csv(records: Iterable[GeometryRecord]) -> str:
    """Render *records* as a CSV document, header row first.

    Returns:
        CSV text with rows joined by ``\\n`` and no trailing newline.
    """
    rows = [CSV_DELIMITER.join(CSV_HEADER)]
    rows.extend(encode_row(record) for record in records)
    logger.debug("Encoded CSV | rows=%d", len(rows) - 1)
    return CSV_ROW_SEPARATOR.join(rows)

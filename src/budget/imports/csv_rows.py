#!/usr/bin/env python3
"""
CSV Row Reader

Reads untrusted CSV text into plain string rows with pandas. Every cell stays
a string (no numeric or NA coercion) and malformed lines are reported instead
of aborting the whole document.
"""

import io
import logging
from dataclasses import dataclass, field

import pandas as pd

logger = logging.getLogger(__name__)


@dataclass
class CsvRows:
    """Header-keyed rows plus any problems found while tokenizing."""

    headers: list[str] = field(default_factory=list)
    rows: list[dict[str, str]] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)


def read_csv_rows(raw_text: str) -> CsvRows:
    """
    Parse CSV text into rows keyed by trimmed header names.

    Blank lines are skipped. Lines with more fields than the header are dropped
    and reported in errors; short lines are padded with empty strings.

    Args:
        raw_text: Entire CSV document

    Returns:
        CsvRows (never raises for malformed content)
    """
    result = CsvRows()
    if not raw_text.strip():
        return result

    def on_bad_line(fields: list[str]) -> None:
        result.errors.append(f"Malformed row with {len(fields)} fields: {','.join(fields)[:80]}")
        return None

    try:
        df = pd.read_csv(
            io.StringIO(raw_text.lstrip("\ufeff")),
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
            engine="python",
            on_bad_lines=on_bad_line,
        )
    except (pd.errors.ParserError, pd.errors.EmptyDataError) as e:
        logger.warning("Could not tokenize CSV: %s", e)
        result.errors.append(f"Parse error: {e}")
        return result

    df = df.fillna("")
    df.columns = [str(column).strip() for column in df.columns]
    result.headers = list(df.columns)
    result.rows = df.to_dict(orient="records")

    logger.debug("Read %d CSV rows with headers %s", len(result.rows), result.headers)
    return result

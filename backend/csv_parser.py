"""Parse an uploaded crawl export into raw rows.

Headers are trimmed, lower-cased and have whitespace runs replaced by "_", so
"Meta Description 1" becomes "meta_description_1". Column types are inferred;
blank cells come back as None.
"""

import io
import logging
import re

import pandas as pd

from errors import InputError
from models import RawRow

logger = logging.getLogger(__name__)

_WHITESPACE_RE = re.compile(r"\s+")


def normalize_header(header: object) -> str:
    return _WHITESPACE_RE.sub("_", str(header).strip().lower())


def decode_upload(raw_bytes: bytes) -> str:
    return raw_bytes.decode("utf-8-sig", errors="replace")


def parse_crawl_csv(csv_text: str) -> list[RawRow]:
    """
    Return one dict per non-empty CSV line. Raises InputError if nothing is parseable.

    Cells are only treated as missing when blank, so a page titled "None" or
    "N/A" keeps its title. Rows with more fields than the header are kept and
    the extra fields dropped.
    """
    if not csv_text or not csv_text.strip():
        raise InputError("The uploaded file is empty.")

    try:
        width = len(pd.read_csv(io.StringIO(csv_text), nrows=0, engine="python").columns)

        def keep_ragged_row(fields: list[str]) -> list[str]:
            logger.warning("CSV row has %d fields, expected %d; extra fields dropped", len(fields), width)
            return fields[:width]

        df = pd.read_csv(
            io.StringIO(csv_text),
            engine="python",
            index_col=False,
            keep_default_na=False,
            na_values=[""],
            skip_blank_lines=True,
            on_bad_lines=keep_ragged_row,
        )
    except pd.errors.EmptyDataError as e:
        raise InputError("The uploaded file has no CSV header.") from e
    except pd.errors.ParserError as e:
        raise InputError(f"Could not parse CSV: {e}") from e

    df = df.rename(columns=normalize_header).dropna(how="all")
    rows = df.astype(object).where(df.notna(), None).to_dict(orient="records")
    logger.info("Parsed %d pages from crawl (%d columns)", len(rows), len(df.columns))
    return rows

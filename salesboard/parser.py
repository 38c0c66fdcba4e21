"""
Turn raw CSV text into loosely-typed row records.

Splitting is a bare comma split: quoted fields containing commas are
mis-split. Values are trimmed and paired with header names by position.
"""

from __future__ import annotations

import logging
from typing import Dict, List

from charset_normalizer import from_bytes

from .errors import EmptySourceError
from .rules import DELIMITER, SOURCE_ENCODING

logger = logging.getLogger(__name__)

RawRecord = Dict[str, str]


def decode_source(raw: bytes) -> str:
    """
    Decode uploaded bytes to text.

    Rules:
    - Detect encoding best-effort via charset-normalizer.
    - A UTF-8 BOM is stripped.
    - If decode fails, try UTF-8, then UTF-8 with replacement characters.
    """
    match = from_bytes(raw).best()
    decode_used = match.encoding if match is not None else SOURCE_ENCODING

    if raw.startswith(b"\xef\xbb\xbf") and decode_used.lower().replace("-", "_") in ("utf_8", "utf8"):
        decode_used = "utf-8-sig"

    try:
        return raw.decode(decode_used)
    except (UnicodeDecodeError, LookupError):
        logger.warning("Could not decode source as %s, falling back to utf-8", decode_used)

    try:
        return raw.decode("utf-8-sig")
    except UnicodeDecodeError:
        return raw.decode("utf-8-sig", errors="replace")


def _split_line(line: str) -> List[str]:
    return [value.strip() for value in line.split(DELIMITER)]


def parse(text: str) -> List[RawRecord]:
    """
    Parse CSV text whose first line is the header.

    Missing trailing fields map to ``""``; surplus values are ignored.
    Raises EmptySourceError when nothing is left after trimming.
    """
    text = text.replace("\r\n", "\n").replace("\r", "\n").strip()
    if not text:
        raise EmptySourceError("CSV source is empty")

    lines = text.split("\n")
    headers = _split_line(lines[0])

    records: List[RawRecord] = []
    for line in lines[1:]:
        values = _split_line(line)
        records.append({h: (values[i] if i < len(values) else "") for i, h in enumerate(headers)})

    logger.debug("Parsed %d rows with header %s", len(records), headers)
    return records

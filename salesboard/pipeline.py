"""
Run parse -> clean -> aggregate over one source and return every stage's
output as a single value.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Tuple, Union

from .aggregator import aggregate, top_products
from .cleaner import CleanSet, clean
from .errors import SourceUnavailableError
from .models import AnalysisResponse, KPISummary, ProductRevenue, RowCounts
from .parser import RawRecord, decode_source, parse
from .rules import DEFAULT_PREVIEW_ROWS, DEFAULT_TOP_N

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PipelineResult:
    raw_rows: Tuple[RawRecord, ...]
    records: CleanSet
    summary: KPISummary

    @property
    def counts(self) -> RowCounts:
        return RowCounts(raw=len(self.raw_rows), clean=len(self.records))

    def to_response(self, top_n: int = DEFAULT_TOP_N, preview_rows: int = DEFAULT_PREVIEW_ROWS) -> AnalysisResponse:
        ranked = top_products(self.summary.by_product, top_n)
        return AnalysisResponse(
            counts=self.counts,
            summary=self.summary,
            top_products=[ProductRevenue(product=p, revenue=r) for p, r in ranked],
            raw_preview=list(self.raw_rows[:preview_rows]),
            clean_preview=list(self.records[:preview_rows]),
        )


def run_pipeline(text: str) -> PipelineResult:
    raw_rows = tuple(parse(text))
    records = clean(raw_rows)
    summary = aggregate(records)
    result = PipelineResult(raw_rows=raw_rows, records=records, summary=summary)
    logger.info("Raw rows: %d | Clean rows: %d", result.counts.raw, result.counts.clean)
    return result


def load_source(path: Union[str, Path]) -> str:
    """
    Read and decode the source file.

    Raises SourceUnavailableError when the file is missing or unreadable.
    """
    source = Path(path)
    try:
        raw = source.read_bytes()
    except OSError as exc:
        logger.warning("Cannot read source %s: %s", source, exc)
        raise SourceUnavailableError(f"Cannot read CSV source: {source}") from exc
    return decode_source(raw)


def run_file(path: Union[str, Path]) -> PipelineResult:
    return run_pipeline(load_source(path))

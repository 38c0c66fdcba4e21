import logging

from fastapi import FastAPI, UploadFile, File, HTTPException
from fastapi.responses import PlainTextResponse

from .config import get_settings
from .errors import EmptySourceError, SourceUnavailableError
from .exporter import to_csv
from .models import AnalysisResponse, HealthResponse
from .parser import decode_source
from .pipeline import PipelineResult, run_file, run_pipeline

logger = logging.getLogger(__name__)


def _configure_logging() -> None:
    """
    Configure root logging once for the API process.
    """

    logging.basicConfig(
        level=getattr(logging, get_settings().log_level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


_configure_logging()

app = FastAPI(
    title="salesboard",
    description="Sales CSV cleaning and KPI aggregation for dashboards",
    version="0.1.0",
)


async def _run_upload(file: UploadFile) -> PipelineResult:
    if not (file.filename or "").lower().endswith(".csv"):
        raise HTTPException(status_code=422, detail="Only CSV files are supported")

    raw = await file.read()
    try:
        return run_pipeline(decode_source(raw))
    except EmptySourceError as exc:
        logger.warning("Rejected upload %s: %s", file.filename, exc)
        raise HTTPException(status_code=422, detail=str(exc))


def _respond(result: PipelineResult) -> AnalysisResponse:
    settings = get_settings()
    return result.to_response(top_n=settings.top_n, preview_rows=settings.preview_rows)


@app.get("/health", response_model=HealthResponse)
def health():
    return {"ok": True}


@app.post("/analyze", response_model=AnalysisResponse)
async def analyze_csv(file: UploadFile = File(...)):
    return _respond(await _run_upload(file))


@app.get("/report", response_model=AnalysisResponse)
def report():
    source_path = get_settings().source_path
    try:
        result = run_file(source_path)
    except SourceUnavailableError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    except EmptySourceError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    return _respond(result)


@app.post("/export", response_class=PlainTextResponse)
async def export_csv(file: UploadFile = File(...)):
    result = await _run_upload(file)
    return PlainTextResponse(
        to_csv(result.records),
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="ventas_clean.csv"'},
    )

"""
Calculation API — quantity takeoff, segment import and report downloads.

The engine never raises for bad items: item failures come back in
``errors`` next to whatever the valid items produced.
"""
import logging
from typing import List

from fastapi import APIRouter, File, HTTPException, Query, Request, UploadFile
from fastapi.responses import FileResponse
from pydantic import BaseModel, Field

from tablayeso.models.item_schema import BillLine, CalculationRequest, CalculationResult, ItemSpec
from tablayeso.models.materials import ItemKind
from tablayeso.services.quantity_engine import QuantityEngine, describe_item
from tablayeso.services.report_engine import ReportEngine, ReportError
from tablayeso.services.segment_import import SUPPORTED_EXTENSIONS, SegmentImportError, import_segments

router = APIRouter(prefix="/api/v1", tags=["Calculations"])
logger = logging.getLogger("tablayeso-api")

_ENGINE = QuantityEngine()

MAX_UPLOAD_BYTES = 10 * 1024 * 1024

REPORT_MEDIA_TYPES = {
    "pdf": "application/pdf",
    "excel": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
}


class ItemSummary(BaseModel):
    number: int
    kind: ItemKind
    lines: List[str]


class CalculationResponse(BaseModel):
    work_area: str = ""
    materials: List[BillLine] = Field(default_factory=list)
    item_specs: List[ItemSpec] = Field(default_factory=list)
    item_summaries: List[ItemSummary] = Field(default_factory=list)
    errors: List[str] = Field(default_factory=list)


class SegmentImportResponse(BaseModel):
    kind: ItemKind
    segments: List[dict] = Field(default_factory=list)
    skipped_rows: List[str] = Field(default_factory=list)


def _note_calculation(request: Request, item_count: int, result: CalculationResult) -> None:
    """Leave the run outline on request.state for the request log line."""
    request.state.work_area = result.work_area
    request.state.item_count = item_count
    request.state.error_count = len(result.errors)
    request.state.material_count = len(result.bill_of_materials)


def _to_response(result: CalculationResult) -> CalculationResponse:
    return CalculationResponse(
        work_area=result.work_area,
        materials=result.sorted_lines(),
        item_specs=result.item_specs,
        item_summaries=[
            ItemSummary(number=spec.number, kind=spec.kind, lines=describe_item(spec))
            for spec in result.item_specs
        ],
        errors=result.errors,
    )


@router.post("/calculations", response_model=CalculationResponse)
async def create_calculation(payload: CalculationRequest, request: Request):
    """Run the takeoff over every item and return the bill of materials."""
    result = _ENGINE.calculate(payload.items, work_area=payload.work_area)
    _note_calculation(request, len(payload.items), result)
    return _to_response(result)


@router.post("/segments/import", response_model=SegmentImportResponse)
async def import_segment_sheet(
    kind: ItemKind = Query(..., description="wall | ceiling | trim"),
    file: UploadFile = File(...),
):
    """Read segments for one item from an .xlsx/.xls/.csv sheet."""
    filename = file.filename or ""
    if not filename.lower().endswith(SUPPORTED_EXTENSIONS):
        raise HTTPException(status_code=400, detail="Upload Excel (.xlsx/.xls) or CSV file")

    try:
        contents = await file.read()
    except Exception as e:
        raise HTTPException(status_code=400, detail=f"Failed to read uploaded file: {e}")

    if len(contents) > MAX_UPLOAD_BYTES:
        raise HTTPException(status_code=400, detail="File too large (max 10MB)")

    try:
        imported = import_segments(contents, kind, filename=filename)
    except SegmentImportError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return SegmentImportResponse(
        kind=kind,
        segments=[seg.model_dump() for seg in imported.segments],
        skipped_rows=imported.skipped_rows,
    )


@router.post("/reports/{fmt}")
async def download_report(fmt: str, payload: CalculationRequest, request: Request):
    """Calculate ``payload`` and return it rendered as a PDF or Excel file."""
    if fmt not in REPORT_MEDIA_TYPES:
        raise HTTPException(status_code=404, detail=f"Unknown report format '{fmt}' (pdf | excel)")

    result = _ENGINE.calculate(payload.items, work_area=payload.work_area)
    _note_calculation(request, len(payload.items), result)
    engine = ReportEngine()
    try:
        path = engine.generate_pdf(result) if fmt == "pdf" else engine.generate_excel(result)
    except ReportError as e:
        logger.warning(f"Report not generated: {e}")
        raise HTTPException(status_code=422, detail={"message": str(e), "errors": result.errors})

    return FileResponse(path, media_type=REPORT_MEDIA_TYPES[fmt], filename=path.rsplit("/", 1)[-1])

"""
Segment Import — reads item segments from an uploaded spreadsheet.

The first sheet of an .xlsx/.xls workbook (or a .csv file) must carry a
header row naming the dimension columns of the item kind:

    wall     → Ancho, Alto
    ceiling  → Ancho, Largo
    trim     → Largo, Ancho, Alto

Headers are matched case-insensitively after trimming. Rows whose
dimensions are missing, non-numeric or not positive are skipped and
reported by spreadsheet row number; blank rows are ignored.
"""
import io
import logging
import os
from dataclasses import dataclass, field
from typing import Dict, List, Tuple, Union

import pandas as pd

from tablayeso import config
from tablayeso.models.item_schema import CeilingSegmentIn, TrimSegmentIn, WallSegmentIn
from tablayeso.models.materials import ItemKind

logger = logging.getLogger("tablayeso-import")

SUPPORTED_EXTENSIONS = (".xlsx", ".xls", ".csv")

# column header → segment field, per item kind
KIND_COLUMNS: Dict[ItemKind, Tuple[Tuple[str, str], ...]] = {
    ItemKind.WALL: (("ancho", "width"), ("alto", "height")),
    ItemKind.CEILING: (("ancho", "width"), ("largo", "length")),
    ItemKind.TRIM: (("largo", "length"), ("ancho", "width"), ("alto", "height")),
}

SEGMENT_MODELS = {
    ItemKind.WALL: WallSegmentIn,
    ItemKind.CEILING: CeilingSegmentIn,
    ItemKind.TRIM: TrimSegmentIn,
}


class SegmentImportError(ValueError):
    """The file cannot be read as a segment sheet for the requested item kind."""


@dataclass
class SegmentImportResult:
    segments: list = field(default_factory=list)
    skipped_rows: List[str] = field(default_factory=list)


def _read_frame(source: Union[str, bytes], filename: str) -> pd.DataFrame:
    ext = os.path.splitext(filename.lower())[1]
    if ext not in SUPPORTED_EXTENSIONS:
        raise SegmentImportError(
            f"Formato no soportado: '{ext or filename}'. Use .xlsx, .xls o .csv"
        )
    buffer = io.BytesIO(source) if isinstance(source, bytes) else source
    try:
        if ext == ".csv":
            return pd.read_csv(buffer)
        return pd.read_excel(buffer, sheet_name=0)
    except Exception as e:
        raise SegmentImportError(f"No se pudo leer el archivo: {e}") from e


def _cell_number(value) -> float:
    number = pd.to_numeric(pd.Series([value]), errors="coerce").iloc[0]
    return float(number)


def import_segments(
    source: Union[str, bytes],
    kind: Union[ItemKind, str],
    filename: str = "",
) -> SegmentImportResult:
    """
    Parse ``source`` (a path, or raw file bytes together with ``filename``)
    into segment input records for ``kind``.

    Raises SegmentImportError when the extension is unsupported, the sheet
    is empty or a required header is missing.
    """
    try:
        kind = ItemKind(kind)
    except ValueError:
        raise SegmentImportError(f"Tipo de ítem desconocido: '{kind}'")
    if not filename and isinstance(source, str):
        filename = source

    df = _read_frame(source, filename)
    if df.empty and len(df.columns) == 0:
        raise SegmentImportError("La hoja está vacía.")

    columns = {str(c).strip().lower(): c for c in df.columns}
    wanted = KIND_COLUMNS[kind]
    missing = [header.capitalize() for header, _ in wanted if header not in columns]
    if missing:
        raise SegmentImportError(f"Faltan encabezados: {', '.join(missing)}")

    df = df.dropna(how="all")
    if df.empty:
        raise SegmentImportError("La hoja está vacía.")
    if len(df) > config.MAX_IMPORT_ROWS:
        raise SegmentImportError(
            f"Demasiadas filas ({len(df)}); el máximo es {config.MAX_IMPORT_ROWS}."
        )

    model = SEGMENT_MODELS[kind]
    result = SegmentImportResult()
    for index, row in df.iterrows():
        # header is spreadsheet row 1, data starts on row 2
        row_number = int(index) + 2
        values = {}
        invalid = []
        for header, field_name in wanted:
            number = _cell_number(row[columns[header]])
            if not number > 0:
                invalid.append(header.capitalize())
            values[field_name] = number
        if invalid:
            result.skipped_rows.append(
                f"Fila {row_number}: {', '.join(invalid)} debe ser un número > 0"
            )
            continue
        result.segments.append(model(**values))

    logger.info(
        "Imported %d %s segments from %s (%d rows skipped)",
        len(result.segments), kind.value, filename or "upload", len(result.skipped_rows),
    )
    return result

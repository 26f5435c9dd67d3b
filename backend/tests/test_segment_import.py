"""
test_segment_import.py — reading item segments from spreadsheets.
"""

import io

import pandas as pd
import pytest

from tablayeso import config
from tablayeso.models.item_schema import CeilingSegmentIn, TrimSegmentIn, WallSegmentIn
from tablayeso.models.materials import ItemKind
from tablayeso.services.segment_import import SegmentImportError, import_segments


def _xlsx_bytes(frame: pd.DataFrame) -> bytes:
    buffer = io.BytesIO()
    frame.to_excel(buffer, index=False, engine="openpyxl")
    return buffer.getvalue()


class TestCsv:

    def test_wall_rows(self):
        content = b"Ancho,Alto\n3,2.4\n1.5,2\n"
        result = import_segments(content, ItemKind.WALL, filename="muro.csv")
        assert result.skipped_rows == []
        assert result.segments == [
            WallSegmentIn(width=3.0, height=2.4),
            WallSegmentIn(width=1.5, height=2.0),
        ]

    def test_headers_matched_case_insensitively(self):
        content = b" LARGO ,ancho\n2,3\n"
        result = import_segments(content, "ceiling", filename="cielo.csv")
        assert result.segments == [CeilingSegmentIn(width=3.0, length=2.0)]

    def test_invalid_rows_skipped_with_row_number(self):
        content = b"Ancho,Alto\n3,2.4\n0,2\nabc,1\n1.5,-2\n"
        result = import_segments(content, ItemKind.WALL, filename="muro.csv")
        assert len(result.segments) == 1
        assert result.skipped_rows == [
            "Fila 3: Ancho debe ser un número > 0",
            "Fila 4: Ancho debe ser un número > 0",
            "Fila 5: Alto debe ser un número > 0",
        ]

    def test_extra_columns_ignored(self):
        content = b"Nota,Ancho,Alto\nesquina,3,2.4\n"
        result = import_segments(content, ItemKind.WALL, filename="muro.csv")
        assert result.segments == [WallSegmentIn(width=3.0, height=2.4)]


class TestExcel:

    def test_trim_sheet(self):
        frame = pd.DataFrame({"Largo": [2.0, 3.0], "Ancho": [0.3, 0.4], "Alto": [0.4, 0.5]})
        result = import_segments(_xlsx_bytes(frame), ItemKind.TRIM, filename="cenefa.xlsx")
        assert result.segments == [
            TrimSegmentIn(length=2.0, width=0.3, height=0.4),
            TrimSegmentIn(length=3.0, width=0.4, height=0.5),
        ]

    def test_missing_cell_skipped(self):
        frame = pd.DataFrame({"Ancho": [3.0, None], "Largo": [2.0, 4.0]})
        result = import_segments(_xlsx_bytes(frame), ItemKind.CEILING, filename="cielo.xlsx")
        assert len(result.segments) == 1
        assert result.skipped_rows == ["Fila 3: Ancho debe ser un número > 0"]

    def test_read_from_path(self, tmp_path):
        path = tmp_path / "muro.xlsx"
        path.write_bytes(_xlsx_bytes(pd.DataFrame({"Ancho": [2.0], "Alto": [2.5]})))
        result = import_segments(str(path), ItemKind.WALL)
        assert result.segments == [WallSegmentIn(width=2.0, height=2.5)]


class TestErrors:

    def test_missing_header(self):
        with pytest.raises(SegmentImportError, match="Alto"):
            import_segments(b"Ancho,Largo\n3,2\n", ItemKind.WALL, filename="muro.csv")

    def test_header_only_sheet_is_empty(self):
        with pytest.raises(SegmentImportError, match="vacía"):
            import_segments(b"Ancho,Alto\n", ItemKind.WALL, filename="muro.csv")

    def test_unsupported_extension(self):
        with pytest.raises(SegmentImportError, match="Formato no soportado"):
            import_segments(b"Ancho,Alto\n3,2\n", ItemKind.WALL, filename="muro.txt")

    def test_unknown_kind(self):
        with pytest.raises(SegmentImportError):
            import_segments(b"Ancho,Alto\n3,2\n", "escalera", filename="muro.csv")

    def test_row_limit(self, monkeypatch):
        monkeypatch.setattr(config, "MAX_IMPORT_ROWS", 2)
        content = b"Ancho,Alto\n1,1\n2,2\n3,3\n"
        with pytest.raises(SegmentImportError, match="Demasiadas filas"):
            import_segments(content, ItemKind.WALL, filename="muro.csv")

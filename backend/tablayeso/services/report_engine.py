"""
Report Engine — renders a calculation result as a PDF summary or an Excel sheet.

Outputs:
  - Materials summary PDF (A4: header, work area, item details, materials table)
  - Materials workbook (single sheet "CalculoMateriales": item detail table
    followed by the materials table)

Reports only present the quantities already in the result; nothing is
recalculated here. All outputs are saved to DOWNLOAD_DIR and the path is
returned for FileResponse.
"""
import logging
import os
import uuid
from datetime import datetime
from typing import List, Optional

from tablayeso import config
from tablayeso.models.item_schema import CalculationResult, ItemSpec
from tablayeso.models.materials import ITEM_KIND_NAMES, ItemKind
from tablayeso.services.quantity_engine import describe_item

logger = logging.getLogger("tablayeso-report")

REPORT_TITLE = "Resumen de Materiales Tablayeso"
WORKBOOK_TITLE = "Calculadora de Materiales Tablayeso"
SHEET_NAME = "CalculoMateriales"
FOOTER_TEXT = "Calculadora de Materiales Tablayeso v2.0"

# RGB 0-1
PRIMARY_RGB = (0.33, 0.42, 0.18)      # olive
SECONDARY_RGB = (0.50, 0.50, 0.0)
DARK_GRAY_RGB = (0.2, 0.2, 0.2)
MEDIUM_GRAY_RGB = (0.4, 0.4, 0.4)
LIGHT_GRAY_RGB = (0.88, 0.88, 0.88)
EXTRA_LIGHT_GRAY_RGB = (0.97, 0.97, 0.97)

ITEM_TABLE_HEADERS = [
    "Tipo de Ítem", "Número de Ítem", "Detalle / Segmento",
    "Nº Caras", "Panel Cara 1", "Panel Cara 2", "Espaciamiento Postes (m)",
    "Estructura Doble", "Tipo de Panel", "Pleno (m)", "Descuento Angular (m)",
    "Orientación", "Nº Lados", "Espaciamiento Canal Listón (m)",
    "Suma Perímetros (m)", "Ancho Total (m)", "Área Total (m²)",
    "Suma Largo (m)", "Suma Ancho (m)", "Suma Alto (m)", "Área Total Panel (m²)",
]


class ReportError(RuntimeError):
    """A report could not be produced for the given result."""


def _fmt_date() -> str:
    return datetime.now().strftime("%d/%m/%Y")


def _report_filename(extension: str) -> str:
    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    return f"Calculo_Materiales_{stamp}_{uuid.uuid4().hex[:6]}.{extension}"


# ── PDF helpers ───────────────────────────────────────────────────────────────

def _draw_footer(c, page_w, page_num: int):
    from reportlab.lib.units import cm
    c.setFillColorRGB(*MEDIUM_GRAY_RGB)
    c.setFont("Helvetica", 8)
    c.drawCentredString(page_w / 2, 1.0*cm, FOOTER_TEXT)
    c.drawRightString(page_w - 1.4*cm, 1.0*cm, f"Página {page_num}")


def _new_page(c, page_w, page_h) -> float:
    from reportlab.lib.units import cm
    c.showPage()
    _draw_footer(c, page_w, c.getPageNumber())
    return page_h - 2*cm


def _item_row(spec: ItemSpec, detail: str) -> List:
    """One row of the item detail table; kind-specific columns stay blank for other kinds."""
    row = [""] * len(ITEM_TABLE_HEADERS)
    row[0] = ITEM_KIND_NAMES[spec.kind]
    row[1] = spec.number
    row[2] = detail
    if spec.kind is ItemKind.WALL:
        row[3] = spec.faces
        row[4] = spec.face1_panel_type or ""
        row[5] = spec.face2_panel_type or ""
        row[6] = spec.post_spacing
        row[7] = "Sí" if spec.double_structure else "No"
        row[15] = round(spec.total_width, 2)
        row[16] = round(spec.total_area, 2)
    elif spec.kind is ItemKind.CEILING:
        row[8] = spec.panel_type or ""
        row[9] = spec.plenum
        row[10] = spec.angular_deduction
        row[14] = round(spec.total_perimeter, 2)
        row[16] = round(spec.total_area, 2)
    else:
        row[8] = spec.panel_type or ""
        row[11] = spec.orientation or ""
        row[12] = spec.sides
        row[13] = spec.furring_spacing
        row[17] = round(spec.total_length_sum, 2)
        row[18] = round(spec.total_width_sum, 2)
        row[19] = round(spec.total_height_sum, 2)
        row[20] = round(spec.total_panel_area, 2)
    return row


def _segment_detail(spec: ItemSpec, seg) -> str:
    if spec.kind is ItemKind.WALL:
        return f"- Seg {seg.number}: {seg.width:.2f}m x {seg.height:.2f}m"
    if spec.kind is ItemKind.CEILING:
        return f"- Seg {seg.number}: {seg.width:.2f}m x {seg.length:.2f}m"
    return f"- Seg {seg.number}: {seg.length:.2f}m x {seg.width:.2f}m x {seg.height:.2f}m"


class ReportEngine:

    def __init__(self, download_dir: Optional[str] = None):
        self.download_dir = download_dir or config.DOWNLOAD_DIR

    def _ensure_dir(self):
        os.makedirs(self.download_dir, exist_ok=True)

    def _check(self, result: CalculationResult):
        if not result.has_materials:
            raise ReportError("No hay materiales calculados para exportar.")

    # ── Materials summary PDF ─────────────────────────────────────────────────

    def generate_pdf(self, result: CalculationResult) -> str:
        """Render ``result`` as a PDF and return the written path."""
        self._check(result)
        self._ensure_dir()
        path = os.path.join(self.download_dir, _report_filename("pdf"))
        try:
            from reportlab.pdfgen import canvas as rl_canvas
            from reportlab.lib.pagesizes import A4
            from reportlab.lib.units import cm

            page_w, page_h = A4
            c = rl_canvas.Canvas(path, pagesize=A4)
            c.setTitle(REPORT_TITLE)
            _draw_footer(c, page_w, 1)

            y = page_h - 2*cm
            c.setFillColorRGB(*PRIMARY_RGB)
            c.setFont("Helvetica-Bold", 18)
            c.drawString(1.4*cm, y, REPORT_TITLE)
            y -= 0.7*cm
            c.setFillColorRGB(*MEDIUM_GRAY_RGB)
            c.setFont("Helvetica", 10)
            c.drawString(1.4*cm, y, f"Fecha del cálculo: {_fmt_date()}")
            if result.work_area:
                y -= 0.5*cm
                c.drawString(1.4*cm, y, f"Área de Trabajo: {result.work_area}")

            # Item details
            if result.item_specs:
                y -= 1.0*cm
                c.setFillColorRGB(*SECONDARY_RGB)
                c.setFont("Helvetica-Bold", 14)
                c.drawString(1.4*cm, y, "Detalle de Ítems Calculados:")
                y -= 0.4*cm
                for spec in result.item_specs:
                    if y < 3*cm:
                        y = _new_page(c, page_w, page_h)
                    y -= 0.5*cm
                    c.setFillColorRGB(*PRIMARY_RGB)
                    c.setFont("Helvetica-Bold", 10)
                    c.drawString(1.4*cm, y, f"{ITEM_KIND_NAMES[spec.kind]} #{spec.number}:")
                    c.setFillColorRGB(*DARK_GRAY_RGB)
                    c.setFont("Helvetica", 9)
                    for line in describe_item(spec):
                        y -= 0.45*cm
                        if y < 2*cm:
                            y = _new_page(c, page_w, page_h)
                            c.setFillColorRGB(*DARK_GRAY_RGB)
                            c.setFont("Helvetica", 9)
                        indent = 2.4*cm if line.startswith("- ") else 2.0*cm
                        c.drawString(indent, y, line)
                    y -= 0.3*cm

            # Materials table
            y -= 0.8*cm
            if y < 5*cm:
                y = _new_page(c, page_w, page_h)
            c.setFillColorRGB(*SECONDARY_RGB)
            c.setFont("Helvetica-Bold", 14)
            c.drawString(1.4*cm, y, "Materiales Totales:")
            y -= 0.8*cm

            c.setFillColorRGB(*LIGHT_GRAY_RGB)
            c.rect(1.4*cm, y - 0.15*cm, page_w - 2.8*cm, 0.6*cm, fill=1, stroke=0)
            c.setFillColorRGB(*DARK_GRAY_RGB)
            c.setFont("Helvetica-Bold", 10)
            c.drawString(1.7*cm, y, "Material")
            c.drawRightString(page_w - 5*cm, y, "Cantidad")
            c.drawCentredString(page_w - 3*cm, y, "Unidad")
            y -= 0.6*cm

            for i, line in enumerate(result.sorted_lines()):
                if y < 2*cm:
                    y = _new_page(c, page_w, page_h)
                if i % 2:
                    c.setFillColorRGB(*EXTRA_LIGHT_GRAY_RGB)
                    c.rect(1.4*cm, y - 0.15*cm, page_w - 2.8*cm, 0.5*cm, fill=1, stroke=0)
                c.setFillColorRGB(*DARK_GRAY_RGB)
                c.setFont("Helvetica", 9)
                c.drawString(1.7*cm, y, line.material)
                c.setFillColorRGB(*PRIMARY_RGB)
                c.setFont("Helvetica-Bold", 9)
                c.drawRightString(page_w - 5*cm, y, str(line.quantity))
                c.setFillColorRGB(*DARK_GRAY_RGB)
                c.setFont("Helvetica", 9)
                c.drawCentredString(page_w - 3*cm, y, line.unit)
                y -= 0.5*cm

            # Errors of excluded items
            if result.errors:
                y -= 0.6*cm
                if y < 3*cm:
                    y = _new_page(c, page_w, page_h)
                c.setFillColorRGB(0.6, 0.1, 0.1)
                c.setFont("Helvetica-Bold", 11)
                c.drawString(1.4*cm, y, "Ítems excluidos por errores:")
                c.setFont("Helvetica", 8)
                for message in result.errors:
                    y -= 0.45*cm
                    if y < 2*cm:
                        y = _new_page(c, page_w, page_h)
                        c.setFillColorRGB(0.6, 0.1, 0.1)
                        c.setFont("Helvetica", 8)
                    c.drawString(2.0*cm, y, message[:120])

            c.save()
        except Exception as e:
            logger.error(f"Materials PDF generation failed: {e}", exc_info=True)
            raise ReportError(f"No se pudo generar el PDF: {e}") from e

        logger.info(f"Materials PDF generated: {path}")
        return path

    # ── Materials workbook ────────────────────────────────────────────────────

    def generate_excel(self, result: CalculationResult) -> str:
        """Render ``result`` as an .xlsx workbook and return the written path."""
        self._check(result)
        self._ensure_dir()
        path = os.path.join(self.download_dir, _report_filename("xlsx"))
        try:
            import xlsxwriter

            wb = xlsxwriter.Workbook(path)

            # Formats
            title_fmt = wb.add_format({"bold": True, "font_size": 14, "font_color": "#556B2F"})
            section_fmt = wb.add_format({"bold": True, "font_size": 11, "font_color": "#808000"})
            hdr = wb.add_format({"bold": True, "bg_color": "#E0E0E0", "font_color": "#333333",
                                 "border": 1, "font_size": 10, "text_wrap": True})
            normal = wb.add_format({"border": 1, "font_size": 9})
            qty_fmt = wb.add_format({"border": 1, "bold": True, "font_color": "#556B2F",
                                     "num_format": "#,##0"})
            error_fmt = wb.add_format({"italic": True, "font_color": "#991A1A", "font_size": 9})

            ws = wb.add_worksheet(SHEET_NAME)
            ws.set_column("A:B", 14)
            ws.set_column("C:C", 36)
            ws.set_column(3, len(ITEM_TABLE_HEADERS) - 1, 14)

            ws.write(0, 0, WORKBOOK_TITLE, title_fmt)
            ws.write(1, 0, f"Fecha del cálculo: {_fmt_date()}")
            row = 2
            if result.work_area:
                ws.write(row, 0, f"Área de Trabajo: {result.work_area}")
                row += 1
            row += 1

            # ── Item detail table ────────────────────────────────────────────
            ws.write(row, 0, "Detalle de Ítems Calculados:", section_fmt)
            row += 1
            ws.write_row(row, 0, ITEM_TABLE_HEADERS, hdr)
            row += 1
            for spec in result.item_specs:
                ws.write_row(row, 0, _item_row(spec, "Opciones:"), normal)
                row += 1
                for seg in spec.segments:
                    ws.write_row(row, 0, [ITEM_KIND_NAMES[spec.kind], spec.number,
                                          _segment_detail(spec, seg)], normal)
                    row += 1
            row += 1

            # ── Materials table ──────────────────────────────────────────────
            ws.write(row, 0, "Materiales Totales:", section_fmt)
            row += 1
            ws.write_row(row, 0, ["Material", "Cantidad", "Unidad"], hdr)
            row += 1
            for line in result.sorted_lines():
                ws.write(row, 0, line.material, normal)
                ws.write(row, 1, line.quantity, qty_fmt)
                ws.write(row, 2, line.unit, normal)
                row += 1

            if result.errors:
                row += 1
                ws.write(row, 0, "Ítems excluidos por errores:", section_fmt)
                for message in result.errors:
                    row += 1
                    ws.write(row, 0, message, error_fmt)

            wb.close()
        except Exception as e:
            logger.error(f"Materials Excel generation failed: {e}", exc_info=True)
            raise ReportError(f"No se pudo generar el Excel: {e}") from e

        logger.info(f"Materials Excel generated: {path}")
        return path

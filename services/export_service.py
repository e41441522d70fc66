"""
Export service - Excel workbooks for reports.
"""

from datetime import date
from io import BytesIO
from typing import Optional

from openpyxl import Workbook
from openpyxl.styles import Font, Border, Side
import structlog

from models.report import ConversionHistoryItem

logger = structlog.get_logger(__name__)

CONVERSION_HISTORY_HEADERS = [
    "Date",
    "Location",
    "Product",
    "Color",
    "Boxes",
    "Expected Pairs",
    "Actual Pairs",
    "Status",
]


class ExportService:
    """Service for generating report files."""

    def conversion_history_excel(
        self,
        rows: list[ConversionHistoryItem],
        generated_on: Optional[date] = None,
    ) -> BytesIO:
        """
        Generate the conversion history workbook.

        Layout: title row, generation date, header row at row 4, one row
        per batch, then a TOTAL row summing boxes and expected pairs.

        Args:
            rows: Conversion history items
            generated_on: Date printed in the header (defaults to today)

        Returns:
            BytesIO containing the Excel file
        """
        generated_on = generated_on or date.today()

        logger.info("generating_conversion_history_excel", rows=len(rows))

        wb = Workbook()
        ws = wb.active
        ws.title = "Conversion History"

        bold_font = Font(bold=True)
        thin_border = Border(bottom=Side(style="thin", color="000000"))

        for column, width in zip("ABCDEFGH", (12, 22, 30, 16, 8, 15, 13, 15)):
            ws.column_dimensions[column].width = width

        ws["A1"] = "Box Conversion History"
        ws["A1"].font = Font(bold=True, size=14)
        ws["A2"] = "Generated:"
        ws["B2"] = generated_on.strftime("%d/%m/%Y")

        header_row = 4
        for col, header in enumerate(CONVERSION_HISTORY_HEADERS, start=1):
            cell = ws.cell(row=header_row, column=col, value=header)
            cell.font = bold_font
            cell.border = thin_border

        row_num = header_row + 1
        total_boxes = 0
        total_expected = 0

        for item in rows:
            ws.cell(row=row_num, column=1, value=item.conversion_date.strftime("%d/%m/%Y"))
            ws.cell(row=row_num, column=2, value=item.location_name)
            ws.cell(row=row_num, column=3, value=item.product_name)
            ws.cell(row=row_num, column=4, value=item.color_name)
            ws.cell(row=row_num, column=5, value=item.box_count)
            ws.cell(row=row_num, column=6, value=item.expected_pairs)
            ws.cell(row=row_num, column=7, value=item.actual_pairs)
            ws.cell(row=row_num, column=8, value=item.status)

            total_boxes += item.box_count
            total_expected += item.expected_pairs
            row_num += 1

        ws.cell(row=row_num, column=1, value="TOTAL").font = bold_font
        ws.cell(row=row_num, column=5, value=total_boxes).font = bold_font
        ws.cell(row=row_num, column=6, value=total_expected).font = bold_font

        output = BytesIO()
        wb.save(output)
        output.seek(0)

        logger.info(
            "conversion_history_excel_generated",
            rows=len(rows),
            total_boxes=total_boxes,
            total_expected_pairs=total_expected
        )
        return output


# Singleton instance
_export_service: Optional[ExportService] = None


def get_export_service() -> ExportService:
    """Get or create ExportService instance."""
    global _export_service
    if _export_service is None:
        _export_service = ExportService()
    return _export_service

from __future__ import annotations

import io
import re
from datetime import date

import pandas as pd

from voley_attendance.attendance.model import AttendanceReportRow
from voley_attendance.core.enums import Category
from voley_attendance.reports.export import ExcelReportSink, PdfReportSink
from voley_attendance.reports.service import ReportService


class FakeAttendanceRepo:
    def __init__(self, rows):
        self._rows = rows

    def get_report_rows(self, owner_id, **filters):
        return self._rows


def _report(rows):
    return ReportService(FakeAttendanceRepo(rows)).get_attendance_report(1, {})


def test_workbook_has_three_sheets():
    rows = [
        AttendanceReportRow(1, "Ana", "Ruiz", Category.SENIOR, None, date(2026, 4, 6), "Lunes", True),
        AttendanceReportRow(1, "Ana", "Ruiz", Category.SENIOR, None, date(2026, 4, 8), None, False, None),
    ]

    data = ExcelReportSink().render(_report(rows))

    sheets = pd.read_excel(io.BytesIO(data), sheet_name=None, engine="openpyxl")
    assert list(sheets) == ["Resumen", "Detalle", "Ausencias"]
    assert sheets["Resumen"].loc[0, "% Asistencia"] == "50.0%"
    assert len(sheets["Detalle"]) == 2
    assert sheets["Ausencias"].loc[0, "Motivo"] == "Sin motivo"


def test_empty_report_still_renders():
    data = ExcelReportSink().render(_report([]))

    sheets = pd.read_excel(io.BytesIO(data), sheet_name=None, engine="openpyxl")
    assert list(sheets["Resumen"].columns)[0] == "Jugador"
    assert sheets["Ausencias"].empty


def test_pdf_report_is_a_pdf_document():
    rows = [
        AttendanceReportRow(1, "Ana", "Ruiz", Category.SENIOR, None, date(2026, 4, 6), "Lunes", True),
        AttendanceReportRow(1, "Ana", "Ruiz", Category.SENIOR, None, date(2026, 4, 8), None, False, None),
        AttendanceReportRow(2, "Eva", "Sosa", Category.JUVENIL, "Líbero", date(2026, 4, 8), None, False, "viaje"),
    ]
    report = ReportService(FakeAttendanceRepo(rows)).get_attendance_report(
        1, {"from": "2026-04-01", "to": "2026-04-30", "category": "senior"}
    )

    sink = PdfReportSink()
    data = sink.render(report)

    assert data.startswith(b"%PDF")
    assert sink.mimetype == "application/pdf"
    assert sink.extension == "pdf"


def test_pdf_report_paginates_long_rosters():
    rows = [
        AttendanceReportRow(i, f"N{i}", f"L{i}", Category.CADETE, None, date(2026, 4, 8), None, False, None)
        for i in range(1, 120)
    ]

    data = PdfReportSink().render(_report(rows))

    assert data.startswith(b"%PDF")
    pages = re.search(rb"/Count (\d+)", data)
    assert pages is not None and int(pages.group(1)) >= 3

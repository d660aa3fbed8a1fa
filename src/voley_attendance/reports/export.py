from __future__ import annotations

import io
from typing import Protocol

import pandas as pd
from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas

from .service import ReportData

XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
PDF_MIMETYPE = "application/pdf"


class ReportSink(Protocol):
    """Renders a finished report into a document."""

    mimetype: str
    extension: str

    def render(self, report: ReportData) -> bytes:
        raise NotImplementedError


class ExcelReportSink:
    """Three-sheet workbook: Resumen, Detalle, Ausencias."""

    mimetype = XLSX_MIMETYPE
    extension = "xlsx"

    def render(self, report: ReportData) -> bytes:
        summary = pd.DataFrame(
            [
                {
                    "Jugador": f"{s.last_name}, {s.name}",
                    "Categoría": s.category,
                    "Posición": s.position or "-",
                    "Total": s.total,
                    "Asistió": s.attended,
                    "Faltó": s.missed,
                    "% Asistencia": f"{s.attendance_rate}%",
                }
                for s in report.summary
            ],
            columns=["Jugador", "Categoría", "Posición", "Total", "Asistió", "Faltó", "% Asistencia"],
        )
        details = pd.DataFrame(
            [
                {
                    "Fecha": d["date"],
                    "Jugador": f"{d['last_name']}, {d['name']}",
                    "Categoría": d["category"],
                    "Entrenamiento": d["training_name"] or "-",
                    "Asistió": "Sí" if d["attended"] else "No",
                    "Motivo": d["absence_reason"] or "",
                }
                for d in report.details
            ],
            columns=["Fecha", "Jugador", "Categoría", "Entrenamiento", "Asistió", "Motivo"],
        )
        absences = pd.DataFrame(
            [
                {
                    "Jugador": f"{a['last_name']}, {a['name']}",
                    "Fecha": a["date"],
                    "Motivo": a["reason"],
                }
                for a in report.absences
            ],
            columns=["Jugador", "Fecha", "Motivo"],
        )

        output = io.BytesIO()
        with pd.ExcelWriter(output, engine="openpyxl") as writer:
            summary.to_excel(writer, index=False, sheet_name="Resumen")
            details.to_excel(writer, index=False, sheet_name="Detalle")
            absences.to_excel(writer, index=False, sheet_name="Ausencias")
        return output.getvalue()


class PdfReportSink:
    """Printable summary: per-player table, then the absences grouped by player."""

    mimetype = PDF_MIMETYPE
    extension = "pdf"

    columns = (
        ("Jugador", 50),
        ("Categoría", 220),
        ("Total", 300),
        ("Asistió", 360),
        ("Faltó", 420),
        ("% Asistencia", 480),
    )

    def render(self, report: ReportData) -> bytes:
        buffer = io.BytesIO()
        c = canvas.Canvas(buffer, pagesize=A4)
        width, height = A4
        y = height - 50

        c.setFont("Helvetica-Bold", 18)
        c.drawCentredString(width / 2, y, "VoleyAssistant")
        y -= 24
        c.setFont("Helvetica-Bold", 14)
        c.drawCentredString(width / 2, y, "Reporte de Asistencia")
        y -= 22

        c.setFont("Helvetica", 10)
        period = report.period or {}
        if period.get("from") or period.get("to"):
            c.drawCentredString(
                width / 2, y, f"Período: {period.get('from') or 'Inicio'} - {period.get('to') or 'Actual'}"
            )
            y -= 14
        category = (report.filters or {}).get("category")
        if category:
            c.drawCentredString(width / 2, y, f"Categoría: {category}")
            y -= 14
        y -= 20

        c.setFont("Helvetica-Bold", 12)
        c.drawString(50, y, "Resumen por Jugador")
        y -= 20
        y = self._table_header(c, y)

        c.setFont("Helvetica", 9)
        for s in report.summary:
            if y < 50:
                c.showPage()
                y = self._table_header(c, height - 50)
                c.setFont("Helvetica", 9)
            values = (
                f"{s.last_name}, {s.name}",
                s.category,
                str(s.total),
                str(s.attended),
                str(s.missed),
                f"{s.attendance_rate}%",
            )
            for (_, x), value in zip(self.columns, values):
                c.drawString(x, y, value)
            y -= 16

        c.showPage()
        y = height - 50
        c.setFont("Helvetica-Bold", 12)
        c.drawString(50, y, "Detalle de Ausencias")
        y -= 24

        for s in report.summary:
            if not s.absences:
                continue
            if y < 70:
                c.showPage()
                y = height - 50
            c.setFont("Helvetica-Bold", 10)
            c.drawString(50, y, f"{s.last_name}, {s.name}")
            y -= 14
            c.setFont("Helvetica", 9)
            for absence in s.absences:
                if y < 50:
                    c.showPage()
                    y = height - 50
                    c.setFont("Helvetica", 9)
                c.drawString(70, y, f"- {absence['date']}: {absence['reason']}")
                y -= 12
            y -= 8

        c.save()
        return buffer.getvalue()

    def _table_header(self, c: canvas.Canvas, y: float) -> float:
        c.setFont("Helvetica-Bold", 10)
        for title, x in self.columns:
            c.drawString(x, y, title)
        return y - 18

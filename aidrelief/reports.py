import textwrap
from io import BytesIO
from typing import Dict, List, Optional

from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas

from aidrelief import APP_NAME
from aidrelief.schemas import AidRequest

LINE_WIDTH = 110


def request_line(r: AidRequest) -> str:
    where = "-"
    if r.location is not None:
        where = f"{r.location.latitude:.5f},{r.location.longitude:.5f}"
    return (
        f"{r.neededBy or '-'} • {r.severity or '-'} • {r.category or '-'} • {r.title or '(untitled)'}"
        f" • {r.status_label or '-'} • {r.warehouseName or 'Not assigned'} • {where}"
    )


def build_requests_pdf(items: List[AidRequest], filters: Optional[Dict[str, str]] = None) -> BytesIO:
    buff = BytesIO()
    c = canvas.Canvas(buff, pagesize=A4)
    w, h = A4

    y = h - 48
    c.setFont("Helvetica-Bold", 14)
    c.drawString(40, y, f"Requests • {APP_NAME}")
    y -= 18

    c.setFont("Helvetica", 10)
    parts = [f"{k}: {v}" for k, v in (filters or {}).items() if v]
    c.drawString(40, y, " | ".join(parts) if parts else "No filters")
    y -= 22

    c.setFont("Helvetica-Bold", 11)
    c.drawString(40, y, f"Requests ({len(items)})")
    y -= 14
    c.setFont("Helvetica", 9)

    for r in items:
        for chunk in textwrap.wrap(request_line(r), width=LINE_WIDTH):
            c.drawString(40, y, chunk)
            y -= 12
            if y < 60:
                c.showPage()
                y = h - 48
                c.setFont("Helvetica", 9)
        y -= 4

    c.showPage()
    c.save()
    buff.seek(0)
    return buff

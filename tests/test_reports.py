from aidrelief.reports import build_requests_pdf, request_line
from aidrelief.schemas import AidRequest


def test_request_line_shows_assignment_and_label():
    r = AidRequest(id="a", title="Water", severity="High", category="Water", status="Pending",
                   neededBy="2024-05-01", location={"latitude": 1.0, "longitude": 2.0})
    line = request_line(r)
    assert "Pending Approval" in line
    assert "Not assigned" in line
    assert "1.00000,2.00000" in line


def test_pdf_spans_pages_for_long_lists():
    items = [AidRequest(id=str(i), title=f"Request {i}", severity="Low") for i in range(120)]
    buff = build_requests_pdf(items, {"Category": "Food", "Severity": ""})
    data = buff.getvalue()
    assert data.startswith(b"%PDF")
    assert data.rstrip().endswith(b"%%EOF")

"""Builders for in-memory documents and fake HTTP servers."""

from __future__ import annotations

import io
import json

import docx
import httpx


DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

JOB_BODY = (
    "We are hiring a backend engineer with 5 years Go experience. You will design "
    "distributed services, own PostgreSQL schemas and mentor two junior developers. "
    "Kubernetes and gRPC are a plus."
)
CV_BODY = (
    "Senior Go developer, 6 years experience building high-throughput APIs with "
    "PostgreSQL, Docker and Kubernetes."
)
JOB_PAGE = f"""
<html>
  <head><title>Backend Engineer</title><style>body {{ color: red; }}</style></head>
  <body>
    <header>ACME Careers</header>
    <nav>Home | Jobs | About</nav>
    <main><h1>Backend Engineer</h1><p>{JOB_BODY}</p></main>
    <script>trackPageView();</script>
    <footer>(c) ACME</footer>
  </body>
</html>
"""


def make_pdf(text: str = "") -> bytes:
    """Build a one-page PDF whose text layer is ``text`` (empty → no text)."""
    stream = f"BT /F1 24 Tf 72 720 Td ({text}) Tj ET".encode("latin-1") if text else b""
    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        b"<< /Type /Pages /Kids [3 0 R] /Count 1 >>",
        b"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] /Contents 4 0 R "
        b"/Resources << /Font << /F1 5 0 R >> >> >>",
        b"<< /Length %d >>\nstream\n" % len(stream) + stream + b"\nendstream",
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
    ]
    out = bytearray(b"%PDF-1.4\n")
    offsets = []
    for number, body in enumerate(objects, start=1):
        offsets.append(len(out))
        out += b"%d 0 obj\n" % number + body + b"\nendobj\n"
    xref_offset = len(out)
    out += b"xref\n0 %d\n" % (len(objects) + 1)
    out += b"0000000000 65535 f \n"
    for offset in offsets:
        out += b"%010d 00000 n \n" % offset
    out += b"trailer\n<< /Size %d /Root 1 0 R >>\n" % (len(objects) + 1)
    out += b"startxref\n%d\n%%%%EOF\n" % xref_offset
    return bytes(out)


def make_docx(*paragraphs: str) -> bytes:
    document = docx.Document()
    for paragraph in paragraphs:
        document.add_paragraph(paragraph)
    buffer = io.BytesIO()
    document.save(buffer)
    return buffer.getvalue()


def completion(content: str) -> httpx.Response:
    return httpx.Response(200, json={"choices": [{"message": {"role": "assistant", "content": content}}]})


class FakeOpenAI:
    """Records chat-completion requests and replies with a fixed response."""

    def __init__(self, response: httpx.Response | None = None) -> None:
        self.response = response or completion("Overall fit: 85%. Strong Go background.")
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.response

    @property
    def payloads(self) -> list[dict]:
        return [json.loads(r.content) for r in self.requests]

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


def page_transport(html: str = JOB_PAGE, status_code: int = 200) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, html=html)

    return httpx.MockTransport(handler)



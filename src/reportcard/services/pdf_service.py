import io
import re
from itertools import groupby
from pathlib import Path
from typing import Iterable, Protocol

from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.pdfgen import canvas

from reportcard.core.layout import TITLE, TextInstruction


FONT_NAME = "Helvetica"


class PdfRenderer(Protocol):
    def render(self, instructions: Iterable[TextInstruction]) -> bytes: ...


class ReportlabPdfRenderer:
    def __init__(self, pagesize=A4, title: str = TITLE) -> None:
        self.pagesize = pagesize
        self.title = title

    def render(self, instructions: Iterable[TextInstruction]) -> bytes:
        buffer = io.BytesIO()
        pdf = canvas.Canvas(buffer, pagesize=self.pagesize)
        pdf.setTitle(self.title)
        _, height = self.pagesize

        ordered = sorted(instructions, key=lambda ins: ins.page)
        for _, page_instructions in groupby(ordered, key=lambda ins: ins.page):
            for ins in page_instructions:
                pdf.setFont(FONT_NAME, ins.font_size)
                pdf.drawString(ins.x * mm, height - ins.y * mm, ins.text)
            pdf.showPage()

        pdf.save()
        return buffer.getvalue()


def save_pdf(filename: str, content: bytes, directory: str) -> Path:
    target_dir = Path(directory)
    target_dir.mkdir(parents=True, exist_ok=True)
    target = target_dir / re.sub(r"[\\/]", "_", filename)
    if target.resolve().parent != target_dir.resolve():
        raise ValueError(f"Refusing to write {filename!r} outside {directory}")
    target.write_bytes(content)
    return target

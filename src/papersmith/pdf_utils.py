"""
Turn a PDF into something the model can read: a stitched page image or raw bytes
"""

import io
from pathlib import Path
from typing import List

from pdf2image import convert_from_path
from pdf2image.exceptions import (
    PDFInfoNotInstalledError,
    PDFPageCountError,
    PDFPopplerTimeoutError,
    PDFSyntaxError,
)
from PIL import Image

from .errors import ReadError, RenderError
from .models import RenderedDocument

BACKGROUND = 255  # white, greyscale


def stitch_pages(pages: List[Image.Image]) -> Image.Image:
    """Stack pages top-to-bottom on one greyscale canvas.

    The canvas is as wide as the widest page and as tall as all pages
    together. Narrower pages are left-aligned; the rest stays white.
    """
    if not pages:
        raise RenderError("No pages to stitch")

    width = max(page.width for page in pages)
    height = sum(page.height for page in pages)
    if width == 0 or height == 0:
        raise RenderError(f"Rendered pages result in a zero dimension image ({width}x{height})")

    canvas = Image.new("L", (width, height), color=BACKGROUND)
    y = 0
    for page in pages:
        if page.mode != "L":
            page = page.convert("L")
        canvas.paste(page, (0, y))
        y += page.height
    return canvas


def image_to_png(image: Image.Image) -> bytes:
    """Encode a PIL image as PNG bytes"""
    buffered = io.BytesIO()
    try:
        image.save(buffered, format="PNG", optimize=True)
        return buffered.getvalue()
    finally:
        buffered.close()


class ImageStitchRenderer:
    """Render the first pages in greyscale and stitch them into one PNG"""

    kind = "image"
    DEFAULT_DPI = 100

    def __init__(self, n_pages: int = 3, dpi: int = DEFAULT_DPI):
        if n_pages < 1:
            raise ValueError(f"n_pages must be a positive integer, got {n_pages}")
        self.n_pages = n_pages
        self.dpi = dpi

    def render_pages(self, pdf_path: Path) -> List[Image.Image]:
        try:
            return convert_from_path(
                pdf_path,
                dpi=self.dpi,
                first_page=1,
                last_page=self.n_pages,
                grayscale=True,
                fmt="png",
            )
        except (
            PDFInfoNotInstalledError,
            PDFPageCountError,
            PDFPopplerTimeoutError,
            PDFSyntaxError,
            OSError,
        ) as e:
            raise RenderError(f"Failed to render {pdf_path.name}: {e}") from e

    def render(self, pdf_path: Path) -> RenderedDocument:
        pages = self.render_pages(pdf_path)
        if not pages:
            raise RenderError(
                f"No pages could be rendered from {pdf_path.name}. "
                "Check that the PDF is valid."
            )
        try:
            canvas = stitch_pages(pages)
        except RenderError as e:
            raise RenderError(f"{pdf_path.name}: {e}") from e

        return RenderedDocument(
            kind=self.kind,
            data=image_to_png(canvas),
            mime_type="image/png",
            filename=pdf_path.name,
        )


class PdfBytesRenderer:
    """Pass the whole PDF through unchanged"""

    kind = "pdf"

    def render(self, pdf_path: Path) -> RenderedDocument:
        try:
            data = pdf_path.read_bytes()
        except OSError as e:
            raise ReadError(f"Failed to read {pdf_path.name}: {e}") from e
        if not data:
            raise ReadError(f"{pdf_path.name} is empty")

        return RenderedDocument(
            kind=self.kind,
            data=data,
            mime_type="application/pdf",
            filename=pdf_path.name,
        )

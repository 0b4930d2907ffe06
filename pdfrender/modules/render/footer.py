"""
Footer mask - hide a repeating footer on every page after the first.

Chromium prints position:fixed footers on every page. When only the first
page should show it, a white band is painted over the bottom of pages 2..N.
The footer text stays in the text layer; only its appearance is covered.
"""

import io

from pypdf import PageObject, PdfReader, PdfWriter, Transformation
from reportlab.lib.units import mm
from reportlab.pdfgen import canvas

from pdfrender.config import Settings, get_settings
from pdfrender.shared.errors import PostProcessError
from pdfrender.shared.logging import get_logger

from .schemas import FooterDisplayMode

logger = get_logger(__name__)


class FooterMask:
    """Paints over the footer band of non-first pages."""

    def __init__(self, settings: Settings | None = None) -> None:
        settings = settings or get_settings()
        self.band_height = settings.footer_band_mm * mm

    def apply(self, pdf_bytes: bytes, mode: FooterDisplayMode) -> bytes:
        """
        Return the PDF with footers masked according to ``mode``.

        Never raises: if the document cannot be processed the original
        bytes are returned unchanged.
        """
        return self.process(pdf_bytes, mode)[0]

    def process(self, pdf_bytes: bytes, mode: FooterDisplayMode) -> tuple[bytes, int | None]:
        """
        Same as apply(), also returning the page count found while parsing.

        The count is None when the document was not parsed (``all`` mode or
        unreadable input). Parsing and writing are CPU-bound; async callers
        should run this in a worker thread.
        """
        if mode != FooterDisplayMode.FIRST_PAGE_ONLY:
            return pdf_bytes, None

        try:
            reader, page_count = self._read(pdf_bytes)
        except PostProcessError as e:
            logger.error(f"PDF post-processing error, using unmasked PDF: {e}")
            return pdf_bytes, None

        logger.info(f"Post-processing PDF: {page_count} pages found")
        if page_count <= 1:
            return pdf_bytes, page_count

        try:
            return self._mask_after_first_page(reader), page_count
        except PostProcessError as e:
            logger.error(f"PDF post-processing error, using unmasked PDF: {e}")
            return pdf_bytes, page_count

    def _read(self, pdf_bytes: bytes) -> tuple[PdfReader, int]:
        try:
            reader = PdfReader(io.BytesIO(pdf_bytes))
            return reader, len(reader.pages)
        except Exception as e:
            raise PostProcessError(f"Could not parse PDF: {e}") from e

    def _mask_after_first_page(self, reader: PdfReader) -> bytes:
        try:
            writer = PdfWriter()
            overlays: dict[tuple[float, float], PageObject] = {}

            for index, page in enumerate(reader.pages):
                if index > 0:
                    box = page.mediabox
                    size = (float(box.width), float(box.height))
                    if size not in overlays:
                        overlays[size] = self._build_overlay(*size)
                    page.merge_transformed_page(
                        overlays[size],
                        Transformation().translate(float(box.left), float(box.bottom)),
                    )
                    logger.debug(f"Covered footer on page {index + 1}")
                writer.add_page(page)

            if reader.metadata:
                writer.add_metadata(dict(reader.metadata))

            output = io.BytesIO()
            writer.write(output)
        except Exception as e:
            raise PostProcessError(f"Could not mask footer: {e}") from e

        logger.info("PDF post-processing complete")
        return output.getvalue()

    def _build_overlay(self, width: float, height: float) -> PageObject:
        """One-page PDF holding an opaque white band along the bottom edge."""
        buffer = io.BytesIO()
        c = canvas.Canvas(buffer, pagesize=(width, height))
        c.setFillColorRGB(1, 1, 1)
        c.setStrokeColorRGB(1, 1, 1)
        c.rect(0, 0, width, min(self.band_height, height), stroke=0, fill=1)
        c.showPage()
        c.save()
        buffer.seek(0)
        return PdfReader(buffer).pages[0]

"""Render module schemas."""

from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

PDF_CONTENT_TYPE = "application/pdf"


class FooterDisplayMode(str, Enum):
    """Which pages keep the document's footer."""

    ALL = "all"
    FIRST_PAGE_ONLY = "firstPage"


class RenderPdfRequest(BaseModel):
    """Request body for POST /generate."""

    model_config = ConfigDict(populate_by_name=True)

    html: str | None = Field(default=None, description="HTML content to render")
    filename: str | None = Field(
        default=None,
        description="Filename for the PDF (default: document.pdf)",
    )
    footer_display: FooterDisplayMode = Field(
        default=FooterDisplayMode.ALL,
        alias="pdfFooterDisplay",
        description='Footer display mode: "all" or "firstPage"',
    )


@dataclass(frozen=True)
class RenderRequest:
    """A single render call, built once from the API payload."""

    html: str
    filename: str = "document.pdf"
    footer_display: FooterDisplayMode = FooterDisplayMode.ALL


@dataclass(frozen=True)
class RenderResult:
    """Final PDF plus the metadata the API layer needs."""

    content: bytes
    filename: str
    page_count: int
    duration_ms: int
    content_type: str = PDF_CONTENT_TYPE

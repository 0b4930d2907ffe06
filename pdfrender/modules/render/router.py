"""Render module routes."""

from urllib.parse import quote

from fastapi import APIRouter, Depends, Request, Response

from .schemas import RenderPdfRequest, RenderRequest
from .service import RenderService

router = APIRouter(tags=["render"])


def get_render_service(request: Request) -> RenderService:
    """Dependency injection: a service bound to the app's engine pool."""
    return RenderService(request.app.state.engine_pool, request.app.state.settings)


def content_disposition(filename: str) -> str:
    """
    Build an attachment header that survives any filename.

    Header values must be latin-1, so names outside printable ASCII (or with
    quotes and line breaks) get an ASCII ``filename`` plus the RFC 5987
    ``filename*`` carrying the real name.
    """
    fallback = "".join(
        "_" if ch in '"\\' or not " " <= ch <= "~" else ch
        for ch in filename
    )
    if fallback == filename:
        return f'attachment; filename="{filename}"'
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename, safe='')}"


@router.post("/generate")
async def generate_pdf(
    payload: RenderPdfRequest,
    service: RenderService = Depends(get_render_service),
) -> Response:
    """
    Render HTML to PDF.

    Returns the PDF as binary content with download headers. Failures are
    turned into JSON error responses by the app's exception handler.
    """
    render_request = RenderRequest(
        html=payload.html,  # type: ignore[arg-type]  # checked by the service
        filename=payload.filename or service.settings.default_filename,
        footer_display=payload.footer_display,
    )
    result = await service.render(render_request)

    return Response(
        content=result.content,
        media_type=result.content_type,
        headers={
            "Content-Disposition": content_disposition(result.filename),
            "Content-Length": str(len(result.content)),
            "X-Generation-Time": f"{result.duration_ms}ms",
        },
    )

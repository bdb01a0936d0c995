from __future__ import annotations

import asyncio
import logging
import os
import tempfile
import threading
from pathlib import Path

from cv_tailor.errors import RenderError, diagnostics
from cv_tailor.export.style import StyleOptions, build_stylesheet

logger = logging.getLogger(__name__)


def html_to_pdf(html: str, css_path: str, style: StyleOptions) -> bytes:
    """Convert HTML string to PDF bytes using WeasyPrint, with fpdf2 fallback."""
    try:
        from weasyprint import CSS, HTML
        return HTML(string=html).write_pdf(stylesheets=[CSS(filename=css_path)])
    except (ImportError, OSError):
        logger.warning("WeasyPrint not available, using fpdf2 fallback")
        from cv_tailor.export.pdf_fallback import html_to_pdf_fpdf2
        return html_to_pdf_fpdf2(html, style)


def _write_stylesheet(style: StyleOptions, temp_dir: str | Path | None) -> str:
    if temp_dir is not None:
        Path(temp_dir).mkdir(parents=True, exist_ok=True)
    fd, path = tempfile.mkstemp(
        prefix="cv-style-",
        suffix=".css",
        dir=str(temp_dir) if temp_dir is not None else None,
    )
    with os.fdopen(fd, "w", encoding="utf-8") as fh:
        fh.write(build_stylesheet(style))
    return path


def _run_detached(func, *args) -> asyncio.Future:
    """Run *func* on a daemon thread and return a future for its result.

    Unlike ``asyncio.to_thread`` the thread is not owned by the loop's
    executor, so neither ``asyncio.run`` nor interpreter shutdown waits for
    a conversion that is abandoned after a timeout.
    """
    loop = asyncio.get_running_loop()
    future = loop.create_future()

    def _resolve(result, exc):
        if future.done():
            return
        if exc is not None:
            future.set_exception(exc)
        else:
            future.set_result(result)

    def _worker():
        result, error = None, None
        try:
            result = func(*args)
        except Exception as exc:
            error = exc
        try:
            loop.call_soon_threadsafe(_resolve, result, error)
        except RuntimeError:
            # Loop already closed; the caller gave up on this conversion
            logger.debug("Discarding result of abandoned PDF conversion")

    threading.Thread(target=_worker, name="cv-tailor-pdf", daemon=True).start()
    return future


async def convert_html_to_pdf(
    html: str,
    style: StyleOptions,
    *,
    timeout: float,
    temp_dir: str | Path | None = None,
) -> bytes:
    """Render *html* to PDF on a worker thread, bounded by *timeout* seconds.

    The stylesheet is written to a randomly named temporary file which is
    always removed, whether conversion succeeds, fails or times out. A
    conversion still running at the timeout is abandoned.
    """
    css_path: str | None = None
    try:
        css_path = await asyncio.to_thread(_write_stylesheet, style, temp_dir)
        pdf = await asyncio.wait_for(
            _run_detached(html_to_pdf, html, css_path, style),
            timeout=timeout,
        )
    except asyncio.TimeoutError as exc:
        diagnostics.error("PDF conversion exceeded %.1fs", timeout, exc_info=exc)
        raise RenderError("PDF conversion timed out") from exc
    except RenderError:
        raise
    except Exception as exc:
        diagnostics.error("PDF conversion failed: %s", exc, exc_info=exc)
        raise RenderError("PDF conversion failed") from exc
    finally:
        if css_path is not None:
            try:
                os.unlink(css_path)
            except FileNotFoundError:
                pass

    if not pdf:
        raise RenderError("PDF conversion produced no output")
    return pdf

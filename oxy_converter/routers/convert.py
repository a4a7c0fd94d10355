"""
Conversion router - HTML to page-builder element trees.

Endpoints:
- POST /convert: Convert one input, returns the tree and paste-ready JSON
- POST /convert/preview: Element counts per type, without the tree
- POST /convert/batch: Convert several inputs independently
"""

import json
import logging
import time
import uuid
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, status

from oxy_converter.converter import (
    ConversionOptions,
    ConversionResult,
    HtmlConverter,
    OutputValidator,
)
from oxy_converter.core.config import settings
from oxy_converter.deps import get_converter, get_current_subject
from oxy_converter.monitoring import conversion_logger
from oxy_converter.schemas.convert import (
    BatchRequest,
    BatchResponse,
    BatchStats,
    ConvertOptions,
    ConvertRequest,
    ConvertResponse,
    PreviewRequest,
    PreviewResponse,
    PreviewSummary,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/convert", tags=["convert"])


# ---------------------------------------------------------------------------
# HELPERS
# ---------------------------------------------------------------------------

def _new_request_id() -> str:
    return uuid.uuid4().hex[:12]


def _byte_size(html: str) -> int:
    return len(html.encode("utf-8"))


def _check_size(html: str, limit: int, label: str = "HTML input") -> None:
    """Reject inputs above a byte limit with 413."""
    size = _byte_size(html)
    if size > limit:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"{label} is {size} bytes, limit is {limit} bytes",
        )


def _to_options(options: ConvertOptions | None) -> ConversionOptions:
    if options is None:
        return ConversionOptions()
    return ConversionOptions(**options.model_dump())


def _failure_detail(result: ConversionResult) -> Dict[str, Any]:
    return {"error": result.error, "errors": list(result.errors)}


def build_convert_response(result: ConversionResult) -> ConvertResponse:
    """Wire payload of a successful conversion plus paste-ready JSON strings."""
    payload = result.to_dict()
    clipboard_payload = {"element": payload["element"]}
    validation = OutputValidator().validate_conversion_result(payload)

    return ConvertResponse(
        **payload,
        validation=validation,
        json=json.dumps(clipboard_payload, indent=2, ensure_ascii=False),
        clipboard=json.dumps(clipboard_payload, separators=(",", ":"), ensure_ascii=False),
    )


# ---------------------------------------------------------------------------
# ENDPOINTS
# ---------------------------------------------------------------------------

@router.post(
    "",
    response_model=ConvertResponse,
    summary="Convert HTML into an element tree",
    description="""
    Converts an HTML document or fragment (with <style> and <script>):
    - Element tree in the page builder's JSON format
    - Residual stylesheet, icon loaders and head links
    - Stats, custom classes and validator findings
    - `json` (pretty) and `clipboard` (compact) payloads ready to paste
    """,
)
def convert_html(
    request: ConvertRequest,
    converter: HtmlConverter = Depends(get_converter),
    subject: str | None = Depends(get_current_subject),
):
    """Convert one HTML input."""
    _check_size(request.html, settings.MAX_INPUT_BYTES)

    request_id = _new_request_id()
    conversion_logger.log_request(
        request_id,
        endpoint="/convert",
        html_bytes=_byte_size(request.html),
        options=request.options.model_dump(by_alias=True),
    )

    started = time.perf_counter()
    try:
        result = converter.convert(request.html, _to_options(request.options))
    except Exception as e:
        conversion_logger.log_error(request_id, e)
        logger.error(f"Conversion failed for request {request_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Conversion error: {str(e)}",
        )

    conversion_logger.log_result(request_id, result, (time.perf_counter() - started) * 1000)

    if not result.success:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=_failure_detail(result),
        )

    return build_convert_response(result)


@router.post(
    "/preview",
    response_model=PreviewResponse,
    summary="Preview element counts",
)
def preview_html(
    request: PreviewRequest,
    converter: HtmlConverter = Depends(get_converter),
    subject: str | None = Depends(get_current_subject),
):
    """Convert and return only the per-type element counts."""
    _check_size(request.html, settings.MAX_INPUT_BYTES)

    try:
        result = converter.convert(request.html)
    except Exception as e:
        logger.error(f"Preview failed: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Conversion error: {str(e)}",
        )

    if not result.success:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=_failure_detail(result),
        )

    summary = converter.preview_summary(result.element)
    return PreviewResponse(
        success=True,
        summary=PreviewSummary(**summary),
        stats=result.stats.to_dict(),
    )


@router.post(
    "/batch",
    response_model=BatchResponse,
    summary="Convert several inputs",
    description="""
    Converts each item independently (ids restart per item unless
    `startingNodeId` is set). Failed items are reported in place and
    do not fail the batch.
    """,
)
def convert_batch(
    request: BatchRequest,
    converter: HtmlConverter = Depends(get_converter),
    subject: str | None = Depends(get_current_subject),
):
    """Convert a batch of HTML inputs."""
    if len(request.items) > settings.MAX_BATCH_ITEMS:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"Batch has {len(request.items)} items, limit is {settings.MAX_BATCH_ITEMS}",
        )

    total_bytes = 0
    for index, item in enumerate(request.items):
        _check_size(item.html, settings.MAX_BATCH_ITEM_BYTES, label=f"Batch item {index}")
        total_bytes += _byte_size(item.html)
    if total_bytes > settings.MAX_BATCH_TOTAL_BYTES:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"Batch is {total_bytes} bytes, limit is {settings.MAX_BATCH_TOTAL_BYTES} bytes",
        )

    request_id = _new_request_id()
    conversion_logger.log_request(
        request_id,
        endpoint="/convert/batch",
        html_bytes=total_bytes,
        items=len(request.items),
    )

    results = []
    stats = BatchStats()
    for item in request.items:
        started = time.perf_counter()
        try:
            result = converter.convert(item.html, _to_options(item.options))
        except Exception as e:
            conversion_logger.log_error(request_id, e)
            logger.error(f"Batch conversion failed for request {request_id}: {e}", exc_info=True)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Conversion error: {str(e)}",
            )
        conversion_logger.log_result(request_id, result, (time.perf_counter() - started) * 1000)

        results.append(result.to_dict())
        if result.success:
            stats.succeeded += 1
            stats.elements += result.stats.elements
            stats.tailwind_classes += result.stats.tailwind_classes
            stats.custom_classes += result.stats.custom_classes
        else:
            stats.failed += 1

    return BatchResponse(results=results, stats=stats)

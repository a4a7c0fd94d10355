"""
Pydantic schemas for the conversion API.

These schemas define the contract of the REST API.
Used in oxy_converter/routers/convert.py

Responses use the camelCase keys of the page builder's wire format.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


# ============== OPTIONS ==============

class ConvertOptions(BaseModel):
    """Per-call conversion options (camelCase or snake_case keys)."""
    starting_node_id: int = Field(1, ge=1, alias="startingNodeId", description="Id of the first element")
    wrap_in_container: bool = Field(False, alias="wrapInContainer")
    include_css_element: bool = Field(True, alias="includeCssElement")
    inline_styles: bool = Field(True, alias="inlineStyles")
    debug_mode: bool = Field(False, alias="debugMode")

    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "startingNodeId": 100,
                "wrapInContainer": False,
                "includeCssElement": True,
            }
        }


# ============== CONVERT ==============

class ConvertRequest(BaseModel):
    """Request to convert one HTML document or fragment."""
    html: str = Field(..., min_length=1, description="HTML document or fragment")
    options: ConvertOptions = Field(default_factory=ConvertOptions)

    class Config:
        json_schema_extra = {
            "example": {
                "html": "<section class=\"hero\"><h1>Hello</h1><a class=\"btn\" href=\"#start\">Start</a></section>",
                "options": {"startingNodeId": 1},
            }
        }


class ValidationSummary(BaseModel):
    """Output validator findings (never blocks a conversion)."""
    valid: bool
    errors: List[str] = []
    warnings: List[str] = []


class ConvertResponse(BaseModel):
    """Successful conversion with ready-to-paste payloads."""
    success: bool
    element: Optional[Dict[str, Any]] = None
    css_element: Optional[Dict[str, Any]] = Field(None, alias="cssElement")
    head_link_elements: List[Dict[str, Any]] = Field(default=[], alias="headLinkElements")
    icon_script_elements: List[Dict[str, Any]] = Field(default=[], alias="iconScriptElements")
    detected_icon_libraries: Dict[str, Dict[str, str]] = Field(default={}, alias="detectedIconLibraries")
    extracted_css: str = Field("", alias="extractedCss")
    custom_classes: List[str] = Field(default=[], alias="customClasses")
    stats: Dict[str, Any] = {}
    parse_errors: List[str] = Field(default=[], alias="parseErrors")
    validation: Optional[ValidationSummary] = None
    json_text: str = Field("", alias="json", description="Pretty-printed {\"element\": ...}")
    clipboard: str = Field("", description="Compact {\"element\": ...} for the builder clipboard")

    class Config:
        populate_by_name = True


# ============== PREVIEW ==============

class PreviewRequest(BaseModel):
    """Request for an element count preview."""
    html: str = Field(..., min_length=1, description="HTML document or fragment")


class PreviewSummary(BaseModel):
    """Node counts of the converted tree."""
    total: int
    by_type: Dict[str, int] = Field(default={}, alias="byType")

    class Config:
        populate_by_name = True


class PreviewResponse(BaseModel):
    """Preview of a conversion without the tree itself."""
    success: bool
    summary: PreviewSummary
    stats: Dict[str, Any] = {}


# ============== BATCH ==============

class BatchItem(BaseModel):
    """One input of a batch conversion."""
    html: str = Field(..., min_length=1)
    options: Optional[ConvertOptions] = None


class BatchRequest(BaseModel):
    """Request to convert several inputs independently."""
    items: List[BatchItem] = Field(..., min_length=1, description="Inputs, converted in order")

    class Config:
        json_schema_extra = {
            "example": {
                "items": [
                    {"html": "<div><p>First</p></div>"},
                    {"html": "<div><p>Second</p></div>", "options": {"startingNodeId": 50}},
                ]
            }
        }


class BatchStats(BaseModel):
    """Aggregated counters over all batch items."""
    elements: int = 0
    tailwind_classes: int = Field(0, alias="tailwindClasses")
    custom_classes: int = Field(0, alias="customClasses")
    succeeded: int = 0
    failed: int = 0

    class Config:
        populate_by_name = True


class BatchResponse(BaseModel):
    """Per-item results (success or failure payloads) plus totals."""
    results: List[Dict[str, Any]]
    stats: BatchStats

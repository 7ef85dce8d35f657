"""Pydantic response models for the HTTP API.

WHY: The FastAPI endpoints need typed schemas for response
serialization and automatic OpenAPI documentation. Pydantic models
enforce field types at runtime and generate JSON Schema that appears in
the /docs UI.

HOW: One model per response shape. Request fields arrive as multipart
form data and are declared on the endpoint itself. All models include
Field descriptions for rich OpenAPI docs.

RULES:
- All models use Field(description=...) for OpenAPI documentation
- Format keys are validated against FORMATTERS by the endpoint
- Response models never expose internal implementation details
"""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field


class AuthorInfo(BaseModel):
    """One singer of the converted document."""

    id: str = Field(description="Author identifier (UUID, or p<n> for TTML singers).")
    name: str = Field(description="Display name.")


class OutputFile(BaseModel):
    """One converted file, returned inline."""

    filename: str = Field(description="Suggested filename: source stem plus format suffix.")
    media_type: str = Field(description="MIME type of the file content.")
    content: str = Field(description="The file content.")


class ConversionResponse(BaseModel):
    """Result of converting one lyrics file.

    WHY: Conversions are fast and synchronous, so every requested format
    is returned in one response instead of through a job queue.
    """

    source_filename: str = Field(description="Uploaded filename.")
    verse_count: int = Field(description="Number of verses imported.")
    authors: List[AuthorInfo] = Field(description="Canonical singer list after import.")
    outputs: List[OutputFile] = Field(description="One entry per requested format.")

    model_config = {"json_schema_extra": {
        "examples": [
            {
                "source_filename": "song.lrc",
                "verse_count": 2,
                "authors": [{"id": "p1", "name": "Alice"}],
                "outputs": [
                    {
                        "filename": "song.ttml",
                        "media_type": "application/xml",
                        "content": "<tt xmlns=\"http://www.w3.org/ns/ttml\">...</tt>",
                    }
                ],
            }
        ]
    }}


class FormatInfo(BaseModel):
    """Description of an available output format.

    WHY: Clients can query the /formats endpoint to discover which
    output formats are supported and what they produce.
    """

    key: str = Field(description="Format identifier used in API requests.")
    name: str = Field(description="Human-readable format name.")
    suffix: str = Field(description="File suffix produced (e.g. '-Synced.json').")


class ErrorResponse(BaseModel):
    """Standard error response body.

    RULES:
    - detail is always a human-readable error message
    """

    detail: str = Field(description="Human-readable error description.")


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(description="Service health status.", json_schema_extra={"example": "ok"})
    version: str = Field(description="API version string.", json_schema_extra={"example": "0.1.0"})

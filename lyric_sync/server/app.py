"""FastAPI application with lyrics conversion routes and OpenAPI docs.

WHY: Other tools (a web editor, scripts, automation flows) need an HTTP
API to convert lyrics files without shelling out to the CLI. FastAPI
provides automatic OpenAPI documentation and request validation.

HOW: A single FastAPI app exposes three endpoints. POST /conversions
accepts a multipart upload plus form fields, parses it into a Document
and runs every requested formatter, returning all outputs inline.
/formats and /health describe the service.

RULES:
- All endpoints have OpenAPI descriptions on every parameter and response
- Error responses use a consistent ErrorResponse schema
- 400: unknown source or output format, or a source that fails to parse
- 413: upload larger than MAX_UPLOAD_BYTES
- 422: upload is not UTF-8 text
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated, List, Optional

from fastapi import FastAPI, File, Form, HTTPException, UploadFile

from lyric_sync import __version__
from lyric_sync.config import (
    DEFAULT_WORD_BY_WORD,
    LOG_FORMAT,
    LOG_LEVEL,
    MAX_UPLOAD_BYTES,
    SOURCE_FORMAT_KEYS,
    detect_source_format,
)
from lyric_sync.core.authors import AuthorRegistry
from lyric_sync.core.companions import parse_author_list
from lyric_sync.formatters import (
    FORMATTERS,
    LRCExportOptions,
    TTMLExportOptions,
    create_formatter,
    resolve_format_keys,
)
from lyric_sync.parsers import load_document
from lyric_sync.server.models import (
    AuthorInfo,
    ConversionResponse,
    ErrorResponse,
    FormatInfo,
    HealthResponse,
    OutputFile,
)

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Lyric Sync Converter API",
    description=(
        "REST API for converting synchronized lyrics between plain text, "
        "LRC, TTML and JSON, keeping word-by-word timing and singer "
        "attribution."
    ),
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)


# ---------------------------------------------------------------------------
# Endpoints: Conversions
# ---------------------------------------------------------------------------


@app.post(
    "/conversions",
    response_model=ConversionResponse,
    tags=["conversions"],
    summary="Convert a lyrics file",
    description=(
        "Upload a plain text, LRC, TTML or synced JSON file. The file is "
        "imported once and exported to every requested format; all outputs "
        "are returned inline."
    ),
    responses={
        400: {"model": ErrorResponse, "description": "Unknown format or unparsable source"},
        413: {"model": ErrorResponse, "description": "Upload too large"},
        422: {"model": ErrorResponse, "description": "Upload is not UTF-8 text"},
    },
)
async def create_conversion(
    file: Annotated[
        UploadFile,
        File(description="Lyrics file to convert (.txt, .lrc, .ttml, .xml, .json)."),
    ],
    source_format: Annotated[
        Optional[str],
        Form(description="Source format: text, lrc, ttml or json. Defaults to the file extension."),
    ] = None,
    authors: Annotated[
        Optional[str],
        Form(description="Comma-separated singer names, in v1/v2 order."),
    ] = None,
    word_by_word: Annotated[
        bool,
        Form(description="Import with word-by-word timing."),
    ] = DEFAULT_WORD_BY_WORD,
    output_formats: Annotated[
        Optional[str],
        Form(
            description=(
                "Comma-separated output formats. Available: {}. Defaults to all.".format(
                    ", ".join(sorted(FORMATTERS.keys()))
                )
            )
        ),
    ] = None,
    lrc_authors: Annotated[
        bool,
        Form(description="LRC: add v1:/v2:/v3: singer tags."),
    ] = False,
    lrc_word_by_word: Annotated[
        bool,
        Form(description="LRC: add <mm:ss.hh> before every word."),
    ] = True,
    keep_seconds: Annotated[
        bool,
        Form(description="LRC: write raw seconds instead of mm:ss.hh (saved as .txt)."),
    ] = False,
    walaoke: Annotated[
        bool,
        Form(description="LRC: use M:/F:/D: singer tags."),
    ] = False,
    ttml_word_author: Annotated[
        bool,
        Form(description="TTML: add ttm:agent to every word."),
    ] = False,
    ttml_word_by_word: Annotated[
        bool,
        Form(description="TTML: write one span per word."),
    ] = True,
    duration: Annotated[
        Optional[float],
        Form(description="TTML: song length in seconds."),
    ] = None,
) -> ConversionResponse:
    # Sanitize filename to prevent path traversal
    filename = Path(file.filename or "upload.txt").name

    source_format = source_format or detect_source_format(filename)
    if source_format not in SOURCE_FORMAT_KEYS:
        raise HTTPException(
            status_code=400,
            detail="Unknown source format '{}'. Available: {}".format(
                source_format, ", ".join(sorted(SOURCE_FORMAT_KEYS))
            ),
        )

    try:
        format_keys = resolve_format_keys(output_formats)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    raw = await file.read()
    if len(raw) > MAX_UPLOAD_BYTES:
        raise HTTPException(
            status_code=413,
            detail="File too large ({} bytes, max {})".format(len(raw), MAX_UPLOAD_BYTES),
        )
    try:
        content = raw.decode("utf-8-sig")
    except UnicodeDecodeError:
        raise HTTPException(status_code=422, detail="File must be UTF-8 text")

    stem = Path(filename).stem
    registry = AuthorRegistry.from_names(parse_author_list(authors))
    document = load_document(
        content,
        source_format,
        authors=registry,
        word_by_word=word_by_word,
        source_name=stem,
    )
    if document is None:
        raise HTTPException(
            status_code=400,
            detail="Could not parse '{}' as {}".format(filename, source_format),
        )

    lrc_options = LRCExportOptions(
        keep_seconds=keep_seconds,
        keep_authors=lrc_authors,
        keep_word_by_word=lrc_word_by_word,
        walaoke=walaoke,
    )
    ttml_options = TTMLExportOptions(
        word_author=ttml_word_author,
        word_by_word=ttml_word_by_word,
        duration=duration,
    )

    outputs: List[OutputFile] = []
    for key in format_keys:
        formatter = create_formatter(key, lrc_options, ttml_options)
        try:
            results = formatter.format(document)
        except Exception:
            logger.exception("Formatter %s failed for %s", key, filename)
            raise HTTPException(status_code=500, detail="Formatter '{}' failed".format(key))
        for result in results:
            outputs.append(OutputFile(
                filename="{}{}".format(stem, result.suffix),
                media_type=result.media_type,
                content=result.content,
            ))

    logger.info("Converted %s (%s) to %s", filename, source_format, ", ".join(format_keys))
    return ConversionResponse(
        source_filename=filename,
        verse_count=len(document.verses),
        authors=[AuthorInfo(id=a.id, name=a.name) for a in document.authors],
        outputs=outputs,
    )


# ---------------------------------------------------------------------------
# Endpoints: Formats
# ---------------------------------------------------------------------------


@app.get(
    "/formats",
    response_model=List[FormatInfo],
    tags=["formats"],
    summary="List available output formats",
    description=(
        "Returns all supported output formats with their identifiers, "
        "human-readable names, and file suffixes."
    ),
)
async def list_formats() -> List[FormatInfo]:
    result = []
    for key, formatter_cls in sorted(FORMATTERS.items()):
        formatter = formatter_cls()
        result.append(FormatInfo(key=key, name=formatter.name, suffix=formatter.suffix))
    return result


# ---------------------------------------------------------------------------
# Endpoints: Health
# ---------------------------------------------------------------------------


@app.get(
    "/health",
    response_model=HealthResponse,
    tags=["health"],
    summary="Health check",
    description="Liveness and readiness check for load balancers and orchestrators.",
)
async def health_check() -> HealthResponse:
    return HealthResponse(status="ok", version=__version__)


def run_api():
    """Entry point for the lyric-sync-api console script."""
    import uvicorn
    logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)
    uvicorn.run(app, host="0.0.0.0", port=8000)

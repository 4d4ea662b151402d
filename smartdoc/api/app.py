"""FastAPI application for the SmartDoc OCR API.

Provides REST endpoints for document extraction and classification,
category listing, and health checks.
"""

import os
import shutil
import tempfile
import time
from functools import lru_cache
from pathlib import Path
from typing import Annotated

from fastapi import Depends, FastAPI, File, HTTPException, UploadFile
from fastapi.concurrency import run_in_threadpool

from smartdoc import __version__
from smartdoc.classification.categories import CategoryStoreError
from smartdoc.pipeline import DocumentPipeline
from smartdoc.utils.config import load_config
from smartdoc.utils.logger import get_logger

from .schemas import (
    BatchExtractionResponse,
    BatchItemResponse,
    CategoriesResponse,
    CategoryResponse,
    ExtractionResponse,
    HealthResponse,
)

logger = get_logger(__name__)

app = FastAPI(
    title="SmartDoc OCR API",
    description="Extract text from PDFs and images and classify the documents",
    version=__version__,
)


@lru_cache(maxsize=1)
def get_pipeline() -> DocumentPipeline:
    """Build the shared pipeline once per process.

    Raises:
        RecognitionModelError: If the OCR language model is missing.
    """
    return DocumentPipeline.from_config(load_config())


PipelineDep = Annotated[DocumentPipeline, Depends(get_pipeline)]


async def _process_upload(
    file: UploadFile, pipeline: DocumentPipeline
) -> ExtractionResponse:
    """Store an upload in a temporary file, process it, and delete it."""
    start_time = time.time()
    filename = file.filename or "document"
    content = await file.read()

    fd, name = tempfile.mkstemp(prefix="smartdoc-upload-", suffix=Path(filename).suffix)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(content)
        record = await run_in_threadpool(pipeline.process, Path(name), filename)
    finally:
        Path(name).unlink(missing_ok=True)

    names = {c.id: c.name for c in pipeline.categories.list_all()}
    category = names.get(record.category_id)
    return ExtractionResponse(
        filename=record.filename,
        status=record.status,
        reason=record.reason,
        source=record.source,
        text=record.extracted_text,
        category_id=record.category_id,
        category=category,
        uploaded_at=record.uploaded_at,
        processing_time_ms=(time.time() - start_time) * 1000,
    )


@app.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Return system health status."""
    return HealthResponse(
        status="healthy",
        version=__version__,
        tesseract_available=shutil.which("tesseract") is not None,
    )


@app.get("/categories", response_model=CategoriesResponse)
async def list_categories(pipeline: PipelineDep) -> CategoriesResponse:
    """List the stored categories ordered by name."""
    try:
        categories = pipeline.categories.list_all()
    except CategoryStoreError as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc
    return CategoriesResponse(
        categories=[CategoryResponse(id=c.id, name=c.name) for c in categories]
    )


@app.post("/extract", response_model=ExtractionResponse)
async def extract_document(
    file: Annotated[UploadFile, File(...)],
    pipeline: PipelineDep,
) -> ExtractionResponse:
    """Extract text from an uploaded document and classify it.

    Unreadable documents still produce a response with status
    ``failed``; only category store outages return an error.
    """
    try:
        return await _process_upload(file, pipeline)
    except CategoryStoreError as exc:
        logger.error("Category store unavailable: %s", exc)
        raise HTTPException(status_code=503, detail=str(exc)) from exc


@app.post("/extract/batch", response_model=BatchExtractionResponse)
async def extract_batch(
    files: Annotated[list[UploadFile], File(...)],
    pipeline: PipelineDep,
) -> BatchExtractionResponse:
    """Extract and classify multiple uploaded documents."""
    results: list[BatchItemResponse] = []

    for file in files:
        filename = file.filename or "unknown"
        try:
            result = await _process_upload(file, pipeline)
            results.append(BatchItemResponse(filename=filename, result=result))
        except CategoryStoreError as exc:
            logger.error("Category store unavailable for %s: %s", filename, exc)
            results.append(BatchItemResponse(filename=filename, error=str(exc)))

    processed = [r.result for r in results if r.result is not None]
    return BatchExtractionResponse(
        total_documents=len(files),
        successful=sum(1 for r in processed if r.status == "success"),
        recognized=sum(1 for r in processed if r.category_id is not None),
        results=results,
    )

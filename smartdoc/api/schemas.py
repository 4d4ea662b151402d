"""Pydantic request/response schemas for the FastAPI endpoints."""

from datetime import datetime

from pydantic import BaseModel

from smartdoc.ocr.models import ExtractionStatus, TextSource


class CategoryResponse(BaseModel):
    """A stored category."""

    id: int
    name: str


class CategoriesResponse(BaseModel):
    """Response schema listing the stored categories."""

    categories: list[CategoryResponse]


class ExtractionResponse(BaseModel):
    """Response schema for a single document extraction."""

    filename: str
    status: ExtractionStatus
    reason: str | None = None
    source: TextSource
    text: str
    category_id: int | None = None
    category: str | None = None
    uploaded_at: datetime
    processing_time_ms: float


class BatchItemResponse(BaseModel):
    """Response schema for a single item in a batch extraction."""

    filename: str
    result: ExtractionResponse | None = None
    error: str | None = None


class BatchExtractionResponse(BaseModel):
    """Response schema for batch extraction of multiple documents."""

    total_documents: int
    successful: int
    recognized: int
    results: list[BatchItemResponse]


class HealthResponse(BaseModel):
    """Response schema for the health check endpoint."""

    status: str
    version: str
    tesseract_available: bool

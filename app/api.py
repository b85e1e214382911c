"""HTTP route definitions for the service."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Dict, List

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import PlainTextResponse

from app.schemas import HealthResponse, PointPayload
from models.errors import PipelineError, StorageWriteError
from services.pipeline import IngestService, build_default_service, normalize

logger = logging.getLogger(__name__)

router = APIRouter()

SUCCESS_BODY = "Data posted successfully!"


def get_service() -> IngestService:
    return build_default_service()


def _query_multimap(request: Request) -> Dict[str, List[str]]:
    params = request.query_params
    return {key: params.getlist(key) for key in params.keys()}


def _reject(exc: PipelineError) -> HTTPException:
    logger.warning(
        "Rejected station reading",
        extra={
            "field": exc.field,
            "raw_value": exc.raw_value,
            "reason": type(exc).__name__,
            "status": status.HTTP_400_BAD_REQUEST,
        },
    )
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))


@router.get(
    "/",
    response_class=PlainTextResponse,
    summary="Ingest a station reading sent as query parameters.",
)
@router.get(
    "/data/report",
    response_class=PlainTextResponse,
    summary="Ingest endpoint under the custom-server path used by station firmware.",
    include_in_schema=False,
)
def ingest_reading(
    request: Request,
    service: IngestService = Depends(get_service),
) -> PlainTextResponse:
    arrival = datetime.now(timezone.utc)
    try:
        service.ingest(_query_multimap(request), arrival)
    except PipelineError as exc:
        raise _reject(exc) from exc
    except StorageWriteError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal Server Error",
        ) from exc
    return PlainTextResponse(SUCCESS_BODY)


@router.get(
    "/preview",
    response_model=PointPayload,
    summary="Normalize a reading without writing it.",
)
def preview_reading(
    request: Request,
    service: IngestService = Depends(get_service),
) -> PointPayload:
    try:
        result = normalize(_query_multimap(request), datetime.now(timezone.utc), service.mapper)
    except PipelineError as exc:
        raise _reject(exc) from exc
    return PointPayload.from_point(result.point)


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check endpoint.",
    status_code=status.HTTP_200_OK,
)
async def healthcheck(service: IngestService = Depends(get_service)) -> HealthResponse:
    return HealthResponse(storage=service.writer.name, dialects=list(service.mapper.names))

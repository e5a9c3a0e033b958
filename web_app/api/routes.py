"""API routes implementation."""

from typing import List

from fastapi import APIRouter, Request, HTTPException, Response, status
from datetime import datetime, timezone

from .schemas import (
    ShortenRequest,
    ShortenResponse,
    MappingResponse,
    HealthResponse,
    ErrorResponse,
)
from shortlink.storage.exceptions import NotFoundError, StorageError

router = APIRouter()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
)
async def health_check(request: Request):
    """Health check endpoint for load balancers and monitoring."""
    service = request.app.state.service
    
    healthy = await service.health_check()
    
    return HealthResponse(
        status="ok" if healthy else "unhealthy",
        database="healthy" if healthy else "unhealthy",
        timestamp=datetime.now(timezone.utc),
    )


@router.post(
    "/shorten",
    response_model=ShortenResponse,
    responses={
        422: {"description": "Invalid request"},
        500: {"model": ErrorResponse, "description": "Storage failure"},
    },
    summary="Create a shortened URL",
)
async def shorten_url(request: Request, body: ShortenRequest):
    """Create a shortened URL owned by body.user_id."""
    service = request.app.state.service
    
    try:
        code = await service.shorten(body.user_id, body.url)
    except StorageError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e),
        )
    
    return ShortenResponse(short_url=service.short_url(code), short_code=code)


@router.get(
    "/users/{user_id}/urls",
    response_model=List[MappingResponse],
    responses={
        500: {"model": ErrorResponse, "description": "Storage failure"},
    },
    summary="List a user's short URLs",
)
async def list_user_urls(request: Request, user_id: str):
    """List every mapping owned by user_id."""
    service = request.app.state.service
    
    try:
        mappings = await service.list_mappings(user_id)
    except StorageError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e),
        )
    
    return [MappingResponse.from_mapping(m) for m in mappings]


@router.delete(
    "/urls/{code}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={
        404: {"model": ErrorResponse, "description": "Short code not found"},
        500: {"model": ErrorResponse, "description": "Storage failure"},
    },
    summary="Delete a short URL",
)
async def delete_url(request: Request, code: str):
    """Delete a mapping."""
    service = request.app.state.service
    
    try:
        await service.delete_mapping(code)
    except NotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Short code '{code}' not found",
        )
    except StorageError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e),
        )
    
    return Response(status_code=status.HTTP_204_NO_CONTENT)

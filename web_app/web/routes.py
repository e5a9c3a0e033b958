"""Redirect route implementation."""

from fastapi import APIRouter, Request, HTTPException, status
from fastapi.responses import RedirectResponse

from shortlink.shortcode import ShortCodeGenerator
from shortlink.storage.exceptions import NotFoundError, StorageError

router = APIRouter()


@router.get("/{code}", include_in_schema=False)
async def redirect_to_url(request: Request, code: str):
    """Redirect a short code to its original URL."""
    service = request.app.state.service
    
    # Paths such as favicon.ico never name a mapping
    if not ShortCodeGenerator.is_valid_format(code):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="not found")
    
    try:
        original_url = await service.resolve(code)
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="not found")
    except StorageError:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="storage unavailable",
        )
    
    return RedirectResponse(url=original_url, status_code=status.HTTP_302_FOUND)

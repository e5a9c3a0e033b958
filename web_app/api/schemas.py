"""Pydantic schemas for API requests and responses."""

from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime

from shortlink.common.validators import is_valid_url, MAX_URL_LENGTH
from shortlink.storage.models import URLMapping


class ShortenRequest(BaseModel):
    """Request to shorten a URL."""
    
    user_id: str = Field(..., alias="userId", description="Owner of the short link")
    url: str = Field(..., description="The URL to shorten", min_length=1, max_length=MAX_URL_LENGTH)
    
    @field_validator('url')
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Validate URL format."""
        is_valid, error = is_valid_url(v)
        if not is_valid:
            raise ValueError(error)
        return v
    
    model_config = {
        "populate_by_name": True,
        "json_schema_extra": {
            "examples": [
                {
                    "userId": "user123",
                    "url": "https://example.com/very/long/path/to/resource",
                }
            ]
        }
    }


class ShortenResponse(BaseModel):
    """Response after shortening a URL."""
    
    short_url: str = Field(..., description="The complete short URL")
    short_code: str = Field(..., description="The generated short code")
    
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "short_url": "https://sho.rt/abc123",
                    "short_code": "abc123",
                }
            ]
        }
    }


class MappingResponse(BaseModel):
    """A stored mapping."""
    
    code: str
    original_url: str
    user_id: str
    created_at: datetime
    expires_at: Optional[datetime] = None
    clicks: int
    
    @classmethod
    def from_mapping(cls, mapping: URLMapping) -> "MappingResponse":
        return cls(
            code=mapping.code,
            original_url=mapping.original_url,
            user_id=mapping.user_id,
            created_at=mapping.created_at,
            expires_at=mapping.expires_at,
            clicks=mapping.clicks,
        )


class HealthResponse(BaseModel):
    """Health check response."""
    
    status: str = Field(..., description="Overall status")
    database: str = Field(..., description="Database status")
    timestamp: datetime = Field(..., description="Check timestamp")


class ErrorResponse(BaseModel):
    """Error response."""
    
    detail: str = Field(..., description="Error message")

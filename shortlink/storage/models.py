"""Data models for URL shortener."""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, Any, Mapping


@dataclass
class URLMapping:
    """Represents a short code -> URL mapping in a store."""
    
    code: str
    original_url: str
    user_id: str
    created_at: datetime
    expires_at: Optional[datetime] = None
    clicks: int = 0
    
    def is_expired(self, now: Optional[datetime] = None) -> bool:
        """Return True if expires_at is set and has elapsed."""
        if self.expires_at is None:
            return False
        now = now or datetime.now(timezone.utc)
        return as_utc(self.expires_at) <= now
    
    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "code": self.code,
            "original_url": self.original_url,
            "user_id": self.user_id,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "expires_at": self.expires_at.isoformat() if self.expires_at else None,
            "clicks": self.clicks,
        }
    
    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "URLMapping":
        """Create from a database row or dictionary."""
        created_at = record["created_at"]
        if not isinstance(created_at, datetime):
            created_at = datetime.fromisoformat(created_at)
        expires_at = record.get("expires_at")
        if expires_at is not None and not isinstance(expires_at, datetime):
            expires_at = datetime.fromisoformat(expires_at)
        return cls(
            code=record["code"],
            original_url=record["original_url"],
            user_id=record["user_id"],
            created_at=as_utc(created_at),
            expires_at=as_utc(expires_at) if expires_at else None,
            clicks=record.get("clicks") or 0,
        )


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes, convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)

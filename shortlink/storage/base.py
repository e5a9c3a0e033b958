"""Abstract base class for mapping store implementations."""

from abc import ABC, abstractmethod
from typing import Optional, List

from .models import URLMapping


class MappingStoreBase(ABC):
    """Contract shared by the volatile and durable backends.
    
    Every operation is safe to call concurrently with any other operation
    on the same instance.
    """
    
    @abstractmethod
    async def save(self, mapping: URLMapping) -> None:
        """Insert a new mapping keyed by its code.
        
        Args:
            mapping: The mapping to store
            
        Raises:
            CodeExistsError: If the code is already stored
            StorageError: On backend failure
        """
        pass
    
    @abstractmethod
    async def get(self, code: str) -> Optional[str]:
        """Get the original URL for a code.
        
        Args:
            code: The short code to lookup
            
        Returns:
            The original URL, or None if the code is unknown or expired
        """
        pass
    
    @abstractmethod
    async def get_mapping(self, code: str) -> Optional[URLMapping]:
        """Get the complete mapping for a code, or None if unknown or expired."""
        pass
    
    @abstractmethod
    async def increment_click_count(self, code: str) -> None:
        """Atomically add one to the click counter.
        
        Raises:
            NotFoundError: If the code is not stored
        """
        pass
    
    @abstractmethod
    async def list_by_user(self, user_id: str) -> List[URLMapping]:
        """List every stored mapping owned by user_id (expired ones included)."""
        pass
    
    @abstractmethod
    async def delete(self, code: str) -> None:
        """Delete a mapping.
        
        Raises:
            NotFoundError: If the code is not stored
        """
        pass
    
    @abstractmethod
    async def cleanup_expired(self) -> int:
        """Physically remove expired mappings.
        
        Returns:
            Number of mappings removed
        """
        pass
    
    @abstractmethod
    async def health_check(self) -> bool:
        """Check if the backend is reachable."""
        pass
    
    @abstractmethod
    async def close(self) -> None:
        """Release held resources. Safe to call more than once."""
        pass

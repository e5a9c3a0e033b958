"""Short code generation utilities."""

import random
import string
from typing import Optional


MIN_CODE_LENGTH = 3
MAX_CODE_LENGTH = 20


class ShortCodeGenerator:
    """Generate random short codes.
    
    The generator never consults a store; collisions are handled by whoever
    saves the code.
    """
    
    # Base62 characters (alphanumeric, case-sensitive)
    BASE62_CHARS = string.ascii_letters + string.digits  # a-zA-Z0-9
    
    def __init__(self, default_length: int = 6):
        """Initialize short code generator.
        
        Args:
            default_length: Default length for generated codes
        """
        self.default_length = self._check_length(default_length)
    
    def generate(self, length: Optional[int] = None) -> str:
        """Generate a random short code.
        
        Args:
            length: Length of the code (uses default if not specified)
            
        Returns:
            Random short code
        """
        length = self._check_length(self.default_length if length is None else length)
        return ''.join(random.choices(self.BASE62_CHARS, k=length))
    
    @staticmethod
    def _check_length(length: int) -> int:
        if not MIN_CODE_LENGTH <= length <= MAX_CODE_LENGTH:
            raise ValueError(
                f"short code length must be between {MIN_CODE_LENGTH} and {MAX_CODE_LENGTH}, got {length}"
            )
        return length
    
    @staticmethod
    def is_valid_format(code: str) -> bool:
        """Check if code only uses base62 characters.
        
        Args:
            code: Code to validate
            
        Returns:
            True if valid format
        """
        return bool(code) and all(c in ShortCodeGenerator.BASE62_CHARS for c in code)

"""
Input sanitization for display fields (label, issuer).

Rejects:
- Null bytes and control characters
- Script/XSS payloads (labels are rendered by browser clients)
"""
import re
from typing import Optional


class InputSanitizer:
    """Validates and sanitizes user input."""

    CONTROL_CHAR_PATTERN = re.compile(r'[\x00-\x1f\x7f]')
    SCRIPT_PATTERN = re.compile(r'<script|javascript:|onerror|onclick|<iframe|<embed', re.IGNORECASE)

    @staticmethod
    def sanitize_string(value: str, max_length: Optional[int] = None) -> str:
        """
        Sanitize a single-line string.

        Raises:
            ValueError: If input contains dangerous patterns or is too long
        """
        if not isinstance(value, str):
            raise ValueError("Input must be string")

        if InputSanitizer.CONTROL_CHAR_PATTERN.search(value):
            raise ValueError("Control characters not allowed")

        if InputSanitizer.SCRIPT_PATTERN.search(value):
            raise ValueError("Script/XSS patterns not allowed")

        value = value.strip()

        if max_length and len(value) > max_length:
            raise ValueError(f"Input exceeds max length of {max_length}")

        return value

    @staticmethod
    def sanitize_label(value: str) -> str:
        """Label is required: non-empty after trimming."""
        sanitized = InputSanitizer.sanitize_string(value, max_length=255)
        if not sanitized:
            raise ValueError("Label cannot be empty")
        return sanitized

    @staticmethod
    def sanitize_issuer(value: Optional[str]) -> Optional[str]:
        """Issuer is optional; blank becomes None."""
        if value is None:
            return None
        sanitized = InputSanitizer.sanitize_string(value, max_length=255)
        return sanitized or None

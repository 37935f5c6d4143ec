"""
Email Value Object
Immutable, normalised email with validation
"""
import re
from dataclasses import dataclass


@dataclass(frozen=True)
class Email:
    """Email value object with validation"""

    value: str

    def __post_init__(self):
        """Validate and normalise email format"""
        normalised = (self.value or "").strip().lower()
        if not self.is_valid(normalised):
            raise ValueError(f"Invalid email format: {self.value}")
        object.__setattr__(self, "value", normalised)

    @staticmethod
    def is_valid(email: str) -> bool:
        """Validate email using regex"""
        pattern = r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$'
        return bool(re.match(pattern, email or ""))

    def __str__(self) -> str:
        return self.value

    def __repr__(self) -> str:
        return f"Email({self.value})"

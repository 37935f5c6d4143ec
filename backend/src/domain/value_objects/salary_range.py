"""
Salary Range Value Object
Immutable salary range with validation
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class SalaryRange:
    """Salary range value object; either bound may be open"""

    min_salary: Optional[Decimal] = None
    max_salary: Optional[Decimal] = None
    currency: str = "USD"

    def __post_init__(self):
        """Validate salary range"""
        if self.min_salary is not None and self.min_salary < 0:
            raise ValueError("Minimum salary cannot be negative")
        if self.max_salary is not None:
            if self.max_salary < 0:
                raise ValueError("Maximum salary cannot be negative")
            if self.min_salary is not None and self.max_salary < self.min_salary:
                raise ValueError("Maximum salary cannot be less than minimum salary")

    def reaches(self, amount: Decimal) -> bool:
        """True when the top of the range is at least amount"""
        top = self.max_salary if self.max_salary is not None else self.min_salary
        return top is not None and top >= amount

    def starts_within(self, amount: Decimal) -> bool:
        """True when the bottom of the range does not exceed amount"""
        bottom = self.min_salary if self.min_salary is not None else self.max_salary
        return bottom is not None and bottom <= amount

    def __str__(self) -> str:
        if self.min_salary is not None and self.max_salary is not None:
            return f"{self.currency} {self.min_salary:,} - {self.max_salary:,}"
        if self.min_salary is not None:
            return f"{self.currency} {self.min_salary:,}+"
        if self.max_salary is not None:
            return f"up to {self.currency} {self.max_salary:,}"
        return "unspecified"

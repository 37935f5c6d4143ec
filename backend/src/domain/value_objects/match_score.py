"""
MatchScore Value Object
Cosine similarity between two embeddings, clamped to 0-1
"""
from dataclasses import dataclass


@dataclass(frozen=True)
class MatchScore:
    """Match score value object - immutable"""

    value: float

    def __post_init__(self):
        """Validate match score range"""
        if not isinstance(self.value, (int, float)):
            raise TypeError("Match score must be a number")

        if not 0 <= self.value <= 1:
            raise ValueError("Match score must be between 0 and 1")

    @classmethod
    def from_similarity(cls, similarity: float) -> "MatchScore":
        """Cosine similarity lies in [-1, 1]; negative values count as no match"""
        return cls(float(max(0.0, min(1.0, similarity))))

    @property
    def percent(self) -> int:
        return int(round(self.value * 100))

    def __float__(self) -> float:
        return float(self.value)

    def __str__(self) -> str:
        return f"{self.percent}%"

    def __repr__(self) -> str:
        return f"MatchScore({self.value})"

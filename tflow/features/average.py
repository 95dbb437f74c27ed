"""
Running average of scalar samples.
"""

from dataclasses import dataclass
from typing import Iterable


@dataclass
class Average:
    """Incrementally accumulated mean."""
    total: float = 0.0
    count: int = 0

    def add_sample(self, value: float) -> None:
        self.total += value
        self.count += 1

    def add_samples(self, values: Iterable[float]) -> None:
        for value in values:
            self.add_sample(value)

    @property
    def has_samples(self) -> bool:
        return self.count > 0

    @property
    def value(self) -> float:
        """Mean of all samples, 0.0 if there are none."""
        if self.count == 0:
            return 0.0
        return self.total / self.count

    def __add__(self, other: "Average") -> "Average":
        return Average(self.total + other.total, self.count + other.count)

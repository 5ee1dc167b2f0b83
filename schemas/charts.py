"""Chart data schemas."""

from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field


class ChartType(str, Enum):
    """Supported chart types."""
    BAR = "bar"
    LINE = "line"
    PIE = "pie"

    @classmethod
    def parse(cls, value: Optional[str]) -> "ChartType":
        """Map a free-form chart type to a supported one (bar by default)."""
        try:
            return cls((value or "").strip().lower())
        except ValueError:
            return cls.BAR


class ChartDataset(BaseModel):
    """Labeled numeric data extracted from an answer."""
    labels: List[str] = Field(default_factory=list)
    data: List[float] = Field(default_factory=list)
    units: List[str] = Field(default_factory=list)
    title: Optional[str] = None
    chart_type: ChartType = ChartType.BAR

    def is_usable(self) -> bool:
        """A chart needs at least one label with exactly one value per label."""
        return len(self.labels) > 0 and len(self.labels) == len(self.data)

    def primary_unit(self) -> str:
        """First non-empty unit, used for axis labels."""
        for unit in self.units:
            if unit:
                return unit
        return ""

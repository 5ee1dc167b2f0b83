"""Renderer that tries several backends in order."""

import logging
from typing import List, Optional

from schemas.charts import ChartDataset, ChartType
from .base import ChartRenderer, ChartResult

logger = logging.getLogger(__name__)


class FallbackChartRenderer(ChartRenderer):
    """
    Tries each renderer in order and returns the first result.

    Raises the last error if every backend fails.
    """

    def __init__(self, renderers: List[ChartRenderer]):
        if not renderers:
            raise ValueError("FallbackChartRenderer needs at least one renderer")
        self.renderers = renderers

    def render(
        self,
        dataset: ChartDataset,
        chart_type: ChartType = ChartType.BAR,
        title: Optional[str] = None
    ) -> ChartResult:
        last_error: Optional[Exception] = None
        for renderer in self.renderers:
            try:
                return renderer.render(dataset, chart_type, title)
            except Exception as e:
                logger.warning(f"Chart renderer {renderer.get_name()} failed: {e}")
                last_error = e
        raise last_error

    def get_name(self) -> str:
        return "fallback(" + ",".join(r.get_name() for r in self.renderers) + ")"

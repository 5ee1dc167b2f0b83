"""Chart rendering backends."""

import logging
from typing import Optional

from config.settings import Settings
from .base import ChartRenderer, ChartResult, prepare_chart_frame, build_chartjs_config
from .quickchart import QuickChartRenderer, QuickChartUrlRenderer
from .fallback import FallbackChartRenderer

logger = logging.getLogger(__name__)


def create_chart_renderer(settings: Settings) -> Optional[ChartRenderer]:
    """
    Create the chart renderer selected by settings.

    "quickchart" renders PNG bytes and falls back to a QuickChart URL,
    "quickchart_url" only builds URLs, "none" disables charts.

    Raises:
        ValueError: If the renderer name is unknown
    """
    name = (settings.chart_renderer or "none").lower()

    if name == "none":
        return None
    if name == "quickchart":
        return FallbackChartRenderer([
            QuickChartRenderer(settings.quickchart_url),
            QuickChartUrlRenderer(settings.quickchart_url),
        ])
    if name == "quickchart_url":
        return QuickChartUrlRenderer(settings.quickchart_url)

    raise ValueError(f"Unsupported chart renderer: {settings.chart_renderer}")


__all__ = [
    "ChartRenderer",
    "ChartResult",
    "prepare_chart_frame",
    "build_chartjs_config",
    "QuickChartRenderer",
    "QuickChartUrlRenderer",
    "FallbackChartRenderer",
    "create_chart_renderer",
]

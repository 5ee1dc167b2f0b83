"""QuickChart rendering backends."""

import json
import logging
from typing import Optional
from urllib.parse import quote

import requests

from schemas.charts import ChartDataset, ChartType
from .base import ChartRenderer, ChartResult, build_chartjs_config, CHART_WIDTH, CHART_HEIGHT

logger = logging.getLogger(__name__)

DEFAULT_QUICKCHART_URL = "https://quickchart.io"


class QuickChartRenderer(ChartRenderer):
    """Renders PNG bytes by posting a Chart.js config to a QuickChart server."""

    def __init__(self, base_url: str = DEFAULT_QUICKCHART_URL, timeout: float = 10.0):
        """
        Initialize renderer.

        Args:
            base_url: QuickChart server URL
            timeout: Request timeout in seconds
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def render(
        self,
        dataset: ChartDataset,
        chart_type: ChartType = ChartType.BAR,
        title: Optional[str] = None
    ) -> ChartResult:
        config = build_chartjs_config(dataset, chart_type, title)
        payload = {
            "chart": config,
            "width": CHART_WIDTH,
            "height": CHART_HEIGHT,
            "format": "png",
            "backgroundColor": "white",
        }

        response = requests.post(
            f"{self.base_url}/chart",
            json=payload,
            timeout=self.timeout
        )

        if response.status_code != 200:
            raise RuntimeError(f"QuickChart returned status {response.status_code}: {response.text[:200]}")

        logger.info(f"Rendered {chart_type.value} chart ({len(response.content)} bytes)")
        return response.content

    def get_name(self) -> str:
        return "quickchart"


class QuickChartUrlRenderer(ChartRenderer):
    """Builds a QuickChart image URL without any network call."""

    def __init__(self, base_url: str = DEFAULT_QUICKCHART_URL):
        self.base_url = base_url.rstrip("/")

    def render(
        self,
        dataset: ChartDataset,
        chart_type: ChartType = ChartType.BAR,
        title: Optional[str] = None
    ) -> ChartResult:
        config = build_chartjs_config(dataset, chart_type, title)
        encoded = quote(json.dumps(config, separators=(",", ":")))
        return f"{self.base_url}/chart?w={CHART_WIDTH}&h={CHART_HEIGHT}&bkg=white&c={encoded}"

    def get_name(self) -> str:
        return "quickchart_url"

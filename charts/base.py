"""Chart renderer interface and shared chart preparation."""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Union

import pandas as pd

from schemas.charts import ChartDataset, ChartType

logger = logging.getLogger(__name__)

CHART_COLORS = [
    "#3498db", "#e74c3c", "#f39c12", "#2ecc71", "#9b59b6", "#1abc9c",
    "#34495e", "#e67e22", "#95a5a6", "#f1c40f", "#8e44ad", "#16a085",
]

CHART_WIDTH = 600
CHART_HEIGHT = 400

# PNG bytes, an http(s) URL, or a local file path
ChartResult = Union[bytes, str]


class ChartRenderer(ABC):
    """Abstract base class for chart rendering backends."""

    @abstractmethod
    def render(
        self,
        dataset: ChartDataset,
        chart_type: ChartType = ChartType.BAR,
        title: Optional[str] = None
    ) -> ChartResult:
        """
        Render a dataset as an image.

        Args:
            dataset: Labeled numeric data
            chart_type: Bar, line or pie
            title: Chart title

        Returns:
            PNG bytes, image URL, or file path

        Raises:
            Exception: Any rendering failure; the caller degrades to text
        """
        pass

    @abstractmethod
    def get_name(self) -> str:
        """Get the renderer name for logging."""
        pass


def prepare_chart_frame(dataset: ChartDataset) -> pd.DataFrame:
    """
    Build a category/value frame from a dataset.

    Values are coerced to numbers; anything non-numeric becomes 0.

    Raises:
        ValueError: If the dataset has no rows
    """
    df = pd.DataFrame({
        "category": [str(label) for label in dataset.labels],
        "value": pd.Series(list(dataset.data), dtype="object")
    })
    df["value"] = pd.to_numeric(df["value"], errors="coerce").fillna(0)

    if df.empty:
        raise ValueError("No valid data provided for chart generation")

    logger.debug(f"Prepared chart frame with {len(df)} rows")
    return df


def build_chartjs_config(
    dataset: ChartDataset,
    chart_type: ChartType = ChartType.BAR,
    title: Optional[str] = None
) -> Dict[str, Any]:
    """Build a Chart.js configuration for a dataset."""
    df = prepare_chart_frame(dataset)
    unit = dataset.primary_unit()
    colors = [CHART_COLORS[i % len(CHART_COLORS)] for i in range(len(df))]
    chart_title = title or dataset.title or "Chart"

    config: Dict[str, Any] = {
        "type": chart_type.value,
        "data": {
            "labels": df["category"].tolist(),
            "datasets": [{
                "label": f"Value ({unit})" if unit else "Value",
                "data": [float(v) for v in df["value"].tolist()],
                "backgroundColor": colors,
                "borderColor": colors if chart_type != ChartType.LINE else CHART_COLORS[0],
                "borderWidth": 1,
                "fill": False,
            }]
        },
        "options": {
            "plugins": {
                "title": {"display": True, "text": chart_title},
                "legend": {"display": chart_type == ChartType.PIE},
            }
        }
    }

    if chart_type != ChartType.PIE:
        config["options"]["scales"] = {
            "y": {
                "beginAtZero": True,
                "title": {"display": bool(unit), "text": unit},
            }
        }

    return config

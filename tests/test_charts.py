"""Tests for chart renderers."""

import json
from urllib.parse import unquote

import pytest
from unittest.mock import Mock, patch

from charts import create_chart_renderer
from charts.base import prepare_chart_frame, build_chartjs_config, CHART_COLORS
from charts.quickchart import QuickChartRenderer, QuickChartUrlRenderer
from charts.fallback import FallbackChartRenderer
from config.settings import Settings
from schemas.charts import ChartDataset, ChartType
from schemas.messages import Attachment


class TestChartPreparation:
    """Test data frame preparation and Chart.js config."""

    def setup_method(self):
        """Set up test fixtures."""
        self.dataset = ChartDataset(
            labels=["Papers Transportation", "Clipper Logistics"],
            data=[740, 260],
            units=["USD", "USD"],
            title="Detention"
        )

    def test_prepare_chart_frame(self):
        """Test category/value columns."""
        df = prepare_chart_frame(self.dataset)

        assert list(df.columns) == ["category", "value"]
        assert df["category"].tolist() == ["Papers Transportation", "Clipper Logistics"]
        assert df["value"].tolist() == [740, 260]

    def test_prepare_empty_dataset(self):
        """Test that an empty dataset cannot be charted."""
        with pytest.raises(ValueError):
            prepare_chart_frame(ChartDataset())

    def test_bar_config(self):
        """Test a bar chart config."""
        config = build_chartjs_config(self.dataset, ChartType.BAR, "Detention Cost")

        assert config["type"] == "bar"
        assert config["data"]["labels"] == ["Papers Transportation", "Clipper Logistics"]
        assert config["data"]["datasets"][0]["data"] == [740.0, 260.0]
        assert config["data"]["datasets"][0]["label"] == "Value (USD)"
        assert config["data"]["datasets"][0]["backgroundColor"] == CHART_COLORS[:2]
        assert config["options"]["plugins"]["title"]["text"] == "Detention Cost"
        assert config["options"]["scales"]["y"]["beginAtZero"] is True

    def test_pie_config_has_no_axes(self):
        """Test that pie charts show a legend and no scales."""
        config = build_chartjs_config(self.dataset, ChartType.PIE)

        assert "scales" not in config["options"]
        assert config["options"]["plugins"]["legend"]["display"] is True
        assert config["options"]["plugins"]["title"]["text"] == "Detention"


class TestQuickChartRenderer:
    """Test the QuickChart PNG backend."""

    def setup_method(self):
        """Set up test fixtures."""
        self.renderer = QuickChartRenderer(base_url="https://charts.example.com/", timeout=3)
        self.dataset = ChartDataset(labels=["A", "B"], data=[1, 2])

    @patch("requests.post")
    def test_render_returns_png_bytes(self, mock_post):
        """Test a successful render."""
        mock_response = Mock()
        mock_response.status_code = 200
        mock_response.content = b"\x89PNG"
        mock_post.return_value = mock_response

        result = self.renderer.render(self.dataset, ChartType.LINE, "Trend")

        assert result == b"\x89PNG"
        call_args = mock_post.call_args
        assert call_args[0][0] == "https://charts.example.com/chart"
        assert call_args[1]["json"]["chart"]["type"] == "line"
        assert call_args[1]["json"]["format"] == "png"
        assert call_args[1]["timeout"] == 3

    @patch("requests.post")
    def test_render_error_status(self, mock_post):
        """Test that a non-200 response raises."""
        mock_response = Mock()
        mock_response.status_code = 500
        mock_response.text = "server error"
        mock_post.return_value = mock_response

        with pytest.raises(RuntimeError):
            self.renderer.render(self.dataset)


class TestQuickChartUrlRenderer:
    """Test the URL backend."""

    def test_builds_url(self):
        """Test that the URL embeds the config."""
        url = QuickChartUrlRenderer("https://quickchart.io").render(
            ChartDataset(labels=["A"], data=[5]), ChartType.BAR, "Title"
        )

        assert url.startswith("https://quickchart.io/chart?")
        config = json.loads(unquote(url.split("&c=", 1)[1]))
        assert config["data"]["labels"] == ["A"]
        assert Attachment.from_chart(url).content_url == url


class TestFallbackChartRenderer:
    """Test backend fallback order."""

    def test_uses_first_working_renderer(self):
        """Test that a failing backend is skipped."""
        broken = Mock()
        broken.render.side_effect = RuntimeError("no network")
        broken.get_name.return_value = "broken"
        working = Mock()
        working.render.return_value = "https://example.com/chart.png"
        dataset = ChartDataset(labels=["A"], data=[1])

        result = FallbackChartRenderer([broken, working]).render(dataset, ChartType.PIE, "T")

        assert result == "https://example.com/chart.png"
        working.render.assert_called_once_with(dataset, ChartType.PIE, "T")

    def test_raises_when_all_fail(self):
        """Test that the last error propagates."""
        broken = Mock()
        broken.render.side_effect = RuntimeError("no network")
        broken.get_name.return_value = "broken"

        with pytest.raises(RuntimeError):
            FallbackChartRenderer([broken]).render(ChartDataset(labels=["A"], data=[1]))


class TestCreateChartRenderer:
    """Test renderer selection from settings."""

    def test_selection(self):
        assert create_chart_renderer(Settings(chart_renderer="none")) is None
        assert isinstance(create_chart_renderer(Settings(chart_renderer="quickchart_url")), QuickChartUrlRenderer)
        assert isinstance(create_chart_renderer(Settings(chart_renderer="quickchart")), FallbackChartRenderer)

    def test_unknown_renderer(self):
        with pytest.raises(ValueError):
            create_chart_renderer(Settings(chart_renderer="canvas"))

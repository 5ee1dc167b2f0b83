"""Extraction of chartable data from answer text."""

import re
import json
import logging
from typing import List, Optional

from llm.base_client import BaseLLMClient, Message
from schemas.charts import ChartDataset, ChartType

logger = logging.getLogger(__name__)

CHART_KEYWORDS = (
    "graph",
    "chart",
    "plot",
    "visual",
    "breakdown",
    "distribution",
    "diagram",
    "trend",
    "compare",
    "comparison",
)

NUMBER = r"(\d+(?:,\d{3})*(?:\.\d+)?)"

# "Label - 123 USD" or "Label: 123 USD"
LABEL_VALUE_USD = re.compile(r"([A-Za-z\s&]+?)\s*[-:]\s*" + NUMBER + r"\s*(USD|dollars?)", re.IGNORECASE)
# "Label 123 USD"
LABEL_SPACE_VALUE_USD = re.compile(r"([A-Za-z\s&]+?)\s+" + NUMBER + r"\s*(USD|dollars?)", re.IGNORECASE)
# "Label - 123" or "Label: 45 %"
LABEL_VALUE = re.compile(r"([A-Za-z\s&]+?)\s*[-:]\s*" + NUMBER + r"\s*(%|units?|pieces?)?", re.IGNORECASE)

# Text bar charts: "Carrier Name     ████ 740 USD"
BAR_LINE_NAME = re.compile(r"^([A-Za-z\s&]+?)(?:\s{3,}|█)")
BAR_LINE_VALUE = re.compile(NUMBER + r"\s*(USD|dollars?)", re.IGNORECASE)


def wants_chart(query: str) -> bool:
    """Whether the user asked for a visual answer."""
    query_lower = (query or "").lower()
    return any(keyword in query_lower for keyword in CHART_KEYWORDS)


def _to_number(value: str) -> float:
    return float(value.replace(",", ""))


def extract_with_patterns(text: str) -> Optional[ChartDataset]:
    """
    Extract label/value pairs with regular expressions.

    Tries, in order: text bar-chart lines, "Label - N USD", "Label N USD",
    then generic "Label - N". Totals are skipped.

    Returns:
        ChartDataset or None if nothing usable was found
    """
    labels: List[str] = []
    values: List[float] = []
    units: List[str] = []

    for line in (text or "").split("\n"):
        line = line.strip()
        if not line or "total" in line.lower():
            continue
        if "█" not in line and not (re.search(r"[A-Za-z]", line) and BAR_LINE_VALUE.search(line)):
            continue
        name_match = BAR_LINE_NAME.match(line)
        value_match = BAR_LINE_VALUE.search(line)
        if name_match and value_match:
            labels.append(name_match.group(1).strip())
            values.append(_to_number(value_match.group(1)))
            units.append(value_match.group(2) or "USD")

    if not labels:
        for pattern in (LABEL_VALUE_USD, LABEL_SPACE_VALUE_USD, LABEL_VALUE):
            for match in pattern.finditer(text or ""):
                label = match.group(1).strip()
                if not label or "total" in label.lower():
                    continue
                labels.append(label)
                values.append(_to_number(match.group(2)))
                units.append(match.group(3) or "")
            if labels:
                break

    if not labels:
        return None

    logger.info(f"Pattern extraction found {len(labels)} data points")
    return ChartDataset(labels=labels, data=values, units=units)


class ChartDataExtractor:
    """Finds a labeled numeric dataset in an answer, via LLM then regex."""

    SYSTEM_PROMPT = "You are a data extraction specialist. Extract structured data for chart creation. Always return valid JSON."

    EXTRACTION_PROMPT = """Extract data from the following text that can be used to create a graph/chart.

Text: "{text}"
Question context: "{question}"

Please analyze the text and extract:
1. Labels/categories (company names, time periods, etc.)
2. Numerical values associated with each label
3. Units (USD, %, etc.)

Return a JSON object with this exact structure:
{{
  "labels": ["Label1", "Label2", "Label3"],
  "data": [value1, value2, value3],
  "units": ["unit1", "unit2", "unit3"],
  "title": "Suggested chart title",
  "chartType": "bar" | "pie" | "line"
}}

Rules:
- Only include data that has both a clear label and numerical value
- Exclude totals, summaries, or aggregate values
- Clean up label names (remove extra spaces, formatting characters)
- Convert all numbers to numeric values (remove commas, currency symbols)
- Suggest the most appropriate chart type for the data
- If no graphable data is found, return {{"labels": [], "data": [], "units": []}}"""

    def __init__(self, llm_client: Optional[BaseLLMClient] = None):
        self.llm_client = llm_client

    def extract(self, text: str, question: str = "") -> Optional[ChartDataset]:
        """
        Extract a chart dataset from answer text.

        Never raises; returns None when no usable data is found.
        """
        dataset = None
        if self.llm_client:
            dataset = self.extract_with_llm(text, question)

        if dataset is None:
            try:
                dataset = extract_with_patterns(text)
            except Exception as e:
                logger.warning(f"Pattern extraction failed: {e}")
                dataset = None

        if dataset is not None and not dataset.is_usable():
            return None
        return dataset

    def extract_with_llm(self, text: str, question: str = "") -> Optional[ChartDataset]:
        """Ask the LLM for {labels, data, units, title, chartType}."""
        messages = [
            Message(role="system", content=self.SYSTEM_PROMPT),
            Message(role="user", content=self.EXTRACTION_PROMPT.format(text=text, question=question))
        ]

        try:
            response = self.llm_client.chat(
                messages=messages,
                temperature=0.1,
                max_tokens=1000
            )

            content = response.content.strip()

            # Handle potential markdown code blocks
            if content.startswith("```"):
                content = content.split("```")[1]
                if content.startswith("json"):
                    content = content[4:]
                content = content.strip()

            parsed = json.loads(content)

            labels = [str(label).strip() for label in parsed.get("labels") or []]
            values = [
                _to_number(v) if isinstance(v, str) else float(v)
                for v in parsed.get("data") or []
            ]
            if not labels or len(labels) != len(values):
                logger.info("LLM extraction returned no usable data")
                return None

            return ChartDataset(
                labels=labels,
                data=values,
                units=[str(u) for u in parsed.get("units") or []],
                title=parsed.get("title"),
                chart_type=ChartType.parse(parsed.get("chartType"))
            )

        except json.JSONDecodeError as e:
            logger.warning(f"Failed to parse chart extraction as JSON: {e}")
            return None

        except Exception as e:
            logger.warning(f"LLM chart extraction error: {e}")
            return None

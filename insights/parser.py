# insight formatting - renders score diffs as text and reads them back

import json
from typing import Dict, List, Mapping, Protocol, Sequence, Tuple

class InsightFormatter(Protocol):
    """renders one insight value from a column's provenance json and its diffs"""

    def render(self, provenance_json: str, diffs: Sequence[float]):
        ...

class JsonInsightFormatter:
    """
    default formatter: json list of [class index, diff] pairs

    e.g. '[[0, -0.12], [1, 0.12]]'
    """

    def render(self, provenance_json: str, diffs: Sequence[float]) -> str:
        return json.dumps([[i, float(d)] for i, d in enumerate(diffs)])

def parse_insight(text: str) -> List[Tuple[int, float]]:
    """read one rendered insight back into (class index, diff) pairs"""
    return [(int(i), float(d)) for i, d in json.loads(text)]

def parse_insights(insights: Mapping[str, str]) -> Dict[str, List[Tuple[int, float]]]:
    """
    parse a whole insight map produced with JsonInsightFormatter

    args:
        insights: raw feature name -> rendered insight

    returns:
        raw feature name -> list of (class index, diff)
    """
    return {name: parse_insight(text) for name, text in insights.items()}

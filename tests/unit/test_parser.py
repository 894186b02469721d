# unit tests for insight rendering and parsing

import json

from insights.parser import JsonInsightFormatter, parse_insight, parse_insights

def test_render_pairs_class_index_with_diff():
    text = JsonInsightFormatter().render("{}", [-0.25, 0.25])

    assert json.loads(text) == [[0, -0.25], [1, 0.25]]

def test_parse_insights():
    insights = {
        "age_value": "[[0, 0.1], [1, -0.1]]",
        "description": "[[0, 0.5]]",
    }

    parsed = parse_insights(insights)

    assert parsed["age_value"] == [(0, 0.1), (1, -0.1)]
    assert parsed["description"] == [(0, 0.5)]

def test_parse_rendered_insight():
    text = JsonInsightFormatter().render("{}", [0.125, -0.5, 0.375])

    assert parse_insight(text) == [(0, 0.125), (1, -0.5), (2, 0.375)]

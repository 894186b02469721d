# shared fixtures

import pytest

from helpers import numeric_columns, text_columns, text_map_columns
from insights.metadata import PositionProvenance, VectorMetadata

@pytest.fixture
def make_metadata():
    """factory for metadata of n plain numeric columns"""
    def _make(n):
        return VectorMetadata(numeric_columns(n), name="test")
    return _make

@pytest.fixture
def mixed_metadata():
    """
    8 positions:
        0-1 numeric, 2-4 text 'description', 5-6 text map 'notes'/'color',
        7 an ungrouped column without indicator or descriptor
    """
    columns = (
        numeric_columns(2)
        + text_columns("description", 3, start=2)
        + text_map_columns("notes", "color", 2, start=5)
        + [PositionProvenance(index=7, parent_feature_origins=["orphan"])]
    )
    return VectorMetadata(columns, name="mixed")

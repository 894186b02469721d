# unit tests for the vector position registry

import json

import pytest

from helpers import numeric_columns
from insights.errors import MetadataError
from insights.metadata import Derivation, PositionProvenance, VectorMetadata

def test_lookup_and_text_indices(mixed_metadata):
    assert mixed_metadata.size == 8
    assert mixed_metadata.text_indices == [2, 3, 4, 5, 6]
    assert mixed_metadata.provenance_of(5).grouping == "color"

def test_column_names(mixed_metadata):
    assert mixed_metadata.raw_name_of(0) == "f0_value"
    assert mixed_metadata.raw_name_of(2) == "description"
    assert mixed_metadata.raw_name_of(5) == "notes_color"
    assert mixed_metadata.raw_name_of(7) == "orphan"

def test_column_name_with_indicator():
    provenance = PositionProvenance(
        index=0, parent_feature_origins=["country"], indicator_value="FR"
    )
    assert provenance.column_name == "country_FR"
    assert not provenance.needs_aggregation

def test_column_name_without_origin():
    assert PositionProvenance(index=4).column_name == "column_4"

def test_needs_aggregation_flags(mixed_metadata):
    assert not mixed_metadata.provenance_of(0).needs_aggregation
    assert mixed_metadata.provenance_of(3).needs_aggregation
    assert mixed_metadata.provenance_of(7).needs_aggregation

def test_provenance_json_is_stable(mixed_metadata):
    text = mixed_metadata.provenance_json(5)
    data = json.loads(text)

    assert data["derivation"] == "text_map"
    assert data["grouping"] == "color"
    assert text == mixed_metadata.provenance_of(5).to_json()

def test_rejects_gaps():
    columns = numeric_columns(3)
    with pytest.raises(MetadataError, match="without gaps"):
        VectorMetadata([columns[0], columns[2]])

def test_rejects_duplicates():
    columns = numeric_columns(2)
    with pytest.raises(MetadataError):
        VectorMetadata([columns[0], columns[1], columns[1]])

def test_from_dict_round_trip(mixed_metadata):
    restored = VectorMetadata.from_dict(mixed_metadata.to_dict())

    assert restored.name == "mixed"
    assert restored.text_indices == mixed_metadata.text_indices
    assert [restored.raw_name_of(i) for i in range(8)] == \
        [mixed_metadata.raw_name_of(i) for i in range(8)]

def test_from_dict_defaults():
    metadata = VectorMetadata.from_dict({"columns": [{"index": 0}]})

    provenance = metadata.provenance_of(0)
    assert provenance.derivation is Derivation.NONE
    assert provenance.parent_feature_origins == []

def test_unknown_derivation():
    with pytest.raises(MetadataError, match="unknown derivation"):
        VectorMetadata.from_dict({"columns": [{"index": 0, "derivation": "smart"}]})

def test_missing_columns():
    with pytest.raises(MetadataError):
        VectorMetadata.from_dict({"name": "x"})

def test_load_from_file(tmp_path, mixed_metadata):
    path = tmp_path / "metadata.json"
    path.write_text(json.dumps(mixed_metadata.to_dict()))

    loaded = VectorMetadata.load(path)

    assert loaded.size == 8
    assert loaded.provenance_of(2).derivation is Derivation.TEXT

def test_load_invalid_json(tmp_path):
    path = tmp_path / "metadata.json"
    path.write_text("{not json")

    with pytest.raises(MetadataError, match="invalid vector metadata"):
        VectorMetadata.load(path)

# vector position registry - describes where every position of a feature vector came from
# built once per model/pipeline and shared read-only by every record

import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from functools import cached_property
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from insights.errors import MetadataError

logger = logging.getLogger(__name__)

class Derivation(str, Enum):
    """which vectorizer family produced a position"""

    TEXT = "text"          # single text column vectorizer (hashed tokens etc)
    TEXT_MAP = "text_map"  # text map vectorizer, one group per map key
    NONE = "none"

@dataclass(frozen=True)
class PositionProvenance:
    """
    metadata for one vector position

    args:
        index: position in the feature vector
        parent_feature_origins: raw feature names the position was built from
        parent_feature_stages: ids of the stages that produced it (display only)
        grouping: group key shared by sibling positions (map key, etc)
        indicator_value: pivot value for one-hot style positions
        descriptor_value: description for derived numeric positions
        derivation: explicit vectorizer family tag
    """

    index: int
    parent_feature_origins: List[str] = field(default_factory=list)
    parent_feature_stages: List[str] = field(default_factory=list)
    grouping: Optional[str] = None
    indicator_value: Optional[str] = None
    descriptor_value: Optional[str] = None
    derivation: Derivation = Derivation.NONE

    @property
    def is_text_derived(self) -> bool:
        """positions that must be examined even when zero in the vector"""
        return self.derivation in (Derivation.TEXT, Derivation.TEXT_MAP)

    @property
    def needs_aggregation(self) -> bool:
        """no indicator or descriptor means the position is one bucket of a family"""
        return self.indicator_value is None and self.descriptor_value is None

    @property
    def column_name(self) -> str:
        parts = list(self.parent_feature_origins)
        if self.grouping and self.grouping not in parts:
            parts.append(self.grouping)
        for extra in (self.indicator_value, self.descriptor_value):
            if extra is not None:
                parts.append(extra)
        return "_".join(parts) if parts else f"column_{self.index}"

    def to_dict(self) -> Dict:
        return {
            "index": self.index,
            "parent_feature_origins": list(self.parent_feature_origins),
            "parent_feature_stages": list(self.parent_feature_stages),
            "grouping": self.grouping,
            "indicator_value": self.indicator_value,
            "descriptor_value": self.descriptor_value,
            "derivation": self.derivation.value,
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), sort_keys=True)

    @classmethod
    def from_dict(cls, record: Dict) -> "PositionProvenance":
        try:
            derivation = Derivation(record.get("derivation") or Derivation.NONE.value)
        except ValueError:
            raise MetadataError(
                f"unknown derivation {record.get('derivation')!r} "
                f"for column {record.get('index')}"
            ) from None

        if "index" not in record:
            raise MetadataError(f"column record without index: {record}")

        return cls(
            index=int(record["index"]),
            parent_feature_origins=list(record.get("parent_feature_origins") or []),
            parent_feature_stages=list(record.get("parent_feature_stages") or []),
            grouping=record.get("grouping") or None,
            indicator_value=record.get("indicator_value"),
            descriptor_value=record.get("descriptor_value"),
            derivation=derivation,
        )

class VectorMetadata:
    """
    registry of position provenance for a feature vector of fixed size

    read-only once built, so one instance can serve concurrent records
    """

    def __init__(self, columns: Iterable[PositionProvenance], name: str = "features"):
        self.name = name
        self._columns = tuple(sorted(columns, key=lambda c: c.index))

        indices = [c.index for c in self._columns]
        if indices != list(range(len(indices))):
            raise MetadataError(
                f"column indices of {name!r} must be 0..{len(indices) - 1} "
                f"without gaps or duplicates"
            )

    @property
    def size(self) -> int:
        return len(self._columns)

    def __len__(self) -> int:
        return self.size

    def provenance_of(self, position: int) -> PositionProvenance:
        return self._columns[position]

    def raw_name_of(self, position: int) -> str:
        return self._columns[position].column_name

    def provenance_json(self, position: int) -> str:
        return self._json[position]

    @cached_property
    def _json(self) -> List[str]:
        return [c.to_json() for c in self._columns]

    @cached_property
    def text_indices(self) -> List[int]:
        """positions produced by text vectorizers, ascending"""
        return [c.index for c in self._columns if c.is_text_derived]

    def to_dict(self) -> Dict:
        return {"name": self.name, "columns": [c.to_dict() for c in self._columns]}

    @classmethod
    def from_dict(cls, data: Dict) -> "VectorMetadata":
        if "columns" not in data:
            raise MetadataError("vector metadata needs a 'columns' list")
        columns = [PositionProvenance.from_dict(r) for r in data["columns"]]
        return cls(columns, name=data.get("name", "features"))

    @classmethod
    def load(cls, path) -> "VectorMetadata":
        """load metadata from a json file written by to_dict()"""
        path = Path(path)
        try:
            data = json.loads(path.read_text())
        except json.JSONDecodeError as e:
            raise MetadataError(f"invalid vector metadata in {path}: {e}") from e

        metadata = cls.from_dict(data)
        logger.info("loaded vector metadata %r from %s (%d columns, %d text)",
                    metadata.name, path, metadata.size, len(metadata.text_indices))
        return metadata

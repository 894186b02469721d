# aggregator - folds the loco diffs of derived text positions into one insight per raw feature

import logging
from typing import Dict, Iterator, Optional

import numpy as np

from insights.metadata import Derivation, PositionProvenance
from insights.topk import Attribution

logger = logging.getLogger(__name__)

def group_key(provenance: PositionProvenance) -> Optional[str]:
    """
    key that ties a derived position to its siblings

    text vectorizer positions group by their raw feature name, text map
    positions by their grouping (map key); anything else has no group
    """
    if provenance.derivation is Derivation.TEXT:
        origins = provenance.parent_feature_origins
        return origins[0] if origins else None
    if provenance.derivation is Derivation.TEXT_MAP:
        return provenance.grouping
    return None

class GroupAggregator:
    """
    running per-group sums of diff vectors

    groups are emitted in first-seen order, represented by their first member
    """

    def __init__(self):
        self._groups: Dict[str, list] = {}

    def __len__(self) -> int:
        return len(self._groups)

    def add(self, provenance: PositionProvenance, diffs: np.ndarray) -> bool:
        """
        add one position's diffs to its group

        returns:
            False when the position has no resolvable group and was dropped
        """
        key = group_key(provenance)
        if key is None:
            logger.debug("position %d has no group, not explainable on its own",
                         provenance.index)
            return False

        group = self._groups.get(key)
        if group is None:
            # [representative index, diff sum, member count]
            self._groups[key] = [provenance.index, np.array(diffs, dtype=float), 1]
        else:
            group[1] = group[1] + diffs
            group[2] += 1
        return True

    def attributions(self, slot: int) -> Iterator[Attribution]:
        """
        one averaged attribution per group

        args:
            slot: class-of-interest index used as the attribution value
        """
        for index, total, count in self._groups.values():
            mean = total / count
            yield Attribution(index=index, value=float(mean[slot]), diffs=mean)

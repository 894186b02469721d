# model explainability - shows why model made a decision for one record
# leave-one-covariate-out (loco): zero a position, rescore, keep the biggest score changes

import logging
from dataclasses import dataclass
from typing import Dict, List, Mapping

import numpy as np
from joblib import Parallel, delayed

from insights.aggregator import GroupAggregator
from insights.config import settings
from insights.diff import class_of_interest, compute_diffs
from insights.errors import MetadataError
from insights.metadata import VectorMetadata
from insights.parser import InsightFormatter, JsonInsightFormatter, parse_insights
from insights.ranking import TopKStrategy, rank
from insights.scorer import as_scorer
from insights.topk import Attribution, TopKSelector

logger = logging.getLogger(__name__)

@dataclass
class RecordExplanation:
    """ranked attributions of one record plus the scores they were measured against"""

    prediction: int
    scores: np.ndarray
    slot: int
    attributions: List[Attribution]

def to_dense(vector, size: int = None) -> np.ndarray:
    """
    fresh dense float copy of a feature vector

    args:
        vector: array-like, scipy-style sparse (toarray) or
            {"size": n, "indices": [...], "values": [...]}
        size: expected length, checked when given

    returns:
        1-d numpy array owned by the caller
    """
    if isinstance(vector, Mapping):
        try:
            dense = np.zeros(int(vector["size"]), dtype=float)
            indices = np.asarray(vector.get("indices", []), dtype=int)
            values = np.asarray(vector.get("values", []), dtype=float)
        except (KeyError, TypeError, ValueError) as e:
            raise MetadataError(f"invalid sparse vector: {e}") from e
        if indices.shape != values.shape:
            raise MetadataError("sparse vector needs as many indices as values")
        if indices.size and (indices.min() < 0 or indices.max() >= dense.size):
            raise MetadataError(f"sparse vector index out of range 0..{dense.size - 1}")
        dense[indices] = values
    elif hasattr(vector, "toarray"):
        dense = np.asarray(vector.toarray(), dtype=float).ravel()
    else:
        dense = np.array(vector, dtype=float)
        if dense.ndim != 1:
            raise MetadataError(f"feature vector must be 1-d, got shape {dense.shape}")

    if size is not None and dense.size != size:
        raise MetadataError(f"feature vector has {dense.size} positions, metadata describes {size}")
    return dense

class LOCOExplainer:
    """
    record level insights for any scoring model

    for every non-zero position (and every text derived position) the
    position is zeroed, the vector rescored and the score delta kept.
    derived text positions are averaged per raw feature, then the top k
    attributions are picked with the configured strategy and rendered
    as raw feature name -> insight text
    """

    def __init__(
        self,
        model,
        metadata: VectorMetadata,
        top_k: int = None,
        strategy=None,
        formatter: InsightFormatter = None
    ):
        """
        args:
            model: Scorer or anything as_scorer() can wrap
            metadata: provenance of every vector position
            top_k: insights to keep (default settings.top_k)
            strategy: TopKStrategy or its name (default settings.top_k_strategy)
            formatter: insight renderer (default JsonInsightFormatter)
        """
        self.scorer = as_scorer(model)
        self.metadata = metadata
        self.top_k = settings.top_k if top_k is None else int(top_k)
        if self.top_k <= 0:
            raise ValueError(f"top_k must be positive, got {self.top_k}")
        self.strategy = TopKStrategy.parse(
            settings.top_k_strategy if strategy is None else strategy
        )
        self.formatter = formatter or JsonInsightFormatter()

    def explain(self, vector) -> RecordExplanation:
        """score the record, compute loco diffs and rank them"""
        working = to_dense(vector, self.metadata.size)

        prediction, base_score = self.scorer.score(working)
        base_score = np.array(base_score, dtype=float)
        slot = class_of_interest(base_score, prediction)

        # text positions can be zero in the vector but still carry signal
        positions = sorted(
            set(np.flatnonzero(working).tolist()) | set(self.metadata.text_indices)
        )

        selector = TopKSelector(self.top_k)
        aggregator = GroupAggregator()

        for position in positions:
            diffs = compute_diffs(position, working, self.scorer, base_score)
            provenance = self.metadata.provenance_of(position)

            if provenance.needs_aggregation:
                aggregator.add(provenance, diffs)
            else:
                selector.add(Attribution(position, float(diffs[slot]), diffs))

        for attribution in aggregator.attributions(slot):
            selector.add(attribution)

        return RecordExplanation(
            prediction=int(prediction),
            scores=base_score,
            slot=slot,
            attributions=rank(selector.drain(), self.top_k, self.strategy),
        )

    def render(self, attributions: List[Attribution]) -> Dict[str, object]:
        """raw feature name -> rendered insight, in ranking order"""
        insights = {}
        for attribution in attributions:
            name = self.metadata.raw_name_of(attribution.index)
            if name in insights:
                logger.warning("insight name collision on %r, keeping position %d",
                               name, attribution.index)
            insights[name] = self.formatter.render(
                self.metadata.provenance_json(attribution.index),
                attribution.diffs.tolist(),
            )
        return insights

    def transform(self, vector) -> Dict[str, object]:
        """
        insights for one record

        args:
            vector: feature vector fed into the model (never mutated)

        returns:
            dict of raw feature name -> rendered insight
        """
        return self.render(self.explain(vector).attributions)

    def transform_batch(self, vectors, n_jobs: int = None) -> List[Dict[str, object]]:
        """
        insights for many records, one private working vector per record

        args:
            vectors: iterable of feature vectors
            n_jobs: joblib threads (default settings.batch_jobs)

        returns:
            insight dicts in input order
        """
        n_jobs = settings.batch_jobs if n_jobs is None else n_jobs
        return Parallel(n_jobs=n_jobs, prefer="threads")(
            delayed(self.transform)(vector) for vector in vectors
        )

def describe_insights(insights: Mapping[str, str], slot: int = -1) -> List[Dict]:
    """
    human-readable view of json rendered insights

    args:
        insights: output of LOCOExplainer.transform with the default formatter
        slot: class index to describe (default: last score slot)

    returns:
        list of dicts with feature, score change and impact, biggest first
    """
    described = []
    for name, pairs in parse_insights(insights).items():
        diffs = [d for _, d in pairs]
        if not diffs:
            continue
        value = diffs[slot]
        described.append({
            'feature': name,
            'value': value,
            'direction': 'raises' if value > 0 else 'lowers',
            'impact': _describe_impact(abs(value))
        })

    described.sort(key=lambda d: -abs(d['value']))
    return described

def generate_reason(described: List[Dict], top_n: int = 3) -> str:
    """
    one line summary of the strongest insights

    args:
        described: output of describe_insights
        top_n: how many insights to mention
    """
    if not described:
        return "No feature changes the prediction"

    reasons = [
        f"{d['feature']} {d['direction']} score by {abs(d['value']):.3f} ({d['impact']})"
        for d in described[:top_n]
    ]
    return " + ".join(reasons)

def _describe_impact(attribution_score: float) -> str:
    """describe the impact level of a feature"""
    if attribution_score > 0.5:
        return "very high impact"
    elif attribution_score > 0.2:
        return "high impact"
    elif attribution_score > 0.1:
        return "moderate impact"
    else:
        return "low impact"

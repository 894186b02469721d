# test helpers: small deterministic scorers and vector metadata builders

import numpy as np

from insights.metadata import Derivation, PositionProvenance

class LinearScorer:
    """
    score = bias + weights . vector for every class slot

    weights has shape (n_classes, n_features); zeroing position i changes
    class j by exactly weights[j, i] * vector[i], so expected diffs are exact
    """

    def __init__(self, weights, bias, prediction=None):
        self.weights = np.atleast_2d(np.asarray(weights, dtype=float))
        self.bias = np.asarray(bias, dtype=float)
        self.prediction = prediction
        self.calls = []

    def score(self, vector):
        self.calls.append(np.array(vector, copy=True))
        scores = self.bias + self.weights @ vector
        prediction = self.prediction
        if prediction is None:
            prediction = int(np.argmax(scores))
        return prediction, scores

class BinaryScorer:
    """p(positive) = bias + weights . vector, scores are [1 - p, p]"""

    def __init__(self, weights, bias):
        self.weights = np.asarray(weights, dtype=float)
        self.bias = bias
        self.calls = []

    def score(self, vector):
        self.calls.append(np.array(vector, copy=True))
        p = self.bias + float(self.weights @ vector)
        return int(p >= 0.5), np.array([1.0 - p, p])

def numeric_columns(n, start=0):
    """plain numeric columns, each explained on its own"""
    return [
        PositionProvenance(
            index=start + i,
            parent_feature_origins=[f"f{start + i}"],
            parent_feature_stages=["RealVectorizer_001"],
            descriptor_value="value",
        )
        for i in range(n)
    ]

def text_columns(origin, n, start):
    """hashed buckets of one text feature"""
    return [
        PositionProvenance(
            index=start + i,
            parent_feature_origins=[origin],
            parent_feature_stages=["TextVectorizer_002"],
            derivation=Derivation.TEXT,
        )
        for i in range(n)
    ]

def text_map_columns(origin, key, n, start):
    """hashed buckets of one key of a text map feature"""
    return [
        PositionProvenance(
            index=start + i,
            parent_feature_origins=[origin],
            parent_feature_stages=["TextMapVectorizer_003"],
            grouping=key,
            derivation=Derivation.TEXT_MAP,
        )
        for i in range(n)
    ]


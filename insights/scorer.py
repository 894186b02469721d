# scorer adapters - wrap any model into score(vector) -> (predicted class, scores)
# the adapter is picked once, the explainer only ever sees the Scorer protocol

from typing import Callable, Protocol, Tuple, runtime_checkable

import numpy as np
import torch

ScoreResult = Tuple[int, np.ndarray]

@runtime_checkable
class Scorer(Protocol):
    """deterministic scoring function over one dense feature vector"""

    def score(self, vector: np.ndarray) -> ScoreResult:
        ...

class CallableScorer:
    """wraps a plain function returning (predicted class, scores)"""

    def __init__(self, fn: Callable):
        self.fn = fn

    def score(self, vector: np.ndarray) -> ScoreResult:
        prediction, scores = self.fn(vector)
        return int(prediction), np.array(scores, dtype=float).ravel()

class TorchScorer:
    """
    scores a pytorch model on a single row

    predict_proba() is used when the model has it, otherwise forward()
    outputs are logits (sigmoid for one output, softmax for several).
    single output models are read as a binary probability [1 - p, p],
    or as a raw value when regression=True; the predicted class is the argmax
    """

    def __init__(self, model: torch.nn.Module, regression: bool = None):
        self.model = model
        self.model.eval()  # no dropout, deterministic scores
        if regression is None:
            regression = bool(getattr(model, "regression", False))
        self.regression = regression

    def score(self, vector: np.ndarray) -> ScoreResult:
        x = torch.as_tensor(np.asarray(vector, dtype=np.float32)).unsqueeze(0)

        with torch.no_grad():
            if hasattr(self.model, "predict_proba"):
                out = self.model.predict_proba(x)
            else:
                out = self.model(x).reshape(1, -1)
                if not self.regression:
                    out = torch.sigmoid(out) if out.shape[1] == 1 else torch.softmax(out, dim=1)

        scores = out.detach().cpu().numpy().astype(float).reshape(-1)

        if self.regression:
            return 0, scores
        if scores.size == 1:
            p = float(scores[0])
            scores = np.array([1.0 - p, p])
        if scores.size == 0:
            return 0, scores
        return int(np.argmax(scores)), scores

class PredictScorer:
    """
    scikit-learn style estimator with only predict(), read as a regressor

    the single predicted value is the score vector, predicted class is 0
    """

    def __init__(self, estimator):
        self.estimator = estimator

    def score(self, vector: np.ndarray) -> ScoreResult:
        value = np.asarray(self.estimator.predict(vector.reshape(1, -1)), dtype=float)
        return 0, value.reshape(-1)

class ProbaScorer:
    """scikit-learn style estimator exposing predict_proba"""

    def __init__(self, estimator):
        self.estimator = estimator

    def score(self, vector: np.ndarray) -> ScoreResult:
        proba = np.asarray(self.estimator.predict_proba(vector.reshape(1, -1)), dtype=float)
        scores = proba.reshape(-1)
        if scores.size == 0:
            return 0, scores
        return int(np.argmax(scores)), scores

def as_scorer(model) -> Scorer:
    """
    pick the adapter for a model

    args:
        model: torch module, predict_proba or predict estimator,
            Scorer, or callable returning (class, scores)

    returns:
        object implementing Scorer
    """
    # estimators first: their score(X, y) is a metric, not a Scorer
    if isinstance(model, torch.nn.Module):
        return TorchScorer(model)
    if hasattr(model, "predict_proba"):
        return ProbaScorer(model)
    if hasattr(model, "predict"):
        return PredictScorer(model)
    if hasattr(model, "score"):
        return model
    if callable(model):
        return CallableScorer(model)

    raise TypeError(f"cannot score with a {type(model).__name__}")

# diff engine - score change caused by zeroing one position of the vector

from typing import Sequence

import numpy as np

from insights.errors import MissingScoresError, ScoreError
from insights.scorer import Scorer

def class_of_interest(base_score: Sequence[float], prediction: int) -> int:
    """
    pick the score slot whose delta ranks the insights

    args:
        base_score: scores of the unmodified vector
        prediction: predicted class index for the unmodified vector

    returns:
        0 for regression / single probability, 1 for two-class
        probabilities, the predicted class for multiclass
    """
    n = len(base_score)
    if n == 0:
        raise MissingScoresError()
    if n == 1:
        return 0
    if n == 2:
        return 1

    prediction = int(prediction)
    if not 0 <= prediction < n:
        raise ScoreError(
            f"predicted class {prediction} outside score vector of size {n}"
        )
    return prediction

def compute_diffs(
    position: int,
    vector: np.ndarray,
    scorer: Scorer,
    base_score: np.ndarray
) -> np.ndarray:
    """
    leave one covariate out for a single position

    zeroes vector[position], rescores and returns base_score - new score.
    the position is restored before returning, also when scoring fails,
    since the same working vector is reused for every position of a record

    args:
        position: index to zero
        vector: working copy of the feature vector (mutated then restored)
        scorer: model adapter
        base_score: scores of the unmodified vector

    returns:
        per class score deltas
    """
    if len(base_score) == 0:
        raise MissingScoresError()

    old_value = vector[position]
    vector[position] = 0.0
    try:
        _, score = scorer.score(vector)
    finally:
        vector[position] = old_value

    base_score = np.asarray(base_score, dtype=float)
    score = np.asarray(score, dtype=float)
    if score.shape != base_score.shape:
        raise ScoreError(
            f"rescoring position {position} gave {score.size} scores, expected {base_score.size}"
        )
    return base_score - score

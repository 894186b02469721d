# ranking policy - turns the bounded candidate set into the final ordered list

from enum import Enum
from typing import Iterable, List

from insights.topk import Attribution

class TopKStrategy(str, Enum):
    """
    how the final insights are picked

    ABS: the top k attributions by absolute value
    POSITIVE_NEGATIVE: up to k most positive plus up to k most negative
    """

    ABS = "abs"
    POSITIVE_NEGATIVE = "positive and negative"

    @classmethod
    def parse(cls, value) -> "TopKStrategy":
        """accept a member, its value or its name ('Abs', 'PositiveNegative', ...)"""
        if isinstance(value, cls):
            return value

        wanted = str(value).strip().lower().replace("_", "").replace(" ", "")
        for strategy in cls:
            names = (
                strategy.value.replace(" ", ""),
                strategy.name.lower().replace("_", ""),
            )
            if wanted in names:
                return strategy

        raise ValueError(
            f"unknown top k strategy {value!r}, "
            f"expected one of {[s.value for s in cls]}"
        )

def rank(
    candidates: Iterable[Attribution],
    k: int,
    strategy: TopKStrategy
) -> List[Attribution]:
    """
    order candidates and cut them down to the final insights

    args:
        candidates: drained positive and negative heaps
        k: number of insights to keep
        strategy: ranking strategy

    returns:
        ordered attributions
    """
    candidates = list(candidates)

    if strategy is TopKStrategy.ABS:
        return sorted(candidates, key=lambda a: -abs(a.value))[:k]

    # heaps already bound this to k positives + k negatives
    return sorted(candidates, key=lambda a: -a.value)

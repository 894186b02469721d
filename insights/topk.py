# bounded top-k selection over loco attributions
# two heaps with opposite orderings keep the k best positive and k best negative values

import heapq
import itertools
import logging
from dataclasses import dataclass
from typing import Callable, List

import numpy as np

logger = logging.getLogger(__name__)

@dataclass(frozen=True)
class Attribution:
    """
    one insight candidate

    index: representative vector position
    value: score delta at the class-of-interest slot
    diffs: score delta for every class slot
    """

    index: int
    value: float
    diffs: np.ndarray

class BoundedHeap:
    """
    min-heap holding at most `capacity` attributions

    `key` maps an attribution to its retention rank; the root has the lowest
    rank and is evicted when the heap grows past capacity. On equal ranks the
    most recently pushed attribution is evicted first.
    """

    def __init__(self, capacity: int, key: Callable[[Attribution], float]):
        if capacity <= 0:
            raise ValueError(f"heap capacity must be positive, got {capacity}")
        self.capacity = capacity
        self._key = key
        self._heap = []
        self._counter = itertools.count()

    def __len__(self) -> int:
        return len(self._heap)

    def push(self, attribution: Attribution):
        # negated counter: later pushes sort first among ties
        entry = (self._key(attribution), -next(self._counter), attribution)
        heapq.heappush(self._heap, entry)

        if len(self._heap) > self.capacity:
            _, _, evicted = heapq.heappop(self._heap)
            logger.debug("evicted position %d (value %.6g)", evicted.index, evicted.value)

    def drain(self) -> List[Attribution]:
        """empty the heap, lowest rank first"""
        drained = []
        while self._heap:
            drained.append(heapq.heappop(self._heap)[2])
        return drained

class TopKSelector:
    """
    keeps the k most positive and the k most negative attributions seen

    zero-valued attributions carry no signal and are discarded on arrival
    """

    def __init__(self, k: int):
        # positive heap: root is the smallest positive value
        self.positive = BoundedHeap(k, key=lambda a: a.value)
        # negative heap: root is the least negative value
        self.negative = BoundedHeap(k, key=lambda a: -a.value)

    def add(self, attribution: Attribution):
        if attribution.value > 0.0:
            self.positive.push(attribution)
        elif attribution.value < 0.0:
            self.negative.push(attribution)

    def drain(self) -> List[Attribution]:
        """positive candidates followed by negative ones, order within each is not meaningful"""
        return self.positive.drain() + self.negative.drain()

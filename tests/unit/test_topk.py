# unit tests for bounded top-k heaps

import numpy as np
import pytest

from insights.topk import Attribution, BoundedHeap, TopKSelector

def attr(index, value):
    return Attribution(index=index, value=value, diffs=np.array([value]))

def test_heap_keeps_k_largest():
    """min-heap on value evicts the smallest"""
    heap = BoundedHeap(3, key=lambda a: a.value)
    for i, v in enumerate([0.5, 0.1, 0.9, 0.3, 0.7]):
        heap.push(attr(i, v))

    assert len(heap) == 3
    assert [a.value for a in heap.drain()] == [0.5, 0.7, 0.9]
    assert len(heap) == 0

def test_heap_never_exceeds_capacity():
    heap = BoundedHeap(2, key=lambda a: a.value)
    for i in range(50):
        heap.push(attr(i, float(i)))
        assert len(heap) <= 2

def test_heap_ties_keep_first_seen():
    """equal values evict the latest push"""
    heap = BoundedHeap(1, key=lambda a: a.value)
    heap.push(attr(0, 0.5))
    heap.push(attr(1, 0.5))

    assert [a.index for a in heap.drain()] == [0]

def test_heap_rejects_zero_capacity():
    with pytest.raises(ValueError):
        BoundedHeap(0, key=lambda a: a.value)

def test_selector_splits_by_sign_and_drops_zero():
    selector = TopKSelector(2)
    for i, v in enumerate([0.4, -0.1, 0.9, -0.3, 0.0, 0.2, -0.05]):
        selector.add(attr(i, v))

    assert len(selector.positive) == 2
    assert len(selector.negative) == 2

    values = sorted(a.value for a in selector.drain())
    assert values == [-0.3, -0.1, 0.4, 0.9]

def test_selector_drops_only_zero():
    selector = TopKSelector(5)
    selector.add(attr(0, 0.0))
    selector.add(attr(1, -0.0))

    assert selector.drain() == []

def test_selector_positive_before_negative():
    selector = TopKSelector(3)
    selector.add(attr(0, -1.0))
    selector.add(attr(1, 1.0))

    drained = selector.drain()
    assert [a.index for a in drained] == [1, 0]

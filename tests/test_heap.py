import random

import pytest

from huffman import CapacityExceededError, HeapUnderflowError, MinHeap


def drain(heap):
    out = []
    while not heap.is_empty():
        out.append(heap.pop())
    return out


def test_pops_in_weight_order():
    weights = [7, 3, 9, 1, 5]
    heap = MinHeap(weights.__getitem__)
    for h in range(len(weights)):
        heap.push(h)
    assert drain(heap) == [3, 1, 4, 0, 2]


def test_equal_weights_pop_by_handle():
    weights = [4, 2, 4, 2, 4]
    heap = MinHeap(weights.__getitem__)
    for h in (4, 2, 0, 3, 1):
        heap.push(h)
    assert drain(heap) == [1, 3, 0, 2, 4]


def test_peek_does_not_remove():
    weights = {10: 8, 11: 2, 12: 5}
    heap = MinHeap(weights.__getitem__)
    for h in weights:
        heap.push(h)
    assert heap.peek_min() == 11
    assert heap.size() == 3
    assert len(heap) == 3
    assert heap.pop() == 11
    assert heap.peek_min() == 12


def test_random_weights_match_sorted_order():
    rng = random.Random(123)
    for _ in range(20):
        n = rng.randrange(1, 51)
        weights = [rng.randrange(0, 10) for _ in range(n)]
        heap = MinHeap(weights.__getitem__)
        handles = list(range(n))
        rng.shuffle(handles)
        for h in handles:
            heap.push(h)
        assert drain(heap) == sorted(range(n), key=lambda h: (weights[h], h))


def test_interleaved_push_pop():
    weights = [6, 1, 4, 1, 0, 9]
    heap = MinHeap(weights.__getitem__)
    heap.push(0)
    heap.push(1)
    assert heap.pop() == 1
    heap.push(3)
    heap.push(2)
    assert heap.pop() == 3
    heap.push(4)
    heap.push(5)
    assert drain(heap) == [4, 2, 0, 5]


def test_pop_empty_raises():
    heap = MinHeap(lambda h: 0)
    assert heap.is_empty()
    with pytest.raises(HeapUnderflowError):
        heap.pop()
    with pytest.raises(IndexError):
        heap.peek_min()


def test_push_beyond_capacity_raises():
    heap = MinHeap(lambda h: h, capacity=2)
    heap.push(0)
    heap.push(1)
    with pytest.raises(CapacityExceededError):
        heap.push(2)
    assert heap.size() == 2

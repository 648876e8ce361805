"""
Huffman coding over the lowercase alphabet.

Nodes live in an append-only arena (NodeStore) and are addressed by integer
handle. The min-heap holds handles only and asks the store for weights, so
the whole tree is just the store plus a root handle.
"""

from __future__ import annotations

from typing import Callable, Dict, List, Mapping, Optional

from loguru import logger

ALPHABET = "abcdefghijklmnopqrstuvwxyz"
MAX_SYMBOLS = len(ALPHABET)
MAX_NODES = 2 * MAX_SYMBOLS - 1 # a full binary tree with 26 leaves


class HuffmanError(Exception):
    pass


class CapacityExceededError(HuffmanError, OverflowError):
    pass


class HeapUnderflowError(HuffmanError, IndexError):
    pass


class HuffmanNode: # Node for Huffman tree
    def __init__(self, weight, symbol=None, left=None, right=None):
        self.weight = weight
        self.symbol = symbol # letter or None
        self.left = left # handle or None
        self.right = right

    def is_leaf(self) -> bool:
        return self.left is None and self.right is None

    def __repr__(self):
        if self.is_leaf():
            return f"HuffmanNode(weight={self.weight}, symbol={self.symbol!r})"
        return f"HuffmanNode(weight={self.weight}, left={self.left}, right={self.right})"


class NodeStore:
    """
    Fixed-capacity arena of HuffmanNode records.
    Handles are list indexes; nothing is ever removed, so a handle stays valid for the whole build.
    """

    def __init__(self, capacity: int = MAX_NODES):
        self.capacity = capacity
        self.nodes: List[HuffmanNode] = []
        self.leaf_count = 0

    def __len__(self) -> int:
        return len(self.nodes)

    def __getitem__(self, handle: int) -> HuffmanNode:
        return self.nodes[handle]

    def _append(self, node: HuffmanNode) -> int:
        if len(self.nodes) >= self.capacity:
            raise CapacityExceededError(f"node store is full ({self.capacity} nodes)")
        self.nodes.append(node)
        return len(self.nodes) - 1

    def add_leaf(self, symbol: str, weight: int) -> int:
        if weight < 0:
            raise ValueError(f"negative weight {weight} for symbol {symbol!r}")
        if self.leaf_count != len(self.nodes):
            raise ValueError("leaves must be added before any internal node")
        handle = self._append(HuffmanNode(weight, symbol=symbol))
        self.leaf_count += 1
        return handle

    def add_internal(self, left: int, right: int) -> int:
        # weight is final here, before the handle can reach a heap
        weight = self.nodes[left].weight + self.nodes[right].weight
        return self._append(HuffmanNode(weight, left=left, right=right))

    def weight(self, handle: int) -> int:
        return self.nodes[handle].weight


class MinHeap:
    """
    Array-based binary min-heap of node handles.

    `weight` maps a handle to its weight. Ties on weight go to the smaller
    handle, which keeps the merge order (and so the code table) reproducible.
    """

    def __init__(self, weight: Callable[[int], int], capacity: int = MAX_NODES):
        self._weight = weight
        self.capacity = capacity
        self.data: List[int] = []

    def __len__(self) -> int:
        return len(self.data)

    def size(self) -> int:
        return len(self.data)

    def is_empty(self) -> bool:
        return not self.data

    def _less(self, i: int, j: int) -> bool: # compare heap positions i and j
        a, b = self.data[i], self.data[j]
        wa, wb = self._weight(a), self._weight(b)
        if wa != wb:
            return wa < wb
        return a < b

    def _sift_up(self, i: int) -> None:
        while i > 0:
            parent = (i - 1) // 2
            if not self._less(i, parent):
                break
            self.data[i], self.data[parent] = self.data[parent], self.data[i]
            i = parent

    def _sift_down(self, i: int) -> None:
        n = len(self.data)
        while True:
            left = 2 * i + 1
            right = left + 1
            smallest = i
            if left < n and self._less(left, smallest):
                smallest = left
            if right < n and self._less(right, smallest):
                smallest = right
            if smallest == i:
                return
            self.data[i], self.data[smallest] = self.data[smallest], self.data[i]
            i = smallest

    def push(self, handle: int) -> None:
        if len(self.data) >= self.capacity:
            raise CapacityExceededError(f"heap is full ({self.capacity} handles)")
        self.data.append(handle)
        self._sift_up(len(self.data) - 1)

    def pop(self) -> int:
        if not self.data:
            raise HeapUnderflowError("pop from empty heap")
        last = self.data.pop()
        if not self.data:
            return last
        top = self.data[0]
        self.data[0] = last
        self._sift_down(0)
        return top

    def peek_min(self) -> int:
        if not self.data:
            raise HeapUnderflowError("peek at empty heap")
        return self.data[0]


def create_leaf_nodes(store: NodeStore, frequencies: Mapping[str, int]) -> int:
    """
    Add one leaf per letter with a nonzero count, in alphabet order.
    Returns the number of leaves, which are handles 0 .. n-1.
    """
    unknown = [s for s in frequencies if not isinstance(s, str) or len(s) != 1 or s not in ALPHABET]
    if unknown:
        raise ValueError(f"symbols outside a-z: {sorted(map(repr, unknown))}")
    negative = sorted(s for s, c in frequencies.items() if c < 0)
    if negative:
        raise ValueError(f"negative frequencies for symbols: {negative}")

    for symbol in ALPHABET:
        count = frequencies.get(symbol, 0)
        if count > 0:
            handle = store.add_leaf(symbol, count)
            logger.debug(f"[huffman] leaf {handle}: {symbol!r} x{count}")
    return store.leaf_count


def build_huffman_tree(store: NodeStore, leaf_count: int) -> Optional[int]:
    """
    Merge the two lightest nodes until one is left and return its handle.
    Returns None when there are no leaves at all.
    """
    if leaf_count > store.leaf_count:
        raise ValueError(f"store holds {store.leaf_count} leaves, asked for {leaf_count}")

    heap = MinHeap(store.weight, capacity=store.capacity)
    for handle in range(leaf_count):
        heap.push(handle)

    if heap.is_empty():
        return None

    # Single symbol: the leaf is the whole tree
    if heap.size() == 1:
        return heap.pop()

    while heap.size() > 1:
        a = heap.pop()
        b = heap.pop()
        merged = store.add_internal(a, b) # first pop goes left
        logger.debug(f"[huffman] merge {a} + {b} -> {merged} (weight {store.weight(merged)})")
        heap.push(merged)

    root = heap.pop()
    logger.debug(f"[huffman] root {root}, weight {store.weight(root)}, {len(store)} nodes")
    return root


def generate_huffman_codes(store: NodeStore, root: Optional[int]) -> Dict[str, str]:
    codes: Dict[str, str] = {}
    if root is None:
        return codes

    stack = [(root, "")]
    while stack:
        handle, path = stack.pop()
        node = store[handle]

        # Leaf -> assign code; a lone root leaf still needs one bit
        if node.is_leaf():
            codes[node.symbol] = path or "0"
            continue

        # right first so the left subtree is walked first
        stack.append((node.right, path + "1"))
        stack.append((node.left, path + "0"))

    return {symbol: codes[symbol] for symbol in sorted(codes)}


def build_code_table(frequencies: Mapping[str, int]) -> Dict[str, str]: # frequencies: letter -> count
    store = NodeStore()
    leaf_count = create_leaf_nodes(store, frequencies)
    root = build_huffman_tree(store, leaf_count)
    return generate_huffman_codes(store, root)

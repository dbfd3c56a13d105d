import heapq
from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, Hashable, Iterable, List, Mapping, Optional, Tuple, Union


class HuffmanError(ValueError): # base for every error raised by the coder
    pass

class EmptyInputError(HuffmanError):
    pass

class SymbolNotInTreeError(HuffmanError):
    def __init__(self, symbol):
        super().__init__(f"symbol not in code: {symbol!r}")
        self.symbol = symbol

class TruncatedCodeError(HuffmanError):
    pass

class DegenerateTreeError(HuffmanError):
    pass


@dataclass(frozen=True)
class FrequencyEntry:
    symbol: Hashable
    count: int

    def __post_init__(self):
        if self.count < 1:
            raise ValueError(f"count for {self.symbol!r} must be >= 1, got {self.count}")


@dataclass(frozen=True)
class HuffmanNode: # Node for Huffman tree
    frequency: int
    symbols: FrozenSet[Hashable] # every symbol reachable from this node
    symbol: Any = None # only meaningful on leaves
    left: Optional["HuffmanNode"] = None
    right: Optional["HuffmanNode"] = None

    @classmethod
    def leaf(cls, symbol, frequency: int) -> "HuffmanNode":
        return cls(frequency, frozenset((symbol,)), symbol=symbol)

    @classmethod
    def merge(cls, left: "HuffmanNode", right: "HuffmanNode") -> "HuffmanNode":
        return cls(left.frequency + right.frequency, left.symbols | right.symbols, left=left, right=right)

    @property
    def is_leaf(self) -> bool:
        return self.left is None


def frequency_table(sequence: Iterable[Hashable]) -> Tuple[FrequencyEntry, ...]:
    """
    Count occurrences, keeping entries in order of first appearance
    """
    counts = {}
    for symbol in sequence:
        counts[symbol] = counts.get(symbol, 0) + 1
    return tuple(FrequencyEntry(symbol, count) for symbol, count in counts.items())


def build_huffman_tree(table: Union[Iterable[FrequencyEntry], Mapping[Hashable, int]]) -> HuffmanNode:
    """
    Greedily merge the two lightest nodes until one is left.

    Ties are broken by rank: leaves rank by position in the table, and every
    merged node ranks ahead of all nodes created before it (rank -1, -2, ...).
    This gives the same shape as prepending each merged node to the working
    list and stable-sorting it by weight.
    """
    if isinstance(table, Mapping):
        table = [FrequencyEntry(symbol, count) for symbol, count in table.items()]

    priority_queue = []
    for rank, entry in enumerate(table):
        priority_queue.append((entry.count, rank, HuffmanNode.leaf(entry.symbol, entry.count)))
    if not priority_queue:
        raise EmptyInputError("cannot build a Huffman tree from empty input")
    heapq.heapify(priority_queue) # ranks are unique so nodes are never compared

    merges = 0
    while len(priority_queue) > 1:
        _, _, left = heapq.heappop(priority_queue)
        _, _, right = heapq.heappop(priority_queue)
        merged_node = HuffmanNode.merge(left, right)
        merges += 1
        heapq.heappush(priority_queue, (merged_node.frequency, -merges, merged_node))

    return priority_queue[0][2] # root of the tree


def build_tree(sequence: Iterable[Hashable]) -> HuffmanNode:
    return build_huffman_tree(frequency_table(sequence))


def encode_symbol(symbol, tree: HuffmanNode) -> List[int]:
    if symbol not in tree.symbols:
        raise SymbolNotInTreeError(symbol)
    bits = []
    node = tree
    while not node.is_leaf:
        if symbol in node.left.symbols:
            bits.append(0)
            node = node.left
        else:
            bits.append(1)
            node = node.right
    return bits


def encode(sequence: Iterable[Hashable], tree: HuffmanNode) -> List[int]:
    """
    Concatenate the code of every symbol in order.
    A single-leaf tree encodes every symbol as no bits at all.
    """
    seen = {} # symbol -> code, filled as symbols show up
    out = []
    for symbol in sequence:
        code = seen.get(symbol)
        if code is None:
            code = seen[symbol] = encode_symbol(symbol, tree)
        out.extend(code)
    return out


def decode(bits: Iterable[int], tree: HuffmanNode, count: Optional[int] = None) -> list:
    """
    Walk the tree one bit at a time, emitting a symbol at every leaf and
    restarting from the root.

    With ``count`` set, decoding stops after exactly that many symbols and any
    remaining bits are ignored (e.g. byte padding). A single-leaf tree has no
    bits to consume, so it requires ``count`` and returns that many copies
    of its symbol.
    """
    if count is not None and count < 0:
        raise ValueError(f"count must be >= 0, got {count}")
    if tree.is_leaf:
        if count is None:
            raise DegenerateTreeError("decoding with a single-symbol tree needs an explicit count")
        return [tree.symbol] * count

    out = []
    node = tree
    for bit in bits:
        if count is not None and len(out) == count:
            break
        if bit == 0:
            node = node.left
        elif bit == 1:
            node = node.right
        else:
            raise ValueError(f"bits must be 0 or 1, got {bit!r}")

        # Leaf
        if node.is_leaf:
            out.append(node.symbol)
            node = tree

    if node is not tree:
        raise TruncatedCodeError(f"bit sequence ends inside a code after {len(out)} symbols")
    if count is not None and len(out) < count:
        raise TruncatedCodeError(f"expected {count} symbols, bit sequence holds only {len(out)}")
    return out


def generate_huffman_codes(root: HuffmanNode) -> Dict[Hashable, Tuple[int, ...]]: # symbol -> code bits
    codes = {}
    def generate_codes_helper(node, current_code):
        if node.is_leaf:
            codes[node.symbol] = current_code
            return
        generate_codes_helper(node.left, current_code + (0,))
        generate_codes_helper(node.right, current_code + (1,))

    generate_codes_helper(root, ())
    return codes


def weighted_path_length(root: HuffmanNode) -> int:
    """Total encoded length, in bits, of the message the tree was built from."""
    total = 0
    stack = [(root, 0)]
    while stack:
        node, depth = stack.pop()
        if node.is_leaf:
            total += node.frequency * depth
        else:
            stack.append((node.left, depth + 1))
            stack.append((node.right, depth + 1))
    return total

"""
Data segments and mode segmentation.

Input text is split into runs of numeric, alphanumeric, kanji and byte
characters. Because a numeric run can also be written as alphanumeric or
byte data (and so on), the cheapest mix of modes is found by a shortest
path search over the candidate encodings of each run.

References:
- ISO/IEC 18004 Annex J (optimisation of bit stream length)
- https://www.nayuki.io/page/optimal-text-segmentation-for-qr-codes
"""

import heapq
import itertools
from typing import Dict, Iterable, List, NamedTuple, Optional, Sequence, Tuple, Union

from .bitbuffer import BitBuffer
from .exceptions import EncodingModeError, InvalidCharacterError
from .modes import (
    ALPHANUMERIC,
    ALPHANUMERIC_RE,
    ALPHANUMERIC_TABLE,
    BYTE,
    BYTE_KANJI_RE,
    BYTE_RE,
    KANJI,
    KANJI_RE,
    MODE_INDICATOR_BITS,
    NUMERIC,
    NUMERIC_RE,
    Mode,
    SJISConverter,
    best_mode_for_data,
    mode_from,
)


def get_segment_bits_length(length: int, mode: Mode) -> int:
    """Payload bits (no header) of a `length` character segment."""
    if mode == NUMERIC:
        remainder = length % 3
        return 10 * (length // 3) + (remainder * 3 + 1 if remainder else 0)
    if mode == ALPHANUMERIC:
        return 11 * (length // 2) + 6 * (length % 2)
    if mode == KANJI:
        return 13 * length
    return 8 * length


def byte_length(data: Union[str, bytes]) -> int:
    if isinstance(data, (bytes, bytearray)):
        return len(data)
    return len(data.encode("utf-8"))


#==============================================================================
# SEGMENT TYPES
#==============================================================================

class Segment:
    """A run of data encoded in a single mode."""

    mode: Mode = BYTE

    def __init__(self, data):
        self.data = data

    @property
    def length(self) -> int:
        """Value written to the character count indicator."""
        return len(self.data)

    @property
    def bit_length(self) -> int:
        return get_segment_bits_length(self.length, self.mode)

    def write(self, buffer: BitBuffer):
        raise NotImplementedError

    def __eq__(self, other) -> bool:
        if not isinstance(other, Segment):
            return NotImplemented
        return self.mode == other.mode and self.data == other.data

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.data!r})"


class NumericSegment(Segment):
    mode = NUMERIC

    def write(self, buffer: BitBuffer):
        """Groups of 3 digits in 10 bits; a trailing 2 or 1 digit in 7 or 4."""
        for i in range(0, len(self.data), 3):
            group = self.data[i:i + 3]
            buffer.put(int(group), len(group) * 3 + 1)


class AlphanumericSegment(Segment):
    mode = ALPHANUMERIC

    def write(self, buffer: BitBuffer):
        """Pairs as 45 * first + second in 11 bits; a trailing char in 6."""
        data = self.data
        i = 0
        while i + 2 <= len(data):
            value = ALPHANUMERIC_TABLE[data[i]] * 45 + ALPHANUMERIC_TABLE[data[i + 1]]
            buffer.put(value, 11)
            i += 2
        if i < len(data):
            buffer.put(ALPHANUMERIC_TABLE[data[i]], 6)


class ByteSegment(Segment):
    """Raw bytes; text is stored as its UTF-8 encoding."""

    mode = BYTE

    def __init__(self, data: Union[str, bytes]):
        super().__init__(data)
        if isinstance(data, str):
            self.payload = data.encode("utf-8")
        else:
            self.payload = bytes(data)

    @property
    def length(self) -> int:
        return len(self.payload)

    def write(self, buffer: BitBuffer):
        for byte in self.payload:
            buffer.put(byte, 8)


class KanjiSegment(Segment):
    """Double-byte Shift JIS characters, 13 bits each."""

    mode = KANJI

    def __init__(self, data: str, to_sjis: SJISConverter):
        super().__init__(data)
        self.to_sjis = to_sjis

    def write(self, buffer: BitBuffer):
        for char in self.data:
            value = self.to_sjis(char)

            if 0x8140 <= value <= 0x9FFC:
                value -= 0x8140
            elif 0xE040 <= value <= 0xEBBF:
                value -= 0xC140
            else:
                raise InvalidCharacterError(
                    f"Invalid SJIS character: {char!r}. Make sure your charset is UTF-8"
                )

            value = ((value >> 8) & 0xFF) * 0xC0 + (value & 0xFF)
            buffer.put(value, 13)


def make_segment(data, mode: Mode, to_sjis: Optional[SJISConverter] = None) -> Segment:
    """Segment object for data already known to fit `mode`."""
    if mode == NUMERIC:
        return NumericSegment(data)
    if mode == ALPHANUMERIC:
        return AlphanumericSegment(data)
    if mode == KANJI:
        return KanjiSegment(data, to_sjis)
    return ByteSegment(data)


def _can_represent(mode: Mode, best: Mode) -> bool:
    # numeric < alphanumeric < byte; kanji only widens to byte
    if mode == best or mode == BYTE:
        return True
    return mode == ALPHANUMERIC and best == NUMERIC


def build_single_segment(data, mode_hint=None,
                         to_sjis: Optional[SJISConverter] = None) -> Segment:
    """
    Segment for `data` in the hinted mode, or its best mode if no hint.

    Raises EncodingModeError if the hinted mode cannot hold the data.
    """
    best = best_mode_for_data(data)
    if best == KANJI and to_sjis is None:
        best = BYTE

    mode = mode_from(mode_hint, best)
    if not _can_represent(mode, best):
        raise EncodingModeError(data, mode, best)

    return make_segment(data, mode, to_sjis)


#==============================================================================
# CLASSIFICATION
#==============================================================================

class Run(NamedTuple):
    index: int
    data: str
    mode: Mode


def _find_runs(regex, mode: Mode, text: str) -> List[Run]:
    return [Run(m.start(), m.group(), mode) for m in regex.finditer(text)]


def classify(text: str, kanji_enabled: bool = False) -> List[Run]:
    """Split text into maximal single-mode runs, ordered by position."""
    runs = _find_runs(NUMERIC_RE, NUMERIC, text)
    runs += _find_runs(ALPHANUMERIC_RE, ALPHANUMERIC, text)

    if kanji_enabled:
        runs += _find_runs(BYTE_RE, BYTE, text)
        runs += _find_runs(KANJI_RE, KANJI, text)
    else:
        runs += _find_runs(BYTE_KANJI_RE, BYTE, text)

    return sorted(runs, key=lambda run: run.index)


def raw_split(text: str, to_sjis: Optional[SJISConverter] = None) -> List[Segment]:
    """
    One segment per run in its natural mode, without optimisation.

    Only good enough to estimate a version: the optimal split depends on
    the character count widths, which depend on the version.
    """
    return [
        make_segment(run.data, run.mode, to_sjis)
        for run in classify(text, to_sjis is not None)
    ]


#==============================================================================
# SHORTEST PATH OPTIMISATION
#==============================================================================

class Node(NamedTuple):
    data: str
    mode: Mode
    length: int


START = "start"
END = "end"


def build_nodes(runs: Sequence[Run]) -> List[List[Node]]:
    """Every mode each run could legally be written in."""
    nodes = []
    for run in runs:
        if run.mode == NUMERIC:
            nodes.append([
                Node(run.data, NUMERIC, len(run.data)),
                Node(run.data, ALPHANUMERIC, len(run.data)),
                Node(run.data, BYTE, len(run.data)),
            ])
        elif run.mode == ALPHANUMERIC:
            nodes.append([
                Node(run.data, ALPHANUMERIC, len(run.data)),
                Node(run.data, BYTE, len(run.data)),
            ])
        elif run.mode == KANJI:
            nodes.append([
                Node(run.data, KANJI, len(run.data)),
                Node(run.data, BYTE, byte_length(run.data)),
            ])
        else:
            nodes.append([Node(run.data, BYTE, byte_length(run.data))])
    return nodes


def build_graph(nodes: Sequence[Sequence[Node]], version: int) -> Tuple[Dict[str, Dict[str, int]], Dict[str, Node]]:
    """
    Weighted DAG from START through one node per group to END.

    Vertices are keyed "group:choice:run", where run is the length of the
    open same-mode run once the node is appended. An edge that switches
    mode pays the header (mode indicator and character count) plus the
    whole segment. An edge that stays in the previous mode pays only the
    extra bits of the longer run, so the costs along any path add up to
    the exact size of its merged segments.
    """
    graph: Dict[str, Dict[str, int]] = {START: {}}
    table: Dict[str, Node] = {}
    run_lengths: Dict[str, int] = {}
    prev_ids = [START]

    for i, group in enumerate(nodes):
        current_ids = []
        for j, node in enumerate(group):
            for prev_id in prev_ids:
                prev = table.get(prev_id)
                if prev is not None and prev.mode == node.mode:
                    open_run = run_lengths[prev_id]
                    cost = (get_segment_bits_length(open_run + node.length, node.mode)
                            - get_segment_bits_length(open_run, node.mode))
                else:
                    open_run = 0
                    cost = (get_segment_bits_length(node.length, node.mode)
                            + MODE_INDICATOR_BITS + node.mode.char_count_bits(version))

                run = open_run + node.length
                key = f"{i}:{j}:{run}"
                if key not in graph:
                    graph[key] = {}
                    table[key] = node
                    run_lengths[key] = run
                    current_ids.append(key)
                graph[prev_id][key] = cost

        prev_ids = current_ids

    for prev_id in prev_ids:
        graph[prev_id][END] = 0

    return graph, table


def find_path(graph: Dict[str, Dict[str, int]], source: str, target: str) -> List[str]:
    """Dijkstra's shortest path; ties keep the first path found."""
    dist = {source: 0}
    prev: Dict[str, str] = {}
    counter = itertools.count()
    queue = [(0, next(counter), source)]
    visited = set()

    while queue:
        cost, _, node = heapq.heappop(queue)
        if node in visited:
            continue
        visited.add(node)
        if node == target:
            break

        for neighbour, weight in graph.get(node, {}).items():
            new_cost = cost + weight
            if neighbour not in dist or new_cost < dist[neighbour]:
                dist[neighbour] = new_cost
                prev[neighbour] = node
                heapq.heappush(queue, (new_cost, next(counter), neighbour))

    if target not in visited:
        raise ValueError(f"No path from {source} to {target}")

    path = [target]
    while path[-1] != source:
        path.append(prev[path[-1]])
    path.reverse()
    return path


def merge_segments(nodes: Iterable[Node]) -> List[Tuple[str, Mode]]:
    """Join neighbours that ended up in the same mode."""
    merged: List[List] = []
    for node in nodes:
        if merged and merged[-1][1] == node.mode:
            merged[-1][0] += node.data
        else:
            merged.append([node.data, node.mode])
    return [(data, mode) for data, mode in merged]


def from_string(text: str, version: int,
                to_sjis: Optional[SJISConverter] = None) -> List[Segment]:
    """Minimal-length segmentation of `text` for the given version."""
    runs = classify(text, to_sjis is not None)
    graph, table = build_graph(build_nodes(runs), version)
    path = find_path(graph, START, END)

    optimized = [table[node_id] for node_id in path[1:-1]]
    # Lengths are recomputed from the merged text, so merged byte runs
    # count UTF-8 bytes and merged kanji runs count characters
    return [make_segment(data, mode, to_sjis) for data, mode in merge_segments(optimized)]


def from_list(items: Iterable, to_sjis: Optional[SJISConverter] = None) -> List[Segment]:
    """
    Segments for caller-provided chunks.

    Each item is a string (mode detected), a (data, mode) pair or (data,)
    one-tuple, a mapping with "data" and optional "mode" keys, or a ready
    Segment.
    """
    segments = []
    for item in items:
        if isinstance(item, Segment):
            segments.append(item)
        elif isinstance(item, (str, bytes, bytearray)):
            segments.append(build_single_segment(item, None, to_sjis))
        elif isinstance(item, dict):
            segments.append(build_single_segment(item["data"], item.get("mode"), to_sjis))
        else:
            data, mode = item[0], (item[1] if len(item) > 1 else None)
            segments.append(build_single_segment(data, mode, to_sjis))
    return segments

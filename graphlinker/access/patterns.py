"""Receiver patterns: glob-style address patterns where `*` is the only wildcard."""

WILDCARD = "*"


def _upper_char(c: str) -> str:
    upper = c.upper()
    # `ß` -> `SS` and `ﬀ` -> `FF` would let distinct addresses compare equal
    return upper if len(upper) == 1 else c


def fold_address(value: str) -> str:
    """Ordinal case-insensitive key: per-character simple upper-casing.

    The folded string always has the length of the input.
    """
    return "".join(_upper_char(c) for c in value)


class ReceiverPattern:
    """Compiled receiver pattern.

    The pattern is split on `*` into literal segments. A candidate matches when it
    starts with the first segment, ends with the last one and contains the middle
    segments in order, without overlap. Every character other than `*` is literal,
    matching is case-insensitive and always covers the whole candidate.
    """

    __slots__ = ("pattern", "_segments")

    def __init__(self, pattern: str):
        self.pattern = pattern
        self._segments = tuple(fold_address(s) for s in pattern.split(WILDCARD))

    def __repr__(self) -> str:
        return f"ReceiverPattern({self.pattern!r})"

    @property
    def has_wildcard(self) -> bool:
        return len(self._segments) > 1

    def matches(self, candidate: str) -> bool:
        if not isinstance(candidate, str):
            return False
        text = fold_address(candidate)
        if not self.has_wildcard:
            return text == self._segments[0]

        head, *middle, tail = self._segments
        if len(text) < len(head) + len(tail):
            return False
        if not text.startswith(head) or not text.endswith(tail):
            return False

        # Greedy left-most search is exact when `*` is the only wildcard
        pos = len(head)
        end = len(text) - len(tail)
        for segment in middle:
            if not segment:
                continue
            idx = text.find(segment, pos, end)
            if idx < 0:
                return False
            pos = idx + len(segment)
        return True


def compile_patterns(patterns) -> tuple[ReceiverPattern, ...]:
    """Compile patterns in order, keeping duplicates (first match is credited)."""
    return tuple(ReceiverPattern(p) for p in patterns)

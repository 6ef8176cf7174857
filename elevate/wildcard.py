"""Simple wildcard matching where only ``*`` is special."""

from __future__ import annotations

import os

_STAR = ord("*")


def _as_bytes(value: str | bytes) -> bytes:
    if isinstance(value, str):
        return os.fsencode(value)
    return bytes(value)


def wildcard_match(test: str | bytes, pattern: str | bytes) -> bool:
    """Return whether ``test`` matches ``pattern``.

    A ``*`` in the pattern matches zero or more characters; every other
    character matches only itself.
    """
    text = _as_bytes(test)
    pat = _as_bytes(pattern)

    test_index = 0
    pattern_index = 0
    last_star: tuple[int, int] | None = None

    while True:
        p = pat[pattern_index] if pattern_index < len(pat) else None
        t = text[test_index] if test_index < len(text) else None

        if p is not None and t is not None:
            if p == _STAR:
                pattern_index += 1
                last_star = (test_index, pattern_index)
            elif p == t:
                pattern_index += 1
                test_index += 1
            elif last_star is not None:
                test_index = last_star[0] + 1
                pattern_index = last_star[1]
                last_star = (test_index, pattern_index)
            else:
                return False
        elif p is None and t is not None:
            if last_star is None:
                return False
            test_index = last_star[0] + 1
            pattern_index = last_star[1]
            last_star = (test_index, pattern_index)
        elif p == _STAR:
            pattern_index += 1
        elif p is None and t is None:
            return True
        else:
            return False
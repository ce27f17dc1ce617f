"""Contiguous lyric-line selection.

A selection is a frozenset of line indices that is always empty, a single
line, or a gap-free ascending run no longer than the limit. Every transition
in ``apply_click`` keeps that shape, so callers never need to repair it.
"""

import logging
from collections.abc import Iterable
from typing import NamedTuple

from lyricsnap.exceptions import ValidationError

logger = logging.getLogger(__name__)

MAX_SELECTED_LINES = 4

EMPTY_SELECTION: frozenset[int] = frozenset()


class ClickResult(NamedTuple):
    selection: frozenset[int]
    notice: str | None = None


def limit_notice(max_lines: int) -> str:
    return f"Only {max_lines} lines allowed."


def apply_click(
    current: frozenset[int],
    clicked: int,
    max_lines: int = MAX_SELECTED_LINES,
) -> ClickResult:
    """Return the selection that follows a click on line ``clicked``.

    Clicking a selected line clears everything. Clicking next to either end
    of the run grows it while below ``max_lines``. Any other click restarts
    at that line, unless the run is already full, in which case the click is
    rejected with a notice and the selection is left as it was.
    """
    if not current:
        return ClickResult(frozenset({clicked}))

    if clicked in current:
        return ClickResult(EMPTY_SELECTION)

    low, high = min(current), max(current)
    if clicked in (low - 1, high + 1) and len(current) < max_lines:
        return ClickResult(current | {clicked})

    if len(current) >= max_lines:
        logger.debug("Selection limit reached (%d), ignoring line %d", max_lines, clicked)
        return ClickResult(current, limit_notice(max_lines))

    return ClickResult(frozenset({clicked}))


def sorted_selection(selection: Iterable[int]) -> list[int]:
    return sorted(selection)


def is_contiguous(indices: Iterable[int]) -> bool:
    ordered = sorted(indices)
    return all(b == a + 1 for a, b in zip(ordered, ordered[1:]))


def validate_for_export(
    selection: Iterable[int],
    max_lines: int = MAX_SELECTED_LINES,
) -> list[int]:
    """Check a selection right before export and return it sorted.

    Raises ValidationError when the selection is empty, has gaps, or is
    longer than ``max_lines``.
    """
    ordered = sorted(set(selection))
    if not ordered:
        raise ValidationError("Select some lines first.")
    if not is_contiguous(ordered):
        raise ValidationError("Select consecutive lines.")
    if len(ordered) > max_lines:
        raise ValidationError(limit_notice(max_lines))
    return ordered

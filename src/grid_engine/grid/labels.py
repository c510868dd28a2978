"""Spreadsheet-style column labels."""

from __future__ import annotations

from typing import Callable, List

LabelGenerator = Callable[[int], str]


def column_label(index: int) -> str:
    """Bijective base-26 label: 0 -> A, 25 -> Z, 26 -> AA, 701 -> ZZ, 702 -> AAA."""

    if index < 0:
        raise ValueError(f"column index cannot be negative: {index}")
    letters: List[str] = []
    n = index + 1
    while n:
        n, remainder = divmod(n - 1, 26)
        letters.append(chr(ord("A") + remainder))
    return "".join(reversed(letters))


def column_labels(count: int, generator: LabelGenerator = column_label) -> List[str]:
    return [generator(index) for index in range(count)]


__all__ = ["LabelGenerator", "column_label", "column_labels"]

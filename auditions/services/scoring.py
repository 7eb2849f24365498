"""
Weighted score aggregation.

A raw slider value (0-20) is scaled to its criterion's max score with
``(raw / 20) * max_score``. The same functions produce the live total on the
panel screen and the total written at save, so the two never diverge.
"""
from typing import Iterable

SLIDER_MAX = 20


def weighted_score(raw: float, max_score: float) -> float:
    return (raw / SLIDER_MAX) * max_score


def aggregate(items: Iterable) -> float:
    """Sum of weighted sub-scores rounded to 2 decimals; 0 for no items.

    Items may be models or dicts exposing ``score`` and ``max_score``.
    """
    total = 0.0
    for item in items:
        if isinstance(item, dict):
            total += weighted_score(item["score"], item["max_score"])
        else:
            total += weighted_score(item.score, item.max_score)
    return round(total, 2)


def max_total(items: Iterable) -> float:
    return sum(item["max_score"] if isinstance(item, dict) else item.max_score for item in items)

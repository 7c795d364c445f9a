# formatter.py
import re
from typing import List

from .itinerary import DisplayRow, Itinerary

# ─── Markup stripping ──────────────────────────────────────────────────────────
# Two passes, always in this order: line-break/block tags must become newlines
# before the catch-all tag pattern gets a chance to delete them.

block_tag_re = re.compile(r"<br>|<div.*?>")
any_tag_re = re.compile(r"<.*?>")


def break_block_tags(text: str) -> str:
    """Pass 1: replace every literal <br> and every opening <div ...> tag with a newline."""
    return block_tag_re.sub("\n", text)


def remove_tags(text: str) -> str:
    """Pass 2: drop every remaining <...> sequence."""
    return any_tag_re.sub("", text)


def strip_markup(text: str) -> str:
    return remove_tags(break_block_tags(text))


# ─── Itinerary → display rows ──────────────────────────────────────────────────
def format_itinerary(itinerary: Itinerary) -> List[DisplayRow]:
    """
    Turns an itinerary into one DisplayRow per step, in the original order.
    Step instructions are cleaned again so records built by hand render the
    same way as ones built from a provider response.
    """
    return [
        DisplayRow(instruction=strip_markup(step.instruction), meters=step.distance_meters)
        for step in itinerary.steps
    ]


# ─── Striped row colours ───────────────────────────────────────────────────────
def colorize_rows(row_count: int, column_count: int, odd_color, even_color) -> List[list]:
    """
    Builds a row-striped colour matrix. Rows are counted from 1, so the first
    row gets odd_color, the second even_color, and so on. Every cell in a row
    shares that row's colour.
    """
    if row_count < 0 or column_count < 0:
        raise ValueError(f"Row and column counts must be non-negative, got {row_count}x{column_count}")

    matrix = []
    for row in range(1, row_count + 1):
        color = odd_color if row % 2 == 1 else even_color
        matrix.append([color] * column_count)
    return matrix

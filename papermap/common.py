"""Papers, date-based ids and graph bookkeeping over the citation network."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional, Sequence

PAPER_MAX_CATS = 4
"""Fixed number of category slots stored per paper."""

CATEGORY_UNKNOWN_ID = 0

_UINT_MASK = 0xFFFFFFFF
_HISTOGRAM_MAX_SIZES = 100


@dataclass(eq=False)
class Paper:
    """A paper in the citation graph, together with its layout state."""

    id: int
    allcats: list[int] = field(default_factory=lambda: [CATEGORY_UNKNOWN_ID] * PAPER_MAX_CATS)
    refs: list["Paper"] = field(default_factory=list)
    refs_ref_freq: list[int] = field(default_factory=list)
    refs_other_weight: Optional[list[float]] = None
    cites: list["Paper"] = field(default_factory=list)
    index: int = 0
    authors: Optional[str] = None
    title: Optional[str] = None
    keywords: list[str] = field(default_factory=list)

    # connected-component colouring
    colour: int = 0
    num_with_my_colour: int = 0

    # links added to join disconnected papers
    fake_links: list["Paper"] = field(default_factory=list)

    # placement
    included: bool = False
    num_graph_cites: int = 0
    connected: bool = False
    age: float = 0.0
    radius: float = 0.0
    mass: float = 0.0

    layout_node: Any = None

    @property
    def num_refs(self) -> int:
        return len(self.refs)

    @property
    def num_cites(self) -> int:
        return len(self.cites)


def date_to_unique_id(year: int, month: int, day: int) -> int:
    """Encode a date as an unsigned 32-bit id that orders papers in time."""
    return ((year - 1800) * 10_000_000 + month * 625_000 + day * 15_625) & _UINT_MASK


def unique_id_to_date(unique_id: int) -> tuple[int, int, int]:
    """Decode an id into (year, month, day); month and day come out one-based."""
    unique_id &= _UINT_MASK
    year = unique_id // 10_000_000 + 1800
    month = (unique_id % 10_000_000) // 625_000 + 1
    day = (unique_id % 625_000) // 15_625 + 1
    return year, month, day


def build_citation_links(papers: Sequence[Paper]) -> None:
    """Fill each paper's ``cites`` list from the references of the others."""
    print("building citation links")
    for paper in papers:
        paper.cites = []
    for paper in papers:
        for ref_paper in paper.refs:
            ref_paper.cites.append(paper)


def recompute_num_graph_cites(papers: Sequence[Paper]) -> None:
    """Count citations between included papers, via references with non-zero frequency."""
    for paper in papers:
        paper.num_graph_cites = 0
    for paper in papers:
        if not paper.included:
            continue
        for ref, freq in zip(paper.refs, paper.refs_ref_freq):
            if freq > 0 and ref.included:
                ref.num_graph_cites += 1


def _paint(start: Paper, colour: int) -> None:
    start.colour = colour
    stack = [start]
    while stack:
        paper = stack.pop()
        for other in (*paper.refs, *paper.cites):
            if other.included and other.colour != colour:
                other.colour = colour
                stack.append(other)


def recompute_colours(papers: Sequence[Paper], verbose: bool = False) -> int:
    """Colour connected components of included papers; return the number of colours.

    Papers that are not included keep colour 0.
    """
    for paper in papers:
        paper.colour = 0

    cur_colour = 1
    for paper in papers:
        if paper.included and paper.colour == 0:
            _paint(paper, cur_colour)
            cur_colour += 1

    num_with_col = [0] * cur_colour
    for paper in papers:
        num_with_col[paper.colour] += 1
    for paper in papers:
        paper.num_with_my_colour = num_with_col[paper.colour]

    if verbose:
        histogram: dict[int, int] = {}
        for size in num_with_col[1:]:
            if size in histogram:
                histogram[size] += 1
            elif len(histogram) < _HISTOGRAM_MAX_SIZES:
                histogram[size] = 1
        print(f"{cur_colour - 1} colours, {len(histogram)} unique sizes")
        for size, count in histogram.items():
            print(f"size {size} occured {count} times")

    return cur_colour - 1
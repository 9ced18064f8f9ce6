"""Reading additional weighted links between papers from a JSON file."""

from __future__ import annotations

import bisect
from pathlib import Path
from typing import Any, Optional, Sequence, Union

from papermap.common import Paper, build_citation_links
from papermap.jsonio import JsonFormatError, iter_json_objects

PathLike = Union[str, Path]


def _is_uint(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _member(obj: Any, key: str) -> Any:
    if not isinstance(obj, dict):
        raise JsonFormatError("expecting an object")
    if key not in obj:
        raise JsonFormatError(f"expecting member '{key}'")
    return obj[key]


class _ById:
    def __init__(self, papers: Sequence[Paper]) -> None:
        self._papers = papers
        self._ids = [p.id for p in papers]

    def get(self, paper_id: int) -> Optional[Paper]:
        pos = bisect.bisect_left(self._ids, paper_id)
        if pos < len(self._ids) and self._ids[pos] == paper_id:
            return self._papers[pos]
        return None


def _add_links(paper: Paper, links: list, index: _ById) -> tuple[int, int]:
    # every paper given other links gets a fresh weight list, zero for existing refs
    paper.refs_other_weight = [0.0] * len(paper.refs)
    total = 0
    new = 0
    for elem in links:
        if not isinstance(elem, list) or len(elem) != 2:
            raise JsonFormatError("expecting an array of size 2")
        link_id, weight = elem
        if not _is_uint(link_id):
            raise JsonFormatError("expecting an unsigned integer for link_id")
        if not _is_number(weight):
            raise JsonFormatError("expecting a number link_weight")
        other = index.get(link_id)
        if other is None or other is paper:
            continue
        for k, ref in enumerate(paper.refs):
            if ref is other:
                paper.refs_other_weight[k] = float(weight)
                break
        else:
            # not a real reference, so it carries no reference frequency
            paper.refs.append(other)
            paper.refs_ref_freq.append(0)
            paper.refs_other_weight.append(float(weight))
            new += 1
        total += 1
    return total, new


def load_other_links(path: PathLike, papers: Sequence[Paper]) -> tuple[int, int]:
    """Merge links from a stream of ``{"id": .., "refs": [[id, weight], ..]}`` objects.

    Links to papers already referenced set that reference's other weight; links
    to new papers are appended with reference frequency 0. Citations are rebuilt
    afterwards. ``papers`` must be sorted by id. Returns (total links, new links).
    """
    print("reading other links from JSON file")
    text = Path(path).read_text(encoding="utf-8")
    index = _ById(papers)
    total_links = 0
    total_new = 0
    for obj in iter_json_objects(text):
        paper_id = _member(obj, "id")
        if not _is_uint(paper_id):
            raise JsonFormatError("expecting an unsigned integer")
        paper = index.get(paper_id)
        if paper is None:
            continue
        links = _member(obj, "refs")
        if not isinstance(links, list):
            raise JsonFormatError("expecting an array")
        if not links:
            continue
        total, new = _add_links(paper, links, index)
        total_links += total
        total_new += new
    print(f"read {total_links} total links, {total_new} of those were additional ones")
    build_citation_links(papers)
    return total_links, total_new
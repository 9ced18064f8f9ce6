"""Reading categories and papers from JSON files."""

from __future__ import annotations

import bisect
import json
from pathlib import Path
from typing import Any, Iterator, Optional, Sequence, Union

from papermap.category import CATEGORY_UNKNOWN_ID, CategorySet
from papermap.common import PAPER_MAX_CATS, Paper, build_citation_links

PathLike = Union[str, Path]

_MAX_REF_FREQ = 255


class JsonFormatError(ValueError):
    """Raised when a JSON input file does not have the expected structure."""


def iter_json_objects(text: str) -> Iterator[Any]:
    """Yield each JSON value of a whitespace-separated stream of values."""
    decoder = json.JSONDecoder()
    pos = 0
    length = len(text)
    while True:
        while pos < length and text[pos].isspace():
            pos += 1
        if pos >= length:
            return
        try:
            value, pos = decoder.raw_decode(text, pos)
        except json.JSONDecodeError as exc:
            raise JsonFormatError(f"invalid JSON: {exc}") from exc
        yield value


def _read_objects(path: PathLike) -> Iterator[Any]:
    return iter_json_objects(Path(path).read_text(encoding="utf-8"))


def _member(obj: Any, key: str) -> Any:
    if not isinstance(obj, dict):
        raise JsonFormatError("expecting an object")
    if key not in obj:
        raise JsonFormatError(f"expecting member '{key}'")
    return obj[key]


def _is_uint(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def _parse_colour(value: Any) -> tuple[float, float, float]:
    if not isinstance(value, list):
        raise JsonFormatError("expecting an array for col")
    if len(value) != 3:
        raise JsonFormatError("expecting an array of size 3")
    rgb = []
    for elem in value:
        if _is_uint(elem) or isinstance(elem, float):
            rgb.append(float(elem))
        else:
            raise JsonFormatError("expecting a number")
    return rgb[0], rgb[1], rgb[2]


def load_categories(path: PathLike) -> CategorySet:
    """Read a file holding one object whose ``cats`` member lists named colours."""
    print("reading categories from JSON file")
    objects = list(_read_objects(path))
    if len(objects) != 1:
        raise JsonFormatError("expecting exactly one JSON object")
    cats = _member(objects[0], "cats")
    if not isinstance(cats, list):
        raise JsonFormatError("expecting an array for cats")

    category_set = CategorySet()
    for entry in cats:
        name = _member(entry, "cat")
        if not isinstance(name, str):
            raise JsonFormatError("expecting a string for cat")
        rgb = _parse_colour(_member(entry, "col"))
        category_set.add_category(name, rgb)

    print(f"read {len(cats)} categories")
    return category_set


def _parse_allcats(allcats: str, category_set: CategorySet) -> list[int]:
    ids: list[int] = []
    for name in allcats.split(","):
        if len(ids) >= PAPER_MAX_CATS:
            break
        cat = category_set.get_by_name(name)
        if cat is None:
            print(f"unknown category: {name}")
        else:
            ids.append(cat.cat_id)
    ids.extend([CATEGORY_UNKNOWN_ID] * (PAPER_MAX_CATS - len(ids)))
    return ids


def _object_id(obj: Any) -> int:
    paper_id = _member(obj, "id")
    if not _is_uint(paper_id):
        raise JsonFormatError("expecting an unsigned integer for id")
    return paper_id


def _load_ids(objects: Sequence[Any], category_set: CategorySet) -> list[Paper]:
    print("reading ids from JSON file")
    papers = []
    for obj in objects:
        paper = Paper(id=_object_id(obj))
        allcats = _member(obj, "allcats")
        if not isinstance(allcats, str):
            raise JsonFormatError("expecting a string for allcats")
        paper.allcats = _parse_allcats(allcats, category_set)
        papers.append(paper)

    papers.sort(key=lambda p: p.id)
    for index, paper in enumerate(papers):
        paper.index = index
    print(f"read {len(papers)} ids")
    return papers


class _PaperIndex:
    """Lookup of papers by id over a list sorted by id."""

    def __init__(self, papers: Sequence[Paper]) -> None:
        self._papers = papers
        self._ids = [p.id for p in papers]

    def get(self, paper_id: int) -> Optional[Paper]:
        pos = bisect.bisect_left(self._ids, paper_id)
        if pos < len(self._ids) and self._ids[pos] == paper_id:
            return self._papers[pos]
        return None


def _load_refs(objects: Sequence[Any], papers: Sequence[Paper]) -> None:
    print("reading refs from JSON file")
    index = _PaperIndex(papers)
    total_refs = 0
    for obj in objects:
        paper = index.get(_object_id(obj))
        if paper is None:
            continue
        refs = _member(obj, "refs")
        if not isinstance(refs, list):
            raise JsonFormatError("expecting an array")
        paper.refs = []
        paper.refs_ref_freq = []
        for elem in refs:
            if not isinstance(elem, list) or len(elem) != 2:
                raise JsonFormatError("expecting an array of size 2")
            ref_id, ref_freq = elem
            if not _is_uint(ref_id):
                raise JsonFormatError("expecting an unsigned integer for ref_id")
            if not _is_uint(ref_freq):
                raise JsonFormatError("expecting an unsigned integer for ref_freq")
            if ref_id == paper.id:
                # some papers reference themselves; drop those
                continue
            ref_paper = index.get(ref_id)
            if ref_paper is not None:
                paper.refs.append(ref_paper)
                paper.refs_ref_freq.append(min(ref_freq, _MAX_REF_FREQ))
        total_refs += len(paper.refs)
    print(f"read {total_refs} total refs")


def load_papers(path: PathLike, category_set: CategorySet) -> list[Paper]:
    """Read a stream of paper objects with ids, categories and references.

    The papers come back sorted by id, with ``index`` set to their position
    and ``cites`` filled in from the references.
    """
    objects = list(_read_objects(path))
    papers = _load_ids(objects, category_set)
    _load_refs(objects, papers)
    build_citation_links(papers)
    return papers
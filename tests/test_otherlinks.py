import json

import pytest

from papermap.common import Paper
from papermap.jsonio import JsonFormatError
from papermap.otherlinks import load_other_links


def _papers():
    a, b, c = Paper(id=10), Paper(id=20), Paper(id=30)
    a.refs = [b]
    a.refs_ref_freq = [2]
    for i, p in enumerate((a, b, c)):
        p.index = i
    return [a, b, c]


def _write(tmp_path, objects):
    path = tmp_path / "links.json"
    path.write_text("\n".join(json.dumps(o) for o in objects), encoding="utf-8")
    return path


def test_new_link_is_appended_with_zero_freq(tmp_path):
    a, b, c = papers = _papers()
    path = _write(tmp_path, [{"id": 10, "refs": [[30, 0.5]]}])
    total, new = load_other_links(path, papers)
    assert (total, new) == (1, 1)
    assert a.refs == [b, c]
    assert a.refs_ref_freq == [2, 0]
    assert a.refs_other_weight == [0.0, 0.5]


def test_existing_link_gets_weight(tmp_path):
    a, b, c = papers = _papers()
    path = _write(tmp_path, [{"id": 10, "refs": [[20, 1.5]]}])
    total, new = load_other_links(path, papers)
    assert (total, new) == (1, 0)
    assert a.refs == [b]
    assert a.refs_other_weight == [1.5]


def test_citations_are_rebuilt(tmp_path):
    a, b, c = papers = _papers()
    path = _write(tmp_path, [{"id": 10, "refs": [[30, 1]]}, {"id": 20, "refs": [[30, 2]]}])
    load_other_links(path, papers)
    assert b.cites == [a]
    assert c.cites == [a, b]
    assert b.refs_other_weight == [2.0]


def test_unknown_and_self_links_are_ignored(tmp_path):
    a, b, c = papers = _papers()
    path = _write(
        tmp_path,
        [{"id": 10, "refs": [[10, 1.0], [99, 1.0]]}, {"id": 77, "refs": "ignored"}],
    )
    total, new = load_other_links(path, papers)
    assert (total, new) == (0, 0)
    assert a.refs == [b]
    assert a.refs_other_weight == [0.0]


def test_empty_links_leave_weights_untouched(tmp_path):
    a, b, c = papers = _papers()
    path = _write(tmp_path, [{"id": 10, "refs": []}])
    assert load_other_links(path, papers) == (0, 0)
    assert a.refs_other_weight is None


def test_negative_weight_is_accepted(tmp_path):
    a, b, c = papers = _papers()
    path = _write(tmp_path, [{"id": 20, "refs": [[10, -3]]}])
    load_other_links(path, papers)
    assert b.refs == [a]
    assert b.refs_other_weight == [-3.0]


@pytest.mark.parametrize(
    "obj",
    [
        {"id": 10, "refs": [[20, "x"]]},
        {"id": 10, "refs": [[20, True]]},
        {"id": 10, "refs": [[20]]},
        {"id": 10, "refs": [[-1, 1.0]]},
        {"id": 10, "refs": {"a": 1}},
        {"id": 10},
        {"id": -5, "refs": []},
    ],
)
def test_malformed_input_raises(tmp_path, obj):
    path = _write(tmp_path, [obj])
    with pytest.raises(JsonFormatError):
        load_other_links(path, _papers())
import math

import pytest

from papermap.force import ForceParams, compute_attractive_link_force
from papermap.layout import Layout, LayoutLink, LayoutNode


def _pair(x1, y1, x2, y2, weight=1.0, radius=0.0):
    a = LayoutNode(x=x1, y=y1, radius=radius)
    b = LayoutNode(x=x2, y=y2, radius=radius)
    a.links.append(LayoutLink(b, weight))
    return a, b, Layout(nodes=[a, b])


def test_defaults_match_settings():
    params = ForceParams()
    assert params.link_strength == 1.17
    assert params.close_repulsion_a == 1e9
    assert params.use_ref_freq is True


def test_falloff_inverse():
    params = ForceParams(anti_gravity_falloff_rsq=4.0)
    assert params.anti_gravity_falloff_rsq_inv == 0.25


def test_stretched_link_pulls_together():
    a, b, layout = _pair(3.0, 0.0, 0.0, 0.0)
    compute_attractive_link_force(ForceParams(use_ref_freq=False, link_strength=1.0), layout)
    assert a.fx == pytest.approx(-3.0)
    assert b.fx == pytest.approx(3.0)
    assert a.fy == 0.0 and b.fy == 0.0


def test_forces_are_equal_and_opposite():
    a, b, layout = _pair(1.0, 2.0, -4.0, 5.0, weight=3.0, radius=0.5)
    compute_attractive_link_force(ForceParams(), layout)
    assert a.fx == pytest.approx(-b.fx)
    assert a.fy == pytest.approx(-b.fy)
    assert a.fx != 0.0


def test_compressed_link_pushes_apart():
    a, b, layout = _pair(1.0, 0.0, 0.0, 0.0, radius=2.0)
    compute_attractive_link_force(ForceParams(use_ref_freq=False), layout)
    assert a.fx > 0.0
    assert b.fx < 0.0


def test_rest_length_gives_no_force():
    a, b, layout = _pair(3.0, 0.0, 0.0, 0.0, radius=1.0)
    compute_attractive_link_force(ForceParams(), layout)
    assert a.fx == pytest.approx(0.0)
    assert b.fx == pytest.approx(0.0)


def test_very_short_link_is_ignored():
    a, b, layout = _pair(0.001, 0.0, 0.0, 0.0)
    compute_attractive_link_force(ForceParams(), layout)
    assert (a.fx, a.fy, b.fx, b.fy) == (0.0, 0.0, 0.0, 0.0)


def test_weight_scales_force_with_ref_freq():
    a1, _, l1 = _pair(5.0, 1.0, 0.0, 0.0, weight=1.0)
    a2, _, l2 = _pair(5.0, 1.0, 0.0, 0.0, weight=2.0)
    params = ForceParams(use_ref_freq=True)
    compute_attractive_link_force(params, l1)
    compute_attractive_link_force(params, l2)
    assert a2.fx == pytest.approx(2 * a1.fx)
    assert a2.fy == pytest.approx(2 * a1.fy)


def test_weight_ignored_without_ref_freq():
    a1, _, l1 = _pair(5.0, 1.0, 0.0, 0.0, weight=1.0)
    a2, _, l2 = _pair(5.0, 1.0, 0.0, 0.0, weight=9.0)
    params = ForceParams(use_ref_freq=False)
    compute_attractive_link_force(params, l1)
    compute_attractive_link_force(params, l2)
    assert a1.fx == a2.fx
    assert a1.fy == a2.fy


def test_forces_accumulate():
    a, b, layout = _pair(3.0, 4.0, 0.0, 0.0)
    a.fx, a.fy = 10.0, 10.0
    params = ForceParams(use_ref_freq=False, link_strength=1.0)
    compute_attractive_link_force(params, layout)
    assert a.fx == pytest.approx(7.0)
    assert a.fy == pytest.approx(6.0)
    assert math.isclose(b.fx + b.fy, 7.0)
    assert math.isclose(a.fx + b.fx, 10.0)
import math

from papermap.coarsen import build_reduced
from papermap.layout import Layout, LayoutLink, LayoutNode, NodeFlag


def _node(mass=1.0, radius=1.0):
    return LayoutNode(flags=NodeFlag.IS_FINEST, mass=mass, radius=radius)


def _link(a, b, weight):
    a.links.append(LayoutLink(b, weight))


def test_pair_combines_into_one_node():
    a, b = _node(2.0, 3.0), _node(5.0, 4.0)
    _link(a, b, 1.0)
    layout = Layout(nodes=[a, b])
    reduced = build_reduced(layout)
    assert reduced.num_nodes == 1
    top = reduced.nodes[0]
    assert {id(top.child1), id(top.child2)} == {id(a), id(b)}
    assert top.mass == a.mass + b.mass
    assert math.isclose(top.radius, 5.0)
    assert top.links == []
    assert a.parent is top and b.parent is top


def test_levels_are_linked():
    a, b = _node(), _node()
    _link(a, b, 1.0)
    layout = Layout(nodes=[a, b])
    reduced = build_reduced(layout)
    assert reduced.child_layout is layout
    assert layout.parent_layout is reduced
    assert reduced.parent_layout is None


def test_unlinked_node_gets_own_parent():
    a, b, c = _node(), _node(), _node(radius=2.0)
    _link(a, b, 5.0)
    _link(b, c, 1.0)
    reduced = build_reduced(Layout(nodes=[a, b, c]))
    assert reduced.num_nodes == 2
    assert a.parent is b.parent
    single = c.parent
    assert single.child1 is c and single.child2 is None
    assert single.radius == c.radius
    ab = a.parent
    assert len(ab.links) == 1
    assert ab.links[0].node is single
    assert ab.links[0].weight == 1.0


def test_weights_merge_to_same_target():
    a, b, c = _node(), _node(), _node()
    _link(a, b, 10.0)
    _link(a, c, 1.0)
    _link(b, c, 2.0)
    reduced = build_reduced(Layout(nodes=[a, b, c]))
    ab = a.parent
    assert ab is b.parent
    assert len(ab.links) == 1
    assert ab.links[0].node is c.parent
    assert ab.links[0].weight == 3.0


def test_opposite_links_combined():
    a, b, c, d = _node(), _node(), _node(), _node()
    _link(a, b, 10.0)
    _link(c, d, 10.0)
    _link(a, c, 1.0)
    _link(d, b, 2.0)
    reduced = build_reduced(Layout(nodes=[a, b, c, d]))
    assert reduced.num_nodes == 2
    assert reduced.num_links == 1
    ab, cd = a.parent, c.parent
    assert ab.links[0].node is cd
    assert ab.links[0].weight == 3.0
    assert cd.links == []


def test_equal_weights_lightest_first():
    a, b, c = _node(mass=2.0), _node(mass=1.0), _node(mass=1.0)
    _link(a, b, 1.0)
    _link(c, b, 1.0)
    reduced = build_reduced(Layout(nodes=[a, b, c]))
    assert c.parent is b.parent
    assert a.parent is not b.parent
    assert a.parent.child2 is None
    assert reduced.num_nodes == 2


def test_mass_conserved_and_parents_consistent():
    nodes = [_node(mass=float(i + 1), radius=float(i % 3 + 1)) for i in range(7)]
    for i in range(6):
        _link(nodes[i], nodes[i + 1], float(i + 1))
    _link(nodes[0], nodes[6], 0.5)
    layout = Layout(nodes=nodes)
    reduced = build_reduced(layout)
    assert math.isclose(sum(n.mass for n in reduced.nodes), sum(n.mass for n in nodes))
    assert math.isclose(
        sum(n.radius ** 2 for n in reduced.nodes), sum(n.radius ** 2 for n in nodes)
    )
    for node in nodes:
        assert node.parent in reduced.nodes
        assert node is node.parent.child1 or node is node.parent.child2
    for node2 in reduced.nodes:
        for link in node2.links:
            assert link.node is not node2
            assert link.node in reduced.nodes


def test_propagation_after_coarsening():
    a, b = _node(), _node()
    _link(a, b, 1.0)
    layout = Layout(nodes=[a, b])
    reduced = build_reduced(layout)
    reduced.nodes[0].x = 7.0
    reduced.nodes[0].y = -2.0
    reduced.propagate_positions_to_children()
    assert (a.x, a.y) == (7.0, -2.0)
    assert (b.x, b.y) == (7.0, -2.0)
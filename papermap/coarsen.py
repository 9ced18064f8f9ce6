"""Coarsening a layout by pairing each node with its most strongly linked neighbour."""

from __future__ import annotations

import math
from typing import Optional

from papermap.layout import Layout, LayoutLink, LayoutNode, NodeFlag


def _max_link_weight(node: LayoutNode) -> float:
    return max((link.weight for link in node.links), default=0.0, key=lambda w: w)


def _best_free_neighbour(node: LayoutNode) -> Optional[LayoutNode]:
    best: Optional[LayoutNode] = None
    best_weight = 0.0
    for link in node.links:
        if link.node.parent is None and (best is None or link.weight > best_weight):
            best = link.node
            best_weight = link.weight
    return best


def _combine(child1: LayoutNode, child2: Optional[LayoutNode]) -> LayoutNode:
    children = [c for c in (child1, child2) if c is not None]
    node2 = LayoutNode(
        flags=NodeFlag.NONE,
        child1=child1,
        child2=child2,
        mass=sum(c.mass for c in children),
        radius=math.sqrt(sum(c.radius * c.radius for c in children)),
    )
    for child in children:
        child.parent = node2
    return node2


def _add_links(node2: LayoutNode, links: list[LayoutLink]) -> None:
    """Add links to the parents of the linked nodes, merging weights by target."""
    by_target = {id(link.node): link for link in node2.links}
    for link in links:
        target = link.node.parent
        if target is node2:
            # a link between the children of this node
            continue
        existing = by_target.get(id(target))
        if existing is not None:
            existing.weight += link.weight
        else:
            new_link = LayoutLink(target, link.weight)
            node2.links.append(new_link)
            by_target[id(target)] = new_link


def build_reduced(layout: Layout) -> Layout:
    """Build the next coarser layout above ``layout`` and link the two levels.

    Nodes are visited by their strongest link, largest first (ties: smallest
    mass first), and each is paired with its strongest unpaired neighbour.
    Nodes left unpaired get a parent of their own.
    """
    for node in layout.nodes:
        node.parent = None

    with_links = [node for node in layout.nodes if node.links]
    with_links.sort(key=lambda n: (-_max_link_weight(n), n.mass))

    nodes2: list[LayoutNode] = []
    for node in with_links:
        if node.parent is not None:
            continue
        partner = _best_free_neighbour(node)
        if partner is None:
            continue
        nodes2.append(_combine(node, partner))

    for node in layout.nodes:
        if node.parent is None:
            nodes2.append(_combine(node, None))

    for node2 in nodes2:
        _add_links(node2, node2.child1.links)
        if node2.child2 is not None:
            _add_links(node2, node2.child2.links)

    layout2 = Layout(nodes=nodes2, child_layout=layout)
    layout.parent_layout = layout2
    layout2.combine_duplicate_links()
    return layout2
"""Layout graphs: nodes with positions linked by weighted edges, coarsened in levels."""

from __future__ import annotations

import math
import random
from dataclasses import dataclass, field
from enum import IntFlag
from typing import Any, Optional

_EXPORT_FACTOR = 20.0


class NodeFlag(IntFlag):
    NONE = 0
    IS_FINEST = 0x0001
    POS_VALID = 0x0002
    HOLD_STILL = 0x0004


@dataclass(eq=False)
class LayoutLink:
    """A weighted link to another node of the same layout."""

    node: "LayoutNode"
    weight: float


def _round_half_away(value: float) -> int:
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


@dataclass(eq=False)
class LayoutNode:
    """A node of a layout: a paper in the finest layout, else one or two child nodes."""

    flags: NodeFlag = NodeFlag.NONE
    parent: Optional["LayoutNode"] = None
    paper: Any = None
    child1: Optional["LayoutNode"] = None
    child2: Optional["LayoutNode"] = None
    links: list[LayoutLink] = field(default_factory=list)
    mass: float = 0.0
    radius: float = 0.0
    x: float = 0.0
    y: float = 0.0
    fx: float = 0.0
    fy: float = 0.0

    @property
    def num_links(self) -> int:
        return len(self.links)

    def compute_best_start_position(self, rng: Optional[random.Random] = None) -> None:
        """Place the node at the weighted average of its positioned neighbours, with jitter."""
        uniform = (rng or random).random
        x = y = weight = 0.0
        for link in self.links:
            if link.node.flags & NodeFlag.POS_VALID:
                x += link.weight * link.node.x
                y += link.weight * link.node.y
                weight += link.weight
        if weight == 0:
            self.x = 100.0 * (uniform() - 0.5)
            self.y = 100.0 * (uniform() - 0.5)
        else:
            # jitter so a node with a single link does not sit on its neighbour
            self.x = x / weight + (uniform() - 0.5)
            self.y = y / weight + (uniform() - 0.5)

    def export_quantities(self) -> tuple[int, int, int]:
        """Return the position and radius as scaled integers (x, y, r)."""
        return (
            _round_half_away(self.x * _EXPORT_FACTOR),
            _round_half_away(self.y * _EXPORT_FACTOR),
            _round_half_away(self.radius * _EXPORT_FACTOR),
        )

    def import_quantities(self, x: int, y: int) -> None:
        """Set the position from scaled integers; the radius is not imported."""
        self.x = x / _EXPORT_FACTOR
        self.y = y / _EXPORT_FACTOR


def _ratio(a: float, b: float) -> float:
    if b:
        return a / b
    return math.nan if a == 0 else math.inf


@dataclass(eq=False)
class Layout:
    """One level of the layout hierarchy."""

    nodes: list[LayoutNode] = field(default_factory=list)
    parent_layout: Optional["Layout"] = None
    child_layout: Optional["Layout"] = None

    @property
    def num_nodes(self) -> int:
        return len(self.nodes)

    @property
    def num_links(self) -> int:
        return sum(len(node.links) for node in self.nodes)

    @property
    def is_finest(self) -> bool:
        return self.child_layout is None

    def combine_duplicate_links(self) -> None:
        """Merge each pair of opposite links into one link carrying both weights."""
        for node in self.nodes:
            for link in node.links:
                other = link.node
                if other is node:
                    raise ValueError("layout node links to itself")
                weight = link.weight
                for k, back in enumerate(other.links):
                    if back.node is node:
                        weight += back.weight
                        del other.links[k]
                        break
                link.weight = weight

    def propagate_positions_to_children(self) -> None:
        """Copy each node's position down to all its descendants."""
        for node in self.nodes:
            self._propagate(self, node)

    @staticmethod
    def _propagate(layout: "Layout", node: LayoutNode) -> None:
        child_layout = layout.child_layout
        if child_layout is None:
            return
        for child in (node.child1, node.child2):
            if child is not None:
                child.x = node.x
                child.y = node.y
                Layout._propagate(child_layout, child)

    def describe(self) -> str:
        """Return a one-line summary of node, link, mass and radius totals."""
        mass = sum(n.mass for n in self.nodes)
        radius = math.sqrt(sum(n.radius * n.radius for n in self.nodes))
        text = (
            f"layout has {self.num_nodes} nodes, {self.num_links} links, "
            f"{mass:g} total mass, {radius:g} total radius"
        )
        if self.child_layout is not None:
            child = self.child_layout
            text += (
                f"; ratio to child: {_ratio(self.num_nodes, child.num_nodes):f} nodes, "
                f"{_ratio(self.num_links, child.num_links):f} links"
            )
        return text

    def get_node_by_id(self, paper_id: int) -> Optional[LayoutNode]:
        """Find the node of the paper with this id; nodes must be sorted by paper id."""
        if self.child_layout is not None:
            raise ValueError("lookup by id needs the finest layout")
        lo, hi = 0, len(self.nodes) - 1
        while lo <= hi:
            mid = (lo + hi) // 2
            mid_id = self.nodes[mid].paper.id
            if paper_id == mid_id:
                return self.nodes[mid]
            if paper_id < mid_id:
                hi = mid - 1
            else:
                lo = mid + 1
        return None

    def get_node_at(self, x: float, y: float) -> Optional[LayoutNode]:
        """Return the first node whose disc contains the point, or None."""
        for node in self.nodes:
            dx = node.x - x
            dy = node.y - y
            if dx * dx + dy * dy < node.radius * node.radius:
                return node
        return None

    def rotate_all(self, angle: float) -> None:
        """Rotate every node about the origin by ``angle`` radians."""
        s = math.sin(angle)
        c = math.cos(angle)
        for node in self.nodes:
            x, y = node.x, node.y
            node.x = c * x - s * y
            node.y = s * x + c * y

    def recompute_mass_radius(self) -> None:
        """Recompute mass and radius on every level, from the finest one upwards."""
        layout: Optional[Layout] = self
        while layout.child_layout is not None:
            layout = layout.child_layout
        while layout is not None:
            for node in layout.nodes:
                if node.flags & NodeFlag.IS_FINEST:
                    if node.paper is None:
                        raise ValueError("finest layout node has no paper")
                    node.mass = node.paper.mass
                    node.radius = node.paper.radius
                else:
                    children = [c for c in (node.child1, node.child2) if c is not None]
                    node.mass = sum(c.mass for c in children)
                    node.radius = math.sqrt(sum(c.radius * c.radius for c in children))
            layout = layout.parent_layout
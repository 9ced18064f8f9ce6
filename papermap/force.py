"""Spring forces along the links of a layout."""

from __future__ import annotations

import math
from dataclasses import dataclass

from papermap.layout import Layout

_MIN_LINK_LENGTH = 1e-2
_REST_LENGTH_FACTOR = 1.5
_REF_FREQ_FACTOR = 0.65


@dataclass
class ForceParams:
    """Strengths of the attractive and repulsive forces between layout nodes."""

    do_close_repulsion: bool = False
    close_repulsion_a: float = 1e9
    close_repulsion_b: float = 1e14
    close_repulsion_c: float = 1.1
    close_repulsion_d: float = 0.6
    use_ref_freq: bool = True
    anti_gravity_falloff_rsq: float = 1e6
    link_strength: float = 1.17

    @property
    def anti_gravity_falloff_rsq_inv(self) -> float:
        return 1.0 / self.anti_gravity_falloff_rsq


def compute_attractive_link_force(params: ForceParams, layout: Layout) -> None:
    """Add spring forces along every link to the nodes' ``fx`` and ``fy``.

    Each spring rests at 1.5 times the sum of the two radii; links shorter
    than 0.01 exert no force.
    """
    for n1 in layout.nodes:
        for link in n1.links:
            n2 = link.node
            dx = n1.x - n2.x
            dy = n1.y - n2.y
            r = math.sqrt(dx * dx + dy * dy)
            if r <= _MIN_LINK_LENGTH:
                continue
            rest_len = _REST_LENGTH_FACTOR * (n1.radius + n2.radius)
            fac = params.link_strength
            if params.use_ref_freq:
                fac *= _REF_FREQ_FACTOR * link.weight
            fac *= (r - rest_len) / r
            fx = dx * fac
            fy = dy * fac
            n1.fx -= fx
            n1.fy -= fy
            n2.fx += fx
            n2.fy += fy
"""Building the finest layout level from a list of papers."""

from __future__ import annotations

import math
from typing import Sequence

from papermap.common import Paper
from papermap.layout import Layout, LayoutLink, LayoutNode, NodeFlag

FAKE_LINK_WEIGHT = 0.25


def _ref_weight(
    paper: Paper,
    j: int,
    age_weaken: bool,
    factor_ref_link: float,
    factor_other_link: float,
) -> float:
    ref_freq = paper.refs_ref_freq[j]
    weight = factor_ref_link * ref_freq * ref_freq
    if age_weaken:
        ref = paper.refs[j]
        weight *= 0.4 + 0.6 * math.exp(-((1e-7 * paper.id - 1e-7 * ref.id) ** 2))
    if paper.refs_other_weight is not None:
        weight += factor_other_link * paper.refs_other_weight[j]
    return weight


def build_from_papers(
    papers: Sequence[Paper],
    age_weaken: bool,
    factor_ref_link: float,
    factor_other_link: float,
) -> Layout:
    """Make one layout node per paper, linked by its references and fake links.

    Only links to papers that have a layout node are kept; opposite links
    between the same pair of papers are merged.
    """
    nodes = []
    for paper in papers:
        node = LayoutNode(
            flags=NodeFlag.IS_FINEST,
            paper=paper,
            mass=paper.mass,
            radius=paper.radius,
        )
        paper.layout_node = node
        nodes.append(node)

    for paper, node in zip(papers, nodes):
        node.links = [
            LayoutLink(ref.layout_node, _ref_weight(paper, j, age_weaken, factor_ref_link, factor_other_link))
            for j, ref in enumerate(paper.refs)
            if ref.layout_node is not None
        ]
        node.links.extend(
            LayoutLink(fake.layout_node, FAKE_LINK_WEIGHT)
            for fake in paper.fake_links
            if fake.layout_node is not None
        )

    layout = Layout(nodes=nodes)
    layout.combine_duplicate_links()
    return layout
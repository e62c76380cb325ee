from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence, Union

from .vectorize import FrequencyVector


@dataclass(frozen=True)
class LeafNode:
    label_id: int
    weight: float


@dataclass(frozen=True)
class InternalNode:
    feature_id: int
    threshold: float
    left: "Node"
    right: "Node"


Node = Union[InternalNode, LeafNode]


@dataclass(frozen=True)
class VoteTally:
    """
    Accumulated leaf weights per label.

    `totals` is ordered by first appearance during the forest walk; `winner` is the label id
    with the strictly greatest total, earliest-inserted on ties.
    """

    totals: tuple[tuple[int, float], ...]
    winner: int


def evaluate_tree(root: Node, vector: FrequencyVector) -> LeafNode:
    node = root
    while isinstance(node, InternalNode):
        if vector.get(node.feature_id) <= node.threshold:
            node = node.left
        else:
            node = node.right
    return node


def pick_label(totals: Sequence[tuple[int, float]]) -> int:
    """
    Return the label with the greatest total, scanning in the given order.

    Only a strictly greater total replaces the current best, so the earliest label wins ties.
    """
    if not totals:
        raise ValueError("Cannot pick a label from an empty tally")
    best_label: Optional[int] = None
    best_total = 0.0
    for label_id, total in totals:
        if best_label is None or total > best_total:
            best_label = label_id
            best_total = total
    assert best_label is not None
    return best_label


def aggregate_votes(forest: Sequence[Node], vector: FrequencyVector, n_labels: int) -> VoteTally:
    """
    Run every tree in forest order and sum leaf weights per label.

    Totals live in a dense array indexed by label id; `order` records first insertion.
    """
    sums = [0.0] * n_labels
    seen = [False] * n_labels
    order: list[int] = []
    for tree in forest:
        leaf = evaluate_tree(tree, vector)
        if not seen[leaf.label_id]:
            seen[leaf.label_id] = True
            order.append(leaf.label_id)
        sums[leaf.label_id] += leaf.weight

    totals = tuple((label_id, sums[label_id]) for label_id in order)
    return VoteTally(totals=totals, winner=pick_label(totals))

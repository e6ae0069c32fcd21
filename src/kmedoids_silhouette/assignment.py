"""
Assignment of objects to medoids.

Builds the per-object triplet records for a given medoid list, applies a single
medoid swap, and recenters one cluster on its best medoid. These are the
building blocks the PAMMEDSIL optimizer in pammedsil.py runs on.

Doxygen-style docstrings are used (with @param / @return tags).
"""

from typing import List, Sequence, Tuple
import numpy as np

from kmedoids_silhouette.arrayadapter import ArrayAdapter
from kmedoids_silhouette.records import Reco, loss_ratio

__all__ = [
    "check_medoids",
    "assign_object",
    "initial_assignment",
    "do_swap",
    "choose_medoid_within_partition",
]


def check_medoids(mat: ArrayAdapter, med: Sequence[int]) -> None:
    """
    Validate a matrix / medoid list pair.

    @param mat: dissimilarity matrix
    @param med: medoid object indices
    @raises ValueError: non-square matrix, k == 0, k > n, index out of range or duplicates.
    """
    if not mat.is_square():
        raise ValueError("Dissimilarity matrix is not square.")
    n, k = len(mat), len(med)
    if k == 0:
        raise ValueError("At least one medoid is required.")
    if k > n:
        raise ValueError(f"k must be at most N (k={k}, N={n}).")
    for m in med:
        if not (0 <= m < n):
            raise ValueError(f"Medoid index {m} out of range for N={n}.")
    if len(set(med)) != k:
        raise ValueError("Medoids must be unique.")


def assign_object(mat: ArrayAdapter, med: Sequence[int], j: int) -> Reco:
    """
    Triplet record of object j: its three closest medoids in slot order.

    A medoid object is always its own nearest medoid, even if another medoid
    is at distance zero.

    @param mat: dissimilarity matrix
    @param med: medoid object indices
    @param j: object index
    @return: Reco for j
    """
    reco = Reco()
    own = None
    for m, mm in enumerate(med):
        if mm == j:
            own = m
        else:
            reco.insert(m, mat.get(j, mm))
    if own is not None:
        reco.promote(own)
    return reco


def _assign_all(mat: ArrayAdapter, med: Sequence[int], data: List[Reco]) -> float:
    loss = 0.0
    for j in range(len(data)):
        reco = assign_object(mat, med, j)
        data[j] = reco
        loss += loss_ratio(reco.near.d, reco.seco.d)
    return loss


def initial_assignment(mat: ArrayAdapter, med: Sequence[int]) -> Tuple[float, List[Reco]]:
    """
    Assign every object to its nearest, second and third nearest medoid.

    @param mat: dissimilarity matrix
    @param med: medoid object indices
    @return: tuple (loss, data)
        - loss: sum over objects of loss_ratio(near, second)
        - data: one Reco per object
    """
    check_medoids(mat, med)
    data: List[Reco] = [None] * len(mat)
    loss = _assign_all(mat, med, data)
    return loss, data


def do_swap(mat: ArrayAdapter, med: List[int], data: List[Reco], b: int, j: int) -> float:
    """
    Replace the medoid in slot b with object j and refresh all records.

    @param mat: dissimilarity matrix
    @param med: medoid object indices; modified in-place
    @param data: per-object records; modified in-place
    @param b: medoid slot to replace
    @param j: new medoid object index (must not be a medoid already)
    @return: new loss, sum over objects of loss_ratio(near, second)
    @raises ValueError: if b is not a slot or j is already a medoid
    """
    if not (0 <= b < len(med)):
        raise ValueError(f"Invalid medoid slot {b}.")
    if j in med:
        raise ValueError(f"Object {j} is already a medoid.")
    med[b] = j
    return _assign_all(mat, med, data)


def choose_medoid_within_partition(mat: ArrayAdapter,
                                   assi: np.ndarray,
                                   med: List[int],
                                   m: int) -> Tuple[bool, float]:
    """
    Move medoid m to the member of its cluster with the smallest total distance
    to the other members. The current medoid is kept on ties.

    @param mat: dissimilarity matrix
    @param assi: cluster slot of every object
    @param med: medoid object indices; med[m] modified in-place
    @param m: cluster slot
    @return: tuple (swapped, cost) where cost is the total distance to the new medoid
    """
    members = np.flatnonzero(np.asarray(assi) == m)

    def total(c: int) -> float:
        return sum(float(mat.get(o, c)) for o in members if o != c)

    best, cost = med[m], total(med[m])
    for c in members:
        if c == med[m]:
            continue
        s = total(c)
        if s < cost:
            best, cost = int(c), s
    swapped = best != med[m]
    med[m] = best
    return swapped, cost

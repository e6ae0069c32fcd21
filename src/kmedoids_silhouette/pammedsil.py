#!/usr/bin/env python3
# pammedsil.py
"""
PAMMEDSIL: k-medoids clustering optimizing the medoid silhouette.

Given only a dissimilarity matrix, choose k medoids so that the mean ratio
near / second (distance to the nearest medoid over distance to the second
nearest) is as small as possible. The reported loss is the medoid silhouette
1 - mean(near / second), so higher is better.

Two phases:
    - BUILD: greedy PAM-style selection of the initial medoids
    - SWAP: best-improvement local search over (medoid slot, object) swaps

Every object keeps its three nearest medoids (records.Reco) so the change of
the loss for a candidate swap is computed in one pass over the objects.

Doxygen-style docstrings are used (with @param / @return tags).
"""

import logging
from typing import List, Tuple
import numpy as np

from kmedoids_silhouette.arrayadapter import ArrayAdapter, as_adapter
from kmedoids_silhouette.assignment import (
    choose_medoid_within_partition,
    do_swap,
    initial_assignment,
)
from kmedoids_silhouette.records import DistancePair, Reco, loss_ratio

__all__ = [
    "DEFAULT_MAX_ITER",
    "pammedsil",
    "pammedsil_swap",
    "pammedsil_build",
    "find_best_swap",
    "find_best_swap_k2",
    "optimize_with_build",
    "optimize_from_medoids",
]

logger = logging.getLogger(__name__)

DEFAULT_MAX_ITER = 100


def _check_k(mat: ArrayAdapter, k: int) -> None:
    if not mat.is_square():
        raise ValueError("Dissimilarity matrix is not square.")
    n = len(mat)
    if not (0 < k <= n):
        raise ValueError(f"k must be between 1 and N (k={k}, N={n}).")


def pammedsil_build(mat: ArrayAdapter, k: int) -> Tuple[float, List[int], List[Reco]]:
    """
    Greedy PAM BUILD initialization.

    The first medoid is the object with the smallest total distance to all
    others. Each further medoid is the non-medoid object that most reduces the
    total distance to the nearest medoid. BUILD stops early, with fewer than k
    medoids, once no candidate reduces it (duplicate objects).

    @param mat: dissimilarity matrix
    @param k: number of medoids to pick
    @return: tuple (loss, med, data)
        - loss: sum over objects of loss_ratio(near, second)
        - med: medoid object indices, length <= k
        - data: one Reco per object
    @raises ValueError: non-square matrix or k outside 1..N
    """
    mat = as_adapter(mat)
    _check_k(mat, k)
    n = len(mat)

    best_sum, best_i = 0.0, 0
    for i in range(n):
        total = 0.0
        for j in range(n):
            if j != i:
                total += float(mat.get(j, i))
        if i == 0 or total < best_sum:
            best_sum, best_i = total, i
    med = [best_i]
    data = [Reco(near=DistancePair(0, 0 if j == best_i else mat.get(j, best_i))) for j in range(n)]
    logger.debug("BUILD medoid 0: object %d (total distance %g)", best_i, best_sum)

    loss = 0.0
    for l in range(1, k):
        best_sum, best_i = 0.0, None
        for i in range(n):
            if i in med:
                continue
            total = -float(data[i].near.d)
            for j, recj in enumerate(data):
                if j != i:
                    d = mat.get(j, i)
                    if d < recj.near.d:
                        total += float(d) - float(recj.near.d)
            if total < best_sum:
                best_sum, best_i = total, i
        if best_i is None:
            logger.info("BUILD stopped after %d of %d medoids: no further improvement", l, k)
            break

        loss = 0.0
        for j, recj in enumerate(data):
            if j == best_i:
                recj.promote(l)
            else:
                recj.insert(l, mat.get(j, best_i))
            loss += loss_ratio(recj.near.d, recj.seco.d)
        med.append(best_i)
        logger.debug("BUILD medoid %d: object %d (change %g)", l, best_i, best_sum)
    return loss, med, data


def find_best_swap(mat: ArrayAdapter, med: List[int], data: List[Reco], j: int) -> Tuple[float, int]:
    """
    Best medoid slot to replace with object j, for k > 2.

    The change is old loss minus new loss, so positive values are improvements.

    @param mat: dissimilarity matrix
    @param med: medoid object indices
    @param data: per-object records (not modified)
    @param j: candidate object, not currently a medoid
    @return: tuple (change, slot); slot is None if no swap improves the loss
    """
    recj = data[j]
    best = (0.0, None)
    for m in range(len(med)):
        # j becomes a medoid and no longer contributes
        acc = loss_ratio(recj.near.d, recj.seco.d)
        for o, reco in enumerate(data):
            if o == j:
                continue
            doj = mat.get(o, j)
            old = loss_ratio(reco.near.d, reco.seco.d)
            if reco.near.i == m:
                if doj < reco.seco.d:
                    acc += old - loss_ratio(doj, reco.seco.d)
                elif doj < reco.third.d:
                    acc += old - loss_ratio(reco.seco.d, doj)
                else:
                    acc += old - loss_ratio(reco.seco.d, reco.third.d)
            elif reco.seco.i == m:
                if doj < reco.near.d:
                    acc += old - loss_ratio(doj, reco.near.d)
                elif doj < reco.third.d:
                    acc += old - loss_ratio(reco.near.d, doj)
                else:
                    acc += old - loss_ratio(reco.near.d, reco.third.d)
            else:
                if doj < reco.near.d:
                    acc += old - loss_ratio(doj, reco.near.d)
                elif doj < reco.seco.d:
                    acc += old - loss_ratio(reco.near.d, doj)
        if acc > best[0]:
            best = (acc, m)
    return best


def find_best_swap_k2(mat: ArrayAdapter, med: List[int], data: List[Reco], j: int) -> Tuple[float, int]:
    """
    Best medoid slot to replace with object j, for exactly two medoids.

    Same as find_best_swap without the third-nearest fallbacks: the only
    alternative to a replaced medoid is the other medoid, or j itself.

    @param mat: dissimilarity matrix
    @param med: medoid object indices (length 2)
    @param data: per-object records (not modified)
    @param j: candidate object, not currently a medoid
    @return: tuple (change, slot); slot is None if no swap improves the loss
    """
    recj = data[j]
    best = (0.0, None)
    for m in range(len(med)):
        acc = loss_ratio(recj.near.d, recj.seco.d)
        for o, reco in enumerate(data):
            if o == j:
                continue
            doj = mat.get(o, j)
            old = loss_ratio(reco.near.d, reco.seco.d)
            if reco.near.i == m:
                if doj < reco.seco.d:
                    acc += old - loss_ratio(doj, reco.seco.d)
                else:
                    acc += old - loss_ratio(reco.seco.d, doj)
            elif reco.seco.i == m:
                if doj < reco.near.d:
                    acc += old - loss_ratio(doj, reco.near.d)
                else:
                    acc += old - loss_ratio(reco.near.d, doj)
            else:
                if doj < reco.near.d:
                    acc += old - loss_ratio(doj, reco.near.d)
                elif doj < reco.seco.d:
                    acc += old - loss_ratio(reco.near.d, doj)
        if acc > best[0]:
            best = (acc, m)
    return best


def _optimize(mat: ArrayAdapter,
              med: List[int],
              data: List[Reco],
              max_iter: int,
              loss: float) -> Tuple[float, np.ndarray, int, int]:
    """
    SWAP phase shared by pammedsil and pammedsil_swap.

    Each iteration scans all non-medoid objects, keeps the first strictly best
    improving swap and applies it. Stops when nothing improves, after max_iter
    iterations, or when an applied swap fails to lower the recomputed loss
    (that swap is undone but still counted in n_swap).
    """
    n, k = len(mat), len(med)
    if k == 1:
        assi = np.zeros(n, dtype=int)
        swapped, _ = choose_medoid_within_partition(mat, assi, med, 0)
        # medoid silhouette of a single cluster, not its total distance
        return 0.0, assi, 1, 1 if swapped else 0

    find = find_best_swap_k2 if k == 2 else find_best_swap
    n_swaps, n_iter = 0, 0
    while n_iter < max_iter:
        n_iter += 1
        best_change, best_b, best_j = 0.0, None, None
        for j in range(n):
            if j == med[data[j].near.i]:
                continue  # already a medoid
            change, b = find(mat, med, data, j)
            if change <= best_change:
                continue
            best_change, best_b, best_j = change, b, j
        if not best_change > 0:
            break  # converged, or NaN

        old = med[best_b]
        newloss = do_swap(mat, med, data, best_b, best_j)
        n_swaps += 1
        if newloss >= loss:
            logger.warning("Swap of slot %d to object %d did not lower the loss (%r >= %r), stopping",
                           best_b, best_j, newloss, loss)
            loss = do_swap(mat, med, data, best_b, old)
            break
        logger.debug("Iteration %d: slot %d object %d -> %d, loss %r -> %r",
                     n_iter, best_b, old, best_j, loss, newloss)
        loss = newloss

    assi = np.array([reco.near.i for reco in data], dtype=int)
    return 1.0 - loss / n, assi, n_iter, n_swaps


def pammedsil(mat, k: int, max_iter: int = DEFAULT_MAX_ITER) -> Tuple[float, np.ndarray, List[int], int, int]:
    """
    PAM BUILD followed by the PAMMEDSIL SWAP.

    @param mat: dissimilarity matrix (ArrayAdapter or array-like of shape (n, n))
    @param k: number of clusters (1 <= k <= n)
    @param max_iter: maximum number of SWAP iterations

    @return: tuple (loss, labels, medoids, n_iter, n_swap)
        - loss: medoid silhouette 1 - mean(near / second), higher is better
        - labels: integer array shape (n,) with the medoid slot of every object
        - medoids: medoid object indices; fewer than k if the data has duplicates
        - n_iter: number of SWAP iterations run
        - n_swap: number of swaps performed
    @raises ValueError: non-square matrix or k outside 1..n
    """
    mat = as_adapter(mat)
    loss, med, data = pammedsil_build(mat, k)
    loss, assi, n_iter, n_swap = _optimize(mat, med, data, max_iter, loss)
    return loss, assi, med, n_iter, n_swap


def pammedsil_swap(mat, med: List[int], max_iter: int = DEFAULT_MAX_ITER) -> Tuple[float, np.ndarray, int, int]:
    """
    PAMMEDSIL SWAP starting from given medoids.

    @param mat: dissimilarity matrix (ArrayAdapter or array-like of shape (n, n))
    @param med: initial medoid object indices; modified in-place to the final medoids
    @param max_iter: maximum number of SWAP iterations

    @return: tuple (loss, labels, n_iter, n_swap), as in pammedsil
    @raises ValueError: non-square matrix, empty / too many / duplicate / out of range medoids
    """
    mat = as_adapter(mat)
    loss, data = initial_assignment(mat, med)
    return _optimize(mat, med, data, max_iter, loss)


optimize_with_build = pammedsil
optimize_from_medoids = pammedsil_swap

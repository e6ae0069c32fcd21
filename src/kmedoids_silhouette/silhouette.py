"""
Cluster quality measures computed from a dissimilarity matrix.

    - silhouette: the classic silhouette of a labeling (Rousseeuw, 1987)
    - medoid_silhouette: 1 - near / second with respect to a medoid list,
      the objective PAMMEDSIL optimizes
"""

from typing import Optional, Sequence, Tuple
import numpy as np

from kmedoids_silhouette.arrayadapter import as_adapter
from kmedoids_silhouette.assignment import assign_object, check_medoids
from kmedoids_silhouette.records import loss_ratio

__all__ = [
    "silhouette",
    "medoid_silhouette",
]


def silhouette(mat, assi, samples: bool = False) -> Tuple[float, Optional[np.ndarray]]:
    """
    Mean silhouette width of a labeling.

    For every object, a is the mean distance to the other members of its own
    cluster and b the smallest mean distance to another cluster; its width is
    (b - a) / max(a, b). Members of singleton clusters score 0.

    Args:
        mat: Dissimilarity matrix (ArrayAdapter or array-like of shape (n, n)).
        assi: Cluster label of every object, shape (n,).
        samples: Also return the per-object widths.

    Returns:
        Tuple (mean width, per-object widths or None).
    """
    mat = as_adapter(mat)
    assi = np.asarray(assi, dtype=int)
    n = len(mat)
    if assi.shape != (n,):
        raise ValueError(f"Expected {n} labels, got shape {assi.shape}.")
    n_labels = int(assi.max()) + 1 if n else 0
    counts = np.bincount(assi, minlength=n_labels)

    widths = np.zeros(n, dtype=float)
    for i in range(n):
        sums = np.zeros(n_labels, dtype=float)
        for j in range(n):
            if j != i:
                sums[assi[j]] += float(mat.get(i, j))
        own = assi[i]
        if counts[own] <= 1:
            continue
        a = sums[own] / (counts[own] - 1)
        others = [sums[c] / counts[c] for c in range(n_labels) if c != own and counts[c] > 0]
        if not others:
            continue
        b = min(others)
        if max(a, b) > 0:
            widths[i] = (b - a) / max(a, b)

    score = float(widths.mean()) if n else 0.0
    return score, (widths if samples else None)


def medoid_silhouette(mat, meds: Sequence[int], samples: bool = False) -> Tuple[float, Optional[np.ndarray]]:
    """
    Medoid silhouette: mean over objects of 1 - near / second.

    near and second are the distances to the closest and second closest
    medoid. An object at distance zero from either scores 1. With a single
    medoid the measure is defined as 0.

    Args:
        mat: Dissimilarity matrix (ArrayAdapter or array-like of shape (n, n)).
        meds: Medoid object indices.
        samples: Also return the per-object values.

    Returns:
        Tuple (medoid silhouette, per-object values or None).
    """
    mat = as_adapter(mat)
    check_medoids(mat, meds)
    n = len(mat)
    if len(meds) == 1:
        return 0.0, (np.zeros(n, dtype=float) if samples else None)

    ratios = np.zeros(n, dtype=float)
    total = 0.0
    for j in range(n):
        reco = assign_object(mat, meds, j)
        ratios[j] = loss_ratio(reco.near.d, reco.seco.d)
        total += ratios[j]
    return float(1.0 - total / n), (1.0 - ratios if samples else None)

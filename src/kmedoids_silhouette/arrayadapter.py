"""
Read-only dissimilarity matrix adapters.

The clustering code only needs three things from a matrix: its size, whether it
is square, and the dissimilarity between two objects. Two storages are provided:
    - DenseMatrix: a full (n, n) NumPy array
    - LowerTriangle: the strict lower triangle, row-major, n*(n-1)/2 values

Doxygen-style docstrings are used (with @param / @return tags).
"""

from abc import ABC, abstractmethod
from typing import Sequence
import numpy as np
from scipy.spatial.distance import pdist, squareform

__all__ = [
    "ArrayAdapter",
    "DenseMatrix",
    "LowerTriangle",
    "as_adapter",
]


class ArrayAdapter(ABC):
    """
    Minimal interface of a dissimilarity matrix.

    Subclasses implement __len__, is_square and get.
    """

    @abstractmethod
    def __len__(self) -> int:
        ...

    @abstractmethod
    def is_square(self) -> bool:
        ...

    @abstractmethod
    def get(self, i: int, j: int) -> float:
        ...


class DenseMatrix(ArrayAdapter):
    """
    Dissimilarity matrix backed by a 2D NumPy array.
    """

    def __init__(self, array) -> None:
        """
        @param array: array-like of shape (n, m). Not copied if already an ndarray.
        @raises ValueError: if the input is not two-dimensional.
        """
        array = np.asarray(array)
        if array.ndim != 2:
            raise ValueError("Dissimilarity matrix must be a 2D array.")
        self.array = array

    def __len__(self) -> int:
        return self.array.shape[0]

    def is_square(self) -> bool:
        return self.array.shape[0] == self.array.shape[1]

    def get(self, i: int, j: int) -> float:
        return self.array[i, j]

    @classmethod
    def from_condensed(cls, y) -> "DenseMatrix":
        """
        Build from a SciPy condensed distance vector (as returned by pdist).

        @param y: 1D array of length n*(n-1)/2, upper triangle in row-major order.
        @return: DenseMatrix of shape (n, n).
        """
        return cls(squareform(np.asarray(y), checks=False))

    @classmethod
    def from_points(cls, X, metric: str = "euclidean") -> "DenseMatrix":
        """
        Compute pairwise dissimilarities between the rows of X.

        @param X: 2D array, shape (n_samples, n_features).
        @param metric: any metric name accepted by scipy.spatial.distance.pdist.
        @return: DenseMatrix of shape (n_samples, n_samples).
        """
        X = np.asarray(X, dtype=float)
        if X.ndim != 2:
            raise ValueError("X must be a 2D array (n_samples, n_features).")
        return cls.from_condensed(pdist(X, metric=metric))


class LowerTriangle(ArrayAdapter):
    """
    Symmetric dissimilarity matrix stored as its strict lower triangle.

    Entry (i, j) with i > j lives at data[i*(i-1)/2 + j]; the diagonal is zero.
    """

    def __init__(self, n: int, data: Sequence) -> None:
        """
        @param n: number of objects.
        @param data: n*(n-1)/2 values, rows (1, 0), (2, 0), (2, 1), (3, 0), ...
        @raises ValueError: if data has the wrong length.
        """
        if n < 0:
            raise ValueError("n must be non-negative.")
        if len(data) != n * (n - 1) // 2:
            raise ValueError(f"Expected {n * (n - 1) // 2} values for n={n}, got {len(data)}.")
        self.n = n
        self.data = data

    def __len__(self) -> int:
        return self.n

    def is_square(self) -> bool:
        return True

    def get(self, i: int, j: int):
        if i == j:
            return 0
        if i < j:
            i, j = j, i
        return self.data[(i * (i - 1)) // 2 + j]

    @classmethod
    def from_dense(cls, array) -> "LowerTriangle":
        """
        Compress a square matrix, keeping only entries below the diagonal.

        @param array: square array-like of shape (n, n).
        @return: LowerTriangle with n objects.
        """
        array = np.asarray(array)
        if array.ndim != 2 or array.shape[0] != array.shape[1]:
            raise ValueError("Input must be a square 2D array.")
        rows, cols = np.tril_indices(array.shape[0], k=-1)
        return cls(array.shape[0], array[rows, cols].tolist())

    def to_dense(self) -> np.ndarray:
        """
        @return: full symmetric (n, n) array.
        """
        out = np.zeros((self.n, self.n), dtype=np.asarray(self.data).dtype if len(self.data) else float)
        rows, cols = np.tril_indices(self.n, k=-1)
        out[rows, cols] = self.data
        out[cols, rows] = self.data
        return out


def as_adapter(mat) -> ArrayAdapter:
    """
    Wrap anything array-like into an ArrayAdapter; adapters pass through unchanged.

    @param mat: ArrayAdapter, NumPy array, or nested sequence.
    @return: ArrayAdapter view of mat.
    """
    if isinstance(mat, ArrayAdapter):
        return mat
    return DenseMatrix(mat)

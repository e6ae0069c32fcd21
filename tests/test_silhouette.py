import numpy as np
import pytest

from kmedoids_silhouette.arrayadapter import DenseMatrix, LowerTriangle
from kmedoids_silhouette.silhouette import medoid_silhouette, silhouette


@pytest.fixture
def example():
    return LowerTriangle(5, [1, 2, 3, 4, 5, 6, 7, 8, 9, 1])


def test_silhouette_example(example):
    """
    Singleton clusters score 0, the others follow (b - a) / max(a, b).
    """
    sil, widths = silhouette(example, [0, 0, 2, 1, 1], samples=True)
    assert sil == pytest.approx(0.5622222222222222, abs=1e-12)
    assert widths.shape == (5,)
    assert widths[2] == 0.0
    assert widths[0] == pytest.approx(0.5)
    assert widths[1] == pytest.approx(2 / 3)


def test_silhouette_without_samples(example):
    sil, widths = silhouette(example, [0, 0, 0, 1, 1])
    assert widths is None
    assert sil == pytest.approx(0.7522494172494172, abs=1e-12)


def test_silhouette_matches_naive():
    rng = np.random.default_rng(3)
    X = np.vstack([rng.normal(0.0, 0.4, size=(6, 2)), rng.normal(3.0, 0.4, size=(5, 2))])
    mat = DenseMatrix.from_points(X)
    labels = np.array([0] * 6 + [1] * 5)
    D = mat.array

    expected = []
    for i in range(len(X)):
        own = labels == labels[i]
        own[i] = False
        a = D[i, own].mean()
        b = D[i, labels != labels[i]].mean()
        expected.append((b - a) / max(a, b))

    sil, widths = silhouette(mat, labels, samples=True)
    assert np.allclose(widths, expected)
    assert sil == pytest.approx(np.mean(expected))


def test_silhouette_rejects_wrong_length(example):
    with pytest.raises(ValueError):
        silhouette(example, [0, 1])


def test_medoid_silhouette_example(example):
    msil, values = medoid_silhouette(example, [0, 3, 2], samples=True)
    assert msil == pytest.approx(0.9047619047619048, abs=1e-12)
    assert values.tolist() == pytest.approx([1.0, 2 / 3, 1.0, 1.0, 6 / 7])


def test_medoid_silhouette_single_medoid(example):
    msil, values = medoid_silhouette(example, [0], samples=True)
    assert msil == 0.0
    assert np.all(values == 0.0)


def test_medoid_silhouette_zero_distances():
    D = np.zeros((3, 3))
    msil, values = medoid_silhouette(D, [0, 1], samples=True)
    assert np.all(np.isfinite(values))
    assert msil == 1.0

import matplotlib
matplotlib.use("Agg")

import matplotlib.pyplot as plt
import numpy as np

from kmedoids_silhouette.arrayadapter import DenseMatrix, LowerTriangle
from kmedoids_silhouette.pammedsil import pammedsil
from kmedoids_silhouette.plotting import plot_clusters, plot_dissimilarity


def test_plot_clusters_draws_each_cluster():
    rng = np.random.default_rng(0)
    X = np.vstack([rng.normal(0.0, 0.3, size=(6, 2)), rng.normal(3.0, 0.3, size=(6, 2))])
    loss, labels, medoids, n_iter, n_swap = pammedsil(DenseMatrix.from_points(X), 2)

    fig, ax = plt.subplots()
    plot_clusters(ax, X, labels, medoids)
    # one collection per cluster plus the medoid markers
    assert len(ax.collections) == 3
    plt.close(fig)


def test_plot_dissimilarity_orders_by_cluster():
    mat = LowerTriangle(5, [1, 2, 3, 4, 5, 6, 7, 8, 9, 1])
    labels = np.array([0, 0, 2, 1, 1])

    fig, ax = plt.subplots()
    plot_dissimilarity(ax, mat, labels)
    image = ax.get_images()[0].get_array()
    assert image.shape == (5, 5)
    # objects 3 and 4 (cluster 1) come right after cluster 0
    assert image[2, 3] == 1
    plt.close(fig)

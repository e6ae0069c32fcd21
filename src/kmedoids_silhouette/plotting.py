import matplotlib.pyplot as plt
from matplotlib.axes import Axes
import numpy as np

from kmedoids_silhouette.arrayadapter import ArrayAdapter, LowerTriangle


def plot_clusters(axis: Axes, X: np.ndarray, labels: np.ndarray, medoids=None) -> None:
    """
    Plots the clustered objects over a 2D embedding.

    Args:
        axis (Axes): Axes to draw on.
        X (np.ndarray): Coordinates of shape (n_samples, 2), e.g. from MDS.
        labels (np.ndarray): Medoid slot of every object, shape (n_samples,).
        medoids (list, optional): Medoid object indices, highlighted if given.
    """
    X = np.asarray(X)
    labels = np.asarray(labels)
    for label in np.unique(labels):
        cluster_points = X[labels == label]
        axis.scatter(cluster_points[:, 0], cluster_points[:, 1], label=f'Cluster {label}')
    if medoids is not None:
        axis.scatter(X[medoids, 0], X[medoids, 1], marker='x', s=120, c='black', label='Medoids')

    axis.set_title('PAMMEDSIL Clustering Results')
    axis.set_xlabel('Feature 1')
    axis.set_ylabel('Feature 2')
    axis.legend()
    axis.grid(True)


def plot_dissimilarity(axis: Axes, mat, labels: np.ndarray) -> None:
    """
    Plots the dissimilarity matrix as a heatmap with objects grouped by cluster.

    Args:
        axis (Axes): Axes to draw on.
        mat: Dense array of shape (n_samples, n_samples) or an ArrayAdapter.
        labels (np.ndarray): Medoid slot of every object, shape (n_samples,).
    """
    if isinstance(mat, LowerTriangle):
        D = mat.to_dense()
    elif isinstance(mat, ArrayAdapter):
        D = np.array([[mat.get(i, j) for j in range(len(mat))] for i in range(len(mat))])
    else:
        D = np.asarray(mat)
    order = np.argsort(np.asarray(labels), kind='stable')
    image = axis.imshow(D[np.ix_(order, order)], cmap='viridis')
    plt.colorbar(image, ax=axis)
    axis.set_title('Dissimilarities Ordered by Cluster')
    axis.set_xlabel('Object')
    axis.set_ylabel('Object')


if __name__ == "__main__":
    # Example usage
    from kmedoids_silhouette.arrayadapter import DenseMatrix
    from kmedoids_silhouette.pammedsil import pammedsil
    rng = np.random.RandomState(0)
    A = rng.normal(loc=0.0, scale=0.3, size=(10, 2))
    B = rng.normal(loc=2.0, scale=0.3, size=(8, 2))
    X = np.vstack([A, B])

    D = DenseMatrix.from_points(X)
    loss, labels, medoids, n_iter, n_swap = pammedsil(D, 2)

    fig, (ax1, ax2) = plt.subplots(1, 2, figsize=(12, 5))
    plot_clusters(ax1, X, labels, medoids)
    plot_dissimilarity(ax2, D.array, labels)
    plt.show()

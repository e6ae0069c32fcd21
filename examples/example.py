import numpy as np

from kmedoids_silhouette.arrayadapter import DenseMatrix, LowerTriangle
from kmedoids_silhouette.pammedsil import pammedsil, pammedsil_swap
from kmedoids_silhouette.silhouette import medoid_silhouette, silhouette

if __name__ == "__main__":
    # Example dissimilarities, lower triangle row by row
    D = LowerTriangle(5, [1, 2, 3, 4, 5, 6, 7, 8, 9, 1])

    # BUILD + SWAP
    loss, clusters, medoids, n_iter, n_swap = pammedsil(D, 3, max_iter=10)
    print(f"Medoid silhouette: {loss}, medoids: {medoids}, iterations: {n_iter}, swaps: {n_swap}")
    for obj, cluster in enumerate(clusters):
        print(f"Object: {obj}, Cluster: {cluster}")

    # SWAP only, from given medoids
    medoids = [0, 1]
    loss, clusters, n_iter, n_swap = pammedsil_swap(D, medoids, max_iter=10)
    print(f"Medoid silhouette: {loss}, medoids: {medoids}, iterations: {n_iter}, swaps: {n_swap}")

    # Point cloud
    rng = np.random.RandomState(0)
    X = np.vstack([
        rng.normal(loc=0.0, scale=0.3, size=(10, 2)),
        rng.normal(loc=2.0, scale=0.3, size=(8, 2)),
    ])
    M = DenseMatrix.from_points(X)
    loss, clusters, medoids, n_iter, n_swap = pammedsil(M, 2)
    sil, _ = silhouette(M, clusters)
    msil, _ = medoid_silhouette(M, medoids)
    print(f"Loss: {loss}, medoid silhouette: {msil}, silhouette: {sil}")

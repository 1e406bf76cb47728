from __future__ import annotations

from typing import Callable, Iterable, Mapping, Sequence

import numpy as np
from sklearn.cluster import KMeans
from sklearn.metrics import silhouette_score

from rdq.checks.datatype import ElementaryType, guess_type, is_compatible
from rdq.triples import Triple


OUTLIER_SENSITIVITY = 3.0
MAX_CLUSTERS = 10

OutlierOracle = Callable[[Sequence[float], float, int], Sequence[float]]


def _best_clustering(values: np.ndarray, max_clusters: int) -> tuple[np.ndarray, np.ndarray]:
    data = values.reshape(-1, 1)
    best_labels = np.zeros(len(values), dtype=int)
    best_centroids = np.array([values.mean()])
    best_score = float("-inf")

    upper = min(max_clusters, len(np.unique(values)), len(values) - 1)
    for n_clusters in range(2, upper + 1):
        model = KMeans(n_clusters=n_clusters, n_init=10, random_state=0)
        labels = model.fit_predict(data)
        if len(set(labels.tolist())) < 2:
            continue
        score = float(silhouette_score(data, labels))
        if score > best_score:
            best_score = score
            best_labels = labels
            best_centroids = model.cluster_centers_.ravel()
    return best_labels, best_centroids


def clustering_outlier_test(
    samples: Sequence[float],
    sensitivity: float = OUTLIER_SENSITIVITY,
    max_clusters: int = MAX_CLUSTERS,
) -> list[float]:
    """Return the sample values lying too far from their cluster.

    The sample is clustered with k-means, keeping the cluster count with the
    best silhouette score. The spread is the pooled standard deviation of the
    clusters with at least two members. When those clusters hold repeated
    values only, the standard deviation of their members (or of the whole
    sample) is used instead. A value is an outlier when it lies more than
    ``sensitivity`` times that spread away from its own centroid, or, for a
    singleton cluster, from the nearest multi-member centroid.
    """
    values = np.asarray(list(samples), dtype=float)
    if len(values) < 3 or len(np.unique(values)) < 2:
        return []

    labels, centroids = _best_clustering(values, max_clusters)
    sizes = np.bincount(labels, minlength=len(centroids))
    multi = sizes >= 2
    in_multi = multi[labels]

    deviations = np.abs(values - centroids[labels])
    dof = int(in_multi.sum()) - int(multi.sum())
    sigma = float(np.sqrt((deviations[in_multi] ** 2).sum() / dof)) if dof > 0 else 0.0
    # Repeated values leave every cluster without spread.
    scale = float(np.abs(values).max())
    if sigma <= 1e-9 * scale:
        sigma = float(values[in_multi].std())
    if sigma <= 1e-9 * scale:
        sigma = float(values.std())

    multi_centroids = centroids[multi]
    nearest = np.abs(values[:, None] - multi_centroids[None, :]).min(axis=1)
    distances = np.where(in_multi, deviations, nearest)

    bound = sensitivity * sigma
    return [float(value) for value, distance in zip(values, distances) if distance > bound]


def no_outliers(samples: Sequence[float], sensitivity: float, max_clusters: int) -> list[float]:
    return []


def compute_outlier_table(
    predicate_types: Mapping[str, ElementaryType],
    triples: Iterable[Triple],
    oracle: OutlierOracle = clustering_outlier_test,
    sensitivity: float = OUTLIER_SENSITIVITY,
    max_clusters: int = MAX_CLUSTERS,
) -> dict[str, list[float]]:
    literals = [triple for triple in triples if triple.is_literal]
    table: dict[str, list[float]] = {}
    for predicate, data_type in predicate_types.items():
        if not is_compatible(data_type, ElementaryType.FLOAT):
            continue
        samples = [
            float(triple.object)
            for triple in literals
            if triple.predicate == predicate
            and is_compatible(guess_type(triple.object), ElementaryType.FLOAT)
        ]
        table[predicate] = list(oracle(samples, sensitivity, max_clusters))
    return table

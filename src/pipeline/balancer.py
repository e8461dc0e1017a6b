# -*- coding: utf-8 -*-
"""
Class Balancer for imbalanced binary outcomes
=============================================

Equalizes class counts in a TRAINING subset by synthesizing minority-class
rows. Two methods are available:

1. 'mwmote' (default): Majority Weighted Minority Oversampling TEchnique
   (Barua et al., IEEE TKDE 2014). Minority rows close to the class boundary
   are sampled more often, weighted by how close and how sparse they are
   relative to the nearby majority rows; each synthetic row interpolates
   toward a member of the same minority cluster.
2. 'smote': imblearn's SMOTE, which samples minority rows uniformly and
   interpolates toward one of their k nearest minority neighbours.

In both cases exactly (c_majority - c_minority) rows are generated, so the
returned class counts are equal. Only the training subset should ever be
passed in; the test subset must stay untouched.
"""

import numpy as np
import pandas as pd
from typing import Optional, Tuple

from sklearn.cluster import AgglomerativeClustering
from sklearn.metrics import pairwise_distances
from sklearn.neighbors import NearestNeighbors
from imblearn.over_sampling import SMOTE


class ClassBalancer:
    """
    Oversample the minority class of a binary outcome until counts are equal.

    Attributes
    ----------
    method : str
        'mwmote' or 'smote'.
    random_state : int
        Seed for every random draw.
    k1, k2, k3 : int
        MWMOTE neighbourhood sizes: noise filter, borderline majority set,
        informative minority set (k3=None uses half the minority count).
    cp : float
        MWMOTE clustering factor; cluster threshold = cp * mean NN distance.
    cf_th, cmax : float
        MWMOTE closeness cut-off and closeness-factor scale.
    k_neighbors : int
        SMOTE neighbourhood size.
    n_synthetic_ : int
        Number of rows generated by the last fit_resample() call.

    Example Usage
    -------------
    >>> balancer = ClassBalancer(method='mwmote', random_state=1103)
    >>> X_bal, y_bal = balancer.fit_resample(train[features], train['diagnosis'])
    """

    METHODS = ('mwmote', 'smote')

    def __init__(self, method: str = 'mwmote', random_state: Optional[int] = 42,
                 k1: int = 5, k2: int = 3, k3: Optional[int] = None,
                 cp: float = 3.0, cf_th: float = 5.0, cmax: float = 2.0,
                 k_neighbors: int = 5):
        if method not in self.METHODS:
            raise ValueError(f"Unknown balancing method '{method}', expected one of {self.METHODS}")
        self.method = method
        self.random_state = random_state
        self.k1 = k1
        self.k2 = k2
        self.k3 = k3
        self.cp = cp
        self.cf_th = cf_th
        self.cmax = cmax
        self.k_neighbors = k_neighbors
        self.n_synthetic_ = 0


    def fit_resample(self, X: pd.DataFrame, y: pd.Series) -> Tuple[pd.DataFrame, pd.Series]:
        """
        Append synthetic minority rows to a training subset.

        Parameters
        ----------
        X : DataFrame
            Numeric feature columns of the training rows
        y : Series
            Binary class labels aligned with X

        Returns
        -------
        tuple of (DataFrame, Series)
            Original rows first (original labels), then synthetic rows
            labelled max(original label) + 1, + 2, ...
        """
        X = pd.DataFrame(X)
        y = pd.Series(y, index=X.index)
        counts = y.value_counts()
        if len(counts) != 2:
            raise ValueError(f"Class balancing needs exactly two classes, found {len(counts)}")

        minority = counts.idxmin()
        majority = counts.idxmax()
        n_needed = int(counts[majority] - counts[minority])
        print(f"  Class counts before balancing: {counts.sort_index().to_dict()}")

        if n_needed == 0:
            self.n_synthetic_ = 0
            return X.copy(), y.copy()
        if counts[minority] < 2:
            raise ValueError("At least two minority rows are needed to synthesize new ones")

        X_min = X[y == minority].to_numpy(dtype=float)
        X_maj = X[y == majority].to_numpy(dtype=float)

        if self.method == 'mwmote':
            synthetic = self._mwmote(X_min, X_maj, n_needed)
        else:
            synthetic = self._smote(X, y, n_needed)

        X_syn = pd.DataFrame(synthetic, columns=X.columns)
        integer_labels = pd.api.types.is_integer_dtype(X.index)
        if integer_labels:
            start = int(X.index.max()) + 1
            X_syn.index = pd.RangeIndex(start, start + n_needed)
        y_syn = pd.Series(minority, index=X_syn.index, name=y.name)

        X_res = pd.concat([X, X_syn], ignore_index=not integer_labels)
        y_res = pd.concat([y, y_syn], ignore_index=not integer_labels)

        self.n_synthetic_ = n_needed
        print(f"  [OK] {self.method.upper()}: generated {n_needed:,} synthetic rows of class {minority}")
        print(f"  Class counts after balancing: {y_res.value_counts().sort_index().to_dict()}")
        return X_res, y_res


    def _smote(self, X: pd.DataFrame, y: pd.Series, n_needed: int) -> np.ndarray:
        """Synthetic rows from imblearn SMOTE (imblearn appends them after the originals)."""
        k = min(self.k_neighbors, int(y.value_counts().min()) - 1)
        smote = SMOTE(random_state=self.random_state, k_neighbors=k)
        X_res, _ = smote.fit_resample(X.to_numpy(dtype=float), y.to_numpy())
        return X_res[len(X):len(X) + n_needed]


    def _mwmote(self, X_min: np.ndarray, X_maj: np.ndarray, n_needed: int) -> np.ndarray:
        """
        Generate `n_needed` synthetic minority rows with MWMOTE.

        Steps
        -----
        1. Noise filter: drop minority rows whose k1 nearest neighbours
           (both classes) are all majority rows.
        2. Borderline majority set: the k2 nearest majority rows of each
           remaining minority row.
        3. Informative minority set: the k3 nearest minority rows of each
           borderline majority row.
        4. Selection weights: for every borderline majority row y and
           informative minority row x in its neighbourhood, the information
           weight is closeness(y, x) * density(y, x); a minority row's
           weight is the sum over y.
        5. Average-linkage clustering of all minority rows with distance
           threshold cp * (mean nearest-neighbour distance of the filtered
           minority rows).
        6. Each synthetic row: x drawn by weight, partner drawn from x's
           cluster, s = x + alpha * (partner - x), alpha ~ U(0, 1).
        """
        rng = np.random.default_rng(self.random_state)
        n_min, n_features = X_min.shape
        k3 = self.k3 if self.k3 is not None else max(1, n_min // 2)

        # Step 1: noise filter
        X_all = np.vstack([X_min, X_maj])
        is_min = np.r_[np.ones(n_min, dtype=bool), np.zeros(len(X_maj), dtype=bool)]
        k1 = min(self.k1, len(X_all) - 1)
        nn_all = NearestNeighbors(n_neighbors=k1 + 1).fit(X_all)
        neigh = nn_all.kneighbors(X_min, return_distance=False)[:, 1:]
        keep = is_min[neigh].any(axis=1)
        X_filtered = X_min[keep] if keep.any() else X_min

        # Step 2: borderline majority rows
        nn_maj = NearestNeighbors(n_neighbors=min(self.k2, len(X_maj))).fit(X_maj)
        border_idx = np.unique(nn_maj.kneighbors(X_filtered, return_distance=False))
        X_border = X_maj[border_idx]

        # Step 3: informative minority rows
        nn_min = NearestNeighbors(n_neighbors=min(k3, n_min)).fit(X_min)
        border_neigh = nn_min.kneighbors(X_border, return_distance=False)
        info_idx = np.unique(border_neigh)

        # Step 4: selection weights
        dist = pairwise_distances(X_border, X_min[info_idx]) / n_features
        closeness = np.full_like(dist, self.cf_th)
        np.divide(1.0, dist, out=closeness, where=dist > 0)
        closeness = np.minimum(closeness, self.cf_th) / self.cf_th * self.cmax

        in_neighbourhood = np.zeros_like(dist, dtype=bool)
        rows = np.repeat(np.arange(len(X_border)), border_neigh.shape[1])
        cols = np.searchsorted(info_idx, border_neigh.ravel())
        in_neighbourhood[rows, cols] = True
        closeness = np.where(in_neighbourhood, closeness, 0.0)

        density = closeness / closeness.sum(axis=1, keepdims=True)
        weights = (closeness * density).sum(axis=0)
        if weights.sum() <= 0:
            weights = np.ones(len(info_idx))
        probabilities = weights / weights.sum()

        # Step 5: cluster the minority rows
        labels = np.zeros(n_min, dtype=int)
        if len(X_filtered) >= 2:
            nn_f = NearestNeighbors(n_neighbors=2).fit(X_filtered)
            d_avg = nn_f.kneighbors(X_filtered)[0][:, 1].mean()
            threshold = d_avg * self.cp
            if threshold > 0:
                clustering = AgglomerativeClustering(
                    n_clusters=None, distance_threshold=threshold, linkage='average'
                )
                labels = clustering.fit_predict(X_min)

        # Step 6: interpolate within clusters
        chosen = rng.choice(info_idx, size=n_needed, p=probabilities)
        synthetic = np.empty((n_needed, n_features))
        for i, idx in enumerate(chosen):
            members = np.flatnonzero(labels == labels[idx])
            partner = X_min[rng.choice(members)]
            synthetic[i] = X_min[idx] + rng.random() * (partner - X_min[idx])
        return synthetic

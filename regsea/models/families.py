"""
Model families for the elastic-net pathway selector.

Classes:
    LinearElasticNet: Gaussian family, identity link, coordinate descent
    LogisticElasticNet: Binomial family, logit link, warm-started SAGA

Functions:
    build_model: Map a Family to its model class
"""

import logging
from typing import Tuple, Union

import numpy as np
import sklearn
from scipy.special import expit
from sklearn.linear_model import LogisticRegression, enet_path
from sklearn.model_selection import KFold, StratifiedKFold

from ..config import Family
from .base import BaseElasticNetPath

logger = logging.getLogger(__name__)

_SKLEARN_VERSION = tuple(int(p) for p in sklearn.__version__.split('.')[:2]
                         if p.isdigit())


class LinearElasticNet(BaseElasticNetPath):
    """
    Elastic-net linear regression of the GOI indicator on gene set membership.

    Fits are deterministic for a fixed seed: the seed only drives the
    shuffled fold assignment and coordinate descent is deterministic.

    Example:
        >>> model = LinearElasticNet(alpha=0.5, n_folds=10, seed=1)
        >>> model.fit(omega, response)
        >>> model.selected_features()
    """

    family = Family.GAUSSIAN

    def _make_splitter(self):
        return KFold(n_splits=self.n_folds, shuffle=True, random_state=self.seed)

    def _inverse_link(self, eta: np.ndarray) -> np.ndarray:
        return eta

    def _fit_path(self, X: np.ndarray, y: np.ndarray,
                  lambdas: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        y_mean = y.mean()
        _, coefs, _ = enet_path(
            X, y - y_mean,
            l1_ratio=self.alpha,
            alphas=lambdas,
            max_iter=self.max_iter,
            tol=self.tol
        )
        return coefs, np.full(len(lambdas), y_mean)


class LogisticElasticNet(BaseElasticNetPath):
    """
    Elastic-net logistic regression of the GOI indicator.

    Each lambda maps to sklearn's inverse regularization strength as
    ``C = 1 / (n_samples * lambda)``. The path is fitted from the largest
    lambda down, warm-starting each fit from the previous solution.
    SAGA is stochastic, so selections can differ between seeds.

    Example:
        >>> model = LogisticElasticNet(alpha=0.5, metric='deviance', seed=7)
        >>> model.fit(omega, response)
        >>> probabilities = model.predict(omega)
    """

    family = Family.BINOMIAL

    def _make_splitter(self):
        return StratifiedKFold(n_splits=self.n_folds, shuffle=True,
                               random_state=self.seed)

    def _inverse_link(self, eta: np.ndarray) -> np.ndarray:
        return expit(eta)

    def _build_solver(self) -> LogisticRegression:
        params = {
            'l1_ratio': self.alpha,
            'solver': 'saga',
            'max_iter': self.max_iter,
            'tol': self.tol,
            'warm_start': True,
            'random_state': self.seed,
        }
        # penalty is implied by l1_ratio from scikit-learn 1.8 onwards
        if _SKLEARN_VERSION < (1, 8):
            params['penalty'] = 'elasticnet'
        return LogisticRegression(**params)

    def _fit_path(self, X: np.ndarray, y: np.ndarray,
                  lambdas: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        n_samples = X.shape[0]
        solver = self._build_solver()
        coefs = np.zeros((X.shape[1], len(lambdas)))
        intercepts = np.zeros(len(lambdas))

        for k, lam in enumerate(lambdas):
            solver.set_params(C=1.0 / (n_samples * lam))
            solver.fit(X, y.astype(int))
            coefs[:, k] = solver.coef_[0]
            intercepts[k] = solver.intercept_[0]

        return coefs, intercepts


MODEL_FAMILIES = {
    Family.GAUSSIAN: LinearElasticNet,
    Family.BINOMIAL: LogisticElasticNet,
}


def build_model(family: Union[str, Family], **params) -> BaseElasticNetPath:
    """
    Build the model strategy for a family.

    Args:
        family: Family member or its string value
        **params: Keyword arguments for the model constructor

    Returns:
        Unfitted LinearElasticNet or LogisticElasticNet
    """
    family = Family.parse(family)
    return MODEL_FAMILIES[family](**params)

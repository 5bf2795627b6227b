"""
Base class for cross-validated elastic-net regularization paths.

The base class owns everything the two model families share: the lambda
grid, standardization, cross-validation over the path and the choice of
lambda. Subclasses provide the path solver, the inverse link and the
family-specific loss.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Tuple, Union

import numpy as np
import pandas as pd
from sklearn.base import BaseEstimator
from sklearn.metrics import (
    accuracy_score,
    log_loss,
    mean_absolute_error,
    mean_squared_error,
    roc_auc_score,
)

from ..config import ALLOWED_METRICS, DEFAULT_METRICS, Family, Metric

logger = logging.getLogger(__name__)

# glmnet floors alpha when computing lambda_max so ridge fits still get a grid
MIN_ALPHA_FOR_GRID = 1e-3


class BaseElasticNetPath(BaseEstimator, ABC):
    """
    Cross-validated elastic-net regularization path.

    Parameters
    ----------
    alpha : float, default=0.5
        Elastic-net mixing parameter (1 = lasso, 0 = ridge).
    n_folds : int, default=10
        Number of cross-validation folds.
    metric : str or Metric, optional
        Cross-validation measure used to choose lambda. Defaults to the
        family default.
    seed : int, default=42
        Seed for fold assignment and the solver.
    n_lambdas : int, default=100
        Number of lambda values on the path.
    lambda_min_ratio : float, default=1e-3
        Smallest lambda as a fraction of lambda_max.
    max_iter : int, default=10000
        Maximum solver iterations per lambda.
    tol : float, default=1e-4
        Solver tolerance.
    standardize : bool, default=True
        Whether to scale predictors to unit variance before fitting.
        Coefficients are always reported on the original scale.

    Attributes
    ----------
    lambdas_ : ndarray
        Regularization strengths, in decreasing order.
    coef_path_ : pd.DataFrame
        Coefficients (features x lambdas) on the original scale.
    intercept_path_ : ndarray
        Intercept at each lambda.
    cv_mean_ : ndarray
        Mean cross-validated metric at each lambda.
    cv_se_ : ndarray
        Standard error of the cross-validated metric at each lambda.
    lambda_min_ : float
        Lambda with the best mean cross-validated metric.
    lambda_1se_ : float
        Largest lambda within one standard error of the best.
    """

    family: Family = None

    def __init__(
        self,
        alpha: float = 0.5,
        n_folds: int = 10,
        metric: Optional[Union[str, Metric]] = None,
        seed: int = 42,
        n_lambdas: int = 100,
        lambda_min_ratio: float = 1e-3,
        max_iter: int = 10000,
        tol: float = 1e-4,
        standardize: bool = True
    ):
        self.alpha = alpha
        self.n_folds = n_folds
        self.metric = metric
        self.seed = seed
        self.n_lambdas = n_lambdas
        self.lambda_min_ratio = lambda_min_ratio
        self.max_iter = max_iter
        self.tol = tol
        self.standardize = standardize

    # Family-specific pieces

    @abstractmethod
    def _fit_path(self, X: np.ndarray, y: np.ndarray,
                  lambdas: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        """Fit the path on standardized, centered X.

        Returns coefficients (n_features x n_lambdas) and intercepts
        (n_lambdas) in the standardized space.
        """

    @abstractmethod
    def _make_splitter(self):
        """Return the sklearn cross-validation splitter."""

    @abstractmethod
    def _inverse_link(self, eta: np.ndarray) -> np.ndarray:
        """Map the linear predictor to the response scale."""

    # Shared machinery

    def _resolve_metric(self) -> Metric:
        metric = DEFAULT_METRICS[self.family] if self.metric is None \
            else Metric.parse(self.metric)
        if metric not in ALLOWED_METRICS[self.family]:
            raise ValueError(
                f"Metric '{metric.value}' is not available for the "
                f"{self.family.value} family"
            )
        return metric

    def _lambda_grid(self, X: np.ndarray, y: np.ndarray) -> np.ndarray:
        """Log-spaced grid from lambda_max down to lambda_max * ratio."""
        Xs, _, _ = self._standardize(X)
        n_samples = X.shape[0]
        alpha = max(self.alpha, MIN_ALPHA_FOR_GRID)
        lambda_max = np.max(np.abs(Xs.T @ (y - y.mean()))) / (n_samples * alpha)

        if lambda_max <= np.finfo(float).resolution:
            raise ValueError(
                "Response is uncorrelated with every predictor; "
                "the regularization path is empty"
            )

        return np.logspace(np.log10(lambda_max),
                           np.log10(lambda_max * self.lambda_min_ratio),
                           num=self.n_lambdas)

    def _standardize(self, X: np.ndarray) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        means = X.mean(axis=0)
        if self.standardize:
            scales = X.std(axis=0)
            scales[scales == 0] = 1.0
        else:
            scales = np.ones(X.shape[1])
        return (X - means) / scales, means, scales

    def _fit_original_scale(self, X: np.ndarray, y: np.ndarray,
                            lambdas: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        """Fit the path and return coefficients on the scale of X."""
        Xs, means, scales = self._standardize(X)
        coefs_std, intercepts_std = self._fit_path(Xs, y, lambdas)

        coefs = coefs_std / scales[:, np.newaxis]
        intercepts = intercepts_std - means @ coefs
        return coefs, intercepts

    def _score(self, y_true: np.ndarray, eta: np.ndarray, metric: Metric) -> float:
        """Cross-validation loss of one fold at one lambda."""
        mu = self._inverse_link(eta)

        if metric is Metric.MSE:
            return mean_squared_error(y_true, mu)
        if metric is Metric.MAE:
            return mean_absolute_error(y_true, mu)
        if metric is Metric.DEVIANCE:
            if self.family is Family.GAUSSIAN:
                return mean_squared_error(y_true, mu)
            return 2.0 * log_loss(y_true, np.clip(mu, 1e-15, 1 - 1e-15),
                                  labels=[0, 1])
        if metric is Metric.CLASS:
            return 1.0 - accuracy_score(y_true, (mu > 0.5).astype(int))
        if metric is Metric.AUC:
            if len(np.unique(y_true)) < 2:
                return np.nan
            return roc_auc_score(y_true, mu)
        raise ValueError(f"Unsupported metric: {metric}")

    def fit(self, X: Union[pd.DataFrame, np.ndarray],
            y: Union[pd.Series, np.ndarray]) -> 'BaseElasticNetPath':
        """
        Fit the cross-validated regularization path.

        Parameters
        ----------
        X : pd.DataFrame or ndarray
            Membership matrix (genes x gene sets).
        y : pd.Series or ndarray
            0/1 indicator of the genes of interest.

        Returns
        -------
        self
        """
        if isinstance(X, pd.DataFrame):
            self.feature_names_ = [str(c) for c in X.columns]
            X_values = X.to_numpy(dtype=float)
        else:
            X_values = np.asarray(X, dtype=float)
            self.feature_names_ = [f"feature_{i}" for i in range(X_values.shape[1])]
        y = np.asarray(y, dtype=float).ravel()

        if X_values.shape[0] != y.shape[0]:
            raise ValueError(
                f"X has {X_values.shape[0]} rows but y has {y.shape[0]} entries"
            )
        if len(np.unique(y)) < 2:
            raise ValueError("Response must contain both 0 and 1 entries")
        if self.family is Family.BINOMIAL:
            n_minority = int(min(np.sum(y == 1), np.sum(y == 0)))
            if n_minority < self.n_folds:
                raise ValueError(
                    f"The binomial family needs at least n_folds={self.n_folds} "
                    f"genes in each class, got {n_minority} in the smaller class"
                )

        self.metric_ = self._resolve_metric()
        lambdas = self._lambda_grid(X_values, y)

        logger.info(
            "Fitting %s elastic net (alpha=%.2f) on %d genes x %d gene sets, "
            "%d lambdas, %d folds",
            self.family.value, self.alpha, X_values.shape[0], X_values.shape[1],
            len(lambdas), self.n_folds
        )

        splitter = self._make_splitter()
        fold_scores = np.full((self.n_folds, len(lambdas)), np.nan)

        for k, (train_idx, test_idx) in enumerate(splitter.split(X_values, y)):
            coefs, intercepts = self._fit_original_scale(
                X_values[train_idx], y[train_idx], lambdas
            )
            eta = X_values[test_idx] @ coefs + intercepts
            for j in range(len(lambdas)):
                fold_scores[k, j] = self._score(y[test_idx], eta[:, j], self.metric_)
            logger.debug("Fold %d/%d done", k + 1, self.n_folds)

        n_valid = np.sum(~np.isnan(fold_scores), axis=0)
        self.cv_mean_ = np.nanmean(fold_scores, axis=0)
        self.cv_se_ = np.nanstd(fold_scores, axis=0, ddof=1) / np.sqrt(np.maximum(n_valid, 1))
        self.fold_scores_ = fold_scores

        coefs, intercepts = self._fit_original_scale(X_values, y, lambdas)
        self.lambdas_ = lambdas
        self.coef_path_ = pd.DataFrame(coefs, index=self.feature_names_,
                                       columns=lambdas)
        self.intercept_path_ = intercepts

        self.lambda_min_, self.lambda_1se_ = self._choose_lambdas()

        logger.info(
            "Cross-validation complete: lambda_min=%.6g (%s=%.4f), "
            "lambda_1se=%.6g, %d gene sets selected at lambda_min",
            self.lambda_min_, self.metric_.value,
            self.cv_mean_[self._lambda_index('min')], self.lambda_1se_,
            len(self.selected_features('min'))
        )
        return self

    def _choose_lambdas(self) -> Tuple[float, float]:
        if self.metric_.greater_is_better:
            best = int(np.nanargmax(self.cv_mean_))
        else:
            best = int(np.nanargmin(self.cv_mean_))

        # a single valid fold has no standard error
        se = float(np.nan_to_num(self.cv_se_[best]))
        if self.metric_.greater_is_better:
            bound = self.cv_mean_[best] - se
            within = self.cv_mean_ >= bound
        else:
            bound = self.cv_mean_[best] + se
            within = self.cv_mean_ <= bound

        # lambdas are decreasing, so the first index within bound is the largest
        one_se = int(np.argmax(within))
        return float(self.lambdas_[best]), float(self.lambdas_[one_se])

    def _check_is_fitted(self) -> None:
        if not hasattr(self, 'coef_path_'):
            raise ValueError("Model not fitted. Call fit() first.")

    def _lambda_index(self, which: Union[str, float] = 'min') -> int:
        self._check_is_fitted()
        if which == 'min':
            target = self.lambda_min_
        elif which == '1se':
            target = self.lambda_1se_
        elif isinstance(which, (int, float)):
            target = float(which)
        else:
            raise ValueError(f"which must be 'min', '1se' or a lambda value, got {which}")
        return int(np.argmin(np.abs(self.lambdas_ - target)))

    def coef(self, which: Union[str, float] = 'min') -> pd.Series:
        """Coefficients at the chosen lambda, indexed by feature name."""
        idx = self._lambda_index(which)
        return self.coef_path_.iloc[:, idx].rename('coefficient')

    def intercept(self, which: Union[str, float] = 'min') -> float:
        return float(self.intercept_path_[self._lambda_index(which)])

    def decision_function(self, X: Union[pd.DataFrame, np.ndarray],
                          which: Union[str, float] = 'min') -> np.ndarray:
        """Linear predictor at the chosen lambda."""
        idx = self._lambda_index(which)
        if isinstance(X, pd.DataFrame):
            X = X[self.feature_names_].to_numpy(dtype=float)
        X = np.asarray(X, dtype=float)
        return X @ self.coef_path_.iloc[:, idx].to_numpy() + self.intercept_path_[idx]

    def predict(self, X: Union[pd.DataFrame, np.ndarray],
                which: Union[str, float] = 'min') -> np.ndarray:
        """Prediction on the response scale at the chosen lambda."""
        return self._inverse_link(self.decision_function(X, which))

    def selected_features(self, which: Union[str, float] = 'min',
                          min_coef: float = 0.0) -> List[str]:
        """Names of features whose absolute coefficient exceeds min_coef."""
        coefficients = self.coef(which)
        return coefficients[np.abs(coefficients) > min_coef].index.tolist()

    def cv_results(self) -> pd.DataFrame:
        """Cross-validation curve with the number of non-zero coefficients."""
        self._check_is_fitted()
        return pd.DataFrame({
            'lambda': self.lambdas_,
            'cv_mean': self.cv_mean_,
            'cv_se': self.cv_se_,
            'n_nonzero': (self.coef_path_.to_numpy() != 0).sum(axis=0),
        })

    def summary(self) -> Dict[str, Any]:
        """Key quantities of the fitted model."""
        self._check_is_fitted()
        return {
            'family': self.family.value,
            'alpha': self.alpha,
            'metric': self.metric_.value,
            'n_lambdas': len(self.lambdas_),
            'lambda_min': self.lambda_min_,
            'lambda_1se': self.lambda_1se_,
            'cv_min': float(self.cv_mean_[self._lambda_index('min')]),
            'n_selected_min': len(self.selected_features('min')),
            'n_selected_1se': len(self.selected_features('1se')),
        }

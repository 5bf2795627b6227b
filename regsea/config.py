"""
Configuration for regularized-regression gene set enrichment.

Classes:
    Family: Link function of the elastic-net model (gaussian or binomial)
    Metric: Cross-validation performance measure used to choose lambda
    SelectionConfig: Settings for the regularized-regression selector
    BaselineConfig: Settings for the Fisher's exact test baseline
"""

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Dict, Optional, Union


class Family(Enum):
    """Model family. GAUSSIAN uses the identity link, BINOMIAL the logit."""

    GAUSSIAN = "gaussian"
    BINOMIAL = "binomial"

    @classmethod
    def parse(cls, value: Union[str, 'Family']) -> 'Family':
        """Convert a string such as ``"gaussian"`` to a Family member."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(
                f"Unknown family: {value}. "
                f"Choose from {[f.value for f in cls]}"
            ) from None


class Metric(Enum):
    """Cross-validation measure for choosing the regularization strength."""

    MSE = "mse"
    MAE = "mae"
    DEVIANCE = "deviance"
    CLASS = "class"
    AUC = "auc"

    @classmethod
    def parse(cls, value: Union[str, 'Metric']) -> 'Metric':
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(
                f"Unknown metric: {value}. "
                f"Choose from {[m.value for m in cls]}"
            ) from None

    @property
    def greater_is_better(self) -> bool:
        return self is Metric.AUC


ALLOWED_METRICS = {
    Family.GAUSSIAN: (Metric.MSE, Metric.MAE, Metric.DEVIANCE),
    Family.BINOMIAL: (Metric.DEVIANCE, Metric.CLASS, Metric.AUC, Metric.MSE),
}

DEFAULT_METRICS = {
    Family.GAUSSIAN: Metric.MSE,
    Family.BINOMIAL: Metric.DEVIANCE,
}

LAMBDA_RULES = ('min', '1se')


@dataclass
class SelectionConfig:
    """
    Configuration for the regularized-regression pathway selector.

    Attributes:
        family: Model family, 'gaussian' (linear) or 'binomial' (logistic)
        alpha: Elastic-net mixing parameter in [0, 1] (1 = lasso, 0 = ridge)
        n_folds: Number of cross-validation folds
        metric: Performance measure for choosing lambda. None selects the
            family default ('mse' for gaussian, 'deviance' for binomial)
        seed: Random seed for fold assignment and the solver
        n_lambdas: Number of lambda values on the regularization path
        lambda_min_ratio: Smallest lambda as a fraction of lambda_max
        lambda_rule: 'min' for the lambda with best CV performance,
            '1se' for the largest lambda within one standard error of it
        max_iter: Maximum solver iterations per lambda
        tol: Solver convergence tolerance
        standardize: Whether to standardize membership columns before fitting
        min_set_size: Minimum gene set size to include as a predictor
        max_set_size: Maximum gene set size to include (None for no limit)

    Example:
        >>> config = SelectionConfig(family='gaussian', alpha=0.5, seed=1)
        >>> config.metric
        <Metric.MSE: 'mse'>
    """
    family: Union[str, Family] = Family.GAUSSIAN
    alpha: float = 0.5
    n_folds: int = 10
    metric: Optional[Union[str, Metric]] = None
    seed: int = 42
    n_lambdas: int = 100
    lambda_min_ratio: float = 1e-3
    lambda_rule: str = 'min'
    max_iter: int = 10000
    tol: float = 1e-4
    standardize: bool = True
    min_set_size: int = 5
    max_set_size: Optional[int] = 500

    def __post_init__(self):
        self.family = Family.parse(self.family)

        if self.metric is None:
            self.metric = DEFAULT_METRICS[self.family]
        else:
            self.metric = Metric.parse(self.metric)
        if self.metric not in ALLOWED_METRICS[self.family]:
            raise ValueError(
                f"Metric '{self.metric.value}' is not available for the "
                f"{self.family.value} family. Choose from "
                f"{[m.value for m in ALLOWED_METRICS[self.family]]}"
            )

        if not 0.0 <= self.alpha <= 1.0:
            raise ValueError(f"alpha must be in [0, 1], got {self.alpha}")
        if self.n_folds < 3:
            raise ValueError(f"n_folds must be at least 3, got {self.n_folds}")
        if self.n_lambdas < 2:
            raise ValueError(f"n_lambdas must be at least 2, got {self.n_lambdas}")
        if not 0.0 < self.lambda_min_ratio < 1.0:
            raise ValueError(
                f"lambda_min_ratio must be in (0, 1), got {self.lambda_min_ratio}"
            )
        if self.lambda_rule not in LAMBDA_RULES:
            raise ValueError(
                f"Unknown lambda rule: {self.lambda_rule}. Choose from {LAMBDA_RULES}"
            )
        _validate_size_range(self.min_set_size, self.max_set_size)

    def to_dict(self) -> Dict[str, Any]:
        """Return a plain dictionary with enum members converted to strings."""
        params = asdict(self)
        params['family'] = self.family.value
        params['metric'] = self.metric.value
        return params


@dataclass
class BaselineConfig:
    """
    Configuration for the Fisher's exact test baseline.

    Attributes:
        correction_method: statsmodels multipletests method (default 'fdr_bh')
        alternative: Alternative hypothesis for the exact test
        qvalue_cutoff: Adjusted p-value threshold for calling a set significant
        min_set_size: Minimum gene set size to test
        max_set_size: Maximum gene set size to test (None for no limit)
    """
    correction_method: str = 'fdr_bh'
    alternative: str = 'greater'
    qvalue_cutoff: float = 0.05
    min_set_size: int = 5
    max_set_size: Optional[int] = 500

    def __post_init__(self):
        if self.alternative not in ('greater', 'less', 'two-sided'):
            raise ValueError(f"Unknown alternative: {self.alternative}")
        if not 0.0 < self.qvalue_cutoff <= 1.0:
            raise ValueError(
                f"qvalue_cutoff must be in (0, 1], got {self.qvalue_cutoff}"
            )
        _validate_size_range(self.min_set_size, self.max_set_size)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _validate_size_range(min_size: int, max_size: Optional[int]) -> None:
    if min_size < 1:
        raise ValueError(f"min_set_size must be positive, got {min_size}")
    if max_size is not None and max_size < min_size:
        raise ValueError(
            f"max_set_size ({max_size}) is smaller than min_set_size ({min_size})"
        )

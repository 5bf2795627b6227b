"""
Elastic-net models for gene set selection.

Key Components:
    - BaseElasticNetPath: Shared cross-validated path fitting
    - LinearElasticNet: Gaussian family (identity link)
    - LogisticElasticNet: Binomial family (logit link)
    - PathwaySelector: Builds the design and selects gene sets
"""

from .base import BaseElasticNetPath
from .families import LinearElasticNet, LogisticElasticNet, build_model
from .selector import PathwaySelector, SelectionResult, select_pathways

__all__ = [
    'BaseElasticNetPath',
    'LinearElasticNet',
    'LogisticElasticNet',
    'build_model',
    'PathwaySelector',
    'SelectionResult',
    'select_pathways'
]

"""
Visualization module for regularized-regression enrichment results.
"""

from .plots import (
    plot_cv_curve,
    plot_coefficient_path,
    plot_leading_edge,
    plot_method_comparison
)

__all__ = [
    'plot_cv_curve',
    'plot_coefficient_path',
    'plot_leading_edge',
    'plot_method_comparison'
]

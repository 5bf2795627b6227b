"""
Leading-edge extraction and comparison with the Fisher baseline.
"""

from .leading_edge import (
    LeadingEdgeResult,
    extract_leading_edge,
    pathway_leading_edge,
    score_ranking_auc
)
from .comparison import MethodComparison, compare_methods, generate_report

__all__ = [
    'LeadingEdgeResult',
    'extract_leading_edge',
    'pathway_leading_edge',
    'score_ranking_auc',
    'MethodComparison',
    'compare_methods',
    'generate_report'
]

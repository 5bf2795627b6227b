"""
Regularized-Regression Gene Set Enrichment Analysis

A Python package for gene set enrichment analysis with elastic-net
regression (linear and logistic links), compared against a Fisher's exact
test + Benjamini-Hochberg baseline.
"""

__version__ = "0.1.0"
__author__ = "regsea developers"

from .config import Family, Metric, SelectionConfig, BaselineConfig
from .data.gene_sets import (
    GeneSetCollection,
    load_example_gene_sets,
    load_example_gene_list
)
from .data.design import build_design, build_membership_matrix, build_response
from .data.cache import build_verification_dataset, load_verification_dataset
from .models.families import LinearElasticNet, LogisticElasticNet, build_model
from .models.selector import PathwaySelector, SelectionResult, select_pathways
from .enrichment.fisher import (
    FisherBaseline,
    adjust_pvalues,
    fisher_exact_test,
    run_fisher_baseline
)
from .evaluation.leading_edge import extract_leading_edge, pathway_leading_edge
from .evaluation.comparison import compare_methods, generate_report

__all__ = [
    'Family',
    'Metric',
    'SelectionConfig',
    'BaselineConfig',
    'GeneSetCollection',
    'load_example_gene_sets',
    'load_example_gene_list',
    'build_design',
    'build_membership_matrix',
    'build_response',
    'build_verification_dataset',
    'load_verification_dataset',
    'LinearElasticNet',
    'LogisticElasticNet',
    'build_model',
    'PathwaySelector',
    'SelectionResult',
    'select_pathways',
    'FisherBaseline',
    'adjust_pvalues',
    'fisher_exact_test',
    'run_fisher_baseline',
    'extract_leading_edge',
    'pathway_leading_edge',
    'compare_methods',
    'generate_report'
]

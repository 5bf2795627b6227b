"""
Fisher's exact test baseline with multiple testing correction.
"""

from .fisher import (
    FisherBaseline,
    fisher_exact_test,
    hypergeometric_test,
    adjust_pvalues,
    to_pvalue_mapping,
    significant_gene_sets,
    run_fisher_baseline
)

__all__ = [
    'FisherBaseline',
    'fisher_exact_test',
    'hypergeometric_test',
    'adjust_pvalues',
    'to_pvalue_mapping',
    'significant_gene_sets',
    'run_fisher_baseline'
]

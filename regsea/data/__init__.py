"""
Gene set data, design construction and the cached verification dataset.
"""

from .gene_sets import (
    GeneSetCollection,
    load_example_gene_sets,
    load_example_gene_list
)
from .design import (
    build_gene_universe,
    build_membership_matrix,
    build_response,
    build_design
)
from .cache import (
    VerificationDataset,
    build_verification_dataset,
    load_verification_dataset
)

__all__ = [
    'GeneSetCollection',
    'load_example_gene_sets',
    'load_example_gene_list',
    'build_gene_universe',
    'build_membership_matrix',
    'build_response',
    'build_design',
    'VerificationDataset',
    'build_verification_dataset',
    'load_verification_dataset'
]

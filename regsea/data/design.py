"""
Construction of the gene set membership matrix and the GOI response.

The membership matrix has one row per gene in the universe and one column
per gene set, with 1 where the gene belongs to the set. The response is a
0/1 indicator of membership in the gene list of interest.
"""

import logging
from typing import Iterable, List, Optional, Tuple

import numpy as np
import pandas as pd

from .gene_sets import as_collection

logger = logging.getLogger(__name__)


def _clean_genes(genes: Iterable[str]) -> List[str]:
    """Strip identifiers and drop blanks and duplicates, keeping first order."""
    seen = set()
    cleaned = []
    for gene in genes:
        if gene is None:
            continue
        gene = str(gene).strip()
        if gene and gene not in seen:
            seen.add(gene)
            cleaned.append(gene)
    return cleaned


def build_gene_universe(gene_sets,
                        background: Optional[Iterable[str]] = None) -> List[str]:
    """
    Build the sorted gene universe.

    Args:
        gene_sets: GeneSetCollection or mapping of name to genes
        background: Optional extra genes (e.g. all expressed genes) that
            belong to no gene set but count as the population

    Returns:
        Sorted list of unique gene identifiers
    """
    collection = as_collection(gene_sets)
    universe = collection.create_background_set()
    if background is not None:
        universe.update(_clean_genes(background))
    return sorted(universe)


def build_membership_matrix(gene_sets,
                            universe: Optional[List[str]] = None) -> pd.DataFrame:
    """
    Build the binary gene-by-gene-set membership matrix.

    Args:
        gene_sets: GeneSetCollection or mapping of name to genes
        universe: Row order of the matrix. Defaults to the sorted union of
            genes across all sets. Genes of a set outside the universe are
            ignored.

    Returns:
        DataFrame (genes x gene sets) of 0/1 integers, columns in the
        enumeration order of the collection

    Example:
        >>> omega = build_membership_matrix({'A': ['g1', 'g2'], 'B': ['g2']})
        >>> omega.loc['g2'].tolist()
        [1, 1]
    """
    collection = as_collection(gene_sets)
    if universe is None:
        universe = build_gene_universe(collection)

    row_index = {gene: i for i, gene in enumerate(universe)}
    matrix = np.zeros((len(universe), len(collection)), dtype=np.int8)

    for j, (name, genes) in enumerate(collection.items()):
        rows = [row_index[g] for g in genes if g in row_index]
        matrix[rows, j] = 1

    omega = pd.DataFrame(matrix, index=pd.Index(universe, name='gene'),
                         columns=pd.Index(collection.names, name='gene_set'))

    logger.debug(f"Built membership matrix with {omega.shape[0]} genes "
                 f"and {omega.shape[1]} gene sets")
    return omega


def build_response(gene_list: Iterable[str], universe: List[str]) -> pd.Series:
    """
    Build the 0/1 indicator of gene list membership over the universe.

    Genes of interest that are not part of the universe cannot be modelled
    and are reported with a warning.

    Args:
        gene_list: Gene identifiers of interest
        universe: Gene universe (row order of the membership matrix)

    Returns:
        Integer Series indexed by the universe, named 'goi'
    """
    genes = _clean_genes(gene_list)
    universe_set = set(universe)
    missing = [g for g in genes if g not in universe_set]

    if missing:
        logger.warning(f"{len(missing)} of {len(genes)} genes of interest are not "
                       f"in any gene set: {', '.join(missing)}")

    goi = set(genes)
    response = pd.Series([1 if g in goi else 0 for g in universe],
                         index=pd.Index(universe, name='gene'),
                         name='goi', dtype=np.int8)
    return response


def build_design(gene_list: Iterable[str],
                 gene_sets,
                 background: Optional[Iterable[str]] = None
                 ) -> Tuple[pd.DataFrame, pd.Series]:
    """
    Build the membership matrix and the aligned response in one step.

    Args:
        gene_list: Gene identifiers of interest
        gene_sets: GeneSetCollection or mapping of name to genes
        background: Optional extra universe genes

    Returns:
        Tuple of (membership matrix, response)
    """
    collection = as_collection(gene_sets)
    universe = build_gene_universe(collection, background=background)
    omega = build_membership_matrix(collection, universe=universe)
    response = build_response(gene_list, universe)

    logger.info(f"Design: {omega.shape[0]} genes x {omega.shape[1]} gene sets, "
                f"{int(response.sum())} genes of interest")
    return omega, response

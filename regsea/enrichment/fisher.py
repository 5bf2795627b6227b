"""
Fisher's exact test over-representation baseline.

For each gene set, a one-sided Fisher's exact test asks whether genes of
interest are over-represented among the set's members, relative to the gene
universe. The p-values of all gene sets are then corrected together with
the Benjamini-Hochberg procedure.

Classes:
    FisherBaseline: Runs the per-set test and the correction

Functions:
    fisher_exact_test: One 2x2 exact test for a single gene set
    hypergeometric_test: Upper-tail hypergeometric p-value of the overlap
    adjust_pvalues: Multiple testing correction via statsmodels
    to_pvalue_mapping: Convert baseline results to {name: (p, p_adj)}
    significant_gene_sets: Names of sets below an adjusted p-value cutoff
"""

import logging
from typing import Dict, Iterable, List, Optional, Set, Tuple

import numpy as np
import pandas as pd
from scipy import stats
from statsmodels.stats.multitest import multipletests

from ..config import BaselineConfig
from ..data.design import build_gene_universe, build_response
from ..data.gene_sets import as_collection

logger = logging.getLogger(__name__)

RESULT_COLUMNS = [
    'p_value', 'p_adjusted', 'overlap_count', 'gene_set_size', 'query_size',
    'universe_size', 'expected_overlap', 'fold_enrichment', 'odds_ratio',
    'overlap_genes'
]


def fisher_exact_test(query_genes: Set[str],
                      gene_set: Set[str],
                      universe: Set[str],
                      alternative: str = 'greater') -> Tuple[float, float]:
    """
    Fisher's exact test for over-representation of query genes in a set.

    The contingency table is built over the universe::

                      in set        not in set
        in query      a             c
        not query     b             d

    Args:
        query_genes: Genes of interest
        gene_set: Members of the gene set
        universe: Population of genes; query and set are intersected with it
        alternative: 'greater' (enrichment), 'less' or 'two-sided'

    Returns:
        Tuple of (odds ratio, p-value)
    """
    query = query_genes & universe
    members = gene_set & universe

    a = len(query & members)
    b = len(members) - a
    c = len(query) - a
    d = len(universe) - a - b - c

    odds_ratio, p_value = stats.fisher_exact([[a, c], [b, d]],
                                             alternative=alternative)
    return float(odds_ratio), float(min(max(p_value, 0.0), 1.0))


def hypergeometric_test(query_genes: Set[str],
                        gene_set: Set[str],
                        background_size: int) -> float:
    """
    Calculate hypergeometric p-value for gene set enrichment.

    P(X >= k) = sf(k - 1), with population background_size, gene_set size
    successes and len(query_genes) draws. Equals the one-sided Fisher's
    exact test p-value over the same universe.

    Args:
        query_genes: Set of query gene identifiers
        gene_set: Set of genes in the gene set being tested
        background_size: Total size of the gene universe

    Returns:
        P-value from hypergeometric test
    """
    overlap = len(query_genes & gene_set)
    if overlap == 0:
        return 1.0

    return float(stats.hypergeom.sf(overlap - 1, background_size,
                                    len(gene_set), len(query_genes)))


def adjust_pvalues(pvalues: Iterable[float],
                   method: str = 'fdr_bh') -> np.ndarray:
    """
    Adjust p-values for multiple testing correction.

    Args:
        pvalues: Raw p-values, one per test, in enumeration order
        method: statsmodels multipletests method ('fdr_bh' by default)

    Returns:
        Array of adjusted p-values in the input order

    Example:
        >>> adjusted = adjust_pvalues([0.01, 0.04, 0.03, 0.2])
        >>> print(f"Adjusted p-values: {adjusted}")
    """
    pvalues = np.asarray(list(pvalues), dtype=float)

    if len(pvalues) == 0:
        return pvalues

    pvalues_clean = np.clip(np.nan_to_num(pvalues, nan=1.0), 0, 1)
    _, adjusted, _, _ = multipletests(pvalues_clean, method=method)

    logger.debug(f"Applied {method} correction to {len(pvalues)} p-values")
    return adjusted


class FisherBaseline:
    """
    Per-gene-set Fisher's exact test with multiple testing correction.

    Attributes:
        config: BaselineConfig
        results_: DataFrame of the last run, indexed by gene set name

    Example:
        >>> baseline = FisherBaseline()
        >>> results = baseline.run(gene_list, gene_sets)
        >>> results[['p_value', 'p_adjusted']].head()
    """

    def __init__(self, config: Optional[BaselineConfig] = None):
        self.config = config or BaselineConfig()
        self.results_: Optional[pd.DataFrame] = None

    def run(self,
            gene_list: Iterable[str],
            gene_sets,
            background: Optional[Iterable[str]] = None) -> pd.DataFrame:
        """
        Test every gene set and correct the p-values together.

        Args:
            gene_list: Gene identifiers of interest
            gene_sets: GeneSetCollection or mapping of name to genes
            background: Optional extra universe genes belonging to no set

        Returns:
            DataFrame indexed by gene set name, in enumeration order
        """
        cfg = self.config
        collection = as_collection(gene_sets).filter_by_size(
            cfg.min_set_size, cfg.max_set_size
        )
        universe_list = build_gene_universe(collection, background=background)
        universe = set(universe_list)
        response = build_response(gene_list, universe_list)
        query = set(response.index[response == 1])

        records = []
        for name, genes in collection.items():
            members = genes & universe
            odds_ratio, p_value = fisher_exact_test(
                query, members, universe, alternative=cfg.alternative
            )
            overlap = query & members
            expected = len(query) * len(members) / len(universe) if universe else 0.0
            records.append({
                'gene_set': name,
                'p_value': p_value,
                'overlap_count': len(overlap),
                'gene_set_size': len(members),
                'query_size': len(query),
                'universe_size': len(universe),
                'expected_overlap': expected,
                'fold_enrichment': len(overlap) / expected if expected > 0 else 0.0,
                'odds_ratio': odds_ratio,
                'overlap_genes': ';'.join(sorted(overlap)),
            })

        if not records:
            logger.warning("No gene sets left to test")
            self.results_ = pd.DataFrame(columns=RESULT_COLUMNS,
                                         index=pd.Index([], name='gene_set'))
            return self.results_

        results = pd.DataFrame(records).set_index('gene_set')
        results['p_adjusted'] = adjust_pvalues(results['p_value'],
                                               method=cfg.correction_method)
        results = results[RESULT_COLUMNS]

        n_significant = int((results['p_adjusted'] <= cfg.qvalue_cutoff).sum())
        logger.info(f"Fisher baseline: {len(results)} gene sets tested, "
                    f"{n_significant} with {cfg.correction_method} <= {cfg.qvalue_cutoff:.3g}")

        self.results_ = results
        return results

    def significant(self, cutoff: Optional[float] = None) -> List[str]:
        if self.results_ is None:
            raise ValueError("Baseline not run. Call run() first.")
        if cutoff is None:
            cutoff = self.config.qvalue_cutoff
        return significant_gene_sets(self.results_, cutoff)


def to_pvalue_mapping(results: pd.DataFrame) -> Dict[str, Tuple[float, float]]:
    """Map gene set name to (raw p-value, adjusted p-value)."""
    return {
        name: (float(row.p_value), float(row.p_adjusted))
        for name, row in results[['p_value', 'p_adjusted']].iterrows()
    }


def significant_gene_sets(results: pd.DataFrame, cutoff: float = 0.05) -> List[str]:
    """Gene sets with adjusted p-value at or below cutoff, most significant first."""
    significant = results[results['p_adjusted'] <= cutoff]
    return significant.sort_values('p_value').index.tolist()


def run_fisher_baseline(gene_list: Iterable[str],
                        gene_sets,
                        background: Optional[Iterable[str]] = None,
                        **config_params) -> pd.DataFrame:
    """Convenience wrapper: run FisherBaseline with a BaselineConfig built from kwargs."""
    return FisherBaseline(BaselineConfig(**config_params)).run(
        gene_list, gene_sets, background=background
    )

"""
Comparison of regularized-regression selection with the Fisher baseline.

Classes:
    MethodComparison: Agreement between selected and significant gene sets

Functions:
    compare_methods: Build a MethodComparison from both results
    generate_report: Markdown summary of a comparison
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

import numpy as np
import pandas as pd

from ..enrichment.fisher import significant_gene_sets
from .leading_edge import LeadingEdgeResult, score_ranking_auc

logger = logging.getLogger(__name__)


@dataclass
class MethodComparison:
    """
    Agreement between the two enrichment approaches.

    Attributes:
        selected: Gene sets selected by the elastic-net model
        significant: Gene sets significant in the Fisher baseline
        qvalue_cutoff: Adjusted p-value cutoff used for the baseline
        table: Per-gene-set coefficient, p-values and membership flags
    """
    selected: List[str]
    significant: List[str]
    qvalue_cutoff: float
    table: pd.DataFrame

    @property
    def both(self) -> List[str]:
        return [g for g in self.selected if g in set(self.significant)]

    @property
    def regression_only(self) -> List[str]:
        return [g for g in self.selected if g not in set(self.significant)]

    @property
    def baseline_only(self) -> List[str]:
        return [g for g in self.significant if g not in set(self.selected)]

    @property
    def jaccard(self) -> float:
        union = set(self.selected) | set(self.significant)
        if not union:
            return float('nan')
        return len(set(self.selected) & set(self.significant)) / len(union)

    def to_frame(self) -> pd.DataFrame:
        return self.table.copy()


def compare_methods(selection,
                    baseline_results: pd.DataFrame,
                    qvalue_cutoff: float = 0.05) -> MethodComparison:
    """
    Compare selected gene sets with baseline significant gene sets.

    Args:
        selection: SelectionResult from the pathway selector
        baseline_results: Output of FisherBaseline.run (or a cached dataset)
        qvalue_cutoff: Adjusted p-value threshold for baseline significance

    Returns:
        MethodComparison
    """
    coefficients = selection.coefficients()
    names = list(dict.fromkeys(list(baseline_results.index) + list(coefficients.index)))

    table = pd.DataFrame(index=pd.Index(names, name='gene_set'))
    table['coefficient'] = coefficients.reindex(names).fillna(0.0)
    table['p_value'] = baseline_results['p_value'].reindex(names)
    table['p_adjusted'] = baseline_results['p_adjusted'].reindex(names)
    table['selected'] = table.index.isin(selection.selected_pathways_names)
    table['significant'] = (table['p_adjusted'] <= qvalue_cutoff).astype(bool)
    table['neg_log10_p_adjusted'] = -np.log10(
        np.clip(table['p_adjusted'].astype(float), 1e-300, 1)
    )

    comparison = MethodComparison(
        selected=list(selection.selected_pathways_names),
        significant=significant_gene_sets(baseline_results, qvalue_cutoff),
        qvalue_cutoff=qvalue_cutoff,
        table=table,
    )

    logger.info(f"Comparison: {len(comparison.selected)} selected, "
                f"{len(comparison.significant)} significant, "
                f"{len(comparison.both)} in both (Jaccard {comparison.jaccard:.2f})")
    return comparison


def _bullet_list(names: List[str]) -> str:
    if not names:
        return "- (none)\n"
    return ''.join(f"- {name}\n" for name in names)


def generate_report(comparison: MethodComparison,
                    selection,
                    leading_edge: Optional[LeadingEdgeResult] = None) -> str:
    """
    Generate a Markdown report of a comparison run.

    Args:
        comparison: MethodComparison
        selection: SelectionResult that produced comparison.selected
        leading_edge: Optional leading-edge result to include

    Returns:
        Markdown text
    """
    config = selection.config
    report = "# Gene Set Enrichment Comparison\n\n"
    report += f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}\n\n"

    report += "## Input\n\n"
    report += f"- Genes in universe: {selection.design.shape[0]}\n"
    report += f"- Gene sets: {selection.design.shape[1]}\n"
    report += f"- Genes of interest in universe: {int(selection.response.sum())}\n\n"

    report += "## Elastic-net selection\n\n"
    report += f"- Family: {config.family.value}\n"
    report += f"- Alpha: {config.alpha}\n"
    report += f"- Folds: {config.n_folds}, metric: {config.metric.value}, seed: {config.seed}\n"
    if selection.model is not None:
        summary = selection.model.summary()
        report += (f"- lambda_min: {summary['lambda_min']:.4g}, "
                   f"lambda_1se: {summary['lambda_1se']:.4g} "
                   f"(using lambda_{selection.lambda_rule})\n")
        auc = score_ranking_auc(selection.predictions(), selection.response)
        report += f"- Score ranking AUC: {auc:.3f}\n"
    report += f"\nSelected gene sets ({len(comparison.selected)}):\n\n"
    coefficients = comparison.table['coefficient']
    report += _bullet_list([f"{name} ({coefficients[name]:+.4f})"
                            for name in comparison.selected])

    report += f"\n## Fisher's exact test (adjusted p <= {comparison.qvalue_cutoff})\n\n"
    p_adjusted = comparison.table['p_adjusted']
    report += _bullet_list([f"{name} (p_adj={p_adjusted[name]:.2e})"
                            for name in comparison.significant])

    report += "\n## Agreement\n\n"
    report += f"- Both methods: {len(comparison.both)}\n"
    report += f"- Elastic net only: {len(comparison.regression_only)}\n"
    report += f"- Fisher only: {len(comparison.baseline_only)}\n"
    report += f"- Jaccard index: {comparison.jaccard:.2f}\n"

    if leading_edge is not None:
        report += f"\n## Leading edge (threshold {leading_edge.threshold:g})\n\n"
        report += f"- True positives ({len(leading_edge.true_positives)}): "
        report += ', '.join(leading_edge.true_positives) or '(none)'
        report += f"\n- False positives ({len(leading_edge.false_positives)}): "
        report += ', '.join(leading_edge.false_positives) or '(none)'
        report += "\n"

    return report

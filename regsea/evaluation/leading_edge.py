"""
Leading-edge extraction from fitted pathway selection models.

Genes whose predicted score exceeds a threshold are called by the model.
Called genes that belong to the gene list are true positives (the leading
edge); called genes outside the list are false positives.

The threshold is always supplied by the caller. It is usually read off a
plot of the predicted scores (see ``plot_leading_edge``); nothing here
derives or calibrates it.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Union

import numpy as np
import pandas as pd
from sklearn.metrics import roc_auc_score

logger = logging.getLogger(__name__)


@dataclass
class LeadingEdgeResult:
    """
    Partition of genes by predicted score and observed GOI membership.

    Attributes:
        threshold: User-supplied score threshold
        true_positives: Called genes in the gene list, highest score first
        false_positives: Called genes outside the gene list, highest score first
        false_negatives: Genes of interest below the threshold
        scores: Predicted score per gene
    """
    threshold: float
    true_positives: List[str]
    false_positives: List[str]
    false_negatives: List[str]
    scores: pd.Series

    @property
    def n_called(self) -> int:
        return len(self.true_positives) + len(self.false_positives)

    @property
    def precision(self) -> float:
        return len(self.true_positives) / self.n_called if self.n_called else float('nan')

    @property
    def recall(self) -> float:
        n_goi = len(self.true_positives) + len(self.false_negatives)
        return len(self.true_positives) / n_goi if n_goi else float('nan')

    def to_frame(self) -> pd.DataFrame:
        """One row per called gene with its score and status."""
        rows = [(g, self.scores[g], 'true_positive') for g in self.true_positives]
        rows += [(g, self.scores[g], 'false_positive') for g in self.false_positives]
        frame = pd.DataFrame(rows, columns=['gene', 'score', 'status'])
        return frame.sort_values('score', ascending=False).reset_index(drop=True)

    def summary(self) -> Dict[str, Union[int, float]]:
        return {
            'threshold': self.threshold,
            'n_true_positives': len(self.true_positives),
            'n_false_positives': len(self.false_positives),
            'n_false_negatives': len(self.false_negatives),
            'precision': self.precision,
            'recall': self.recall,
        }


def _as_series(values, index=None, name=None) -> pd.Series:
    if isinstance(values, pd.Series):
        return values
    return pd.Series(np.asarray(values), index=index, name=name)


def extract_leading_edge(predicted: Union[pd.Series, np.ndarray],
                         observed: Union[pd.Series, np.ndarray],
                         threshold: float,
                         genes: Optional[List[str]] = None) -> LeadingEdgeResult:
    """
    Split genes into true and false positives at a score threshold.

    Args:
        predicted: Predicted score per gene (linear predictor or probability)
        observed: 0/1 GOI indicator, aligned with predicted
        threshold: Score above which a gene counts as called. Required; the
            appropriate value depends on the family and the data
        genes: Gene identifiers when predicted and observed are arrays

    Returns:
        LeadingEdgeResult

    Raises:
        ValueError: If inputs are misaligned or the threshold is not finite

    Example:
        >>> edge = extract_leading_edge(result.predictions(), result.response,
        ...                             threshold=0.3)
        >>> edge.true_positives[:5]
    """
    if threshold is None or not np.isfinite(threshold):
        raise ValueError(f"threshold must be a finite number, got {threshold}")

    # arrays of scores line up by position with an observed Series
    if genes is None and not isinstance(predicted, pd.Series) \
            and isinstance(observed, pd.Series) \
            and len(observed) == len(np.asarray(predicted)):
        genes = list(observed.index)

    scores = _as_series(predicted, index=genes, name='predicted').astype(float)
    truth = _as_series(observed, index=scores.index if genes is None else genes,
                       name='goi')

    if len(scores) != len(truth):
        raise ValueError(
            f"predicted has {len(scores)} entries but observed has {len(truth)}"
        )
    if not scores.index.equals(truth.index):
        truth = truth.reindex(scores.index)
        if truth.isna().any():
            raise ValueError("observed is missing genes present in predicted")

    truth = truth.astype(int)
    called = scores > threshold

    ordered = scores.sort_values(ascending=False)
    tp_mask = called & (truth == 1)
    fp_mask = called & (truth == 0)
    fn_mask = ~called & (truth == 1)

    result = LeadingEdgeResult(
        threshold=float(threshold),
        true_positives=[g for g in ordered.index if tp_mask[g]],
        false_positives=[g for g in ordered.index if fp_mask[g]],
        false_negatives=[g for g in ordered.index if fn_mask[g]],
        scores=scores,
    )

    logger.info(f"Leading edge at threshold {threshold:.4g}: "
                f"{len(result.true_positives)} true positives, "
                f"{len(result.false_positives)} false positives")
    return result


def pathway_leading_edge(selection, threshold: float) -> pd.DataFrame:
    """
    Leading-edge genes of each selected pathway.

    Args:
        selection: SelectionResult from the pathway selector
        threshold: User-supplied score threshold

    Returns:
        DataFrame indexed by selected pathway with its coefficient and the
        true and false positive members
    """
    edge = extract_leading_edge(selection.predictions(), selection.response,
                                threshold)
    coefficients = selection.coefficients()
    true_positives = set(edge.true_positives)
    false_positives = set(edge.false_positives)

    rows = []
    for name in selection.selected_pathways_names:
        members = selection.design.index[selection.design[name] == 1]
        tp = [g for g in edge.true_positives if g in members]
        fp = [g for g in edge.false_positives if g in members]
        rows.append({
            'gene_set': name,
            'coefficient': float(coefficients[name]),
            'n_true_positives': len(tp),
            'n_false_positives': len(fp),
            'true_positives': ';'.join(tp),
            'false_positives': ';'.join(fp),
        })

    frame = pd.DataFrame(rows, columns=['gene_set', 'coefficient',
                                        'n_true_positives', 'n_false_positives',
                                        'true_positives', 'false_positives'])
    logger.debug(f"Leading edge of {len(frame)} selected pathways "
                 f"({len(true_positives)} TP, {len(false_positives)} FP overall)")
    return frame.set_index('gene_set')


def score_ranking_auc(predicted: Union[pd.Series, np.ndarray],
                      observed: Union[pd.Series, np.ndarray]) -> float:
    """
    Area under the ROC curve of the predicted scores.

    A threshold-free description of how well the scores rank the genes of
    interest; it is reported alongside the leading edge, not used to pick
    the threshold.
    """
    observed = np.asarray(observed).astype(int)
    if len(np.unique(observed)) < 2:
        return float('nan')
    return float(roc_auc_score(observed, np.asarray(predicted, dtype=float)))

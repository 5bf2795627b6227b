"""
Cached verification dataset of Fisher baseline results.

The comparison figures are drawn from a fixed snapshot of the baseline
results so they can be reproduced without re-running the tests. The
snapshot is written once with joblib and only read afterwards; rebuilding
it requires an explicit ``force=True``.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

import pandas as pd
from joblib import dump, load

from ..config import BaselineConfig
from ..enrichment.fisher import FisherBaseline, to_pvalue_mapping
from .gene_sets import as_collection

logger = logging.getLogger(__name__)

CACHE_FORMAT_VERSION = 1


@dataclass
class VerificationDataset:
    """
    Snapshot of baseline test results.

    Attributes:
        results: Baseline results indexed by gene set name
        gene_list: Genes of interest the snapshot was computed for
        gene_set_names: Gene sets tested, in enumeration order
        config: Baseline configuration as a dictionary
        created: ISO timestamp of creation
        package_version: regsea version that wrote the snapshot
    """
    results: pd.DataFrame
    gene_list: List[str]
    gene_set_names: List[str]
    config: Dict[str, Any]
    created: str
    package_version: str
    format_version: int = CACHE_FORMAT_VERSION
    metadata: Dict[str, Any] = field(default_factory=dict)

    def matches(self, gene_list: Iterable[str]) -> bool:
        """Whether the snapshot was computed for the same gene list."""
        return set(g.strip() for g in gene_list) == set(self.gene_list)

    def pvalues(self):
        """Mapping of gene set name to (raw p-value, adjusted p-value)."""
        return to_pvalue_mapping(self.results)


def build_verification_dataset(gene_list: Iterable[str],
                               gene_sets,
                               path: Union[str, Path],
                               config: Optional[BaselineConfig] = None,
                               background: Optional[Iterable[str]] = None,
                               force: bool = False) -> VerificationDataset:
    """
    Run the Fisher baseline and write the snapshot to disk.

    Args:
        gene_list: Genes of interest
        gene_sets: GeneSetCollection or mapping of name to genes
        path: Destination file (conventionally ``*.joblib``)
        config: Baseline configuration
        background: Optional extra universe genes
        force: Overwrite an existing snapshot

    Returns:
        The VerificationDataset that was written

    Raises:
        FileExistsError: If the file exists and force is False
    """
    from .. import __version__

    path = Path(path)
    if path.exists() and not force:
        raise FileExistsError(
            f"Verification dataset already exists: {path}. "
            f"Pass force=True to rebuild it."
        )

    gene_list = [g.strip() for g in gene_list if g and g.strip()]
    collection = as_collection(gene_sets)
    baseline = FisherBaseline(config)
    results = baseline.run(gene_list, collection, background=background)

    dataset = VerificationDataset(
        results=results,
        gene_list=gene_list,
        gene_set_names=list(results.index),
        config=baseline.config.to_dict(),
        created=datetime.now().isoformat(timespec='seconds'),
        package_version=__version__,
    )

    path.parent.mkdir(parents=True, exist_ok=True)
    dump(dataset, path)
    logger.info(f"Saved verification dataset with {len(results)} gene sets to {path}")
    return dataset


def load_verification_dataset(path: Union[str, Path]) -> VerificationDataset:
    """
    Load a snapshot written by build_verification_dataset.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file does not hold a VerificationDataset
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Verification dataset not found: {path}")

    dataset = load(path)
    if not isinstance(dataset, VerificationDataset):
        raise ValueError(
            f"{path} does not contain a verification dataset "
            f"(found {type(dataset).__name__})"
        )
    if dataset.format_version != CACHE_FORMAT_VERSION:
        logger.warning(f"Verification dataset {path} has format version "
                       f"{dataset.format_version}, expected {CACHE_FORMAT_VERSION}")

    logger.info(f"Loaded verification dataset ({len(dataset.results)} gene sets, "
                f"created {dataset.created})")
    return dataset

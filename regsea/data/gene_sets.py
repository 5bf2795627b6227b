"""
Gene set collections for regularized-regression enrichment analysis.

This module loads named gene sets (pathways, annotation categories) from
GMT files or in-memory mappings, and provides the bundled NF-kB example
used throughout the package documentation.

Classes:
    GeneSetCollection: Ordered collection of named gene sets

Functions:
    load_example_gene_sets: Load the bundled example pathway collection
    load_example_gene_list: Load the bundled 19-gene NF-kB gene list
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Set

logger = logging.getLogger(__name__)

EXAMPLE_DIR = Path(__file__).resolve().parent / 'example'
EXAMPLE_GMT = EXAMPLE_DIR / 'pathways.gmt'
EXAMPLE_GENE_LIST = EXAMPLE_DIR / 'nfkb_genes.txt'


class GeneSetCollection:
    """
    Ordered collection of named gene sets.

    Gene sets keep the order in which they were added; that order is the
    column order of the membership matrix and the order in which baseline
    p-values are corrected.

    Attributes:
        gene_sets: Dictionary mapping gene set names to sets of gene identifiers
        gene_set_metadata: Dictionary mapping gene set names to metadata

    Example:
        >>> collection = GeneSetCollection()
        >>> collection.parse_gmt_file('/path/to/c2.cp.kegg.symbols.gmt')
        >>> nfkb = collection.get_gene_set('KEGG_NF_KAPPA_B_SIGNALING_PATHWAY')
        >>> collection.filter_by_size(min_size=10, max_size=500)
    """

    def __init__(self, gene_sets: Optional[Mapping[str, Iterable[str]]] = None):
        self.gene_sets: Dict[str, Set[str]] = {}
        self.gene_set_metadata: Dict[str, Dict[str, Any]] = {}

        if gene_sets:
            for name, genes in gene_sets.items():
                self.add_gene_set(name, genes)

    @classmethod
    def from_dict(cls, gene_sets: Mapping[str, Iterable[str]]) -> 'GeneSetCollection':
        """Build a collection from a mapping of name to gene identifiers."""
        return cls(gene_sets)

    @classmethod
    def from_gmt(cls, gmt_path: str) -> 'GeneSetCollection':
        """Build a collection from a single GMT file."""
        collection = cls()
        collection.parse_gmt_file(gmt_path)
        return collection

    def __len__(self) -> int:
        return len(self.gene_sets)

    def __iter__(self) -> Iterator[str]:
        return iter(self.gene_sets)

    def __contains__(self, set_name: object) -> bool:
        return set_name in self.gene_sets

    def items(self):
        return self.gene_sets.items()

    @property
    def names(self) -> List[str]:
        """Gene set names in enumeration order."""
        return list(self.gene_sets)

    def add_gene_set(self,
                     name: str,
                     genes: Iterable[str],
                     description: str = '',
                     source: Optional[str] = None) -> None:
        """
        Add or replace a gene set.

        Args:
            name: Gene set name
            genes: Gene identifiers; whitespace is stripped and blanks dropped
            description: Free-text description or URL
            source: Where the gene set was loaded from
        """
        gene_set = {g.strip() for g in genes if g and g.strip()}
        if name in self.gene_sets:
            logger.warning(f"Replacing existing gene set {name}")

        self.gene_sets[name] = gene_set
        self.gene_set_metadata[name] = {
            'name': name,
            'description': description,
            'size': len(gene_set),
            'source_file': source,
        }

    def parse_gmt_file(self, gmt_path: str) -> int:
        """
        Parse a GMT format gene set file.

        GMT format: each line holds the gene set name, a description or URL,
        and the member gene identifiers, all tab-separated.

        Args:
            gmt_path: Path to the GMT file

        Returns:
            Number of gene sets loaded from the file

        Raises:
            FileNotFoundError: If the file does not exist
        """
        if not os.path.exists(gmt_path):
            raise FileNotFoundError(f"GMT file not found: {gmt_path}")

        count = 0
        with open(gmt_path, 'r', encoding='utf-8') as f:
            for line_number, line in enumerate(f, start=1):
                line = line.rstrip('\n').rstrip('\r')
                if not line.strip():
                    continue

                parts = line.split('\t')
                if len(parts) < 3:
                    logger.debug(f"Skipping malformed GMT line {line_number} in {gmt_path}")
                    continue

                self.add_gene_set(parts[0], parts[2:], description=parts[1],
                                  source=str(gmt_path))
                count += 1

        logger.info(f"Parsed {count} gene sets from {gmt_path}")
        return count

    def get_gene_set(self, set_name: str) -> Optional[Set[str]]:
        """Return the genes of a gene set, or None if it is not loaded."""
        return self.gene_sets.get(set_name)

    def get_gene_set_info(self, set_name: str) -> Optional[Dict[str, Any]]:
        """Return the metadata of a gene set, or None if it is not loaded."""
        return self.gene_set_metadata.get(set_name)

    def filter_by_size(self,
                       min_size: int = 1,
                       max_size: Optional[int] = None) -> 'GeneSetCollection':
        """
        Return a new collection holding only sets within the size range.

        Args:
            min_size: Minimum number of genes (inclusive)
            max_size: Maximum number of genes (inclusive), None for no limit

        Returns:
            Filtered collection, preserving enumeration order
        """
        filtered = GeneSetCollection()
        for name, genes in self.gene_sets.items():
            size = len(genes)
            if size < min_size or (max_size is not None and size > max_size):
                continue
            filtered.gene_sets[name] = set(genes)
            filtered.gene_set_metadata[name] = dict(self.gene_set_metadata[name])

        dropped = len(self) - len(filtered)
        if dropped:
            logger.info(f"Removed {dropped} gene sets outside size range "
                        f"[{min_size}, {max_size}]")
        return filtered

    def search_gene_sets(self, keyword: str,
                         case_sensitive: bool = False) -> List[Dict[str, Any]]:
        """
        Search gene sets by keyword in name or description.

        Args:
            keyword: Search keyword
            case_sensitive: Whether search should be case-sensitive

        Returns:
            List of matching gene set metadata dictionaries
        """
        results = []
        search_term = keyword if case_sensitive else keyword.lower()

        for set_name, metadata in self.gene_set_metadata.items():
            name = set_name if case_sensitive else set_name.lower()
            desc = metadata.get('description', '')
            desc = desc if case_sensitive else desc.lower()

            if search_term in name or search_term in desc:
                results.append({
                    **metadata,
                    'genes': self.gene_sets.get(set_name, set())
                })

        return results

    def create_background_set(self) -> Set[str]:
        """Return the union of all genes across the collection."""
        background = set()
        for genes in self.gene_sets.values():
            background.update(genes)
        return background

    def summary(self) -> Dict[str, Any]:
        """
        Get summary statistics of loaded gene sets.

        Returns:
            Dictionary with summary statistics
        """
        sizes = [len(genes) for genes in self.gene_sets.values()]

        return {
            'total_gene_sets': len(self.gene_sets),
            'total_unique_genes': len(self.create_background_set()),
            'min_set_size': min(sizes) if sizes else 0,
            'max_set_size': max(sizes) if sizes else 0,
            'mean_set_size': sum(sizes) / len(sizes) if sizes else 0
        }


def as_collection(gene_sets) -> GeneSetCollection:
    """Accept either a GeneSetCollection or a plain mapping."""
    if isinstance(gene_sets, GeneSetCollection):
        return gene_sets
    if isinstance(gene_sets, Mapping):
        return GeneSetCollection.from_dict(gene_sets)
    raise ValueError(
        f"Expected a GeneSetCollection or a mapping, got {type(gene_sets).__name__}"
    )


def load_example_gene_sets() -> GeneSetCollection:
    """Load the bundled collection of 25 signaling and metabolic pathways."""
    return GeneSetCollection.from_gmt(str(EXAMPLE_GMT))


def load_example_gene_list() -> List[str]:
    """Load the bundled 19-gene NF-kB gene list."""
    with open(EXAMPLE_GENE_LIST, 'r', encoding='utf-8') as f:
        return [line.strip() for line in f if line.strip()]

"""Shared pytest fixtures for regsea tests."""
import matplotlib
matplotlib.use("Agg")

import pytest
import numpy as np
import pandas as pd

from regsea.config import SelectionConfig
from regsea.data.gene_sets import (
    GeneSetCollection,
    load_example_gene_list,
    load_example_gene_sets,
)
from regsea.models.selector import PathwaySelector


@pytest.fixture
def example_gene_sets():
    """Bundled collection of 25 pathways."""
    return load_example_gene_sets()


@pytest.fixture
def nfkb_genes():
    """The 19-gene NF-kB list of interest."""
    return load_example_gene_list()


@pytest.fixture
def toy_gene_sets():
    """Small overlapping gene sets over genes G01..G40."""
    genes = [f"G{i:02d}" for i in range(1, 41)]
    return GeneSetCollection.from_dict({
        "SET_A": genes[0:10],
        "SET_B": genes[5:15],
        "SET_C": genes[15:25],
        "SET_D": genes[25:40],
        "SET_E": genes[0:3] + genes[30:33],
    })


@pytest.fixture
def toy_gene_list():
    """Genes of interest concentrated in SET_A."""
    return ["G01", "G02", "G03", "G04", "G05", "G06", "G07", "G20"]


@pytest.fixture
def toy_design():
    """Random membership matrix with a response driven by two columns."""
    rng = np.random.default_rng(0)
    n_genes, n_sets = 200, 12
    X = pd.DataFrame(
        rng.binomial(1, 0.15, size=(n_genes, n_sets)),
        index=[f"gene{i}" for i in range(n_genes)],
        columns=[f"PATHWAY_{j}" for j in range(n_sets)],
    )
    signal = X["PATHWAY_0"] + X["PATHWAY_1"]
    noise = rng.random(n_genes) < 0.05
    y = pd.Series(((signal > 0) & (rng.random(n_genes) < 0.8)) | noise,
                  index=X.index).astype(int)
    return X, y


@pytest.fixture
def gaussian_config():
    """Gaussian-family configuration used in end-to-end tests."""
    return SelectionConfig(family="gaussian", alpha=0.5, n_folds=10, seed=42)


@pytest.fixture
def binomial_config():
    """Small binomial-family configuration that keeps SAGA fits quick."""
    return SelectionConfig(family="binomial", alpha=0.5, n_folds=5, seed=42,
                           n_lambdas=20, lambda_min_ratio=0.01, max_iter=2000)


@pytest.fixture
def gaussian_selection(nfkb_genes, example_gene_sets, gaussian_config):
    """Gaussian selection on the NF-kB example."""
    return PathwaySelector(gaussian_config).fit(nfkb_genes, example_gene_sets)

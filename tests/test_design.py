"""Tests for membership matrix and response construction."""
import logging

import numpy as np

from regsea.data.design import (
    build_design,
    build_gene_universe,
    build_membership_matrix,
    build_response,
)


class TestGeneUniverse:
    """Tests for build_gene_universe."""

    def test_union_of_sets_sorted(self, toy_gene_sets):
        universe = build_gene_universe(toy_gene_sets)
        assert len(universe) == 40
        assert universe == sorted(universe)

    def test_background_extends_universe(self, toy_gene_sets):
        universe = build_gene_universe(toy_gene_sets, background=["X1", " X2 ", "G01"])
        assert len(universe) == 42
        assert "X2" in universe


class TestMembershipMatrix:
    """Tests for build_membership_matrix."""

    def test_shape_and_order(self, toy_gene_sets):
        omega = build_membership_matrix(toy_gene_sets)
        assert omega.shape == (40, 5)
        assert list(omega.columns) == toy_gene_sets.names

    def test_entries_match_membership(self, toy_gene_sets):
        """Each column should sum to its set size and entries be 0/1."""
        omega = build_membership_matrix(toy_gene_sets)
        assert set(np.unique(omega.to_numpy())) <= {0, 1}
        for name, genes in toy_gene_sets.items():
            assert omega[name].sum() == len(genes)
            assert set(omega.index[omega[name] == 1]) == genes

    def test_gene_in_two_sets(self):
        omega = build_membership_matrix({"A": ["g1", "g2"], "B": ["g2"]})
        assert omega.loc["g2"].tolist() == [1, 1]
        assert omega.loc["g1"].tolist() == [1, 0]

    def test_background_rows_are_zero(self, toy_gene_sets):
        universe = build_gene_universe(toy_gene_sets, background=["EXTRA"])
        omega = build_membership_matrix(toy_gene_sets, universe=universe)
        assert omega.loc["EXTRA"].sum() == 0


class TestResponse:
    """Tests for build_response and build_design."""

    def test_indicator(self, toy_gene_sets, toy_gene_list):
        universe = build_gene_universe(toy_gene_sets)
        response = build_response(toy_gene_list, universe)
        assert response.sum() == len(toy_gene_list)
        assert response["G01"] == 1
        assert response["G30"] == 0
        assert list(response.index) == universe

    def test_duplicates_and_whitespace(self, toy_gene_sets):
        universe = build_gene_universe(toy_gene_sets)
        response = build_response(["G01", " G01", "", "G02 "], universe)
        assert response.sum() == 2

    def test_unknown_genes_warn(self, toy_gene_sets, caplog):
        """Genes outside every set are dropped with a warning."""
        universe = build_gene_universe(toy_gene_sets)
        with caplog.at_level(logging.WARNING, logger="regsea.data.design"):
            response = build_response(["G01", "NOT_A_GENE"], universe)
        assert response.sum() == 1
        assert "not in any gene set" in caplog.text
        assert "NOT_A_GENE" in caplog.text

    def test_design_aligned(self, nfkb_genes, example_gene_sets):
        omega, response = build_design(nfkb_genes, example_gene_sets)
        assert omega.index.equals(response.index)
        assert omega.shape == (575, 25)
        assert response.sum() == 19

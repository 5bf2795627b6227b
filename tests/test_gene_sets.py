"""Tests for gene set collections."""
import logging

import pytest

from regsea.data.gene_sets import GeneSetCollection, as_collection


class TestExampleData:
    """Tests for the bundled example data."""

    def test_example_collection(self, example_gene_sets):
        assert len(example_gene_sets) == 25
        assert "KEGG_NF_KAPPA_B_SIGNALING_PATHWAY" in example_gene_sets

    def test_example_gene_list(self, nfkb_genes):
        """The NF-kB example list has 19 unique genes."""
        assert len(nfkb_genes) == 19
        assert len(set(nfkb_genes)) == 19
        assert "RELA" in nfkb_genes

    def test_example_genes_are_annotated(self, example_gene_sets, nfkb_genes):
        background = example_gene_sets.create_background_set()
        assert set(nfkb_genes) <= background


class TestGeneSetCollection:
    """Tests for GeneSetCollection."""

    def test_parse_gmt_file(self, tmp_path):
        gmt = tmp_path / "sets.gmt"
        gmt.write_text(
            "SET1\tfirst set\tA\tB\tC\n"
            "\n"
            "BROKEN\tonly two fields\n"
            "SET2\thttp://example.org\tC\tD\n"
        )
        collection = GeneSetCollection()
        count = collection.parse_gmt_file(str(gmt))
        assert count == 2
        assert collection.names == ["SET1", "SET2"]
        assert collection.get_gene_set("SET1") == {"A", "B", "C"}
        assert collection.get_gene_set_info("SET2")["description"] == "http://example.org"

    def test_parse_logs_count(self, tmp_path, caplog):
        gmt = tmp_path / "sets.gmt"
        gmt.write_text("SET1\tdesc\tA\tB\n")
        with caplog.at_level(logging.INFO, logger="regsea.data.gene_sets"):
            GeneSetCollection.from_gmt(str(gmt))
        assert f"Parsed 1 gene sets from {gmt}" in caplog.text

    def test_missing_gmt(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            GeneSetCollection().parse_gmt_file(str(tmp_path / "missing.gmt"))

    def test_order_preserved(self):
        collection = GeneSetCollection.from_dict({"Z": ["a"], "A": ["b"], "M": ["c"]})
        assert collection.names == ["Z", "A", "M"]

    def test_blank_genes_dropped(self):
        collection = GeneSetCollection.from_dict({"S": [" A ", "", "B"]})
        assert collection.get_gene_set("S") == {"A", "B"}

    def test_filter_by_size(self, toy_gene_sets):
        filtered = toy_gene_sets.filter_by_size(min_size=7, max_size=10)
        assert filtered.names == ["SET_A", "SET_B", "SET_C"]
        assert len(toy_gene_sets) == 5

    def test_search(self, example_gene_sets):
        hits = example_gene_sets.search_gene_sets("nf-kappa")
        names = {h["name"] for h in hits}
        assert "KEGG_NF_KAPPA_B_SIGNALING_PATHWAY" in names

    def test_summary(self, toy_gene_sets):
        summary = toy_gene_sets.summary()
        assert summary["total_gene_sets"] == 5
        assert summary["total_unique_genes"] == 40
        assert summary["min_set_size"] == 6

    def test_as_collection(self):
        collection = as_collection({"S": ["A"]})
        assert isinstance(collection, GeneSetCollection)
        assert as_collection(collection) is collection
        with pytest.raises(ValueError):
            as_collection(["A", "B"])

"""Tests for the write-once verification dataset."""
import pandas as pd
import pytest
from joblib import dump

from regsea.config import BaselineConfig
from regsea.data.cache import (
    VerificationDataset,
    build_verification_dataset,
    load_verification_dataset,
)
from regsea.enrichment.fisher import FisherBaseline


class TestVerificationDataset:
    """Tests for building and loading the cached baseline results."""

    def test_build_and_load(self, tmp_path, nfkb_genes, example_gene_sets):
        path = tmp_path / "verification.joblib"
        built = build_verification_dataset(nfkb_genes, example_gene_sets, path)
        assert path.exists()

        loaded = load_verification_dataset(path)
        assert isinstance(loaded, VerificationDataset)
        pd.testing.assert_frame_equal(loaded.results, built.results)
        assert loaded.gene_set_names == example_gene_sets.names
        assert loaded.matches(nfkb_genes)
        assert not loaded.matches(nfkb_genes[:5])

    def test_matches_fresh_run(self, tmp_path, nfkb_genes, example_gene_sets):
        """Cached p-values equal those of a new baseline run."""
        path = tmp_path / "verification.joblib"
        build_verification_dataset(nfkb_genes, example_gene_sets, path)
        fresh = FisherBaseline().run(nfkb_genes, example_gene_sets)
        cached = load_verification_dataset(path).pvalues()
        for name, (p_value, p_adjusted) in cached.items():
            assert p_value == pytest.approx(fresh.loc[name, "p_value"])
            assert p_adjusted == pytest.approx(fresh.loc[name, "p_adjusted"])

    def test_write_once(self, tmp_path, nfkb_genes, example_gene_sets):
        path = tmp_path / "verification.joblib"
        build_verification_dataset(nfkb_genes, example_gene_sets, path)
        with pytest.raises(FileExistsError):
            build_verification_dataset(nfkb_genes[:5], example_gene_sets, path)
        assert load_verification_dataset(path).matches(nfkb_genes)

    def test_force_rebuild(self, tmp_path, nfkb_genes, example_gene_sets):
        path = tmp_path / "verification.joblib"
        build_verification_dataset(nfkb_genes, example_gene_sets, path)
        build_verification_dataset(nfkb_genes[:5], example_gene_sets, path,
                                   force=True)
        assert load_verification_dataset(path).matches(nfkb_genes[:5])

    def test_config_stored(self, tmp_path, nfkb_genes, example_gene_sets):
        path = tmp_path / "verification.joblib"
        config = BaselineConfig(qvalue_cutoff=0.01)
        dataset = build_verification_dataset(nfkb_genes, example_gene_sets, path,
                                             config=config)
        assert dataset.config["qvalue_cutoff"] == 0.01
        assert dataset.package_version

    def test_creates_parent_directory(self, tmp_path, nfkb_genes, example_gene_sets):
        path = tmp_path / "nested" / "dir" / "verification.joblib"
        build_verification_dataset(nfkb_genes, example_gene_sets, path)
        assert path.exists()

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_verification_dataset(tmp_path / "missing.joblib")

    def test_wrong_object(self, tmp_path):
        path = tmp_path / "other.joblib"
        dump({"not": "a dataset"}, path)
        with pytest.raises(ValueError, match="does not contain"):
            load_verification_dataset(path)

#!/usr/bin/env python3
"""
NF-kB Comparison Example

This example demonstrates how to use the regsea package to:
1. Load the bundled gene sets and the NF-kB gene list
2. Select pathways with gaussian and binomial elastic-net models
3. Extract the leading edge at a chosen score threshold
4. Run the Fisher's exact test baseline and cache its results
5. Compare both methods and visualize the results
"""

import logging
import os
import sys

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt

# Add the package to Python path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from regsea import (
    SelectionConfig,
    PathwaySelector,
    load_example_gene_sets,
    load_example_gene_list,
    extract_leading_edge,
    pathway_leading_edge,
    compare_methods,
    generate_report,
    build_verification_dataset,
    load_verification_dataset,
)
from regsea.visualization import (
    plot_cv_curve,
    plot_coefficient_path,
    plot_leading_edge,
    plot_method_comparison,
)

OUTPUT_DIR = 'nfkb_results'
CACHE_PATH = os.path.join(OUTPUT_DIR, 'fisher_verification.joblib')

# Score thresholds read off the predicted-score plots
GAUSSIAN_THRESHOLD = 0.1
BINOMIAL_THRESHOLD = 0.3


def main():
    """Run the NF-kB comparison example."""

    logging.basicConfig(level=logging.INFO,
                        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    os.makedirs(OUTPUT_DIR, exist_ok=True)

    print("=== NF-kB Gene Set Enrichment Example ===")
    print()

    # Step 1: Load data
    print("1. Loading example gene sets and gene list...")
    gene_sets = load_example_gene_sets()
    genes = load_example_gene_list()
    summary = gene_sets.summary()
    print(f"   Gene sets: {summary['total_gene_sets']}, "
          f"unique genes: {summary['total_unique_genes']}")
    print(f"   Genes of interest: {len(genes)}")
    print()

    # Step 2: Gaussian (linear) selection
    print("2. Fitting gaussian elastic net (alpha=0.5, 10 folds)...")
    gaussian = PathwaySelector(
        SelectionConfig(family='gaussian', alpha=0.5, n_folds=10, seed=1)
    ).fit(genes, gene_sets)

    print(f"   lambda_min: {gaussian.model.lambda_min_:.4g}")
    print(f"   Selected pathways ({len(gaussian.selected_pathways_names)}):")
    for name, coef in gaussian.selected_coefficients().items():
        print(f"     {name}: {coef:+.4f}")
    print()

    # Step 3: Binomial (logistic) selection
    print("3. Fitting binomial elastic net (alpha=0.5, deviance)...")
    binomial = PathwaySelector(
        SelectionConfig(family='binomial', alpha=0.5, n_folds=10,
                        metric='deviance', seed=1, n_lambdas=50)
    ).fit(genes, gene_sets)

    print(f"   Selected pathways ({len(binomial.selected_pathways_names)}):")
    for name, coef in binomial.selected_coefficients().items():
        print(f"     {name}: {coef:+.4f}")
    print()

    # Step 4: Leading edge
    print("4. Extracting leading edge...")
    for label, result, threshold in [('gaussian', gaussian, GAUSSIAN_THRESHOLD),
                                     ('binomial', binomial, BINOMIAL_THRESHOLD)]:
        edge = extract_leading_edge(result.predictions(), result.response, threshold)
        print(f"   {label} (threshold {threshold}): "
              f"{len(edge.true_positives)} true positives, "
              f"{len(edge.false_positives)} false positives")
        print(f"     Leading edge: {', '.join(edge.true_positives)}")

    per_pathway = pathway_leading_edge(gaussian, GAUSSIAN_THRESHOLD)
    per_pathway.to_csv(os.path.join(OUTPUT_DIR, 'gaussian_leading_edge.csv'))
    print()

    # Step 5: Fisher baseline from the cached verification dataset
    print("5. Loading Fisher's exact test baseline...")
    if os.path.exists(CACHE_PATH):
        dataset = load_verification_dataset(CACHE_PATH)
        if not dataset.matches(genes):
            print("   Cached dataset was built for a different gene list; rebuilding")
            dataset = build_verification_dataset(genes, gene_sets, CACHE_PATH,
                                                 force=True)
    else:
        dataset = build_verification_dataset(genes, gene_sets, CACHE_PATH)
    print(f"   Cached results created {dataset.created}")

    top = dataset.results.sort_values('p_value').head(5)
    for name, row in top.iterrows():
        print(f"     {name}: p={row['p_value']:.2e}, p_adj={row['p_adjusted']:.2e}")
    print()

    # Step 6: Comparison
    print("6. Comparing elastic net with Fisher's exact test...")
    comparison = compare_methods(gaussian, dataset.results)
    print(f"   Both methods: {comparison.both}")
    print(f"   Elastic net only: {comparison.regression_only}")
    print(f"   Fisher only: {comparison.baseline_only}")

    edge = extract_leading_edge(gaussian.predictions(), gaussian.response,
                                GAUSSIAN_THRESHOLD)
    report = generate_report(comparison, gaussian, leading_edge=edge)
    with open(os.path.join(OUTPUT_DIR, 'comparison_report.md'), 'w') as f:
        f.write(report)
    print()

    # Step 7: Visualization
    print("7. Creating visualizations...")
    plot_cv_curve(gaussian.model, save_path=os.path.join(OUTPUT_DIR, 'cv_curve.png'))
    plot_coefficient_path(gaussian.model,
                          save_path=os.path.join(OUTPUT_DIR, 'coefficient_path.png'))

    fig, axes = plt.subplots(1, 2, figsize=(14, 5))
    plot_leading_edge(gaussian.predictions(), gaussian.response,
                      threshold=GAUSSIAN_THRESHOLD, label_top=10,
                      title='Gaussian', ax=axes[0])
    plot_leading_edge(binomial.predictions(), binomial.response,
                      threshold=BINOMIAL_THRESHOLD, label_top=10,
                      title='Binomial', ax=axes[1])
    fig.savefig(os.path.join(OUTPUT_DIR, 'leading_edge.png'), dpi=150,
                bbox_inches='tight')

    plot_method_comparison(comparison,
                           save_path=os.path.join(OUTPUT_DIR, 'method_comparison.png'))
    plt.close('all')
    print(f"   Figures saved to {OUTPUT_DIR}/")
    print()

    print("=== Example completed ===")


if __name__ == "__main__":
    main()

"""
Plotting functions for regularized-regression gene set enrichment.

All functions accept an optional existing axes, an optional save path and
return the figure and axes, so they can be combined into multi-panel
figures.
"""

import numpy as np
import pandas as pd
import matplotlib.pyplot as plt
import seaborn as sns
from typing import Optional, Tuple, List

# Default color palette (colorblind-friendly, Nature-style)
DEFAULT_COLORS = {
    'primary': '#E64B35',      # Red
    'secondary': '#4DBBD5',    # Blue
    'tertiary': '#00A087',     # Green
    'quaternary': '#3C5488',   # Deep blue
    'neutral': '#808080',      # Gray
    'highlight': '#F39B7F',    # Light orange
}

DEFAULT_FIGSIZE = (8, 6)
DEFAULT_DPI = 300
DEFAULT_FONTSIZE = {
    'title': 12,
    'label': 10,
    'tick': 9,
    'legend': 9,
}


def _apply_base_style(ax: plt.Axes,
                      remove_top_right: bool = True,
                      grid: bool = False,
                      grid_alpha: float = 0.3) -> None:
    """
    Apply base styling to matplotlib axes.

    Parameters
    ----------
    ax : plt.Axes
        Matplotlib axes object.
    remove_top_right : bool, optional
        Whether to remove top and right spines. Default is True.
    grid : bool, optional
        Whether to show grid. Default is False.
    grid_alpha : float, optional
        Grid transparency. Default is 0.3.
    """
    if remove_top_right:
        ax.spines['top'].set_visible(False)
        ax.spines['right'].set_visible(False)

    if grid:
        ax.grid(True, alpha=grid_alpha, linestyle='--', linewidth=0.5)


def _get_axes(ax: Optional[plt.Axes], figsize) -> Tuple[plt.Figure, plt.Axes]:
    if ax is None:
        fig, ax = plt.subplots(figsize=figsize)
    else:
        fig = ax.get_figure()
    return fig, ax


def _finish(fig: plt.Figure, ax: plt.Axes, title: Optional[str],
            default_title: str, save_path: Optional[str]) -> None:
    ax.set_title(title or default_title, fontsize=DEFAULT_FONTSIZE['title'],
                 fontweight='bold')
    _apply_base_style(ax)
    if save_path:
        fig.savefig(save_path, dpi=DEFAULT_DPI, bbox_inches='tight')


def plot_cv_curve(
    model,
    figsize: Tuple[int, int] = DEFAULT_FIGSIZE,
    title: Optional[str] = None,
    save_path: Optional[str] = None,
    ax: Optional[plt.Axes] = None
) -> Tuple[plt.Figure, plt.Axes]:
    """
    Plot the cross-validation curve against log(lambda).

    Parameters
    ----------
    model : BaseElasticNetPath
        Fitted elastic-net model.
    figsize : tuple, optional
        Figure size.
    title : str, optional
        Plot title.
    save_path : str, optional
        Path to save figure.
    ax : plt.Axes, optional
        Existing axes to plot on.

    Returns
    -------
    fig : plt.Figure
    ax : plt.Axes
    """
    cv = model.cv_results()
    log_lambda = np.log(cv['lambda'])

    fig, ax = _get_axes(ax, figsize)
    ax.errorbar(log_lambda, cv['cv_mean'], yerr=cv['cv_se'],
                fmt='o', color=DEFAULT_COLORS['primary'], ecolor='lightgray',
                markersize=3, elinewidth=1, capsize=2)
    ax.axvline(np.log(model.lambda_min_), color='black', linestyle='--',
               linewidth=0.8, label='lambda.min')
    ax.axvline(np.log(model.lambda_1se_), color=DEFAULT_COLORS['neutral'],
               linestyle=':', linewidth=0.8, label='lambda.1se')

    # number of non-zero coefficients along the top axis
    top = ax.secondary_xaxis('top')
    ticks = np.linspace(0, len(cv) - 1, num=min(8, len(cv))).astype(int)
    top.set_xticks(log_lambda.iloc[ticks])
    top.set_xticklabels(cv['n_nonzero'].iloc[ticks].astype(str),
                        fontsize=DEFAULT_FONTSIZE['tick'])

    ax.set_xlabel('log(lambda)', fontsize=DEFAULT_FONTSIZE['label'])
    ax.set_ylabel(f"CV {model.metric_.value}", fontsize=DEFAULT_FONTSIZE['label'])
    ax.legend(fontsize=DEFAULT_FONTSIZE['legend'], frameon=False)

    _finish(fig, ax, title, f'Cross-validation ({model.family.value})', save_path)
    return fig, ax


def plot_coefficient_path(
    model,
    highlight: Optional[List[str]] = None,
    figsize: Tuple[int, int] = DEFAULT_FIGSIZE,
    title: Optional[str] = None,
    save_path: Optional[str] = None,
    ax: Optional[plt.Axes] = None
) -> Tuple[plt.Figure, plt.Axes]:
    """
    Plot the coefficient of every gene set along the lambda path.

    Gene sets named in ``highlight`` (by default the ones selected at
    lambda_min) are drawn in color and listed in the legend.
    """
    path = model.coef_path_
    log_lambda = np.log(model.lambdas_)
    if highlight is None:
        highlight = model.selected_features('min')

    fig, ax = _get_axes(ax, figsize)
    palette = sns.color_palette('husl', n_colors=max(len(highlight), 1))

    for name, coefs in path.iterrows():
        if name in highlight:
            continue
        ax.plot(log_lambda, coefs.to_numpy(), color=DEFAULT_COLORS['neutral'],
                linewidth=0.6, alpha=0.4)
    for color, name in zip(palette, highlight):
        coefs = path.loc[name].to_numpy()
        ax.plot(log_lambda, coefs, color=color, linewidth=1.4, label=name)

    ax.axvline(np.log(model.lambda_min_), color='black', linestyle='--',
               linewidth=0.8)
    ax.axhline(0, color='black', linewidth=0.5)
    ax.invert_xaxis()
    ax.set_xlabel('log(lambda)', fontsize=DEFAULT_FONTSIZE['label'])
    ax.set_ylabel('Coefficient', fontsize=DEFAULT_FONTSIZE['label'])
    if highlight:
        ax.legend(fontsize=DEFAULT_FONTSIZE['legend'] - 2, frameon=False,
                  loc='upper left', bbox_to_anchor=(1.01, 1))

    _finish(fig, ax, title, 'Coefficient path', save_path)
    return fig, ax


def plot_leading_edge(
    predicted: pd.Series,
    observed: pd.Series,
    threshold: Optional[float] = None,
    label_top: int = 0,
    figsize: Tuple[int, int] = DEFAULT_FIGSIZE,
    title: Optional[str] = None,
    save_path: Optional[str] = None,
    ax: Optional[plt.Axes] = None
) -> Tuple[plt.Figure, plt.Axes]:
    """
    Plot genes ranked by predicted score, colored by GOI membership.

    This is the plot the leading-edge threshold is usually chosen from.
    Pass ``threshold`` to draw the chosen cut-off.

    Parameters
    ----------
    predicted : pd.Series
        Predicted score per gene.
    observed : pd.Series
        0/1 GOI indicator per gene.
    threshold : float, optional
        Threshold line to draw.
    label_top : int, optional
        Number of highest-scoring genes to label.
    """
    observed = observed.reindex(predicted.index).astype(int)
    order = predicted.sort_values(ascending=False)
    ranks = np.arange(1, len(order) + 1)
    is_goi = observed[order.index].to_numpy() == 1

    fig, ax = _get_axes(ax, figsize)
    ax.scatter(ranks[~is_goi], order.to_numpy()[~is_goi], s=6, alpha=0.5,
               color=DEFAULT_COLORS['neutral'], label='Other genes', rasterized=True)
    ax.scatter(ranks[is_goi], order.to_numpy()[is_goi], s=14,
               color=DEFAULT_COLORS['primary'], label='Genes of interest')

    if threshold is not None:
        ax.axhline(threshold, color='black', linestyle='--', linewidth=0.8,
                   label=f'threshold = {threshold:g}')

    for i, gene in enumerate(order.index[:label_top]):
        ax.annotate(gene, (ranks[i], order.iloc[i]), xytext=(4, 0),
                    textcoords='offset points', fontsize=6)

    ax.set_xlabel('Gene rank', fontsize=DEFAULT_FONTSIZE['label'])
    ax.set_ylabel('Predicted score', fontsize=DEFAULT_FONTSIZE['label'])
    ax.legend(fontsize=DEFAULT_FONTSIZE['legend'], frameon=False)

    _finish(fig, ax, title, 'Predicted response', save_path)
    return fig, ax


def plot_method_comparison(
    comparison,
    figsize: Tuple[int, int] = DEFAULT_FIGSIZE,
    title: Optional[str] = None,
    save_path: Optional[str] = None,
    ax: Optional[plt.Axes] = None
) -> Tuple[plt.Figure, plt.Axes]:
    """
    Scatter of elastic-net coefficient against Fisher -log10(adjusted p).

    Points are colored by agreement: selected by both methods, by one, or
    by neither. Gene sets selected by either method are labelled.
    """
    table = comparison.table.dropna(subset=['p_adjusted'])
    status = np.select(
        [table['selected'] & table['significant'], table['selected'],
         table['significant']],
        ['Both', 'Elastic net only', 'Fisher only'],
        default='Neither'
    )
    status = pd.Series(status, index=table.index, name='status')
    colors = {
        'Both': DEFAULT_COLORS['primary'],
        'Elastic net only': DEFAULT_COLORS['quaternary'],
        'Fisher only': DEFAULT_COLORS['tertiary'],
        'Neither': DEFAULT_COLORS['neutral'],
    }

    fig, ax = _get_axes(ax, figsize)
    sns.scatterplot(x=table['coefficient'], y=table['neg_log10_p_adjusted'],
                    hue=status, palette=colors, ax=ax, s=40, edgecolor='none')

    ax.axhline(-np.log10(comparison.qvalue_cutoff), color='black',
               linestyle='--', linewidth=0.8)
    ax.axvline(0, color='black', linewidth=0.5)

    for name, row in table[status != 'Neither'].iterrows():
        ax.annotate(name, (row['coefficient'], row['neg_log10_p_adjusted']),
                    xytext=(4, 2), textcoords='offset points', fontsize=6)

    ax.set_xlabel('Elastic-net coefficient', fontsize=DEFAULT_FONTSIZE['label'])
    ax.set_ylabel('-log10(adjusted p-value)', fontsize=DEFAULT_FONTSIZE['label'])
    ax.legend(fontsize=DEFAULT_FONTSIZE['legend'], frameon=False)

    _finish(fig, ax, title, 'Elastic net vs Fisher exact test', save_path)
    return fig, ax

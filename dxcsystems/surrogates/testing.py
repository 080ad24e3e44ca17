"""
Statistical significance of correlation diagrams using surrogates.

Each surrogate trial contributes one exceedance count per diagram cell:
the cell counts when the surrogate correlation is at least as large in
magnitude as the observed one. Counts are divided by the number of trials
to give an empirical p-value diagram.
"""

import threading
import numpy as np
import pandas as pd
import scipy.stats as sps
from typing import Literal, Tuple, Optional

from ..diagram.core import CorrelationDiagram, PValueDiagram


class PValueAccumulator:
    """
    Per-cell exceedance counter for one observed correlation diagram.

    Updates are applied under a lock, one whole surrogate diagram at a
    time, so trials finishing in any order on any thread give the same
    counts.

    Examples
    --------
    >>> acc = PValueAccumulator(real_diagram)
    >>> for surrogate_diagram in surrogate_diagrams:
    ...     acc.accumulate(surrogate_diagram)
    >>> pvalues = acc.finalize()
    """

    def __init__(self, real_diagram: CorrelationDiagram):
        self.real_diagram = real_diagram
        self.counts = np.zeros(real_diagram.shape, dtype=np.int64)
        self.n_trials = 0
        self._lock = threading.Lock()

    def accumulate(self, surrogate_diagram: CorrelationDiagram) -> None:
        """Add one surrogate diagram's exceedances to the counts."""
        n_rows = min(self.counts.shape[0], surrogate_diagram.shape[0])
        n_cols = min(self.counts.shape[1], surrogate_diagram.shape[1])

        real = np.abs(self.real_diagram.values[:n_rows, :n_cols])
        surr = np.abs(surrogate_diagram.values[:n_rows, :n_cols])
        exceed = (surr >= real).astype(np.int64)

        with self._lock:
            self.counts[:n_rows, :n_cols] += exceed
            self.n_trials += 1

    def merge(self, other: 'PValueAccumulator') -> 'PValueAccumulator':
        """Add the counts of another accumulator built on the same diagram."""
        if other.counts.shape != self.counts.shape:
            raise ValueError(
                f"Cannot merge accumulators of shape {other.counts.shape} and {self.counts.shape}"
            )

        with other._lock:
            counts = other.counts.copy()
            n_trials = other.n_trials

        with self._lock:
            self.counts += counts
            self.n_trials += n_trials

        return self

    def finalize(self, n_trials: Optional[int] = None) -> PValueDiagram:
        """
        Divide counts by the number of trials.

        Parameters
        ----------
        n_trials : int or None
            Total trial count; defaults to the number of accumulated trials

        Returns
        -------
        PValueDiagram
            Values in [0, 1]
        """
        with self._lock:
            total = self.n_trials if n_trials is None else n_trials
            if total <= 0:
                raise ValueError("Cannot finalize p-values without any surrogate trial")
            if total < self.n_trials:
                raise ValueError(f"n_trials={total} is smaller than the {self.n_trials} accumulated trials")
            values = self.counts / float(total)

        return PValueDiagram(
            values=values,
            base_width=self.real_diagram.base_width,
            tau=self.real_diagram.tau,
            centers=self.real_diagram.centers,
            n_trials=total,
        )


def fdr_correction(p_values: np.ndarray,
                   alpha: float = 0.05,
                   method: Literal["bh", "by"] = "bh") -> Tuple[np.ndarray, float]:
    """
    False Discovery Rate correction for multiple testing.

    Parameters
    ----------
    p_values : np.ndarray
        Array of p-values (any shape)
    alpha : float, default 0.05
        Target false discovery rate
    method : {'bh', 'by'}, default 'bh'
        - 'bh': Benjamini-Hochberg procedure
        - 'by': Benjamini-Yekutieli procedure (more conservative)

    Returns
    -------
    significant : np.ndarray
        Boolean array (same shape as p_values)
    threshold : float
        Adjusted p-value threshold

    References
    ----------
    Benjamini, Y., & Hochberg, Y. (1995). Controlling the false discovery rate:
    a practical and powerful approach to multiple testing.
    Journal of the Royal Statistical Society, Series B, 57(1), 289-300.
    """
    p_values = np.asarray(p_values, dtype=float)
    flat = p_values.ravel()
    n = len(flat)

    sorted_indices = np.argsort(flat, kind="stable")
    sorted_p = flat[sorted_indices]

    if method == "bh":
        thresholds = (np.arange(1, n + 1) / n) * alpha
    elif method == "by":
        c = np.sum(1.0 / np.arange(1, n + 1))
        thresholds = (np.arange(1, n + 1) / (n * c)) * alpha
    else:
        raise ValueError("method must be 'bh' or 'by'")

    significant = np.zeros(n, dtype=bool)
    below = sorted_p <= thresholds
    if np.any(below):
        max_i = np.where(below)[0][-1]
        threshold = thresholds[max_i]
        significant[sorted_indices[:max_i + 1]] = True
    else:
        threshold = 0.0

    return significant.reshape(p_values.shape), threshold


def bonferroni_correction(p_values: np.ndarray,
                          alpha: float = 0.05) -> Tuple[np.ndarray, float]:
    """
    Bonferroni correction for multiple testing.

    Returns
    -------
    significant : np.ndarray
        Boolean array (same shape as p_values)
    threshold : float
        alpha divided by the number of tests
    """
    p_values = np.asarray(p_values, dtype=float)
    threshold = alpha / p_values.size
    return p_values < threshold, threshold


def significant_cells(pvalue_diagram: PValueDiagram,
                      alpha: float = 0.05,
                      correction: Literal["none", "bonferroni", "fdr"] = "none") -> np.ndarray:
    """
    Boolean mask of significant diagram cells.

    Parameters
    ----------
    pvalue_diagram : PValueDiagram
        Finalized p-value diagram
    alpha : float, default 0.05
        Significance level
    correction : {'none', 'bonferroni', 'fdr'}, default 'none'
        Multiple testing correction across all cells

    Returns
    -------
    np.ndarray of bool, shape (W, K)
    """
    p = pvalue_diagram.values

    if correction == "none":
        return p < alpha
    if correction == "bonferroni":
        return bonferroni_correction(p, alpha)[0]
    if correction == "fdr":
        return fdr_correction(p, alpha)[0]

    raise ValueError("correction must be 'none', 'bonferroni' or 'fdr'")


def summarize_pvalue_diagram(pvalue_diagram: PValueDiagram,
                             alpha: float = 0.05) -> pd.DataFrame:
    """
    Summary table of a p-value diagram.

    Includes a Kolmogorov-Smirnov test of the cell p-values against the
    uniform distribution: for uncoupled sequences the cells should spread
    over [0, 1] without piling up near 0.

    Parameters
    ----------
    pvalue_diagram : PValueDiagram
        Finalized p-value diagram
    alpha : float, default 0.05
        Significance level

    Returns
    -------
    pd.DataFrame
        Summary table with 'Metric' and 'Value' columns
    """
    p = pvalue_diagram.values.ravel()
    ks = sps.kstest(p, 'uniform')

    summary = pd.DataFrame({
        'Metric': ['Cells', 'Trials', 'Min p', 'Median p', 'Mean p',
                   f'Significant (p < {alpha})', 'Significant (FDR)',
                   'Significant (Bonferroni)', 'KS statistic', 'KS p-value'],
        'Value': [
            p.size,
            pvalue_diagram.n_trials,
            float(np.min(p)),
            float(np.median(p)),
            float(np.mean(p)),
            int(significant_cells(pvalue_diagram, alpha, "none").sum()),
            int(significant_cells(pvalue_diagram, alpha, "fdr").sum()),
            int(significant_cells(pvalue_diagram, alpha, "bonferroni").sum()),
            float(ks.statistic),
            float(ks.pvalue),
        ]
    })

    return summary

"""
Core windowed cross-correlation functions for correlation diagrams.

A correlation diagram holds the Pearson correlation coefficient between
two sequences for several window widths (rows, multiples of a base width
L) and window positions (columns, stepping by L). Every row shares the
same grid of window centers so diagrams of different widths line up on
one time axis.
"""

import numpy as np
import pandas as pd
from typing import Optional
from dataclasses import dataclass


@dataclass(frozen=True)
class Diagram:
    """
    Rectangular table of per-window values.

    Attributes
    ----------
    values : np.ndarray, shape (W, K)
        One row per window width level, one column per window center
    base_width : int
        Base window width L; row w has width L * (w + 1)
    tau : int
        Symmetric delay used when the diagram was computed (0 = none)
    centers : np.ndarray, shape (K,)
        Sample index of each window center
    """
    values: np.ndarray
    base_width: int
    tau: int
    centers: np.ndarray

    def __post_init__(self):
        values = np.array(self.values, dtype=float)
        if values.ndim != 2:
            raise ValueError(f"Diagram values must be 2-D, got shape {values.shape}")
        if values.shape[1] != len(self.centers):
            raise ValueError(
                f"Diagram has {values.shape[1]} columns but {len(self.centers)} centers"
            )
        values.setflags(write=False)
        object.__setattr__(self, 'values', values)

    @property
    def n_widths(self) -> int:
        return self.values.shape[0]

    @property
    def n_centers(self) -> int:
        return self.values.shape[1]

    @property
    def shape(self):
        return self.values.shape

    @property
    def widths(self) -> np.ndarray:
        """Window width of each row."""
        return self.base_width * np.arange(1, self.n_widths + 1)

    def to_frame(self) -> pd.DataFrame:
        """Return the diagram as a DataFrame (index = width, columns = center)."""
        return pd.DataFrame(
            self.values,
            index=pd.Index(self.widths, name='width'),
            columns=pd.Index(self.centers, name='center'),
        )


@dataclass(frozen=True)
class CorrelationDiagram(Diagram):
    """Windowed Pearson correlation coefficients."""


@dataclass(frozen=True)
class PValueDiagram(Diagram):
    """
    Empirical p-values, one per correlation diagram cell.

    Attributes
    ----------
    n_trials : int
        Number of surrogate trials the p-values were estimated from
    """
    n_trials: int = 0


def diagram_size(n_samples: int,
                 base_width: int,
                 n_widths: int,
                 tau: int = 0) -> int:
    """
    Number of window centers K of a diagram.

    K = floor((N - L*W) / L) - (tau if tau > 0 else 0)

    Parameters
    ----------
    n_samples : int
        Sequence length N
    base_width : int
        Base window width L
    n_widths : int
        Number of width levels W
    tau : int, default 0
        Symmetric delay

    Returns
    -------
    int
        Number of centers (may be < 1 for invalid geometry)
    """
    return (n_samples - base_width * n_widths) // base_width - (tau if tau > 0 else 0)


def window_centers(n_samples: int,
                   base_width: int,
                   n_widths: int,
                   tau: int = 0) -> np.ndarray:
    """Window centers shared by every row: L*W/2 - 1 + j*L, j = 0..K-1."""
    n_centers = max(diagram_size(n_samples, base_width, n_widths, tau), 0)
    first = base_width * n_widths // 2 - 1
    return first + base_width * np.arange(n_centers)


def _windowed_pearson(x_windows: np.ndarray, y_windows: np.ndarray) -> np.ndarray:
    """
    Row-wise Pearson correlation of two (K, width) window stacks.

    Windows with zero variance in either sequence give 0.0.
    """
    xc = x_windows - x_windows.mean(axis=1, keepdims=True)
    yc = y_windows - y_windows.mean(axis=1, keepdims=True)

    cov = np.sum(xc * yc, axis=1)
    denom = np.sqrt(np.sum(xc ** 2, axis=1) * np.sum(yc ** 2, axis=1))

    # A constant window centers to rounding residue, not exact zeros
    constant = (np.ptp(x_windows, axis=1) == 0) | (np.ptp(y_windows, axis=1) == 0)

    r = np.zeros(len(cov), dtype=float)
    valid = ~constant & (denom > 0)
    r[valid] = cov[valid] / denom[valid]

    # Rounding can push |r| a hair above 1
    return np.clip(r, -1.0, 1.0)


def compute_diagram(seq_a: np.ndarray,
                    seq_b: np.ndarray,
                    base_width: int,
                    n_widths: int,
                    tau: Optional[int] = 0) -> CorrelationDiagram:
    """
    Compute the correlation diagram of two sequences.

    For width level w (width = L * (w + 1)) and each center k, the window
    is the `width` samples [k - width/2 + 1, k + width/2 + 1). With
    tau > 0 the coefficient is the mean of the correlation with seq_b
    delayed by +tau and by -tau, which approximates the zero-delay
    correlation while being robust to a small lag.

    Parameters
    ----------
    seq_a, seq_b : np.ndarray, shape (N,)
        Input sequences (same length)
    base_width : int
        Base window width L (even, > 0)
    n_widths : int
        Number of width levels W (> 0)
    tau : int or None, default 0
        Symmetric delay; None or values <= 0 disable delay averaging

    Returns
    -------
    CorrelationDiagram
        Diagram of shape (W, K)
    """
    a = np.asarray(seq_a, dtype=float)
    b = np.asarray(seq_b, dtype=float)

    if a.shape != b.shape or a.ndim != 1:
        raise ValueError(f"Sequences must be 1-D with equal length, got {a.shape} and {b.shape}")

    tau = int(tau) if tau and tau > 0 else 0
    n = a.shape[0]

    centers = window_centers(n, base_width, n_widths, tau)
    if len(centers) < 1:
        raise ValueError(
            f"Invalid window settings: N={n}, L={base_width}, W={n_widths}, tau={tau} "
            f"give a diagram with {diagram_size(n, base_width, n_widths, tau)} columns"
        )

    values = np.zeros((n_widths, len(centers)), dtype=float)

    for w in range(n_widths):
        width = base_width * (w + 1)
        starts = centers - width // 2 + 1
        idx = starts[:, None] + np.arange(width)[None, :]

        if tau > 0:
            r_plus = _windowed_pearson(a[idx], b[idx + tau])
            r_minus = _windowed_pearson(a[idx + tau], b[idx])
            values[w] = 0.5 * (r_plus + r_minus)
        else:
            values[w] = _windowed_pearson(a[idx], b[idx])

    return CorrelationDiagram(values=values, base_width=base_width, tau=tau, centers=centers)

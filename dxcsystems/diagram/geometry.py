"""
Validation of window geometry and sequence selection.

These checks run before any computation so that an invalid request
fails without partial output.
"""

import sys
import numpy as np
from typing import Tuple

from .core import diagram_size


def correct_base_width(base_width: int, verbose: bool = True) -> int:
    """
    Make the base window width even.

    An odd width is reduced by one and a warning is printed to stderr.

    Parameters
    ----------
    base_width : int
        Requested base width L (> 0)
    verbose : bool, default True
        Print the warning

    Returns
    -------
    int
        Even base width
    """
    if base_width % 2 != 0:
        base_width = base_width - 1
        if verbose:
            print(f"Warning: window base width was an odd number; it is now reduced to {base_width}.",
                  file=sys.stderr)
    return base_width


def check_window_settings(n_samples: int,
                          n_widths: int,
                          base_width: int,
                          tau: int = 0,
                          verbose: bool = True) -> int:
    """
    Validate diagram geometry and return the (even) base width to use.

    Parameters
    ----------
    n_samples : int
        Sequence length N
    n_widths : int
        Number of width levels W
    base_width : int
        Base window width L
    tau : int, default 0
        Symmetric delay
    verbose : bool, default True
        Print a warning when L is corrected

    Returns
    -------
    int
        Base width, reduced by one if it was odd

    Raises
    ------
    ValueError
        If W or L are not positive, tau is negative, or the diagram
        would have fewer than one column
    """
    if n_widths <= 0:
        raise ValueError(f"Number of window widths must be positive, got W={n_widths}")
    if base_width <= 0:
        raise ValueError(f"Window base width must be positive, got L={base_width}")
    if tau is not None and tau < 0:
        raise ValueError(f"Delay must be non-negative, got tau={tau}")

    base_width = correct_base_width(base_width, verbose=verbose)
    if base_width == 0:
        raise ValueError("Window base width must be at least 2 samples")

    size = diagram_size(n_samples, base_width, n_widths, tau or 0)
    if size < 1:
        raise ValueError(
            f"Windowing settings are invalid: diagram size would be {size} "
            f"(N={n_samples}, L={base_width}, W={n_widths}, tau={tau or 0})"
        )

    return base_width


def check_sequences(sequences: np.ndarray,
                    index_a: int,
                    index_b: int) -> Tuple[np.ndarray, np.ndarray]:
    """
    Select the two sequences to analyze from a data matrix.

    Parameters
    ----------
    sequences : np.ndarray, shape (N, n_sequences)
        Data matrix, one sequence per column
    index_a, index_b : int
        0-based column indices

    Returns
    -------
    seq_a, seq_b : np.ndarray, shape (N,)
        Selected sequences (read-only views)
    """
    data = np.asarray(sequences, dtype=float)

    if data.ndim != 2:
        raise ValueError(f"Sequence matrix must be 2-D, got shape {data.shape}")
    if not np.all(np.isfinite(data)):
        raise ValueError("Sequence matrix contains missing or non-finite values")

    n_sequences = data.shape[1]
    for name, index in (('first', index_a), ('second', index_b)):
        if index < 0 or index >= n_sequences:
            raise ValueError(
                f"Requested {name} column {index} is out of range "
                f"({n_sequences} sequences loaded)"
            )

    seq_a = data[:, index_a]
    seq_b = data[:, index_b]
    seq_a.setflags(write=False)
    seq_b.setflags(write=False)

    return seq_a, seq_b

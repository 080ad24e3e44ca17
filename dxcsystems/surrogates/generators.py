"""
Surrogate sequence generation for correlation diagram significance tests.

Iterative Amplitude Adjusted Fourier Transform (IAAFT) surrogates keep
the value distribution and the power spectrum of the original sequence
while randomizing its Fourier phases, which destroys any genuine coupling
with a partner sequence.
"""

import sys
import numpy as np
from typing import Tuple, Optional, Literal
from dataclasses import dataclass
from tqdm import tqdm

from .seeds import trial_seed, clock_seed

DEFAULT_TOLERANCE = 1.0
DEFAULT_MAX_ITER = 1000


@dataclass(frozen=True)
class SurrogateContext:
    """
    Target statistics of one original sequence.

    Attributes
    ----------
    sorted_values : np.ndarray, shape (N,)
        Original values in ascending order (target distribution)
    amplitudes : np.ndarray, shape (N // 2 + 1,)
        Magnitude of the real DFT of the original (target spectrum)
    """
    sorted_values: np.ndarray
    amplitudes: np.ndarray

    def __len__(self) -> int:
        return self.sorted_values.shape[0]


def initialize_surrogate_context(sequence: np.ndarray) -> SurrogateContext:
    """
    Capture the sorted values and spectral magnitudes of a sequence.

    Parameters
    ----------
    sequence : np.ndarray, shape (N,)
        Original sequence

    Returns
    -------
    SurrogateContext
        Read-only snapshot reused by every surrogate of this sequence
    """
    x = np.asarray(sequence, dtype=float)
    if x.ndim != 1 or x.shape[0] < 2:
        raise ValueError(f"Surrogate generation needs a 1-D sequence of length >= 2, got {x.shape}")

    sorted_values = np.sort(x)
    amplitudes = np.abs(np.fft.rfft(x))
    sorted_values.setflags(write=False)
    amplitudes.setflags(write=False)

    return SurrogateContext(sorted_values=sorted_values, amplitudes=amplitudes)


def generate_iaaft_surrogate(context: SurrogateContext,
                             tolerance: float = DEFAULT_TOLERANCE,
                             seed: Optional[int] = None,
                             max_iter: int = DEFAULT_MAX_ITER,
                             criterion: Literal["rank", "spectrum"] = "rank",
                             verbose: bool = False) -> np.ndarray:
    """
    Generate one IAAFT surrogate from a precomputed context.

    Parameters
    ----------
    context : SurrogateContext
        Output of initialize_surrogate_context
    tolerance : float, default 1.0
        Convergence threshold in percent
    seed : int or None
        Seed of the local random generator
    max_iter : int, default 1000
        Maximum number of iterations
    criterion : {'rank', 'spectrum'}, default 'rank'
        - 'rank': percentage of samples whose rank changed since the
          previous iteration
        - 'spectrum': relative deviation (percent) of the spectral
          magnitudes from the target
    verbose : bool, default False
        Warn when max_iter is reached

    Returns
    -------
    np.ndarray, shape (N,)
        Surrogate; its sorted values equal context.sorted_values exactly

    Notes
    -----
    Reaching max_iter is not an error: the last distribution-matched
    iterate is returned.
    """
    if criterion not in ("rank", "spectrum"):
        raise ValueError("criterion must be 'rank' or 'spectrum'")

    rng = np.random.default_rng(seed)
    n = len(context)
    x_sorted = context.sorted_values
    x_amp = context.amplitudes
    amp_norm = np.linalg.norm(x_amp)

    # Random permutation has the target distribution from the start
    z_n = rng.permutation(x_sorted)
    r_curr = np.argsort(z_n, kind="stable")

    count = 0
    discrepancy = 100.0

    while (discrepancy > tolerance) and (count < max_iter):
        r_prev = r_curr

        # Impose target amplitudes, keep current phases
        fft_prev = np.fft.rfft(z_n)
        phases = np.exp(1j * np.angle(fft_prev))
        z_n = np.fft.irfft(x_amp * phases, n=n)

        # Rescale to original distribution
        r_curr = np.argsort(z_n, kind="stable")
        z_n[r_curr] = x_sorted

        if criterion == "rank":
            discrepancy = ((r_curr != r_prev).sum() * 100.0) / n
        else:
            deviation = np.linalg.norm(np.abs(np.fft.rfft(z_n)) - x_amp)
            discrepancy = 100.0 * deviation / amp_norm if amp_norm > 0 else 0.0
        count += 1

    if discrepancy > tolerance and verbose:
        print(f"Warning: max iterations reached for surrogate (seed={seed}, "
              f"discrepancy={discrepancy:.3f}%)", file=sys.stderr)

    return z_n


def generate_iaaft_surrogates(x: np.ndarray,
                              n_surr: int,
                              tolerance: float = DEFAULT_TOLERANCE,
                              max_iter: int = DEFAULT_MAX_ITER,
                              seed: Optional[int] = None,
                              criterion: Literal["rank", "spectrum"] = "rank",
                              verbose: bool = False) -> np.ndarray:
    """
    Generate several IAAFT surrogates of one sequence.

    Parameters
    ----------
    x : np.ndarray, shape (N,)
        Input sequence
    n_surr : int
        Number of surrogates
    tolerance, max_iter, criterion
        See generate_iaaft_surrogate
    seed : int or None
        Base seed; surrogate k uses trial_seed(seed, k, 0)
    verbose : bool, default False
        Show progress bar

    Returns
    -------
    np.ndarray, shape (n_surr, N)
        IAAFT surrogates
    """
    context = initialize_surrogate_context(x)
    base_seed = clock_seed() if seed is None else seed
    surrogates = np.zeros((n_surr, len(context)), dtype=float)

    iterator = tqdm(range(n_surr), desc="IAAFT surrogates", disable=not verbose)

    for k in iterator:
        surrogates[k] = generate_iaaft_surrogate(
            context, tolerance=tolerance, seed=trial_seed(base_seed, k, 0),
            max_iter=max_iter, criterion=criterion
        )

    return surrogates


def generate_twin_iaaft_surrogates(x: np.ndarray,
                                   y: np.ndarray,
                                   n_surr: int,
                                   tolerance: float = DEFAULT_TOLERANCE,
                                   max_iter: int = DEFAULT_MAX_ITER,
                                   seed: Optional[int] = None,
                                   verbose: bool = False) -> Tuple[np.ndarray, np.ndarray]:
    """
    Generate independent IAAFT surrogate pairs for two sequences.

    Each surrogate keeps the distribution and spectrum of its own
    sequence; the cross-correlation between x and y is destroyed. Pair k
    uses the seeds trial_seed(seed, k, 0) and trial_seed(seed, k, 1), the
    same schedule as the p-value workflow.

    Parameters
    ----------
    x, y : np.ndarray, shape (N,)
        Input sequences (must have same length)
    n_surr : int
        Number of surrogate pairs
    tolerance, max_iter
        See generate_iaaft_surrogate
    seed : int or None
        Base seed
    verbose : bool, default False
        Show progress bar

    Returns
    -------
    x_surr : np.ndarray, shape (n_surr, N)
    y_surr : np.ndarray, shape (n_surr, N)
    """
    x = np.asarray(x, dtype=float)
    y = np.asarray(y, dtype=float)

    if x.shape != y.shape:
        raise ValueError("x and y must have same shape")

    context_x = initialize_surrogate_context(x)
    context_y = initialize_surrogate_context(y)
    base_seed = clock_seed() if seed is None else seed

    n = x.shape[0]
    x_surr = np.zeros((n_surr, n), dtype=float)
    y_surr = np.zeros((n_surr, n), dtype=float)

    iterator = tqdm(range(n_surr), desc="IAAFT (paired)", disable=not verbose)

    for k in iterator:
        x_surr[k] = generate_iaaft_surrogate(context_x, tolerance, trial_seed(base_seed, k, 0), max_iter)
        y_surr[k] = generate_iaaft_surrogate(context_y, tolerance, trial_seed(base_seed, k, 1), max_iter)

    return x_surr, y_surr

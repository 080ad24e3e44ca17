"""
Correlation diagram workflow for a pair of sequences.

Computes the observed correlation diagram and, optionally, its p-value
diagram from IAAFT surrogate pairs, sequentially or with a process pool.
"""

import os
import sys
import numpy as np
import pandas as pd
import multiprocessing
from tqdm import tqdm
from typing import Optional, Union, Literal

from .core import compute_diagram, CorrelationDiagram, PValueDiagram
from .geometry import check_window_settings, check_sequences
from ..surrogates.generators import (
    SurrogateContext,
    initialize_surrogate_context,
    generate_iaaft_surrogate,
    DEFAULT_TOLERANCE,
    DEFAULT_MAX_ITER,
)
from ..surrogates.seeds import trial_seed, clock_seed
from ..surrogates.testing import PValueAccumulator

DEFAULT_N_SURROGATES = 100


def _run_trial(context_a: SurrogateContext,
               context_b: SurrogateContext,
               base_width: int,
               n_widths: int,
               tau: int,
               tolerance: float,
               max_iter: int,
               seed_a: int,
               seed_b: int) -> CorrelationDiagram:
    """One surrogate trial: a surrogate pair and its correlation diagram."""
    surr_a = generate_iaaft_surrogate(context_a, tolerance=tolerance, seed=seed_a, max_iter=max_iter)
    surr_b = generate_iaaft_surrogate(context_b, tolerance=tolerance, seed=seed_b, max_iter=max_iter)
    return compute_diagram(surr_a, surr_b, base_width, n_widths, tau)


def _process_trial_wrapper(args):
    """
    Wrapper function for parallel processing of surrogate trials.

    This function must be at module level (not nested) to be picklable
    for multiprocessing.

    Parameters
    ----------
    args : tuple
        (context_a, context_b, base_width, n_widths, tau, tolerance,
        max_iter, seed_a, seed_b)

    Returns
    -------
    CorrelationDiagram
        Correlation diagram of the surrogate pair
    """
    return _run_trial(*args)


def compute_pvalue_diagram(seq_a: np.ndarray,
                           seq_b: np.ndarray,
                           base_width: int,
                           n_widths: int,
                           tau: int = 0,
                           n_surrogates: int = DEFAULT_N_SURROGATES,
                           parallel: bool = False,
                           n_jobs: Optional[int] = None,
                           seed: Optional[int] = None,
                           tolerance: float = DEFAULT_TOLERANCE,
                           max_iter: int = DEFAULT_MAX_ITER,
                           real_diagram: Optional[CorrelationDiagram] = None,
                           verbose: bool = False) -> PValueDiagram:
    """
    Estimate the p-value diagram of two sequences from IAAFT surrogates.

    Parameters
    ----------
    seq_a, seq_b : np.ndarray, shape (N,)
        Analyzed sequences
    base_width : int
        Base window width L (even)
    n_widths : int
        Number of width levels W
    tau : int, default 0
        Symmetric delay
    n_surrogates : int, default 100
        Number of surrogate trials M
    parallel : bool, default False
        Run trials in a process pool
    n_jobs : int or None
        Pool size (default: number of CPUs)
    seed : int or None
        Base seed (default: derived from the process clock)
    tolerance : float, default 1.0
        IAAFT convergence threshold (percent of reordered samples)
    max_iter : int, default 1000
        IAAFT iteration cap
    real_diagram : CorrelationDiagram or None
        Observed diagram, computed if not given
    verbose : bool, default False
        Show progress

    Returns
    -------
    PValueDiagram
        Fraction of trials whose |correlation| reaches the observed one
    """
    if n_surrogates <= 0:
        raise ValueError(f"Number of surrogates must be positive, got M={n_surrogates}")

    if real_diagram is None:
        real_diagram = compute_diagram(seq_a, seq_b, base_width, n_widths, tau)

    context_a = initialize_surrogate_context(seq_a)
    context_b = initialize_surrogate_context(seq_b)
    base_seed = clock_seed() if seed is None else seed
    tau = real_diagram.tau

    accumulator = PValueAccumulator(real_diagram)

    args_list = (
        (context_a, context_b, base_width, n_widths, tau, tolerance, max_iter,
         trial_seed(base_seed, i, 0), trial_seed(base_seed, i, 1))
        for i in range(n_surrogates)
    )

    if parallel:
        processes = n_jobs if n_jobs else os.cpu_count()
        if verbose:
            print(f"Running {n_surrogates} surrogate trials on {processes} workers...", file=sys.stderr)

        # chunksize=1: trials are handed out one at a time as workers free up
        with multiprocessing.Pool(processes=processes) as pool:
            for surrogate_diagram in tqdm(pool.imap_unordered(_process_trial_wrapper, args_list, chunksize=1),
                                          total=n_surrogates,
                                          desc="Surrogate trials",
                                          disable=not verbose):
                accumulator.accumulate(surrogate_diagram)
    else:
        for args in tqdm(args_list, total=n_surrogates, desc="Surrogate trials", disable=not verbose):
            accumulator.accumulate(_run_trial(*args))

    return accumulator.finalize(n_surrogates)


def run_dxc_workflow(sequences: Union[np.ndarray, pd.DataFrame],
                     index_a: int,
                     index_b: int,
                     n_widths: int,
                     base_width: int,
                     tau: int = 0,
                     output: Literal["pvalue", "correlation"] = "pvalue",
                     n_surrogates: int = DEFAULT_N_SURROGATES,
                     parallel: bool = False,
                     n_jobs: Optional[int] = None,
                     seed: Optional[int] = None,
                     tolerance: float = DEFAULT_TOLERANCE,
                     max_iter: int = DEFAULT_MAX_ITER,
                     verbose: bool = True) -> Union[CorrelationDiagram, PValueDiagram]:
    """
    Run the full analysis of two columns of a data matrix.

    Parameters
    ----------
    sequences : np.ndarray or pd.DataFrame, shape (N, n_sequences)
        Data matrix, one sequence per column
    index_a, index_b : int
        0-based column indices of the sequences to analyze
    n_widths : int
        Number of width levels W
    base_width : int
        Base window width L; an odd value is reduced by one with a warning
    tau : int, default 0
        Symmetric delay
    output : {'pvalue', 'correlation'}, default 'pvalue'
        Which diagram to return
    n_surrogates, parallel, n_jobs, seed, tolerance, max_iter
        See compute_pvalue_diagram
    verbose : bool, default True
        Show progress on stderr (the odd width warning is always printed)

    Returns
    -------
    CorrelationDiagram or PValueDiagram
    """
    if output not in ("pvalue", "correlation"):
        raise ValueError("output must be 'pvalue' or 'correlation'")

    data = sequences.to_numpy(dtype=float) if isinstance(sequences, pd.DataFrame) else sequences
    seq_a, seq_b = check_sequences(data, index_a, index_b)
    base_width = check_window_settings(len(seq_a), n_widths, base_width, tau)

    if output == "pvalue" and n_surrogates <= 0:
        raise ValueError(f"Number of surrogates must be positive, got M={n_surrogates}")

    real_diagram = compute_diagram(seq_a, seq_b, base_width, n_widths, tau)

    if output == "correlation":
        return real_diagram

    return compute_pvalue_diagram(
        seq_a, seq_b, base_width, n_widths, tau,
        n_surrogates=n_surrogates,
        parallel=parallel,
        n_jobs=n_jobs,
        seed=seed,
        tolerance=tolerance,
        max_iter=max_iter,
        real_diagram=real_diagram,
        verbose=verbose,
    )

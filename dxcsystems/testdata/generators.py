"""
Test data generators with known coupling for correlation diagram validation.
"""

import numpy as np
import pandas as pd
from typing import Tuple, Optional


def make_independent_pair(n: int = 500,
                          seed: Optional[int] = None) -> Tuple[np.ndarray, np.ndarray]:
    """Two independent white-noise sequences."""
    rng = np.random.default_rng(seed)
    return rng.standard_normal(n), rng.standard_normal(n)


def make_correlated_pair(n: int = 500,
                         rho: float = 0.8,
                         seed: Optional[int] = None) -> Tuple[np.ndarray, np.ndarray]:
    """
    Two white-noise sequences with instantaneous correlation rho.

    Parameters
    ----------
    n : int, default 500
        Number of samples
    rho : float, default 0.8
        Target correlation coefficient, |rho| <= 1
    seed : int or None
        Random seed

    Returns
    -------
    x, y : np.ndarray, shape (n,)
    """
    rng = np.random.default_rng(seed)
    x = rng.standard_normal(n)
    noise = rng.standard_normal(n)
    y = rho * x + np.sqrt(1 - rho**2) * noise
    return x, y


def make_lagged_pair(n: int = 500,
                     lag: int = 2,
                     noise: float = 0.3,
                     seed: Optional[int] = None) -> Tuple[np.ndarray, np.ndarray]:
    """
    y follows x with a delay of `lag` samples, plus noise.

    The first `lag` samples of y are pure noise.
    """
    rng = np.random.default_rng(seed)
    x = rng.standard_normal(n)
    y = noise * rng.standard_normal(n)
    y[lag:] += x[:n - lag]
    return x, y


def make_autocorrelated_pair(n: int = 500,
                             rho_auto: float = 0.8,
                             seed: Optional[int] = None) -> Tuple[np.ndarray, np.ndarray]:
    """Two independent AR(1) sequences (red noise, no coupling)."""
    rng = np.random.default_rng(seed)
    x = np.zeros(n)
    y = np.zeros(n)
    x[0], y[0] = rng.standard_normal(2)
    scale = np.sqrt(1 - rho_auto**2)
    for t in range(1, n):
        x[t] = rho_auto * x[t-1] + scale * rng.standard_normal()
        y[t] = rho_auto * y[t-1] + scale * rng.standard_normal()
    return x, y


def make_seasonal_pair(n: int = 500,
                       period: int = 24,
                       noise: float = 0.3,
                       seed: Optional[int] = None) -> Tuple[np.ndarray, np.ndarray]:
    """Two noisy copies of the same sinusoid (synchronous, non-causal)."""
    rng = np.random.default_rng(seed)
    seasonal = np.sin(2 * np.pi * np.arange(n) / period)
    return (seasonal + noise * rng.standard_normal(n),
            seasonal + noise * rng.standard_normal(n))


def make_test_dataframe(n: int = 500,
                        seed: Optional[int] = None) -> pd.DataFrame:
    """
    Create a test table with one column per scenario.

    Columns (in order):
    - independent_X, independent_Y: no relationship
    - correlated_X, correlated_Y: instantaneous correlation 0.8
    - lagged_X, lagged_Y: Y follows X by 2 samples
    - autocorr_X, autocorr_Y: independent red noise
    - seasonal_X, seasonal_Y: shared sinusoid
    - identical_X, identical_Y: the same sequence twice

    Parameters
    ----------
    n : int, default 500
        Number of samples
    seed : int or None
        Random seed for reproducibility

    Returns
    -------
    pd.DataFrame
        Table of shape (n, 12)
    """
    seeds = np.random.SeedSequence(seed).generate_state(5)

    x_indep, y_indep = make_independent_pair(n, seed=seeds[0])
    x_corr, y_corr = make_correlated_pair(n, rho=0.8, seed=seeds[1])
    x_lag, y_lag = make_lagged_pair(n, lag=2, seed=seeds[2])
    x_auto, y_auto = make_autocorrelated_pair(n, seed=seeds[3])
    x_seas, y_seas = make_seasonal_pair(n, seed=seeds[4])

    df = pd.DataFrame({
        'independent_X': x_indep,
        'independent_Y': y_indep,
        'correlated_X': x_corr,
        'correlated_Y': y_corr,
        'lagged_X': x_lag,
        'lagged_Y': y_lag,
        'autocorr_X': x_auto,
        'autocorr_Y': y_auto,
        'seasonal_X': x_seas,
        'seasonal_Y': y_seas,
        'identical_X': x_corr,
        'identical_Y': x_corr.copy(),
    })

    return df

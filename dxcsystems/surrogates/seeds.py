"""
Seed schedule for surrogate trials.

Trial i draws two surrogates (one per analyzed sequence), seeded with
base + 2*i and base + 2*i + 1. This is the sequence a running counter
advanced by one per surrogate would produce, so a sequential loop and a
pool of workers completing trials in any order use the same seeds.
"""

import time

SEED_MODULUS = 2 ** 32


def trial_seed(base_seed: int, trial_index: int, sub_index: int = 0) -> int:
    """
    Seed of surrogate `sub_index` (0 or 1) in trial `trial_index`.

    Parameters
    ----------
    base_seed : int
        Run-wide base seed
    trial_index : int
        0-based trial number
    sub_index : int, default 0
        0 for the first sequence, 1 for the second

    Returns
    -------
    int
        Seed in [0, 2**32)
    """
    if sub_index not in (0, 1):
        raise ValueError(f"sub_index must be 0 or 1, got {sub_index}")
    return (base_seed + 2 * trial_index + sub_index) % SEED_MODULUS


def clock_seed() -> int:
    """Base seed derived from the process clock."""
    return time.perf_counter_ns() % SEED_MODULUS

"""
Test data generation for correlation diagram validation and demonstration.

This module provides synthetic sequence pairs with known coupling.
"""

from .generators import (
    make_independent_pair,
    make_correlated_pair,
    make_lagged_pair,
    make_autocorrelated_pair,
    make_seasonal_pair,
    make_test_dataframe,
)

__all__ = [
    'make_independent_pair',
    'make_correlated_pair',
    'make_lagged_pair',
    'make_autocorrelated_pair',
    'make_seasonal_pair',
    'make_test_dataframe',
]

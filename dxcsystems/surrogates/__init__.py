"""
Surrogate sequence generation and significance testing for correlation diagrams.

This module provides IAAFT surrogates, which preserve the value
distribution and power spectrum of a sequence while destroying its phase
relationship with a partner sequence, and the empirical p-value machinery
built on them.
"""

from .generators import (
    SurrogateContext,
    initialize_surrogate_context,
    generate_iaaft_surrogate,
    generate_iaaft_surrogates,
    generate_twin_iaaft_surrogates,
    DEFAULT_TOLERANCE,
    DEFAULT_MAX_ITER,
)

from .seeds import (
    trial_seed,
    clock_seed,
)

from .testing import (
    PValueAccumulator,
    fdr_correction,
    bonferroni_correction,
    significant_cells,
    summarize_pvalue_diagram,
)

__all__ = [
    # Generators
    'SurrogateContext',
    'initialize_surrogate_context',
    'generate_iaaft_surrogate',
    'generate_iaaft_surrogates',
    'generate_twin_iaaft_surrogates',
    'DEFAULT_TOLERANCE',
    'DEFAULT_MAX_ITER',
    # Seeds
    'trial_seed',
    'clock_seed',
    # Testing
    'PValueAccumulator',
    'fdr_correction',
    'bonferroni_correction',
    'significant_cells',
    'summarize_pvalue_diagram',
]

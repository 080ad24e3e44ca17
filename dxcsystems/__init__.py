"""
DXCsystems: multi-scale cross-correlation diagrams with surrogate testing.

This package provides standardized tools for:
- Windowed correlation diagrams over several time scales
- Delay-averaged (zero-delay) correlation estimates
- IAAFT surrogate generation
- Surrogate-based p-value diagrams, sequential or parallel
"""

__version__ = "0.1.0"

# Import main modules for convenient access
from . import diagram
from . import surrogates
from . import tables

# Import key functions for direct access
from .diagram import (
    CorrelationDiagram,
    PValueDiagram,
    compute_diagram,
    compute_pvalue_diagram,
    run_dxc_workflow,
)

from .surrogates import (
    SurrogateContext,
    initialize_surrogate_context,
    generate_iaaft_surrogate,
    PValueAccumulator,
    significant_cells,
)

from .tables import (
    load_sequences,
    save_diagram,
)

__all__ = [
    'diagram',
    'surrogates',
    'tables',
    # Diagrams
    'CorrelationDiagram',
    'PValueDiagram',
    'compute_diagram',
    'compute_pvalue_diagram',
    'run_dxc_workflow',
    # Surrogates
    'SurrogateContext',
    'initialize_surrogate_context',
    'generate_iaaft_surrogate',
    'PValueAccumulator',
    'significant_cells',
    # Tables
    'load_sequences',
    'save_diagram',
]

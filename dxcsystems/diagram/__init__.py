"""
Multi-scale windowed cross-correlation diagrams.

This module provides:
- Correlation diagram computation over several window widths
- Window geometry validation
- The real-vs-surrogate p-value workflow (sequential or parallel)
"""

from .core import (
    Diagram,
    CorrelationDiagram,
    PValueDiagram,
    compute_diagram,
    diagram_size,
    window_centers,
)

from .geometry import (
    correct_base_width,
    check_window_settings,
    check_sequences,
)

from .workflow import (
    compute_pvalue_diagram,
    run_dxc_workflow,
    DEFAULT_N_SURROGATES,
)

__all__ = [
    # Core
    'Diagram',
    'CorrelationDiagram',
    'PValueDiagram',
    'compute_diagram',
    'diagram_size',
    'window_centers',
    # Geometry
    'correct_base_width',
    'check_window_settings',
    'check_sequences',
    # Workflow
    'compute_pvalue_diagram',
    'run_dxc_workflow',
    'DEFAULT_N_SURROGATES',
]

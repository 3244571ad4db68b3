'''DCF calculation engine with pure math functions.'''

from fairvalue.engine.dcf import (
    classify,
    compute,
    compute_terminal_value,
    discount_factor,
    npv,
    project_fcf_margins,
    project_revenue,
)

__all__ = [
    'classify',
    'compute',
    'compute_terminal_value',
    'discount_factor',
    'npv',
    'project_fcf_margins',
    'project_revenue',
]

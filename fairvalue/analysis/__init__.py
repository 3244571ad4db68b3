'''
Valuation analysis utilities.

Note: To avoid RuntimeWarning when using -m flag, import directly:
  from fairvalue.analysis.sensitivity import SensitivityTableBuilder
'''

__all__ = [
    'SensitivityTableBuilder',
]

# Direct imports for convenience (may cause RuntimeWarning with -m flag)
from fairvalue.analysis.sensitivity import SensitivityTableBuilder

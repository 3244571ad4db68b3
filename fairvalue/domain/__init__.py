"""Domain types for the valuation engine."""

from fairvalue.domain.errors import InvalidDiscountRateError
from fairvalue.domain.errors import MissingInputError
from fairvalue.domain.errors import ValuationInputError
from fairvalue.domain.types import Assumptions
from fairvalue.domain.types import PolicyOutput
from fairvalue.domain.types import ProjectionRow
from fairvalue.domain.types import ValuationResult

__all__ = [
    'Assumptions',
    'ProjectionRow',
    'ValuationResult',
    'PolicyOutput',
    'ValuationInputError',
    'MissingInputError',
    'InvalidDiscountRateError',
]

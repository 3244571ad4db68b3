'''Validation errors raised by the valuation engine.'''

from typing import Sequence

REQUIRED_FIELDS_LABEL = ('TTM revenue, FCF margin, base-year FCF, '
                         'FCF growth years 1-5, FCF growth years 6-10, '
                         'terminal growth')


class ValuationInputError(ValueError):
  '''Base class for deterministic input failures.'''


class MissingInputError(ValuationInputError):
  '''
  One or more required assumptions is absent or not a number.

  Attributes:
    missing: Names of the offending fields
  '''

  def __init__(self, missing: Sequence[str]):
    self.missing = list(missing)
    super().__init__(f'Please fill in all required fields: '
                     f'{REQUIRED_FIELDS_LABEL} '
                     f'(missing: {", ".join(self.missing)})')


class InvalidDiscountRateError(ValuationInputError):
  '''Discount rate does not exceed terminal growth; terminal value diverges.'''

  def __init__(self, discount_rate: float, terminal_growth: float):
    self.discount_rate = discount_rate
    self.terminal_growth = terminal_growth
    super().__init__(
        f'Discount rate ({discount_rate:.2%}) must be greater than terminal '
        f'growth ({terminal_growth:.2%}) to compute a terminal value')

'''
Growth path policies.

These policies turn the user's banded growth inputs into one growth rate per
year of the explicit forecast period.

The policy returns a sequence of growth rates [g1, g2, ..., gN].
'''

from abc import ABC, abstractmethod
from math import isfinite
from typing import List

from fairvalue.domain.types import PolicyOutput


class GrowthPolicy(ABC):
  '''
  Base class for growth path policies.

  Subclasses implement compute() to return the full sequence of growth rates
  for the explicit forecast period.
  '''

  @abstractmethod
  def compute(self, n_years: int) -> PolicyOutput[List[float]]:
    '''
    Compute growth rate sequence for explicit forecast period.

    Args:
      n_years: Number of explicit forecast years

    Returns:
      PolicyOutput with list of growth rates [g_year1, g_year2, ..., g_yearN]
    '''


class TwoStageGrowth(GrowthPolicy):
  '''
  Step growth: one rate for the early years, another for the rest.

  Year t (1-based) uses early_rate while t <= high_growth_years and
  late_rate afterwards. With missing_as_zero, a non-finite rate is replaced
  by 0 instead of propagating nan into the projection.
  '''

  def __init__(
      self,
      early_rate: float,
      late_rate: float,
      high_growth_years: int = 5,
      missing_as_zero: bool = False,
  ):
    '''
    Initialize two-stage growth policy.

    Args:
      early_rate: Growth rate for years 1..high_growth_years
      late_rate: Growth rate for the remaining years
      high_growth_years: Length of the first stage (default: 5)
      missing_as_zero: Treat nan/inf rates as zero growth
    '''
    self.early_rate = early_rate
    self.late_rate = late_rate
    self.high_growth_years = high_growth_years
    self.missing_as_zero = missing_as_zero

  def _resolve(self, rate: float) -> float:
    if self.missing_as_zero and not isfinite(rate):
      return 0.0
    return rate

  def rate_for_year(self, year: int) -> float:
    '''Growth rate applied when stepping from year-1 to year.'''
    if year <= self.high_growth_years:
      return self._resolve(self.early_rate)
    return self._resolve(self.late_rate)

  def compute(self, n_years: int) -> PolicyOutput[List[float]]:
    '''Compute the stepped growth rates.'''
    if n_years < 1:
      return PolicyOutput(value=[], diag={'growth_method': 'two_stage'})

    growth_rates = [self.rate_for_year(t) for t in range(1, n_years + 1)]

    return PolicyOutput(value=growth_rates,
                        diag={
                            'growth_method': 'two_stage',
                            'high_growth_years': min(self.high_growth_years,
                                                     n_years),
                            'early_rate': growth_rates[0],
                            'late_rate': growth_rates[-1],
                        })

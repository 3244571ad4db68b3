"""
Valuation policies for resolving DCF inputs.

Each policy resolves one input of the valuation model (discount rate, growth
path, base year) and returns both a value and diagnostic information.

Example:
  class MidYearBase(BaseYearPolicy):
    def compute(self, start_year) -> PolicyOutput[int]:
      year = ...  # your calculation
      return PolicyOutput(value=year, diag={'start_year_method': 'mid'})
"""

from fairvalue.policies.base_year import BaseYearPolicy
from fairvalue.policies.base_year import SuppliedOrCurrentYear
from fairvalue.policies.discount import DiscountPolicy
from fairvalue.policies.discount import FallbackDiscountRate
from fairvalue.policies.growth import GrowthPolicy
from fairvalue.policies.growth import TwoStageGrowth

__all__ = [
  'BaseYearPolicy', 'SuppliedOrCurrentYear',
  'DiscountPolicy', 'FallbackDiscountRate',
  'GrowthPolicy', 'TwoStageGrowth',
]

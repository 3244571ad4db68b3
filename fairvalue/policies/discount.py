"""
Discount rate policies.

These policies determine the required rate of return (discount rate)
used in DCF valuation.
"""

from abc import ABC
from abc import abstractmethod
from math import isfinite
from typing import Optional

from fairvalue.domain.types import Assumptions
from fairvalue.domain.types import PolicyOutput


def _usable(rate: Optional[float]) -> bool:
  return rate is not None and isfinite(rate)


class DiscountPolicy(ABC):
  """
  Base class for discount rate policies.

  Subclasses implement compute() to return a discount rate.
  """

  @abstractmethod
  def compute(self, assumptions: Assumptions) -> PolicyOutput[float]:
    """
    Compute discount rate.

    Args:
      assumptions: Valuation inputs

    Returns:
      PolicyOutput with discount rate and diagnostics
    """


class FallbackDiscountRate(DiscountPolicy):
  """
  Explicit discount rate, else required return, else a default.

  The explicit rate (WACC) wins whenever it is a finite number. An empty
  WACC field falls back to the required return, and when neither is usable
  the default rate is applied.
  """

  def __init__(self, default_rate: float = 0.10):
    """
    Initialize fallback policy.

    Args:
      default_rate: Rate used when no input is usable (default: 10%)
    """
    self.default_rate = default_rate

  def compute(self, assumptions: Assumptions) -> PolicyOutput[float]:
    """Resolve the discount rate from the assumptions."""
    if _usable(assumptions.discount_rate):
      rate, method = float(assumptions.discount_rate), 'explicit'
    elif _usable(assumptions.required_return):
      rate, method = float(assumptions.required_return), 'required_return'
    else:
      rate, method = self.default_rate, 'default'

    return PolicyOutput(
      value=rate,
      diag={
        'discount_method': method,
        'discount_rate': rate,
      }
    )

"""
Base year policies.

These policies decide which calendar year labels the base (year 0) row of
the projection.
"""

from abc import ABC
from abc import abstractmethod
from collections.abc import Callable
import datetime
from math import isfinite
from typing import Optional

from fairvalue.domain.types import PolicyOutput


def _current_year() -> int:
  return datetime.date.today().year


class BaseYearPolicy(ABC):
  """Base class for base year policies."""

  @abstractmethod
  def compute(self, start_year: Optional[float]) -> PolicyOutput[int]:
    """
    Resolve the calendar year of year 0.

    Args:
      start_year: Year supplied by the user, if any

    Returns:
      PolicyOutput with the calendar year and diagnostics
    """


class SuppliedOrCurrentYear(BaseYearPolicy):
  """
  Use the supplied year when plausible, else the current calendar year.

  A supplied value counts as plausible when it is a finite number greater
  than min_year.
  """

  def __init__(
      self,
      min_year: int = 1900,
      clock: Callable[[], int] = _current_year,
  ):
    """
    Initialize base year policy.

    Args:
      min_year: Supplied years must exceed this (default: 1900)
      clock: Returns the current calendar year
    """
    self.min_year = min_year
    self.clock = clock

  def compute(self, start_year: Optional[float]) -> PolicyOutput[int]:
    """Return supplied or current year."""
    if (start_year is not None and isfinite(start_year) and
        start_year > self.min_year):
      year, method = int(start_year), 'supplied'
    else:
      year, method = int(self.clock()), 'current_year'

    return PolicyOutput(value=year,
                        diag={
                            'start_year_method': method,
                            'start_year': year,
                        })

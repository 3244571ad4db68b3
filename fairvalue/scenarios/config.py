"""
Scenario inputs for valuation runs.

ScenarioInputs holds the values exactly as a user typed them into the input
form (strings or numbers, growth and discount rates in percent). It is a
serializable (JSON-friendly) record; to_assumptions() converts it into the
engine's Assumptions.
"""

from dataclasses import asdict
from dataclasses import dataclass
import json
from math import isfinite
from typing import Any, Optional, Union

from fairvalue.domain.types import Assumptions

FieldValue = Union[str, int, float, None]


def _is_blank(value: FieldValue) -> bool:
  return value is None or (isinstance(value, str) and not value.strip())


def to_number(value: FieldValue, default: Optional[float] = None) -> float:
  """
  Parse a plain numeric field.

  Underscore separators ('1_000') and non-finite spellings ('inf', 'nan')
  are not numbers in a form field.

  Args:
    value: Raw field value
    default: Returned for a blank field; nan if not given

  Returns:
    The number, or nan when the value is not numeric
  """
  if _is_blank(value):
    return float('nan') if default is None else default
  if isinstance(value, str) and '_' in value:
    return float('nan')
  try:
    number = float(value)
  except (TypeError, ValueError):
    return float('nan')
  if isinstance(value, str) and not isfinite(number):
    return float('nan')
  return number


def pct_to_float(value: FieldValue) -> float:
  """
  Convert a percent field to a fraction ('12' -> 0.12).

  Blank, non-numeric and non-finite values become nan.
  """
  number = to_number(value)
  if not isfinite(number):
    return float('nan')
  return number / 100


def _first_filled(*values: FieldValue) -> FieldValue:
  for value in values:
    if not _is_blank(value):
      return value
  return None


@dataclass
class ScenarioInputs:
  """
  Raw form values for a valuation.

  Attributes:
    company: Company name shown in titles
    revenue: TTM revenue
    fcf_margin_pct: TTM FCF margin (%)
    fcf_year0: Base year free cash flow
    g15_pct: FCF growth years 1-5 (%)
    g610_pct: FCF growth years 6-10 (%)
    rev_g15_pct: Revenue growth years 1-5 (%)
    rev_g610_pct: Revenue growth years 6-10 (%)
    gperp_pct: Terminal growth (%)
    wacc_pct: Discount rate / WACC (%)
    req_return_pct: Required return (%), used when WACC is blank
    cash: Cash and equivalents
    debt: Total debt
    shares: Shares outstanding
    market_price: Market price per share
    start_year: Calendar year of the base year
  """
  company: str = ''
  revenue: FieldValue = ''
  fcf_margin_pct: FieldValue = ''
  fcf_year0: FieldValue = ''
  g15_pct: FieldValue = ''
  g610_pct: FieldValue = ''
  rev_g15_pct: FieldValue = ''
  rev_g610_pct: FieldValue = ''
  gperp_pct: FieldValue = ''
  wacc_pct: FieldValue = ''
  req_return_pct: FieldValue = ''
  cash: FieldValue = ''
  debt: FieldValue = ''
  shares: FieldValue = ''
  market_price: FieldValue = ''
  start_year: FieldValue = ''

  def to_assumptions(self) -> Assumptions:
    """
    Convert form values to engine assumptions.

    A blank FCF growth field takes the matching revenue growth field. Revenue
    growth is never filled from FCF growth.
    """
    wacc = pct_to_float(self.wacc_pct)
    req_return = pct_to_float(self.req_return_pct)
    start_year = to_number(self.start_year)

    return Assumptions(
        revenue=to_number(self.revenue),
        fcf_margin=pct_to_float(self.fcf_margin_pct),
        fcf_year0=to_number(self.fcf_year0),
        growth_fcf_1to5=pct_to_float(
            _first_filled(self.g15_pct, self.rev_g15_pct)),
        growth_fcf_6to10=pct_to_float(
            _first_filled(self.g610_pct, self.rev_g610_pct)),
        growth_rev_1to5=pct_to_float(self.rev_g15_pct),
        growth_rev_6to10=pct_to_float(self.rev_g610_pct),
        terminal_growth=pct_to_float(self.gperp_pct),
        discount_rate=wacc if isfinite(wacc) else None,
        required_return=req_return if isfinite(req_return) else None,
        cash=to_number(self.cash, default=0.0),
        debt=to_number(self.debt, default=0.0),
        shares_outstanding=to_number(self.shares, default=0.0),
        market_price=to_number(self.market_price, default=0.0),
        start_year=int(start_year) if isfinite(start_year) else None,
        company=(self.company or '').strip(),
    )

  def override(self, **changes: FieldValue) -> 'ScenarioInputs':
    """Copy with the given non-None fields replaced."""
    data = self.to_dict()
    data.update({k: v for k, v in changes.items() if v is not None})
    return self.from_dict(data)

  def to_dict(self) -> dict[str, Any]:
    """Convert to dictionary."""
    return asdict(self)

  def to_json(self) -> str:
    """Serialize to JSON string."""
    return json.dumps(self.to_dict(), indent=2)

  @classmethod
  def from_dict(cls, data: dict[str, Any]) -> 'ScenarioInputs':
    """Create from dictionary."""
    return cls(**data)

  @classmethod
  def from_json(cls, json_str: str) -> 'ScenarioInputs':
    """Create from JSON string."""
    return cls.from_dict(json.loads(json_str))

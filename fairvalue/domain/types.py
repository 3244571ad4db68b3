'''
Domain types for the DCF valuation engine.

These dataclasses provide typed interfaces between the host adapter, the
engine and the renderers, so that no component depends on raw form fields.
All rates are fractions (0.10 == 10%).
'''

from dataclasses import dataclass, field
from typing import Any, Dict, Generic, List, Optional, TypeVar

import pandas as pd

T = TypeVar('T')

NAN = float('nan')


@dataclass
class PolicyOutput(Generic[T]):
  '''
  Standard output from any policy.

  Every policy returns both a computed value and diagnostic information
  explaining how the value was computed.

  Attributes:
    value: The computed value (type depends on policy)
    diag: Dictionary of diagnostic information
  '''
  value: T
  diag: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Assumptions:
  '''
  Inputs for a single valuation.

  Missing numeric values are represented as nan, which is what the percent
  converter produces for an empty field.

  Attributes:
    revenue: Trailing-twelve-month revenue (year 0)
    fcf_margin: TTM FCF margin; validated but not used by the recursion
    fcf_year0: Free cash flow of the base year
    growth_fcf_1to5: FCF growth rate for years 1-5
    growth_fcf_6to10: FCF growth rate for years 6-10
    growth_rev_1to5: Revenue growth rate for years 1-5
    growth_rev_6to10: Revenue growth rate for years 6-10
    terminal_growth: Perpetual growth rate after year 10
    discount_rate: Explicit discount rate (WACC), if given
    required_return: Required return, used when no discount rate is given
    cash: Cash and equivalents
    debt: Total debt
    shares_outstanding: Shares outstanding
    market_price: Current market price per share
    start_year: Calendar year of year 0, if given
    company: Display name
  '''
  revenue: float
  fcf_margin: float
  fcf_year0: float
  growth_fcf_1to5: float
  growth_fcf_6to10: float
  growth_rev_1to5: float = NAN
  growth_rev_6to10: float = NAN
  terminal_growth: float = NAN
  discount_rate: Optional[float] = None
  required_return: Optional[float] = None
  cash: float = 0.0
  debt: float = 0.0
  shares_outstanding: float = 0.0
  market_price: float = 0.0
  start_year: Optional[int] = None
  company: str = ''


@dataclass(frozen=True)
class ProjectionRow:
  '''
  One year of the projection.

  Row 0 is the base year: shown for reference, never discounted and never
  part of the enterprise value.
  '''
  year: int
  revenue: float
  fcf_margin: float
  fcf: float
  discount_factor: float
  present_value: float


@dataclass
class ValuationResult:
  '''
  Complete valuation result.

  Attributes:
    rows: Base year plus ten projected years
    terminal_value: Gordon growth value of flows after year 10
    terminal_present_value: terminal_value discounted 10 years
    enterprise_value: NPV of years 1-10 with terminal value in year 10
    equity_value: enterprise_value + cash - debt
    fair_value_per_share: equity_value / shares (None without shares)
    margin_of_safety: (fair value - price) / price (None if unavailable)
    recommendation: 'BUY' or 'SELL' (None if unavailable)
    discount_rate: Discount rate actually used
    terminal_growth: Terminal growth rate used
    market_price: Market price the result was compared against
    company: Display name
    diag: Diagnostics from the policies
  '''
  rows: List[ProjectionRow]
  terminal_value: float
  terminal_present_value: float
  enterprise_value: float
  equity_value: float
  fair_value_per_share: Optional[float] = None
  margin_of_safety: Optional[float] = None
  recommendation: Optional[str] = None
  discount_rate: float = NAN
  terminal_growth: float = NAN
  market_price: float = 0.0
  company: str = ''
  diag: Dict[str, Any] = field(default_factory=dict)

  @property
  def has_fair_value(self) -> bool:
    return self.fair_value_per_share is not None

  @property
  def years(self) -> List[int]:
    return [row.year for row in self.rows]

  def to_frame(self) -> pd.DataFrame:
    '''Projection rows as a DataFrame indexed by calendar year.'''
    df = pd.DataFrame([{
        'year': r.year,
        'revenue': r.revenue,
        'fcf_margin': r.fcf_margin,
        'fcf': r.fcf,
        'discount_factor': r.discount_factor,
        'present_value': r.present_value,
    } for r in self.rows])
    return df.set_index('year')

  def to_dict(self) -> Dict[str, Any]:
    '''Convert summary metrics to a flat dictionary.'''
    result = {
        'company': self.company,
        'terminal_value': self.terminal_value,
        'terminal_present_value': self.terminal_present_value,
        'enterprise_value': self.enterprise_value,
        'equity_value': self.equity_value,
        'fair_value_per_share': self.fair_value_per_share,
        'market_price': self.market_price,
        'margin_of_safety': self.margin_of_safety,
        'recommendation': self.recommendation,
        'discount_rate': self.discount_rate,
        'terminal_growth': self.terminal_growth,
    }
    result.update(self.diag)
    return result

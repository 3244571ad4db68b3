"""
Pure DCF math engine.

This module turns a set of Assumptions into a ten-year projection, a terminal
value, enterprise/equity value and a fair value per share. No I/O, no shared
state: every call works only on its arguments.

Key functions:
  compute: Main entry point, Assumptions -> ValuationResult
  project_revenue: Revenue path under banded growth
  project_fcf_margins: FCF margin recursion
  compute_terminal_value: Gordon growth terminal value
  npv: Spreadsheet-style NPV (first flow discounted one period)
"""

from collections.abc import Sequence
import dataclasses
import logging
from math import isfinite
import numbers
from typing import List, Optional, Tuple

from fairvalue.domain.errors import InvalidDiscountRateError
from fairvalue.domain.errors import MissingInputError
from fairvalue.domain.errors import ValuationInputError
from fairvalue.domain.types import Assumptions
from fairvalue.domain.types import ProjectionRow
from fairvalue.domain.types import ValuationResult
from fairvalue.policies.base_year import BaseYearPolicy
from fairvalue.policies.base_year import SuppliedOrCurrentYear
from fairvalue.policies.discount import DiscountPolicy
from fairvalue.policies.discount import FallbackDiscountRate
from fairvalue.policies.growth import TwoStageGrowth

logger = logging.getLogger(__name__)

N_YEARS = 10
HIGH_GROWTH_YEARS = 5

REQUIRED_FIELDS = (
    'revenue',
    'fcf_margin',
    'growth_fcf_1to5',
    'growth_fcf_6to10',
    'terminal_growth',
    'fcf_year0',
)

NUMERIC_FIELDS = REQUIRED_FIELDS + (
    'growth_rev_1to5',
    'growth_rev_6to10',
    'discount_rate',
    'required_return',
    'cash',
    'debt',
    'shares_outstanding',
    'market_price',
)


def project_revenue(
    revenue0: float,
    growth_path: Sequence[float],
) -> List[float]:
  """
  Compound revenue along a growth path.

  Args:
    revenue0: Base year revenue
    growth_path: Yearly growth rates [g1, g2, ..., gN]

  Returns:
    [revenue0, revenue1, ..., revenueN]
  """
  revenues = [revenue0]
  for g in growth_path:
    revenues.append(revenues[-1] * (1.0 + g))
  return revenues


def project_fcf_margins(
    margin0: float,
    fcf_growth_path: Sequence[float],
    rev_growth_path: Sequence[float],
) -> List[float]:
  """
  FCF margin recursion.

  FCF grows at the FCF rate while revenue grows at the revenue rate, so the
  margin moves by (1 + g_fcf) / (1 + g_rev) each year.

  Args:
    margin0: Base year margin (FCF0 / revenue0)
    fcf_growth_path: Yearly FCF growth rates
    rev_growth_path: Yearly revenue growth rates, same length

  Returns:
    [margin0, margin1, ..., marginN]

  Raises:
    ValuationInputError: If a revenue growth rate is exactly -100%
  """
  if len(fcf_growth_path) != len(rev_growth_path):
    raise ValueError('Growth paths must have the same length')

  margins = [margin0]
  for t, (g_fcf, g_rev) in enumerate(zip(fcf_growth_path, rev_growth_path),
                                     start=1):
    if 1.0 + g_rev == 0:
      raise ValuationInputError(
          f'Revenue growth of -100% in year {t} leaves no revenue to '
          'carry an FCF margin')
    margins.append(margins[-1] * (1.0 + g_fcf) / (1.0 + g_rev))
  return margins


def discount_factor(discount_rate: float, year: int) -> float:
  """Present value of 1 received at the end of the given year."""
  return (1.0 + discount_rate)**(-year)


def compute_terminal_value(
    final_fcf: float,
    g_terminal: float,
    discount_rate: float,
) -> float:
  """
  Compute (undiscounted) terminal value using Gordon Growth Model.

  Args:
    final_fcf: FCF in final explicit year
    g_terminal: Terminal (perpetual) growth rate
    discount_rate: Required return (r)

  Returns:
    Terminal value as of the final explicit year

  Raises:
    InvalidDiscountRateError: If discount_rate <= g_terminal (model undefined)
  """
  if discount_rate <= g_terminal:
    raise InvalidDiscountRateError(discount_rate, g_terminal)

  return (final_fcf * (1.0 + g_terminal)) / (discount_rate - g_terminal)


def npv(discount_rate: float, flows: Sequence[float]) -> float:
  """
  Net present value with the first flow discounted one full period.

  Args:
    discount_rate: Rate per period
    flows: Cash flows at the end of periods 1..N

  Returns:
    Sum of flow_i / (1 + r)^i
  """
  return sum(cf / ((1.0 + discount_rate)**i)
             for i, cf in enumerate(flows, start=1))


def classify(
    fair_value: Optional[float],
    market_price: float,
) -> Tuple[Optional[float], Optional[str]]:
  """
  Margin of safety and BUY/SELL call against the market price.

  Returns (None, None) unless the fair value is defined and the market price
  is a finite nonzero number. BUY requires fair value strictly above price.

  Args:
    fair_value: Fair value per share, or None
    market_price: Market price per share

  Returns:
    Tuple of (margin_of_safety, recommendation)
  """
  if fair_value is None or not isfinite(fair_value):
    return None, None
  if market_price is None or not isfinite(market_price) or market_price == 0:
    return None, None

  gap = fair_value - market_price
  mos = gap / market_price
  return mos, 'BUY' if gap > 0 else 'SELL'


def _validate(assumptions: Assumptions) -> None:
  missing = [
      name for name in REQUIRED_FIELDS
      if not _is_number(getattr(assumptions, name))
  ]
  if missing:
    raise MissingInputError(missing)
  if assumptions.revenue == 0:
    raise MissingInputError(['revenue'])


def _is_number(value) -> bool:
  return isinstance(value, float) and isfinite(value)


def _as_float(value):
  """float(value) for any real number type; other values pass through."""
  if isinstance(value, bool) or not isinstance(value, numbers.Number):
    return value
  try:
    return float(value)
  except (TypeError, ValueError):
    return value


def _coerce_numbers(assumptions: Assumptions) -> Assumptions:
  """Normalize numeric fields (numpy scalars, Decimal, Fraction) to float."""
  changes = {
      name: _as_float(getattr(assumptions, name)) for name in NUMERIC_FIELDS
  }
  return dataclasses.replace(assumptions, **changes)


def compute(
    assumptions: Assumptions,
    discount_policy: Optional[DiscountPolicy] = None,
    base_year_policy: Optional[BaseYearPolicy] = None,
) -> ValuationResult:
  """
  Run the full valuation.

  Stage 1: Ten explicit years; revenue and FCF growth are banded 1-5/6-10
  Stage 2: Terminal value using Gordon Growth Model, added to year 10

  Args:
    assumptions: Valuation inputs (rates as fractions)
    discount_policy: Discount rate resolution (default: fallback to 10%)
    base_year_policy: Year-0 resolution (default: supplied or current)

  Returns:
    ValuationResult with eleven rows and summary metrics

  Raises:
    MissingInputError: A required field is missing or not a number
    InvalidDiscountRateError: discount rate <= terminal growth
    ValuationInputError: discount rate <= -100%, or revenue growth of -100%
  """
  discount_policy = discount_policy or FallbackDiscountRate()
  base_year_policy = base_year_policy or SuppliedOrCurrentYear()
  assumptions = _coerce_numbers(assumptions)

  discount_result = discount_policy.compute(assumptions)
  r = discount_result.value
  base_year_result = base_year_policy.compute(assumptions.start_year)
  start_year = base_year_result.value
  logger.debug('Discount rate %.4f (%s), start year %d (%s)', r,
               discount_result.diag['discount_method'], start_year,
               base_year_result.diag['start_year_method'])

  _validate(assumptions)
  g_terminal = assumptions.terminal_growth
  if r <= g_terminal:
    raise InvalidDiscountRateError(r, g_terminal)
  if 1.0 + r <= 0:
    raise ValuationInputError(
        f'Discount rate ({r * 100:.2f}%) must be greater than -100%')

  rev_growth = TwoStageGrowth(assumptions.growth_rev_1to5,
                              assumptions.growth_rev_6to10,
                              high_growth_years=HIGH_GROWTH_YEARS,
                              missing_as_zero=True).compute(N_YEARS)
  fcf_growth = TwoStageGrowth(
      assumptions.growth_fcf_1to5,
      assumptions.growth_fcf_6to10,
      high_growth_years=HIGH_GROWTH_YEARS).compute(N_YEARS)

  revenues = project_revenue(assumptions.revenue, rev_growth.value)
  margins = project_fcf_margins(assumptions.fcf_year0 / revenues[0],
                                fcf_growth.value, rev_growth.value)

  rows = [
      ProjectionRow(year=start_year,
                    revenue=revenues[0],
                    fcf_margin=margins[0],
                    fcf=assumptions.fcf_year0,
                    discount_factor=1.0,
                    present_value=0.0)
  ]
  for t in range(1, N_YEARS + 1):
    fcf = margins[t] * revenues[t]
    df = discount_factor(r, t)
    rows.append(
        ProjectionRow(year=start_year + t,
                      revenue=revenues[t],
                      fcf_margin=margins[t],
                      fcf=fcf,
                      discount_factor=df,
                      present_value=fcf * df))

  terminal = compute_terminal_value(rows[-1].fcf, g_terminal, r)
  terminal_pv = terminal / ((1.0 + r)**N_YEARS)

  flows = [row.fcf for row in rows[1:]]
  flows[-1] += terminal
  enterprise_value = npv(r, flows)
  equity_value = enterprise_value + assumptions.cash - assumptions.debt

  fair_value = None
  if assumptions.shares_outstanding > 0:
    fair_value = equity_value / assumptions.shares_outstanding

  margin_of_safety, recommendation = classify(fair_value,
                                              assumptions.market_price)

  diag = {}
  diag.update(discount_result.diag)
  diag.update(base_year_result.diag)
  diag.update({f'rev_{k}': v for k, v in rev_growth.diag.items()})
  diag.update({f'fcf_{k}': v for k, v in fcf_growth.diag.items()})

  return ValuationResult(
      rows=rows,
      terminal_value=terminal,
      terminal_present_value=terminal_pv,
      enterprise_value=enterprise_value,
      equity_value=equity_value,
      fair_value_per_share=fair_value,
      margin_of_safety=margin_of_safety,
      recommendation=recommendation,
      discount_rate=r,
      terminal_growth=g_terminal,
      market_price=assumptions.market_price,
      company=assumptions.company,
      diag=diag,
  )

import dataclasses
from decimal import Decimal
from fractions import Fraction
import math

import pandas as pd
import pytest

from fairvalue.domain.errors import InvalidDiscountRateError
from fairvalue.domain.errors import MissingInputError
from fairvalue.domain.errors import ValuationInputError
from fairvalue.engine.dcf import classify
from fairvalue.engine.dcf import compute
from fairvalue.engine.dcf import compute_terminal_value
from fairvalue.engine.dcf import discount_factor
from fairvalue.engine.dcf import npv
from fairvalue.engine.dcf import project_fcf_margins
from fairvalue.engine.dcf import project_revenue
from fairvalue.policies.base_year import SuppliedOrCurrentYear
from fairvalue.policies.discount import FallbackDiscountRate


class TestProjectRevenue:
  """Tests for project_revenue function."""

  def test_compounds_growth(self):
    """Manual calculation: 100 -> 110 -> 121 -> 127.05."""
    revenues = project_revenue(100.0, [0.10, 0.10, 0.05])

    assert revenues == pytest.approx([100.0, 110.0, 121.0, 127.05])

  def test_empty_path(self):
    """No growth years returns the base revenue only."""
    assert project_revenue(100.0, []) == [100.0]

  def test_negative_growth(self):
    revenues = project_revenue(200.0, [-0.5, -0.5])

    assert revenues == pytest.approx([200.0, 100.0, 50.0])


class TestProjectFcfMargins:
  """Tests for project_fcf_margins function."""

  def test_equal_growth_keeps_margin(self):
    """FCF growing with revenue leaves the margin unchanged."""
    margins = project_fcf_margins(0.2, [0.1] * 4, [0.1] * 4)

    assert margins == pytest.approx([0.2] * 5)

  def test_faster_fcf_growth_expands_margin(self):
    """Manual calculation: 0.2 * 1.15 / 1.12 = 0.205357."""
    margins = project_fcf_margins(0.2, [0.15], [0.12])

    assert margins[1] == pytest.approx(0.205357, abs=1e-6)

  def test_revenue_wiped_out(self):
    """A -100% revenue year has no margin."""
    with pytest.raises(ValuationInputError, match='year 2'):
      project_fcf_margins(0.2, [0.1, 0.1], [0.1, -1.0])

  def test_mismatched_paths(self):
    with pytest.raises(ValueError, match='same length'):
      project_fcf_margins(0.2, [0.1, 0.1], [0.1])


class TestDiscounting:
  """Tests for discount_factor and npv."""

  def test_discount_factor(self):
    """1 / 1.1^2 = 0.826446."""
    assert discount_factor(0.10, 0) == 1.0
    assert discount_factor(0.10, 2) == pytest.approx(0.826446, abs=1e-6)

  def test_npv_discounts_first_flow(self):
    """Manual calculation: 110/1.1 + 121/1.21 = 200."""
    assert npv(0.10, [110.0, 121.0]) == pytest.approx(200.0)

  def test_npv_empty(self):
    assert npv(0.10, []) == 0


class TestComputeTerminalValue:
  """Tests for compute_terminal_value function."""

  def test_normal_case(self):
    """TV = (10.0 * 1.03) / (0.10 - 0.03) = 147.142857."""
    tv = compute_terminal_value(final_fcf=10.0,
                                g_terminal=0.03,
                                discount_rate=0.10)

    assert tv == pytest.approx(147.142857, abs=1e-6)

  def test_zero_terminal_growth(self):
    """TV = 10.0 / 0.10 = 100.0."""
    assert compute_terminal_value(10.0, 0.0, 0.10) == pytest.approx(100.0)

  def test_invalid_g_equals_r(self):
    """Terminal growth equals discount rate - rejected."""
    with pytest.raises(InvalidDiscountRateError):
      compute_terminal_value(10.0, 0.10, 0.10)

  def test_invalid_g_greater_than_r(self):
    with pytest.raises(InvalidDiscountRateError):
      compute_terminal_value(10.0, 0.12, 0.10)


class TestClassify:
  """Tests for classify function."""

  def test_buy(self):
    mos, action = classify(120.0, 100.0)

    assert mos == pytest.approx(0.2)
    assert action == 'BUY'

  def test_sell(self):
    mos, action = classify(80.0, 100.0)

    assert mos == pytest.approx(-0.2)
    assert action == 'SELL'

  def test_zero_margin_is_sell(self):
    """Strict threshold: equal prices give SELL."""
    mos, action = classify(100.0, 100.0)

    assert mos == 0
    assert action == 'SELL'

  @pytest.mark.parametrize('fair, market', [
      (None, 100.0),
      (float('nan'), 100.0),
      (100.0, 0.0),
      (100.0, float('nan')),
  ])
  def test_unavailable(self, fair, market):
    assert classify(fair, market) == (None, None)


class TestComputeGoogl:
  """GOOGL worked example (FY2024 base, 10% required return).

  Manual calculation:
    margin0 = 74881 / 371399 = 0.201619
    revenue1 = 371399 * 1.12 = 415966.88
    fcf_t = 74881 * 1.15^t (margin * revenue), fcf10 = 302935.41
    TV = 302935.41 * 1.04 / 0.06 = 5250880.42
    PV(TV) = 5250880.42 / 1.1^10 = 2024441.71
    EV = 2988457.13
    Equity = EV + 95148 - 41668 = 3041937.13
    Fair value = 3041937.13 / 12198 = 249.38
    MOS = (249.38 - 235) / 235 = 6.12% -> BUY
  """

  def test_rows(self, googl_result):
    rows = googl_result.rows

    assert len(rows) == 11
    assert [r.year for r in rows] == list(range(2024, 2035))
    assert rows[0].fcf_margin == pytest.approx(0.201619, abs=1e-6)
    assert rows[0].fcf == 74881.0
    assert rows[0].discount_factor == 1.0
    assert rows[0].present_value == 0.0
    assert rows[1].revenue == pytest.approx(415966.88, abs=1e-6)
    assert rows[1].fcf == pytest.approx(86113.15, abs=1e-4)
    assert rows[10].fcf == pytest.approx(302935.4088, abs=1e-3)

  def test_summary(self, googl_result):
    assert googl_result.discount_rate == pytest.approx(0.10)
    assert googl_result.terminal_value == pytest.approx(5250880.42, abs=0.01)
    assert googl_result.terminal_present_value == pytest.approx(2024441.71,
                                                                abs=0.01)
    assert googl_result.enterprise_value == pytest.approx(2988457.13,
                                                          abs=0.01)
    assert googl_result.equity_value == pytest.approx(
        googl_result.enterprise_value + 95148 - 41668)
    assert googl_result.fair_value_per_share == pytest.approx(249.38,
                                                              abs=0.01)
    assert googl_result.margin_of_safety == pytest.approx(0.0612, abs=1e-4)
    assert googl_result.recommendation == 'BUY'

  def test_diagnostics(self, googl_result):
    assert googl_result.diag['discount_method'] == 'required_return'
    assert googl_result.diag['start_year_method'] == 'supplied'
    assert googl_result.diag['rev_early_rate'] == 0.12
    assert googl_result.diag['fcf_late_rate'] == 0.15

  def test_ev_equals_pv_sum_plus_terminal(self, googl_result):
    """EV = sum(PV 1..10) + PV(TV)."""
    pv_sum = sum(r.present_value for r in googl_result.rows[1:])

    assert googl_result.enterprise_value == pytest.approx(
        pv_sum + googl_result.terminal_present_value)

  def test_idempotent(self, googl_assumptions):
    assert compute(googl_assumptions) == compute(googl_assumptions)


class TestComputeProperties:
  """Structural properties of compute."""

  def test_flat_perpetuity(self, flat_assumptions):
    """Flat FCF of 100 at 10% is worth 1000; fair value equals price."""
    result = compute(flat_assumptions)

    assert result.enterprise_value == pytest.approx(1000.0)
    assert result.terminal_value == pytest.approx(1000.0)
    assert result.fair_value_per_share == pytest.approx(100.0)
    assert result.margin_of_safety == pytest.approx(0.0, abs=1e-12)
    assert all(r.fcf_margin == pytest.approx(0.1) for r in result.rows)

  def test_revenue_banded_growth(self, flat_assumptions):
    """Years 1-5 use the first band, 6-10 the second."""
    case = dataclasses.replace(flat_assumptions,
                               growth_rev_1to5=0.10,
                               growth_rev_6to10=0.02)
    result = compute(case)

    for t in range(11):
      expected = 1000.0 * 1.10**min(t, 5) * 1.02**max(t - 5, 0)
      assert result.rows[t].revenue == pytest.approx(expected)

  def test_fcf_independent_of_revenue_growth(self, flat_assumptions):
    """Revenue growth moves the margin, not the FCF."""
    base = compute(flat_assumptions)
    case = dataclasses.replace(flat_assumptions,
                               growth_rev_1to5=0.20,
                               growth_rev_6to10=0.08)
    result = compute(case)

    for a, b in zip(base.rows, result.rows):
      assert a.fcf == pytest.approx(b.fcf)
    assert result.rows[10].fcf_margin < base.rows[10].fcf_margin

  def test_missing_revenue_growth_is_zero(self, flat_assumptions):
    case = dataclasses.replace(flat_assumptions,
                               growth_rev_1to5=float('nan'),
                               growth_rev_6to10=float('nan'))
    result = compute(case)

    assert all(r.revenue == 1000.0 for r in result.rows)

  def test_zero_shares(self, flat_assumptions):
    """Fair value undefined, EV and equity still computed."""
    result = compute(dataclasses.replace(flat_assumptions,
                                         shares_outstanding=0.0))

    assert result.fair_value_per_share is None
    assert not result.has_fair_value
    assert result.margin_of_safety is None
    assert result.recommendation is None
    assert math.isfinite(result.enterprise_value)
    assert math.isfinite(result.equity_value)

  def test_zero_market_price(self, flat_assumptions):
    result = compute(dataclasses.replace(flat_assumptions, market_price=0.0))

    assert result.fair_value_per_share == pytest.approx(100.0)
    assert result.margin_of_safety is None
    assert result.recommendation is None

  def test_cash_and_debt(self, flat_assumptions):
    result = compute(dataclasses.replace(flat_assumptions,
                                         cash=300.0,
                                         debt=100.0))

    assert result.equity_value == pytest.approx(1200.0)
    assert result.fair_value_per_share == pytest.approx(120.0)
    assert result.recommendation == 'BUY'

  def test_default_start_year(self, flat_assumptions):
    case = dataclasses.replace(flat_assumptions, start_year=None)
    result = compute(case,
                     base_year_policy=SuppliedOrCurrentYear(clock=lambda: 2031))

    assert result.years == list(range(2031, 2042))

  def test_explicit_discount_rate_wins(self, googl_assumptions):
    case = dataclasses.replace(googl_assumptions, discount_rate=0.09)
    result = compute(case)

    assert result.discount_rate == 0.09
    assert result.diag['discount_method'] == 'explicit'

  def test_default_discount_rate(self, googl_assumptions):
    case = dataclasses.replace(googl_assumptions, required_return=None)
    result = compute(case, discount_policy=FallbackDiscountRate())

    assert result.discount_rate == 0.10
    assert result.diag['discount_method'] == 'default'


class TestNumericTypes:
  """Any real number type is accepted for numeric inputs."""

  def test_pandas_integer(self, googl_assumptions, googl_result):
    """Integer columns come back from pandas as numpy.int64."""
    revenue = pd.Series([371399]).iloc[0]
    case = dataclasses.replace(googl_assumptions, revenue=revenue)

    result = compute(case)

    assert result.fair_value_per_share == pytest.approx(
        googl_result.fair_value_per_share)

  def test_decimal_and_fraction(self, googl_assumptions, googl_result):
    case = dataclasses.replace(googl_assumptions,
                               fcf_year0=Decimal('74881'),
                               terminal_growth=Fraction(1, 25),
                               required_return=Decimal('0.10'),
                               cash=Decimal('95148'))

    result = compute(case)

    assert result.enterprise_value == pytest.approx(
        googl_result.enterprise_value)
    assert result.equity_value == pytest.approx(googl_result.equity_value)
    assert result.discount_rate == pytest.approx(0.10)

  @pytest.mark.parametrize('value', ['371399', True, None])
  def test_non_numbers_are_missing(self, googl_assumptions, value):
    case = dataclasses.replace(googl_assumptions, revenue=value)

    with pytest.raises(MissingInputError) as excinfo:
      compute(case)

    assert excinfo.value.missing == ['revenue']


class TestComputeErrors:
  """Validation failures."""

  @pytest.mark.parametrize('field', [
      'revenue',
      'fcf_margin',
      'growth_fcf_1to5',
      'growth_fcf_6to10',
      'terminal_growth',
      'fcf_year0',
  ])
  def test_missing_required_field(self, googl_assumptions, field):
    case = dataclasses.replace(googl_assumptions, **{field: float('nan')})

    with pytest.raises(MissingInputError) as excinfo:
      compute(case)

    assert excinfo.value.missing == [field]
    assert 'terminal growth' in str(excinfo.value)

  def test_reports_all_missing(self, googl_assumptions):
    case = dataclasses.replace(googl_assumptions,
                               revenue=float('nan'),
                               fcf_year0=float('inf'))

    with pytest.raises(MissingInputError) as excinfo:
      compute(case)

    assert excinfo.value.missing == ['revenue', 'fcf_year0']

  def test_zero_revenue(self, googl_assumptions):
    with pytest.raises(MissingInputError):
      compute(dataclasses.replace(googl_assumptions, revenue=0.0))

  def test_discount_equals_terminal(self, googl_assumptions):
    case = dataclasses.replace(googl_assumptions,
                               discount_rate=0.04,
                               terminal_growth=0.04)

    with pytest.raises(InvalidDiscountRateError, match='must be greater'):
      compute(case)

  def test_discount_below_terminal(self, googl_assumptions):
    case = dataclasses.replace(googl_assumptions, terminal_growth=0.12)

    with pytest.raises(InvalidDiscountRateError) as excinfo:
      compute(case)

    assert excinfo.value.discount_rate == 0.10
    assert excinfo.value.terminal_growth == 0.12

  def test_missing_checked_before_discount(self, googl_assumptions):
    """Missing fields are reported ahead of the discount rate check."""
    case = dataclasses.replace(googl_assumptions,
                               revenue=float('nan'),
                               terminal_growth=0.5)

    with pytest.raises(MissingInputError):
      compute(case)

  def test_discount_rate_at_minus_100_percent(self, googl_assumptions):
    """r = -100% has no discount factor even when r > gT."""
    case = dataclasses.replace(googl_assumptions,
                               discount_rate=-1.0,
                               terminal_growth=-2.0)

    with pytest.raises(ValuationInputError, match='greater than -100%'):
      compute(case)

from fairvalue.domain.types import Assumptions
from fairvalue.domain.types import PolicyOutput
from fairvalue.policies.discount import FallbackDiscountRate


def _assumptions(**rates) -> Assumptions:
  return Assumptions(revenue=100.0,
                     fcf_margin=0.1,
                     fcf_year0=10.0,
                     growth_fcf_1to5=0.0,
                     growth_fcf_6to10=0.0,
                     **rates)


class TestFallbackDiscountRate:
  """Tests for FallbackDiscountRate discount policy."""

  def test_explicit_rate(self):
    """Explicit WACC wins over the required return."""
    policy = FallbackDiscountRate()
    result = policy.compute(_assumptions(discount_rate=0.08,
                                         required_return=0.12))

    assert isinstance(result, PolicyOutput)
    assert result.value == 0.08
    assert result.diag['discount_method'] == 'explicit'
    assert result.diag['discount_rate'] == 0.08

  def test_required_return_fallback(self):
    policy = FallbackDiscountRate()
    result = policy.compute(_assumptions(required_return=0.12))

    assert result.value == 0.12
    assert result.diag['discount_method'] == 'required_return'

  def test_nan_explicit_rate_falls_back(self):
    """An unparseable WACC behaves like an empty one."""
    policy = FallbackDiscountRate()
    result = policy.compute(_assumptions(discount_rate=float('nan'),
                                         required_return=0.11))

    assert result.value == 0.11

  def test_default_initialization(self):
    """Default to 10% when nothing usable is given."""
    policy = FallbackDiscountRate()
    result = policy.compute(_assumptions())

    assert result.value == 0.10
    assert result.diag['discount_method'] == 'default'

  def test_custom_default(self):
    policy = FallbackDiscountRate(default_rate=0.07)
    result = policy.compute(_assumptions(required_return=float('inf')))

    assert result.value == 0.07

import datetime

import pytest

from fairvalue.domain.types import PolicyOutput
from fairvalue.policies.base_year import SuppliedOrCurrentYear


class TestSuppliedOrCurrentYear:
  """Tests for SuppliedOrCurrentYear policy."""

  def test_supplied_year(self):
    policy = SuppliedOrCurrentYear(clock=lambda: 2030)
    result = policy.compute(2024)

    assert isinstance(result, PolicyOutput)
    assert result.value == 2024
    assert result.diag['start_year_method'] == 'supplied'

  @pytest.mark.parametrize('start_year', [None, 0, 1900, float('nan'),
                                          float('inf')])
  def test_falls_back_to_clock(self, start_year):
    """Missing, implausible or non-finite years use the current year."""
    policy = SuppliedOrCurrentYear(clock=lambda: 2030)
    result = policy.compute(start_year)

    assert result.value == 2030
    assert result.diag['start_year_method'] == 'current_year'

  def test_first_plausible_year(self):
    policy = SuppliedOrCurrentYear(clock=lambda: 2030)

    assert policy.compute(1901).value == 1901

  def test_default_clock(self):
    result = SuppliedOrCurrentYear().compute(None)

    assert result.value == datetime.date.today().year

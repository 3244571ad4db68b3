import matplotlib
import pytest

from fairvalue.domain.types import Assumptions
from fairvalue.engine.dcf import compute
from fairvalue.scenarios.config import ScenarioInputs

matplotlib.use('Agg')


@pytest.fixture
def googl_inputs() -> ScenarioInputs:
  """GOOGL worked example as typed into the form."""
  return ScenarioInputs(
      company='GOOGL',
      revenue='371399',
      fcf_margin_pct='27.45',
      fcf_year0='74881',
      g15_pct='15',
      g610_pct='15',
      rev_g15_pct='12',
      rev_g610_pct='12',
      gperp_pct='4',
      wacc_pct='',
      req_return_pct='10',
      cash='95148',
      debt='41668',
      shares='12198',
      market_price='235',
      start_year='2024',
  )


@pytest.fixture
def googl_assumptions() -> Assumptions:
  """GOOGL worked example, rates as fractions."""
  return Assumptions(
      revenue=371399.0,
      fcf_margin=0.2745,
      fcf_year0=74881.0,
      growth_fcf_1to5=0.15,
      growth_fcf_6to10=0.15,
      growth_rev_1to5=0.12,
      growth_rev_6to10=0.12,
      terminal_growth=0.04,
      required_return=0.10,
      cash=95148.0,
      debt=41668.0,
      shares_outstanding=12198.0,
      market_price=235.0,
      start_year=2024,
      company='GOOGL',
  )


@pytest.fixture
def googl_result(googl_assumptions):
  return compute(googl_assumptions)


@pytest.fixture
def flat_assumptions() -> Assumptions:
  """Zero growth everywhere, FCF=100 on revenue 1000, r=10%, gT=0%."""
  return Assumptions(
      revenue=1000.0,
      fcf_margin=0.10,
      fcf_year0=100.0,
      growth_fcf_1to5=0.0,
      growth_fcf_6to10=0.0,
      growth_rev_1to5=0.0,
      growth_rev_6to10=0.0,
      terminal_growth=0.0,
      discount_rate=0.10,
      shares_outstanding=10.0,
      market_price=100.0,
      start_year=2020,
  )

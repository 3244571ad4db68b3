"""
Scenario registry for mapping string names to preset inputs.

This lets the CLI and tests refer to worked examples by name.

To add a new preset:
1. Write a factory function returning ScenarioInputs
2. Register it in SCENARIOS

Example:
  def _msft_2024() -> ScenarioInputs:
    return ScenarioInputs(company='MSFT', revenue='245122', ...)

  SCENARIOS['msft_2024'] = _msft_2024
"""

from collections.abc import Callable

from fairvalue.scenarios.config import ScenarioInputs


def _blank() -> ScenarioInputs:
  return ScenarioInputs()


def _googl_2024() -> ScenarioInputs:
  """Alphabet, FY2024 base year, 10% required return, no explicit WACC."""
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


SCENARIOS: dict[str, Callable[[], ScenarioInputs]] = {
    'blank': _blank,
    'googl_2024': _googl_2024,
}


def get_scenario(name: str) -> ScenarioInputs:
  """
  Create preset inputs by name.

  Args:
    name: Registered scenario name

  Returns:
    Fresh ScenarioInputs instance

  Raises:
    KeyError: If the name is not registered
  """
  try:
    factory = SCENARIOS[name]
  except KeyError as e:
    raise KeyError(f"Unknown scenario: '{name}'. "
                   f'Available: {list(SCENARIOS.keys())}') from e
  return factory()


def list_scenarios() -> list[str]:
  """Return registered scenario names."""
  return list(SCENARIOS.keys())

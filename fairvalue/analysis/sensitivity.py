"""
Sensitivity analysis for DCF valuation.

This module provides tools to generate 2D sensitivity tables that show
how fair value per share varies across different discount rates and
terminal growth rates.

CLI Usage:
  python -m fairvalue.analysis.sensitivity \\
      --scenario googl_2024 \\
      --discount-rates 0.08,0.10,0.12 \\
      --growth-rates 0.02,0.03,0.04
"""

import argparse
import dataclasses
import logging
from pathlib import Path

import pandas as pd

from fairvalue.domain.errors import ValuationInputError
from fairvalue.domain.types import Assumptions
from fairvalue.engine.dcf import compute
from fairvalue.scenarios.registry import get_scenario
from fairvalue.scenarios.registry import list_scenarios

logger = logging.getLogger(__name__)


class SensitivityTableBuilder:
  """
  Build 2D sensitivity tables for fair value analysis.

  Varies discount rate and terminal growth rate while keeping every other
  assumption fixed.
  """

  def __init__(self, assumptions: Assumptions):
    """
    Initialize sensitivity table builder.

    The base case is computed once so that missing inputs fail here rather
    than inside the grid.

    Args:
        assumptions: Base case assumptions

    Raises:
        MissingInputError: A required field is missing
        InvalidDiscountRateError: Base case discount rate <= terminal growth
    """
    self.assumptions = assumptions
    self.base = compute(assumptions)

    logger.info('Initialized SensitivityTableBuilder')
    logger.info('  Base discount rate: %.2f%%', self.base.discount_rate * 100)
    logger.info('  Base terminal growth: %.2f%%',
                self.base.terminal_growth * 100)

  def fair_value(self, discount_rate: float, terminal_growth: float) -> float:
    """Fair value per share for one cell; nan where undefined."""
    case = dataclasses.replace(self.assumptions,
                               discount_rate=discount_rate,
                               terminal_growth=terminal_growth)
    try:
      result = compute(case)
    except ValuationInputError:
      return float('nan')
    if result.fair_value_per_share is None:
      return float('nan')
    return result.fair_value_per_share

  def build(
      self,
      discount_rates: list[float],
      terminal_growth_rates: list[float],
  ) -> pd.DataFrame:
    """
    Build 2D sensitivity table.

    Args:
        discount_rates: List of discount rates (e.g., [0.08, 0.10, 0.12])
        terminal_growth_rates: List of terminal growth rates
                               (e.g., [0.02, 0.03, 0.04])

    Returns:
        DataFrame with discount rates as index, terminal growth rates as
        columns, and fair values per share as cell values
    """
    if not discount_rates:
      raise ValueError('discount_rates cannot be empty')
    if not terminal_growth_rates:
      raise ValueError('terminal_growth_rates cannot be empty')

    logger.info('Building sensitivity table: %d x %d', len(discount_rates),
                len(terminal_growth_rates))

    data_rows = [[self.fair_value(r, g)
                  for g in terminal_growth_rates]
                 for r in discount_rates]

    r_labels = [f'{r:.1%}' for r in discount_rates]
    g_labels = [f'{g:.1%}' for g in terminal_growth_rates]

    df = pd.DataFrame(data_rows, index=r_labels, columns=g_labels)
    df.index.name = 'Discount Rate'
    df.columns.name = 'Terminal Growth'
    return df


def _parse_float_list(s: str) -> list[float]:
  """Parse comma-separated float list."""
  return [float(x.strip()) for x in s.split(',')]


def main() -> None:
  """CLI entrypoint for sensitivity analysis."""
  parser = argparse.ArgumentParser(description='DCF Sensitivity Analysis')
  parser.add_argument('--scenario',
                      type=str,
                      default='googl_2024',
                      choices=list_scenarios(),
                      help='Scenario preset')
  parser.add_argument('--discount-rates',
                      type=str,
                      default='0.08,0.09,0.10,0.11,0.12',
                      help='Comma-separated discount rates (e.g., 0.08,0.10)')
  parser.add_argument('--growth-rates',
                      type=str,
                      default='0.02,0.03,0.04',
                      help='Comma-separated terminal growth rates')
  parser.add_argument('--output', type=Path, help='Output CSV path (optional)')
  parser.add_argument('--verbose',
                      '-v',
                      action='store_true',
                      help='Verbose output')
  args = parser.parse_args()

  logging.basicConfig(
      level=logging.DEBUG if args.verbose else logging.INFO,
      format='%(asctime)s [%(levelname)s] %(message)s',
      datefmt='%Y-%m-%d %H:%M:%S',
  )

  assumptions = get_scenario(args.scenario).to_assumptions()
  builder = SensitivityTableBuilder(assumptions)
  table = builder.build(
      discount_rates=_parse_float_list(args.discount_rates),
      terminal_growth_rates=_parse_float_list(args.growth_rates),
  )

  separator = '=' * 70
  logger.info(separator)
  logger.info('Fair Value per Share - %s', assumptions.company or
              args.scenario)
  logger.info(separator)
  logger.info('\n%s', table.to_string(float_format=lambda x: f'${x:,.2f}'))

  if args.output:
    table.to_csv(args.output)
    logger.info('Saved to: %s', args.output)


if __name__ == '__main__':
  main()

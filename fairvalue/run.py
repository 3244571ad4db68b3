'''
Single-company valuation entrypoint.

This module is the host adapter around the engine. It:
1. Collects raw inputs (preset, JSON file and/or CLI flags)
2. Converts them to Assumptions
3. Runs the DCF engine
4. Hands the result to the renderers (log summary, table, charts)

Usage:
  from fairvalue.run import run_valuation
  from fairvalue.scenarios.registry import get_scenario

  result = run_valuation(get_scenario('googl_2024'))
  print(f"Fair value: ${result.fair_value_per_share:.2f}")

CLI:
  python -m fairvalue.run --scenario googl_2024 --output-dir output/googl
'''

import argparse
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from fairvalue.domain.errors import ValuationInputError
from fairvalue.domain.types import ValuationResult
from fairvalue.engine.dcf import compute
from fairvalue.report.charts import export_all
from fairvalue.report.table import build_projection_table
from fairvalue.report.table import format_money
from fairvalue.report.table import render_html
from fairvalue.report.table import render_text
from fairvalue.report.table import summary_cards
from fairvalue.scenarios.config import ScenarioInputs
from fairvalue.scenarios.registry import get_scenario
from fairvalue.scenarios.registry import list_scenarios

logger = logging.getLogger(__name__)

# CLI flag -> ScenarioInputs field
OVERRIDE_FLAGS = {
    'company': 'company',
    'revenue': 'revenue',
    'fcf_margin': 'fcf_margin_pct',
    'fcf_year0': 'fcf_year0',
    'g15': 'g15_pct',
    'g610': 'g610_pct',
    'rev_g15': 'rev_g15_pct',
    'rev_g610': 'rev_g610_pct',
    'gperp': 'gperp_pct',
    'wacc': 'wacc_pct',
    'req_return': 'req_return_pct',
    'cash': 'cash',
    'debt': 'debt',
    'shares': 'shares',
    'market_price': 'market_price',
    'start_year': 'start_year',
}


def load_input_fields(path: Path) -> Dict[str, Any]:
  '''Fields present in a JSON inputs file, without defaults filled in.'''
  if not path.exists():
    raise FileNotFoundError(f'Inputs file not found: {path}')
  return json.loads(path.read_text(encoding='utf-8'))


def load_inputs(path: Path) -> ScenarioInputs:
  '''Load ScenarioInputs from a JSON file.'''
  return ScenarioInputs.from_dict(load_input_fields(path))


def run_valuation(inputs: ScenarioInputs) -> ValuationResult:
  '''
  Run valuation for one set of form inputs.

  Args:
    inputs: Raw form values

  Returns:
    ValuationResult

  Raises:
    MissingInputError: A required field is blank or not a number
    InvalidDiscountRateError: discount rate <= terminal growth
  '''
  assumptions = inputs.to_assumptions()
  result = compute(assumptions)
  logger.debug('Valuation diagnostics: %s', result.diag)
  return result


def log_summary(result: ValuationResult) -> None:
  '''Write the valuation summary to the log.'''
  cards = summary_cards(result)
  separator = '=' * 70
  logger.info('\n%s', separator)
  logger.info('DCF Valuation - %s', result.company or 'unnamed company')
  logger.info(separator)

  logger.info('\nAssumptions:')
  logger.info('  Discount Rate (r): %.2f%% (%s)', result.discount_rate * 100,
              result.diag.get('discount_method', 'n/a'))
  logger.info('  Terminal Growth (gT): %.2f%%', result.terminal_growth * 100)
  logger.info('  Base Year: %d', result.rows[0].year)

  logger.info('\nProjection:\n%s',
              render_text(build_projection_table(result)))

  logger.info('\nValuation Result:')
  logger.info('  Terminal Value: %s', format_money(result.terminal_value))
  logger.info('  Terminal Value (PV): %s',
              format_money(result.terminal_present_value))
  logger.info('  Enterprise Value: %s', format_money(result.enterprise_value))
  logger.info('  Equity Value: %s', format_money(result.equity_value))
  logger.info('  Fair Value / Share: %s', cards['fair_value'])

  logger.info('\nMarket Comparison:')
  logger.info('  Market Price: %s', cards['market_price'])
  logger.info('  Margin of Safety: %s', cards['margin_of_safety'])
  logger.info('  Action: %s', cards['action'])
  logger.info('%s\n', separator)


def export_outputs(
    result: ValuationResult,
    output_dir: Optional[Path] = None,
    html_path: Optional[Path] = None,
) -> List[Path]:
  '''
  Write charts, the projection CSV and the HTML table where requested.

  Returns:
    Paths written
  '''
  written: List[Path] = []
  table = build_projection_table(result)

  if output_dir is not None:
    output_dir.mkdir(parents=True, exist_ok=True)
    written.extend(export_all(result, output_dir).values())
    csv_path = output_dir / 'projection.csv'
    table.to_csv(csv_path, index=False)
    logger.info('Saved: %s', csv_path)
    written.append(csv_path)

  if html_path is not None:
    html_path.parent.mkdir(parents=True, exist_ok=True)
    html_path.write_text(render_html(table), encoding='utf-8')
    logger.info('Saved: %s', html_path)
    written.append(html_path)

  return written


def build_parser() -> argparse.ArgumentParser:
  '''Argument parser for the valuation CLI.'''
  parser = argparse.ArgumentParser(
      description='Run DCF valuation',
      formatter_class=argparse.RawDescriptionHelpFormatter,
      epilog='''
Examples:
  # Worked example
  python -m fairvalue.run --scenario googl_2024

  # Inputs from JSON, with a different discount rate, charts exported
  python -m fairvalue.run --config inputs.json --wacc 9 \\
      --output-dir output/charts
      ''')
  parser.add_argument('--scenario',
                      type=str,
                      default='blank',
                      choices=list_scenarios(),
                      help='Scenario preset')
  parser.add_argument('--config',
                      type=Path,
                      help='JSON file with ScenarioInputs fields')

  group = parser.add_argument_group(
      'inputs', 'Override individual fields (rates in percent)')
  group.add_argument('--company', type=str)
  group.add_argument('--revenue', type=str, help='TTM revenue')
  group.add_argument('--fcf-margin', type=str, help='TTM FCF margin (%%)')
  group.add_argument('--fcf-year0', type=str, help='Base year FCF')
  group.add_argument('--g15', type=str, help='FCF growth years 1-5 (%%)')
  group.add_argument('--g610', type=str, help='FCF growth years 6-10 (%%)')
  group.add_argument('--rev-g15',
                     type=str,
                     help='Revenue growth years 1-5 (%%)')
  group.add_argument('--rev-g610',
                     type=str,
                     help='Revenue growth years 6-10 (%%)')
  group.add_argument('--gperp', type=str, help='Terminal growth (%%)')
  group.add_argument('--wacc', type=str, help='Discount rate / WACC (%%)')
  group.add_argument('--req-return', type=str, help='Required return (%%)')
  group.add_argument('--cash', type=str)
  group.add_argument('--debt', type=str)
  group.add_argument('--shares', type=str, help='Shares outstanding')
  group.add_argument('--market-price', type=str)
  group.add_argument('--start-year', type=str, help='Base (year 0) year')

  parser.add_argument('--output-dir',
                      type=Path,
                      help='Export PNG charts and projection.csv here')
  parser.add_argument('--html', type=Path, help='Write projection table HTML')
  parser.add_argument('--verbose',
                      '-v',
                      action='store_true',
                      help='Verbose output')
  return parser


def collect_inputs(args: argparse.Namespace) -> ScenarioInputs:
  '''Preset, then JSON file, then individual flags.'''
  inputs = get_scenario(args.scenario)
  if args.config:
    inputs = inputs.override(**load_input_fields(args.config))
  overrides = {
      field: getattr(args, flag) for flag, field in OVERRIDE_FLAGS.items()
  }
  return inputs.override(**overrides)


def main(argv: Optional[List[str]] = None) -> int:
  '''CLI entrypoint.'''
  args = build_parser().parse_args(argv)

  logging.basicConfig(
      level=logging.DEBUG if args.verbose else logging.INFO,
      format='%(asctime)s [%(levelname)s] %(message)s',
      datefmt='%Y-%m-%d %H:%M:%S',
  )

  inputs = collect_inputs(args)
  try:
    result = run_valuation(inputs)
  except ValuationInputError as e:
    logger.error('%s', e)
    return 2

  log_summary(result)
  export_outputs(result, args.output_dir, args.html)
  return 0


if __name__ == '__main__':
  raise SystemExit(main())

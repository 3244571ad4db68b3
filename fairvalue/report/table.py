'''
Projection table and summary figures for a ValuationResult.

The table has one row per projection year. The terminal value is shown only
on the final row, where Sum = FCF + Terminal Value.
'''

from math import isfinite
from typing import Dict, Optional

import pandas as pd

from fairvalue.domain.types import ValuationResult

UNAVAILABLE = '—'

COLUMNS = ['Year', 'FCF', 'Terminal Value', 'Sum', 'FCF Margin %']


def format_money(value: Optional[float]) -> str:
  '''
  Thousands separators and at most two decimals; '—' when unavailable.

  >>> format_money(1234.5)
  '1,234.5'
  '''
  if value is None or not isfinite(value):
    return UNAVAILABLE
  text = f'{value:,.2f}'
  if '.' in text:
    text = text.rstrip('0').rstrip('.')
  return text


def format_pct(value: Optional[float]) -> str:
  '''Fraction as a percentage with two decimals.'''
  if value is None or not isfinite(value):
    return UNAVAILABLE
  return f'{value * 100:.2f}%'


def build_projection_table(result: ValuationResult) -> pd.DataFrame:
  '''
  Build the projection table.

  Args:
    result: Computed valuation

  Returns:
    DataFrame with COLUMNS, one row per year
  '''
  last = len(result.rows) - 1
  records = []
  for idx, row in enumerate(result.rows):
    tv = result.terminal_value if idx == last else 0.0
    records.append({
        'Year': row.year,
        'FCF': row.fcf,
        'Terminal Value': tv,
        'Sum': row.fcf + tv,
        'FCF Margin %': row.fcf_margin * 100,
    })
  return pd.DataFrame(records, columns=COLUMNS)


def _formatters() -> Dict[str, object]:
  return {
      'Year': str,
      'FCF': format_money,
      'Terminal Value': format_money,
      'Sum': format_money,
      'FCF Margin %': lambda x: f'{x:.2f}%',
  }


def render_text(table: pd.DataFrame) -> str:
  '''Plain-text rendering for logs and terminals.'''
  return table.to_string(index=False, formatters=_formatters())


def render_html(table: pd.DataFrame) -> str:
  '''HTML rendering with the "proj" table class.'''
  return table.to_html(index=False,
                       formatters=_formatters(),
                       classes='proj',
                       border=0)


def summary_cards(result: ValuationResult) -> Dict[str, str]:
  '''
  Display strings for the headline figures.

  Returns:
    Dict with fair_value, market_price, margin_of_safety, action
  '''
  fair = result.fair_value_per_share
  market = result.market_price
  has_market = market is not None and isfinite(market) and market != 0
  return {
      'fair_value': f'$ {format_money(fair)}' if fair is not None and
                    isfinite(fair) else UNAVAILABLE,
      'market_price': f'$ {format_money(market)}' if has_market else
                      UNAVAILABLE,
      'margin_of_safety': format_pct(result.margin_of_safety),
      'action': result.recommendation or UNAVAILABLE,
  }

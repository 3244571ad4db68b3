'''
Charts for a ValuationResult.

Three line charts over the projection years (FCF, FCF with the terminal value
on the final year, FCF margin) and a half-dial gauge comparing the market
price with the fair value. Figures are exported as PNG.

Usage:
  from fairvalue.report.charts import export_all
  paths = export_all(result, Path('output/googl'))
'''

import logging
from math import cos, isfinite, radians, sin
from pathlib import Path
from typing import Dict, List, Optional

import matplotlib.pyplot as plt
from matplotlib.figure import Figure
from matplotlib.patches import Wedge

from fairvalue.domain.types import ValuationResult

logger = logging.getLogger(__name__)

GAUGE_LIMIT = 0.6


def _title(result: ValuationResult, label: str) -> str:
  return f'{result.company} - {label}' if result.company else label


def _line_chart(
    years: List[int],
    values: List[float],
    title: str,
    ylabel: str,
    label: str,
    color: str,
) -> Figure:
  fig, ax = plt.subplots(figsize=(10, 6))
  ax.plot(years,
          values,
          'o-',
          label=label,
          linewidth=2,
          markersize=6,
          color=color,
          alpha=0.9)
  ax.set_xlabel('Year', fontsize=12, fontweight='bold')
  ax.set_ylabel(ylabel, fontsize=12, fontweight='bold')
  ax.set_title(title, fontsize=14, fontweight='bold', pad=20)
  ax.set_xticks(years)
  ax.legend(loc='best', fontsize=11, framealpha=0.9)
  ax.grid(True, alpha=0.3, linestyle='--')
  fig.tight_layout()
  return fig


def plot_fcf(result: ValuationResult) -> Figure:
  '''Free cash flow per projection year.'''
  return _line_chart(result.years, [r.fcf for r in result.rows],
                     _title(result, 'Free Cash Flow'), 'FCF', 'FCF',
                     '#2563eb')


def fcf_with_terminal(result: ValuationResult) -> List[float]:
  '''FCF series with the terminal value added to the final year.'''
  values = [r.fcf for r in result.rows]
  values[-1] += result.terminal_value
  return values


def plot_fcf_with_terminal(result: ValuationResult) -> Figure:
  '''FCF plus terminal value on the final year.'''
  return _line_chart(result.years, fcf_with_terminal(result),
                     _title(result, 'FCF incl. Terminal Value'),
                     'FCF + Terminal Value', 'FCF + TV', '#7c3aed')


def plot_margin(result: ValuationResult) -> Figure:
  '''FCF margin (%) per projection year.'''
  return _line_chart(result.years, [r.fcf_margin * 100 for r in result.rows],
                     _title(result, 'FCF Margin'), 'FCF Margin (%)',
                     'FCF Margin %', '#16a34a')


def gauge_ratio(
    fair_value: Optional[float],
    market_price: Optional[float],
) -> Optional[float]:
  '''
  Needle position for the valuation gauge.

  (market - fair) / fair clamped to [-0.6, 0.6]. Negative means the market
  price is below fair value (under-valued).

  Returns:
    Clamped ratio, or None when either price is unusable
  '''
  if fair_value is None or not isfinite(fair_value) or fair_value == 0:
    return None
  if market_price is None or not isfinite(market_price) or market_price == 0:
    return None
  ratio = (market_price - fair_value) / fair_value
  return max(-GAUGE_LIMIT, min(GAUGE_LIMIT, ratio))


def needle_angle(ratio: float) -> float:
  '''Needle angle in degrees: 180 at -0.6 (left), 90 at 0, 0 at +0.6.'''
  return 90.0 - (ratio / GAUGE_LIMIT) * 90.0


def plot_gauge(result: ValuationResult) -> Figure:
  '''Half-dial gauge with under-valued (left) and over-valued (right) zones.'''
  ratio = gauge_ratio(result.fair_value_per_share, result.market_price)

  fig, ax = plt.subplots(figsize=(8, 5))
  ax.add_patch(Wedge((0, 0), 1.0, 90, 180, width=0.3, color='#16a34a',
                     alpha=0.8))
  ax.add_patch(Wedge((0, 0), 1.0, 0, 90, width=0.3, color='#dc2626',
                     alpha=0.8))
  ax.text(-0.85, -0.12, 'Under-valued', ha='center', fontsize=11)
  ax.text(0.85, -0.12, 'Over-valued', ha='center', fontsize=11)

  if ratio is None:
    ax.text(0, 0.2, 'Fair value unavailable', ha='center', fontsize=12)
  else:
    theta = radians(needle_angle(ratio))
    ax.plot([0, 0.9 * cos(theta)], [0, 0.9 * sin(theta)],
            color='black',
            linewidth=3)
    ax.plot(0, 0, 'o', color='black', markersize=10)
    ax.text(0,
            -0.3,
            f'Market {result.market_price:,.2f} vs fair '
            f'{result.fair_value_per_share:,.2f} ({ratio:+.1%})',
            ha='center',
            fontsize=11,
            bbox=dict(boxstyle='round', facecolor='lightblue', alpha=0.8))

  ax.set_xlim(-1.1, 1.1)
  ax.set_ylim(-0.45, 1.1)
  ax.set_aspect('equal')
  ax.axis('off')
  ax.set_title(_title(result, 'Valuation Gauge'),
               fontsize=14,
               fontweight='bold')
  fig.tight_layout()
  return fig


def export_png(fig: Figure, path: Path, dpi: int = 150) -> Path:
  '''Write the figure as PNG and close it.'''
  path.parent.mkdir(parents=True, exist_ok=True)
  fig.savefig(path, dpi=dpi, bbox_inches='tight', format='png')
  plt.close(fig)
  logger.info('Saved: %s', path)
  return path


def export_all(result: ValuationResult, output_dir: Path) -> Dict[str, Path]:
  '''
  Export every chart of the result to output_dir.

  Returns:
    Mapping of chart name to written path
  '''
  plotters = {
      'fcf': plot_fcf,
      'fcf_terminal': plot_fcf_with_terminal,
      'fcf_margin': plot_margin,
      'gauge': plot_gauge,
  }
  written = {}
  for name, plot in plotters.items():
    fig = plot(result)
    try:
      written[name] = export_png(fig, output_dir / f'{name}.png')
    finally:
      plt.close(fig)
  return written

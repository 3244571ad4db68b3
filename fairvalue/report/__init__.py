'''
Renderers for valuation results.

Note: charts imports matplotlib; import it directly when needed:
  from fairvalue.report.charts import export_all
'''

from fairvalue.report.table import build_projection_table
from fairvalue.report.table import format_money
from fairvalue.report.table import render_html
from fairvalue.report.table import render_text
from fairvalue.report.table import summary_cards

__all__ = [
    'build_projection_table',
    'format_money',
    'render_html',
    'render_text',
    'summary_cards',
]

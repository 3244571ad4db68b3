'''
Two-stage DCF equity valuation.

The engine turns a small set of assumptions (revenue, FCF, banded growth
rates, discount rate, balance sheet, market price) into a ten-year projection,
a terminal value and a fair value per share. Renderers turn the result into a
projection table, charts and a valuation gauge.

Usage:
  from fairvalue.engine.dcf import compute
  from fairvalue.scenarios.registry import get_scenario

  result = compute(get_scenario('googl_2024').to_assumptions())
  print(result.fair_value_per_share, result.recommendation)
'''

"""Scenario inputs and named presets."""

from fairvalue.scenarios.config import ScenarioInputs
from fairvalue.scenarios.config import pct_to_float
from fairvalue.scenarios.config import to_number
from fairvalue.scenarios.registry import get_scenario
from fairvalue.scenarios.registry import list_scenarios

__all__ = [
    'ScenarioInputs',
    'pct_to_float',
    'to_number',
    'get_scenario',
    'list_scenarios',
]

"""Tiered circuit breaker with asymmetric hysteresis.

The breaker gates which service tier handles a request:

- FULL_CAPACITY (1): strict handler, failures are counted
- DEGRADED (2): lenient handler, absorbs flagged failures
- MAINTENANCE (3): no handler, fixed informational answers

It degrades after a few failures and recovers one tier at a time only after
an unbroken streak of genuine successes.
"""

from .hysteresis import SuccessDecision, degrade_on_failure, evaluate_success
from .mutator import RESET_MESSAGE, StateMutator
from .reader import StateReader
from .router import HandlerChoice, route

__all__ = [
    "HandlerChoice",
    "RESET_MESSAGE",
    "StateMutator",
    "StateReader",
    "SuccessDecision",
    "degrade_on_failure",
    "evaluate_success",
    "route",
]

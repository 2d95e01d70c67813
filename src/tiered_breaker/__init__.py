"""Tiered Breaker.

A distributed three-tier circuit breaker with asymmetric hysteresis. Every
request reads one shared breaker record, is served by the handler its tier
selects, and records its outcome back through atomic SQLite updates.
"""

from __future__ import annotations

__version__ = "0.1.0"

from .breaker import (
    HandlerChoice,
    StateMutator,
    StateReader,
    degrade_on_failure,
    evaluate_success,
    route,
)
from .breaker_config import DEFAULT_CONFIG, HysteresisConfig, Tier, Transition
from .database import BreakerDB
from .exceptions import (
    BreakerError,
    StorageUnavailable,
    TierFailure,
    UnknownOperation,
)
from .models import (
    Absent,
    BreakerRecord,
    HandlerResult,
    Present,
    ServiceRequest,
    ServiceResponse,
    TransitionResult,
)
from .settings import BreakerSettings, load_settings, resolve_settings
from .workflow import RequestWorkflow

__all__ = [
    "Absent",
    "BreakerDB",
    "BreakerError",
    "BreakerRecord",
    "BreakerSettings",
    "DEFAULT_CONFIG",
    "HandlerChoice",
    "HandlerResult",
    "HysteresisConfig",
    "Present",
    "RequestWorkflow",
    "ServiceRequest",
    "ServiceResponse",
    "StateMutator",
    "StateReader",
    "StorageUnavailable",
    "Tier",
    "TierFailure",
    "Transition",
    "TransitionResult",
    "UnknownOperation",
    "__version__",
    "degrade_on_failure",
    "evaluate_success",
    "load_settings",
    "resolve_settings",
    "route",
]

"""Pure vault metrics engine and simulation session."""
from .fixed_point import to_float, to_scaled
from .metrics import compute_debt_value, compute_metrics
from .risk import classify, evaluate
from .session import SessionState, SimulationSession

__all__ = [
    "to_float",
    "to_scaled",
    "compute_metrics",
    "compute_debt_value",
    "classify",
    "evaluate",
    "SessionState",
    "SimulationSession",
]

"""Public interface re-exports for cv_formatter_core."""

from cv_formatter_core.interfaces.oracle import StructuringOracle

__all__ = [
    "StructuringOracle",
]

"""Heuristic validators and the debounced diagnostics pipeline."""

from .models import Diagnostic, Level
from .pipeline import DiagnosticsPipeline, run_validators
from .validators import (
    VALIDATORS,
    validate_markup,
    validate_script,
    validate_style,
)

__all__ = [
    "Diagnostic",
    "Level",
    "DiagnosticsPipeline",
    "run_validators",
    "VALIDATORS",
    "validate_markup",
    "validate_style",
    "validate_script",
]

"""
points/enums.py - Point pipeline enumerations.
"""

from enum import Enum


class PipelineStage(Enum):
    """Stages of the point BOM pipeline."""
    VALIDATE = "validate"
    RESOLVE = "resolve"
    CALCULATE = "calculate"
    ASSEMBLED = "assembled"
    FAILED = "failed"

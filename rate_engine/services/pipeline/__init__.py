"""Pipeline infrastructure for the booking flows."""

from .base_step import PipelineStep
from .context import BookingContext
from .pipeline import Pipeline

__all__ = [
    "PipelineStep",
    "BookingContext",
    "Pipeline",
]

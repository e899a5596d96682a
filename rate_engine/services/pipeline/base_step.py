"""Base class for booking pipeline steps."""

import time
from abc import ABC, abstractmethod

from structlog import get_logger

from rate_engine.services.pipeline.context import BookingContext

logger = get_logger(__name__)


class PipelineStep(ABC):
    """One stage of a booking flow.

    Subclasses implement ``execute``, reading what earlier steps left on the
    ``BookingContext`` and writing their own results back. Returning False
    or raising marks the step failed; ``run`` records exceptions on the
    context so the pipeline can decide whether to stop.
    """

    def __init__(self, name: str | None = None):
        """Set the step name used in logs, errors and timings.

        Args:
            name: Step name; the class name when omitted
        """
        self.name = name or self.__class__.__name__
        self.logger = logger.bind(step=self.name)

    @abstractmethod
    async def execute(self, context: BookingContext) -> bool:
        """Do the step's work against the context.

        Returns:
            True when the flow may continue
        """

    async def run(self, context: BookingContext) -> bool:
        """Execute the step, turning exceptions into context errors.

        The elapsed time and outcome are stored under
        ``context.stats["steps"][name]``.

        Returns:
            True if the step succeeded
        """
        started = time.perf_counter()
        try:
            success = await self.execute(context)
        except Exception as e:
            self.logger.error(
                "Step raised",
                room_id=context.room_id,
                error=str(e),
                exc_info=True,
            )
            context.add_error(self.name, str(e))
            success = False

        elapsed = time.perf_counter() - started
        context.stats.setdefault("steps", {})[self.name] = {
            "success": success,
            "duration_seconds": elapsed,
        }
        if success:
            self.logger.debug("Step done", room_id=context.room_id, duration_seconds=elapsed)
        else:
            self.logger.warning("Step failed", room_id=context.room_id, duration_seconds=elapsed)
        return success

    def is_required(self) -> bool:
        """Whether a failure of this step stops the pipeline."""
        return True

    def get_name(self) -> str:
        return self.name

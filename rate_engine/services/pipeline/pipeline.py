"""Pipeline executor for the booking flows."""

from structlog import get_logger

from .base_step import PipelineStep
from .context import BookingContext

logger = get_logger(__name__)


class Pipeline:
    """Runs a sequence of steps over a shared context.

    Steps run in order; a failed required step stops the pipeline, a failed
    optional step is logged and skipped.
    """

    def __init__(self, name: str, steps: list[PipelineStep]):
        """Initialize the pipeline.

        Args:
            name: Pipeline name for logging
            steps: List of pipeline steps to execute in order
        """
        self.name = name
        self.steps = steps
        self.logger = logger.bind(pipeline=name)

    async def execute(self, context: BookingContext) -> BookingContext:
        """Execute the pipeline.

        Args:
            context: Pipeline context

        Returns:
            Updated context with results
        """
        self.logger.info(
            "Pipeline starting",
            room_id=context.room_id,
            step_count=len(self.steps),
        )

        successful_steps = 0
        failed_steps = 0

        for step in self.steps:
            step_name = step.get_name()

            try:
                success = await step.run(context)
            except Exception as e:
                self.logger.error(
                    "Step raised unexpected exception",
                    room_id=context.room_id,
                    step=step_name,
                    error=str(e),
                    exc_info=True,
                )
                context.add_error(step_name, f"Unexpected exception: {str(e)}")
                success = False

            if success:
                successful_steps += 1
                continue

            failed_steps += 1
            if step.is_required():
                self.logger.warning(
                    "Required step failed, stopping pipeline",
                    room_id=context.room_id,
                    step=step_name,
                )
                break
            self.logger.warning(
                "Optional step failed, continuing pipeline",
                room_id=context.room_id,
                step=step_name,
            )

        context.success = failed_steps == 0 and not context.has_errors()

        context.stats["pipeline"] = {
            "name": self.name,
            "total_steps": len(self.steps),
            "successful_steps": successful_steps,
            "failed_steps": failed_steps,
        }

        self.logger.info(
            "Pipeline completed",
            room_id=context.room_id,
            success=context.success,
            successful_steps=successful_steps,
            failed_steps=failed_steps,
        )

        return context

    def add_step(self, step: PipelineStep) -> "Pipeline":
        """Add a step to the pipeline.

        Returns:
            Self for method chaining
        """
        self.steps.append(step)
        return self

    def get_step_names(self) -> list[str]:
        """Get list of all step names in the pipeline."""
        return [step.get_name() for step in self.steps]

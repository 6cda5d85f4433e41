"""Sequential step execution."""

import logging
import traceback

from cloudinfra.errors import CloudInfraError, ConfigurationError
from cloudinfra.steps.context import Step, StepContext

logger = logging.getLogger(__name__)


def select_steps(steps: list[Step], requested: list[str]) -> list[Step]:
    """Pick the requested steps by name or number, keeping step order.

    An empty request selects every step.

    Raises:
        ConfigurationError: If a requested step does not exist
    """
    if not requested:
        return list(steps)

    by_token = {}
    for step in steps:
        by_token[step.name] = step
        by_token[str(step.number)] = step

    unknown = [token for token in requested if token not in by_token]
    if unknown:
        choices = ", ".join(step.name for step in steps)
        raise ConfigurationError(
            f"Unknown step(s): {', '.join(unknown)}. Choose from: {choices}"
        )

    selected = {by_token[token].number for token in requested}
    return [step for step in steps if step.number in selected]


def run_steps(steps: list[Step], ctx: StepContext) -> int:
    """Run steps in order, stopping at the first failure.

    Returns:
        0 if every step succeeded, 1 otherwise
    """
    for step in steps:
        logger.info(f"=== Step {step.number}: {step.description} ===")
        try:
            step.run(ctx)
        except CloudInfraError as e:
            logger.error(f"Step {step.number} ({step.name}) failed: {e}")
            logger.debug(traceback.format_exc())
            return 1
        except Exception as e:
            logger.error(
                f"Step {step.number} ({step.name}) failed with an unexpected "
                f"error: {e}\n{traceback.format_exc()}"
            )
            return 1

    logger.info(f"Completed {len(steps)} step(s)")
    return 0

"""Self-correcting generation loop.

Each attempt calls the generator, validates its output and, when the
output is invalid, feeds the errors back into the next prompt:

    generating -> validating -> success
                             -> retrying -> generating ...
                             -> error (attempts exhausted)

Errors are identified across attempts by their (layer, path, message) key,
which is what makes "fixed" and "remaining" meaningful.

Usage:
    from llm2ui.retry import RetryConfig, execute_with_retry

    result = await execute_with_retry(client.generate, prompt, RetryConfig(max_retries=3))
    if result.success:
        render(result.schema)
"""

from __future__ import annotations

import asyncio
import time
from collections import Counter
from dataclasses import dataclass, field
from typing import Awaitable, Callable, List, Optional, Sequence, TypeVar

from llm2ui.config.constants import (
    DEFAULT_MAX_RETRIES,
    DEFAULT_RETRY_TIMEOUT,
    RETRY_PREVIOUS_OUTPUT_HEADER,
)
from llm2ui.logging import get_component_logger
from llm2ui.protocols import (
    AttemptResult,
    ChainValidationError,
    ErrorComparison,
    GenerationTimeoutError,
    LLMConfigError,
    LoggerProtocol,
    ProgressCallback,
    RetryProgressEvent,
    RetryResult,
    RetryStatus,
    ValidationLayer,
)
from llm2ui.validation import ValidationChainConfig, format_errors_for_llm, validate_model_output

T = TypeVar("T")

GenerateFn = Callable[[str], Awaitable[str]]


@dataclass
class RetryConfig:
    """Retry loop options.

    Attributes:
        max_retries: Total number of attempts, including the first
        timeout: Deadline for the whole run, in seconds; each attempt gets
            whatever time is left. None means no deadline
        on_progress: Called with every RetryProgressEvent
        include_previous_output: Quote the last raw output in retry prompts
        validation: Validation chain configuration
    """
    max_retries: int = DEFAULT_MAX_RETRIES
    timeout: Optional[float] = DEFAULT_RETRY_TIMEOUT
    on_progress: Optional[ProgressCallback] = None
    include_previous_output: bool = True
    validation: ValidationChainConfig = field(default_factory=ValidationChainConfig)


# =============================================================================
# ERROR DIFFING
# =============================================================================

def compare_errors(
    previous: Sequence[ChainValidationError],
    current: Sequence[ChainValidationError],
) -> ErrorComparison:
    """Partition two error lists by (layer, path, message) key.

    Entries are matched one-for-one, so repeated keys count separately:
    len(fixed) + len(remaining) == len(previous) and
    len(remaining) + len(new_errors) == len(current). ``remaining`` holds
    the current entries.
    """
    unmatched_current = Counter(e.key for e in current)
    fixed: List[ChainValidationError] = []
    for error in previous:
        if unmatched_current[error.key]:
            unmatched_current[error.key] -= 1
        else:
            fixed.append(error)

    unmatched_previous = Counter(e.key for e in previous)
    remaining: List[ChainValidationError] = []
    new_errors: List[ChainValidationError] = []
    for error in current:
        if unmatched_previous[error.key]:
            unmatched_previous[error.key] -= 1
            remaining.append(error)
        else:
            new_errors.append(error)

    return ErrorComparison(fixed=fixed, remaining=remaining, new_errors=new_errors)


def calculate_fix_rate(
    previous: Sequence[ChainValidationError],
    current: Sequence[ChainValidationError],
) -> float:
    """Fraction of ``previous`` absent from ``current``; 1.0 if nothing was broken."""
    if not previous:
        return 1.0
    return len(compare_errors(previous, current).fixed) / len(previous)


def build_retry_prompt(
    base_prompt: str,
    errors: Sequence[ChainValidationError],
    previous_output: Optional[str] = None,
) -> str:
    """Append the errors to fix, and optionally the last output, to ``base_prompt``."""
    parts = [base_prompt]

    error_context = format_errors_for_llm(list(errors))
    if error_context:
        parts.append("\n\n" + error_context)

    if previous_output:
        parts.append(f"\n\n{RETRY_PREVIOUS_OUTPUT_HEADER}\n```json\n{previous_output}\n```")

    return "".join(parts)


async def with_timeout(awaitable: Awaitable[T], timeout: Optional[float]) -> T:
    """Await with a deadline in seconds; None waits forever.

    Raises:
        GenerationTimeoutError: If the deadline passes first
    """
    if timeout is None:
        return await awaitable
    try:
        return await asyncio.wait_for(awaitable, timeout=timeout)
    except asyncio.TimeoutError:
        raise GenerationTimeoutError(timeout) from None


def select_best_attempt(attempts: Sequence[AttemptResult]) -> Optional[AttemptResult]:
    """The attempt with a schema and the fewest errors; earliest wins ties."""
    candidates = [a for a in attempts if a.schema is not None]
    if not candidates:
        return None
    return min(candidates, key=lambda a: len(a.errors))


def _generation_error(message: str) -> ChainValidationError:
    return ChainValidationError(
        layer=ValidationLayer.JSON_SYNTAX,
        path="",
        message=message,
    )


# =============================================================================
# CONTROLLER
# =============================================================================

class RetryController:
    """Runs the generate -> validate loop for one prompt.

    A controller holds no state between runs, so one instance can serve
    concurrent generations.
    """

    def __init__(
        self,
        config: Optional[RetryConfig] = None,
        logger: Optional[LoggerProtocol] = None,
    ):
        self.config = config or RetryConfig()
        if self.config.max_retries < 1:
            raise ValueError("max_retries must be at least 1")
        if self.config.timeout is not None and self.config.timeout <= 0:
            raise ValueError("timeout must be positive")
        self._logger = get_component_logger("RetryController", logger)

    def _emit(
        self,
        status: RetryStatus,
        attempt: int,
        fixed: Optional[List[ChainValidationError]] = None,
        remaining: Optional[List[ChainValidationError]] = None,
        message: Optional[str] = None,
    ) -> None:
        callback = self.config.on_progress
        if callback is None:
            return

        event = RetryProgressEvent(
            status=status,
            attempt=attempt,
            total_attempts=self.config.max_retries,
            fixed_errors=list(fixed or []),
            remaining_errors=list(remaining or []),
            message=message,
        )
        try:
            callback(event)
        except Exception as e:
            self._logger.warning(
                "retry_progress_callback_failed",
                status=RetryStatus(status).value,
                attempt=attempt,
                error=str(e),
            )

    async def _generate(
        self,
        generate_fn: GenerateFn,
        prompt: str,
        attempt: int,
        time_left: Optional[float],
    ):
        """Returns (raw_output, failure_error, timed_out)."""
        try:
            raw_output = await with_timeout(generate_fn(prompt), time_left)
            return raw_output, None, False
        except LLMConfigError:
            raise
        except GenerationTimeoutError:
            self._logger.warning(
                "retry_attempt_timeout",
                attempt=attempt,
                time_left=time_left,
                timeout=self.config.timeout,
            )
            return None, _generation_error(f"Generation timed out after {self.config.timeout:g}s"), True
        except Exception as e:
            self._logger.warning(
                "retry_generation_failed",
                attempt=attempt,
                error=str(e),
                error_type=type(e).__name__,
            )
            return None, _generation_error(f"Generation failed: {e}"), False

    async def run(self, generate_fn: GenerateFn, initial_prompt: str) -> RetryResult:
        """Generate until the output validates, attempts run out or the
        run's deadline passes.

        Args:
            generate_fn: Async callable mapping a prompt to raw model output
            initial_prompt: Prompt for the first attempt

        Raises:
            LLMConfigError: The generator's configuration is invalid
        """
        config = self.config
        started = time.perf_counter()
        attempts: List[AttemptResult] = []
        fix_rate_history: List[float] = []
        previous_errors: List[ChainValidationError] = []
        previous_output: Optional[str] = None
        deadline = started + config.timeout if config.timeout is not None else None
        deadline_reached = False

        for attempt in range(1, config.max_retries + 1):
            if attempt == 1:
                prompt = initial_prompt
            else:
                prompt = build_retry_prompt(
                    initial_prompt,
                    previous_errors,
                    previous_output if config.include_previous_output else None,
                )

            self._logger.info(
                "retry_attempt_started",
                attempt=attempt,
                max_retries=config.max_retries,
                previous_error_count=len(previous_errors),
            )
            self._emit(RetryStatus.GENERATING, attempt, remaining=previous_errors)

            attempt_started = time.perf_counter()
            time_left = deadline - attempt_started if deadline is not None else None
            raw_output, failure, timed_out = await self._generate(generate_fn, prompt, attempt, time_left)

            if failure is not None:
                errors, warnings, schema = [failure], [], None
            else:
                self._emit(RetryStatus.VALIDATING, attempt, remaining=previous_errors)
                validation = validate_model_output(raw_output, config.validation, logger=self._logger)
                errors, warnings, schema = validation.errors, validation.warnings, validation.schema

            comparison = compare_errors(previous_errors, errors)
            if attempt > 1:
                fix_rate_history.append(calculate_fix_rate(previous_errors, errors))

            record = AttemptResult(
                attempt=attempt,
                raw_output=raw_output,
                schema=schema,
                errors=errors,
                warnings=warnings,
                duration=time.perf_counter() - attempt_started,
                comparison=comparison,
                timed_out=timed_out,
            )
            attempts.append(record)

            if not errors and schema is not None:
                self._logger.info(
                    "retry_attempt_succeeded",
                    attempt=attempt,
                    errors_fixed=len(comparison.fixed),
                    warning_count=len(warnings),
                )
                self._emit(RetryStatus.SUCCESS, attempt, fixed=comparison.fixed, message="Validation passed")
                return RetryResult(
                    success=True,
                    schema=schema,
                    errors=[],
                    warnings=warnings,
                    attempts=attempts,
                    total_time=time.perf_counter() - started,
                    best_attempt=record,
                    timed_out=any(a.timed_out for a in attempts),
                    fix_rate_history=fix_rate_history,
                )

            self._logger.info(
                "retry_attempt_failed",
                attempt=attempt,
                error_count=len(errors),
                errors_fixed=len(comparison.fixed),
                new_errors=len(comparison.new_errors),
                timed_out=timed_out,
            )

            deadline_reached = deadline is not None and time.perf_counter() >= deadline
            if deadline_reached:
                self._logger.warning(
                    "retry_deadline_reached",
                    attempt=attempt,
                    timeout=config.timeout,
                )
                self._emit(
                    RetryStatus.ERROR,
                    attempt,
                    fixed=comparison.fixed,
                    remaining=errors,
                    message=f"Timed out after {config.timeout:g}s with {len(errors)} error(s) remaining",
                )
                break

            if attempt == config.max_retries:
                self._emit(
                    RetryStatus.ERROR,
                    attempt,
                    fixed=comparison.fixed,
                    remaining=errors,
                    message=f"{len(errors)} error(s) remaining after {attempt} attempt(s)",
                )
            else:
                self._emit(RetryStatus.RETRYING, attempt, fixed=comparison.fixed, remaining=errors)

            previous_errors = errors
            previous_output = raw_output

        last = attempts[-1]
        self._logger.warning(
            "retry_exhausted",
            attempts=len(attempts),
            error_count=len(last.errors),
            fix_rate_history=fix_rate_history,
        )
        return RetryResult(
            success=False,
            schema=None,
            errors=last.errors,
            warnings=last.warnings,
            attempts=attempts,
            total_time=time.perf_counter() - started,
            best_attempt=select_best_attempt(attempts),
            timed_out=deadline_reached or any(a.timed_out for a in attempts),
            fix_rate_history=fix_rate_history,
        )


async def execute_with_retry(
    generate_fn: GenerateFn,
    initial_prompt: str,
    config: Optional[RetryConfig] = None,
    logger: Optional[LoggerProtocol] = None,
) -> RetryResult:
    """Run one self-correcting generation. See RetryController.run()."""
    return await RetryController(config, logger).run(generate_fn, initial_prompt)


__all__ = [
    "GenerateFn",
    "RetryConfig",
    "RetryController",
    "execute_with_retry",
    "compare_errors",
    "calculate_fix_rate",
    "build_retry_prompt",
    "with_timeout",
    "select_best_attempt",
]

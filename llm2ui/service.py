"""UI generation service.

Wires a text generator to the retry controller: the prompt is composed
from the component catalog and design tokens the validation chain checks
against, so the model is told the same rules it is graded on.

Usage:
    from llm2ui.service import UIGenerationService

    service = UIGenerationService.from_settings()
    result = await service.generate("A login form with email and password")
"""

from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING, Optional

from llm2ui.logging import generation_scope, get_component_logger
from llm2ui.prompts import build_generation_prompt, build_system_prompt
from llm2ui.protocols import LoggerProtocol, ProgressCallback, RetryResult, TextGenerator
from llm2ui.retry import RetryConfig, RetryController
from llm2ui.validation import ValidationChainConfig

if TYPE_CHECKING:
    from llm2ui.settings import Settings


class UIGenerationService:
    """Generates validated UI schemas from natural-language requests.

    Each generate() call runs its own retry loop; calls share no mutable
    state and may run concurrently.
    """

    def __init__(
        self,
        generator: TextGenerator,
        config: Optional[RetryConfig] = None,
        logger: Optional[LoggerProtocol] = None,
    ):
        self._generator = generator
        self._config = config or RetryConfig()
        self._logger = get_component_logger("UIGenerationService", logger)
        self._system_prompt = build_system_prompt(
            self._config.validation.catalog,
            self._config.validation.design_tokens,
        )

    @classmethod
    def from_settings(
        cls,
        settings: Optional["Settings"] = None,
        logger: Optional[LoggerProtocol] = None,
    ) -> "UIGenerationService":
        """Build the generator and retry options from settings.

        Raises:
            LLMConfigError: If the provider configuration is invalid
        """
        from llm2ui.llm.factory import create_llm_client
        from llm2ui.settings import get_settings

        settings = settings or get_settings()
        config = RetryConfig(
            max_retries=settings.retry_max_attempts,
            timeout=settings.retry_timeout,
            include_previous_output=settings.retry_include_previous_output,
            validation=ValidationChainConfig(
                validate_style=settings.validate_style,
                style_compliance_as_errors=settings.style_compliance_as_errors,
                auto_fix=settings.schema_auto_fix,
            ),
        )
        return cls(create_llm_client(settings, logger), config, logger)

    @property
    def system_prompt(self) -> str:
        return self._system_prompt

    @property
    def config(self) -> RetryConfig:
        return self._config

    async def generate(
        self,
        request: str,
        on_progress: Optional[ProgressCallback] = None,
        generation_id: Optional[str] = None,
    ) -> RetryResult:
        """Generate a UI schema for ``request``.

        Args:
            request: What the UI should contain
            on_progress: Per-call progress callback (overrides the configured one)
            generation_id: Id bound to every log line of this run

        Raises:
            ValueError: If the request is empty
            LLMConfigError: If the generator's configuration is invalid
        """
        if not request or not request.strip():
            raise ValueError("request must not be empty")

        config = self._config
        if on_progress is not None:
            config = replace(config, on_progress=on_progress)

        with generation_scope(generation_id) as run_id:
            self._logger.info(
                "ui_generation_started",
                generation_id=run_id,
                request_length=len(request),
            )
            controller = RetryController(config, self._logger)
            result = await controller.run(
                self._generator.generate,
                build_generation_prompt(request, self._system_prompt),
            )
            self._logger.info(
                "ui_generation_complete",
                generation_id=run_id,
                success=result.success,
                attempts=result.attempt_count,
                error_count=len(result.errors),
                total_time=round(result.total_time, 3),
            )
        return result


__all__ = ["UIGenerationService"]

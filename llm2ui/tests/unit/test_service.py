"""Unit tests for UIGenerationService."""

import json

import pytest

from llm2ui.llm import MockProvider
from llm2ui.protocols import RetryStatus
from llm2ui.retry import RetryConfig
from llm2ui.service import UIGenerationService
from llm2ui.settings import Settings


def _fenced(schema) -> str:
    return "```json\n" + json.dumps(schema) + "\n```"


class TestUIGenerationService:
    """Tests for UIGenerationService.generate()."""

    async def test_generate_with_default_mock(self, mock_logger):
        generator = MockProvider()
        service = UIGenerationService(generator, logger=mock_logger)

        result = await service.generate("A title card")

        assert result.success
        assert result.schema["root"]["type"] == "Container"
        prompt = generator.call_history[0]["prompt"]
        assert prompt.startswith(service.system_prompt)
        assert prompt.endswith("## User Request\n\nA title card")

    async def test_system_prompt_describes_catalog_and_tokens(self, mock_logger):
        service = UIGenerationService(MockProvider(), logger=mock_logger)
        assert "## Available Components" in service.system_prompt
        assert "## Design Tokens (MUST USE)" in service.system_prompt

    async def test_per_call_progress_callback(self, valid_schema, mock_logger):
        bad = {"version": "1.0", "root": {"id": "root", "type": "Foo"}}
        generator = MockProvider([_fenced(bad), _fenced(valid_schema)])
        configured, per_call = [], []
        service = UIGenerationService(generator, RetryConfig(on_progress=configured.append), mock_logger)

        result = await service.generate("A login form", on_progress=per_call.append)

        assert result.success
        assert configured == []
        assert per_call[-1].status == RetryStatus.SUCCESS
        assert per_call[-1].errors_fixed == 1
        assert service.config.on_progress == configured.append

    async def test_logs_generation_id(self, mock_logger):
        service = UIGenerationService(MockProvider(), logger=mock_logger)
        await service.generate("Anything", generation_id="gen-42")

        started = [c for c in mock_logger.info.call_args_list if c.args[0] == "ui_generation_started"]
        assert started[0].kwargs["generation_id"] == "gen-42"

    @pytest.mark.parametrize("request_text", ["", "   "])
    async def test_empty_request_rejected(self, request_text, mock_logger):
        service = UIGenerationService(MockProvider(), logger=mock_logger)
        with pytest.raises(ValueError, match="must not be empty"):
            await service.generate(request_text)

    async def test_from_settings_mock_mode(self, mock_logger):
        settings = Settings(
            _env_file=None,
            mock_llm_enabled=True,
            retry_max_attempts=2,
            retry_timeout=5.0,
            style_compliance_as_errors=True,
            schema_auto_fix=True,
        )
        service = UIGenerationService.from_settings(settings, mock_logger)

        assert service.config.max_retries == 2
        assert service.config.timeout == 5.0
        assert service.config.validation.style_compliance_as_errors is True
        assert service.config.validation.auto_fix is True

        result = await service.generate("A title")
        assert result.success

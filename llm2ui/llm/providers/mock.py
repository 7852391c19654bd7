"""Mock text generator for testing without LLM calls."""

import json
from typing import Any, Dict, List, Optional, Sequence, Union

_DEFAULT_SCHEMA: Dict[str, Any] = {
    "version": "1.0",
    "root": {
        "id": "root",
        "type": "Container",
        "props": {"className": "flex flex-col gap-4 p-4"},
        "children": [
            {"id": "title", "type": "Text", "props": {"content": "Mock UI"}},
        ],
    },
}


class MockProvider:
    """Returns scripted responses in order, repeating the last one.

    Responses may be strings or exceptions; an exception is raised
    instead of returned, which lets tests script failed attempts.
    """

    def __init__(self, responses: Optional[Sequence[Union[str, BaseException]]] = None):
        if responses is None:
            responses = ["```json\n" + json.dumps(_DEFAULT_SCHEMA, indent=2) + "\n```"]
        if not responses:
            raise ValueError("MockProvider needs at least one response")
        self._responses: List[Union[str, BaseException]] = list(responses)
        self.call_count = 0
        self.call_history: List[Dict[str, Any]] = []

    async def generate(self, prompt: str) -> str:
        index = min(self.call_count, len(self._responses) - 1)
        self.call_count += 1
        self.call_history.append({"method": "generate", "prompt": prompt})

        response = self._responses[index]
        if isinstance(response, BaseException):
            raise response
        return response

    async def health_check(self) -> bool:
        """Mock provider is always healthy."""
        return True

    def __repr__(self) -> str:
        return f"MockProvider(responses={len(self._responses)})"

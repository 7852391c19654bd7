"""Protocol definitions for llm2ui collaborators.

The component catalog and the text generator are supplied by the caller,
so the validation chain and the retry controller stay pure functions of
their inputs.
"""

from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional, Protocol, runtime_checkable

if TYPE_CHECKING:
    from llm2ui.catalog import ComponentDefinition, PropSchema
    from llm2ui.protocols.types import RetryProgressEvent


# =============================================================================
# LOGGING
# =============================================================================

@runtime_checkable
class LoggerProtocol(Protocol):
    """Structured logging interface."""

    def info(self, message: str, **kwargs: Any) -> None: ...
    def debug(self, message: str, **kwargs: Any) -> None: ...
    def warning(self, message: str, **kwargs: Any) -> None: ...
    def error(self, message: str, **kwargs: Any) -> None: ...
    def bind(self, **kwargs: Any) -> "LoggerProtocol": ...


# =============================================================================
# COMPONENT CATALOG
# =============================================================================

@runtime_checkable
class ComponentCatalog(Protocol):
    """Read-only view of the registered UI components.

    resolve() returns the prop schema of a component type, or None when
    the type is not registered.
    """

    def resolve(self, component_type: str) -> Optional[Dict[str, "PropSchema"]]: ...
    def get_definition(self, component_type: str) -> Optional["ComponentDefinition"]: ...
    def valid_types(self) -> List[str]: ...


# =============================================================================
# GENERATION
# =============================================================================

@runtime_checkable
class TextGenerator(Protocol):
    """Anything that turns a prompt into raw model output."""

    async def generate(self, prompt: str) -> str: ...


ProgressCallback = Callable[["RetryProgressEvent"], None]

"""Component catalog: which component types exist and which props they take.

The validation chain only reads the catalog through the ComponentCatalog
protocol. StaticComponentCatalog is an in-memory implementation; callers
with their own component registry can pass any object with the same
methods.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional

from llm2ui.utils.text import closest_matches


class PropType(str, Enum):
    """JSON-level prop types."""
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    OBJECT = "object"
    ARRAY = "array"
    FUNCTION = "function"


@dataclass(frozen=True)
class PropSchema:
    """Schema of a single component prop."""
    type: PropType
    required: bool = False
    default: Any = None
    description: str = ""
    enum: Optional[List[Any]] = None


@dataclass
class ComponentDefinition:
    """A registered component type."""
    name: str
    props: Dict[str, PropSchema] = field(default_factory=dict)
    category: str = "display"
    description: str = ""
    deprecated: bool = False
    deprecation_message: Optional[str] = None


# Names LLMs commonly use for registered components
TYPE_ALIASES: Dict[str, str] = {
    # HTML elements
    "div": "Container",
    "span": "Text",
    "p": "Text",
    "img": "Image",
    "a": "Link",
    # Layout containers
    "box": "Container",
    "wrapper": "Container",
    "section": "Container",
    "view": "Container",
    "flex": "Container",
    "grid": "Container",
    "stack": "Container",
    "row": "Container",
    "column": "Container",
    # Abbreviations
    "btn": "Button",
    "txt": "Text",
    "lbl": "Label",
    "inp": "Input",
    "sel": "Select",
    "chk": "Checkbox",
    "tbl": "Table",
    # Spelling variants
    "textfield": "Input",
    "textbox": "Input",
    "dropdown": "Select",
    # Semantic names
    "heading": "Text",
    "title": "Text",
    "paragraph": "Text",
    "h1": "Text",
    "h2": "Text",
    "h3": "Text",
    "h4": "Text",
    "h5": "Text",
    "h6": "Text",
}


def json_type_name(value: Any) -> str:
    """JSON type name of a parsed value."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


def matches_prop_type(value: Any, prop_type: PropType) -> bool:
    """True if ``value`` is acceptable for ``prop_type``.

    Functions cannot appear in JSON; a string naming a handler is accepted.
    """
    if prop_type == PropType.FUNCTION:
        return isinstance(value, str)
    return json_type_name(value) == PropType(prop_type).value


class StaticComponentCatalog:
    """In-memory component catalog.

    Lookup is case-insensitive and falls back to an alias table, so
    ``button`` and ``btn`` both resolve to ``Button``.
    """

    def __init__(
        self,
        definitions: Iterable[ComponentDefinition] = (),
        aliases: Optional[Mapping[str, str]] = None,
    ):
        self._definitions: Dict[str, ComponentDefinition] = {}
        self._by_lower: Dict[str, str] = {}
        self._aliases: Dict[str, str] = {
            k.lower(): v for k, v in (TYPE_ALIASES if aliases is None else aliases).items()
        }
        for definition in definitions:
            self.register(definition)

    def register(self, definition: ComponentDefinition) -> None:
        self._definitions[definition.name] = definition
        self._by_lower[definition.name.lower()] = definition.name

    def canonical_name(self, component_type: str) -> Optional[str]:
        """Registered name for ``component_type``, or None if unknown."""
        if component_type in self._definitions:
            return component_type
        lowered = component_type.lower()
        if lowered in self._by_lower:
            return self._by_lower[lowered]
        target = self._aliases.get(lowered)
        if target is not None and target in self._definitions:
            return target
        return None

    def get_definition(self, component_type: str) -> Optional[ComponentDefinition]:
        name = self.canonical_name(component_type)
        return self._definitions[name] if name is not None else None

    def resolve(self, component_type: str) -> Optional[Dict[str, PropSchema]]:
        definition = self.get_definition(component_type)
        return definition.props if definition is not None else None

    def is_valid_type(self, component_type: str) -> bool:
        return self.canonical_name(component_type) is not None

    def valid_types(self) -> List[str]:
        return sorted(self._definitions)

    def suggest_types(self, component_type: str, limit: int = 3) -> List[str]:
        """Registered names closest to ``component_type`` by edit distance."""
        return closest_matches(component_type, self._definitions, limit=limit)

    def __contains__(self, component_type: object) -> bool:
        return isinstance(component_type, str) and self.is_valid_type(component_type)

    def __len__(self) -> int:
        return len(self._definitions)


# =============================================================================
# DEFAULT CATALOG
# =============================================================================

def _p(prop_type: PropType, required: bool = False, enum: Optional[List[Any]] = None,
       description: str = "") -> PropSchema:
    return PropSchema(type=prop_type, required=required, enum=enum, description=description)


_S, _N, _B, _O, _A = PropType.STRING, PropType.NUMBER, PropType.BOOLEAN, PropType.OBJECT, PropType.ARRAY


def _default_definitions() -> List[ComponentDefinition]:
    layout = "layout"
    inputs = "input"
    display = "display"
    navigation = "navigation"
    return [
        ComponentDefinition("Container", {}, layout, "Generic layout wrapper"),
        ComponentDefinition("Text", {"content": _p(_S)}, display, "Text span"),
        ComponentDefinition("Button", {
            "variant": _p(_S, enum=["default", "destructive", "outline", "secondary", "ghost", "link"]),
            "size": _p(_S, enum=["default", "sm", "lg", "icon", "icon-sm", "icon-lg"]),
            "disabled": _p(_B),
            "type": _p(_S, enum=["button", "submit", "reset"]),
        }, inputs, "Clickable button"),
        ComponentDefinition("Input", {
            "type": _p(_S, enum=["text", "password", "email", "number", "tel", "url", "search"]),
            "placeholder": _p(_S),
            "value": _p(_S),
            "name": _p(_S),
            "disabled": _p(_B),
        }, inputs, "Single-line text input"),
        ComponentDefinition("Textarea", {
            "placeholder": _p(_S),
            "value": _p(_S),
            "disabled": _p(_B),
            "rows": _p(_N),
        }, inputs, "Multi-line text input"),
        ComponentDefinition("Label", {"htmlFor": _p(_S)}, inputs, "Form label"),
        ComponentDefinition("Checkbox", {"checked": _p(_B), "disabled": _p(_B)}, inputs),
        ComponentDefinition("Switch", {"checked": _p(_B), "disabled": _p(_B)}, inputs),
        ComponentDefinition("Select", {"value": _p(_S), "placeholder": _p(_S), "disabled": _p(_B),
                                       "options": _p(_A)}, inputs),
        ComponentDefinition("SelectItem", {"value": _p(_S, required=True)}, inputs),
        ComponentDefinition("Card", {}, layout, "Card container"),
        ComponentDefinition("CardHeader", {}, layout),
        ComponentDefinition("CardTitle", {}, layout),
        ComponentDefinition("CardDescription", {}, layout),
        ComponentDefinition("CardContent", {}, layout),
        ComponentDefinition("CardFooter", {}, layout),
        ComponentDefinition("Badge", {
            "variant": _p(_S, enum=["default", "secondary", "destructive", "outline", "success", "warning"]),
        }, display),
        ComponentDefinition("Image", {"src": _p(_S, required=True), "alt": _p(_S),
                                      "width": _p(_N), "height": _p(_N)}, display),
        ComponentDefinition("Link", {"href": _p(_S, required=True), "target": _p(_S)}, navigation),
        ComponentDefinition("Separator", {"orientation": _p(_S, enum=["horizontal", "vertical"])}, layout),
        ComponentDefinition("Progress", {"value": _p(_N), "max": _p(_N)}, "feedback"),
        ComponentDefinition("Avatar", {"src": _p(_S), "alt": _p(_S), "fallback": _p(_S)}, display),
        ComponentDefinition("Table", {}, display),
        ComponentDefinition("TableHeader", {}, display),
        ComponentDefinition("TableBody", {}, display),
        ComponentDefinition("TableRow", {}, display),
        ComponentDefinition("TableHead", {}, display),
        ComponentDefinition("TableCell", {}, display),
        ComponentDefinition("Tabs", {"defaultValue": _p(_S), "value": _p(_S)}, navigation),
        ComponentDefinition("TabsList", {}, navigation),
        ComponentDefinition("TabsTrigger", {"value": _p(_S, required=True), "disabled": _p(_B)}, navigation),
        ComponentDefinition("TabsContent", {"value": _p(_S, required=True)}, navigation),
        ComponentDefinition("Alert", {"variant": _p(_S, enum=["default", "destructive"])}, "feedback"),
        ComponentDefinition(
            "Panel", {}, layout,
            deprecated=True,
            deprecation_message="Use Card instead",
        ),
    ]


def create_default_catalog() -> StaticComponentCatalog:
    """A fresh catalog of the built-in components."""
    return StaticComponentCatalog(_default_definitions())


__all__ = [
    "PropType",
    "PropSchema",
    "ComponentDefinition",
    "StaticComponentCatalog",
    "TYPE_ALIASES",
    "create_default_catalog",
    "json_type_name",
    "matches_prop_type",
]

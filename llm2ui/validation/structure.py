"""Structural checks of a parsed UI schema.

A schema is ``{"version", "root", "data"?}`` where every component is
``{"id", "type", "props"?, "style"?, "events"?, "loop"?, "children"?}``.
"""

from typing import Any, Dict, Iterator, List, Optional, Set, Tuple

from llm2ui.protocols import ChainValidationError, ValidationLayer

_VERSION_SUGGESTION = 'Add "version": "1.0" to your schema'
_ROOT_SUGGESTION = 'Add a "root" object with "id" and "type" fields'
_ID_SUGGESTION = "Each component must have a unique ID"
_TYPE_SUGGESTION = 'Add a "type" naming a registered component'
_CHILDREN_SUGGESTION = 'Use an array of component objects for "children"'


def _error(path: str, message: str, suggestion: Optional[str] = None) -> ChainValidationError:
    return ChainValidationError(
        layer=ValidationLayer.SCHEMA_STRUCTURE,
        path=path,
        message=message,
        suggestion=suggestion,
    )


def iter_components(root: Any, path: str = "root") -> Iterator[Tuple[str, Dict[str, Any]]]:
    """Depth-first (path, component) pairs; non-object nodes are skipped."""
    if not isinstance(root, dict):
        return
    yield path, root
    children = root.get("children")
    if isinstance(children, list):
        for index, child in enumerate(children):
            yield from iter_components(child, f"{path}.children[{index}]")


class StructureValidator:
    """Collects structure errors for one schema."""

    def __init__(self) -> None:
        self.errors: List[ChainValidationError] = []
        self._seen_ids: Set[str] = set()

    def validate(self, schema: Any) -> bool:
        """Check ``schema``; returns True if a component tree exists to walk."""
        if not isinstance(schema, dict):
            self.errors.append(_error(
                "",
                "Schema must be a JSON object",
                'Wrap the UI in an object with "version" and "root" fields',
            ))
            return False

        self._check_version(schema)

        data = schema.get("data")
        if data is not None and not isinstance(data, dict):
            self.errors.append(_error("data", 'Field "data" must be an object'))

        if "root" not in schema:
            self.errors.append(_error("root", 'Missing required field "root"', _ROOT_SUGGESTION))
            return False
        if not isinstance(schema["root"], dict):
            self.errors.append(_error("root", 'Field "root" must be an object', _ROOT_SUGGESTION))
            return False

        self._check_component(schema["root"], "root")
        return True

    def _check_version(self, schema: Dict[str, Any]) -> None:
        if "version" not in schema:
            self.errors.append(_error("version", 'Missing required field "version"', _VERSION_SUGGESTION))
        elif not isinstance(schema["version"], str):
            self.errors.append(_error("version", 'Field "version" must be a string', _VERSION_SUGGESTION))
        elif not schema["version"].strip():
            self.errors.append(_error("version", 'Field "version" must not be empty', _VERSION_SUGGESTION))

    def _check_component(self, node: Dict[str, Any], path: str) -> None:
        self._check_id(node, path)
        self._check_type(node, path)

        for key in ("props", "style", "data", "meta"):
            value = node.get(key)
            if value is not None and not isinstance(value, dict):
                self.errors.append(_error(
                    f"{path}.{key}",
                    f'Field "{key}" must be an object at "{path}"',
                ))

        self._check_events(node, path)
        self._check_loop(node, path)

        children = node.get("children")
        if children is None:
            return
        if not isinstance(children, list):
            self.errors.append(_error(
                f"{path}.children",
                f'Field "children" must be an array at "{path}"',
                _CHILDREN_SUGGESTION,
            ))
            return

        for index, child in enumerate(children):
            child_path = f"{path}.children[{index}]"
            if not isinstance(child, dict):
                self.errors.append(_error(
                    child_path,
                    f'Child at "{child_path}" must be a component object',
                    _CHILDREN_SUGGESTION,
                ))
                continue
            self._check_component(child, child_path)

    def _check_id(self, node: Dict[str, Any], path: str) -> None:
        if "id" not in node:
            self.errors.append(_error(f"{path}.id", f'Missing required field "id" at "{path}"', _ID_SUGGESTION))
            return
        component_id = node["id"]
        if not isinstance(component_id, str) or not component_id.strip():
            self.errors.append(_error(
                f"{path}.id",
                f'Field "id" must be a non-empty string at "{path}"',
                _ID_SUGGESTION,
            ))
            return
        if component_id in self._seen_ids:
            self.errors.append(_error(
                f"{path}.id",
                f'Duplicate component id "{component_id}" at "{path}"',
                _ID_SUGGESTION,
            ))
            return
        self._seen_ids.add(component_id)

    def _check_type(self, node: Dict[str, Any], path: str) -> None:
        if "type" not in node:
            self.errors.append(_error(f"{path}.type", f'Missing required field "type" at "{path}"', _TYPE_SUGGESTION))
            return
        component_type = node["type"]
        if not isinstance(component_type, str) or not component_type.strip():
            self.errors.append(_error(
                f"{path}.type",
                f'Field "type" must be a non-empty string at "{path}"',
                _TYPE_SUGGESTION,
            ))

    def _check_events(self, node: Dict[str, Any], path: str) -> None:
        events = node.get("events")
        if events is None:
            return
        if not isinstance(events, list):
            self.errors.append(_error(f"{path}.events", f'Field "events" must be an array at "{path}"'))
            return

        for index, event in enumerate(events):
            event_path = f"{path}.events[{index}]"
            if not isinstance(event, dict):
                self.errors.append(_error(event_path, f'Event at "{event_path}" must be an object'))
                continue
            if not isinstance(event.get("event"), str) or not event["event"]:
                self.errors.append(_error(
                    f"{event_path}.event",
                    f'Missing event name at "{event_path}"',
                    'Set "event" to a trigger name such as "click"',
                ))
            action = event.get("action")
            if not isinstance(action, dict) or not isinstance(action.get("type"), str):
                self.errors.append(_error(
                    f"{event_path}.action",
                    f'Missing action type at "{event_path}"',
                    'Set "action" to an object with a "type" field',
                ))

    def _check_loop(self, node: Dict[str, Any], path: str) -> None:
        loop = node.get("loop")
        if loop is None:
            return
        if not isinstance(loop, dict) or not isinstance(loop.get("source"), str):
            self.errors.append(_error(
                f"{path}.loop",
                f'Loop at "{path}" must have a "source" string',
                'Set "loop" to an object like {"source": "items"}',
            ))


def validate_schema_structure(schema: Any) -> Tuple[List[ChainValidationError], bool]:
    """Structure errors of ``schema`` and whether its tree can be walked."""
    validator = StructureValidator()
    walkable = validator.validate(schema)
    return validator.errors, walkable

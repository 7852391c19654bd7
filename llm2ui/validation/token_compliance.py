"""Design-token compliance of a UI schema.

Walks the component tree and counts style values that reference design
tokens (Tailwind utility classes, CSS variables) against hardcoded
literals (hex/rgb/hsl colours, pixel spacing). Every hardcoded literal is
reported with a suggested replacement taken from the nearest token.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from llm2ui.design_tokens import (
    DesignTokens,
    get_default_design_tokens,
    nearest_color_token,
    nearest_spacing_token,
)
from llm2ui.protocols import (
    ComplianceError,
    ComplianceIssueType,
    ComplianceResult,
    UISchema,
)

# =============================================================================
# PATTERNS
# =============================================================================

HEX_COLOR_PATTERN = re.compile(r"#(?:[0-9a-fA-F]{8}|[0-9a-fA-F]{6}|[0-9a-fA-F]{3})\b")
RGB_COLOR_PATTERN = re.compile(r"rgba?\(\s*[\d.%]+\s*[,\s]\s*[\d.%]+\s*[,\s]\s*[\d.%]+(?:\s*[,/]\s*[\d.%]+)?\s*\)", re.IGNORECASE)
HSL_COLOR_PATTERN = re.compile(r"hsla?\(\s*[\d.]+(?:deg)?\s*[,\s]\s*[\d.]+%\s*[,\s]\s*[\d.]+%(?:\s*[,/]\s*[\d.%]+)?\s*\)", re.IGNORECASE)
PX_PATTERN = re.compile(r"(?<![\w.])(\d+(?:\.\d+)?)px\b")

TAILWIND_COLOR_PREFIXES = (
    "bg-", "text-", "border-", "ring-", "fill-", "stroke-",
    "from-", "via-", "to-", "placeholder-", "divide-",
)

TAILWIND_SPACING_PREFIXES = (
    "p-", "px-", "py-", "pt-", "pr-", "pb-", "pl-",
    "m-", "mx-", "my-", "mt-", "mr-", "mb-", "ml-",
    "gap-", "gap-x-", "gap-y-",
    "space-x-", "space-y-",
    "w-", "h-", "min-w-", "min-h-", "max-w-", "max-h-",
)

SPACING_STYLE_PROPS = frozenset({
    "padding", "paddingTop", "paddingRight", "paddingBottom", "paddingLeft",
    "paddingInline", "paddingBlock",
    "margin", "marginTop", "marginRight", "marginBottom", "marginLeft",
    "marginInline", "marginBlock",
    "gap", "rowGap", "columnGap",
    "width", "height", "minWidth", "minHeight", "maxWidth", "maxHeight",
})

# CSS keywords that name a colour without a token
NAMED_COLORS = frozenset({
    "black", "white", "red", "green", "blue", "yellow", "orange", "purple",
    "pink", "gray", "grey", "brown", "cyan", "magenta", "navy", "teal",
    "lime", "maroon", "olive", "silver", "gold", "indigo", "violet",
})


def _is_color_prop(prop: str) -> bool:
    lowered = prop.lower()
    return lowered.endswith("color") or lowered in ("background", "fill", "stroke")


def _strip_variants(cls: str) -> str:
    """``md:hover:bg-primary-500`` -> ``bg-primary-500``; ``-mt-2`` -> ``mt-2``."""
    base = cls.rsplit(":", 1)[-1]
    return base[1:] if base.startswith("-") else base


# =============================================================================
# DETECTION
# =============================================================================

def detect_hardcoded_colors(value: str) -> List[str]:
    """Every hex, rgb()/rgba() and hsl()/hsla() literal in ``value``, in order."""
    found: List[Tuple[int, str]] = []
    for pattern in (HEX_COLOR_PATTERN, RGB_COLOR_PATTERN, HSL_COLOR_PATTERN):
        found.extend((m.start(), m.group(0)) for m in pattern.finditer(value))
    found.sort()
    return [literal for _, literal in found]


def detect_hardcoded_spacing(value: str) -> List[str]:
    """Every ``<number>px`` literal in ``value``, in order."""
    return [m.group(0) for m in PX_PATTERN.finditer(value)]


def is_tokenized_class(cls: str) -> bool:
    """True for Tailwind colour/spacing utilities that reference the scale.

    Arbitrary-value classes such as ``bg-[#fff]`` are literals, not tokens.
    """
    if "[" in cls:
        return False
    base = _strip_variants(cls)
    return base.startswith(TAILWIND_COLOR_PREFIXES) or base.startswith(TAILWIND_SPACING_PREFIXES)


def calculate_compliance_score(tokenized: int, hardcoded: int) -> int:
    """round(100 * tokenized / (tokenized + hardcoded)); 100 when both are 0.

    Halves round up.
    """
    total = tokenized + hardcoded
    if total <= 0:
        return 100
    return (200 * tokenized + total) // (2 * total)


# =============================================================================
# SUGGESTIONS
# =============================================================================

def suggest_color_replacement(value: str, tokens: DesignTokens) -> str:
    """Replacement for a colour literal, naming the nearest colour token."""
    match = nearest_color_token(value, tokens)
    if match is None:
        return f"Use a color token class such as 'bg-primary-500' or 'text-neutral-900' instead of '{value}'"
    suggestion = f"Use 'bg-{match.token}' or 'text-{match.token}' instead of '{value}'"
    if not match.exact:
        suggestion += f" (nearest token: {match.token} = {match.value})"
    return suggestion


def suggest_spacing_replacement(value: str, tokens: DesignTokens) -> str:
    """Replacement for a pixel literal, naming the nearest spacing step."""
    px = float(value[:-2])
    match = nearest_spacing_token(px, tokens)
    return f"Use 'gap-{match.step}' or 'p-{match.step}' ({match.px:g}px) instead of '{value}'"


# =============================================================================
# VALIDATOR
# =============================================================================

@dataclass
class _Scan:
    tokens: DesignTokens
    tokenized: int = 0
    hardcoded: int = 0
    errors: List[ComplianceError] = field(default_factory=list)
    warnings: List[ComplianceError] = field(default_factory=list)

    def color(self, path: str, location: str, literal: str) -> None:
        self.hardcoded += 1
        self.errors.append(ComplianceError(
            path=path,
            type=ComplianceIssueType.HARDCODED_COLOR,
            message=f'Hardcoded color value "{literal}" found in {location}',
            suggestion=suggest_color_replacement(literal, self.tokens),
            detected_value=literal,
        ))

    def spacing(self, path: str, location: str, literal: str) -> None:
        self.hardcoded += 1
        self.errors.append(ComplianceError(
            path=path,
            type=ComplianceIssueType.HARDCODED_SPACING,
            message=f'Hardcoded spacing value "{literal}" found in {location}',
            suggestion=suggest_spacing_replacement(literal, self.tokens),
            detected_value=literal,
        ))

    def class_name(self, path: str, value: str) -> None:
        for cls in value.split():
            colors = detect_hardcoded_colors(cls)
            spacing = detect_hardcoded_spacing(cls)
            for literal in colors:
                self.color(path, "className", literal)
            for literal in spacing:
                self.spacing(path, "className", literal)
            if not colors and not spacing and is_tokenized_class(cls):
                self.tokenized += 1

    def style(self, path: str, style: Dict[str, Any]) -> None:
        for prop, value in style.items():
            if not isinstance(value, str):
                continue
            prop_path = f"{path}.{prop}"
            location = f"style.{prop}"

            if value.strip().startswith("var("):
                self.tokenized += 1
                continue

            for literal in detect_hardcoded_colors(value):
                self.color(prop_path, location, literal)

            if prop in SPACING_STYLE_PROPS:
                for literal in detect_hardcoded_spacing(value):
                    self.spacing(prop_path, location, literal)

            if _is_color_prop(prop) and value.strip().lower() in NAMED_COLORS:
                self.warnings.append(ComplianceError(
                    path=prop_path,
                    type=ComplianceIssueType.MISSING_TOKEN_OPPORTUNITY,
                    message=f'Named color "{value.strip()}" found in {location}',
                    suggestion=f"Use a color token class such as 'bg-primary-500' instead of '{value.strip()}'",
                    detected_value=value.strip(),
                ))

    def component(self, node: Any, path: str) -> None:
        if not isinstance(node, dict):
            return

        props = node.get("props")
        if isinstance(props, dict):
            class_name = props.get("className")
            if isinstance(class_name, str):
                self.class_name(f"{path}.props.className", class_name)
            props_style = props.get("style")
            if isinstance(props_style, dict):
                self.style(f"{path}.props.style", props_style)

        style = node.get("style")
        if isinstance(style, dict):
            self.style(f"{path}.style", style)

        children = node.get("children")
        if isinstance(children, list):
            for index, child in enumerate(children):
                self.component(child, f"{path}.children[{index}]")


def validate_token_compliance(
    schema: UISchema,
    tokens: Optional[DesignTokens] = None,
) -> ComplianceResult:
    """Score how consistently ``schema`` uses design tokens.

    Args:
        schema: Parsed UI schema
        tokens: Token catalog used for suggestions (defaults if None)
    """
    scan = _Scan(tokens=tokens or get_default_design_tokens())
    if isinstance(schema, dict):
        scan.component(schema.get("root"), "root")

    return ComplianceResult(
        valid=not scan.errors,
        compliance_score=calculate_compliance_score(scan.tokenized, scan.hardcoded),
        tokenized_values=scan.tokenized,
        hardcoded_values=scan.hardcoded,
        errors=scan.errors,
        warnings=scan.warnings,
    )


def format_compliance_errors_for_llm(result: ComplianceResult) -> str:
    """Render compliance findings as a prompt section; empty if clean."""
    if not result.errors and not result.warnings:
        return ""

    lines = [
        "## Token Compliance Issues",
        "",
        f"Compliance Score: {result.compliance_score}% "
        f"({result.tokenized_values} tokenized, {result.hardcoded_values} hardcoded)",
        "",
    ]

    if result.errors:
        lines.append("### Errors (MUST FIX)")
        for index, error in enumerate(result.errors, 1):
            lines.append(f'{index}. [{ComplianceIssueType(error.type).value}] at "{error.path}": {error.message}')
            lines.append(f"   Suggestion: {error.suggestion}")
        lines.append("")

    if result.warnings:
        lines.append("### Warnings")
        for index, warning in enumerate(result.warnings, 1):
            lines.append(f'{index}. [{ComplianceIssueType(warning.type).value}] at "{warning.path}": {warning.message}')
            lines.append(f"   Suggestion: {warning.suggestion}")

    return "\n".join(lines)


__all__ = [
    "validate_token_compliance",
    "calculate_compliance_score",
    "detect_hardcoded_colors",
    "detect_hardcoded_spacing",
    "is_tokenized_class",
    "suggest_color_replacement",
    "suggest_spacing_replacement",
    "format_compliance_errors_for_llm",
]

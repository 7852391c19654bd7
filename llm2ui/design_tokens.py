"""Design tokens: the named colour and spacing values schemas should use.

Colour scales follow the Tailwind palette (shades 50-950) and spacing
tokens map onto the Tailwind spacing scale, where step N is N * 4px.
"""

import colorsys
import copy
import math
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

RGB = Tuple[int, int, int]

SHADES = ["50", "100", "200", "300", "400", "500", "600", "700", "800", "900", "950"]

# Tailwind spacing: class step N equals N * 4px
PX_PER_SPACING_STEP = 4


def _scale(*values: str) -> Dict[str, str]:
    return dict(zip(SHADES, values))


@dataclass
class DesignTokens:
    """A design-token catalog."""
    colors: Dict[str, Dict[str, str]] = field(default_factory=dict)
    spacing: Dict[str, str] = field(default_factory=dict)
    font_sizes: Dict[str, str] = field(default_factory=dict)
    font_weights: Dict[str, int] = field(default_factory=dict)
    shadows: Dict[str, str] = field(default_factory=dict)
    radius: Dict[str, str] = field(default_factory=dict)
    breakpoints: Dict[str, int] = field(default_factory=dict)


_DEFAULT_TOKENS = DesignTokens(
    colors={
        "primary": _scale("#eff6ff", "#dbeafe", "#bfdbfe", "#93c5fd", "#60a5fa", "#3b82f6",
                          "#2563eb", "#1d4ed8", "#1e40af", "#1e3a8a", "#172554"),
        "secondary": _scale("#f5f3ff", "#ede9fe", "#ddd6fe", "#c4b5fd", "#a78bfa", "#8b5cf6",
                            "#7c3aed", "#6d28d9", "#5b21b6", "#4c1d95", "#2e1065"),
        "neutral": _scale("#fafafa", "#f4f4f5", "#e4e4e7", "#d4d4d8", "#a1a1aa", "#71717a",
                          "#52525b", "#3f3f46", "#27272a", "#18181b", "#09090b"),
        "success": _scale("#f0fdf4", "#dcfce7", "#bbf7d0", "#86efac", "#4ade80", "#22c55e",
                          "#16a34a", "#15803d", "#166534", "#14532d", "#052e16"),
        "warning": _scale("#fffbeb", "#fef3c7", "#fde68a", "#fcd34d", "#fbbf24", "#f59e0b",
                          "#d97706", "#b45309", "#92400e", "#78350f", "#451a03"),
        "error": _scale("#fef2f2", "#fee2e2", "#fecaca", "#fca5a5", "#f87171", "#ef4444",
                        "#dc2626", "#b91c1c", "#991b1b", "#7f1d1d", "#450a0a"),
    },
    spacing={
        "xs": "4px",
        "sm": "8px",
        "md": "16px",
        "lg": "24px",
        "xl": "32px",
        "2xl": "48px",
        "3xl": "64px",
    },
    font_sizes={
        "xs": "12px",
        "sm": "14px",
        "base": "16px",
        "lg": "18px",
        "xl": "20px",
        "2xl": "24px",
        "3xl": "30px",
        "4xl": "36px",
    },
    font_weights={"normal": 400, "medium": 500, "semibold": 600, "bold": 700},
    shadows={
        "sm": "0 1px 2px 0 rgb(0 0 0 / 0.05)",
        "md": "0 4px 6px -1px rgb(0 0 0 / 0.1), 0 2px 4px -2px rgb(0 0 0 / 0.1)",
        "lg": "0 10px 15px -3px rgb(0 0 0 / 0.1), 0 4px 6px -4px rgb(0 0 0 / 0.1)",
        "xl": "0 20px 25px -5px rgb(0 0 0 / 0.1), 0 8px 10px -6px rgb(0 0 0 / 0.1)",
    },
    radius={"none": "0", "sm": "4px", "md": "8px", "lg": "12px", "xl": "16px", "full": "9999px"},
    breakpoints={"mobile": 768, "tablet": 1024, "desktop": 1280},
)


def get_default_design_tokens() -> DesignTokens:
    """A private copy of the built-in tokens."""
    return copy.deepcopy(_DEFAULT_TOKENS)


# =============================================================================
# COLOUR PARSING
# =============================================================================

_HEX = re.compile(r"^#([0-9a-fA-F]{3}|[0-9a-fA-F]{4}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")
_FUNC = re.compile(r"^(rgba?|hsla?)\(\s*([^)]*)\)$", re.IGNORECASE)
_PX = re.compile(r"^(-?\d+(?:\.\d+)?)px$")


def _channel(raw: str, scale: float = 255.0) -> float:
    raw = raw.strip()
    if raw.endswith("%"):
        return float(raw[:-1]) / 100.0 * scale
    return float(raw)


def parse_color(value: str) -> Optional[RGB]:
    """Parse hex, rgb()/rgba() or hsl()/hsla() into an RGB triple.

    Alpha is ignored. Returns None for anything else.
    """
    value = value.strip()

    match = _HEX.match(value)
    if match:
        digits = match.group(1)
        if len(digits) in (3, 4):
            digits = "".join(c * 2 for c in digits[:3])
        return int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16)

    match = _FUNC.match(value)
    if not match:
        return None

    kind = match.group(1).lower()
    parts = [p for p in re.split(r"[\s,/]+", match.group(2).strip()) if p]
    if len(parts) < 3:
        return None

    try:
        if kind.startswith("rgb"):
            r, g, b = (_channel(p) for p in parts[:3])
        else:
            hue = float(parts[0].rstrip("deg")) % 360 / 360.0
            sat = _channel(parts[1], 1.0)
            light = _channel(parts[2], 1.0)
            r, g, b = (c * 255.0 for c in colorsys.hls_to_rgb(hue, light, sat))
    except ValueError:
        return None

    def clamp(c: float) -> int:
        return max(0, min(255, int(round(c))))

    return clamp(r), clamp(g), clamp(b)


def parse_px(value: str) -> Optional[float]:
    """Parse ``"16px"`` into 16.0; None if not a pixel literal."""
    match = _PX.match(value.strip())
    return float(match.group(1)) if match else None


# =============================================================================
# TOKEN LOOKUP
# =============================================================================

@dataclass(frozen=True)
class ColorMatch:
    """Nearest colour token to a literal."""
    name: str
    shade: str
    value: str
    distance: float

    @property
    def token(self) -> str:
        return f"{self.name}-{self.shade}"

    @property
    def exact(self) -> bool:
        return self.distance == 0


@dataclass(frozen=True)
class SpacingMatch:
    """Nearest spacing token to a pixel literal."""
    name: str
    px: float
    step: str


def suggest_color_token(value: str, tokens: DesignTokens) -> Optional[str]:
    """Token whose value equals ``value`` exactly, e.g. "primary-500"."""
    normalized = value.strip().lower()
    for name, scale in tokens.colors.items():
        for shade, token_value in scale.items():
            if token_value.lower() == normalized:
                return f"{name}-{shade}"
    return None


def nearest_color_token(value: str, tokens: DesignTokens) -> Optional[ColorMatch]:
    """Colour token closest to ``value`` in RGB space, or None if unparseable."""
    target = parse_color(value)
    if target is None:
        return None

    best: Optional[ColorMatch] = None
    for name, scale in tokens.colors.items():
        for shade, token_value in scale.items():
            rgb = parse_color(token_value)
            if rgb is None:
                continue
            distance = math.dist(target, rgb)
            if best is None or distance < best.distance:
                best = ColorMatch(name, shade, token_value, distance)
    return best


def _format_step(px: float) -> str:
    step = px / PX_PER_SPACING_STEP
    return str(int(step)) if step == int(step) else f"{step:g}"


def spacing_scale(tokens: DesignTokens) -> List[SpacingMatch]:
    """Spacing tokens with their Tailwind steps, smallest first."""
    scale = [SpacingMatch("0", 0.0, "0")]
    for name, value in tokens.spacing.items():
        px = parse_px(value)
        if px is not None:
            scale.append(SpacingMatch(name, px, _format_step(px)))
    scale.sort(key=lambda m: m.px)
    return scale


def nearest_spacing_token(px: float, tokens: DesignTokens) -> SpacingMatch:
    """Spacing token closest to ``px``; ties go to the smaller token."""
    return min(spacing_scale(tokens), key=lambda m: (abs(m.px - px), m.px))


# =============================================================================
# PROMPT FORMATTING
# =============================================================================

def format_tokens_for_llm(tokens: DesignTokens) -> str:
    """Describe the tokens for inclusion in a system prompt."""
    colors = "\n".join(
        f"  {name}: {scale.get('500', next(iter(scale.values()), ''))} (main shade)"
        for name, scale in tokens.colors.items()
    )
    spacing = ", ".join(
        f"{m.name}={m.px:g}px (gap-{m.step}, p-{m.step})"
        for m in spacing_scale(tokens) if m.name != "0"
    )
    font_sizes = ", ".join(f"{k}={v}" for k, v in tokens.font_sizes.items())
    font_weights = ", ".join(f"{k}={v}" for k, v in tokens.font_weights.items())
    radius = ", ".join(f"{k}={v}" for k, v in tokens.radius.items())

    sections = [
        "## Design Tokens (MUST USE)",
        "",
        "### Colors (use semantic names, shades 50-950)",
        colors,
        "",
        "### Spacing",
        f"  {spacing}",
        "",
        "### Typography",
        f"  Font Sizes: {font_sizes}",
        f"  Font Weights: {font_weights}",
        "",
        "### Border Radius",
        f"  {radius}",
        "",
        "**Instructions**: Use Tailwind classes built from these tokens "
        "(e.g. bg-primary-500, text-neutral-900, gap-4, p-6) instead of "
        "hardcoded hex colors or pixel values.",
    ]
    return "\n".join(sections)


__all__ = [
    "DesignTokens",
    "ColorMatch",
    "SpacingMatch",
    "get_default_design_tokens",
    "parse_color",
    "parse_px",
    "suggest_color_token",
    "nearest_color_token",
    "spacing_scale",
    "nearest_spacing_token",
    "format_tokens_for_llm",
]

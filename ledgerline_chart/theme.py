from __future__ import annotations

from dataclasses import asdict, dataclass
import re
from typing import Any, Mapping

from ledgerline_chart.errors import ChartConfigError

_HEX_COLOR = re.compile(r"^#[0-9a-fA-F]{6}([0-9a-fA-F]{2})?$")

_COLOR_TOKENS = (
    "primary_color",
    "text_secondary_color",
    "card_background_color",
    "border_color",
)


@dataclass(frozen=True)
class ThemeTokens:
    """Theme descriptor consumed by the chart engine.

    Only used as fallback fills when a chart config omits explicit colors.
    """

    primary_color: str = "#0EA5E9"
    text_secondary_color: str = "#475569"
    card_background_color: str = "#FFFFFF"
    border_color: str = "#E2E8F0"


LIGHT_THEME = ThemeTokens()
DARK_THEME = ThemeTokens(
    primary_color="#38BDF8",
    text_secondary_color="#CBD5E1",
    card_background_color="#1E293B",
    border_color="#334155",
)

THEMES: dict[str, ThemeTokens] = {"light": LIGHT_THEME, "dark": DARK_THEME}


def is_hex_color(value: Any) -> bool:
    return isinstance(value, str) and bool(_HEX_COLOR.match(value))


def validate_theme_tokens(overrides: Mapping[str, Any] | None = None, *, base: str = "light") -> ThemeTokens:
    """Validate and merge token overrides against a named base palette."""

    if base not in THEMES:
        raise ChartConfigError(f"Unknown theme: {base}")
    raw: dict[str, Any] = asdict(THEMES[base])
    if overrides:
        for key, value in overrides.items():
            if key not in raw:
                raise ChartConfigError(f"Unknown theme token: {key}")
            raw[key] = value

    for key in _COLOR_TOKENS:
        if not is_hex_color(raw[key]):
            raise ChartConfigError(f"Token `{key}` must be a hex color (#RRGGBB or #RRGGBBAA)")

    return ThemeTokens(**{key: str(raw[key]) for key in _COLOR_TOKENS})


def hex_to_rgba(color: str, opacity: float = 1.0) -> tuple[int, int, int, int]:
    if not is_hex_color(color):
        raise ValueError(f"not a hex color: {color!r}")
    r = int(color[1:3], 16)
    g = int(color[3:5], 16)
    b = int(color[5:7], 16)
    a = int(color[7:9], 16) if len(color) == 9 else 255
    return (r, g, b, int(round(a * max(0.0, min(1.0, opacity)))))

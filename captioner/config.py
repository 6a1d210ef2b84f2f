from __future__ import annotations
import json, os
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Optional, Dict, Any

from captioner.domain.errors import InvalidConfiguration
from captioner.domain.types import LayoutConfig


CONFIG_DIR = Path.home() / ".config" / "captioner"
CONFIG_PATH = CONFIG_DIR / "config.json"

DEFAULT_COMIC_ENDPOINT = "https://www.newyorker.com/cartoons/random/randomAPI1"


@dataclass(frozen=True)
class RenderStyle:
    font_size: int
    font_color: str
    background: str = "#ffffff"
    font_path: Optional[Path] = None


@dataclass(frozen=True)
class Preset:
    layout: LayoutConfig
    style: RenderStyle


# One entry per rendering backend the bot has shipped with. They differ only
# in numbers, never in the algorithm.
PRESETS: Dict[str, Preset] = {
    "canvas": Preset(
        layout=LayoutConfig(margin_sides=36, margin_top=24, outer_padding=16, line_spacing=2,
                            target_image_width=600, square_adjustment=True),
        style=RenderStyle(font_size=24, font_color="#111111"),
    ),
    "gd": Preset(
        layout=LayoutConfig(margin_sides=50, margin_top=24, outer_padding=20, line_spacing=2,
                            target_image_width=600, square_adjustment=False,
                            min_line_height=19),
        style=RenderStyle(font_size=19, font_color="#080808"),
    ),
}

DEFAULT_PRESET = "canvas"


@dataclass
class Config:
    # Rendering
    preset: str = os.environ.get("CAPTIONER_PRESET", DEFAULT_PRESET)
    font_path: Optional[Path] = Path(os.environ["CAPTIONER_FONT"]) if os.environ.get("CAPTIONER_FONT") else None
    font_size: Optional[int] = None
    font_color: str = ""
    background: str = ""
    layout_overrides: Dict[str, Any] = field(default_factory=dict)

    # Source
    comic_endpoint: str = os.environ.get("CAPTIONER_COMIC_ENDPOINT", DEFAULT_COMIC_ENDPOINT)
    fetch_timeout: float = 30.0
    max_fetch_attempts: int = 5


class ConfigManager:
    """Load / save app configuration as JSON. Keeps the rest of the code simple."""

    @staticmethod
    def load(path: Path = CONFIG_PATH) -> Config:
        c = Config()
        if not path.exists():
            return c
        try:
            d = json.loads(path.read_text(encoding="utf-8"))
            font = d.get("font_path") or ""
            c.preset = d.get("preset", c.preset)
            c.font_path = Path(font) if font else c.font_path
            c.font_size = int(d["font_size"]) if d.get("font_size") else None
            c.font_color = d.get("font_color", c.font_color)
            c.background = d.get("background", c.background)
            c.layout_overrides = dict(d.get("layout_overrides") or {})
            c.comic_endpoint = d.get("comic_endpoint", c.comic_endpoint)
            c.fetch_timeout = float(d.get("fetch_timeout", c.fetch_timeout))
            c.max_fetch_attempts = int(d.get("max_fetch_attempts", c.max_fetch_attempts))
        except (OSError, ValueError, TypeError, AttributeError):
            return Config()
        return c

    @staticmethod
    def save(c: Config, path: Path = CONFIG_PATH) -> None:
        data: Dict[str, Any] = {
            "preset": c.preset,
            "font_path": str(c.font_path) if c.font_path else "",
            "font_size": c.font_size,
            "font_color": c.font_color,
            "background": c.background,
            "layout_overrides": c.layout_overrides,
            "comic_endpoint": c.comic_endpoint,
            "fetch_timeout": c.fetch_timeout,
            "max_fetch_attempts": c.max_fetch_attempts,
        }
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data, indent=2), encoding="utf-8")


_LAYOUT_FIELDS = {f.name for f in fields(LayoutConfig)}


def resolve_preset(c: Config, name: Optional[str] = None) -> Preset:
    """Named preset with the config's layout and font overrides applied."""
    name = name or c.preset
    if name not in PRESETS:
        raise InvalidConfiguration(f"Unknown preset {name!r}; choose from {sorted(PRESETS)}")
    base = PRESETS[name]

    unknown = set(c.layout_overrides) - _LAYOUT_FIELDS
    if unknown:
        raise InvalidConfiguration(f"Unknown layout option(s): {', '.join(sorted(unknown))}")
    layout_cfg = replace(base.layout, **c.layout_overrides)
    layout_cfg.validate()

    style = replace(
        base.style,
        font_size=c.font_size or base.style.font_size,
        font_color=c.font_color or base.style.font_color,
        background=c.background or base.style.background,
        font_path=c.font_path or base.style.font_path,
    )
    return Preset(layout=layout_cfg, style=style)

"""Console colors.

The bundled ``data/theme.toml`` defines every style. A ``theme.toml`` in the
config directory may override any subset of it; an unreadable or invalid
override is ignored with a warning.
"""

import logging
import re
import tomllib
from functools import cache
from importlib import resources
from pathlib import Path

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator
from rich.theme import Theme

from provctl.core.paths import get_config_dir

logger = logging.getLogger(__name__)

_HEX_COLOR = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")


class ThemeColors(BaseModel):
    """Hex colors behind the console styles."""

    model_config = ConfigDict(extra="forbid")

    header: str = "#69B9A1"
    border: str = "#29526d"
    muted: str = "#b2bec3"
    info: str = "#0ec1c8"
    success: str = "#03b971"
    warning: str = "#f5b332"
    error: str = "#f53263"
    added: str = "#c1ff62"
    present: str = "#69B9A1"
    missing: str = "#f5b332"

    @field_validator("*")
    @classmethod
    def validate_hex(cls, v: str) -> str:
        """Colors are #RGB or #RRGGBB."""
        color = v.strip()
        if not _HEX_COLOR.match(color):
            msg = f"expected a #RGB or #RRGGBB color, got {v!r}"
            raise ValueError(msg)
        return color


def get_user_theme_path() -> Path:
    """Path of the optional color override file."""
    return get_config_dir() / "theme.toml"


def _colors_table(text: str) -> dict[str, object]:
    table = tomllib.loads(text).get("colors", {})
    return table if isinstance(table, dict) else {}


def load_colors() -> ThemeColors:
    """Load the bundled colors merged with the user's overrides."""
    bundled = _colors_table(
        resources.files("provctl.data").joinpath("theme.toml").read_text("utf-8")
    )

    path = get_user_theme_path()
    try:
        overrides = _colors_table(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        overrides = {}
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning("Ignoring theme override %s: %s", path, e)
        overrides = {}

    try:
        return ThemeColors.model_validate({**bundled, **overrides})
    except ValidationError as e:
        logger.warning("Ignoring theme override %s: %s", path, e)
        return ThemeColors.model_validate(bundled)


def build_theme(colors: ThemeColors) -> Theme:
    """Map colors onto the style names used in console markup."""
    return Theme(
        {
            "header": colors.header,
            "bold_header": f"bold {colors.header}",
            "border": colors.border,
            "muted": colors.muted,
            "info": colors.info,
            "success": colors.success,
            "warning": colors.warning,
            "error": f"bold {colors.error}",
            "added": colors.added,
            "present": colors.present,
            "missing": f"bold {colors.missing}",
        }
    )


@cache
def get_theme() -> Theme:
    """Theme shared by the console instances, built once per process."""
    return build_theme(load_colors())

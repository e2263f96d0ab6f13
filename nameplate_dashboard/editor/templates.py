# nameplate_dashboard/editor/templates.py
from typing import Dict, List, Tuple

from nameplate_dashboard.db.enums import Theme

# theme -> background template paths, first entry is the default
TEMPLATES: Dict[str, List[str]] = {
    theme.value: [f"/backgrounds/{theme.value}/d{n}.webp" for n in range(1, 5)]
    for theme in Theme
}

# (label, CSS color) offered by the text color picker
COLOR_PRESETS: Tuple[Tuple[str, str], ...] = (
    ("Gold", "#FFD700"),
    ("Red", "rgb(204, 0, 26)"),
    ("White", "#FFFFFF"),
    ("Black", "#000000"),
)

DEFAULT_TEXT_COLOR = "#FFD700"
DEFAULT_HOUSE_NAME_SIZE = 18
DEFAULT_OWNER_NAME_SIZE = 40
DEFAULT_ADDRESS_SIZE = 18


def backgrounds_for(theme: str) -> List[str]:
    try:
        return TEMPLATES[Theme(theme).value]
    except ValueError:
        raise ValueError(f"Unknown theme: {theme}. Valid values: {[t.value for t in Theme]}")


def default_background(theme: str) -> str:
    return backgrounds_for(theme)[0]

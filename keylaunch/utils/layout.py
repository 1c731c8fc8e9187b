"""
Window layout read from settings.

Kept free of GTK so the panel's geometry rules can be checked headless;
the panel maps the alignment names onto Gtk.Align.
"""

from dataclasses import dataclass
from typing import Any, Dict

from loguru import logger

ALIGNMENTS = ("fill", "start", "end", "center")
ORIENTATIONS = ("vertical", "horizontal")


@dataclass(frozen=True)
class Margins:
    top: int = 0
    bottom: int = 0
    start: int = 0
    end: int = 0


@dataclass(frozen=True)
class Layout:
    """
    Geometry and chrome options for the launcher window.

    An empty alignment keeps the widget's own default. Zero width or
    list height means "size to content".
    """

    placeholder: str = "Search..."
    orientation: str = "vertical"
    width: int = 600
    halign: str = ""
    valign: str = ""
    margins: Margins = Margins()
    search_delay: int = 0
    hide_icons: bool = False
    spinner_spacing: int = 8
    icon_size: int = 32
    list_height: int = 0
    fixed_height: bool = False
    list_margin_top: int = 0
    ignore_mouse: bool = False

    @property
    def horizontal(self) -> bool:
        return self.orientation == "horizontal"

    @classmethod
    def from_settings(cls, settings: Dict[str, Any]) -> "Layout":
        launcher = settings.get("launcher", {})
        search = settings.get("search", {})
        results = settings.get("list", {})
        margins = launcher.get("margins", {})

        return cls(
            placeholder=launcher.get("placeholder", "Search..."),
            orientation=_choice(launcher.get("orientation", "vertical"), ORIENTATIONS,
                                "vertical", "launcher.orientation"),
            width=max(0, int(launcher.get("width", 600))),
            halign=_choice(launcher.get("halign", ""), ALIGNMENTS, "", "launcher.halign"),
            valign=_choice(launcher.get("valign", ""), ALIGNMENTS, "", "launcher.valign"),
            margins=Margins(
                top=int(margins.get("top", 0)),
                bottom=int(margins.get("bottom", 0)),
                start=int(margins.get("start", 0)),
                end=int(margins.get("end", 0)),
            ),
            search_delay=max(0, int(search.get("delay", 0))),
            hide_icons=bool(search.get("hide_icons", False)),
            spinner_spacing=int(search.get("margin_spinner", 8)),
            icon_size=int(results.get("icon_size", 32)),
            list_height=max(0, int(results.get("height", 0))),
            fixed_height=bool(results.get("fixed_height", False)),
            list_margin_top=int(results.get("margin_top", 0)),
            ignore_mouse=bool(results.get("ignore_mouse", False)),
        )


def _choice(value: str, allowed: tuple, fallback: str, key: str) -> str:
    if value == "" or value in allowed:
        return value
    logger.warning(f"Unknown value {value!r} for {key}, using {fallback or 'default'}")
    return fallback

"""
Search Panel - The launcher window: search entry, spinner and result rows.

Implements RenderSurface and WindowControl on top of Ignis widgets. All
list state lives in ResultList; this panel only draws what it is told and
forwards input:

- Typing re-runs the search, debounced by search.delay
- Up/Down move the selection, Return activates (Shift+Return stays open)
- Holding Control shows quick-activation mode; Control+label activates
- Pointer motion selects, click activates, drag exports a file
- Escape leaves a pinned module, or closes the launcher
"""

import os
from typing import Callable, Optional, Sequence

from gi.repository import Gdk, GLib, Gtk
from ignis import widgets
from loguru import logger

from keylaunch.errors import RenderInvariantError
from keylaunch.search.results import RenderSurface, Row
from keylaunch.search.session import WindowControl
from keylaunch.utils.helpers import Debouncer
from keylaunch.utils.layout import Layout

CONTROL_KEYS = (Gdk.KEY_Control_L, Gdk.KEY_Control_R)

GTK_ALIGN = {
    "fill": Gtk.Align.FILL,
    "start": Gtk.Align.START,
    "end": Gtk.Align.END,
    "center": Gtk.Align.CENTER,
}


class SearchPanel(RenderSurface, WindowControl):
    """
    Launcher window bound to a session, result list and activation controller.

    Call create_window() first, then bind().
    """

    def __init__(self, settings: dict):
        self.settings = settings
        self.layout = Layout.from_settings(settings)
        self._debounce = Debouncer(
            self.layout.search_delay,
            self._run_search,
            timeout_add=GLib.timeout_add,
            source_remove=GLib.source_remove,
        )

        self.session = None
        self.results = None
        self.activation = None
        self.on_show: list[Callable[[], None]] = []

        # Widgets (created in create_window)
        self.window = None
        self.search_entry = None
        self.spinner = None
        self.scroll = None
        self.results_box = None
        self.row_boxes: list = []

    def bind(self, session, results, activation) -> None:
        self.session = session
        self.results = results
        self.activation = activation

    def create_window(self):
        """
        Create the launcher window.

        Returns:
            widgets.Window anchored at the top of the screen, initially hidden
        """
        layout = self.layout
        self.search_entry = widgets.Entry(
            placeholder_text=layout.placeholder,
            css_classes=["search-entry"],
            hexpand=True,
            on_change=lambda x: self._on_search_changed(),
        )

        focus_controller = Gtk.EventControllerFocus()
        focus_controller.connect("enter", lambda controller: self._guard(self.session.mark_measured))
        self.search_entry.add_controller(focus_controller)

        if not layout.hide_icons:
            self.search_entry.set_icon_from_icon_name(
                Gtk.EntryIconPosition.PRIMARY, "system-search-symbolic"
            )
        if layout.horizontal:
            self.search_entry.set_valign(Gtk.Align.START)

        self.spinner = Gtk.Spinner(spinning=True, visible=False)

        self.results_box = widgets.Box(
            vertical=True,
            spacing=2,
            css_classes=["list"],
        )
        self.results_box.set_margin_top(layout.list_margin_top)
        self.scroll = widgets.Scroll(
            vexpand=True,
            hexpand=True,
            visible=False,
            child=self.results_box,
        )
        if layout.list_height:
            self.scroll.set_max_content_height(layout.list_height)
            self.scroll.set_propagate_natural_height(True)
            if layout.fixed_height:
                width = layout.width or -1
                self.results_box.set_size_request(width, layout.list_height)
                self.scroll.set_size_request(width, layout.list_height)

        box = widgets.Box(
            vertical=not layout.horizontal,
            css_classes=["box"],
            child=[
                widgets.Box(
                    spacing=layout.spinner_spacing,
                    css_classes=["searchwrapper"],
                    child=[self.search_entry, self.spinner],
                ),
                self.scroll,
            ],
        )
        if layout.width:
            box.set_size_request(layout.width, -1)
        if layout.halign:
            box.set_halign(GTK_ALIGN[layout.halign])
        if layout.valign:
            box.set_valign(GTK_ALIGN[layout.valign])
        box.set_margin_top(layout.margins.top)
        box.set_margin_bottom(layout.margins.bottom)
        box.set_margin_start(layout.margins.start)
        box.set_margin_end(layout.margins.end)

        self.window = widgets.Window(
            namespace="keylaunch",
            anchor=["top"],
            exclusivity="normal",
            kb_mode="on_demand",
            layer="top",
            visible=False,
            child=box,
        )

        key_controller = Gtk.EventControllerKey()
        key_controller.connect("key-pressed", self._on_key_press)
        key_controller.connect("key-released", self._on_key_release)
        self.window.add_controller(key_controller)

        self.window.connect("notify::visible", self._on_visibility_changed)

        return self.window

    # RenderSurface

    def replace_rows(self, rows: Sequence[Row]) -> None:
        if self.results_box is None:
            raise RenderInvariantError("Row container must exist before binding content")

        # Clear existing (GTK4 way)
        child = self.results_box.get_first_child()
        while child:
            next_child = child.get_next_sibling()
            self.results_box.remove(child)
            child = next_child

        self.row_boxes = []
        for row in rows:
            box = self._create_row(row)
            self.results_box.append(box)
            self.row_boxes.append(box)

    def set_selected(self, index: Optional[int]) -> None:
        if index is not None and index >= len(self.row_boxes):
            raise RenderInvariantError(f"Selected row {index} has no widget")

        for i, box in enumerate(self.row_boxes):
            if i == index:
                box.add_css_class("selected")
            else:
                box.remove_css_class("selected")

    def set_list_visible(self, visible: bool) -> None:
        self.scroll.set_visible(visible)

    def set_chrome_class(self, css_class: str) -> None:
        self.window.set_css_classes([css_class] if css_class else [])

    def set_busy(self, busy: bool) -> None:
        self.spinner.set_visible(busy)

    # WindowControl

    def set_visible(self, visible: bool) -> None:
        if self.window.get_visible() != visible:
            self.window.set_visible(visible)

    def clear_search(self) -> None:
        if self.search_entry.text:
            self.search_entry.set_text("")
        # The caller runs the empty search itself
        self._debounce.cancel()

    # Rows

    def _create_row(self, row: Row):
        """
        Build the widget for one result row.

        Layout: [image] [icon] [label / sub] [activation label]
        """
        entry = row.entry
        child = []

        if entry.image:
            child.append(widgets.Picture(
                image=entry.image,
                hexpand=True,
                css_classes=["image"],
            ))

        if entry.icon:
            if entry.icon_is_image:
                child.append(widgets.Picture(
                    image=entry.icon,
                    hexpand=entry.hide_text,
                    css_classes=["icon"],
                ))
            else:
                child.append(widgets.Icon(
                    image=entry.icon,
                    pixel_size=self.layout.icon_size,
                    css_classes=["icon"],
                ))

        if not entry.hide_text:
            labels = [widgets.Label(
                label=entry.label,
                css_classes=["label"],
                halign="start",
                wrap=True,
            )]
            if row.two_line:
                labels.append(widgets.Label(
                    label=entry.sub,
                    css_classes=["sub"],
                    halign="start",
                    wrap=True,
                ))
            child.append(widgets.Box(
                vertical=True,
                hexpand=True,
                valign="fill" if row.two_line else "center",
                css_classes=["textwrapper"],
                child=labels,
            ))

        if row.activation_label:
            child.append(widgets.Label(
                label=row.activation_label,
                css_classes=["activationlabel"],
            ))

        box = widgets.Box(css_classes=row.css_classes, child=child)

        if entry.drag_drop:
            drag = Gtk.DragSource()
            drag.connect("prepare", lambda source, x, y, i=row.index: self._on_drag_prepare(i))
            drag.connect("drag-end", lambda source, drag_obj, delete: self.activation.end_drag())
            box.add_controller(drag)

        if self.layout.ignore_mouse:
            return box

        motion = Gtk.EventControllerMotion()
        motion.connect("enter", lambda controller, x, y, i=row.index: self._guard(self.results.hover, i))
        box.add_controller(motion)

        click = Gtk.GestureClick()
        click.set_button(1)
        # Drag rows activate on release so a press can start a drag
        signal = "released" if entry.drag_drop else "pressed"
        click.connect(signal, lambda gesture, n, x, y, i=row.index: self._guard(self.activation.click, i))
        box.add_controller(click)

        return box

    def _on_drag_prepare(self, index: int):
        payload = self._guard(self.activation.begin_drag, index)
        if payload is None:
            return None
        return Gdk.ContentProvider.new_for_bytes("text/uri-list", GLib.Bytes.new(payload))

    # Input

    def _on_search_changed(self):
        self._debounce()

    def _run_search(self):
        self._guard(self.session.search, self.search_entry.text)

    def _on_key_press(self, controller, keyval, keycode, state):
        if keyval == Gdk.KEY_Escape:
            if self.session.pinned:
                self.session.unpin()
            else:
                self.session.hide()
            return True

        if keyval in CONTROL_KEYS:
            self.results.begin_quick_activation()
            return False

        keep_open = bool(state & Gdk.ModifierType.SHIFT_MASK)

        if self.results.quick_mode and state & Gdk.ModifierType.CONTROL_MASK:
            codepoint = Gdk.keyval_to_unicode(keyval)
            if codepoint:
                key = chr(codepoint).lower()
                if self._guard(self.activation.quick_activate, key, keep_open):
                    return True

        if keyval == Gdk.KEY_Down:
            self._guard(self.results.move, 1)
            return True

        if keyval == Gdk.KEY_Up:
            self._guard(self.results.move, -1)
            return True

        if keyval in (Gdk.KEY_Return, Gdk.KEY_KP_Enter):
            self._guard(self.activation.activate_selected, keep_open)
            return True

        return False

    def _on_key_release(self, controller, keyval, keycode, state):
        if keyval in CONTROL_KEYS:
            self._guard(self.results.end_quick_activation)

    def _on_visibility_changed(self, window, param):
        """Keep the session in step when the window is toggled externally."""
        if window.get_visible():
            for callback in self.on_show:
                callback()
            self.session.show()
            self.search_entry.grab_focus()
        else:
            self.session.hide()

    def _guard(self, fn, *args):
        """Run a state transition; a broken render invariant ends the process."""
        try:
            return fn(*args)
        except RenderInvariantError:
            logger.opt(exception=True).critical("Render invariant violated, exiting")
            os._exit(70)

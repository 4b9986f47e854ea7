"""
Knob control widget for lambvoice.

A vertical slider over the normalized gesture position (0.0-1.0), with a
label above and the formatted value below:
┌────────┐
│ PITCH  │  ← Label
├────────┤
│   ●    │  ← Gesture position (taper applied by the model)
│   │    │
├────────┤
│  C3    │  ← Value text
└────────┘

The widget never computes values itself; callbacks run the model and
return the text to display.
"""
import dearpygui.dearpygui as dpg
from typing import Callable, Optional, Tuple


class KnobControl:
    """Slider bound to a knob model through callbacks."""

    def __init__(self,
                 tag: str,
                 label: str,
                 on_position: Callable[[float], str],
                 on_reset: Optional[Callable[[], Optional[Tuple[float, str]]]] = None,
                 height: int = 140):
        """
        Args:
            tag: Unique tag prefix for this control
            label: Text above the slider
            on_position: Gesture callback: (position) -> value text
            on_reset: Double-click callback: () -> (position, value text), or
                None when reset is disabled for this knob
            height: Slider height in pixels
        """
        self.label = label
        self.on_position = on_position
        self.on_reset = on_reset
        self.height = height

        self._slider_tag = f"{tag}_slider"
        self._value_tag = f"{tag}_value"
        self._handler_tag = f"{tag}_handler"

    def create(self, position: float, text: str, parent: Optional[str] = None):
        """Create the control UI."""
        with dpg.group(parent=parent, horizontal=False):
            dpg.add_text(self.label)
            dpg.add_slider_float(
                tag=self._slider_tag,
                default_value=position,
                min_value=0.0,
                max_value=1.0,
                vertical=True,
                height=self.height,
                format="",
                callback=self._on_slider,
            )
            dpg.add_text(text, tag=self._value_tag)

        if self.on_reset is not None:
            with dpg.item_handler_registry(tag=self._handler_tag):
                dpg.add_item_double_clicked_handler(callback=self._on_double_click)
            dpg.bind_item_handler_registry(self._slider_tag, self._handler_tag)

    def _on_slider(self, sender, value):
        dpg.set_value(self._value_tag, self.on_position(value))

    def _on_double_click(self, sender, app_data):
        result = self.on_reset()
        if result is not None:
            self.refresh(*result)

    def refresh(self, position: float, text: str):
        """Move the slider and text after the model changed outside a gesture."""
        if dpg.does_item_exist(self._slider_tag):
            dpg.set_value(self._slider_tag, position)
            dpg.set_value(self._value_tag, text)

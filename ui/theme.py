"""
Dark theme for the lambvoice panel.
Provides color palette and DearPyGui theme configuration.
"""
import dearpygui.dearpygui as dpg


class PanelDark:
    """Panel color constants."""

    # Background colors
    BG_WINDOW = (24, 24, 27, 255)          # Main window background
    BG_PANEL = (38, 38, 43, 255)           # Voice column background
    BG_INPUT = (58, 58, 64, 255)           # Knob track

    # Text colors
    TEXT_PRIMARY = (220, 220, 220, 255)
    TEXT_SECONDARY = (150, 150, 150, 255)

    # Knob stroke color, shared by every control
    SECONDARY = (247, 127, 0, 255)
    SECONDARY_ACTIVE = (255, 160, 60, 255)

    # Transport
    PLAY = (80, 160, 80, 255)
    STOP = (220, 80, 80, 255)

    FRAME_PADDING = (8, 6)
    ITEM_SPACING = (10, 6)
    WINDOW_PADDING = (16, 16)


def apply_panel_theme() -> None:
    """
    Apply the panel theme to DearPyGui.
    Call this once during application initialization.
    """
    with dpg.theme() as global_theme:
        with dpg.theme_component(dpg.mvAll):
            dpg.add_theme_color(dpg.mvThemeCol_WindowBg, PanelDark.BG_WINDOW)
            dpg.add_theme_color(dpg.mvThemeCol_ChildBg, PanelDark.BG_PANEL)
            dpg.add_theme_color(dpg.mvThemeCol_FrameBg, PanelDark.BG_INPUT)
            dpg.add_theme_color(dpg.mvThemeCol_Text, PanelDark.TEXT_PRIMARY)
            dpg.add_theme_color(dpg.mvThemeCol_SliderGrab, PanelDark.SECONDARY)
            dpg.add_theme_color(dpg.mvThemeCol_SliderGrabActive, PanelDark.SECONDARY_ACTIVE)

            dpg.add_theme_style(dpg.mvStyleVar_FramePadding, PanelDark.FRAME_PADDING[0], PanelDark.FRAME_PADDING[1])
            dpg.add_theme_style(dpg.mvStyleVar_ItemSpacing, PanelDark.ITEM_SPACING[0], PanelDark.ITEM_SPACING[1])
            dpg.add_theme_style(dpg.mvStyleVar_WindowPadding, PanelDark.WINDOW_PADDING[0], PanelDark.WINDOW_PADDING[1])
            dpg.add_theme_style(dpg.mvStyleVar_GrabMinSize, 14)
            dpg.add_theme_style(dpg.mvStyleVar_GrabRounding, 7)

    dpg.bind_theme(global_theme)


def create_transport_theme(playing: bool) -> str:
    """
    Button theme for the play/stop button.

    Returns:
        Theme tag that can be bound to buttons
    """
    color = PanelDark.STOP if playing else PanelDark.PLAY
    with dpg.theme() as transport_theme:
        with dpg.theme_component(dpg.mvButton):
            dpg.add_theme_color(dpg.mvThemeCol_Button, color)
            dpg.add_theme_color(dpg.mvThemeCol_Text, (255, 255, 255, 255))

    return transport_theme


def apply_ui_scale(scale: float) -> None:
    """Scale all fonts (0.5x - 2.0x)."""
    dpg.set_global_font_scale(max(0.5, min(2.0, scale)))

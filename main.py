"""
lambvoice - four-voice synth panel
Main entry point
"""
import dearpygui.dearpygui as dpg
from pathlib import Path
from ui.theme import apply_panel_theme, apply_ui_scale
from ui.views.PanelView import PanelView
from audio.engine import VoiceEngine
from core.panel import SynthPanel
from core.persistence import PatchFile
from core.settings import Settings


# Module-level variables (accessed by callbacks)
settings = None
engine = None
panel = None
panel_view = None


def main():
    """Launch lambvoice."""
    global settings, engine, panel, panel_view

    print("=== lambvoice ===")
    print("Initializing...")

    settings = Settings()

    # Audio engine from the "audio" settings category
    engine = VoiceEngine(
        num_voices=settings.voice_count,
        sample_rate=int(settings.get("audio", "sample_rate")),
        buffer_size=int(settings.get("audio", "buffer_size")),
        output_device=settings.get("audio", "output_device"),
        volume_db=float(settings.get("audio", "master_volume_db")),
    )

    panel = SynthPanel(backend=engine, settings=settings)

    # Restore the last session, if any
    saved = PatchFile.load_auto_save()
    if saved is not None:
        panel.restore(saved)
        print("[PATCH] Restored auto-save")

    if not engine.start():
        print("[AUDIO] Running without audio output")
    panel.push_all()

    # Initialize DearPyGui
    dpg.create_context()

    ui_scale = settings.get("video", "ui_scale")
    print(f"Applying UI scale: {ui_scale}x")
    apply_ui_scale(ui_scale)

    panel_view = PanelView(
        panel,
        on_save_patch=on_save_patch,
        on_load_patch=on_load_patch,
    )
    window_tag = panel_view.create()

    apply_panel_theme()

    # Setup viewport
    dpg.create_viewport(title="lambvoice", width=1100, height=380)
    dpg.setup_dearpygui()
    dpg.show_viewport()
    dpg.set_primary_window(window_tag, True)

    print("Ready!")

    while dpg.is_dearpygui_running():
        dpg.render_dearpygui_frame()

    # Cleanup
    PatchFile.auto_save(panel.snapshot())
    engine.stop()
    dpg.destroy_context()
    print("lambvoice closed.")


def on_save_patch(file_path: Path):
    """Save the current panel to a patch file."""
    try:
        written = PatchFile.save(panel.snapshot(), file_path)
        print(f"[SAVE] Patch saved: {written}")
    except IOError as e:
        print(f"[ERROR] Failed to save patch: {e}")


def on_load_patch(file_path: Path):
    """Load a patch file into the panel."""
    try:
        panel.restore(PatchFile.load(file_path))
        print(f"[LOAD] Patch loaded: {file_path}")
    except (IOError, ValueError) as e:
        print(f"[ERROR] Failed to load patch: {e}")


if __name__ == "__main__":
    main()

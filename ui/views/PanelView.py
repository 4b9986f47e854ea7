"""
Synth panel window.

One column per voice (PITCH, WAVE, SUB) and a global column (root,
scale), plus transport and patch buttons. Spacebar toggles play/stop.
"""
import dearpygui.dearpygui as dpg
from pathlib import Path
from typing import Callable, Dict, Optional

from core.panel import SynthPanel
from core.persistence import PATCH_SUFFIX
from core.voice import VoiceController
from ui.labels import pitch_label, wave_label, sub_level_label
from ui.theme import create_transport_theme
from ui.widgets.KnobControl import KnobControl


class PanelView:
    """Main window bound to a SynthPanel."""

    def __init__(self,
                 panel: SynthPanel,
                 on_save_patch: Optional[Callable[[Path], None]] = None,
                 on_load_patch: Optional[Callable[[Path], None]] = None):
        """
        Args:
            panel: Selector + voices to control
            on_save_patch: Called with the chosen path when saving
            on_load_patch: Called with the chosen path when loading
        """
        self.panel = panel
        self.on_save_patch = on_save_patch
        self.on_load_patch = on_load_patch
        self.playing = False

        self.window_tag = "panel_window"
        self._play_button_tag = "panel_play_button"

        self._pitch_controls: Dict[int, KnobControl] = {}
        self._wave_controls: Dict[int, KnobControl] = {}
        self._sub_controls: Dict[int, KnobControl] = {}
        self._root_control: Optional[KnobControl] = None
        self._scale_control: Optional[KnobControl] = None
        self._transport_themes: Dict[bool, str] = {}

    # ── Build ────────────────────────────────────────────────────

    def create(self) -> str:
        """Create the panel window. Returns the window tag."""
        self._transport_themes = {False: create_transport_theme(False),
                                  True: create_transport_theme(True)}

        with dpg.window(tag=self.window_tag, label="lambvoice", no_collapse=True):
            with dpg.group(horizontal=True):
                dpg.add_button(label="Play", tag=self._play_button_tag,
                               width=80, callback=self.toggle_playing)
                dpg.bind_item_theme(self._play_button_tag, self._transport_themes[False])
                dpg.add_button(label="Save Patch",
                               callback=lambda: dpg.show_item("panel_save_dialog"))
                dpg.add_button(label="Load Patch",
                               callback=lambda: dpg.show_item("panel_load_dialog"))

            dpg.add_spacer(height=8)

            with dpg.group(horizontal=True):
                for voice in self.panel.voices:
                    self._create_voice_column(voice)
                self._create_global_column()

        self._create_file_dialogs()

        with dpg.handler_registry():
            dpg.add_key_press_handler(dpg.mvKey_Spacebar, callback=self.toggle_playing)

        return self.window_tag

    def _create_voice_column(self, voice: VoiceController):
        with dpg.child_window(width=220, height=260):
            dpg.add_text(f"VOICE {voice.label}")
            with dpg.group(horizontal=True):
                pitch = KnobControl(
                    f"voice{voice.voice_id}_pitch", "PITCH",
                    on_position=lambda p, v=voice: pitch_label(v.set_knob_position(p)),
                    on_reset=lambda v=voice: self._reset_pitch(v),
                )
                pitch.create(voice.pitch_knob.position, pitch_label(voice.output))

                wave = KnobControl(
                    f"voice{voice.voice_id}_wave", "WAVE",
                    on_position=lambda p, v=voice: self._set_wave(v, p),
                    on_reset=lambda v=voice: self._reset_wave(v),
                )
                wave.create(voice.wave_knob.position, wave_label(voice.state.wave))

                sub = KnobControl(
                    f"voice{voice.voice_id}_sub", "SUB",
                    on_position=lambda p, v=voice: self._set_sub_level(v, p),
                    on_reset=lambda v=voice: self._reset_sub_level(v),
                )
                sub.create(voice.sub_knob.position, sub_level_label(voice.state.sub_level))

        self._pitch_controls[voice.voice_id] = pitch
        self._wave_controls[voice.voice_id] = wave
        self._sub_controls[voice.voice_id] = sub

    def _create_global_column(self):
        selector = self.panel.selector
        with dpg.child_window(width=160, height=260):
            dpg.add_text("GLOBAL")
            with dpg.group(horizontal=True):
                self._root_control = KnobControl(
                    "global_root", "root",
                    on_position=self._on_root,
                    on_reset=self._reset_root,
                )
                self._root_control.create(selector.root_knob.position, selector.root_label)

                self._scale_control = KnobControl(
                    "global_scale", "scale",
                    on_position=self._on_scale,
                )
                self._scale_control.create(selector.scale_knob.position, selector.scale_label)

    def _create_file_dialogs(self):
        for tag, callback in (("panel_save_dialog", self._on_save_dialog),
                              ("panel_load_dialog", self._on_load_dialog)):
            with dpg.file_dialog(tag=tag, show=False, callback=callback,
                                 width=600, height=400):
                dpg.add_file_extension(PATCH_SUFFIX)

    # ── Voice callbacks ──────────────────────────────────────────

    def _reset_pitch(self, voice: VoiceController):
        if voice.pitch_knob.spec.disable_reset:
            return None
        output = voice.reset_pitch()
        return voice.pitch_knob.position, pitch_label(output)

    def _set_wave(self, voice: VoiceController, position: float) -> str:
        voice.wave_knob.set_position(position)
        return wave_label(voice.set_wave(voice.wave_knob.value))

    def _reset_wave(self, voice: VoiceController):
        update = voice.wave_knob.reset()
        return update.position, wave_label(voice.set_wave(update.raw_value))

    def _set_sub_level(self, voice: VoiceController, position: float) -> str:
        voice.sub_knob.set_position(position)
        return sub_level_label(voice.set_sub_level(voice.sub_knob.value))

    def _reset_sub_level(self, voice: VoiceController):
        update = voice.sub_knob.reset()
        return update.position, sub_level_label(voice.set_sub_level(update.raw_value))

    # ── Global callbacks ─────────────────────────────────────────

    def _on_root(self, position: float) -> str:
        self.panel.selector.set_root_position(position)
        self._refresh_voices()
        return self.panel.selector.root_label

    def _reset_root(self):
        selector = self.panel.selector
        selector.set_root(selector.root_knob.spec.default)
        self._refresh_voices()
        return selector.root_knob.position, selector.root_label

    def _on_scale(self, position: float) -> str:
        selector = self.panel.selector
        selector.set_scale_position(position)
        # The root knob is rebuilt when switching between free and scaled
        self._root_control.refresh(selector.root_knob.position, selector.root_label)
        self._refresh_voices()
        return selector.scale_label

    def _refresh_voices(self):
        for voice in self.panel.voices:
            control = self._pitch_controls.get(voice.voice_id)
            if control is not None:
                control.refresh(voice.pitch_knob.position, pitch_label(voice.output))

    def refresh_all(self):
        """Re-read every control from the model (after loading a patch)."""
        selector = self.panel.selector
        self._root_control.refresh(selector.root_knob.position, selector.root_label)
        self._scale_control.refresh(selector.scale_knob.position, selector.scale_label)
        self._refresh_voices()
        for voice in self.panel.voices:
            self._wave_controls[voice.voice_id].refresh(
                voice.wave_knob.position, wave_label(voice.state.wave))
            self._sub_controls[voice.voice_id].refresh(
                voice.sub_knob.position, sub_level_label(voice.state.sub_level))

    # ── Transport / patches ──────────────────────────────────────

    def toggle_playing(self, *args):
        self.playing = not self.playing
        if self.panel.backend is not None:
            self.panel.backend.set_playing(self.playing)
        dpg.set_item_label(self._play_button_tag, "Stop" if self.playing else "Play")
        dpg.bind_item_theme(self._play_button_tag, self._transport_themes[self.playing])

    def _on_save_dialog(self, sender, app_data):
        path = app_data.get("file_path_name")
        if path and self.on_save_patch:
            self.on_save_patch(Path(path))

    def _on_load_dialog(self, sender, app_data):
        path = app_data.get("file_path_name")
        if path and self.on_load_patch:
            self.on_load_patch(Path(path))
            self.refresh_all()

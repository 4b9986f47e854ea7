"""
Global root/scale selector shared by every voice.

Owns the root and scale knobs. Each change builds a new GlobalSettings
and hands it to every registered voice before returning.
"""
from dataclasses import replace
from typing import List, Optional

from core.constants import (
    SCALE_NAMES, MIDI_NOTE_NAMES, ROOT_MIN, ROOT_MAX, resolve_scale_name,
    clamp, round_half_up,
)
from core.knob import Knob, KnobSpec, KnobUpdate, DEFAULT_DRAG_PIXELS
from core.models import GlobalSettings, PitchMode
from core.voice import VoiceController


class GlobalSelector:
    """Root transpose and scale selection, broadcast to all voices."""

    def __init__(self,
                 settings: Optional[GlobalSettings] = None,
                 drag_pixels: float = DEFAULT_DRAG_PIXELS):
        self._settings = settings or GlobalSettings()
        self.drag_pixels = drag_pixels
        self.voices: List[VoiceController] = []

        self.scale_knob = Knob(
            KnobSpec("scale", 0, len(SCALE_NAMES) - 1, default=0, step=1),
            quantize=lambda raw: SCALE_NAMES[int(raw)],
            drag_pixels=drag_pixels,
        )
        self.scale_knob.set_value(self._settings.scale_index)
        self.root_knob = self._build_root_knob()

    @property
    def settings(self) -> GlobalSettings:
        return self._settings

    @property
    def root_label(self) -> str:
        """Note name of the (rounded) root."""
        return MIDI_NOTE_NAMES[round_half_up(self._settings.root) % 12]

    @property
    def scale_label(self) -> str:
        return self._settings.scale

    def _build_root_knob(self) -> Knob:
        # Whole semitones in scaled mode, continuous in free mode
        step = 1 if self._settings.mode == PitchMode.SCALED else None
        knob = Knob(
            KnobSpec("root", ROOT_MIN, ROOT_MAX, default=0, step=step, unit="st"),
            drag_pixels=self.drag_pixels,
        )
        knob.set_value(self._settings.root)
        return knob

    def register(self, voice: VoiceController) -> VoiceController:
        """Add a voice and bring it in line with the current settings."""
        self.voices.append(voice)
        voice.sync(self._settings)
        return voice

    def _broadcast(self):
        for voice in self.voices:
            voice.sync(self._settings)

    # ── Scale ────────────────────────────────────────────────────

    def set_scale(self, scale) -> GlobalSettings:
        """
        Select a scale by name or by knob index.

        Unknown names fall back to chromatic.
        """
        if isinstance(scale, int):
            name = SCALE_NAMES[clamp(scale, 0, len(SCALE_NAMES) - 1)]
        else:
            name = resolve_scale_name(scale)
        self.scale_knob.set_value(SCALE_NAMES.index(name))
        return self._apply_scale(name)

    def drag_scale(self, delta_pixels: float) -> GlobalSettings:
        update = self.scale_knob.drag(delta_pixels)
        return self._apply_scale(update.quantized_value)

    def set_scale_position(self, position: float) -> GlobalSettings:
        update = self.scale_knob.set_position(position)
        return self._apply_scale(update.quantized_value)

    def _apply_scale(self, name: str) -> GlobalSettings:
        if name == self._settings.scale:
            return self._settings

        previous_mode = self._settings.mode
        settings = replace(self._settings, scale=name)
        if settings.mode != previous_mode:
            if settings.mode == PitchMode.SCALED:
                settings = replace(settings, root=float(round_half_up(settings.root)))
            self._settings = settings
            self.root_knob = self._build_root_knob()
        else:
            self._settings = settings

        self._broadcast()
        return self._settings

    # ── Root ─────────────────────────────────────────────────────

    def set_root(self, root: float) -> GlobalSettings:
        """Set the transpose; rounded to a semitone in scaled mode."""
        return self._apply_root(self.root_knob.set_value(root))

    def drag_root(self, delta_pixels: float) -> GlobalSettings:
        return self._apply_root(self.root_knob.drag(delta_pixels))

    def set_root_position(self, position: float) -> GlobalSettings:
        return self._apply_root(self.root_knob.set_position(position))

    def _apply_root(self, update: KnobUpdate) -> GlobalSettings:
        root = float(update.raw_value)
        if root == self._settings.root:
            return self._settings
        self._settings = replace(self._settings, root=root)
        self._broadcast()
        return self._settings

    def restore(self, settings: GlobalSettings) -> GlobalSettings:
        """Adopt saved settings without broadcasting (voices restore themselves)."""
        self._settings = settings
        self.scale_knob.set_value(settings.scale_index)
        self.root_knob = self._build_root_knob()
        return self._settings

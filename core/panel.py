"""
Synth panel: the global selector plus every voice, wired to one backend.
"""
from typing import List, Optional

from core.constants import DEFAULT_PITCH
from core.knob import DEFAULT_DRAG_PIXELS
from core.models import GlobalSettings, PanelState
from core.selector import GlobalSelector
from core.settings import Settings
from core.voice import VoiceController


class SynthPanel:
    """
    Owns the selector and voices.

    Use snapshot()/restore() to move the whole surface in and out of a
    PanelState (patch files, auto-save).
    """

    def __init__(self, backend=None, settings: Optional[Settings] = None,
                 initial: Optional[GlobalSettings] = None):
        """
        Args:
            backend: AudioBackend shared by all voices (optional)
            settings: User settings (voice count, labels, defaults)
            initial: Starting root/scale (defaults to the configured scale)
        """
        self.backend = backend
        self.user_settings = settings

        if settings is not None:
            drag_pixels = settings.drag_pixels
            voice_count = settings.voice_count
            default_pitch = settings.default_pitch
            if initial is None:
                initial = GlobalSettings(scale=settings.get("controls", "default_scale"))
        else:
            drag_pixels, voice_count, default_pitch = DEFAULT_DRAG_PIXELS, 4, DEFAULT_PITCH

        self.selector = GlobalSelector(initial, drag_pixels=drag_pixels)
        for voice_id in range(voice_count):
            voice = VoiceController(
                voice_id,
                backend=backend,
                settings=self.selector.settings,
                drag_pixels=drag_pixels,
                default_pitch=default_pitch,
                label=settings.voice_label(voice_id) if settings is not None else "",
            )
            if settings is not None:
                voice.set_wave(float(settings.get("voices", "default_wave")))
                voice.set_sub_level(float(settings.get("voices", "default_sub_level")))
            self.selector.register(voice)

    @property
    def settings(self) -> GlobalSettings:
        return self.selector.settings

    @property
    def voices(self) -> List[VoiceController]:
        return self.voices_in_order()

    def snapshot(self) -> PanelState:
        return PanelState(
            settings=self.selector.settings,
            voices=tuple(voice.state for voice in self.voices_in_order()),
        )

    def voices_in_order(self) -> List[VoiceController]:
        return sorted(self.selector.voices, key=lambda v: v.voice_id)

    def restore(self, panel: PanelState):
        """
        Load a saved panel.

        Extra saved voices are ignored; voices missing from the save keep
        their state but adopt the saved settings.
        """
        settings = self.selector.restore(panel.settings)
        voices = self.voices_in_order()
        for i, voice in enumerate(voices):
            if i < len(panel.voices):
                voice.restore(panel.voices[i], settings)
            else:
                voice.sync(settings)

    def push_all(self):
        """Re-send every voice's parameters (e.g. after the backend starts)."""
        for voice in self.voices_in_order():
            voice.push_all()

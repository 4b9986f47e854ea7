"""
Voice controller: per-voice pitch state, mode switching and transpose.

Pitch Engine:
- Pure update functions take a VoiceState and return a new one
- VoiceController owns the state and the PITCH/WAVE/SUB knobs, and pushes
  every recomputed (frequency, sub frequency) pair to the audio backend
- Shared root/scale arrive as GlobalSettings on each call (no globals)
"""
from dataclasses import replace
from typing import Optional, Sequence

from core.constants import (
    MIN_PITCH, MAX_PITCH, SUB_MIN_PITCH,
    MIN_FREQUENCY, MAX_FREQUENCY, MAX_DETUNE,
    DEFAULT_PITCH, DEFAULT_WAVE,
    clamp, round_half_up,
    pitch_to_frequency, frequency_to_pitch,
    transpose_frequency, octave_down,
)
from core.knob import Knob, KnobSpec, Taper, DEFAULT_DRAG_PIXELS
from core.models import PitchMode, VoiceState, GlobalSettings, VoiceOutput


def nearest_lattice_index(lattice: Sequence[int], pitch: float) -> int:
    """
    Find the lattice member closest to pitch.

    Ties go to the earlier (lower) member.

    Returns:
        1-based lattice index

    Example:
        >>> nearest_lattice_index([24, 26, 28], 25)
        1
        >>> nearest_lattice_index([24, 26, 28], 27)
        2
    """
    closest = 0
    for i in range(len(lattice)):
        if abs(lattice[i] - pitch) < abs(lattice[closest] - pitch):
            closest = i
    return closest + 1


def safe_frequency(frequency: float) -> float:
    """Clamp a frequency into the playable range, replacing non-positive input."""
    if frequency <= 0:
        print(f"[VOICE] Non-positive frequency {frequency}, using {MIN_FREQUENCY:.2f} Hz")
        return MIN_FREQUENCY
    return clamp(frequency, MIN_FREQUENCY, MAX_FREQUENCY)


def select_index(state: VoiceState, lattice: Sequence[int], raw_index: int) -> VoiceState:
    """Choose a lattice member by 1-based index (scaled mode gesture)."""
    index = clamp(int(raw_index), 1, len(lattice))
    return replace(state, raw_index=index, pitch=lattice[index - 1])


def select_frequency(state: VoiceState, frequency: float) -> VoiceState:
    """Set the pre-transpose frequency (free mode gesture)."""
    return replace(state, frequency_hz=safe_frequency(frequency))


def to_free(state: VoiceState) -> VoiceState:
    """
    Scaled -> Free.

    The current lattice pitch becomes the frequency, so the switch is
    inaudible. raw_index and pitch are kept for the switch back.
    """
    return replace(state, mode=PitchMode.FREE, frequency_hz=pitch_to_frequency(state.pitch))


def to_scaled(state: VoiceState, lattice: Sequence[int]) -> VoiceState:
    """
    Free -> Scaled.

    Round the frequency to the nearest pitch, then take the closest
    lattice member.
    """
    pitch = frequency_to_pitch(safe_frequency(state.frequency_hz))
    index = nearest_lattice_index(lattice, pitch)
    return replace(state, mode=PitchMode.SCALED, raw_index=index, pitch=lattice[index - 1])


def resnap(state: VoiceState, lattice: Sequence[int]) -> VoiceState:
    """
    Re-select the lattice member after the lattice changed.

    Searches by the previous absolute pitch, not the previous index, since
    lattices differ in length and spacing.
    """
    index = nearest_lattice_index(lattice, state.pitch)
    return replace(state, raw_index=index, pitch=lattice[index - 1])


def conform(state: VoiceState, settings: GlobalSettings) -> VoiceState:
    """Bring a state in line with the active scale, switching mode if needed."""
    if settings.mode == PitchMode.FREE:
        return to_free(state) if state.mode == PitchMode.SCALED else state

    lattice = settings.lattice()
    if state.mode == PitchMode.FREE:
        return to_scaled(state, lattice)
    return resnap(state, lattice)


def resolve_output(state: VoiceState, settings: GlobalSettings) -> VoiceOutput:
    """
    Apply the root transpose and derive the sub-oscillator.

    Scaled: final pitch = lattice pitch + round(root), clamped to the
    playable range; sub pitch = final - 12 (not re-snapped to the scale).
    Free: final frequency = frequency * 2^(root/12), clamped; sub = final / 2.
    """
    if state.mode == PitchMode.FREE:
        frequency = clamp(
            transpose_frequency(safe_frequency(state.frequency_hz), settings.root),
            MIN_FREQUENCY, MAX_FREQUENCY,
        )
        return VoiceOutput(
            frequency=frequency,
            sub_frequency=octave_down(frequency),
        )

    final_pitch = clamp(state.pitch + round_half_up(settings.root), MIN_PITCH, MAX_PITCH)
    sub_pitch = clamp(final_pitch - 12, SUB_MIN_PITCH, MAX_PITCH)
    return VoiceOutput(
        frequency=pitch_to_frequency(final_pitch),
        sub_frequency=pitch_to_frequency(sub_pitch),
        pitch=final_pitch,
        sub_pitch=sub_pitch,
    )


class VoiceController:
    """
    One synth voice: PITCH, WAVE and SUB knobs plus the pitch state.

    Every gesture or settings change runs raw update -> recompute -> push,
    in that order, synchronously.
    """

    def __init__(self,
                 voice_id: int,
                 backend=None,
                 settings: Optional[GlobalSettings] = None,
                 state: Optional[VoiceState] = None,
                 default_pitch: int = DEFAULT_PITCH,
                 drag_pixels: float = DEFAULT_DRAG_PIXELS,
                 label: str = ""):
        """
        Args:
            voice_id: Index passed to the backend
            backend: AudioBackend receiving frequency pushes (optional)
            settings: Initial shared root/scale
            state: Initial state (defaults to default_pitch)
            default_pitch: Pitch for a fresh voice
            drag_pixels: Drag distance for a full knob sweep
            label: Display label (e.g. "A")
        """
        self.voice_id = voice_id
        self.backend = backend
        self.label = label or str(voice_id + 1)
        self.drag_pixels = drag_pixels
        self.default_pitch = clamp(default_pitch, MIN_PITCH, MAX_PITCH)

        self.settings = settings or GlobalSettings()
        self.lattice = self.settings.lattice()
        if state is None:
            state = VoiceState(
                pitch=self.default_pitch,
                frequency_hz=pitch_to_frequency(self.default_pitch),
            )
        self.state = conform(state, self.settings)

        self.wave_knob = Knob(
            KnobSpec("wave", 0.0, MAX_DETUNE, default=DEFAULT_WAVE),
            drag_pixels=drag_pixels,
        )
        self.sub_knob = Knob(
            KnobSpec("sub_level", 0.0, 1.0, default=0.0, display_name="Sub"),
            drag_pixels=drag_pixels,
        )
        self.wave_knob.set_value(self.state.wave)
        self.sub_knob.set_value(self.state.sub_level)

        self.pitch_knob = self._build_pitch_knob()
        # Nothing is pushed until sync() or push_all()
        self.output: VoiceOutput = resolve_output(self.state, self.settings)

    # ── Pitch knob ───────────────────────────────────────────────

    def _build_pitch_knob(self) -> Knob:
        """PITCH knob for the current mode, placed at the current state."""
        if self.state.mode == PitchMode.FREE:
            knob = Knob(
                KnobSpec(
                    "pitch", MIN_FREQUENCY, MAX_FREQUENCY,
                    default=pitch_to_frequency(self.default_pitch),
                    taper=Taper.LOG, disable_reset=True, unit="Hz",
                ),
                drag_pixels=self.drag_pixels,
            )
            knob.set_value(self.state.frequency_hz)
            return knob

        # Continuous drag index; the quantizer turns it into a lattice index
        lattice_size = len(self.lattice)
        knob = Knob(
            KnobSpec(
                "pitch", 1, lattice_size,
                default=nearest_lattice_index(self.lattice, self.default_pitch),
                disable_reset=True,
            ),
            quantize=lambda raw: clamp(round_half_up(raw), 1, lattice_size),
            drag_pixels=self.drag_pixels,
        )
        knob.set_value(self.state.raw_index)
        return knob

    def _apply_pitch_update(self, update) -> VoiceOutput:
        if self.state.mode == PitchMode.FREE:
            self.state = select_frequency(self.state, update.raw_value)
        else:
            self.state = select_index(self.state, self.lattice, update.quantized_value)
        return self._push()

    # ── Entry points ─────────────────────────────────────────────

    def sync(self, settings: GlobalSettings) -> VoiceOutput:
        """Adopt new shared settings, re-snap, and push."""
        self._conform_to(settings)
        return self._push()

    def _conform_to(self, settings: GlobalSettings):
        previous_mode = self.state.mode
        previous_lattice = self.lattice

        self.settings = settings
        self.lattice = settings.lattice()
        self.state = conform(self.state, settings)

        if self.state.mode != previous_mode or self.lattice != previous_lattice:
            self.pitch_knob = self._build_pitch_knob()

    def _maybe_sync(self, settings: Optional[GlobalSettings]):
        if settings is not None and settings != self.settings:
            self._conform_to(settings)

    def drag(self, delta_pixels: float, settings: Optional[GlobalSettings] = None) -> VoiceOutput:
        """PITCH drag gesture."""
        self._maybe_sync(settings)
        return self._apply_pitch_update(self.pitch_knob.drag(delta_pixels))

    def set_knob_position(self, position: float, settings: Optional[GlobalSettings] = None) -> VoiceOutput:
        """PITCH absolute gesture position (0.0-1.0)."""
        self._maybe_sync(settings)
        return self._apply_pitch_update(self.pitch_knob.set_position(position))

    def set_index(self, raw_index: int, settings: Optional[GlobalSettings] = None) -> VoiceOutput:
        """Select a lattice member directly; only meaningful in scaled mode."""
        self._maybe_sync(settings)
        if self.state.mode == PitchMode.SCALED:
            self.state = select_index(self.state, self.lattice, raw_index)
            self.pitch_knob.set_value(self.state.raw_index)
        return self._push()

    def set_frequency(self, frequency: float, settings: Optional[GlobalSettings] = None) -> VoiceOutput:
        """Set the pre-transpose frequency directly; only meaningful in free mode."""
        self._maybe_sync(settings)
        if self.state.mode == PitchMode.FREE:
            self.state = select_frequency(self.state, frequency)
            self.pitch_knob.set_value(self.state.frequency_hz)
        return self._push()

    def reset_pitch(self) -> VoiceOutput:
        """Reset gesture on PITCH; the knob has reset disabled, so this is a no-op."""
        update = self.pitch_knob.reset()
        if update is None:
            return self.output
        return self._apply_pitch_update(update)

    def set_wave(self, amount: float) -> float:
        update = self.wave_knob.set_value(amount)
        return self._apply_wave(update.raw_value)

    def drag_wave(self, delta_pixels: float) -> float:
        return self._apply_wave(self.wave_knob.drag(delta_pixels).raw_value)

    def set_sub_level(self, level: float) -> float:
        update = self.sub_knob.set_value(level)
        return self._apply_sub_level(update.raw_value)

    def drag_sub_level(self, delta_pixels: float) -> float:
        return self._apply_sub_level(self.sub_knob.drag(delta_pixels).raw_value)

    def _apply_wave(self, amount: float) -> float:
        self.state = replace(self.state, wave=amount)
        if self.backend is not None:
            self.backend.set_wave(self.voice_id, amount)
        return amount

    def _apply_sub_level(self, level: float) -> float:
        self.state = replace(self.state, sub_level=level)
        if self.backend is not None:
            self.backend.set_sub_level(self.voice_id, level)
        return level

    def restore(self, state: VoiceState, settings: GlobalSettings) -> VoiceOutput:
        """Load a saved state (from a patch) and push everything."""
        self.settings = settings
        self.lattice = settings.lattice()
        self.state = conform(state, settings)
        self.pitch_knob = self._build_pitch_knob()
        self.wave_knob.set_value(self.state.wave)
        self.sub_knob.set_value(self.state.sub_level)
        self.push_all()
        return self.output

    # ── Backend push ─────────────────────────────────────────────

    def _push(self) -> VoiceOutput:
        self.output = resolve_output(self.state, self.settings)
        if self.backend is not None:
            self.backend.set_frequency(self.voice_id, self.output.frequency)
            self.backend.set_sub_frequency(self.voice_id, self.output.sub_frequency)
        return self.output

    def push_all(self):
        """Push pitch, wave and sub level (e.g. after the backend starts)."""
        self._push()
        if self.backend is not None:
            self.backend.set_wave(self.voice_id, self.state.wave)
            self.backend.set_sub_level(self.voice_id, self.state.sub_level)

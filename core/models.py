"""
Immutable data models for lambvoice.

All models are frozen dataclasses so that:
- Voice updates are pure functions returning a new state
- The same GlobalSettings can be handed to every voice without copying
- Patches serialize through to_dict/from_dict
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Tuple, Optional, Dict, Any

from core.constants import (
    SCALES, SCALE_NAMES, FREE_SCALE, DEFAULT_SCALE,
    MIN_PITCH, MAX_PITCH, ROOT_MIN, ROOT_MAX,
    DEFAULT_PITCH, DEFAULT_WAVE, MAX_DETUNE,
    pitch_to_frequency, walk_intervals, resolve_scale_name,
)


class PitchMode(Enum):
    """Tuning regime of a voice."""
    FREE = "free"      # Continuous frequency
    SCALED = "scaled"  # Snapped to the scale lattice


@dataclass(frozen=True)
class ScaleDefinition:
    """
    Named interval pattern.

    Attributes:
        name: Unique scale name
        intervals: Semitone steps between consecutive lattice members,
            read cyclically. None only for the free pseudo-scale.
    """
    name: str
    intervals: Optional[Tuple[int, ...]] = None

    def __post_init__(self):
        """Validate scale definition."""
        if not self.name:
            raise ValueError("Scale name is required")

        if self.intervals is None:
            if self.name != FREE_SCALE:
                raise ValueError(f"Scale {self.name}: intervals are required")
            return

        if len(self.intervals) == 0:
            raise ValueError(f"Scale {self.name}: intervals must not be empty")
        for step in self.intervals:
            if int(step) != step or step < 1:
                raise ValueError(f"Scale {self.name}: intervals must be integers >= 1, got {step}")

    @property
    def is_free(self) -> bool:
        return self.intervals is None

    def lattice(self, min_pitch: int = MIN_PITCH, max_pitch: int = MAX_PITCH) -> Tuple[int, ...]:
        """Lattice for this scale; the free scale walks chromatically."""
        return walk_intervals(self.intervals or SCALES[DEFAULT_SCALE], min_pitch, max_pitch)


# Built once at import, never mutated
SCALE_TABLE: Dict[str, ScaleDefinition] = {
    name: ScaleDefinition(name=name, intervals=intervals)
    for name, intervals in SCALES.items()
}
SCALE_TABLE[FREE_SCALE] = ScaleDefinition(name=FREE_SCALE)


@dataclass(frozen=True)
class GlobalSettings:
    """
    Root transpose and scale selection shared by every voice.

    Attributes:
        scale: Active scale name (unknown names resolve to chromatic)
        root: Transpose in semitones, ROOT_MIN..ROOT_MAX. Whole semitones
            in scaled mode, fractional in free mode.
    """
    scale: str = DEFAULT_SCALE
    root: float = 0.0

    def __post_init__(self):
        """Validate settings."""
        # Use object.__setattr__ to modify frozen dataclass during init
        object.__setattr__(self, "scale", resolve_scale_name(self.scale))

        if not ROOT_MIN <= self.root <= ROOT_MAX:
            raise ValueError(f"Root must be {ROOT_MIN}-{ROOT_MAX}, got {self.root}")

    @property
    def mode(self) -> PitchMode:
        return PitchMode.FREE if self.scale == FREE_SCALE else PitchMode.SCALED

    @property
    def definition(self) -> ScaleDefinition:
        return SCALE_TABLE[self.scale]

    @property
    def scale_index(self) -> int:
        return SCALE_NAMES.index(self.scale)

    def lattice(self) -> Tuple[int, ...]:
        return self.definition.lattice()

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "scale": self.scale,
            "root": self.root,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GlobalSettings":
        """Create GlobalSettings from dictionary."""
        return cls(
            scale=data.get("scale", DEFAULT_SCALE),
            root=float(data.get("root", 0.0)),
        )


@dataclass(frozen=True)
class VoiceState:
    """
    Pitch state of one voice.

    Both representations stay populated so a mode switch can start from
    the last value of the other one.

    Attributes:
        mode: FREE or SCALED
        raw_index: 1-based lattice index (authoritative in SCALED)
        frequency_hz: Pre-transpose frequency (authoritative in FREE)
        pitch: Lattice pitch at raw_index, kept so a scale change can
            re-snap by absolute pitch rather than by index
        wave: Oscillator spread amount, 0..MAX_DETUNE
        sub_level: Sub-oscillator gain, 0..1
    """
    mode: PitchMode = PitchMode.SCALED
    raw_index: int = 1
    frequency_hz: float = field(default_factory=lambda: pitch_to_frequency(DEFAULT_PITCH))
    pitch: int = DEFAULT_PITCH
    wave: float = DEFAULT_WAVE
    sub_level: float = 0.0

    def __post_init__(self):
        """Validate voice state."""
        if self.raw_index < 1:
            raise ValueError(f"raw_index is 1-based, got {self.raw_index}")
        if self.frequency_hz <= 0:
            raise ValueError(f"Frequency must be positive, got {self.frequency_hz}")
        if not MIN_PITCH <= self.pitch <= MAX_PITCH:
            raise ValueError(f"Pitch must be {MIN_PITCH}-{MAX_PITCH}, got {self.pitch}")
        if not 0.0 <= self.wave <= MAX_DETUNE:
            raise ValueError(f"Wave must be 0-{MAX_DETUNE}, got {self.wave}")
        if not 0.0 <= self.sub_level <= 1.0:
            raise ValueError(f"Sub level must be 0.0-1.0, got {self.sub_level}")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "mode": self.mode.value,
            "raw_index": self.raw_index,
            "frequency_hz": self.frequency_hz,
            "pitch": self.pitch,
            "wave": self.wave,
            "sub_level": self.sub_level,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "VoiceState":
        """Create VoiceState from dictionary."""
        return cls(
            mode=PitchMode(data.get("mode", PitchMode.SCALED.value)),
            raw_index=int(data.get("raw_index", 1)),
            frequency_hz=float(data.get("frequency_hz", pitch_to_frequency(DEFAULT_PITCH))),
            pitch=int(data.get("pitch", DEFAULT_PITCH)),
            wave=float(data.get("wave", DEFAULT_WAVE)),
            sub_level=float(data.get("sub_level", 0.0)),
        )


@dataclass(frozen=True)
class VoiceOutput:
    """
    Values pushed to the audio backend after a recompute.

    pitch and sub_pitch are only set in scaled mode.
    """
    frequency: float
    sub_frequency: float
    pitch: Optional[int] = None
    sub_pitch: Optional[int] = None


@dataclass(frozen=True)
class PanelState:
    """
    Snapshot of the whole control surface.

    Attributes:
        settings: Shared root/scale
        voices: One VoiceState per voice, in voice order
    """
    settings: GlobalSettings = field(default_factory=GlobalSettings)
    voices: Tuple[VoiceState, ...] = field(default_factory=tuple)
    version: str = "1.0.0"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "version": self.version,
            "settings": self.settings.to_dict(),
            "voices": [v.to_dict() for v in self.voices],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PanelState":
        """Create PanelState from dictionary."""
        return cls(
            settings=GlobalSettings.from_dict(data.get("settings", {})),
            voices=tuple(VoiceState.from_dict(v) for v in data.get("voices", [])),
            version=data.get("version", "1.0.0"),
        )

"""
Musical constants and utilities.

Note names, the scale table, playable pitch bounds, pitch/frequency
conversions and scale lattice generation.
"""
import math
from typing import Tuple

# MIDI note number to name mapping
MIDI_NOTE_NAMES = [
    "C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"
]

# Scale table: semitone steps from each lattice member to the next, read cyclically
SCALES = {
    "chromatic": (1,),
    "ionian": (2, 2, 1, 2, 2, 2, 1),
    "dorian": (2, 1, 2, 2, 2, 1, 2),
    "phrygian": (1, 2, 2, 2, 1, 2, 2),
    "lydian": (2, 2, 2, 1, 2, 2, 1),
    "mixolydian": (2, 2, 1, 2, 2, 1, 2),
    "aeolian": (2, 1, 2, 2, 1, 2, 2),
    "locrian": (1, 2, 2, 1, 2, 2, 2),
    "pentatonic": (2, 2, 3, 2, 3),
    "diminished": (2, 1, 2, 1, 2, 1, 2, 1),
    "insen": (1, 2, 2, 1, 2, 2),
    "whole": (2,),
}

# Pseudo-scale with no intervals: disables quantization
FREE_SCALE = "free"
DEFAULT_SCALE = "chromatic"

# Order of the scale selector knob
SCALE_NAMES = list(SCALES.keys()) + [FREE_SCALE]

# Playable range: MIDI 24 - 84 (C1 - C6)
MIN_PITCH = 24
MAX_PITCH = 84
# The sub-oscillator sits an octave below and may go under MIN_PITCH
SUB_MIN_PITCH = MIN_PITCH - 12

# Root transpose range in semitones
ROOT_MIN = 0
ROOT_MAX = 11

# Reference tuning: A4 = MIDI 69 = 440 Hz
A4_PITCH = 69
A4_FREQUENCY = 440.0

# Voice defaults
DEFAULT_PITCH = 48
MAX_DETUNE = 100.0
DEFAULT_WAVE = MAX_DETUNE / 2


def round_half_up(value: float) -> int:
    """
    Round to the nearest integer, ties toward +infinity.

    Python's round() rounds ties to even, which would make 24.5 and 25.5
    resolve in opposite directions. Every rounding in the pitch engine
    goes through here instead.

    Example:
        >>> round_half_up(24.5)
        25
        >>> round_half_up(-0.5)
        0
    """
    return int(math.floor(value + 0.5))


def clamp(value, low, high):
    """Constrain value to [low, high]."""
    return max(low, min(high, value))


def pitch_to_frequency(pitch: float) -> float:
    """
    Convert a pitch (MIDI note number) to frequency in Hz.

    Total over the reals; fractional pitches are allowed.

    Example:
        >>> pitch_to_frequency(69)  # A4
        440.0
        >>> round(pitch_to_frequency(24), 2)  # C1
        32.7
    """
    # Formula: frequency = 440 * 2^((pitch - 69) / 12)
    return A4_FREQUENCY * math.pow(2.0, (pitch - A4_PITCH) / 12.0)


def frequency_to_pitch(frequency: float) -> int:
    """
    Convert frequency in Hz to the nearest pitch.

    Ties round toward +infinity (see round_half_up).

    Raises:
        ValueError: If frequency is not positive

    Example:
        >>> frequency_to_pitch(440.0)
        69
    """
    if frequency <= 0:
        raise ValueError(f"Frequency must be positive, got {frequency}")

    # Formula: pitch = 69 + 12 * log2(frequency / 440)
    return round_half_up(A4_PITCH + 12 * math.log2(frequency / A4_FREQUENCY))


def transpose_frequency(frequency: float, semitones: float) -> float:
    """
    Shift a frequency by a (possibly fractional) number of semitones.

    Example:
        >>> transpose_frequency(440.0, 12)
        880.0
    """
    return frequency * math.pow(2.0, semitones / 12.0)


def octave_down(frequency: float) -> float:
    """Frequency one octave below."""
    return frequency / 2.0


def pitch_to_name(pitch: int) -> str:
    """
    Convert pitch to name with octave.

    Octave numbering follows MIDI: pitch 0 is C-1.

    Example:
        >>> pitch_to_name(60)
        'C4'
        >>> pitch_to_name(24)
        'C1'
    """
    pitch = int(pitch)
    octave = (pitch // 12) - 1
    return f"{MIDI_NOTE_NAMES[pitch % 12]}{octave}"


def name_to_pitch(note_name: str) -> int:
    """
    Convert note name to pitch.

    Args:
        note_name: Note name (e.g., "C4", "A#3", "C-1")

    Raises:
        ValueError: If note name is invalid

    Example:
        >>> name_to_pitch("C4")
        60
        >>> name_to_pitch("A4")
        69
    """
    note_name = note_name.strip().upper()

    # Split letter part from the (possibly negative) octave number
    split = 1
    if len(note_name) > 1 and note_name[1] == "#":
        split = 2
    note, octave_text = note_name[:split], note_name[split:]

    if note not in MIDI_NOTE_NAMES:
        raise ValueError(f"Invalid note name: {note_name}")
    try:
        octave = int(octave_text)
    except ValueError:
        raise ValueError(f"Invalid note name format: {note_name}") from None

    return (octave + 1) * 12 + MIDI_NOTE_NAMES.index(note)


MIN_FREQUENCY = pitch_to_frequency(MIN_PITCH)  # ~32.70 Hz
MAX_FREQUENCY = pitch_to_frequency(MAX_PITCH)  # ~1046.50 Hz


def resolve_scale_name(scale_name: str) -> str:
    """
    Return scale_name if known, otherwise the default scale.

    Unknown names print a [SCALE] warning and fall back to chromatic.
    """
    if scale_name in SCALES or scale_name == FREE_SCALE:
        return scale_name
    print(f"[SCALE] Unknown scale '{scale_name}', falling back to {DEFAULT_SCALE}")
    return DEFAULT_SCALE


def get_scale_intervals(scale_name: str) -> Tuple[int, ...]:
    """
    Look up the interval sequence for a scale.

    The free pseudo-scale walks chromatically: its lattice only backs the
    cached index used on the next mode switch.
    """
    return SCALES.get(resolve_scale_name(scale_name), SCALES[DEFAULT_SCALE])


def walk_intervals(intervals, min_pitch: int, max_pitch: int) -> Tuple[int, ...]:
    """
    Build a lattice by stepping cyclically through intervals from min_pitch.

    Positions past max_pitch are dropped, so irregular scales end wherever
    their steps land rather than exactly on max_pitch.
    """
    if not intervals:
        raise ValueError("Interval sequence must not be empty")
    if min_pitch > max_pitch:
        raise ValueError(f"min_pitch {min_pitch} exceeds max_pitch {max_pitch}")

    current = min_pitch
    pitches = [current]
    index = 0

    while current < max_pitch:
        current += intervals[index % len(intervals)]
        if current <= max_pitch:
            pitches.append(current)
        index += 1

    return tuple(pitches)


def generate_lattice(scale_name: str,
                     min_pitch: int = MIN_PITCH,
                     max_pitch: int = MAX_PITCH) -> Tuple[int, ...]:
    """
    Get every pitch of a scale between min_pitch and max_pitch.

    Args:
        scale_name: Name of scale (from SCALE_NAMES)
        min_pitch: First lattice member
        max_pitch: Upper bound (inclusive)

    Returns:
        Strictly increasing tuple starting at min_pitch

    Example:
        >>> generate_lattice("ionian", 24, 36)
        (24, 26, 28, 29, 31, 33, 35, 36)
    """
    return walk_intervals(get_scale_intervals(scale_name), min_pitch, max_pitch)

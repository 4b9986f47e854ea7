"""
Display text for knob values.

Scaled voices show the note name of the sounding pitch, free voices
show the frequency in Hz.
"""
from core.constants import pitch_to_name
from core.models import VoiceOutput


def pitch_label(output: VoiceOutput) -> str:
    """
    Text under a PITCH knob.

    Example:
        >>> pitch_label(VoiceOutput(frequency=32.70, sub_frequency=16.35, pitch=24, sub_pitch=12))
        'C1'
        >>> pitch_label(VoiceOutput(frequency=440.0, sub_frequency=220.0))
        '440.00 Hz'
    """
    if output.pitch is not None:
        return pitch_to_name(output.pitch)
    return f"{output.frequency:.2f} Hz"


def wave_label(amount: float) -> str:
    return f"{amount:.0f}"


def sub_level_label(level: float) -> str:
    return f"{level:.2f}"

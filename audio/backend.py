"""
Audio backend interface.

Voice controllers push parameters here and never read anything back.
Setters are fire-and-forget: the backend applies the latest value at its
next processing opportunity.
"""
from abc import ABC, abstractmethod


class AudioBackend(ABC):
    """
    Base class for anything that makes sound from voice parameters.

    Implementations must accept setter calls at any time, including
    before start() and while stopped.
    """

    @abstractmethod
    def set_frequency(self, voice_id: int, hz: float):
        """Main oscillator frequency in Hz (always positive)."""
        raise NotImplementedError()

    @abstractmethod
    def set_sub_frequency(self, voice_id: int, hz: float):
        """Sub-oscillator frequency in Hz (always positive)."""
        raise NotImplementedError()

    def set_wave(self, voice_id: int, amount: float):
        """Oscillator spread, 0..MAX_DETUNE. Default: ignored."""
        pass

    def set_sub_level(self, voice_id: int, level: float):
        """Sub-oscillator gain, 0..1. Default: ignored."""
        pass

    def set_playing(self, playing: bool):
        """Transport: audible or silent. Default: ignored."""
        pass

    def start(self):
        """Acquire audio resources. Default: nothing to acquire."""
        pass

    def stop(self):
        """Release audio resources. Default: nothing to release."""
        pass

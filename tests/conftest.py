"""Shared fixtures: a backend that records every push."""

import pytest

from audio.backend import AudioBackend


class RecordingBackend(AudioBackend):
    """Keeps every setter call as (method, voice_id, value)."""

    def __init__(self):
        self.calls = []
        self.playing = False

    def set_frequency(self, voice_id, hz):
        self.calls.append(("set_frequency", voice_id, hz))

    def set_sub_frequency(self, voice_id, hz):
        self.calls.append(("set_sub_frequency", voice_id, hz))

    def set_wave(self, voice_id, amount):
        self.calls.append(("set_wave", voice_id, amount))

    def set_sub_level(self, voice_id, level):
        self.calls.append(("set_sub_level", voice_id, level))

    def set_playing(self, playing):
        self.playing = playing

    def last(self, method, voice_id=0):
        """Most recent value pushed through method for voice_id."""
        for name, vid, value in reversed(self.calls):
            if name == method and vid == voice_id:
                return value
        return None


@pytest.fixture
def backend():
    return RecordingBackend()

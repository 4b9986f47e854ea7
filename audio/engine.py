"""
Voice engine: a bank of fat-sawtooth voices played through sounddevice.

Architecture:
- UI thread: voice controllers call the setters (fire-and-forget)
- Audio thread: sounddevice callback renders one block from the latest values
- No acknowledgement channel and no state read back by the controllers
"""
import traceback
from typing import Optional

import numpy as np

from audio.backend import AudioBackend
from audio.dsp import SAW_COUNT, OnePoleLowpass, render_saw_stack, db_to_linear, clip_audio
from core.constants import MAX_DETUNE, DEFAULT_WAVE, MIN_FREQUENCY


class VoiceEngine(AudioBackend):
    """
    Renders every voice (main + sub oscillator) and mixes to stereo.

    Each oscillator is SAW_COUNT detuned saws; WAVE sets the detune
    spread in cents, SUB sets the sub-oscillator gain.
    """

    def __init__(self,
                 num_voices: int = 4,
                 sample_rate: int = 44100,
                 buffer_size: int = 512,
                 output_device: Optional[str] = None,
                 volume_db: float = -8.0,
                 cutoff: float = 8000.0):
        """
        Args:
            num_voices: Number of voices addressed by voice_id
            sample_rate: Audio sample rate (Hz)
            buffer_size: Audio block size (frames)
            output_device: sounddevice device name, None for the default
            volume_db: Per-voice volume
            cutoff: Output smoothing filter cutoff (Hz)
        """
        self.num_voices = num_voices
        self.sample_rate = sample_rate
        self.buffer_size = buffer_size
        self.output_device = output_device
        self.voice_gain = db_to_linear(volume_db)

        # Latest pushed values, read at the start of each block
        self._frequency = np.full(num_voices, MIN_FREQUENCY)
        self._sub_frequency = np.full(num_voices, MIN_FREQUENCY / 2)
        self._wave = np.full(num_voices, DEFAULT_WAVE)
        self._sub_level = np.zeros(num_voices)

        # Random start phases so the stacked saws don't begin phase-aligned
        rng = np.random.default_rng()
        self._phases = rng.random((num_voices, 2, SAW_COUNT))
        self._filter = OnePoleLowpass(cutoff, sample_rate)

        self.playing = False
        self._stream = None

    def _check_voice(self, voice_id: int):
        if not 0 <= voice_id < self.num_voices:
            raise ValueError(f"voice_id must be 0-{self.num_voices - 1}, got {voice_id}")

    # ── AudioBackend ─────────────────────────────────────────────

    def set_frequency(self, voice_id: int, hz: float):
        self._check_voice(voice_id)
        self._frequency[voice_id] = hz

    def set_sub_frequency(self, voice_id: int, hz: float):
        self._check_voice(voice_id)
        self._sub_frequency[voice_id] = hz

    def set_wave(self, voice_id: int, amount: float):
        self._check_voice(voice_id)
        self._wave[voice_id] = max(0.0, min(MAX_DETUNE, amount))

    def set_sub_level(self, voice_id: int, level: float):
        self._check_voice(voice_id)
        self._sub_level[voice_id] = max(0.0, min(1.0, level))

    def set_playing(self, playing: bool):
        if playing and not self.playing:
            self._filter.reset()
        self.playing = playing
        print(f"[AUDIO] {'Playing' if playing else 'Stopped'}")

    # ── Rendering ────────────────────────────────────────────────

    def render(self, frames: int) -> np.ndarray:
        """
        Render one block.

        Returns:
            Stereo float32 array, shape (frames, 2); silence while stopped
        """
        if not self.playing:
            return np.zeros((frames, 2), dtype=np.float32)

        # Snapshot the pushed values so a mid-block push lands next block
        frequency = self._frequency.copy()
        sub_frequency = self._sub_frequency.copy()
        wave = self._wave.copy()
        sub_level = self._sub_level.copy()

        mix = np.zeros(frames)
        for v in range(self.num_voices):
            main = render_saw_stack(self._phases[v, 0], frequency[v], wave[v],
                                    self.sample_rate, frames)
            mix += main * self.voice_gain
            if sub_level[v] > 0.0:
                sub = render_saw_stack(self._phases[v, 1], sub_frequency[v], wave[v],
                                       self.sample_rate, frames)
                mix += sub * sub_level[v] * self.voice_gain

        mix = clip_audio(self._filter.process(mix / self.num_voices))
        return np.column_stack([mix, mix]).astype(np.float32)

    def _audio_callback(self, outdata, frames, time_info, status):
        """Called by sounddevice for each audio block."""
        if status:
            print(f"[AUDIO] {status}")
        outdata[:] = self.render(frames)

    # ── Stream lifecycle ─────────────────────────────────────────

    def start(self) -> bool:
        """Open the output stream. Returns False if no device could be opened."""
        if self._stream is not None:
            return True

        try:
            # Imported here: loading PortAudio is deferred until a stream is needed
            import sounddevice as sd

            device = None if self.output_device in (None, "Default") else self.output_device
            self._stream = sd.OutputStream(
                samplerate=self.sample_rate,
                blocksize=self.buffer_size,
                channels=2,
                dtype='float32',
                device=device,
                callback=self._audio_callback,
            )
            self._stream.start()
            print(f"[AUDIO] Stream started ({self.sample_rate} Hz, {self.buffer_size} frames)")
            return True
        except Exception as e:
            print(f"[AUDIO ERROR] {e}")
            traceback.print_exc()
            self._stream = None
            return False

    def stop(self):
        """Close the output stream."""
        if self._stream is None:
            return
        self._stream.stop()
        self._stream.close()
        self._stream = None
        print("[AUDIO] Stream closed")

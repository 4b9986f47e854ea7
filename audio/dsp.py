"""
DSP building blocks for the voice engine.

Detuned sawtooth stacks, one-pole smoothing and gain helpers.
"""
import numpy as np
from numba import jit
from scipy.signal import butter, lfilter

# Saws per "fat" oscillator
SAW_COUNT = 3


@jit(nopython=True)
def render_saw_stack(phases: np.ndarray,
                     frequency: float,
                     spread_cents: float,
                     sample_rate: int,
                     num_samples: int) -> np.ndarray:
    """
    Render detuned sawtooth oscillators summed into one buffer (JIT-compiled).

    Saw k is detuned from -spread/2 to +spread/2 cents, evenly spaced.
    phases is advanced in place so consecutive blocks join without clicks.

    Args:
        phases: Per-saw phase in [0, 1), updated in place
        frequency: Centre frequency in Hz
        spread_cents: Total detune width in cents
        sample_rate: Audio sample rate
        num_samples: Block length

    Returns:
        Mono buffer, -1.0 to 1.0
    """
    count = phases.shape[0]
    increments = np.empty(count)
    for k in range(count):
        if count > 1:
            offset = -spread_cents / 2.0 + k * spread_cents / (count - 1)
        else:
            offset = 0.0
        increments[k] = frequency * 2.0 ** (offset / 1200.0) / sample_rate

    output = np.zeros(num_samples)
    for i in range(num_samples):
        acc = 0.0
        for k in range(count):
            acc += 2.0 * phases[k] - 1.0
            phases[k] += increments[k]
            if phases[k] >= 1.0:
                phases[k] -= 1.0
        output[i] = acc / count

    return output


class OnePoleLowpass:
    """
    First-order Butterworth lowpass with state carried between blocks.

    Takes the edge off naive-saw aliasing.
    """

    def __init__(self, cutoff: float, sample_rate: int):
        self.sample_rate = sample_rate
        self.set_cutoff(cutoff)
        self.zi = np.zeros(1)

    def set_cutoff(self, cutoff: float):
        # butter() needs the cutoff strictly below Nyquist
        cutoff = max(10.0, min(cutoff, self.sample_rate * 0.49))
        self.b, self.a = butter(1, cutoff, btype="low", fs=self.sample_rate)

    def process(self, buffer: np.ndarray) -> np.ndarray:
        output, self.zi = lfilter(self.b, self.a, buffer, zi=self.zi)
        return output

    def reset(self):
        self.zi = np.zeros(1)


def db_to_linear(db: float) -> float:
    """
    Convert decibels to linear gain.

    Example:
        >>> db_to_linear(0.0)
        1.0
    """
    return 10 ** (db / 20)


def clip_audio(buffer: np.ndarray, threshold: float = 1.0) -> np.ndarray:
    """Hard-clip to +/- threshold."""
    return np.clip(buffer, -threshold, threshold)

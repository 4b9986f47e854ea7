"""
Knob model: maps a 1-D drag gesture to a value.

Knob Model:
- Declarative range/taper/step metadata (KnobSpec)
- Gesture position is a normalized 0.0-1.0 accumulator
- Each update returns the raw value plus an optional quantized value
  derived from it (KnobUpdate), never two independent outputs
- No UI code here; ui.widgets binds a slider to this model
"""
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional

from core.constants import clamp, round_half_up

# Pixels of vertical drag for a full min-to-max sweep
DEFAULT_DRAG_PIXELS = 200


class Taper(Enum):
    """Response curve from gesture position to value."""
    LINEAR = "linear"
    LOG = "log"  # Equal drag distance = equal ratio; use for ranges over ~1 decade


@dataclass(frozen=True)
class KnobSpec:
    """
    Declarative knob specification.

    Attributes:
        name: Internal knob name (snake_case)
        min_val: Minimum value
        max_val: Maximum value (equal to min_val for a fixed knob)
        default: Reset value (defaults to min_val)
        taper: LINEAR or LOG
        step: Snap raw values to the nearest multiple of step within range (continuous if None)
        disable_reset: Ignore reset-to-default gestures
        display_name: UI label
        unit: Display unit (e.g., "Hz", "st")
    """
    name: str
    min_val: float
    max_val: float
    default: Optional[float] = None
    taper: Taper = Taper.LINEAR
    step: Optional[float] = None
    disable_reset: bool = False
    display_name: Optional[str] = None
    unit: Optional[str] = None

    def __post_init__(self):
        """Validate knob specification."""
        if not self.name:
            raise ValueError("Knob name is required")

        if self.display_name is None:
            # Auto-generate display name from snake_case
            object.__setattr__(self, "display_name", self.name.replace('_', ' ').title())

        if self.min_val > self.max_val:
            raise ValueError(f"Knob {self.name}: min_val must be <= max_val")
        if self.taper == Taper.LOG and self.min_val <= 0:
            raise ValueError(f"Knob {self.name}: log taper requires a positive min_val")
        if self.step is not None and self.step <= 0:
            raise ValueError(f"Knob {self.name}: step must be positive")

        if self.default is None:
            object.__setattr__(self, "default", self.min_val)
        if not (self.min_val <= self.default <= self.max_val):
            raise ValueError(f"Knob {self.name}: default must be within min/max range")

    @property
    def is_fixed(self) -> bool:
        """A knob with min == max holds one value and ignores gestures."""
        return self.min_val == self.max_val


@dataclass(frozen=True)
class KnobUpdate:
    """
    Result of one knob update.

    Attributes:
        raw_value: Value at the gesture position (step-snapped if the spec has a step)
        quantized_value: quantize(raw_value), or None without a quantizer
        position: Normalized gesture position, 0.0-1.0
    """
    raw_value: float
    quantized_value: Any = None
    position: float = 0.0


class Knob:
    """
    Gesture-to-value model for one knob.

    The gesture position is kept separately from the (possibly snapped)
    raw value, so small drags accumulate across a step instead of being
    swallowed by the snap.
    """

    def __init__(self,
                 spec: KnobSpec,
                 quantize: Optional[Callable[[float], Any]] = None,
                 drag_pixels: float = DEFAULT_DRAG_PIXELS):
        """
        Args:
            spec: Range/taper/step metadata
            quantize: Derives the quantized output from a raw value
            drag_pixels: Drag distance for a full sweep
        """
        if drag_pixels <= 0:
            raise ValueError(f"drag_pixels must be positive, got {drag_pixels}")

        self.spec = spec
        self.quantize = quantize
        self.drag_pixels = drag_pixels

        self._position = 0.0
        self._value = spec.min_val
        self.set_value(spec.default)

    @property
    def value(self) -> float:
        return self._value

    @property
    def position(self) -> float:
        return self._position

    @property
    def quantized_value(self) -> Any:
        return self.quantize(self._value) if self.quantize else None

    def value_to_position(self, value: float) -> float:
        """Normalized gesture position that produces value."""
        spec = self.spec
        if spec.is_fixed:
            return 0.0

        value = clamp(value, spec.min_val, spec.max_val)
        if spec.taper == Taper.LOG:
            low, high = math.log(spec.min_val), math.log(spec.max_val)
            return (math.log(value) - low) / (high - low)
        return (value - spec.min_val) / (spec.max_val - spec.min_val)

    def position_to_value(self, position: float) -> float:
        """Value at a normalized gesture position, clamped and step-snapped."""
        spec = self.spec
        if spec.is_fixed:
            return spec.min_val

        position = clamp(position, 0.0, 1.0)
        if spec.taper == Taper.LOG:
            low, high = math.log(spec.min_val), math.log(spec.max_val)
            value = math.exp(low + position * (high - low))
        else:
            value = spec.min_val + position * (spec.max_val - spec.min_val)

        return self._snap(value)

    def _snap(self, value: float) -> float:
        spec = self.spec
        if spec.step is not None:
            # Nearest multiple of step, restricted to multiples inside [min_val, max_val]
            lowest = math.ceil(spec.min_val / spec.step)
            highest = math.floor(spec.max_val / spec.step)
            if lowest <= highest:
                steps = clamp(round_half_up(value / spec.step), lowest, highest)
                return steps * spec.step
        return clamp(value, spec.min_val, spec.max_val)

    def _report(self) -> KnobUpdate:
        return KnobUpdate(
            raw_value=self._value,
            quantized_value=self.quantized_value,
            position=self._position,
        )

    def set_position(self, position: float) -> KnobUpdate:
        """
        Move the gesture to an absolute normalized position.

        Out-of-range positions clamp to the ends; a fixed knob stays put.
        """
        if self.spec.is_fixed:
            return self._report()

        self._position = clamp(position, 0.0, 1.0)
        self._value = self.position_to_value(self._position)
        return self._report()

    def drag(self, delta_pixels: float) -> KnobUpdate:
        """
        Apply a relative drag (positive = towards max_val).

        Example:
            >>> knob = Knob(KnobSpec("level", 0.0, 1.0), drag_pixels=100)
            >>> knob.drag(50).raw_value
            0.5
        """
        return self.set_position(self._position + delta_pixels / self.drag_pixels)

    def set_value(self, value: float) -> KnobUpdate:
        """
        Place the knob at a value set from outside a gesture.

        Used to re-align the knob after the owner changes its value, e.g.
        a mode switch or re-snap.
        """
        self._value = self._snap(clamp(value, self.spec.min_val, self.spec.max_val))
        self._position = self.value_to_position(self._value)
        return self._report()

    def reset(self) -> Optional[KnobUpdate]:
        """Return to the default value, or None if reset is disabled."""
        if self.spec.disable_reset:
            return None
        return self.set_value(self.spec.default)

"""
Audio layer for lambvoice.

Modules:
- backend: Interface the voice controllers push parameters to
- engine: sounddevice-based oscillator bank implementing it
- dsp: Oscillator and filter building blocks
"""

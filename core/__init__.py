"""
Core pitch engine and state management for lambvoice.

Modules:
- constants: Musical constants (note names, scales, pitch bounds, conversions)
- models: Immutable data structures (GlobalSettings, VoiceState, PanelState)
- knob: Gesture-to-value knob model
- voice: Per-voice pitch state, mode switching and transpose
- selector: Global root/scale selection broadcast to voices
- panel: Selector + voices wired to one audio backend
- settings: User settings (~/.lambvoice/settings.json)
- persistence: Patch file I/O (.lambpatch format)
"""

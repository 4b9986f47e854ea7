"""
DearPyGui control surface for lambvoice.

Modules:
- theme: Colors and styles
- labels: Display text for knob values
- widgets: Knob control bound to core.knob.Knob
- views: The synth panel window
"""

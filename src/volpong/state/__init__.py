"""State layer.

Holds the single value shared between the bus listener thread and the
simulation loop.
"""

"""
Infrastructure layer.

Flat-file implementations of the ports the application layer uses:
reading and writing card and progress files, reading remap rules and
walking directories for card sets.
"""

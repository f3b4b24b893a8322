"""Numerical core: gates, circuits, state-vector simulation and networks.

No file or terminal I/O happens in this package.
"""

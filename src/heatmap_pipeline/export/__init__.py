"""Rendering surfaces: standalone HTML and matplotlib figures."""

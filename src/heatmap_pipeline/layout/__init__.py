"""Geometry for drawing dendrograms next to the grid."""

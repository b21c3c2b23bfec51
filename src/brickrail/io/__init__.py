"""Export of generated solids."""

from .stl import export_solid, write_stl

__all__ = ['write_stl', 'export_solid']

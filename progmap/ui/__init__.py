"""Terminal UI package for progmap."""

from .mapping_tui import MappingTUI

__all__ = ["MappingTUI"]

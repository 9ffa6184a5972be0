"""Workflow orchestration package for progmap.

This package contains orchestration components for reconciliation runs:
- MappingLogger: Structured logging of a run to a timestamped log file.
- MappingSession: Explicit session state driving load, match, override and export.
"""

from progmap.orchestration.mapping_logger import MappingLogger
from progmap.orchestration.mapping_session import MappingSession

__all__ = ["MappingLogger", "MappingSession"]

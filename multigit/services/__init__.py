"""
Service layer for multigit.

Contains the logic that coordinates domain objects and infrastructure:
- TargetResolver: Pattern-based discovery of remote repositories
- DispatchService: Bounded concurrent fan-out of one command
- ReportService: Ordered per-target report and exit code

Services are the primary API for commands to use.
"""

from .resolver_service import TargetResolver
from .dispatch_service import DispatchService
from .report_service import ReportService, Report, ReportBlock

__all__ = [
    'TargetResolver',
    'DispatchService',
    'ReportService',
    'Report',
    'ReportBlock',
]

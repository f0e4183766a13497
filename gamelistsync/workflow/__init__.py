"""
Workflow package for gamelistsync.

Platform synchronization and pass orchestration.
"""

from .orchestrator import SyncOrchestrator
from .platform_sync import PlatformSynchronizer
from .progress import PlatformResult, SyncReport, ErrorLogger

__all__ = ['SyncOrchestrator', 'PlatformSynchronizer', 'PlatformResult', 'SyncReport', 'ErrorLogger']

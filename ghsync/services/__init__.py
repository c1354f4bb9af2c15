"""
Service layer for ghsync.

Contains business logic that orchestrates domain objects and infrastructure:
- OrgResolver: Which organizations a run covers
- DiscoveryService: Paginated repository discovery per organization
- ActionExecutor: Clone/update/fetch/skip for one repository
- SyncService: Bounded-concurrency scheduling over discovered repositories
- OutcomeAggregator: Run counters and per-repository ledger
- DiagnosticsService: Token access checks

Services are the primary API for commands to use.
"""

from .action_executor import ActionExecutor
from .aggregator import OutcomeAggregator
from .diagnostics_service import DiagnosticCheck, DiagnosticsService
from .discovery_service import DiscoveryService
from .org_resolver import OrgResolver, auto_accept, auto_reject, prompt_confirmation
from .sync_service import SyncService

__all__ = [
    'ActionExecutor',
    'OutcomeAggregator',
    'DiagnosticCheck',
    'DiagnosticsService',
    'DiscoveryService',
    'OrgResolver',
    'auto_accept',
    'auto_reject',
    'prompt_confirmation',
    'SyncService',
]

"""
Document intake and conflict-detection pipeline (client side).
"""
from .aggregation import DashboardStats, compute_dashboard_stats, is_stale
from .client import SmartDocClient
from .context import PipelineContext
from .intake import IntakeSubmitter
from .projections import (
    ConflictStore,
    DocumentStore,
    OptimisticInsert,
    ProjectionsCleared,
    SnapshotReplaced,
    apply_event,
)
from .reconciler import Reconciler
from .session_gate import SessionGate

__all__ = [
    "DashboardStats",
    "compute_dashboard_stats",
    "is_stale",
    "SmartDocClient",
    "PipelineContext",
    "IntakeSubmitter",
    "ConflictStore",
    "DocumentStore",
    "OptimisticInsert",
    "ProjectionsCleared",
    "SnapshotReplaced",
    "apply_event",
    "Reconciler",
    "SessionGate",
]

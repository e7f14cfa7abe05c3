"""
Smart Doc Checker - document intake and conflict detection.
"""
from .models import Conflict, Document, DocumentStatus, DocumentType, StateSnapshot, UploadPayload
from .pipeline import DashboardStats, SmartDocClient, compute_dashboard_stats

__version__ = "1.0.0"

__all__ = [
    "Conflict",
    "Document",
    "DocumentStatus",
    "DocumentType",
    "StateSnapshot",
    "UploadPayload",
    "DashboardStats",
    "SmartDocClient",
    "compute_dashboard_stats",
]

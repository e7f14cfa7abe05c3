"""
SmartDocClient - wires the session gate, intake submitter, reconciler and
projections into one object a UI (or script) can drive.
"""
from typing import List, Optional, Union

from ..core.logging_config import get_logger
from ..domain.entities import Session
from ..models import Conflict, Document, DocumentType, UploadPayload
from ..services.backend import BackendDataInterface, HttpBackendClient
from ..services.identity import IdentityProvider, IdentityProviderFactory
from .aggregation import DashboardStats, compute_dashboard_stats
from .context import PipelineContext
from .intake import IntakeSubmitter
from .reconciler import Reconciler
from .session_gate import SessionGate

logger = get_logger(__name__)


class SmartDocClient:
    """
    Example:
        async with SmartDocClient() as client:
            await client.sign_in("ana@example.com", "secret1")
            await client.upload(UploadPayload.from_path("policy.pdf"), "policy")
            print(client.stats().to_dict())
    """

    def __init__(
        self,
        identity: Optional[IdentityProvider] = None,
        backend: Optional[BackendDataInterface] = None,
        reconcile_delay: Optional[float] = None
    ):
        self.context = PipelineContext()
        self.identity = identity or IdentityProviderFactory.create()
        self.backend = backend or HttpBackendClient()
        self.reconciler = Reconciler(self.context, self.backend)
        self.intake = IntakeSubmitter(self.context, self.backend, self.reconciler, reconcile_delay)
        self.gate = SessionGate(self.context, self.identity, self.reconciler)

    async def start(self) -> Optional[Session]:
        """Resume any existing session and load its projections."""
        return await self.gate.init()

    async def close(self) -> None:
        self.gate.close()
        await self.context.teardown()
        await self.backend.close()

    async def __aenter__(self) -> "SmartDocClient":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    # Session

    @property
    def session(self) -> Optional[Session]:
        return self.context.session

    async def sign_in(self, email: str, password: str) -> bool:
        ok = await self.gate.sign_in(email, password)
        await self.context.settle()
        return ok

    async def sign_up(self, email: str, password: str, name: str = "") -> bool:
        ok = await self.gate.sign_up(email, password, name)
        await self.context.settle()
        return ok

    async def sign_out(self) -> None:
        await self.gate.sign_out()

    # Documents and conflicts

    async def upload(self, payload: UploadPayload, doc_type: Union[DocumentType, str]) -> Document:
        return await self.intake.submit(payload, doc_type)

    async def refresh(self) -> bool:
        """Manual refresh; safe to call repeatedly."""
        return await self.reconciler.refresh()

    @property
    def documents(self) -> List[Document]:
        return list(self.context.documents)

    @property
    def conflicts(self) -> List[Conflict]:
        return list(self.context.conflicts)

    def stats(self) -> DashboardStats:
        return compute_dashboard_stats(self.context.documents, self.context.conflicts)

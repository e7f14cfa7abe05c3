"""
Reconciliation - fetch authoritative state and replace projections wholesale.
"""
import asyncio

from ..api.exceptions import AuthFailure, FetchFailure, StaleResponseDiscarded
from ..core.logging_config import get_logger
from ..services.backend.base import BackendDataInterface
from .context import PipelineContext
from .projections import SnapshotReplaced

logger = get_logger(__name__)


class Reconciler:
    """
    Replaces both projections with the backend's current snapshot.

    Concurrent refreshes are not serialized: whichever response is applied
    last wins. That is safe because every response is a full snapshot.
    """

    def __init__(self, context: PipelineContext, backend: BackendDataInterface):
        self._context = context
        self._backend = backend

    async def refresh(self) -> bool:
        """
        Fetch and apply one snapshot.

        Never raises. Returns True if the projections were replaced, False if
        there was no session, the fetch failed (projections kept as
        last-known-good) or the session changed while the fetch was in flight.
        """
        session = self._context.session
        if session is None:
            logger.warning("Reconciliation skipped: no active session")
            return False

        epoch = self._context.epoch
        try:
            snapshot = await self._backend.fetch_state(session.access_token)
        except (FetchFailure, AuthFailure) as e:
            logger.warning(f"Reconciliation fetch failed, keeping last-known-good projections: {e}")
            return False
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error(f"Unexpected reconciliation error: {e}", exc_info=True)
            return False

        try:
            self._context.apply(SnapshotReplaced(epoch=epoch, snapshot=snapshot))
        except StaleResponseDiscarded as e:
            logger.info(f"Reconciliation result discarded: {e}")
            return False

        logger.debug(
            f"Projections replaced: {len(snapshot.documents)} documents, "
            f"{len(snapshot.conflicts)} conflicts (epoch {epoch})"
        )
        return True

    def schedule(self, key: str, delay: float) -> asyncio.Task:
        """Refresh once after ``delay`` seconds; cancelled on sign-out."""
        return self._context.schedule(key, delay, self.refresh)

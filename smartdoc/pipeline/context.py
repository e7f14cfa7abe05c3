"""
Pipeline context - explicit owner of session and projection state.

Every pipeline operation receives the context instead of reaching for
module globals. The context tags each session with an epoch; the epoch
moves whenever the signed-in identity changes (including sign-out), and
projection events stamped with an older epoch are refused.
"""
import asyncio
from typing import Awaitable, Callable, Dict, List, Optional, Set

from ..api.exceptions import AuthFailure, StaleResponseDiscarded
from ..core.logging_config import get_logger
from ..domain.entities import Session
from .projections import (
    ConflictStore,
    DocumentStore,
    ProjectionEvent,
    ProjectionsCleared,
    apply_event,
)

logger = get_logger(__name__)

ProjectionListener = Callable[["PipelineContext", ProjectionEvent], None]


class PipelineContext:
    """
    Holds the current session, both projections and the background tasks
    started on their behalf.

    Lifecycle:
        begin_session() - identity established or token refreshed
        end_session()   - sign-out; clears projections and cancels scheduled work
        teardown()      - client shutdown; cancels everything still running
    """

    def __init__(self):
        self.session: Optional[Session] = None
        self.epoch = 0
        self.documents = DocumentStore()
        self.conflicts = ConflictStore()
        self._listeners: List[ProjectionListener] = []
        self._scheduled: Dict[str, asyncio.Task] = {}
        self._inflight: Set[asyncio.Task] = set()

    # Session lifecycle

    def begin_session(self, session: Session) -> bool:
        """
        Record ``session`` as current.

        Returns True when the identity changed, which starts a new epoch.
        A token refresh for the same identity keeps the epoch.
        """
        changed = not session.same_identity(self.session)
        if changed:
            previous = self.session
            self.epoch += 1
            self._cancel_scheduled()
            if previous is not None:
                # Switching identities without a sign-out in between
                self.apply(ProjectionsCleared(epoch=self.epoch))
            logger.info(f"Session started for identity {session.identity} (epoch {self.epoch})")
        self.session = session
        return changed

    def end_session(self) -> None:
        """Drop the session and clear both projections synchronously."""
        if self.session is not None:
            logger.info(f"Session ended for identity {self.session.identity} (epoch {self.epoch})")
        self.session = None
        self.epoch += 1
        self._cancel_scheduled()
        self.apply(ProjectionsCleared(epoch=self.epoch))

    def require_session(self) -> Session:
        if self.session is None:
            raise AuthFailure("No active session; sign in first")
        return self.session

    # Projection updates

    def apply(self, event: ProjectionEvent) -> None:
        """
        Apply a projection event stamped with the epoch it was initiated in.

        Raises:
            StaleResponseDiscarded: if the epoch has moved on since
        """
        if event.epoch != self.epoch:
            raise StaleResponseDiscarded(event.epoch, self.epoch)
        apply_event(self.documents, self.conflicts, event)
        self._notify(event)

    def add_listener(self, listener: ProjectionListener) -> Callable[[], None]:
        """Register a callback run after every applied event. Returns a remover."""
        self._listeners.append(listener)

        def remove():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove

    def _notify(self, event: ProjectionEvent) -> None:
        for listener in list(self._listeners):
            try:
                listener(self, event)
            except Exception as e:
                logger.error(f"Projection listener {listener!r} failed: {e}", exc_info=True)

    # Background work

    def schedule(
        self,
        key: str,
        delay: float,
        job: Callable[[], Awaitable[object]]
    ) -> asyncio.Task:
        """
        Run ``job`` once after ``delay`` seconds.

        At most one job is pending per key; scheduling again replaces it.
        Pending jobs are cancelled by end_session() and teardown().
        """
        previous = self._scheduled.pop(key, None)
        if previous is not None and not previous.done():
            previous.cancel()

        async def _delayed():
            await asyncio.sleep(delay)
            await job()

        task = asyncio.get_running_loop().create_task(_delayed(), name=f"reconcile:{key}")
        self._scheduled[key] = task

        def _forget(finished: asyncio.Task):
            if self._scheduled.get(key) is finished:
                del self._scheduled[key]

        task.add_done_callback(_forget)
        logger.debug(f"Scheduled job '{key}' in {delay}s")
        return task

    def spawn(self, coro: Awaitable[object]) -> asyncio.Task:
        """Start ``coro`` in the background and keep a reference until it finishes."""
        task = asyncio.ensure_future(coro)
        self._inflight.add(task)
        task.add_done_callback(self._inflight.discard)
        return task

    async def settle(self) -> None:
        """Wait for work started with spawn() (not delayed jobs) to finish."""
        while self._inflight:
            await asyncio.gather(*list(self._inflight), return_exceptions=True)

    def pending_jobs(self) -> List[str]:
        return [key for key, task in self._scheduled.items() if not task.done()]

    def _cancel_scheduled(self) -> None:
        for key, task in list(self._scheduled.items()):
            if not task.done():
                task.cancel()
                logger.debug(f"Cancelled scheduled job '{key}'")
        self._scheduled.clear()

    async def teardown(self) -> None:
        """Cancel scheduled and in-flight work and wait for it to unwind."""
        tasks = [t for t in list(self._scheduled.values()) + list(self._inflight) if not t.done()]
        self._scheduled.clear()
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._listeners.clear()

"""
Intake submitter - upload a file and show it immediately as processing.
"""
from typing import Optional, Union

from ..api.exceptions import StaleResponseDiscarded, UploadRejected
from ..core.config import RECONCILE_DELAY_SECONDS
from ..core.logging_config import get_logger
from ..models import Document, DocumentType, UploadPayload
from ..services.backend.base import BackendDataInterface
from .context import PipelineContext
from .projections import OptimisticInsert
from .reconciler import Reconciler

logger = get_logger(__name__)


class IntakeSubmitter:
    """
    Pushes uploads to the backend, inserts the returned document at the end
    of the document projection without waiting for analysis, and schedules a
    single delayed reconciliation keyed by the new document id.
    """

    def __init__(
        self,
        context: PipelineContext,
        backend: BackendDataInterface,
        reconciler: Reconciler,
        reconcile_delay: Optional[float] = None
    ):
        self._context = context
        self._backend = backend
        self._reconciler = reconciler
        self.reconcile_delay = RECONCILE_DELAY_SECONDS if reconcile_delay is None else reconcile_delay

    async def submit(self, payload: UploadPayload, doc_type: Union[DocumentType, str]) -> Document:
        """
        Upload ``payload`` declared as ``doc_type``.

        Args:
            payload: Raw file to upload
            doc_type: One of the DocumentType values

        Returns:
            The provisional document returned by the backend

        Raises:
            AuthFailure: if there is no active session
            UploadRejected: if the type is unknown or the backend refuses the
                upload; local state is left untouched
        """
        session = self._context.require_session()

        try:
            doc_type = DocumentType(doc_type)
        except ValueError:
            logger.warning(f"Upload of {payload.filename} rejected: unsupported type '{doc_type}'")
            raise UploadRejected(f"Unsupported document type: {doc_type}")

        epoch = self._context.epoch
        logger.info(f"Submitting {payload.filename} as {doc_type.value} ({len(payload.content)} bytes)")
        try:
            document = await self._backend.submit_upload(session.access_token, payload, doc_type)
        except UploadRejected as e:
            logger.warning(f"Upload of {payload.filename} rejected: {e}")
            raise

        try:
            self._context.apply(OptimisticInsert(epoch=epoch, document=document))
        except StaleResponseDiscarded as e:
            # Signed out (or switched identity) while the upload was in flight
            logger.info(f"Optimistic insert of {document.id} discarded: {e}")
            return document

        self._reconciler.schedule(key=document.id, delay=self.reconcile_delay)
        return document

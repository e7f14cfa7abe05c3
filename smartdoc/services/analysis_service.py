"""
Analysis Service - runs the analyzer on a stored document and materializes
its results.

Lifecycle handled here:
    processing -> analyzed   (summary, confidence, version + 1, conflicts)
    processing -> error      (analyzer failure or timeout; earlier results kept)
    analyzed   -> processing (explicit re-analysis request)
`error` is terminal: there is no automatic retry and no re-analysis.
"""
import asyncio
import uuid
from typing import List, Optional, Tuple

from ..api.exceptions import AnalysisError, DocumentStateError, FileProcessingError
from ..core.config import ANALYSIS_TIMEOUT_SECONDS
from ..core.logging_config import get_logger
from ..domain.entities import StoredConflict, StoredDocument
from ..domain.value_objects import ConflictId, UserId
from .analyzers.base import AnalysisInput, AnalysisResult, Analyzer, ConflictFinding
from .database.base import DatabaseInterface
from .document_service import DocumentService
from .text_extractors import TextExtractorFactory

logger = get_logger(__name__)


class AnalysisService:

    def __init__(
        self,
        db_service: DatabaseInterface,
        analyzer: Analyzer,
        document_service: DocumentService,
        timeout: Optional[float] = None
    ):
        """
        Args:
            db_service: Store for records and raw files
            analyzer: Analyzer implementation
            document_service: Used to refresh denormalized conflict counts
            timeout: Seconds before an analysis is declared failed
        """
        self.db_service = db_service
        self.analyzer = analyzer
        self.document_service = document_service
        self.timeout = ANALYSIS_TIMEOUT_SECONDS if timeout is None else timeout

    async def request_reanalysis(self, owner_id: UserId, doc_id: str) -> Tuple[StoredDocument, bool]:
        """
        Move an analyzed document back to processing.

        Returns:
            (document, started). The caller runs analyze_document() only when
            started is True; a document already in processing keeps its
            running analysis.

        Raises:
            DocumentNotFoundError: if the caller does not own the document
            DocumentStateError: if the document failed analysis (status error)
        """
        document = await self.document_service.get_owned_document(owner_id, doc_id)
        if document.is_processing():
            logger.info(f"Document {doc_id} is already being analyzed")
            return document, False
        if document.is_failed():
            raise DocumentStateError(
                f"Document {doc_id} failed analysis; upload a corrected file instead"
            )
        document.mark_processing(modified_by=owner_id)
        document = await self.db_service.update_document(document)
        logger.info(f"Re-analysis requested for {doc_id} (current version {document.version})")
        return document, True

    async def analyze_document(self, doc_id: str) -> Optional[StoredDocument]:
        """
        Analyze a document in processing state. Never raises; failures are
        recorded on the document as status ``error``.
        """
        document = await self.db_service.get_document(doc_id)
        if document is None:
            logger.warning(f"Skipping analysis of {doc_id}: document no longer exists")
            return None

        try:
            result = await self._run_analyzer(document)
        except asyncio.TimeoutError:
            return await self._fail(doc_id, f"Analysis timed out after {self.timeout}s")
        except (AnalysisError, FileProcessingError, FileNotFoundError) as e:
            return await self._fail(doc_id, str(e))
        except Exception as e:
            logger.error(f"Unexpected analysis error for {doc_id}: {e}", exc_info=True)
            return await self._fail(doc_id, f"Unexpected analysis error: {e}")

        # Re-read: the document may have been deleted while the analyzer ran
        document = await self.db_service.get_document(doc_id)
        if document is None:
            logger.warning(f"Discarding analysis of {doc_id}: document deleted during analysis")
            return None

        document.mark_analyzed(result.summary, result.confidence)
        document = await self.db_service.update_document(document)
        await self._materialize_conflicts(document, result.conflicts)
        await self.document_service.recount_conflicts(document.owner_id)

        logger.info(
            f"Analyzed {doc_id} (version {document.version}, confidence {result.confidence}, "
            f"{len(result.conflicts)} findings)"
        )
        return await self.db_service.get_document(doc_id)

    async def _run_analyzer(self, document: StoredDocument) -> AnalysisResult:
        content = await self.db_service.get_file(document.file_key)
        target = AnalysisInput(
            id=document.id,
            name=document.name,
            type=document.type,
            text=TextExtractorFactory.extract_text(document.name, content)
        )
        corpus = await self._build_corpus(document)

        loop = asyncio.get_event_loop()
        return await asyncio.wait_for(
            loop.run_in_executor(None, self.analyzer.analyze, target, corpus),
            timeout=self.timeout
        )

    async def _build_corpus(self, document: StoredDocument) -> List[AnalysisInput]:
        corpus = []
        for other in await self.db_service.list_documents(document.owner_id):
            if other.id == document.id or not other.is_analyzed():
                continue
            try:
                content = await self.db_service.get_file(other.file_key)
                text = TextExtractorFactory.extract_text(other.name, content)
            except (FileProcessingError, FileNotFoundError) as e:
                logger.debug(f"Leaving {other.id} out of the comparison corpus: {e}")
                continue
            corpus.append(AnalysisInput(id=other.id, name=other.name, type=other.type, text=text))
        return corpus

    async def _materialize_conflicts(self, document: StoredDocument, findings: List[ConflictFinding]) -> None:
        owner_id = document.owner_id

        # Unresolved findings from this document's previous analysis are superseded
        open_keys = set()
        for existing in await self.db_service.list_conflicts(owner_id):
            if not existing.is_unresolved():
                continue
            if existing.source_document_id == document.id:
                await self.db_service.delete_conflict(existing.id)
            else:
                open_keys.add(_conflict_key(existing.type, existing.documents))

        live_ids = {doc.id for doc in await self.db_service.list_documents(owner_id)}
        for finding in findings:
            documents = [doc_id for doc_id in dict.fromkeys(finding.documents) if doc_id in live_ids]
            if not documents:
                logger.debug(f"Dropping finding with no live documents: {finding.description}")
                continue
            # Another document's analysis may already have reported the same pair
            key = _conflict_key(finding.type, documents)
            if key in open_keys:
                logger.debug(f"Skipping duplicate {finding.type} finding for {sorted(documents)}")
                continue
            open_keys.add(key)
            await self.db_service.create_conflict(StoredConflict(
                id=ConflictId(str(uuid.uuid4())),
                type=finding.type,
                severity=finding.severity,
                description=finding.description,
                recommendation=finding.recommendation,
                documents=documents,
                owner_id=owner_id,
                source_document_id=document.id
            ))

    async def _fail(self, doc_id: str, reason: str) -> Optional[StoredDocument]:
        logger.warning(f"Analysis of {doc_id} failed: {reason}")
        document = await self.db_service.get_document(doc_id)
        if document is None:
            return None
        document.mark_failed(reason)
        return await self.db_service.update_document(document)


def _conflict_key(conflict_type: str, documents) -> Tuple[str, frozenset]:
    return conflict_type, frozenset(documents)

"""
OpenRouter Analyzer.

Uses an LLM via the OpenRouter API (OpenAI-compatible client) to summarize a
document and detect conflicts against the owner's other documents.
"""
import json
import re
from typing import List, Optional

from openai import OpenAI

from ...api.exceptions import AnalysisError
from ...core.config import OPENROUTER_API_KEY, OPENROUTER_BASE_URL, OPENROUTER_MODEL
from ...core.logging_config import get_logger
from .base import CONFLICT_TYPES, SEVERITIES, AnalysisInput, AnalysisResult, Analyzer, ConflictFinding

logger = get_logger(__name__)

PROMPT_TEMPLATE = """You review documents for a compliance team.

Summarize the NEW document and list every conflict it has with itself or with the EXISTING documents.
A conflict is one of:
- "policy": two documents state contradictory rules, values or obligations
- "compliance": the document violates a regulation or exposes sensitive data
- "ambiguity": wording is vague enough to be interpreted in more than one way

Respond with JSON only, no preamble:
{{"summary": "<2-3 sentences>", "confidence": <0..1>,
  "conflicts": [{{"type": "policy|compliance|ambiguity", "severity": "low|medium|high",
                 "description": "...", "recommendation": "...", "documents": ["<document ids>"]}}]}}

NEW document (id={doc_id}, type={doc_type}, name={doc_name}):
{doc_text}

EXISTING documents:
{corpus}
"""


class OpenRouterAnalyzer(Analyzer):
    """Analyzer using a chat model through OpenRouter."""

    name = "openrouter"

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None, client=None):
        self.api_key = api_key or OPENROUTER_API_KEY
        self.model = model or OPENROUTER_MODEL
        if client is not None:
            self.client = client
        elif self.api_key:
            self.client = OpenAI(base_url=OPENROUTER_BASE_URL, api_key=self.api_key)
        else:
            self.client = None

    def analyze(self, document: AnalysisInput, corpus: List[AnalysisInput]) -> AnalysisResult:
        if not self.client:
            raise AnalysisError("OpenRouter API key not configured")

        corpus_text = "\n\n".join(
            f"(id={other.id}, type={other.type}, name={other.name})\n{other.text[:2000]}"
            for other in corpus if other.id != document.id
        ) or "(none)"
        prompt = PROMPT_TEMPLATE.format(
            doc_id=document.id,
            doc_type=document.type,
            doc_name=document.name,
            doc_text=document.text[:10000],
            corpus=corpus_text
        )

        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                max_tokens=1500
            )
            content = response.choices[0].message.content or ""
        except Exception as e:
            logger.error(f"OpenRouter API Error (Analysis): {e}")
            raise AnalysisError(f"OpenRouter request failed: {e}") from e

        known_ids = {document.id} | {other.id for other in corpus}
        return self.parse_response(content, document.id, known_ids)

    @staticmethod
    def parse_response(content: str, doc_id: str, known_ids: set) -> AnalysisResult:
        """Parse the model's JSON answer, dropping findings that cannot be materialized."""
        cleaned = re.sub(r"^```(?:json)?\s*|\s*```$", "", content.strip())
        try:
            data = json.loads(cleaned)
            summary = str(data["summary"]).strip()
            confidence = max(0.0, min(1.0, float(data.get("confidence", 0.5))))
        except (ValueError, KeyError, TypeError) as e:
            raise AnalysisError(f"Unparseable analyzer response: {e}") from e

        findings = []
        for raw in data.get("conflicts") or []:
            if not isinstance(raw, dict):
                continue
            if raw.get("type") not in CONFLICT_TYPES or raw.get("severity") not in SEVERITIES:
                logger.debug(f"Skipping malformed finding: {raw}")
                continue
            documents = [d for d in dict.fromkeys(raw.get("documents") or []) if d in known_ids]
            if doc_id not in documents:
                documents.insert(0, doc_id)
            findings.append(ConflictFinding(
                type=raw["type"],
                severity=raw["severity"],
                description=str(raw.get("description", "")).strip(),
                recommendation=str(raw.get("recommendation", "")).strip(),
                documents=documents
            ))

        return AnalysisResult(summary=summary, confidence=confidence, conflicts=findings)

"""
AI analysis gateway.

Sends documents to an OpenAI or Anthropic model and turns the JSON replies
into validated ``AnalysisResult`` / ``ComparisonResult`` objects.  A demo
gateway with canned answers keeps the dashboard usable without an API key.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from datetime import date, timedelta

from pydantic import ValidationError as SchemaError
from tenacity import Retrying, stop_after_attempt, wait_exponential

from .config import Settings
from .errors import AnalysisError, ComparisonError
from .models import (
    AnalysisResult,
    ClauseComparison,
    ComparisonResult,
    KeyClause,
    KeyDate,
    PotentialRisk,
    RiskComparison,
    RiskSeverity,
)
from .prompts import ANALYSIS_PROMPT, COMPARISON_PROMPT, SYSTEM_PROMPT, TITLE_PROMPT
from .schemas import AnalysisPayload, ComparisonPayload

logger = logging.getLogger(__name__)

FALLBACK_TITLE = "Untitled Document"
TITLE_SNIPPET_WORDS = 300


class AnalysisGateway(ABC):
    """Contract of the external AI collaborator."""

    @abstractmethod
    def analyze(self, document_text: str) -> AnalysisResult:
        """Analyze a document. Raises ``AnalysisError`` on any failure."""

    @abstractmethod
    def compare(self, text_a: str, text_b: str) -> ComparisonResult:
        """Compare two documents. Raises ``ComparisonError`` on any failure."""

    @abstractmethod
    def suggest_title(self, document_text: str) -> str:
        """Suggest a short title. Never raises; falls back to ``FALLBACK_TITLE``."""


def title_snippet(document_text: str) -> str:
    """First 300 space-separated words of the text."""
    return " ".join(document_text.split(" ")[:TITLE_SNIPPET_WORDS])


def extract_json(response: str) -> dict:
    """
    Parse JSON from a model response, handling markdown code blocks.

    Raises:
        ValueError: If no JSON object can be decoded.
    """
    if "```json" in response:
        start = response.find("```json") + 7
        end = response.find("```", start)
        if end == -1:
            end = len(response)
        response = response[start:end].strip()
    elif "```" in response:
        start = response.find("```") + 3
        end = response.find("```", start)
        if end == -1:
            end = len(response)
        response = response[start:end].strip()

    data = json.loads(response.strip())
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object, got {type(data).__name__}")
    return data


class LLMGateway(AnalysisGateway):
    """
    Gateway backed by an LLM chat API.
    Supports both OpenAI and Anthropic models.

    Args:
        model: Model name (gpt-4-turbo, gpt-4o, claude-3-5-sonnet-latest, etc.)
        api_key: API key for the provider picked by ``model``.
        client: Pre-built SDK client (skips client construction).
        attempts: Transport attempts per call before giving up.
    """

    def __init__(
        self,
        model: str = "gpt-4-turbo",
        api_key: str | None = None,
        client=None,
        attempts: int = 3,
    ) -> None:
        self.model = model
        self.is_anthropic = model.startswith("claude")
        self.attempts = max(1, attempts)
        self.client = client if client is not None else self._init_client(api_key)

    @classmethod
    def from_settings(cls, settings: Settings) -> LLMGateway:
        key = settings.anthropic_api_key if settings.model.startswith("claude") else settings.openai_api_key
        return cls(model=settings.model, api_key=key, attempts=settings.llm_attempts)

    def _init_client(self, api_key: str | None):
        """Initialize the appropriate API client."""
        if not api_key:
            provider = "ANTHROPIC_API_KEY" if self.is_anthropic else "OPENAI_API_KEY"
            raise ValueError(f"{provider} not found in environment")

        if self.is_anthropic:
            from anthropic import Anthropic

            return Anthropic(api_key=api_key)

        from openai import OpenAI

        return OpenAI(api_key=api_key)

    def _send(self, prompt: str, system_prompt: str, temperature: float, max_tokens: int) -> str:
        if self.is_anthropic:
            response = self.client.messages.create(
                model=self.model,
                max_tokens=max_tokens,
                system=system_prompt,
                temperature=temperature,
                messages=[{"role": "user", "content": prompt}],
            )
            return response.content[0].text

        response = self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": prompt},
            ],
            temperature=temperature,
            max_tokens=max_tokens,
        )
        return response.choices[0].message.content or ""

    def _call_llm(
        self,
        prompt: str,
        system_prompt: str = SYSTEM_PROMPT,
        temperature: float = 0.2,
        max_tokens: int = 4096,
    ) -> str:
        """Make a call to the LLM with retry logic on transport errors."""
        retrying = Retrying(
            stop=stop_after_attempt(self.attempts),
            wait=wait_exponential(multiplier=1, min=4, max=10),
            reraise=True,
        )
        return retrying(self._send, prompt, system_prompt, temperature, max_tokens)

    def analyze(self, document_text: str) -> AnalysisResult:
        prompt = ANALYSIS_PROMPT.format(document_text=document_text)
        try:
            response = self._call_llm(prompt, temperature=0.2)
            payload = AnalysisPayload.model_validate(extract_json(response))
        except (ValueError, SchemaError) as exc:
            logger.error("Analysis response did not match the schema: %s", exc)
            raise AnalysisError("Failed to get a valid analysis from the AI model.") from exc
        except Exception as exc:
            logger.error("Error calling %s for analysis: %s", self.model, exc)
            raise AnalysisError("Failed to get a valid analysis from the AI model.") from exc
        return payload.to_result()

    def compare(self, text_a: str, text_b: str) -> ComparisonResult:
        prompt = COMPARISON_PROMPT.format(document_a=text_a, document_b=text_b)
        try:
            response = self._call_llm(prompt, temperature=0.3)
            payload = ComparisonPayload.model_validate(extract_json(response))
        except (ValueError, SchemaError) as exc:
            logger.error("Comparison response did not match the schema: %s", exc)
            raise ComparisonError("Failed to get a valid comparison from the AI model.") from exc
        except Exception as exc:
            logger.error("Error calling %s for comparison: %s", self.model, exc)
            raise ComparisonError("Failed to get a valid comparison from the AI model.") from exc
        return payload.to_result()

    def suggest_title(self, document_text: str) -> str:
        snippet = title_snippet(document_text)
        if not snippet.strip():
            return ""
        try:
            title = self._call_llm(TITLE_PROMPT.format(snippet=snippet), temperature=0.5, max_tokens=20)
        except Exception as exc:
            logger.warning("Title suggestion failed: %s", exc)
            return FALLBACK_TITLE
        title = title.strip().strip('"').strip()
        return title or FALLBACK_TITLE


class DemoGateway(AnalysisGateway):
    """Canned answers for running the dashboard without an API key."""

    def __init__(self, today: date | None = None) -> None:
        self._today = today

    def analyze(self, document_text: str) -> AnalysisResult:
        if not document_text.strip():
            raise AnalysisError("Nothing to analyze.")
        today = self._today or date.today()
        return AnalysisResult(
            summary=(
                "A twelve-month residential lease between a landlord and a tenant with "
                "automatic renewal, monthly rent with a late fee, and a refundable "
                "security deposit."
            ),
            key_clauses=[
                KeyClause(
                    "Lease Duration & Renewal",
                    "The lease runs for a year and renews automatically unless notice is "
                    "given 60 days before it ends.",
                    "...shall automatically renew for successive twelve (12) month periods...",
                ),
                KeyClause(
                    "Payment Terms",
                    "Rent is due on the first of each month; a late fee applies after the fifth.",
                    "...A late fee of $100.00 shall be applied...",
                ),
                KeyClause(
                    "Security Deposit",
                    "A deposit is held against damage and returned within 30 days of the end "
                    "of the lease.",
                    "...the sum of $2,000.00 as a security deposit...",
                ),
            ],
            potential_risks=[
                PotentialRisk(
                    "Automatic Renewal Clause",
                    "Missing the notice window locks you into another full year.",
                    RiskSeverity.HIGH,
                ),
                PotentialRisk(
                    "High Late Fees",
                    "A flat late fee applies after only a short grace period.",
                    RiskSeverity.MEDIUM,
                ),
            ],
            key_dates=[
                KeyDate(
                    "Renewal Notice Deadline",
                    (today + timedelta(days=30)).isoformat(),
                    "...no less than sixty (60) days prior to the end of the current term.",
                ),
                KeyDate(
                    "Lease End Date",
                    (today + timedelta(days=90)).isoformat(),
                    "...ending on January 31...",
                ),
            ],
            counterparties=["John Smith", "Jane Doe"],
        )

    def compare(self, text_a: str, text_b: str) -> ComparisonResult:
        words_a, words_b = len(text_a.split()), len(text_b.split())
        return ComparisonResult(
            overall_summary=(
                f"Document 1 has {words_a} words and Document 2 has {words_b} words. "
                "Configure an API key for a clause-level comparison."
            ),
            clause_comparisons=[
                ClauseComparison(
                    "Length",
                    "The documents differ in length." if words_a != words_b else "Same length.",
                    f"{words_a} words",
                    f"{words_b} words",
                )
            ],
            risk_profile_differences=[
                RiskComparison("Risk Profile", "Not assessed in demo mode.", "Unknown", "Unknown")
            ],
        )

    def suggest_title(self, document_text: str) -> str:
        snippet = title_snippet(document_text)
        if not snippet.strip():
            return ""
        first_line = next(line.strip() for line in snippet.splitlines() if line.strip())
        return first_line[:60] or FALLBACK_TITLE


def build_gateway(settings: Settings) -> AnalysisGateway:
    """LLM gateway when an API key is configured, demo gateway otherwise."""
    if not settings.has_api_key:
        logger.warning("No API key configured for %s; running in demo mode", settings.model)
        return DemoGateway()
    return LLMGateway.from_settings(settings)

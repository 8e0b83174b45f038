"""
AI insight-text collaborator: protocol, HTTP client, and the safe wrapper.

The collaborator is opaque. It receives one prompt string and returns free
text; this module only builds the prompt and validates what comes back.

Wire format (``HttpInsightClient``):
  POST <endpoint>
    -> JSON body: {"model": "<model>", "prompt": "<context>"}
    -> Auth:      Bearer <api key>   (key read from the env var named in
                                       ``[insights] api_key_env``; optional)
    <- JSON body: {"text": "<generated text>"}

Expected generated text for ``get_insights``: a JSON array of objects with
keys ``title``, ``description``, ``type``, ``actionLabel``, ``actionUrl``.
A Markdown code fence around the array is tolerated.

Failure policy
--------------
``get_insights`` never raises. Transport errors, non-2xx responses, invalid
JSON, schema mismatches, and empty arrays all degrade to
``[FALLBACK_INSIGHT]`` and a WARNING log line.
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Sequence
from typing import Optional, Protocol

import httpx
from pydantic import TypeAdapter

from inventory_signals.config import InsightsConfig
from inventory_signals.models.insight import Insight
from inventory_signals.models.product import UNKNOWN_ITEM_NAME, Product, Transaction
from inventory_signals.taxonomy.signal_taxonomy import InsightType

logger = logging.getLogger(__name__)

FALLBACK_INSIGHT = Insight(
    title="Insights unavailable",
    description="AI insights could not be generated right now. Please try again later.",
    type=InsightType.GENERAL,
)

_INSIGHT_LIST = TypeAdapter(list[Insight])

_LANGUAGE_NAMES = {"en": "English", "bn": "Bangla"}


class InsightTextGenerator(Protocol):
    """Anything that turns a prompt into generated text."""

    def generate_insight_text(self, context: str) -> str: ...


class HttpInsightClient:
    """``InsightTextGenerator`` backed by an HTTP text-generation endpoint.

    Args:
        endpoint:  Full URL of the generation endpoint.
        model:     Model name forwarded in the request body.
        api_key:   Bearer token; omitted from the request when ``None``.
        timeout:   Request timeout in seconds.
        transport: Optional httpx transport (tests pass ``httpx.MockTransport``).
    """

    def __init__(
        self,
        endpoint: str,
        model: str,
        api_key: Optional[str] = None,
        timeout: float = 20.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.endpoint = endpoint
        self.model = model
        self._api_key = api_key
        self._timeout = timeout
        self._transport = transport

    @classmethod
    def from_config(
        cls,
        config: InsightsConfig,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> "HttpInsightClient":
        """Build a client from ``[insights]`` config.

        Raises:
            ValueError: If ``config.endpoint`` is not set.
        """
        if not config.endpoint:
            raise ValueError("insights.endpoint is not configured.")
        return cls(
            endpoint=config.endpoint,
            model=config.model,
            api_key=os.environ.get(config.api_key_env) or None,
            timeout=config.timeout_seconds,
            transport=transport,
        )

    def generate_insight_text(self, context: str) -> str:
        """POST ``context`` and return the generated text.

        Raises:
            httpx.HTTPError: On transport failure or a non-2xx response.
            ValueError: If the response body has no string ``text`` field.
        """
        headers = {"Content-Type": "application/json"}
        if self._api_key:
            headers["Authorization"] = f"Bearer {self._api_key}"

        with httpx.Client(transport=self._transport, timeout=self._timeout) as client:
            resp = client.post(
                self.endpoint,
                json={"model": self.model, "prompt": context},
                headers=headers,
            )
        resp.raise_for_status()

        text = resp.json().get("text")
        if not isinstance(text, str):
            raise ValueError("Insight response has no 'text' field.")
        logger.debug("Insight endpoint returned %d chars", len(text))
        return text


def build_insight_context(
    products: Sequence[Product],
    transactions: Sequence[Transaction],
    lang: str = "en",
) -> str:
    """Render the catalogue and sales log as a prompt for the collaborator."""
    inventory = ", ".join(
        f"{p.name}: {p.stock} units (Price: ${p.price:g}, Demand: {p.demand_level.value})"
        for p in products
    ) or "no products"

    revenue_by_product: dict[str, float] = {}
    for tx in transactions:
        revenue_by_product[tx.product_id] = revenue_by_product.get(tx.product_id, 0.0) + tx.revenue
    names = {p.id: p.name for p in products}
    sales = ", ".join(
        f"{names.get(pid, UNKNOWN_ITEM_NAME)}: ${total:.2f}"
        for pid, total in revenue_by_product.items()
    ) or "no sales recorded"

    language = _LANGUAGE_NAMES.get(lang, "English")
    return (
        "Analyze this small-shop inventory data:\n"
        f"Inventory: {inventory}\n"
        f"Revenue by product: {sales}\n\n"
        "Identify stock risks and pricing opportunities. "
        f"Respond in {language}.\n"
        "Format the response strictly as a JSON array of objects with the keys: "
        "title (string), description (string), type (inventory, pricing or general), "
        "actionLabel (string), actionUrl (string)."
    )


def get_insights(
    generator: InsightTextGenerator,
    products: Sequence[Product],
    transactions: Sequence[Transaction],
    lang: str = "en",
) -> list[Insight]:
    """Ask the collaborator for insights; never raises.

    Returns:
        Parsed insights, or ``[FALLBACK_INSIGHT]`` on any failure.
    """
    context = build_insight_context(products, transactions, lang)
    try:
        text = generator.generate_insight_text(context)
        insights = parse_insights(text)
    except Exception:
        logger.warning("Insight generation failed; using fallback", exc_info=True)
        return [FALLBACK_INSIGHT]

    logger.info("Received %d insight(s)", len(insights))
    return insights


def parse_insights(text: str) -> list[Insight]:
    """Parse generated text into insights.

    Raises:
        ValueError: On invalid JSON, a non-array payload, or an empty array.
        pydantic.ValidationError: If an entry does not match ``Insight``.
    """
    payload = json.loads(_strip_code_fence(text))
    if not isinstance(payload, list) or not payload:
        raise ValueError("Expected a non-empty JSON array of insights.")
    return _INSIGHT_LIST.validate_python(payload)


def _strip_code_fence(text: str) -> str:
    stripped = text.strip()
    if not stripped.startswith("```"):
        return stripped
    lines = stripped.splitlines()[1:]
    if lines and lines[-1].strip() == "```":
        lines = lines[:-1]
    return "\n".join(lines)

"""
AI trading coach.

Thin client for the Gemini generateContent REST endpoint. Reads trades
as context, never writes to the ledger. Failures are logged and turned
into a short message for the user.
"""

import json
import logging
from typing import List, Optional

import requests

from alphaone.core.config import Config
from alphaone.core.models import Trade

logger = logging.getLogger(__name__)

MISSING_KEY_MESSAGE = "API key missing. Set GEMINI_API_KEY in .env."

TAG_PROMPT = (
    'Based on these trade notes, suggest a VERY short (1-2 words max) strategy tag '
    '(e.g., "Trend Pullback", "Breakout"). Output ONLY the tag. Notes: "{notes}"'
)

BRIEFING_PROMPT = (
    "Provide a concise bullet-point summary of the top 3 high-impact Forex news events "
    "for today and their potential impact on major pairs (EURUSD, USDJPY, GBPUSD). "
    "Use Markdown formatting."
)

CHART_PROMPT = (
    "Analyze this chart. Focus strictly on KEY PRICE LEVELS (Support/Resistance) and the "
    "directional BIAS (Bullish/Bearish/Neutral). Be concise. Use Markdown bullet points. "
    "Do not provide excessive reasoning or long paragraphs, just the actionable data."
)

COACH_PROMPT = """You are an expert Forex Trading Coach.
Here is the user's recent trade history (last {count} trades): {context}.

User Question: {message}

Answer strictly based on trading principles and the data provided.
Format your response using Markdown. Use bolding for key terms, bullet points for lists, and clear headers. Avoid long paragraphs. Keep it professional and concise.
"""

PSYCHOLOGY_PROMPT = """Analyze the psychology of this trader based on their journal entry: "{entry}"
and their recent trade results: {context}.
Look for signs of FOMO, revenge trading, hesitation, or overconfidence.
Format response in Markdown with bullet points for observations and actionable advice.
"""


def trades_context(trades: List[Trade], limit: int) -> str:
    """JSON of the first `limit` trades, without chart images."""
    records = []
    for trade in trades[:limit]:
        data = trade.to_dict()
        data.pop("image", None)
        records.append(data)
    return json.dumps(records)


class GeminiCoach:
    """
    Sends prompts to Gemini and returns the text answer.

    Every public method returns a string, never raises for API errors.
    """

    def __init__(self, config: Config):
        self.config = config
        self.api_key = config.gemini_api_key
        self.model = config.gemini_model
        self.timeout = config.request_timeout

    @property
    def endpoint(self) -> str:
        base = self.config.gemini_base_url.rstrip("/")
        return f"{base}/models/{self.model}:generateContent"

    def _generate(self, parts: List[dict], use_search: bool = False) -> dict:
        """POST a generateContent request and return the decoded response."""
        payload = {"contents": [{"parts": parts}]}
        if use_search:
            payload["tools"] = [{"google_search": {}}]

        response = requests.post(
            self.endpoint,
            headers={"x-goog-api-key": self.api_key},
            json=payload,
            timeout=self.timeout,
        )
        response.raise_for_status()
        return response.json()

    @staticmethod
    def _extract_text(data: dict) -> Optional[str]:
        """Concatenate text parts of the first candidate."""
        candidates = data.get("candidates") or []
        if not candidates:
            return None

        parts = candidates[0].get("content", {}).get("parts", [])
        text = "".join(p.get("text", "") for p in parts)
        return text or None

    @staticmethod
    def _extract_sources(data: dict) -> List[str]:
        """Web URIs from the first candidate's grounding metadata."""
        candidates = data.get("candidates") or []
        if not candidates:
            return []

        chunks = candidates[0].get("groundingMetadata", {}).get("groundingChunks", [])
        return [c["web"]["uri"] for c in chunks if c.get("web", {}).get("uri")]

    def _ask(self, parts: List[dict], empty: str, failure: str, use_search: bool = False) -> str:
        if not self.api_key:
            return MISSING_KEY_MESSAGE

        try:
            data = self._generate(parts, use_search=use_search)
        except (requests.RequestException, ValueError) as e:
            logger.error(f"Gemini request failed: {e}")
            return failure

        text = self._extract_text(data)
        if not text:
            return empty

        if use_search:
            sources = self._extract_sources(data)
            if sources:
                text += "\n\n**Sources:**\n" + "\n".join(f"- {s}" for s in sources)

        return text

    def suggest_strategy_tag(self, notes: str) -> str:
        """Suggest a 1-2 word strategy tag from trade notes."""
        tag = self._ask(
            [{"text": TAG_PROMPT.format(notes=notes)}],
            empty="Unknown",
            failure="Error",
        )
        return tag.strip()

    def get_market_briefing(self) -> str:
        """Top 3 high-impact Forex news events today, with sources."""
        return self._ask(
            [{"text": BRIEFING_PROMPT}],
            empty="Unable to fetch news.",
            failure="Error retrieving market news.",
            use_search=True,
        )

    def analyze_trade_image(self, image_base64: str, mime_type: str = "image/png") -> str:
        """Key levels and bias from a chart screenshot (base64 or data URL)."""
        data = image_base64.split(",", 1)[1] if "," in image_base64 else image_base64

        return self._ask(
            [
                {"text": CHART_PROMPT},
                {"inline_data": {"mime_type": mime_type, "data": data}},
            ],
            empty="No analysis generated.",
            failure="Error analyzing chart image.",
        )

    def chat_with_coach(self, message: str, trades: List[Trade]) -> str:
        """Answer a question using recent trades as context."""
        count = self.config.coach_context_trades
        prompt = COACH_PROMPT.format(
            count=count,
            context=trades_context(trades, count),
            message=message,
        )

        return self._ask(
            [{"text": prompt}],
            empty="I couldn't generate a response.",
            failure="I'm having trouble connecting to the coaching server.",
        )

    def analyze_psychology(self, entry: str, trades: List[Trade]) -> str:
        """Look for FOMO, revenge trading, hesitation or overconfidence."""
        prompt = PSYCHOLOGY_PROMPT.format(
            entry=entry,
            context=trades_context(trades, self.config.psychology_context_trades),
        )

        return self._ask(
            [{"text": prompt}],
            empty="Analysis failed.",
            failure="Error analyzing psychology.",
        )

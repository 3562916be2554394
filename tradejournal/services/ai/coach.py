"""Claude trade coach: short, actionable feedback on a single journal trade.

Flattens one P/L-annotated trade into a text prompt and returns the model's
reply as opaque text. Never raises for API trouble: missing key or request
errors come back as a localized message for the user.
"""

import logging
from enum import Enum

import anthropic

from tradejournal.config import settings
from tradejournal.services.analytics.models import TradeWithPL

logger = logging.getLogger(__name__)


class Language(str, Enum):
    EN = "en"
    FA = "fa"


UNAVAILABLE_MESSAGE = {
    Language.EN: "AI analysis is unavailable. Please configure your API key.",
    Language.FA: "تحلیل هوش مصنوعی در دسترس نیست. لطفاً کلید API خود را پیکربندی کنید.",
}

ERROR_MESSAGE = {
    Language.EN: "There was an error analyzing the trade. Please try again later.",
    Language.FA: "خطایی در تحلیل معامله رخ داد. لطفاً بعداً دوباره امتحان کنید.",
}

_LANGUAGE_INSTRUCTION = {
    Language.EN: "Respond in English.",
    Language.FA: "Respond in Persian (Farsi).",
}


def planned_risk_reward(trade: TradeWithPL) -> str:
    """Planned R:R as '1:x.xx', or 'N/A' when stop/target are unset or risk is zero."""
    if trade.stop_loss > 0 and trade.take_profit > 0:
        risk = abs(trade.entry_price - trade.stop_loss)
        reward = abs(trade.take_profit - trade.entry_price)
        if risk > 0:
            return f"1:{reward / risk:.2f}"
    return "N/A"


def build_prompt(trade: TradeWithPL, language: Language = Language.EN) -> str:
    """Build the coaching prompt for one trade."""
    outcome = "profit" if trade.pl >= 0 else "loss"
    lines = [
        "You are a professional trading coach providing concise, actionable feedback.",
        "Analyze the following trade and provide constructive insights. Focus on potential "
        "psychological biases, risk management (like R:R ratio), and strategy consistency.",
        "Do not give financial advice. Keep the response under 150 words.",
        _LANGUAGE_INSTRUCTION[Language(language)],
        "",
        "Trade Details:",
        f"- Symbol: {trade.symbol}",
        f"- Type: {trade.trade_type.value}",
        f"- Session: {trade.session.value}",
        f"- Strategy: {trade.strategy or 'Not specified'}",
        f"- Planned R:R Ratio: {planned_risk_reward(trade)}",
        f"- Outcome: A {outcome} of ${abs(trade.pl):.2f}",
        f"- Trader's Emotions: \"{trade.emotions or 'Not specified'}\"",
        f"- Pre-Trade Analysis: \"{trade.pre_trade_analysis or 'Not provided.'}\"",
        f"- Post-Trade Analysis: \"{trade.post_trade_analysis or 'Not provided.'}\"",
        f"- Trader's Notes: \"{trade.notes or 'No notes provided.'}\"",
        "",
        "Provide your analysis:",
    ]
    return "\n".join(lines)


class TradeCoach:
    """Generates coaching feedback for journal trades using Claude."""

    def __init__(self, api_key: str | None = None, model: str | None = None) -> None:
        self._api_key = api_key
        self._model = model or settings.ai_model
        self._client: anthropic.AsyncAnthropic | None = None

    @property
    def api_key(self) -> str:
        return self._api_key if self._api_key is not None else settings.anthropic_api_key

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    def _get_client(self) -> anthropic.AsyncAnthropic:
        if self._client is None:
            if not self.api_key:
                raise ValueError("ANTHROPIC_API_KEY not configured")
            self._client = anthropic.AsyncAnthropic(api_key=self.api_key)
        return self._client

    async def analyze(self, trade: TradeWithPL, language: Language = Language.EN) -> str:
        """Coaching text for one trade, in the requested language."""
        language = Language(language)
        if not self.enabled and self._client is None:
            logger.warning("ANTHROPIC_API_KEY not set, AI coaching disabled")
            return UNAVAILABLE_MESSAGE[language]

        client = self._get_client()
        try:
            response = await client.messages.create(
                model=self._model,
                max_tokens=settings.ai_max_tokens,
                messages=[{"role": "user", "content": build_prompt(trade, language)}],
            )
        except anthropic.APIError as e:
            logger.error("AI analysis failed for trade %s: %s", trade.id, e)
            return ERROR_MESSAGE[language]

        if not response.content:
            logger.error("AI analysis for trade %s returned no content", trade.id)
            return ERROR_MESSAGE[language]

        logger.info(
            "AI analysis for trade %s (%s): %d input / %d output tokens",
            trade.id,
            language.value,
            response.usage.input_tokens,
            response.usage.output_tokens,
        )
        return response.content[0].text.strip()

"""Tests for the AI trade coach.

Covers:
- Planned R:R calculation
- Prompt building (outcome wording, defaults, language instruction)
- Fallbacks: no API key, API errors, empty response
"""

from unittest.mock import AsyncMock, MagicMock, patch

import anthropic
import httpx
import pytest

from tradejournal.services.ai.coach import (
    ERROR_MESSAGE,
    UNAVAILABLE_MESSAGE,
    Language,
    TradeCoach,
    build_prompt,
    planned_risk_reward,
)


def _mock_response(text: str) -> MagicMock:
    response = MagicMock()
    response.content = [MagicMock(text=text)]
    response.usage.input_tokens = 320
    response.usage.output_tokens = 110
    return response


class TestRiskReward:
    def test_ratio(self, make_trade, with_pl):
        trade = with_pl(make_trade(entry_price=100, stop_loss=95, take_profit=110))
        assert planned_risk_reward(trade) == "1:2.00"

    def test_short_ratio(self, make_trade, with_pl):
        trade = with_pl(make_trade(trade_type="Short", entry_price=100, stop_loss=104,
                                   take_profit=94))
        assert planned_risk_reward(trade) == "1:1.50"

    def test_unset_stop_is_not_applicable(self, make_trade, with_pl):
        trade = with_pl(make_trade(stop_loss=0, take_profit=110))
        assert planned_risk_reward(trade) == "N/A"

    def test_zero_risk_is_not_applicable(self, make_trade, with_pl):
        trade = with_pl(make_trade(entry_price=100, stop_loss=100, take_profit=110))
        assert planned_risk_reward(trade) == "N/A"


class TestPromptBuilding:
    def test_prompt_contains_trade_details(self, make_trade, with_pl):
        trade = with_pl(make_trade(
            symbol="XAUUSD", trade_type="Short", session="Tokyo", entry_price=2050,
            exit_price=2053, stop_loss=2060, take_profit=2030, size=1,
            strategy="Range fade", emotions="impatient", notes="Entered early",
        ))
        prompt = build_prompt(trade, Language.EN)

        assert "- Symbol: XAUUSD" in prompt
        assert "- Type: Short" in prompt
        assert "- Session: Tokyo" in prompt
        assert "- Strategy: Range fade" in prompt
        assert "- Planned R:R Ratio: 1:2.00" in prompt
        assert "A loss of $3.00" in prompt
        assert '"impatient"' in prompt
        assert '"Entered early"' in prompt
        assert "Respond in English." in prompt

    def test_prompt_defaults_for_missing_text(self, make_trade, with_pl):
        prompt = build_prompt(with_pl(make_trade()), Language.EN)
        assert "- Strategy: Not specified" in prompt
        assert "Trader's Emotions: \"Not specified\"" in prompt
        assert "Pre-Trade Analysis: \"Not provided.\"" in prompt
        assert "Trader's Notes: \"No notes provided.\"" in prompt

    def test_breakeven_is_reported_as_profit(self, make_trade, with_pl):
        prompt = build_prompt(with_pl(make_trade(entry_price=100, exit_price=100)))
        assert "A profit of $0.00" in prompt

    def test_persian_instruction(self, make_trade, with_pl):
        prompt = build_prompt(with_pl(make_trade()), Language.FA)
        assert "Respond in Persian (Farsi)." in prompt


class TestAnalyze:
    @pytest.mark.asyncio
    async def test_no_api_key_returns_unavailable(self, make_trade, with_pl):
        coach = TradeCoach(api_key="")
        trade = with_pl(make_trade())
        assert await coach.analyze(trade, Language.EN) == UNAVAILABLE_MESSAGE[Language.EN]
        assert await coach.analyze(trade, Language.FA) == UNAVAILABLE_MESSAGE[Language.FA]

    @pytest.mark.asyncio
    async def test_returns_model_text(self, make_trade, with_pl):
        coach = TradeCoach(api_key="test-key", model="claude-test")
        mock_client = AsyncMock()
        mock_client.messages.create = AsyncMock(return_value=_mock_response("  Good discipline.  "))
        coach._client = mock_client

        trade = with_pl(make_trade(symbol="NAS100"))
        result = await coach.analyze(trade, "fa")

        assert result == "Good discipline."
        kwargs = mock_client.messages.create.call_args.kwargs
        assert kwargs["model"] == "claude-test"
        content = kwargs["messages"][0]["content"]
        assert "NAS100" in content
        assert "Respond in Persian (Farsi)." in content

    @pytest.mark.asyncio
    async def test_api_error_returns_localized_error(self, make_trade, with_pl):
        coach = TradeCoach(api_key="test-key")
        mock_client = AsyncMock()
        mock_client.messages.create = AsyncMock(
            side_effect=anthropic.APIConnectionError(
                request=httpx.Request("POST", "https://api.anthropic.com/v1/messages")
            )
        )
        coach._client = mock_client

        result = await coach.analyze(with_pl(make_trade()), Language.FA)
        assert result == ERROR_MESSAGE[Language.FA]

    @pytest.mark.asyncio
    async def test_empty_response_returns_error(self, make_trade, with_pl):
        coach = TradeCoach(api_key="test-key")
        response = _mock_response("")
        response.content = []
        mock_client = AsyncMock()
        mock_client.messages.create = AsyncMock(return_value=response)
        coach._client = mock_client

        result = await coach.analyze(with_pl(make_trade()))
        assert result == ERROR_MESSAGE[Language.EN]

    def test_get_client_without_key_raises(self):
        with patch("tradejournal.services.ai.coach.settings") as mock_settings:
            mock_settings.anthropic_api_key = ""
            mock_settings.ai_model = "claude-test"
            coach = TradeCoach()
            assert coach.enabled is False
            with pytest.raises(ValueError, match="ANTHROPIC_API_KEY not configured"):
                coach._get_client()

"""Display helpers for money, dates and ratios. English and Persian."""

from datetime import date

from tradejournal.services.ai.coach import Language

_PERSIAN_DIGITS = str.maketrans("0123456789,.", "۰۱۲۳۴۵۶۷۸۹٬٫")

NOT_APPLICABLE = {
    Language.EN: "N/A",
    Language.FA: "ندارد",
}


def _localize(text: str, language: Language) -> str:
    return text.translate(_PERSIAN_DIGITS) if Language(language) == Language.FA else text


def format_currency(value: float, language: Language = Language.EN, decimals: int = 2) -> str:
    """USD amount, e.g. -$1,234.50. No minus sign for values that round to zero."""
    magnitude = f"{abs(value):,.{decimals}f}"
    sign = "-" if value < 0 and round(abs(value), decimals) != 0 else ""
    return _localize(f"{sign}${magnitude}", language)


def format_date(value: date, language: Language = Language.EN) -> str:
    """'Jan 5, 2025' in English, ISO date with Persian digits in Persian."""
    if Language(language) == Language.FA:
        return _localize(value.isoformat(), language)
    return f"{value.strftime('%b')} {value.day}, {value.year}"


def format_percent(value: float, language: Language = Language.EN, decimals: int = 1) -> str:
    return _localize(f"{value:.{decimals}f}%", language)


def format_profit_factor(
    value: float | None, language: Language = Language.EN, decimals: int = 2
) -> str:
    if value is None:
        return NOT_APPLICABLE[Language(language)]
    return _localize(f"{value:.{decimals}f}", language)

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime


@dataclass(frozen=True)
class Locale:
	code: str
	decimal_sep: str
	group_sep: str
	date_format: str
	datetime_format: str


LOCALES = {
	"sr-RS": Locale("sr-RS", ",", ".", "%d.%m.%Y.", "%d.%m.%Y. %H:%M"),
	"en-US": Locale("en-US", ".", ",", "%m/%d/%Y", "%m/%d/%Y %I:%M %p"),
}

# Document language -> display locale
LANGUAGE_LOCALES = {
	"sr": "sr-RS",
	"en": "en-US",
}


def get_locale(code: str) -> Locale:
	try:
		return LOCALES[code]
	except KeyError:
		raise ValueError(f"Unsupported locale: {code}") from None


def locale_for_language(language: str) -> str:
	try:
		return LANGUAGE_LOCALES[language]
	except KeyError:
		raise ValueError(f"Unsupported language: {language}") from None


def format_date(value: date | datetime | str | None, locale: str) -> str:
	"""Render a date (or datetime) in the locale's format; strings pass through."""
	loc = get_locale(locale)
	if isinstance(value, datetime):
		return value.strftime(loc.datetime_format)
	if isinstance(value, date):
		return value.strftime(loc.date_format)
	return str(value) if value is not None else ""

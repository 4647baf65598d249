from __future__ import annotations

from typing import Dict, Optional


class FakturaError(Exception):
	"""Base class for errors raised by the document pipeline."""


class ValidationError(FakturaError, ValueError):
	"""Raw invoice input failed validation; `errors` maps field path -> message."""

	def __init__(self, errors: Dict[str, str]):
		self.errors = dict(errors)
		fields = ", ".join(sorted(self.errors))
		super().__init__(f"Invalid invoice data: {fields}")


class FontLoadError(FakturaError):
	"""Font bytes could not be fetched or decoded. Fatal for a render."""


class QRGenerationError(FakturaError):
	"""QR image could not be produced. Recoverable: a placeholder is drawn."""


class RenderError(FakturaError):
	"""Wraps any fatal failure of the render pipeline."""

	def __init__(self, message: str, cause: Optional[BaseException] = None):
		super().__init__(message)
		self.cause = cause

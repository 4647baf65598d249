from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional, Union

from faktura.core.paths import bundled_font_path, default_db_path, resource_path, settings_path

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

_LANGUAGES = ("sr", "en")
_QR_LEVELS = ("L", "M", "Q", "H")


@dataclass
class Settings:
	# Defaults parse_invoice() applies when the form leaves a field empty.
	# Language: "sr" (RSD invoice, faktura-*.pdf) or "en" (invoice-*.pdf)
	language: str = "sr"
	currency: str = "RSD"
	# Payment code (SF) that ends up in the QR payload
	payment_code: str = "221"
	# Logical family the document font is registered under
	font_family: str = "FakturaSans"
	# TrueType file for body text; None uses the Vera font shipped with reportlab
	font_path: Optional[str] = None
	# Optional bold face; when unset the regular face is used for headings too
	bold_font_path: Optional[str] = None
	# QR image rendering
	qr_pixel_size: int = 300
	qr_error_correction: str = "M"
	# Header band / table header color
	brand_color: str = "#1B1464"
	# Where DirectorySink writes generated documents; None -> Documents/Fakture
	output_dir: Optional[str] = None
	# SQLite file init_db() opens for company/client profiles; None -> next to settings.json
	db_path: Optional[str] = None

	@classmethod
	def from_dict(cls, data: Dict[str, Any]) -> "Settings":
		"""Build Settings from parsed JSON. Unknown keys are dropped, bad values reset to defaults."""
		known = {f.name for f in fields(cls)}
		settings = cls(**{k: v for k, v in data.items() if k in known})
		default = cls()
		if settings.language not in _LANGUAGES:
			logger.warning("Unknown language %r in settings; using %r", settings.language, default.language)
			settings.language = default.language
		if str(settings.qr_error_correction).upper() not in _QR_LEVELS:
			logger.warning("Unknown QR error correction %r in settings", settings.qr_error_correction)
			settings.qr_error_correction = default.qr_error_correction
		try:
			settings.qr_pixel_size = max(64, int(settings.qr_pixel_size))
		except (TypeError, ValueError):
			settings.qr_pixel_size = default.qr_pixel_size
		return settings

	def to_dict(self) -> Dict[str, Any]:
		return asdict(self)

	def resolved_font_path(self) -> Path:
		if self.font_path:
			return resource_path(self.font_path)
		return bundled_font_path("Vera.ttf")

	def resolved_bold_font_path(self) -> Optional[Path]:
		return resource_path(self.bold_font_path) if self.bold_font_path else None

	def resolved_output_dir(self) -> Path:
		if self.output_dir:
			return Path(self.output_dir)
		return Path.home() / "Documents" / "Fakture"

	def resolved_db_path(self) -> Path:
		return Path(self.db_path) if self.db_path else default_db_path()


def load_settings(path: Optional[PathLike] = None) -> Settings:
	"""
	Read settings.json. A missing file is created with defaults; a corrupt one
	is logged and left untouched while defaults are used for this run.
	"""
	p = Path(path) if path is not None else settings_path()
	if not p.exists():
		logger.info("No settings at %s; writing defaults", p)
		save_settings(Settings(), p)
		return Settings()
	try:
		raw = json.loads(p.read_text(encoding="utf-8"))
	except (json.JSONDecodeError, OSError) as exc:
		logger.warning("Settings file %s is unreadable (%s); using defaults", p, exc)
		return Settings()
	if not isinstance(raw, dict):
		logger.warning("Settings file %s does not hold an object; using defaults", p)
		return Settings()
	return Settings.from_dict(raw)


def save_settings(settings: Settings, path: Optional[PathLike] = None) -> Path:
	"""Write settings as UTF-8 JSON, replacing the file atomically."""
	p = Path(path) if path is not None else settings_path()
	p.parent.mkdir(parents=True, exist_ok=True)
	tmp = p.with_name(p.name + ".tmp")
	tmp.write_text(json.dumps(settings.to_dict(), indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
	tmp.replace(p)
	return p

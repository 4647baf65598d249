from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple, Type, Union

from sqlmodel import select

from faktura.core.invoice import Party
from faktura.data.db import get_session, session_scope
from faktura.data.models import ClientProfile, CompanyProfile

logger = logging.getLogger(__name__)

Profile = Union[CompanyProfile, ClientProfile]

COMPANY_FIELDS = ("name", "legal_name", "address", "tax_id", "registration_id", "email", "bank_account")
CLIENT_FIELDS = ("name", "legal_name", "address", "tax_id", "registration_id")
EXPORT_VERSION = 1


def _clean(fields: Mapping[str, Any], allowed) -> Dict[str, str]:
	return {k: str(fields[k] or "").strip() for k in allowed if k in fields}


def _save(model: Type[Profile], allowed, fields: Mapping[str, Any]) -> Profile:
	values = _clean(fields, allowed)
	if not values.get("name"):
		raise ValueError("Profile name is required")
	with session_scope() as s:
		profile = model(**values)
		s.add(profile)
		s.flush()
		s.refresh(profile)
	logger.info("Saved %s %s", model.__name__, profile.id)
	return profile


def _list(model: Type[Profile]) -> List[Profile]:
	with get_session() as s:
		stmt = select(model).order_by(model.created_at.asc(), model.name.asc())
		return list(s.exec(stmt).all())


def _update(model: Type[Profile], allowed, profile_id: str, updates: Mapping[str, Any]) -> Optional[Profile]:
	values = _clean(updates, allowed)
	if "name" in values and not values["name"]:
		raise ValueError("Profile name is required")
	with session_scope() as s:
		profile = s.get(model, profile_id)
		if profile is None:
			return None
		for key, value in values.items():
			setattr(profile, key, value)
		s.add(profile)
		s.flush()
		s.refresh(profile)
		return profile


def _delete(model: Type[Profile], profile_id: str) -> int:
	"""Returns 1 if deleted, 0 if not found."""
	with session_scope() as s:
		profile = s.get(model, profile_id)
		if profile is None:
			return 0
		s.delete(profile)
		return 1


# ===== Company (issuer) profiles =====
def save_company(fields: Mapping[str, Any]) -> CompanyProfile:
	return _save(CompanyProfile, COMPANY_FIELDS, fields)  # type: ignore[return-value]


def list_companies() -> List[CompanyProfile]:
	return _list(CompanyProfile)  # type: ignore[return-value]


def update_company(profile_id: str, updates: Mapping[str, Any]) -> Optional[CompanyProfile]:
	return _update(CompanyProfile, COMPANY_FIELDS, profile_id, updates)  # type: ignore[return-value]


def delete_company(profile_id: str) -> int:
	return _delete(CompanyProfile, profile_id)


# ===== Client (recipient) profiles =====
def save_client(fields: Mapping[str, Any]) -> ClientProfile:
	return _save(ClientProfile, CLIENT_FIELDS, fields)  # type: ignore[return-value]


def list_clients() -> List[ClientProfile]:
	return _list(ClientProfile)  # type: ignore[return-value]


def update_client(profile_id: str, updates: Mapping[str, Any]) -> Optional[ClientProfile]:
	return _update(ClientProfile, CLIENT_FIELDS, profile_id, updates)  # type: ignore[return-value]


def delete_client(profile_id: str) -> int:
	return _delete(ClientProfile, profile_id)


def to_party(profile: Profile) -> Party:
	"""Party for an invoice; the legal name wins over the profile's display name."""
	return Party(
		name=profile.legal_name or profile.name,
		address=profile.address,
		tax_id=profile.tax_id,
		registration_id=profile.registration_id,
		email=getattr(profile, "email", ""),
		bank_account=getattr(profile, "bank_account", ""),
	)


# ===== JSON export / import =====
def _dump(profile: Profile, allowed) -> Dict[str, str]:
	row = {k: getattr(profile, k) for k in allowed}
	row["id"] = profile.id
	row["created_at"] = profile.created_at.isoformat()
	return row


def export_profiles(path: str | Path) -> Tuple[int, int]:
	"""Write every profile to a JSON file. Returns (companies, clients) written."""
	companies = list_companies()
	clients = list_clients()
	payload = {
		"version": EXPORT_VERSION,
		"exported_at": datetime.now().isoformat(timespec="seconds"),
		"companies": [_dump(p, COMPANY_FIELDS) for p in companies],
		"clients": [_dump(p, CLIENT_FIELDS) for p in clients],
	}
	p = Path(path)
	p.parent.mkdir(parents=True, exist_ok=True)
	p.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
	logger.info("Exported %d company and %d client profiles to %s", len(companies), len(clients), p)
	return len(companies), len(clients)


def import_profiles(path: str | Path) -> Tuple[int, int]:
	"""Add the profiles from an export file. Returns (companies, clients) imported.

	Imported rows get fresh ids, so importing the same file twice duplicates
	them. Rows without a name are skipped. A file that is not an export raises
	ValueError.
	"""
	p = Path(path)
	try:
		payload = json.loads(p.read_text(encoding="utf-8"))
	except json.JSONDecodeError as exc:
		raise ValueError(f"Not a profile export file: {p}") from exc
	if not isinstance(payload, dict) or not isinstance(payload.get("companies", []), list) or not isinstance(payload.get("clients", []), list):
		raise ValueError(f"Not a profile export file: {p}")

	counts = []
	with session_scope() as s:
		for key, model, allowed in (("companies", CompanyProfile, COMPANY_FIELDS), ("clients", ClientProfile, CLIENT_FIELDS)):
			n = 0
			for row in payload.get(key, []):
				if not isinstance(row, dict):
					continue
				values = _clean(row, allowed)
				if not values.get("name"):
					continue
				s.add(model(**values))
				n += 1
			counts.append(n)
	logger.info("Imported %d company and %d client profiles from %s", counts[0], counts[1], p)
	return counts[0], counts[1]

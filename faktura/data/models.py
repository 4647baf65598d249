from __future__ import annotations

import uuid
from datetime import datetime

from sqlmodel import Field, SQLModel


def _new_id() -> str:
	return str(uuid.uuid4())


class CompanyProfile(SQLModel, table=True):
	"""A saved issuer: `name` is the profile's display name, `legal_name` goes on the invoice."""

	id: str = Field(default_factory=_new_id, primary_key=True)
	name: str = Field(index=True)
	legal_name: str = ""
	address: str = ""
	tax_id: str = ""
	registration_id: str = ""
	email: str = ""
	bank_account: str = ""
	created_at: datetime = Field(default_factory=datetime.now)


class ClientProfile(SQLModel, table=True):
	id: str = Field(default_factory=_new_id, primary_key=True)
	name: str = Field(index=True)
	legal_name: str = ""
	address: str = ""
	tax_id: str = ""
	registration_id: str = ""
	created_at: datetime = Field(default_factory=datetime.now)

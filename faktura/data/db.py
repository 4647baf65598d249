from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Generator, Optional

from sqlmodel import SQLModel, Session, create_engine

from faktura.core.settings import load_settings

logger = logging.getLogger(__name__)

_ENGINE = None
_DB_PATH: Optional[Path] = None


def init_db(path: Path | str | None = None, echo: bool = False):
	"""Point the module at a SQLite file and create tables.

	Without a path the file comes from Settings.db_path (settings.json), which
	defaults to faktura.db in the user data dir.

	Calling it again with another path disposes the previous engine.
	"""
	global _ENGINE, _DB_PATH
	db_path = Path(path) if path else load_settings().resolved_db_path()
	if _ENGINE is not None:
		_ENGINE.dispose()
	db_path.parent.mkdir(parents=True, exist_ok=True)
	# Use posix path for SQLAlchemy URL compatibility on Windows
	url = f"sqlite:///{db_path.as_posix()}"
	_ENGINE = create_engine(url, echo=echo, connect_args={"check_same_thread": False})
	_DB_PATH = db_path
	create_db_and_tables()
	logger.info("Profile database ready: %s", db_path)
	return _ENGINE


def get_engine():
	"""Return the engine, opening the default database on first use."""
	if _ENGINE is None:
		init_db()
	return _ENGINE


def create_db_and_tables() -> None:
	# Ensure models are imported so metadata has all tables
	import faktura.data.models  # noqa: F401

	SQLModel.metadata.create_all(get_engine())


def get_session() -> Session:
	"""New Session; expire_on_commit=False keeps returned profiles readable after commit."""
	return Session(get_engine(), expire_on_commit=False)


@contextmanager
def session_scope() -> Generator[Session, None, None]:
	"""Commit on success, roll back on error.

	Usage:
		with session_scope() as s:
			... use s ...
	"""
	session = get_session()
	try:
		yield session
		session.commit()
	except Exception:
		session.rollback()
		raise
	finally:
		session.close()

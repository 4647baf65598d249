from __future__ import annotations

import sys
from pathlib import Path

# Repository root when running from a checkout
_CHECKOUT_ROOT = Path(__file__).resolve().parents[2]


def is_frozen() -> bool:
    """True inside a PyInstaller bundle."""
    return bool(getattr(sys, "frozen", False))


def base_path() -> Path:
    """Root that relative resource paths (fonts, assets) are resolved against.

    A onefile bundle unpacks its data into sys._MEIPASS; otherwise the
    checkout root is used.
    """
    bundle_dir = getattr(sys, "_MEIPASS", None) if is_frozen() else None
    return Path(bundle_dir) if bundle_dir else _CHECKOUT_ROOT


def resource_path(rel: str | Path) -> Path:
    """'assets/fonts/DejaVuSans.ttf' -> absolute path; absolute input is returned as is."""
    p = Path(rel)
    return p if p.is_absolute() else base_path() / p


def user_writable_dir() -> Path:
    """Home of settings.json and the profiles DB: next to the executable when bundled."""
    if is_frozen():
        return Path(sys.executable).resolve().parent
    return _CHECKOUT_ROOT


def settings_path() -> Path:
    return user_writable_dir() / "settings.json"


def default_db_path() -> Path:
    """SQLite file holding reusable company/client profiles."""
    return user_writable_dir() / "faktura.db"


def bundled_font_path(name: str = "Vera.ttf") -> Path:
    """TrueType fonts shipped inside the reportlab distribution."""
    import reportlab

    return Path(reportlab.__file__).resolve().parent / "fonts" / name

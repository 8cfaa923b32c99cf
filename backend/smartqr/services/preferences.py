# smartqr/services/preferences.py
"""
Theme preference storage.

The stored mode is loaded and saved explicitly through :class:`ThemeStore`;
callers resolve it once into :class:`AppearanceSettings` and pass that along.
"""
from dataclasses import dataclass
from enum import Enum

from sqlalchemy.orm import Session

from ..models.preference import Preference

THEME_KEY = "theme_mode"


class ThemeMode(str, Enum):
    LIGHT = "light"
    DARK = "dark"
    SYSTEM = "system"


@dataclass(frozen=True)
class AppearanceSettings:
    mode: ThemeMode
    effective: ThemeMode

    @property
    def is_dark(self) -> bool:
        return self.effective == ThemeMode.DARK


def resolve_effective_mode(mode: ThemeMode, prefers_dark: bool = False) -> ThemeMode:
    if mode == ThemeMode.SYSTEM:
        return ThemeMode.DARK if prefers_dark else ThemeMode.LIGHT
    return mode


class ThemeStore:
    def __init__(self, db: Session):
        self.db = db

    def load(self) -> ThemeMode:
        row = self.db.get(Preference, THEME_KEY)
        try:
            return ThemeMode(row.value) if row else ThemeMode.SYSTEM
        except ValueError:
            return ThemeMode.SYSTEM

    def save(self, mode: ThemeMode) -> ThemeMode:
        mode = ThemeMode(mode)
        row = self.db.get(Preference, THEME_KEY)
        if row is None:
            row = Preference(key=THEME_KEY)
            self.db.add(row)
        row.value = mode.value
        self.db.commit()
        return mode

    def appearance(self, prefers_dark: bool = False) -> AppearanceSettings:
        mode = self.load()
        return AppearanceSettings(mode=mode, effective=resolve_effective_mode(mode, prefers_dark))

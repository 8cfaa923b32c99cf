from smartqr.core.classifier import DataType
from smartqr.models.preference import Preference
from smartqr.services.history import (
    clear_history,
    delete_cloud_file,
    list_cloud_files,
    list_history,
    record_generation,
    save_cloud_file,
    storage_used_mb,
)
from smartqr.services.preferences import ThemeMode, ThemeStore, resolve_effective_mode


def test_history_is_newest_first_and_capped(db):
    for i in range(25):
        record_generation(db, f"item-{i}", DataType.TEXT)

    items = list_history(db)

    assert len(items) == 20
    assert items[0].content == "item-24"
    assert items[-1].content == "item-5"


def test_history_ignores_empty_payload(db):
    assert record_generation(db, "", DataType.TEXT) is None
    assert list_history(db) == []


def test_clear_history(db):
    record_generation(db, "mailto:user@example.com", DataType.EMAIL)
    assert clear_history(db) == 1
    assert list_history(db) == []


def test_cloud_files(db):
    a = save_cloud_file(db, "a.pdf", 1024 * 1024, "https://res.cloudinary.com/a.pdf", "a")
    save_cloud_file(db, "b.zip", 512 * 1024, "https://res.cloudinary.com/b.zip", "b")

    assert [f.name for f in list_cloud_files(db)] == ["b.zip", "a.pdf"]
    assert storage_used_mb(db) == 1.5

    assert delete_cloud_file(db, a.id) is True
    assert delete_cloud_file(db, a.id) is False
    assert [f.name for f in list_cloud_files(db)] == ["b.zip"]


def test_theme_defaults_to_system(db):
    assert ThemeStore(db).load() == ThemeMode.SYSTEM


def test_theme_roundtrip(db):
    store = ThemeStore(db)
    store.save(ThemeMode.DARK)
    assert ThemeStore(db).load() == ThemeMode.DARK
    store.save(ThemeMode.LIGHT)
    assert ThemeStore(db).load() == ThemeMode.LIGHT


def test_unknown_stored_theme_falls_back_to_system(db):
    db.add(Preference(key="theme_mode", value="sepia"))
    db.commit()
    assert ThemeStore(db).load() == ThemeMode.SYSTEM


def test_effective_mode():
    assert resolve_effective_mode(ThemeMode.SYSTEM, prefers_dark=True) == ThemeMode.DARK
    assert resolve_effective_mode(ThemeMode.SYSTEM, prefers_dark=False) == ThemeMode.LIGHT
    assert resolve_effective_mode(ThemeMode.LIGHT, prefers_dark=True) == ThemeMode.LIGHT


def test_appearance(db):
    ThemeStore(db).save(ThemeMode.SYSTEM)
    appearance = ThemeStore(db).appearance(prefers_dark=True)
    assert appearance.mode == ThemeMode.SYSTEM
    assert appearance.is_dark

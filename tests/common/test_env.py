"""Tests for environment configuration interface."""

from pathlib import Path

from common.env import Environment, ImportSettings, env


class TestEnvironment:
    """Tests for Environment class."""

    def test_kobo_db_path_default(self, monkeypatch):
        """Test kobo_db_path returns default value."""
        monkeypatch.delenv("KOBO_DB_PATH", raising=False)
        assert Environment.kobo_db_path() == Path("KoboReader.sqlite")

    def test_kobo_db_path_from_env(self, monkeypatch):
        """Test kobo_db_path reads from environment."""
        monkeypatch.setenv("KOBO_DB_PATH", "/media/KOBOeReader/.kobo/KoboReader.sqlite")
        assert str(Environment.kobo_db_path()) == "/media/KOBOeReader/.kobo/KoboReader.sqlite"

    def test_vault_root_default(self, monkeypatch):
        monkeypatch.delenv("VAULT_ROOT", raising=False)
        assert Environment.vault_root() == Path(".")

    def test_inbox_folder_default(self, monkeypatch):
        monkeypatch.delenv("KOBO_INBOX_FOLDER", raising=False)
        assert Environment.inbox_folder() == "Kobo-Inboxes"

    def test_inbox_folder_strips_slashes(self, monkeypatch):
        monkeypatch.setenv("KOBO_INBOX_FOLDER", "/Reading/Inbox/")
        assert Environment.inbox_folder() == "Reading/Inbox"

    def test_blank_folder_falls_back_to_default(self, monkeypatch):
        """A blank folder setting behaves like an unset one."""
        monkeypatch.setenv("KOBO_INSIGHT_FOLDER", "   ")
        assert Environment.insight_folder() == "Kobo-Insights"

    def test_insight_folder_from_env(self, monkeypatch):
        monkeypatch.setenv("KOBO_INSIGHT_FOLDER", "Zettelkasten/Insights")
        assert Environment.insight_folder() == "Zettelkasten/Insights"

    def test_flags_default_to_false(self, monkeypatch):
        monkeypatch.delenv("KOBO_SORT_BY_CHAPTER_PROGRESS", raising=False)
        monkeypatch.delenv("KOBO_IMPORT_ALL_BOOKS", raising=False)
        assert Environment.sort_by_chapter_progress() is False
        assert Environment.import_all_books() is False

    def test_flags_accept_truthy_values(self, monkeypatch):
        monkeypatch.setenv("KOBO_SORT_BY_CHAPTER_PROGRESS", "yes")
        monkeypatch.setenv("KOBO_IMPORT_ALL_BOOKS", "TRUE")
        assert Environment.sort_by_chapter_progress() is True
        assert Environment.import_all_books() is True

    def test_flags_reject_other_values(self, monkeypatch):
        monkeypatch.setenv("KOBO_IMPORT_ALL_BOOKS", "nope")
        assert Environment.import_all_books() is False


class TestImportSettings:
    """Tests for the settings snapshot."""

    def test_defaults(self):
        settings = ImportSettings()
        assert settings.inbox_folder == "Kobo-Inboxes"
        assert settings.insight_folder == "Kobo-Insights"
        assert settings.sort_by_chapter_progress is False
        assert settings.import_all_books is False

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("KOBO_INBOX_FOLDER", "Inbox")
        monkeypatch.setenv("KOBO_INSIGHT_FOLDER", "Insights")
        monkeypatch.setenv("KOBO_SORT_BY_CHAPTER_PROGRESS", "1")
        monkeypatch.setenv("KOBO_IMPORT_ALL_BOOKS", "0")

        settings = ImportSettings.from_env()

        assert settings == ImportSettings(
            inbox_folder="Inbox",
            insight_folder="Insights",
            sort_by_chapter_progress=True,
            import_all_books=False,
        )


class TestEnvSingleton:
    """Tests for env singleton instance."""

    def test_env_is_environment_instance(self):
        assert isinstance(env, Environment)

    def test_env_singleton_methods_work(self, monkeypatch):
        monkeypatch.setenv("KOBO_INBOX_FOLDER", "Elsewhere")
        assert env.inbox_folder() == "Elsewhere"

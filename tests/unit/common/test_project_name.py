"""Tests for project display-name detection."""

from gitmonitor.services.repository.project_name import (
    detect_project_name,
    find_project_name,
)


class TestDetectProjectName:
    def test_falls_back_to_folder_name(self, tmp_path):
        repo = tmp_path / "billing-api"
        repo.mkdir()

        assert detect_project_name(str(repo)) == "billing-api"

    def test_reads_quoted_value(self, tmp_path):
        (tmp_path / ".env").write_text('VITE_APP_NAME="Dashboard"\n', encoding="utf-8")

        assert detect_project_name(str(tmp_path)) == "Dashboard"

    def test_key_priority_within_file(self, tmp_path):
        (tmp_path / ".env").write_text(
            "NAME=generic\nPROJECT_NAME=Specific\n", encoding="utf-8"
        )

        assert detect_project_name(str(tmp_path)) == "Specific"

    def test_later_env_files_are_consulted(self, tmp_path):
        (tmp_path / ".env").write_text("DATABASE_URL=postgres://db\n", encoding="utf-8")
        (tmp_path / ".env.local").write_text("APP_NAME=Local App\n", encoding="utf-8")

        assert detect_project_name(str(tmp_path)) == "Local App"

    def test_blank_value_is_ignored(self, tmp_path):
        (tmp_path / ".env").write_text("APP_NAME=\nSITE_NAME=Site\n", encoding="utf-8")

        assert detect_project_name(str(tmp_path)) == "Site"


class TestFindProjectName:
    def test_none_values_are_skipped(self):
        assert find_project_name({"APP_NAME": None, "NAME": "fallback"}) == "fallback"

    def test_nothing_found(self):
        assert find_project_name({"PORT": "8080"}) == ""

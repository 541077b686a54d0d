import os
import tempfile
import unittest
from unittest.mock import AsyncMock, patch

from click.testing import CliRunner

from src.main import cli


class TestCli(unittest.TestCase):
    def setUp(self) -> None:
        self._tmpdir = tempfile.TemporaryDirectory()
        self.env = {
            "FAVORITES_DB_URL": f"sqlite:///{os.path.join(self._tmpdir.name, 'favorites.db')}",
            "DIRECTORY_API_URL": "https://example.test",
        }
        self.runner = CliRunner()

    def tearDown(self) -> None:
        self._tmpdir.cleanup()

    def test_favorite_toggles_and_persists(self) -> None:
        result = self.runner.invoke(cli, ["favorite", "tokio"], env=self.env)
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("'tokio' added to favorites.", result.output)

        listed = self.runner.invoke(cli, ["favorites"], env=self.env)
        self.assertIn("tokio", listed.output)

        result = self.runner.invoke(cli, ["favorite", "tokio"], env=self.env)
        self.assertIn("'tokio' removed from favorites.", result.output)

    def test_browse_prints_page(self) -> None:
        raw = [
            {"name": "A", "stars": 10, "lastActivity": "2024-01-01T00:00:00Z"},
            {"name": "B", "stars": 50, "lastActivity": "2024-06-01T00:00:00Z"},
        ]
        with patch(
            "src.infrastructure.api_client.DirectoryApiClient.fetch_projects",
            new_callable=AsyncMock,
            return_value=raw,
        ):
            result = self.runner.invoke(cli, ["browse", "--page-size", "1", "--page", "2"], env=self.env)

        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("  A  [0 issues]", result.output)
        self.assertNotIn("  B  [0 issues]", result.output)
        self.assertIn("Page 2 of 2 (2 projects)", result.output)

    def test_browse_fetch_failure_exits_nonzero(self) -> None:
        from src.domain.exceptions import DataSourceUnavailableException

        with patch(
            "src.infrastructure.api_client.DirectoryApiClient.fetch_projects",
            new_callable=AsyncMock,
            side_effect=DataSourceUnavailableException(),
        ):
            result = self.runner.invoke(cli, ["browse"], env=self.env)

        self.assertEqual(result.exit_code, 1)

    def test_invalid_numeric_setting_exits_with_logged_error(self) -> None:
        for name, value in (("PAGE_SIZE", "six"), ("REQUEST_TIMEOUT", "soon")):
            result = self.runner.invoke(cli, ["favorites"], env={**self.env, name: value})

            self.assertEqual(result.exit_code, 1)
            self.assertNotIsInstance(result.exception, ValueError)
            self.assertIn("Invalid configuration in the environment", result.stdout)

    def test_unknown_log_level_exits_with_logged_error(self) -> None:
        result = self.runner.invoke(cli, ["favorites"], env={**self.env, "LOG_LEVEL": "chatty"})

        self.assertEqual(result.exit_code, 1)
        self.assertIn("Unknown log level", result.stdout)

    def test_bad_favorites_url_exits_with_logged_error(self) -> None:
        result = self.runner.invoke(cli, ["favorites"], env={**self.env, "FAVORITES_DB_URL": "not a database url"})

        self.assertEqual(result.exit_code, 1)
        self.assertIn("Favorite store unavailable", result.stdout)

    def test_submit_blank_url_fails(self) -> None:
        result = self.runner.invoke(cli, ["submit", " "], env=self.env)

        self.assertEqual(result.exit_code, 1)
        self.assertIn("Failed to add repository", result.output)


if __name__ == "__main__":
    unittest.main()

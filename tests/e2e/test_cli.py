# ABOUTME: End-to-end tests for the Bouquineur CLI.
# ABOUTME: Runs commands via Click's CliRunner against a fake Calibre fetcher and a temp catalog.

from collections.abc import Callable
from pathlib import Path

import pytest
from click.testing import CliRunner, Result

from bouquineur.cli import cli

HP_ISBN = "9781526626585"


def _write_config(tmp_path: Path, body: str) -> Path:
    config = tmp_path / "config.toml"
    config.write_text(f'database = "{tmp_path / "library.db"}"\n{body}')
    return config


@pytest.fixture
def calibre_config(
    tmp_path: Path, fake_fetcher: Callable[..., Path], hp_opf: str
) -> Path:
    """A configuration whose only provider is a fake Calibre fetcher."""
    script = fake_fetcher(hp_opf)
    return _write_config(tmp_path, f'[metadata.calibre]\nfetcher = "{script}"\n')


def _invoke(config: Path, *args: str) -> Result:
    runner = CliRunner()
    return runner.invoke(cli, ["--config", str(config), *args])


class TestCliLookup:
    """E2e tests for `bouquineur lookup`."""

    def test_lookup_shows_metadata(self, calibre_config: Path) -> None:
        """Lookup prints the fetched record."""
        result = _invoke(calibre_config, "lookup", "978-1-5266-2658-5")
        assert result.exit_code == 0
        assert "J. K. Rowling" in result.output
        assert "BLOOMSBURY" in result.output
        assert "2020-08-15" in result.output

    def test_lookup_not_found(self, tmp_path: Path, fake_fetcher: Callable[..., Path]) -> None:
        """A fetcher run without <metadata> is reported as not found."""
        script = fake_fetcher("<package xmlns='http://www.idpf.org/2007/opf'/>")
        config = _write_config(tmp_path, f'[metadata.calibre]\nfetcher = "{script}"\n')
        result = _invoke(config, "lookup", HP_ISBN)
        assert result.exit_code == 1
        assert "was not found" in result.output

    def test_lookup_failure_shows_fetcher_stderr(
        self, tmp_path: Path, fake_fetcher: Callable[..., Path]
    ) -> None:
        """A failing fetcher is reported with the tool's own message."""
        script = fake_fetcher(b"", stderr=b"No results found", exit_code=1)
        config = _write_config(tmp_path, f'[metadata.calibre]\nfetcher = "{script}"\n')
        result = _invoke(config, "lookup", HP_ISBN)
        assert result.exit_code == 1
        assert "Error" in result.output
        assert "No results found" in result.output

    def test_lookup_disabled_provider(self, calibre_config: Path) -> None:
        """Asking for a provider that is not enabled fails cleanly."""
        result = _invoke(calibre_config, "lookup", HP_ISBN, "--provider", "open_library")
        assert result.exit_code == 1
        assert "not enabled" in result.output

    def test_lookup_unknown_provider_token(self, calibre_config: Path) -> None:
        result = _invoke(calibre_config, "lookup", HP_ISBN, "--provider", "goodreads")
        assert result.exit_code == 2

    def test_missing_config_file(self, tmp_path: Path) -> None:
        """A missing configuration file is reported, not a traceback."""
        result = _invoke(tmp_path / "nope.toml", "lookup", HP_ISBN)
        assert result.exit_code == 1
        assert "Could not load the configuration file" in result.output


class TestCliAdd:
    """E2e tests for `bouquineur add`."""

    def test_add_then_list_unread(self, calibre_config: Path) -> None:
        """An added book shows up as unread."""
        added = _invoke(calibre_config, "add", HP_ISBN, "--user", "alice")
        assert added.exit_code == 0
        assert "Added book 1." in added.output

        unread = _invoke(calibre_config, "unread", "--user", "alice")
        assert unread.exit_code == 0
        assert "Harry Potter" in unread.output

    def test_add_read_book_is_not_unread(self, calibre_config: Path) -> None:
        _invoke(calibre_config, "add", HP_ISBN, "--user", "alice", "--read")
        result = _invoke(calibre_config, "unread", "--user", "alice")
        assert result.exit_code == 0
        assert "No unread books." in result.output

    def test_add_twice(self, calibre_config: Path) -> None:
        """Adding an ISBN the user already has is refused."""
        _invoke(calibre_config, "add", HP_ISBN, "--user", "alice")
        result = _invoke(calibre_config, "add", HP_ISBN, "--user", "alice")
        assert result.exit_code == 1
        assert "already in the library" in result.output

    def test_user_from_environment(self, calibre_config: Path) -> None:
        runner = CliRunner(env={"BOUQUINEUR_USER": "bob"})
        result = runner.invoke(cli, ["--config", str(calibre_config), "add", HP_ISBN])
        assert result.exit_code == 0

    def test_user_is_required(self, calibre_config: Path) -> None:
        runner = CliRunner(env={"BOUQUINEUR_USER": None})
        result = runner.invoke(cli, ["--config", str(calibre_config), "add", HP_ISBN])
        assert result.exit_code == 2

    def test_series_needs_volume(self, calibre_config: Path) -> None:
        result = _invoke(
            calibre_config, "add", HP_ISBN, "--user", "alice", "--series", "Harry Potter"
        )
        assert result.exit_code == 2


class TestCliLibrary:
    """E2e tests for `bouquineur ls`, `show` and `mark`."""

    def _add(self, config: Path, *extra: str) -> None:
        result = _invoke(config, "add", HP_ISBN, "--user", "alice", *extra)
        assert result.exit_code == 0

    def test_ls_lists_books(self, calibre_config: Path) -> None:
        self._add(calibre_config)
        result = _invoke(calibre_config, "ls", "--user", "alice")
        assert result.exit_code == 0
        assert "1 book(s)" in result.output

    def test_ls_empty(self, calibre_config: Path) -> None:
        result = _invoke(calibre_config, "ls", "--user", "alice")
        assert result.exit_code == 0
        assert "No books in the library." in result.output

    def test_ls_is_per_user(self, calibre_config: Path) -> None:
        self._add(calibre_config)
        result = _invoke(calibre_config, "ls", "--user", "bob")
        assert "No books in the library." in result.output

    def test_ls_by_author(self, calibre_config: Path) -> None:
        self._add(calibre_config)
        found = _invoke(calibre_config, "ls", "--user", "alice", "--author", "J. K. Rowling")
        assert found.exit_code == 0
        assert "1 book(s)" in found.output

        missing = _invoke(calibre_config, "ls", "--user", "alice", "--author", "Umberto Eco")
        assert missing.exit_code == 0
        assert "No books in the library." in missing.output

    def test_ls_by_series(self, calibre_config: Path) -> None:
        self._add(calibre_config, "--series", "Harry Potter", "--volume", "1")
        found = _invoke(calibre_config, "ls", "--user", "alice", "--series", "Harry Potter")
        assert "1 book(s)" in found.output

        missing = _invoke(calibre_config, "ls", "--user", "alice", "--series", "Discworld")
        assert "No books in the library." in missing.output

    def test_ls_filters_are_exclusive(self, calibre_config: Path) -> None:
        result = _invoke(
            calibre_config, "ls", "--user", "alice", "--author", "A", "--series", "B"
        )
        assert result.exit_code == 2

    def test_show_book(self, calibre_config: Path) -> None:
        self._add(calibre_config)
        result = _invoke(calibre_config, "show", "1", "--user", "alice")
        assert result.exit_code == 0
        assert "J. K. Rowling" in result.output
        assert "2020-08-15" in result.output
        assert "unread, owned" in result.output

    def test_show_unknown_book(self, calibre_config: Path) -> None:
        result = _invoke(calibre_config, "show", "42", "--user", "alice")
        assert result.exit_code == 1
        assert "Book 42 not found." in result.output

    def test_show_other_users_book(self, calibre_config: Path) -> None:
        """Books belonging to someone else are not shown."""
        self._add(calibre_config)
        result = _invoke(calibre_config, "show", "1", "--user", "bob")
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_mark_read(self, calibre_config: Path) -> None:
        self._add(calibre_config)
        result = _invoke(calibre_config, "mark", "1", "--user", "alice", "--read")
        assert result.exit_code == 0
        assert "as read." in " ".join(result.output.split())

        unread = _invoke(calibre_config, "unread", "--user", "alice")
        assert "No unread books." in unread.output

    def test_mark_read_and_not_owned(self, calibre_config: Path) -> None:
        self._add(calibre_config)
        result = _invoke(
            calibre_config, "mark", "1", "--user", "alice", "--read", "--not-owned"
        )
        assert result.exit_code == 0
        assert "as read and not owned." in " ".join(result.output.split())

        shown = _invoke(calibre_config, "show", "1", "--user", "alice")
        assert "read, not owned" in shown.output

    def test_mark_unread_again(self, calibre_config: Path) -> None:
        self._add(calibre_config, "--read")
        _invoke(calibre_config, "mark", "1", "--user", "alice", "--unread")
        unread = _invoke(calibre_config, "unread", "--user", "alice")
        assert "No unread books." not in unread.output

    def test_mark_needs_a_flag(self, calibre_config: Path) -> None:
        self._add(calibre_config)
        result = _invoke(calibre_config, "mark", "1", "--user", "alice")
        assert result.exit_code == 2

    def test_mark_unknown_book(self, calibre_config: Path) -> None:
        result = _invoke(calibre_config, "mark", "7", "--user", "alice", "--read")
        assert result.exit_code == 1
        assert "Book 7 not found." in result.output

    def test_mark_other_users_book(self, calibre_config: Path) -> None:
        self._add(calibre_config)
        result = _invoke(calibre_config, "mark", "1", "--user", "bob", "--read")
        assert result.exit_code == 1
        unread = _invoke(calibre_config, "unread", "--user", "alice")
        assert "No unread books." not in unread.output


class TestCliSeries:
    """E2e tests for `bouquineur series` and `bouquineur ongoing`."""

    def test_missing_volumes(self, calibre_config: Path) -> None:
        """A book placed in a series with a known size reports the gaps."""
        added = _invoke(
            calibre_config,
            "add",
            HP_ISBN,
            "--user",
            "alice",
            "--series",
            "Harry Potter",
            "--volume",
            "1",
        )
        assert added.exit_code == 0

        series = _invoke(
            calibre_config, "series", "Harry Potter", "--user", "alice", "--total", "3"
        )
        assert series.exit_code == 0
        assert "1/3 owned, ongoing" in series.output

        report = _invoke(calibre_config, "ongoing", "--user", "alice")
        assert report.exit_code == 0
        assert "Missing Volumes" in report.output
        assert "Volume 2" in report.output
        assert "Volume 3" in report.output
        assert "Volume 1" not in report.output

    def test_complete_ongoing_series(self, calibre_config: Path) -> None:
        _invoke(
            calibre_config,
            "add",
            HP_ISBN,
            "--user",
            "alice",
            "--series",
            "Harry Potter",
            "--volume",
            "1",
        )
        _invoke(calibre_config, "series", "Harry Potter", "--user", "alice", "--total", "1")
        result = _invoke(calibre_config, "ongoing", "--user", "alice")
        assert result.exit_code == 0
        assert "All Owned" in result.output

    def test_no_series(self, calibre_config: Path) -> None:
        result = _invoke(calibre_config, "ongoing", "--user", "alice")
        assert result.exit_code == 0
        assert "No series" in result.output

    def test_view_series(self, calibre_config: Path) -> None:
        """Without options the series is only displayed."""
        _invoke(
            calibre_config,
            "add",
            HP_ISBN,
            "--user",
            "alice",
            "--series",
            "Harry Potter",
            "--volume",
            "1",
        )
        result = _invoke(calibre_config, "series", "Harry Potter", "--user", "alice")
        assert result.exit_code == 0
        assert "1/? owned, ongoing" in result.output

    def test_view_unknown_series_does_not_create_it(self, calibre_config: Path) -> None:
        result = _invoke(calibre_config, "series", "Typo Seires", "--user", "alice")
        assert result.exit_code == 1
        assert "Series Typo Seires not found." in result.output

        report = _invoke(calibre_config, "ongoing", "--user", "alice")
        assert "No series" in report.output

    def test_update_creates_series(self, calibre_config: Path) -> None:
        result = _invoke(
            calibre_config, "series", "Discworld", "--user", "alice", "--finished"
        )
        assert result.exit_code == 0
        assert "0/? owned, finished" in result.output


class TestCliProviders:
    """E2e tests for `bouquineur providers`."""

    def test_lists_enabled_provider(self, calibre_config: Path) -> None:
        result = _invoke(calibre_config, "providers")
        assert result.exit_code == 0
        assert "Calibre" in result.output
        assert "calibre" in result.output

    def test_inconsistent_config(self, tmp_path: Path) -> None:
        """A default provider that is not enabled is rejected at startup."""
        config = _write_config(
            tmp_path,
            '[metadata]\ndefault_provider = "open_library"\n'
            '[metadata.calibre]\nfetcher = "/usr/bin/true"\n',
        )
        result = _invoke(config, "providers")
        assert result.exit_code == 1
        assert "not enabled" in result.output

# ABOUTME: Shared pytest fixtures for Bouquineur tests.
# ABOUTME: Provides OPF samples, a fake Calibre fetcher factory, and a temporary catalog.

from collections.abc import Callable, Iterator
from functools import partial
from pathlib import Path

import pytest

from bouquineur.db.catalog import LibraryCatalog
from bouquineur.db.connection import open_catalog
from tests.fixtures.fake_fetcher import write_fake_fetcher


@pytest.fixture
def fixtures_dir() -> Path:
    """Path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def hp_opf(fixtures_dir: Path) -> str:
    """OPF document as printed by Calibre's fetcher for a Harry Potter edition."""
    return (fixtures_dir / "hp.opf").read_text(encoding="utf-8")


@pytest.fixture
def fake_fetcher(tmp_path: Path) -> Callable[..., Path]:
    """Factory for fake fetch-ebook-metadata scripts living in tmp_path."""
    return partial(write_fake_fetcher, tmp_path)


@pytest.fixture
def catalog(tmp_path: Path) -> Iterator[LibraryCatalog]:
    """Provide a LibraryCatalog backed by a temporary database."""
    conn = open_catalog(tmp_path / "test.db")
    yield LibraryCatalog(conn)
    conn.close()

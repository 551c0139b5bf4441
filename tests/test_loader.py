"""Tests for loading the site configuration from YAML files.

These tests write small configuration trees into ``tmp_path`` and check that
fragments are read one per file, that the docs preset ``sidebarPath`` is
resolved relative to the primary file, and that the checked-in ``config/``
directory composes cleanly.
"""

from __future__ import annotations

from pathlib import Path
from textwrap import dedent

import pytest

from kuve_pages.config import (
    Category,
    DocRef,
    ValidationError,
    ValidationKind,
    load_feature_records,
    load_fragments,
    load_sidebars,
    load_site_config,
)

REPO_ROOT = Path(__file__).resolve().parents[1]
CONFIG_DIR = REPO_ROOT / "config"


def _write(path: Path, text: str) -> Path:
    path.write_text(dedent(text).strip() + "\n", encoding="utf-8")
    return path


@pytest.fixture
def site_files(tmp_path: Path) -> tuple[Path, Path]:
    """Write a primary site file with a docs preset and a theme fragment."""
    _write(
        tmp_path / "sidebars.yaml",
        """
        tutorialSidebar:
          - intro
          - category: Getting Started
            items:
              - install
              - quickstart
        """,
    )
    site = _write(
        tmp_path / "site.yaml",
        """
        title: Kuve
        url: https://example.org
        baseUrl: /kuve/
        presets:
          - - classic
            - docs:
                sidebarPath: ./sidebars.yaml
        """,
    )
    theme = _write(
        tmp_path / "theme.yaml",
        """
        themeConfig:
          navbar:
            items:
              - type: docSidebar
                sidebarId: tutorialSidebar
                label: Docs
        """,
    )
    return site, theme


def test_load_site_config_resolves_sidebar_path(site_files: tuple[Path, Path]) -> None:
    """The docs preset sidebar file is loaded relative to the site file."""
    site = load_site_config(*site_files)

    tree = site.get_sidebar("tutorialSidebar")
    assert tree.first_doc() == "intro", f"unexpected first doc {tree.first_doc()!r}"
    category = tree.items[1]
    assert isinstance(category, Category)
    assert category.items == (DocRef("install"), DocRef("quickstart"))
    assert site.theme.navbar.title == "Kuve", "expected navbar title to default"


def test_fragments_are_named_after_files(site_files: tuple[Path, Path]) -> None:
    """Each file becomes one fragment named by its stem."""
    fragments = load_fragments(site_files)
    assert [name for name, _ in fragments] == ["site", "theme"]


def test_overlapping_files_conflict(
    tmp_path: Path, site_files: tuple[Path, Path]
) -> None:
    """A field declared in two files is reported with both file names."""
    extra = _write(tmp_path / "extra.yaml", "title: Another title")

    with pytest.raises(ValidationError) as excinfo:
        load_site_config(*site_files, extra)

    assert excinfo.value.kind is ValidationKind.CONFLICTING_OPTION
    assert "site" in excinfo.value.detail
    assert "extra" in excinfo.value.detail


def test_invalid_sidebar_file_fails_the_load(
    tmp_path: Path, site_files: tuple[Path, Path]
) -> None:
    """Sidebar validation errors surface through ``load_site_config``."""
    _write(
        tmp_path / "sidebars.yaml",
        """
        tutorialSidebar:
          - intro
          - category: Empty
            items: []
        """,
    )

    with pytest.raises(ValidationError) as excinfo:
        load_site_config(*site_files)

    assert excinfo.value.kind is ValidationKind.EMPTY_CATEGORY


def test_missing_file_raises(tmp_path: Path) -> None:
    """Missing configuration files raise FileNotFoundError."""
    with pytest.raises(FileNotFoundError):
        load_site_config(tmp_path / "absent.yaml")


def test_non_mapping_document_raises(tmp_path: Path) -> None:
    """A YAML list at the top level is rejected."""
    path = _write(tmp_path / "site.yaml", "- title")
    with pytest.raises(TypeError):
        load_fragments([path])


def test_checked_in_config_composes() -> None:
    """The repository's own configuration validates end to end."""
    site = load_site_config(CONFIG_DIR / "site.yaml", CONFIG_DIR / "theme.yaml")

    assert site.title == "Kuve"
    assert list(site.sidebars) == ["tutorialSidebar"]
    tree = site.get_sidebar("tutorialSidebar")
    assert [category.label for category in tree.categories()] == [
        "Getting Started",
        "User Guide",
        "Advanced Features",
        "Reference",
        "Developers",
    ], "expected sidebar categories in declared order"
    assert len(list(tree.doc_ids())) == 17, "expected every documented page"
    assert [column.title for column in site.theme.footer.columns] == [
        "Documentation",
        "Community",
        "More",
    ]


def test_checked_in_sidebars_load() -> None:
    """The sidebar file loads on its own."""
    sidebars = load_sidebars(CONFIG_DIR / "sidebars.yaml")
    developers = list(sidebars["tutorialSidebar"].categories())[-1]
    assert developers.collapsed is True, "expected Developers to start collapsed"


def test_checked_in_features_load() -> None:
    """The homepage feature list loads with three records in order."""
    records = load_feature_records(CONFIG_DIR / "features.yaml")
    assert [record.title for record in records] == [
        "Easy Version Management",
        "Project-Specific Versions",
        "Auto-Detection",
    ]

"""Tests for exporting the composed descriptor as JSON."""

from __future__ import annotations

import json
import typing as typ
from pathlib import Path

from kuve_pages.config import compose_site_config, load_site_config
from kuve_pages.config.sidebar import build_sidebar
from kuve_pages.export import (
    encode_descriptor,
    encode_sidebars,
    sidebars_to_mapping,
    site_to_mapping,
    write_descriptor,
)

if typ.TYPE_CHECKING:
    from kuve_pages.config import SiteConfig

CONFIG_DIR = Path(__file__).resolve().parents[1] / "config"


def _site() -> SiteConfig:
    return load_site_config(CONFIG_DIR / "site.yaml", CONFIG_DIR / "theme.yaml")


def test_descriptor_uses_generator_field_names() -> None:
    """The exported descriptor mirrors the generator's camelCase layout."""
    payload = json.loads(encode_descriptor(_site()))

    assert list(payload)[:5] == ["title", "tagline", "favicon", "url", "baseUrl"], (
        f"expected declaration order, got {list(payload)!r}"
    )
    assert payload["baseUrl"] == "/kuve/"
    assert payload["onBrokenLinks"] == "throw"
    assert payload["onBrokenMarkdownLinks"] == "warn"
    assert payload["i18n"] == {"defaultLocale": "en", "locales": ["en"]}
    name, options = payload["presets"][0]
    assert name == "classic"
    assert options["theme"] == {"customCss": ["./src/css/custom.css"]}
    navbar_items = payload["themeConfig"]["navbar"]["items"]
    assert navbar_items[0] == {
        "type": "docSidebar",
        "sidebarId": "tutorialSidebar",
        "label": "Documentation",
        "position": "left",
    }, f"unexpected navbar item {navbar_items[0]!r}"
    community = payload["themeConfig"]["footer"]["links"][1]
    assert community["items"][0] == {
        "label": "GitHub",
        "href": "https://github.com/germainlefebvre4/kuve",
    }
    assert payload["themeConfig"]["algolia"]["indexName"] == "kuve"


def test_encoding_is_byte_identical_across_builds() -> None:
    """Two independent loads of the same files encode to the same bytes."""
    first, second = _site(), _site()

    assert encode_descriptor(first) == encode_descriptor(second)
    assert encode_sidebars(first.sidebars) == encode_sidebars(second.sidebars)


def test_sidebars_round_trip_to_declarative_form() -> None:
    """Sidebar trees export as the item lists they were declared with."""
    tree = build_sidebar(
        "docs",
        ["intro", {"category": "Getting Started", "items": ["install", "quickstart"]}],
    )

    assert sidebars_to_mapping({"docs": tree}) == {
        "docs": [
            "intro",
            {
                "type": "category",
                "label": "Getting Started",
                "collapsed": True,
                "items": ["install", "quickstart"],
            },
        ]
    }


def test_write_descriptor_creates_both_files(tmp_path: Path) -> None:
    """``site.json`` and ``sidebars.json`` are written with a trailing newline."""
    written = write_descriptor(_site(), tmp_path / "out")

    assert [path.name for path in written] == ["site.json", "sidebars.json"]
    sidebars = json.loads(written[1].read_text(encoding="utf-8"))
    assert sidebars["tutorialSidebar"][0] == "intro"
    assert written[0].read_bytes().endswith(b"\n")


def test_written_descriptor_points_at_exported_sidebars(tmp_path: Path) -> None:
    """The docs preset's ``sidebarPath`` names the written sidebar file."""
    out = tmp_path / "out"
    write_descriptor(_site(), out)

    payload = json.loads((out / "site.json").read_text(encoding="utf-8"))
    _, options = payload["presets"][0]
    sidebar_path = options["docs"]["sidebarPath"]
    assert sidebar_path == "./sidebars.json", f"unexpected path {sidebar_path!r}"
    assert (out / sidebar_path).exists(), "expected sidebarPath to name a written file"
    assert options["docs"]["editUrl"].startswith("https://github.com/"), (
        "expected the other docs options to be kept"
    )


def test_disabled_docs_and_blog_flags_survive_export() -> None:
    """``docs: false`` and ``blog: false`` are exported as declared."""
    site = compose_site_config(
        {
            "core": {"title": "Kuve", "url": "https://example.org", "baseUrl": "/"},
            "presets": {"presets": [["classic", {"docs": False, "blog": False}]]},
        }
    )

    _, options = site_to_mapping(site)["presets"][0]
    assert options["docs"] is False, f"expected docs disabled, got {options!r}"
    assert options["blog"] is False


def test_undeclared_blog_is_omitted() -> None:
    """Presets that never mention ``blog`` leave the generator default alone."""
    site = compose_site_config(
        {
            "core": {"title": "Kuve", "url": "https://example.org", "baseUrl": "/"},
            "presets": {"presets": ["classic"]},
        }
    )

    _, options = site_to_mapping(site)["presets"][0]
    assert options == {}, f"expected no preset options, got {options!r}"


def test_declared_navbar_type_is_exported() -> None:
    """Any navbar ``type`` other than the default is kept."""
    site = compose_site_config(
        {
            "core": {"title": "Kuve", "url": "https://example.org", "baseUrl": "/"},
            "theme": {
                "themeConfig": {
                    "navbar": {
                        "items": [
                            {
                                "type": "dropdown",
                                "label": "Versions",
                                "to": "/versions",
                            },
                            {"label": "GitHub", "href": "https://github.com/"},
                        ]
                    }
                }
            },
        }
    )

    items = site_to_mapping(site)["themeConfig"]["navbar"]["items"]
    assert items[0]["type"] == "dropdown", f"unexpected {items[0]!r}"
    assert "type" not in items[1], "expected the default type to be omitted"

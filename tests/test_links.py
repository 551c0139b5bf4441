"""Tests for the link-checking policy helpers."""

from __future__ import annotations

import dataclasses as dc
import logging
import typing as typ

import pytest

from kuve_pages.config import LinkPolicy, compose_site_config
from kuve_pages.config.sidebar import build_sidebars
from kuve_pages.links import (
    BrokenLinkKind,
    BrokenReference,
    LinkPolicyViolation,
    LinkReporter,
    check_doc_refs,
    discover_doc_ids,
)

if typ.TYPE_CHECKING:
    from pathlib import Path

    from kuve_pages.config import SiteConfig


def _site(policy: LinkPolicy) -> SiteConfig:
    site = compose_site_config(
        {
            "core": {
                "title": "Kuve",
                "url": "https://example.org",
                "baseUrl": "/",
                "onBrokenLinks": policy.value,
            }
        },
        sidebars=build_sidebars(
            {"tutorialSidebar": ["intro", {"category": "Guide", "items": ["missing"]}]}
        ),
    )
    return site


def test_throw_policy_raises_with_reference() -> None:
    """``throw`` aborts on the first broken reference."""
    with pytest.raises(LinkPolicyViolation) as excinfo:
        check_doc_refs(_site(LinkPolicy.THROW), {"intro"})

    reference = excinfo.value.reference
    assert reference.target == "missing", f"unexpected target {reference.target!r}"
    assert "tutorialSidebar" in str(excinfo.value), (
        "expected the message to name the sidebar"
    )


def test_warn_policy_logs_and_continues(caplog: pytest.LogCaptureFixture) -> None:
    """``warn`` logs each broken reference and returns them."""
    reporter = LinkReporter(_site(LinkPolicy.WARN))
    with caplog.at_level(logging.WARNING, logger="kuve_pages.links"):
        broken = check_doc_refs(_site(LinkPolicy.WARN), {"intro"}, reporter)

    assert [reference.target for reference in broken] == ["missing"]
    assert reporter.warnings == broken, "expected warnings to be recorded"
    assert "missing" in caplog.text, "expected a warning naming the document"


def test_ignore_policy_is_silent(caplog: pytest.LogCaptureFixture) -> None:
    """``ignore`` neither raises nor warns."""
    with caplog.at_level(logging.WARNING, logger="kuve_pages.links"):
        broken = check_doc_refs(_site(LinkPolicy.IGNORE), {"intro"})

    assert len(broken) == 1
    assert caplog.text == "", "expected no warnings under the ignore policy"


def test_resolved_references_are_not_reported() -> None:
    """Nothing is reported when every document exists."""
    assert check_doc_refs(_site(LinkPolicy.THROW), {"intro", "missing"}) == []


def test_markdown_links_use_their_own_policy() -> None:
    """Broken Markdown links follow ``onBrokenMarkdownLinks``."""
    site = dc.replace(
        _site(LinkPolicy.IGNORE), on_broken_markdown_links=LinkPolicy.THROW
    )
    reporter = LinkReporter(site)
    reference = BrokenReference(
        kind=BrokenLinkKind.BROKEN_MARKDOWN_LINK,
        source="docs/intro.md",
        target="./missing.md",
    )

    with pytest.raises(LinkPolicyViolation):
        reporter.report(reference)


def test_discover_doc_ids_strips_suffixes(tmp_path: Path) -> None:
    """Document ids are relative POSIX paths without ``.md``/``.mdx``."""
    (tmp_path / "getting-started").mkdir()
    (tmp_path / "intro.md").write_text("# Intro\n", encoding="utf-8")
    (tmp_path / "getting-started" / "installation.mdx").write_text(
        "# Install\n", encoding="utf-8"
    )
    (tmp_path / "logo.png").write_bytes(b"")

    assert discover_doc_ids(tmp_path) == {"intro", "getting-started/installation"}


def test_discover_doc_ids_requires_directory(tmp_path: Path) -> None:
    """A missing docs directory is reported."""
    with pytest.raises(FileNotFoundError):
        discover_doc_ids(tmp_path / "docs")

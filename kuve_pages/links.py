"""Apply the configured link-checking policy to unresolved references.

The site descriptor carries two severities, ``onBrokenLinks`` and
``onBrokenMarkdownLinks``. The composer only checks that each is a recognised
level; this module is what a build step calls when it actually finds a broken
reference. ``throw`` aborts with :class:`LinkPolicyViolation`, ``warn`` logs
the problem and lets the build continue, ``ignore`` drops it.

:func:`check_doc_refs` applies the policy to sidebar document references,
which is the one kind of reference the configuration layer can check on its
own given the list of documents on disk.
"""

from __future__ import annotations

import dataclasses as dc
import enum
import logging
import typing as typ

from .config import LinkPolicy

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path

    from .config import SiteConfig

logger = logging.getLogger(__name__)

DOC_SUFFIXES = (".md", ".mdx")


class BrokenLinkKind(enum.StrEnum):
    """Which policy a broken reference falls under."""

    BROKEN_LINK = "BrokenLink"
    BROKEN_MARKDOWN_LINK = "BrokenMarkdownLink"


@dc.dataclass(frozen=True, slots=True)
class BrokenReference:
    """A reference that could not be resolved."""

    kind: BrokenLinkKind
    source: str
    target: str

    def describe(self) -> str:
        """Return a message naming the offending reference."""
        return (
            f"{self.kind}: '{self.target}' referenced from {self.source} "
            "does not exist"
        )


class LinkPolicyViolation(Exception):  # noqa: N818
    """Raised for broken references when the policy is ``throw``."""

    def __init__(self, reference: BrokenReference) -> None:
        self.reference = reference
        super().__init__(reference.describe())


class LinkReporter:
    """Report broken references with the severity configured for the site."""

    def __init__(self, site: SiteConfig) -> None:
        self.policies = {
            BrokenLinkKind.BROKEN_LINK: site.on_broken_links,
            BrokenLinkKind.BROKEN_MARKDOWN_LINK: site.on_broken_markdown_links,
        }
        self.warnings: list[BrokenReference] = []

    def report(self, reference: BrokenReference) -> None:
        """Apply the configured severity to ``reference``.

        Raises
        ------
        LinkPolicyViolation
            When the policy for ``reference.kind`` is ``throw``.
        """
        match self.policies[reference.kind]:
            case LinkPolicy.THROW:
                raise LinkPolicyViolation(reference)
            case LinkPolicy.WARN:
                logger.warning("%s", reference.describe())
                self.warnings.append(reference)
            case LinkPolicy.IGNORE:
                logger.debug("ignoring %s", reference.describe())


def discover_doc_ids(docs_dir: Path) -> set[str]:
    """Return document ids for every Markdown file below ``docs_dir``.

    An id is the POSIX path relative to ``docs_dir`` without its suffix, so
    ``docs/getting-started/installation.md`` yields
    ``getting-started/installation``.
    """
    if not docs_dir.is_dir():
        msg = f"Docs directory '{docs_dir}' not found."
        raise FileNotFoundError(msg)
    return {
        path.relative_to(docs_dir).with_suffix("").as_posix()
        for path in docs_dir.rglob("*")
        if path.suffix in DOC_SUFFIXES and path.is_file()
    }


def check_doc_refs(
    site: SiteConfig,
    available_ids: cabc.Collection[str],
    reporter: LinkReporter | None = None,
) -> list[BrokenReference]:
    """Resolve every sidebar document reference against ``available_ids``.

    Returns the broken references that were reported without aborting (those
    under ``warn`` or ``ignore``); with ``throw`` the first miss raises.
    """
    reporter = reporter or LinkReporter(site)
    broken: list[BrokenReference] = []
    for name, tree in site.sidebars.items():
        for doc_id in tree.doc_ids():
            if doc_id in available_ids:
                continue
            reference = BrokenReference(
                kind=BrokenLinkKind.BROKEN_LINK,
                source=f"sidebar '{name}'",
                target=doc_id,
            )
            reporter.report(reference)
            broken.append(reference)
    return broken


__all__ = [
    "BrokenLinkKind",
    "BrokenReference",
    "LinkPolicyViolation",
    "LinkReporter",
    "check_doc_refs",
    "discover_doc_ids",
]

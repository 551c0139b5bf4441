"""Load and validate the Kuve documentation site configuration.

This subpackage turns the declarative YAML files under ``config/`` into
immutable dataclasses consumed by the static-site generator. Sidebars are
validated into ordered navigation trees (:func:`build_sidebars`), and the
scattered site fragments (core metadata, presets, theme options) are merged
by :class:`SiteConfigComposer` on the rule that each field has exactly one
owner. The primary entry point is :func:`load_site_config`.

Examples
--------
>>> from pathlib import Path
>>> from kuve_pages.config import load_site_config
>>> site = load_site_config(Path("config/site.yaml"))  # doctest: +SKIP
>>> site.on_broken_links  # doctest: +SKIP
<LinkPolicy.THROW: 'throw'>
"""

from .composer import ConflictingOptionsError, SiteConfigComposer, compose_site_config
from .features import build_feature_records
from .helpers import MergeConflict, merge_disjoint
from .loader import (
    load_feature_records,
    load_fragments,
    load_sidebars,
    load_site_config,
)
from .models import (
    DocsPresetOptions,
    FeatureRecord,
    FooterColumn,
    FooterConfig,
    FooterLink,
    FooterStyle,
    I18nConfig,
    LinkPolicy,
    LogoConfig,
    NavbarConfig,
    NavbarItem,
    NavbarPosition,
    PresetConfig,
    PrismConfig,
    SearchConfig,
    SiteConfig,
    SiteConfigError,
    ThemeConfig,
    ThemePresetOptions,
    ValidationError,
    ValidationKind,
)
from .sidebar import (
    Category,
    DocRef,
    SidebarItem,
    SidebarTree,
    build_sidebar,
    build_sidebars,
)

__all__ = [
    "Category",
    "ConflictingOptionsError",
    "DocRef",
    "DocsPresetOptions",
    "FeatureRecord",
    "FooterColumn",
    "FooterConfig",
    "FooterLink",
    "FooterStyle",
    "I18nConfig",
    "LinkPolicy",
    "LogoConfig",
    "MergeConflict",
    "NavbarConfig",
    "NavbarItem",
    "NavbarPosition",
    "PresetConfig",
    "PrismConfig",
    "SearchConfig",
    "SidebarItem",
    "SidebarTree",
    "SiteConfig",
    "SiteConfigComposer",
    "SiteConfigError",
    "ThemeConfig",
    "ThemePresetOptions",
    "ValidationError",
    "ValidationKind",
    "build_feature_records",
    "build_sidebar",
    "build_sidebars",
    "compose_site_config",
    "load_feature_records",
    "load_fragments",
    "load_sidebars",
    "load_site_config",
    "merge_disjoint",
]

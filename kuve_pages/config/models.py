"""Typed dataclasses describing the Kuve documentation site configuration."""

from __future__ import annotations

import dataclasses as dc
import enum
import typing as typ

if typ.TYPE_CHECKING:
    from .sidebar import SidebarTree


class SiteConfigError(ValueError):
    """Raised when the site configuration is invalid or incomplete."""


class ValidationKind(enum.StrEnum):
    """Categories of configuration validation failures."""

    DUPLICATE_DOC_ID = "DuplicateDocId"
    EMPTY_CATEGORY = "EmptyCategory"
    MALFORMED_ITEM = "MalformedItem"
    CONFLICTING_OPTION = "ConflictingOption"
    INVALID_LOCALE = "InvalidLocale"
    INVALID_OPTION = "InvalidOption"
    MISSING_OPTION = "MissingOption"
    UNKNOWN_SIDEBAR = "UnknownSidebar"


class ValidationError(SiteConfigError):
    """A declaration failed validation; fatal to the current build.

    Attributes
    ----------
    kind : ValidationKind
        Category of the failure, used by callers to branch on the cause.
    detail : str
        Human readable description naming the offending declaration.
    """

    def __init__(self, kind: ValidationKind, detail: str) -> None:
        self.kind = kind
        self.detail = detail
        super().__init__(f"{kind}: {detail}")


class LinkPolicy(enum.StrEnum):
    """Severity applied when a cross-document reference cannot be resolved."""

    IGNORE = "ignore"
    WARN = "warn"
    THROW = "throw"


class FooterStyle(enum.StrEnum):
    """Colour scheme of the site footer."""

    LIGHT = "light"
    DARK = "dark"


class NavbarPosition(enum.StrEnum):
    """Side of the navbar an item is attached to."""

    LEFT = "left"
    RIGHT = "right"


@dc.dataclass(frozen=True, slots=True)
class I18nConfig:
    """Internationalization settings; ``default_locale`` is one of ``locales``."""

    default_locale: str
    locales: tuple[str, ...]


@dc.dataclass(frozen=True, slots=True)
class DocsPresetOptions:
    """Options handed to the docs plugin of a preset."""

    sidebar_path: str | None = None
    edit_url: str | None = None


@dc.dataclass(frozen=True, slots=True)
class ThemePresetOptions:
    """Options handed to the theme of a preset."""

    custom_css: tuple[str, ...] = ()


@dc.dataclass(frozen=True, slots=True)
class PresetConfig:
    """A named bundle of default options contributed to the site.

    ``docs_enabled`` is false only when the preset declares ``docs: false``.
    ``blog_enabled`` is ``None`` when ``blog`` is not declared, leaving the
    generator's default in place.
    """

    name: str
    docs: DocsPresetOptions | None = None
    docs_enabled: bool = True
    blog_enabled: bool | None = None
    theme: ThemePresetOptions | None = None


@dc.dataclass(frozen=True, slots=True)
class LogoConfig:
    """Navbar logo image."""

    alt: str
    src: str


@dc.dataclass(frozen=True, slots=True)
class NavbarItem:
    """Entry in the site navbar.

    ``item_type`` is ``"docSidebar"`` for entries opening a sidebar (in which
    case ``sidebar_id`` names it) and ``"default"`` for plain links that carry
    either ``href`` or ``to``.
    """

    label: str
    position: NavbarPosition = NavbarPosition.LEFT
    item_type: str = "default"
    sidebar_id: str | None = None
    href: str | None = None
    to: str | None = None


@dc.dataclass(frozen=True, slots=True)
class NavbarConfig:
    """Navbar title, logo and ordered items."""

    title: str
    logo: LogoConfig | None = None
    items: tuple[NavbarItem, ...] = ()


@dc.dataclass(frozen=True, slots=True)
class FooterLink:
    """Footer hyperlink; ``external`` is set when declared with ``href``."""

    label: str
    target: str
    external: bool = False


@dc.dataclass(frozen=True, slots=True)
class FooterColumn:
    """Titled column of footer links."""

    title: str
    links: tuple[FooterLink, ...]


@dc.dataclass(frozen=True, slots=True)
class FooterConfig:
    """Footer style, link columns and copyright line."""

    style: FooterStyle = FooterStyle.LIGHT
    columns: tuple[FooterColumn, ...] = ()
    copyright: str | None = None


@dc.dataclass(frozen=True, slots=True)
class PrismConfig:
    """Syntax-highlighting theme pair used by code blocks."""

    theme: str = "github"
    dark_theme: str = "dracula"
    additional_languages: tuple[str, ...] = ()


@dc.dataclass(frozen=True, slots=True)
class SearchConfig:
    """Search provider settings, passed through opaquely."""

    app_id: str
    api_key: str
    index_name: str
    contextual_search: bool = True


@dc.dataclass(frozen=True, slots=True)
class ThemeConfig:
    """Theme options: navbar, footer, code highlighting and search."""

    navbar: NavbarConfig
    footer: FooterConfig = dc.field(default_factory=FooterConfig)
    prism: PrismConfig = dc.field(default_factory=PrismConfig)
    search: SearchConfig | None = None
    image: str | None = None


@dc.dataclass(frozen=True, slots=True)
class SiteConfig:
    """Immutable site descriptor handed to the static-site generator."""

    title: str
    url: str
    base_url: str
    theme: ThemeConfig
    i18n: I18nConfig = dc.field(
        default_factory=lambda: I18nConfig(default_locale="en", locales=("en",))
    )
    tagline: str = ""
    favicon: str | None = None
    organization_name: str | None = None
    project_name: str | None = None
    on_broken_links: LinkPolicy = LinkPolicy.THROW
    on_broken_markdown_links: LinkPolicy = LinkPolicy.WARN
    presets: tuple[PresetConfig, ...] = ()
    sidebars: typ.Mapping[str, SidebarTree] = dc.field(
        default_factory=dict, hash=False
    )

    @property
    def docs_preset(self) -> DocsPresetOptions | None:
        """Return the docs options of the first preset that declares any."""
        for preset in self.presets:
            if preset.docs is not None:
                return preset.docs
        return None

    def get_sidebar(self, sidebar_id: str) -> SidebarTree:
        """Return the named sidebar tree."""
        try:
            return self.sidebars[sidebar_id]
        except KeyError as exc:
            available = ", ".join(self.sidebars) or "none"
            msg = f"Unknown sidebar '{sidebar_id}'. Known sidebars: {available}"
            raise KeyError(msg) from exc


@dc.dataclass(frozen=True, slots=True)
class FeatureRecord:
    """Homepage feature: title, inline rich-text description and icon path."""

    title: str
    description: str
    icon: str


__all__ = [
    "DocsPresetOptions",
    "FeatureRecord",
    "FooterColumn",
    "FooterConfig",
    "FooterLink",
    "FooterStyle",
    "I18nConfig",
    "LinkPolicy",
    "LogoConfig",
    "NavbarConfig",
    "NavbarItem",
    "NavbarPosition",
    "PresetConfig",
    "PrismConfig",
    "SearchConfig",
    "SiteConfig",
    "SiteConfigError",
    "ThemeConfig",
    "ThemePresetOptions",
    "ValidationError",
    "ValidationKind",
]

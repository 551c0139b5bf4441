"""Compose configuration fragments into one immutable site descriptor.

Site configuration is usually scattered: core metadata in one file, preset
options in another, theme options in a third. :class:`SiteConfigComposer`
collects those named fragments and merges them on the rule that every field is
owned by exactly one fragment. A field declared twice is reported instead of
letting one side silently win.

Examples
--------
>>> composer = SiteConfigComposer()
>>> _ = composer.add_fragment(
...     "core", {"title": "Kuve", "url": "https://example.org", "baseUrl": "/"}
... )
>>> _ = composer.add_fragment("theme", {"themeConfig": {"navbar": {}}})
>>> composer.compose().theme.navbar.title
'Kuve'
"""

from __future__ import annotations

import collections.abc as cabc
import logging
import types
import typing as typ

from .helpers import (
    MergeConflict,
    _optional_str,
    _parse_enum,
    _require_bool,
    _require_list,
    _require_mapping,
    _require_str,
    _str_tuple,
    merge_disjoint,
)
from .models import (
    DocsPresetOptions,
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

if typ.TYPE_CHECKING:
    from .sidebar import SidebarTree

logger = logging.getLogger(__name__)

CORE_KEYS = frozenset(
    {
        "title",
        "tagline",
        "favicon",
        "url",
        "baseUrl",
        "organizationName",
        "projectName",
        "onBrokenLinks",
        "onBrokenMarkdownLinks",
        "i18n",
        "presets",
        "themeConfig",
    }
)
PRESET_KEYS = frozenset({"docs", "blog", "theme"})
THEME_KEYS = frozenset({"image", "navbar", "footer", "prism", "algolia"})
DOC_SIDEBAR_ITEM = "docSidebar"


class ConflictingOptionsError(ValidationError):
    """Several fragments declared the same field.

    Attributes
    ----------
    conflicts : list[MergeConflict]
        Every conflicting dotted path with the fragments declaring it.
    """

    def __init__(self, conflicts: list[MergeConflict]) -> None:
        self.conflicts = conflicts
        detail = "; ".join(conflict.describe() for conflict in conflicts)
        super().__init__(ValidationKind.CONFLICTING_OPTION, detail)


class SiteConfigComposer:
    """Collect named configuration fragments and merge them into a SiteConfig."""

    def __init__(self) -> None:
        self._fragments: list[tuple[str, cabc.Mapping[str, typ.Any]]] = []

    def __repr__(self) -> str:
        return f"<{type(self).__name__} fragments={self.fragment_names!r}>"

    @property
    def fragment_names(self) -> list[str]:
        """Names of the fragments added so far, in order."""
        return [name for name, _ in self._fragments]

    def add_fragment(
        self, name: str, payload: cabc.Mapping[str, typ.Any]
    ) -> SiteConfigComposer:
        """Register a configuration fragment and return the composer.

        Raises
        ------
        SiteConfigError
            If a fragment with the same name was already added.
        ValidationError
            ``InvalidOption`` when ``payload`` is not a mapping or declares a
            key the site descriptor does not recognise.
        """
        if name in self.fragment_names:
            msg = f"Fragment '{name}' was already added."
            raise SiteConfigError(msg)
        fragment = _require_mapping(payload, f"fragment '{name}'", allow_none=False)
        unknown = sorted(str(key) for key in fragment if key not in CORE_KEYS)
        if unknown:
            msg = f"fragment '{name}' declares unknown option(s): {', '.join(unknown)}"
            raise ValidationError(ValidationKind.INVALID_OPTION, msg)
        self._fragments.append((name, fragment))
        return self

    def compose(
        self, *, sidebars: cabc.Mapping[str, SidebarTree] | None = None
    ) -> SiteConfig:
        """Merge every fragment and return the validated site descriptor.

        Parameters
        ----------
        sidebars : Mapping[str, SidebarTree], optional
            Trees produced by :func:`~kuve_pages.config.sidebar.build_sidebars`.
            When supplied, navbar items opening a sidebar must name one of them.

        Returns
        -------
        SiteConfig
            Immutable descriptor; inputs are left untouched.

        Raises
        ------
        ValidationError
            ``ConflictingOption`` when fragments or presets overlap,
            ``InvalidLocale`` when the default locale is not listed,
            ``InvalidOption``/``MissingOption`` for malformed or absent fields,
            and ``UnknownSidebar`` for navbar items naming a missing sidebar.
        """
        merged, conflicts = merge_disjoint(self._fragments)
        if conflicts:
            raise ConflictingOptionsError(conflicts)

        presets = _build_presets(merged.get("presets"))
        title = _require_str(merged, "title", "site configuration")
        theme = _build_theme_config(
            _require_mapping(merged.get("themeConfig"), "themeConfig"),
            default_title=title,
        )
        site = SiteConfig(
            title=title,
            tagline=_optional_str(merged.get("tagline")) or "",
            favicon=_optional_str(merged.get("favicon")),
            url=_validate_url(_require_str(merged, "url", "site configuration")),
            base_url=_validate_base_url(
                _require_str(merged, "baseUrl", "site configuration")
            ),
            organization_name=_optional_str(merged.get("organizationName")),
            project_name=_optional_str(merged.get("projectName")),
            on_broken_links=_parse_enum(
                LinkPolicy,
                merged.get("onBrokenLinks"),
                "onBrokenLinks",
                default=LinkPolicy.THROW,
            ),
            on_broken_markdown_links=_parse_enum(
                LinkPolicy,
                merged.get("onBrokenMarkdownLinks"),
                "onBrokenMarkdownLinks",
                default=LinkPolicy.WARN,
            ),
            i18n=_build_i18n(merged.get("i18n")),
            presets=presets,
            theme=theme,
            sidebars=types.MappingProxyType(dict(sidebars or {})),
        )
        if sidebars is not None:
            _check_navbar_sidebars(theme.navbar, sidebars)
        logger.debug(
            "composed site '%s' from fragments %s",
            site.title,
            ", ".join(self.fragment_names),
        )
        return site


def compose_site_config(
    fragments: cabc.Mapping[str, cabc.Mapping[str, typ.Any]],
    *,
    sidebars: cabc.Mapping[str, SidebarTree] | None = None,
) -> SiteConfig:
    """Compose ``{name: fragment}`` pairs in one call."""
    composer = SiteConfigComposer()
    for name, payload in fragments.items():
        composer.add_fragment(name, payload)
    return composer.compose(sidebars=sidebars)


def _validate_url(url: str) -> str:
    if not url.startswith(("http://", "https://")):
        msg = f"url must start with http:// or https://; got {url!r}"
        raise ValidationError(ValidationKind.INVALID_OPTION, msg)
    return url.rstrip("/")


def _validate_base_url(base_url: str) -> str:
    if not (base_url.startswith("/") and base_url.endswith("/")):
        msg = f"baseUrl must start and end with '/'; got {base_url!r}"
        raise ValidationError(ValidationKind.INVALID_OPTION, msg)
    return base_url


def _build_i18n(payload: object) -> I18nConfig:
    """Build i18n settings, checking the default locale is declared."""
    data = _require_mapping(payload, "i18n")
    default_locale = _optional_str(data.get("defaultLocale")) or "en"
    raw_locales = data.get("locales")
    if raw_locales is None:
        locales: tuple[str, ...] = (default_locale,)
    else:
        locales = tuple(dict.fromkeys(_str_tuple(raw_locales, "i18n.locales")))
    if default_locale not in locales:
        declared = ", ".join(locales) or "none"
        msg = (
            f"defaultLocale '{default_locale}' is not one of the declared "
            f"locales ({declared})"
        )
        raise ValidationError(ValidationKind.INVALID_LOCALE, msg)
    return I18nConfig(default_locale=default_locale, locales=locales)


def _build_presets(payload: object) -> tuple[PresetConfig, ...]:
    """Build preset descriptors and check their option trees are disjoint."""
    declared: list[tuple[str, cabc.Mapping[str, typ.Any]]] = []
    for index, entry in enumerate(_require_list(payload, "presets")):
        match entry:
            case str() as name:
                options: object = {}
            case [str() as name]:
                options = {}
            case [str() as name, options]:
                pass
            case {"name": str() as name, **rest}:
                options = rest.get("options")
            case _:
                msg = (
                    f"preset #{index + 1} must be a name, a [name, options] pair "
                    f"or a mapping with 'name'; got {entry!r}"
                )
                raise ValidationError(ValidationKind.INVALID_OPTION, msg)
        declared.append(
            (name, _require_mapping(options, f"preset '{name}' options"))
        )

    _, conflicts = merge_disjoint(
        (f"preset '{name}'", options) for name, options in declared
    )
    if conflicts:
        raise ConflictingOptionsError(conflicts)
    return tuple(_build_preset(name, options) for name, options in declared)


def _build_preset(name: str, options: cabc.Mapping[str, typ.Any]) -> PresetConfig:
    where = f"preset '{name}'"
    unknown = sorted(str(key) for key in options if key not in PRESET_KEYS)
    if unknown:
        msg = f"{where} declares unknown option(s): {', '.join(unknown)}"
        raise ValidationError(ValidationKind.INVALID_OPTION, msg)

    docs: DocsPresetOptions | None = None
    docs_raw = options.get("docs")
    docs_enabled = docs_raw is not False
    if docs_raw is not None and docs_enabled:
        docs_data = _require_mapping(docs_raw, f"{where} docs")
        docs = DocsPresetOptions(
            sidebar_path=_optional_str(docs_data.get("sidebarPath")),
            edit_url=_optional_str(docs_data.get("editUrl")),
        )

    theme: ThemePresetOptions | None = None
    theme_raw = options.get("theme")
    if theme_raw is not None:
        theme_data = _require_mapping(theme_raw, f"{where} theme")
        theme = ThemePresetOptions(
            custom_css=_str_tuple(theme_data.get("customCss"), f"{where} customCss")
        )

    blog_raw = options.get("blog")
    blog_enabled: bool | None = None
    if blog_raw is not None:
        blog_enabled = _require_bool(blog_raw, f"{where} blog", default=False)
    return PresetConfig(
        name=name,
        docs=docs,
        docs_enabled=docs_enabled,
        blog_enabled=blog_enabled,
        theme=theme,
    )


def _build_theme_config(
    payload: cabc.Mapping[str, typ.Any], *, default_title: str
) -> ThemeConfig:
    """Build the theme options from the ``themeConfig`` mapping."""
    unknown = sorted(str(key) for key in payload if key not in THEME_KEYS)
    if unknown:
        msg = f"themeConfig declares unknown option(s): {', '.join(unknown)}"
        raise ValidationError(ValidationKind.INVALID_OPTION, msg)
    search_raw = payload.get("algolia")
    return ThemeConfig(
        image=_optional_str(payload.get("image")),
        navbar=_build_navbar(payload.get("navbar"), default_title=default_title),
        footer=_build_footer(payload.get("footer")),
        prism=_build_prism(payload.get("prism")),
        search=_build_search(search_raw) if search_raw is not None else None,
    )


def _build_navbar(payload: object, *, default_title: str) -> NavbarConfig:
    data = _require_mapping(payload, "themeConfig.navbar")
    logo_raw = data.get("logo")
    logo: LogoConfig | None = None
    if logo_raw is not None:
        logo_data = _require_mapping(logo_raw, "themeConfig.navbar.logo")
        where = "themeConfig.navbar.logo"
        logo = LogoConfig(
            alt=_require_str(logo_data, "alt", where),
            src=_require_str(logo_data, "src", where),
        )
    items = tuple(
        _build_navbar_item(entry, index)
        for index, entry in enumerate(
            _require_list(data.get("items"), "themeConfig.navbar.items")
        )
    )
    return NavbarConfig(
        title=_optional_str(data.get("title")) or default_title,
        logo=logo,
        items=items,
    )


def _build_navbar_item(entry: object, index: int) -> NavbarItem:
    where = f"navbar item #{index + 1}"
    data = _require_mapping(entry, where, allow_none=False)
    item_type = _optional_str(data.get("type")) or "default"
    position = _parse_enum(
        NavbarPosition,
        data.get("position"),
        f"{where} position",
        default=NavbarPosition.LEFT,
    )
    label = _require_str(data, "label", where)
    if item_type == DOC_SIDEBAR_ITEM:
        return NavbarItem(
            label=label,
            position=position,
            item_type=item_type,
            sidebar_id=_require_str(data, "sidebarId", where),
        )
    href = _optional_str(data.get("href"))
    to = _optional_str(data.get("to"))
    if (href is None) == (to is None):
        msg = f"{where} '{label}' must declare exactly one of 'href' or 'to'"
        raise ValidationError(ValidationKind.INVALID_OPTION, msg)
    return NavbarItem(
        label=label, position=position, item_type=item_type, href=href, to=to
    )


def _build_footer(payload: object) -> FooterConfig:
    data = _require_mapping(payload, "themeConfig.footer")
    columns: list[FooterColumn] = []
    for index, entry in enumerate(
        _require_list(data.get("links"), "themeConfig.footer.links")
    ):
        where = f"footer column #{index + 1}"
        column = _require_mapping(entry, where, allow_none=False)
        title = _require_str(column, "title", where)
        links = tuple(
            _build_footer_link(link, f"footer column '{title}'")
            for link in _require_list(column.get("items"), f"{where} items")
        )
        columns.append(FooterColumn(title=title, links=links))
    return FooterConfig(
        style=_parse_enum(
            FooterStyle,
            data.get("style"),
            "themeConfig.footer.style",
            default=FooterStyle.LIGHT,
        ),
        columns=tuple(columns),
        copyright=_optional_str(data.get("copyright")),
    )


def _build_footer_link(entry: object, where: str) -> FooterLink:
    data = _require_mapping(entry, f"{where} link", allow_none=False)
    label = _require_str(data, "label", f"{where} link")
    match _optional_str(data.get("to")), _optional_str(data.get("href")):
        case str() as target, None:
            return FooterLink(label=label, target=target, external=False)
        case None, str() as target:
            return FooterLink(label=label, target=target, external=True)
        case _:
            msg = f"{where} link '{label}' must declare exactly one of 'to' or 'href'"
            raise ValidationError(ValidationKind.INVALID_OPTION, msg)


def _build_prism(payload: object) -> PrismConfig:
    data = _require_mapping(payload, "themeConfig.prism")
    base = PrismConfig()
    return PrismConfig(
        theme=_optional_str(data.get("theme")) or base.theme,
        dark_theme=_optional_str(data.get("darkTheme")) or base.dark_theme,
        additional_languages=_str_tuple(
            data.get("additionalLanguages"), "themeConfig.prism.additionalLanguages"
        ),
    )


def _build_search(payload: object) -> SearchConfig:
    where = "themeConfig.algolia"
    data = _require_mapping(payload, where, allow_none=False)
    return SearchConfig(
        app_id=_require_str(data, "appId", where),
        api_key=_require_str(data, "apiKey", where),
        index_name=_require_str(data, "indexName", where),
        contextual_search=_require_bool(
            data.get("contextualSearch"), f"{where}.contextualSearch", default=True
        ),
    )


def _check_navbar_sidebars(
    navbar: NavbarConfig, sidebars: cabc.Mapping[str, SidebarTree]
) -> None:
    for item in navbar.items:
        if item.sidebar_id is not None and item.sidebar_id not in sidebars:
            known = ", ".join(sidebars) or "none"
            msg = (
                f"navbar item '{item.label}' opens sidebar '{item.sidebar_id}', "
                f"which is not declared (known: {known})"
            )
            raise ValidationError(ValidationKind.UNKNOWN_SIDEBAR, msg)


__all__ = [
    "ConflictingOptionsError",
    "SiteConfigComposer",
    "compose_site_config",
]

"""Serialize the composed site descriptor for the static-site generator.

The generator reads plain JSON shaped like its own configuration file
(camelCase keys, nested ``themeConfig``), so the immutable records are
projected back to mappings before encoding. Encoding is deterministic: the same
descriptor always produces the same bytes, with keys in declaration order.

Examples
--------
>>> from pathlib import Path
>>> from kuve_pages.config import load_site_config
>>> site = load_site_config(Path("config/site.yaml"))  # doctest: +SKIP
>>> write_descriptor(site, Path("build/config"))  # doctest: +SKIP
[PosixPath('build/config/site.json'), PosixPath('build/config/sidebars.json')]
"""

from __future__ import annotations

import typing as typ

import msgspec.json as msgspec_json

from .config import Category, DocRef, DocsPresetOptions

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path

    from .config import (
        FooterConfig,
        NavbarConfig,
        PresetConfig,
        SidebarItem,
        SidebarTree,
        SiteConfig,
        ThemeConfig,
    )

SITE_DESCRIPTOR_NAME = "site.json"
SIDEBARS_DESCRIPTOR_NAME = "sidebars.json"


def _compact(mapping: dict[str, typ.Any]) -> dict[str, typ.Any]:
    """Drop ``None`` values so optional fields are simply omitted."""
    return {key: value for key, value in mapping.items() if value is not None}


def sidebar_item_to_mapping(item: SidebarItem) -> str | dict[str, typ.Any]:
    """Project a sidebar item back to its declarative form."""
    match item:
        case DocRef(id=doc_id):
            return doc_id
        case Category(label=label, collapsed=collapsed, items=items):
            return {
                "type": "category",
                "label": label,
                "collapsed": collapsed,
                "items": [sidebar_item_to_mapping(child) for child in items],
            }
    msg = f"Unsupported sidebar item: {item!r}"
    raise TypeError(msg)


def sidebars_to_mapping(
    sidebars: cabc.Mapping[str, SidebarTree],
) -> dict[str, list[str | dict[str, typ.Any]]]:
    """Return ``{sidebar_id: [items...]}`` in declaration order."""
    return {
        name: [sidebar_item_to_mapping(item) for item in tree.items]
        for name, tree in sidebars.items()
    }


def _preset_to_entry(
    preset: PresetConfig, *, sidebar_path: str | None = None
) -> list[typ.Any]:
    """Return ``[name, options]``; ``sidebar_path`` overrides the docs one."""
    options: dict[str, typ.Any] = {}
    if not preset.docs_enabled:
        options["docs"] = False
    elif preset.docs is not None or sidebar_path is not None:
        docs = preset.docs or DocsPresetOptions()
        options["docs"] = _compact(
            {
                "sidebarPath": sidebar_path or docs.sidebar_path,
                "editUrl": docs.edit_url,
            }
        )
    if preset.blog_enabled is not None:
        options["blog"] = preset.blog_enabled
    if preset.theme is not None:
        options["theme"] = {"customCss": list(preset.theme.custom_css)}
    return [preset.name, options]


def _navbar_to_mapping(navbar: NavbarConfig) -> dict[str, typ.Any]:
    items = [
        _compact(
            {
                "type": None if item.item_type == "default" else item.item_type,
                "sidebarId": item.sidebar_id,
                "label": item.label,
                "href": item.href,
                "to": item.to,
                "position": str(item.position),
            }
        )
        for item in navbar.items
    ]
    logo = (
        {"alt": navbar.logo.alt, "src": navbar.logo.src} if navbar.logo else None
    )
    return _compact({"title": navbar.title, "logo": logo, "items": items})


def _footer_to_mapping(footer: FooterConfig) -> dict[str, typ.Any]:
    columns = [
        {
            "title": column.title,
            "items": [
                {"label": link.label, ("href" if link.external else "to"): link.target}
                for link in column.links
            ],
        }
        for column in footer.columns
    ]
    return _compact(
        {"style": str(footer.style), "links": columns, "copyright": footer.copyright}
    )


def _theme_to_mapping(theme: ThemeConfig) -> dict[str, typ.Any]:
    search = None
    if theme.search is not None:
        search = {
            "appId": theme.search.app_id,
            "apiKey": theme.search.api_key,
            "indexName": theme.search.index_name,
            "contextualSearch": theme.search.contextual_search,
        }
    return _compact(
        {
            "image": theme.image,
            "navbar": _navbar_to_mapping(theme.navbar),
            "footer": _footer_to_mapping(theme.footer),
            "prism": {
                "theme": theme.prism.theme,
                "darkTheme": theme.prism.dark_theme,
                "additionalLanguages": list(theme.prism.additional_languages),
            },
            "algolia": search,
        }
    )


def _sidebar_owner(site: SiteConfig) -> int | None:
    """Index of the preset whose docs plugin receives the sidebars."""
    if not site.sidebars:
        return None
    for index, preset in enumerate(site.presets):
        if preset.docs_enabled and preset.docs is not None:
            return index
    for index, preset in enumerate(site.presets):
        if preset.docs_enabled:
            return index
    return None


def site_to_mapping(
    site: SiteConfig, *, sidebar_path: str | None = None
) -> dict[str, typ.Any]:
    """Project the site descriptor to the generator's configuration shape.

    When ``sidebar_path`` is given it replaces the ``sidebarPath`` of the
    preset that owns the sidebars, so the descriptor can point at the exported
    sidebar file instead of the source YAML.
    """
    owner = _sidebar_owner(site) if sidebar_path is not None else None
    presets = [
        _preset_to_entry(
            preset, sidebar_path=sidebar_path if index == owner else None
        )
        for index, preset in enumerate(site.presets)
    ]
    return _compact(
        {
            "title": site.title,
            "tagline": site.tagline,
            "favicon": site.favicon,
            "url": site.url,
            "baseUrl": site.base_url,
            "organizationName": site.organization_name,
            "projectName": site.project_name,
            "onBrokenLinks": str(site.on_broken_links),
            "onBrokenMarkdownLinks": str(site.on_broken_markdown_links),
            "i18n": {
                "defaultLocale": site.i18n.default_locale,
                "locales": list(site.i18n.locales),
            },
            "presets": presets,
            "themeConfig": _theme_to_mapping(site.theme),
        }
    )


def _encode(payload: object) -> bytes:
    return msgspec_json.format(msgspec_json.encode(payload), indent=2) + b"\n"


def encode_descriptor(site: SiteConfig, *, sidebar_path: str | None = None) -> bytes:
    """Return the site descriptor as indented JSON bytes."""
    return _encode(site_to_mapping(site, sidebar_path=sidebar_path))


def encode_sidebars(sidebars: cabc.Mapping[str, SidebarTree]) -> bytes:
    """Return the sidebar trees as indented JSON bytes."""
    return _encode(sidebars_to_mapping(sidebars))


def write_descriptor(site: SiteConfig, output_dir: Path) -> list[Path]:
    """Write ``site.json`` and ``sidebars.json`` under ``output_dir``.

    The docs preset in ``site.json`` references the written ``sidebars.json``.
    """
    output_dir.mkdir(parents=True, exist_ok=True)
    site_path = output_dir / SITE_DESCRIPTOR_NAME
    site_path.write_bytes(
        encode_descriptor(site, sidebar_path=f"./{SIDEBARS_DESCRIPTOR_NAME}")
    )
    sidebars_path = output_dir / SIDEBARS_DESCRIPTOR_NAME
    sidebars_path.write_bytes(encode_sidebars(site.sidebars))
    return [site_path, sidebars_path]


__all__ = [
    "SIDEBARS_DESCRIPTOR_NAME",
    "SITE_DESCRIPTOR_NAME",
    "encode_descriptor",
    "encode_sidebars",
    "sidebar_item_to_mapping",
    "sidebars_to_mapping",
    "site_to_mapping",
    "write_descriptor",
]

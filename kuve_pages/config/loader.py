"""Load site configuration YAML into typed dataclasses."""

from __future__ import annotations

import logging
import typing as typ
from pathlib import Path

from ruamel.yaml import YAML

from .composer import SiteConfigComposer
from .features import build_feature_records
from .sidebar import build_sidebars

if typ.TYPE_CHECKING:
    from .models import FeatureRecord, SiteConfig
    from .sidebar import SidebarTree

logger = logging.getLogger(__name__)


def _read_yaml_mapping(path: Path) -> dict[str, typ.Any]:
    """Read a YAML 1.2 document whose top level must be a mapping."""
    if not path.exists():
        msg = f"Configuration file '{path}' not found."
        raise FileNotFoundError(msg)

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    with path.open("r", encoding="utf-8") as handle:
        loaded = loader.load(handle) or {}
    if not isinstance(loaded, dict):
        msg = f"Top-level YAML structure of '{path}' must be a mapping."
        raise TypeError(msg)
    return dict(loaded)


def load_fragments(paths: typ.Iterable[Path]) -> list[tuple[str, dict[str, typ.Any]]]:
    """Read each file as one named configuration fragment.

    Fragments are named after the file stem (``config/theme.yaml`` becomes
    ``theme``); when two files share a stem the full path is used instead.
    """
    fragments: list[tuple[str, dict[str, typ.Any]]] = []
    names: set[str] = set()
    for path in paths:
        name = path.stem if path.stem not in names else str(path)
        names.add(name)
        fragments.append((name, _read_yaml_mapping(path)))
        logger.debug("loaded configuration fragment %s from %s", name, path)
    return fragments


def load_sidebars(path: Path) -> dict[str, SidebarTree]:
    """Load and validate every sidebar declared in ``path``.

    Raises
    ------
    FileNotFoundError
        If the sidebar file does not exist.
    TypeError
        If the top-level YAML structure is not a mapping.
    ValidationError
        If any tree is malformed, declares an empty category, or repeats a
        document id.
    """
    return build_sidebars(_read_yaml_mapping(path))


def load_site_config(path: Path, *extra: Path) -> SiteConfig:
    """Load, merge and validate the site configuration.

    Parameters
    ----------
    path : Path
        Primary configuration file (for example ``config/site.yaml``). The
        docs preset ``sidebarPath`` is resolved relative to its directory.
    *extra : Path
        Further fragment files (for example ``config/theme.yaml``) whose keys
        must not overlap with the primary file or with each other.

    Returns
    -------
    SiteConfig
        Composed descriptor including the sidebars referenced by the docs
        preset.

    Raises
    ------
    FileNotFoundError
        If a configuration or sidebar file does not exist.
    TypeError
        If a file's top-level YAML structure is not a mapping.
    ValidationError
        If the fragments conflict or any field fails validation.
    YAMLError
        If the YAML content cannot be parsed by the underlying loader.

    Examples
    --------
    >>> from pathlib import Path
    >>> from kuve_pages.config import load_site_config
    >>> site = load_site_config(Path("config/site.yaml"))  # doctest: +SKIP
    >>> site.get_sidebar("tutorialSidebar").first_doc()  # doctest: +SKIP
    'intro'
    """
    composer = SiteConfigComposer()
    for name, fragment in load_fragments((path, *extra)):
        composer.add_fragment(name, fragment)

    sidebar_path = _find_sidebar_path(composer, base_dir=path.parent)
    sidebars = load_sidebars(sidebar_path) if sidebar_path else None
    return composer.compose(sidebars=sidebars)


def _find_sidebar_path(composer: SiteConfigComposer, *, base_dir: Path) -> Path | None:
    """Return the sidebar file named by the composed docs preset, if any."""
    docs = composer.compose().docs_preset
    if docs is None or not docs.sidebar_path:
        return None
    sidebar_path = Path(docs.sidebar_path)
    if not sidebar_path.is_absolute():
        sidebar_path = base_dir / sidebar_path
    return sidebar_path


def load_feature_records(path: Path) -> tuple[FeatureRecord, ...]:
    """Load the ``features`` list used by the homepage summary section."""
    raw = _read_yaml_mapping(path)
    return build_feature_records(raw.get("features"))


__all__ = [
    "load_feature_records",
    "load_fragments",
    "load_sidebars",
    "load_site_config",
]

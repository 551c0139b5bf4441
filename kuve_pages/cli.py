"""Cyclopts CLI entrypoint for validating and exporting the Kuve docs site config.

The ``pages`` console script defined here loads the YAML configuration under
``config/``, validates the sidebars and the merged site descriptor, and writes
the artefacts the static-site generator consumes. Typical usage involves
running ``pages check`` locally or in CI before a build, and ``pages export``
to hand the generator its ``site.json`` and ``sidebars.json``.

Examples
--------
Validate the default configuration and resolve sidebar documents on disk:

>>> from kuve_pages.cli import app
>>> app(["check", "--docs-dir", "docs"])  # doctest: +SKIP

Export the descriptor into a custom directory:

>>> app(["export", "--output-dir", "dist/config"])  # doctest: +SKIP
"""

from __future__ import annotations

import logging
import sys
import typing as typ
from pathlib import Path

import cyclopts
from cyclopts import App, Parameter
from ruamel.yaml.error import YAMLError

from .config import (
    SiteConfigError,
    load_feature_records,
    load_site_config,
)
from .export import write_descriptor
from .features import FeatureListRenderer
from .links import LinkPolicyViolation, check_doc_refs, discover_doc_ids

DEFAULT_CONFIG = Path("config/site.yaml")
DEFAULT_FRAGMENTS = (Path("config/theme.yaml"),)
DEFAULT_FEATURES = Path("config/features.yaml")
DEFAULT_OUTPUT_DIR = Path("build/config")
DEFAULT_FEATURES_OUTPUT = Path("build/features.html")
LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"

app = App(name="pages", config=cyclopts.config.Env("INPUT_", command=False))  # type: ignore[unknown-argument]


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:  # pragma: no cover - fallback for different roots
            return str(path)
    return str(path)


def _configure_logging(*, verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
        force=True,
    )


@app.command(help="Validate the site configuration and sidebars.")
def check(
    *,
    config: typ.Annotated[
        Path, Parameter(help="Path to site config", env_var="INPUT_CONFIG")
    ] = DEFAULT_CONFIG,
    fragment: typ.Annotated[
        tuple[Path, ...],
        Parameter(help="Additional config fragment file (repeatable)"),
    ] = DEFAULT_FRAGMENTS,
    docs_dir: typ.Annotated[
        Path | None,
        Parameter(
            help="Resolve sidebar documents against this directory",
            env_var="INPUT_DOCS_DIR",
        ),
    ] = None,
    verbose: typ.Annotated[
        bool, Parameter(name=["--verbose", "-v"], help="Verbose output")
    ] = False,
) -> None:
    """Validate the configuration and print a short summary.

    Parameters
    ----------
    config : Path, optional
        Path to the primary ``site.yaml`` file (overridable via
        ``INPUT_CONFIG``).
    fragment : tuple[Path, ...], optional
        Further fragment files merged with ``config`` (``config/theme.yaml`` by
        default); their fields must not overlap.
    docs_dir : Path or None, optional
        When given, every sidebar document id must exist below this directory;
        misses are handled according to ``onBrokenLinks``.
    verbose : bool, optional
        Emit debug logging.

    Raises
    ------
    ValidationError
        If the sidebars or the merged configuration are invalid.
    LinkPolicyViolation
        If a sidebar document is missing and ``onBrokenLinks`` is ``throw``.
    """
    _configure_logging(verbose=verbose)
    site = load_site_config(config, *fragment)
    print(f"site '{site.title}' at {site.url}{site.base_url}")
    for name, tree in site.sidebars.items():
        count = sum(1 for _ in tree.doc_ids())
        print(f"sidebar {name}: {count} documents")
    if docs_dir is not None:
        broken = check_doc_refs(site, discover_doc_ids(docs_dir))
        if broken:
            print(f"{len(broken)} broken document reference(s)")
        else:
            print("all sidebar documents resolved")


@app.command(help="Write the site and sidebar descriptors for the generator.")
def export(
    *,
    config: typ.Annotated[
        Path, Parameter(help="Path to site config", env_var="INPUT_CONFIG")
    ] = DEFAULT_CONFIG,
    fragment: typ.Annotated[
        tuple[Path, ...],
        Parameter(help="Additional config fragment file (repeatable)"),
    ] = DEFAULT_FRAGMENTS,
    output_dir: typ.Annotated[
        Path,
        Parameter(
            help="Directory receiving the JSON files", env_var="INPUT_OUTPUT_DIR"
        ),
    ] = DEFAULT_OUTPUT_DIR,
    verbose: typ.Annotated[
        bool, Parameter(name=["--verbose", "-v"], help="Verbose output")
    ] = False,
) -> None:
    """Compose the configuration and write ``site.json`` and ``sidebars.json``."""
    _configure_logging(verbose=verbose)
    site = load_site_config(config, *fragment)
    for path in write_descriptor(site, output_dir):
        print(f"wrote {_format_path(path)}")


@app.command(help="Render the homepage feature section.")
def features(
    *,
    source: typ.Annotated[
        Path, Parameter(help="Path to features YAML", env_var="INPUT_FEATURES")
    ] = DEFAULT_FEATURES,
    output: typ.Annotated[
        Path, Parameter(help="Output HTML fragment", env_var="INPUT_OUTPUT")
    ] = DEFAULT_FEATURES_OUTPUT,
) -> None:
    """Render the feature cards declared in ``source`` to ``output``."""
    records = load_feature_records(source)
    written = FeatureListRenderer().write(records, output)
    print(f"wrote {_format_path(written)}")


def main() -> None:
    """Invoke the Cyclopts application that powers the ``pages`` console command.

    Validation failures, thrown link-policy violations and unreadable YAML
    files are fatal: the message is printed to stderr and the process exits
    with status 1.

    Examples
    --------
    >>> main()  # doctest: +SKIP
    """
    try:
        app()
    except (
        SiteConfigError,
        LinkPolicyViolation,
        FileNotFoundError,
        TypeError,
        YAMLError,
    ) as exc:
        print(f"error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()

"""Homepage feature section rendering.

The homepage summary section lists a handful of feature records, each shown as
a card with an icon, a heading and a short description. This module projects
those records into :class:`FeatureCard` nodes (one per record, in input order)
and renders them through the ``features.jinja`` template.

Typical usage mirrors the build pipeline:

>>> from pathlib import Path
>>> from kuve_pages.config import load_feature_records
>>> records = load_feature_records(Path("config/features.yaml"))  # doctest: +SKIP
>>> html = FeatureListRenderer().to_html(records)  # doctest: +SKIP

Descriptions are inline rich text; backtick code spans and emphasis are
converted with Python-Markdown. The renderer has no state beyond its Jinja
environment and performs no I/O other than reading the template.
"""

from __future__ import annotations

import dataclasses as dc
import typing as typ
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape
from markdown import markdown

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from .config import FeatureRecord


@dc.dataclass(frozen=True, slots=True)
class FeatureCard:
    """Renderable node for one feature record.

    Attributes
    ----------
    title : str
        Heading text, carried verbatim from the record.
    description : str
        Source rich text, carried verbatim from the record.
    icon : str
        Path of the visual asset, carried verbatim from the record.
    description_html : str
        ``description`` rendered to HTML.
    """

    title: str
    description: str
    icon: str
    description_html: str


class FeatureListRenderer:
    """Project feature records into cards and render the feature section."""

    def __init__(self, *, templates_dir: Path | None = None) -> None:
        """Initialize the renderer and its Jinja environment.

        Parameters
        ----------
        templates_dir : Path, optional
            Directory containing ``features.jinja``. Defaults to
            ``kuve_pages/templates``.
        """
        self.templates_dir = templates_dir or Path(__file__).parent / "templates"
        self.env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=select_autoescape(["html", "xml", "jinja"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.template = self.env.get_template("features.jinja")

    def render(self, records: cabc.Iterable[FeatureRecord]) -> list[FeatureCard]:
        """Return one card per record, preserving input order."""
        return [
            FeatureCard(
                title=record.title,
                description=record.description,
                icon=record.icon,
                description_html=_render_description(record.description),
            )
            for record in records
        ]

    def to_html(self, records: cabc.Iterable[FeatureRecord]) -> str:
        """Render the feature section HTML fragment, ending with a newline."""
        html = self.template.render(cards=self.render(records))
        if not html.endswith("\n"):
            html += "\n"
        return html

    def write(self, records: cabc.Iterable[FeatureRecord], output_path: Path) -> Path:
        """Render the feature section and write it to ``output_path``."""
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(self.to_html(records), encoding="utf-8")
        return output_path


def _render_description(text: str) -> str:
    normalized = text.strip()
    if not normalized:
        return ""
    return markdown(normalized, output_format="html")


__all__ = ["FeatureCard", "FeatureListRenderer"]

"""Feature-record builders for the homepage summary section."""

from __future__ import annotations

import typing as typ

from .models import FeatureRecord, ValidationError, ValidationKind


def build_feature_records(
    entries: list[typ.Mapping[str, object]] | None,
) -> tuple[FeatureRecord, ...]:
    """Build feature records from declared mappings, preserving their order."""
    records: list[FeatureRecord] = []
    match entries:
        case list() as items:
            iterable = items
        case None:
            return ()
        case _:
            msg = "Homepage features must be a list."
            raise ValidationError(ValidationKind.INVALID_OPTION, msg)
    for index, entry in enumerate(iterable):
        match entry:
            case {"title": title, "description": description, "icon": icon}:
                pass
            case _:
                msg = (
                    f"Feature #{index + 1} requires 'title', 'description', "
                    "and 'icon'."
                )
                raise ValidationError(ValidationKind.MISSING_OPTION, msg)
        if not (title and description and icon):
            msg = f"Feature #{index + 1} has an empty 'title', 'description' or 'icon'."
            raise ValidationError(ValidationKind.MISSING_OPTION, msg)
        records.append(
            FeatureRecord(
                title=str(title),
                description=str(description),
                icon=str(icon),
            )
        )
    return tuple(records)


__all__ = ["build_feature_records"]

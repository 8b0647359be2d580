"""Conversion of Tag Manager API resources into the shapes tools return."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping

from tagserver.types import CreatedTransformation, TransformationInfo


def _f(name: str, *, omitempty: bool = False, **kwargs: Any) -> Any:
    return field(metadata={"json": name, "omitempty": omitempty}, **kwargs)


def _str(item: Mapping[str, Any], key: str) -> str:
    value = item.get(key)
    return "" if value is None else str(value)


def _present(item: Mapping[str, Any], key: str) -> Any:
    """The value under ``key`` when it is a non-empty list, else None."""
    value = item.get(key)
    if isinstance(value, (list, tuple)) and len(value) > 0:
        return list(value)
    return None


@dataclass
class Trigger:
    """A trimmed-down trigger as returned by the list and get tools."""

    trigger_id: str = _f("triggerId", default="")
    name: str = _f("name", default="")
    type: str = _f("type", default="")
    path: str = _f("path", default="")
    parent_folder_id: str = _f("parentFolderId", omitempty=True, default="")
    notes: str = _f("notes", omitempty=True, default="")
    filter: Any = _f("filter", omitempty=True, default=None)
    auto_event_filter: Any = _f("autoEventFilter", omitempty=True, default=None)
    custom_event_filter: Any = _f("customEventFilter", omitempty=True, default=None)
    parameter: Any = _f("parameter", omitempty=True, default=None)


@dataclass
class Variable:
    """A trimmed-down variable as returned by the list and get tools."""

    variable_id: str = _f("variableId", default="")
    name: str = _f("name", default="")
    type: str = _f("type", default="")
    parameter: Any = _f("parameter", omitempty=True, default=None)
    path: str = _f("path", default="")


@dataclass
class Workspace:
    """A trimmed-down workspace as returned by the list tool."""

    workspace_id: str = _f("workspaceId", default="")
    name: str = _f("name", default="")
    description: str = _f("description", omitempty=True, default="")
    path: str = _f("path", default="")


def _to_trigger(item: Mapping[str, Any]) -> Trigger:
    return Trigger(
        trigger_id=_str(item, "triggerId"),
        name=_str(item, "name"),
        type=_str(item, "type"),
        path=_str(item, "path"),
        parent_folder_id=_str(item, "parentFolderId"),
        notes=_str(item, "notes"),
        filter=_present(item, "filter"),
        auto_event_filter=_present(item, "autoEventFilter"),
        custom_event_filter=_present(item, "customEventFilter"),
        parameter=_present(item, "parameter"),
    )


def to_triggers(items: Iterable[Mapping[str, Any]] | None) -> list[Trigger]:
    """Convert API trigger resources, keeping filters only when non-empty."""
    return [_to_trigger(item) for item in items or []]


def _to_variable(item: Mapping[str, Any]) -> Variable:
    return Variable(
        variable_id=_str(item, "variableId"),
        name=_str(item, "name"),
        type=_str(item, "type"),
        parameter=_present(item, "parameter"),
        path=_str(item, "path"),
    )


def to_variables(items: Iterable[Mapping[str, Any]] | None) -> list[Variable]:
    """Convert API variable resources."""
    return [_to_variable(item) for item in items or []]


def to_workspaces(items: Iterable[Mapping[str, Any]] | None) -> list[Workspace]:
    """Convert API workspace resources."""
    return [
        Workspace(
            workspace_id=_str(item, "workspaceId"),
            name=_str(item, "name"),
            description=_str(item, "description"),
            path=_str(item, "path"),
        )
        for item in items or []
    ]


def to_transformation(item: Mapping[str, Any]) -> TransformationInfo:
    """Convert one API transformation resource."""
    return TransformationInfo(
        transformation_id=_str(item, "transformationId"),
        name=_str(item, "name"),
        type=_str(item, "type"),
        parameter=_present(item, "parameter"),
        notes=_str(item, "notes"),
        parent_folder_id=_str(item, "parentFolderId"),
        path=_str(item, "path"),
        fingerprint=_str(item, "fingerprint"),
    )


def to_transformations(
    items: Iterable[Mapping[str, Any]] | None,
) -> list[TransformationInfo]:
    """Convert API transformation resources."""
    return [to_transformation(item) for item in items or []]


def created_transformation(item: Mapping[str, Any]) -> CreatedTransformation:
    """Summarise a transformation returned by a create or update call."""
    return CreatedTransformation(
        transformation_id=_str(item, "transformationId"),
        name=_str(item, "name"),
        type=_str(item, "type"),
        path=_str(item, "path"),
        fingerprint=_str(item, "fingerprint"),
    )
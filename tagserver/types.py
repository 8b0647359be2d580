"""Data shapes exchanged with the Tag Manager API and the tool layer."""

from __future__ import annotations

import json
from dataclasses import dataclass, field, fields, is_dataclass
from typing import Any, Mapping


def _json(name: str | None, *, omitempty: bool = False, **kwargs: Any) -> Any:
    """Declare a dataclass field with its JSON name and omission rule.

    A name of None keeps the field out of the JSON form entirely.
    """
    return field(metadata={"json": name, "omitempty": omitempty}, **kwargs)


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, bool):
        return not value
    if isinstance(value, (int, float)):
        return value == 0
    if isinstance(value, (str, list, tuple, dict)):
        return len(value) == 0
    return False


def to_json(obj: Any) -> Any:
    """Convert a dataclass (or nested containers of them) to JSON-ready data."""
    if is_dataclass(obj) and not isinstance(obj, type):
        out: dict[str, Any] = {}
        for f in fields(obj):
            name = f.metadata.get("json", f.name)
            if name is None:
                continue
            value = getattr(obj, f.name)
            if f.metadata.get("omitempty") and _is_empty(value):
                continue
            out[name] = to_json(value)
        return out
    if isinstance(obj, (list, tuple)):
        return [to_json(item) for item in obj]
    if isinstance(obj, dict):
        return {key: to_json(value) for key, value in obj.items()}
    return obj


def _require_mapping(data: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise ValueError(f"{what} must be a JSON object, got {type(data).__name__}")
    return data


def _get_str(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError(f"field {key!r} must be a string")
    return value


def _get_bool(data: Mapping[str, Any], key: str) -> bool:
    value = data.get(key)
    if value is None:
        return False
    if not isinstance(value, bool):
        raise ValueError(f"field {key!r} must be a boolean")
    return value


def _get_list(data: Mapping[str, Any], key: str) -> list[Any]:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError(f"field {key!r} must be an array")
    return value


@dataclass
class Parameter:
    """A Tag Manager parameter: template, boolean, integer, list or map."""

    type: str = _json("type", default="")
    key: str = _json("key", default="")
    value: str = _json("value", omitempty=True, default="")
    list_: list[Parameter] = _json("list", omitempty=True, default_factory=lambda: [])
    map_: list[Parameter] = _json("map", omitempty=True, default_factory=lambda: [])

    @classmethod
    def from_dict(cls, data: Any) -> Parameter:
        if data is None:
            return cls()
        data = _require_mapping(data, "parameter")
        return cls(
            type=_get_str(data, "type"),
            key=_get_str(data, "key"),
            value=_get_str(data, "value"),
            list_=[cls.from_dict(item) for item in _get_list(data, "list")],
            map_=[cls.from_dict(item) for item in _get_list(data, "map")],
        )

    def to_dict(self) -> dict[str, Any]:
        return to_json(self)


@dataclass
class SetupTagInput:
    """A setup tag reference used for tag sequencing."""

    tag_name: str = _json("tagName", default="")
    stop_on_setup_failure: bool = _json("stopOnSetupFailure", omitempty=True, default=False)

    @classmethod
    def from_dict(cls, data: Any) -> SetupTagInput:
        if data is None:
            return cls()
        data = _require_mapping(data, "setup tag")
        return cls(
            tag_name=_get_str(data, "tagName"),
            stop_on_setup_failure=_get_bool(data, "stopOnSetupFailure"),
        )


@dataclass
class TeardownTagInput:
    """A teardown tag reference used for tag sequencing."""

    tag_name: str = _json("tagName", default="")
    stop_teardown_on_failure: bool = _json(
        "stopTeardownOnFailure", omitempty=True, default=False
    )

    @classmethod
    def from_dict(cls, data: Any) -> TeardownTagInput:
        if data is None:
            return cls()
        data = _require_mapping(data, "teardown tag")
        return cls(
            tag_name=_get_str(data, "tagName"),
            stop_teardown_on_failure=_get_bool(data, "stopTeardownOnFailure"),
        )


@dataclass
class TagInput:
    """Input for creating or updating a tag.

    The ``has_*`` and ``clear_*`` flags record which fields were given
    explicitly; they never appear in the JSON form.
    """

    name: str = _json("name", default="")
    type: str = _json("type", default="")
    firing_trigger_id: list[str] = _json("firingTriggerId", default_factory=lambda: [])
    blocking_trigger_id: list[str] = _json(
        "blockingTriggerId", omitempty=True, default_factory=lambda: []
    )
    parameter: list[Parameter] = _json("parameter", omitempty=True, default_factory=lambda: [])
    has_parameter: bool = _json(None, default=False)
    notes: str = _json("notes", omitempty=True, default="")
    paused: bool = _json("paused", omitempty=True, default=False)
    has_paused: bool = _json(None, default=False)
    tag_firing_option: str = _json("tagFiringOption", omitempty=True, default="")
    setup_tag: list[SetupTagInput] = _json("setupTag", omitempty=True, default_factory=lambda: [])
    teardown_tag: list[TeardownTagInput] = _json(
        "teardownTag", omitempty=True, default_factory=lambda: []
    )
    has_setup_tag: bool = _json(None, default=False)
    has_teardown_tag: bool = _json(None, default=False)
    clear_setup_tag: bool = _json(None, default=False)
    clear_teardown_tag: bool = _json(None, default=False)
    consent_status: str = _json("consentStatus", omitempty=True, default="")
    consent_types: list[str] = _json("consentTypes", omitempty=True, default_factory=lambda: [])
    has_consent_settings: bool = _json(None, default=False)


@dataclass
class Condition:
    """A trigger filter condition such as equals, contains or matchRegex."""

    type: str = _json("type", default="")
    negate: bool = _json("negate", omitempty=True, default=False)
    parameter: list[Parameter] = _json("parameter", default_factory=lambda: [])

    @classmethod
    def from_dict(cls, data: Any) -> Condition:
        if data is None:
            return cls()
        data = _require_mapping(data, "condition")
        return cls(
            type=_get_str(data, "type"),
            negate=_get_bool(data, "negate"),
            parameter=[Parameter.from_dict(p) for p in _get_list(data, "parameter")],
        )

    def to_dict(self) -> dict[str, Any]:
        return to_json(self)


@dataclass
class TriggerInput:
    """Input for creating or updating a trigger."""

    name: str = _json("name", default="")
    type: str = _json("type", default="")
    filter: list[Condition] = _json("filter", omitempty=True, default_factory=lambda: [])
    auto_event_filter: list[Condition] = _json(
        "autoEventFilter", omitempty=True, default_factory=lambda: []
    )
    custom_event_filter: list[Condition] = _json(
        "customEventFilter", omitempty=True, default_factory=lambda: []
    )
    event_name: Parameter | None = _json("eventName", omitempty=True, default=None)
    parameter: list[Parameter] = _json("parameter", omitempty=True, default_factory=lambda: [])
    notes: str = _json("notes", omitempty=True, default="")


@dataclass
class VariableInput:
    """Input for creating or updating a variable."""

    name: str = _json("name", default="")
    type: str = _json("type", default="")
    parameter: list[Parameter] = _json("parameter", omitempty=True, default_factory=lambda: [])
    notes: str = _json("notes", omitempty=True, default="")


@dataclass
class VersionInput:
    """Input for creating a container version."""

    name: str = _json("name", omitempty=True, default="")
    notes: str = _json("notes", omitempty=True, default="")


@dataclass
class CreatedTag:
    tag_id: str = _json("tagId", default="")
    name: str = _json("name", default="")
    type: str = _json("type", default="")
    path: str = _json("path", default="")
    fingerprint: str = _json("fingerprint", default="")


@dataclass
class CreatedTrigger:
    trigger_id: str = _json("triggerId", default="")
    name: str = _json("name", default="")
    type: str = _json("type", default="")
    path: str = _json("path", default="")
    fingerprint: str = _json("fingerprint", default="")


@dataclass
class CreatedVariable:
    variable_id: str = _json("variableId", default="")
    name: str = _json("name", default="")
    type: str = _json("type", default="")
    path: str = _json("path", default="")
    fingerprint: str = _json("fingerprint", default="")


@dataclass
class CreatedVersion:
    version_id: str = _json("containerVersionId", default="")
    name: str = _json("name", default="")
    path: str = _json("path", default="")


@dataclass
class PublishedVersion:
    version_id: str = _json("containerVersionId", default="")
    name: str = _json("name", default="")
    path: str = _json("path", default="")


@dataclass
class WorkspaceStatus:
    """Whether a workspace has pending changes or merge conflicts."""

    has_changes: bool = _json("hasChanges", default=False)
    has_conflicts: bool = _json("hasConflicts", default=False)
    change_count: int = _json("changeCount", default=0)
    conflict_count: int = _json("conflictCount", default=0)

    @classmethod
    def from_response(cls, response: Mapping[str, Any] | None) -> WorkspaceStatus:
        """Summarise a workspace status API response."""
        response = response or {}
        changes = response.get("workspaceChange") or []
        conflicts = response.get("mergeConflict") or []
        return cls(
            has_changes=len(changes) > 0,
            has_conflicts=len(conflicts) > 0,
            change_count=len(changes),
            conflict_count=len(conflicts),
        )


@dataclass
class BuiltInVariable:
    name: str = _json("name", default="")
    type: str = _json("type", default="")
    path: str = _json("path", default="")


@dataclass
class ClientInfo:
    """A server-side container client."""

    client_id: str = _json("clientId", default="")
    name: str = _json("name", default="")
    type: str = _json("type", default="")
    priority: int = _json("priority", omitempty=True, default=0)
    parameter: Any = _json("parameter", omitempty=True, default=None)
    notes: str = _json("notes", omitempty=True, default="")
    parent_folder_id: str = _json("parentFolderId", omitempty=True, default="")
    path: str = _json("path", default="")
    fingerprint: str = _json("fingerprint", default="")


@dataclass
class ClientInput:
    name: str = _json("name", default="")
    type: str = _json("type", default="")
    priority: int = _json("priority", omitempty=True, default=0)
    parameter: list[Parameter] = _json("parameter", omitempty=True, default_factory=lambda: [])
    notes: str = _json("notes", omitempty=True, default="")


@dataclass
class CreatedClient:
    client_id: str = _json("clientId", default="")
    name: str = _json("name", default="")
    type: str = _json("type", default="")
    path: str = _json("path", default="")
    fingerprint: str = _json("fingerprint", default="")


@dataclass
class TransformationInfo:
    """A server-side container transformation."""

    transformation_id: str = _json("transformationId", default="")
    name: str = _json("name", default="")
    type: str = _json("type", default="")
    parameter: Any = _json("parameter", omitempty=True, default=None)
    notes: str = _json("notes", omitempty=True, default="")
    parent_folder_id: str = _json("parentFolderId", omitempty=True, default="")
    path: str = _json("path", default="")
    fingerprint: str = _json("fingerprint", default="")


@dataclass
class TransformationInput:
    name: str = _json("name", default="")
    type: str = _json("type", default="")
    parameter: list[Parameter] = _json("parameter", omitempty=True, default_factory=lambda: [])
    notes: str = _json("notes", omitempty=True, default="")


@dataclass
class CreatedTransformation:
    transformation_id: str = _json("transformationId", default="")
    name: str = _json("name", default="")
    type: str = _json("type", omitempty=True, default="")
    path: str = _json("path", default="")
    fingerprint: str = _json("fingerprint", default="")


def _parse_array(text: str, what: str) -> list[Any]:
    data = json.loads(text)
    if data is None:
        return []
    if not isinstance(data, list):
        raise ValueError(f"{what} must be a JSON array")
    return data


def parse_parameters(text: str) -> list[Parameter]:
    """Parse a JSON array of parameters; raises ValueError on bad input."""
    return [Parameter.from_dict(item) for item in _parse_array(text, "parameters")]


def parse_conditions(text: str) -> list[Condition]:
    """Parse a JSON array of filter conditions; raises ValueError on bad input."""
    return [Condition.from_dict(item) for item in _parse_array(text, "conditions")]
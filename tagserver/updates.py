"""Building variable, client and transformation updates, and version checks."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from tagserver.types import (
    ClientInput,
    Parameter,
    PublishedVersion,
    TransformationInput,
    VariableInput,
    WorkspaceStatus,
    parse_parameters,
)
from tagserver.validation import (
    ValidationError,
    validate_client_input,
    validate_transformation_input,
)

VARIABLE_UPDATED = "Variable updated successfully"
CLIENT_UPDATED = "Client updated successfully"
TRANSFORMATION_UPDATED = "Transformation updated successfully"
VERSION_CREATED = "Version created successfully. Use publish_version to make it live."
NO_CHANGES = "No changes in workspace to create version from"
PUBLISH_NEEDS_CONFIRM = (
    "Publishing requires confirm: true. "
    "WARNING: This will make the version live on your website."
)


@dataclass(frozen=True)
class VersionCheck:
    """Outcome of a pre-flight check: whether to go ahead, and why not."""

    proceed: bool
    message: str = ""


def _text(args: Mapping[str, Any], key: str) -> str:
    value = args.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValidationError(f"{key} must be a string")
    return value


def _priority(args: Mapping[str, Any]) -> int:
    value = args.get("priority")
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError("priority must be an integer")
    return value


def _parameters(args: Mapping[str, Any], key: str, *, named: bool) -> list[Parameter]:
    text = _text(args, key)
    if not text:
        return []
    if not named:
        return parse_parameters(text)
    try:
        return parse_parameters(text)
    except ValueError as exc:
        raise ValueError(f"invalid {key}: {exc}") from exc


def build_variable_update(args: Mapping[str, Any]) -> VariableInput:
    """Turn update_variable arguments into a VariableInput."""
    if not _text(args, "variableId"):
        raise ValidationError("variableId is required")
    name = _text(args, "name")
    if not name:
        raise ValidationError("name is required")
    var_type = _text(args, "type")
    if not var_type:
        raise ValidationError("type is required")
    return VariableInput(
        name=name,
        type=var_type,
        parameter=_parameters(args, "parametersJson", named=True),
        notes=_text(args, "notes"),
    )


def build_client_update(args: Mapping[str, Any]) -> ClientInput:
    """Turn update_client arguments into a ClientInput."""
    if not _text(args, "clientId"):
        raise ValidationError("client ID is required")
    name = _text(args, "name")
    client_type = _text(args, "type")
    validate_client_input(name, client_type)
    return ClientInput(
        name=name,
        type=client_type,
        priority=_priority(args),
        parameter=_parameters(args, "parametersJson", named=False),
        notes=_text(args, "notes"),
    )


def build_transformation_update(args: Mapping[str, Any]) -> TransformationInput:
    """Turn update_transformation arguments into a TransformationInput."""
    if not _text(args, "transformationId"):
        raise ValidationError("transformation ID is required")
    name = _text(args, "name")
    transformation_type = _text(args, "type")
    validate_transformation_input(name, transformation_type)
    return TransformationInput(
        name=name,
        type=transformation_type,
        parameter=_parameters(args, "parametersJson", named=False),
        notes=_text(args, "notes"),
    )


def create_version_precheck(status: WorkspaceStatus) -> VersionCheck:
    """Decide whether a version can be created from a workspace in this state."""
    if not status.has_changes:
        return VersionCheck(False, NO_CHANGES)
    if status.has_conflicts:
        return VersionCheck(
            False,
            f"Workspace has {status.conflict_count} conflicts that must be "
            "resolved before creating a version",
        )
    return VersionCheck(True)


def publish_precheck(
    confirm: bool, account_id: str, container_id: str, version_id: str
) -> VersionCheck:
    """Refuse to publish without confirmation; require all identifiers."""
    if not confirm:
        return VersionCheck(False, PUBLISH_NEEDS_CONFIRM)
    if not account_id or not container_id or not version_id:
        raise ValidationError("accountId, containerId, and versionId are required")
    return VersionCheck(True)


def publish_message(version: PublishedVersion) -> str:
    """Message reported after a version has been published."""
    return f"Version {version.version_id} is now LIVE"
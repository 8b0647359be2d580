"""Input checks and path builders for Tag Manager resources."""

from __future__ import annotations

from typing import Iterable

MAX_NAME_BYTES = 256


class ValidationError(ValueError):
    """Raised when tool input fails a required-field or length check."""


def _blank(value: str) -> bool:
    return not value.strip()


def _check_name(name: str, kind: str) -> None:
    if _blank(name):
        raise ValidationError(f"{kind} name is required")
    if len(name.encode("utf-8")) > MAX_NAME_BYTES:
        raise ValidationError(f"{kind} name must be 256 characters or less")


def validate_tag_input(name: str, tag_type: str, firing_trigger_ids: Iterable[str] | None) -> None:
    _check_name(name, "tag")
    if _blank(tag_type):
        raise ValidationError("tag type is required")
    ids = list(firing_trigger_ids or [])
    if not ids:
        raise ValidationError("at least one firing trigger ID is required")
    if any(_blank(trigger_id) for trigger_id in ids):
        raise ValidationError("firing trigger ID cannot be empty")


def validate_trigger_input(name: str, trigger_type: str) -> None:
    _check_name(name, "trigger")
    if _blank(trigger_type):
        raise ValidationError("trigger type is required")


def validate_variable_input(name: str, var_type: str) -> None:
    _check_name(name, "variable")
    if _blank(var_type):
        raise ValidationError("variable type is required")


def validate_workspace_path(account_id: str, container_id: str, workspace_id: str) -> None:
    validate_container_path(account_id, container_id)
    if _blank(workspace_id):
        raise ValidationError("workspace ID is required")


def build_workspace_path(account_id: str, container_id: str, workspace_id: str) -> str:
    return f"accounts/{account_id}/containers/{container_id}/workspaces/{workspace_id}"


def validate_container_path(account_id: str, container_id: str) -> None:
    if _blank(account_id):
        raise ValidationError("account ID is required")
    if _blank(container_id):
        raise ValidationError("container ID is required")


def build_container_path(account_id: str, container_id: str) -> str:
    return f"accounts/{account_id}/containers/{container_id}"


def validate_client_input(name: str, client_type: str) -> None:
    _check_name(name, "client")
    if _blank(client_type):
        raise ValidationError("client type is required")


def validate_transformation_input(name: str, transformation_type: str) -> None:
    _check_name(name, "transformation")
    if _blank(transformation_type):
        raise ValidationError(
            "transformation type is required "
            "(valid values: tf_exclude_params, tf_allow_params, tf_augment_event)"
        )
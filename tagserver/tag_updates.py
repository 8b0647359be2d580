"""Building partial tag updates and trigger updates from tool arguments."""

from __future__ import annotations

import json
from typing import Any, Callable, Iterable, Mapping, TypeVar

from tagserver.types import (
    Condition,
    SetupTagInput,
    TagInput,
    TeardownTagInput,
    TriggerInput,
    parse_conditions,
    parse_parameters,
)
from tagserver.validation import ValidationError, validate_trigger_input

# Trigger types for which the API drops autoEventFilter without complaint.
AUTO_EVENT_FILTER_DROPPED = frozenset({"linkClick", "click", "formSubmission"})

TRIGGER_UPDATED = "Trigger updated successfully"

_T = TypeVar("_T")


def _text(args: Mapping[str, Any], key: str) -> str:
    value = args.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValidationError(f"{key} must be a string")
    return value


def _id_list(args: Mapping[str, Any], key: str) -> list[str]:
    value = args.get(key)
    if value is None:
        return []
    if isinstance(value, str) or not isinstance(value, Iterable):
        raise ValidationError(f"{key} must be an array of strings")
    return [str(item) for item in value]


def _parse_sequence(
    text: str, what: str, convert: Callable[[Any], _T]
) -> list[_T]:
    """Parse a JSON array of sequencing entries, naming the field on failure."""
    try:
        data = json.loads(text)
        if data is None:
            return []
        if not isinstance(data, list):
            raise ValueError("expected a JSON array")
        return [convert(item) for item in data]
    except ValueError as exc:
        raise ValueError(f"invalid {what}: {exc}") from exc


def _parse_named(text: str, what: str, parse: Callable[[str], _T]) -> _T:
    try:
        return parse(text)
    except ValueError as exc:
        raise ValueError(f"invalid {what}: {exc}") from exc


def parse_consent_types(text: str) -> list[str]:
    """Split a comma-separated consent type list, dropping blank entries."""
    if not text:
        return []
    return [part.strip() for part in text.split(",") if part.strip()]


def build_tag_update(args: Mapping[str, Any]) -> TagInput:
    """Turn update_tag arguments into a TagInput that records what was given.

    Fields left out of ``args`` are flagged as absent so the existing values
    on the tag are kept. An empty setup or teardown array asks for the
    sequencing to be cleared.
    """
    if not _text(args, "tagId"):
        raise ValidationError("tag ID is required")

    parameters_json = _text(args, "parametersJson")
    has_parameter = bool(parameters_json)
    parameters = parse_parameters(parameters_json) if has_parameter else []

    setup_json = _text(args, "setupTagJson")
    has_setup = bool(setup_json)
    setup_tags = (
        _parse_sequence(setup_json, "setupTagJson", SetupTagInput.from_dict)
        if has_setup
        else []
    )

    teardown_json = _text(args, "teardownTagJson")
    has_teardown = bool(teardown_json)
    teardown_tags = (
        _parse_sequence(teardown_json, "teardownTagJson", TeardownTagInput.from_dict)
        if has_teardown
        else []
    )

    paused = args.get("paused")
    if paused is not None and not isinstance(paused, bool):
        raise ValidationError("paused must be a boolean")

    consent_status = _text(args, "consentStatus")

    return TagInput(
        name=_text(args, "name"),
        type=_text(args, "type"),
        firing_trigger_id=_id_list(args, "firingTriggerIds"),
        blocking_trigger_id=_id_list(args, "blockingTriggerIds"),
        parameter=parameters,
        has_parameter=has_parameter,
        notes=_text(args, "notes"),
        paused=bool(paused),
        has_paused=paused is not None,
        setup_tag=setup_tags,
        teardown_tag=teardown_tags,
        has_setup_tag=has_setup,
        has_teardown_tag=has_teardown,
        clear_setup_tag=has_setup and not setup_tags,
        clear_teardown_tag=has_teardown and not teardown_tags,
        consent_status=consent_status,
        consent_types=parse_consent_types(_text(args, "consentTypes")),
        has_consent_settings=bool(consent_status),
    )


def remap_auto_event_filter(
    trigger_type: str,
    filter_conditions: list[Condition],
    auto_event_filter: list[Condition],
) -> tuple[list[Condition], list[Condition], str]:
    """Move auto-event conditions into the filter for types that drop them.

    Returns the filter, the auto-event filter and a warning, which is empty
    when nothing was moved.
    """
    if auto_event_filter and trigger_type in AUTO_EVENT_FILTER_DROPPED:
        warning = (
            "Warning: the GTM API silently ignores autoEventFilter for "
            f"{trigger_type} triggers (issue #39). "
            "Conditions were automatically remapped to filter."
        )
        return [*filter_conditions, *auto_event_filter], [], warning
    return list(filter_conditions), list(auto_event_filter), ""


def build_trigger_update(args: Mapping[str, Any]) -> tuple[TriggerInput, str]:
    """Turn update_trigger arguments into a TriggerInput and a remap warning."""
    if not _text(args, "triggerId"):
        raise ValidationError("trigger ID is required")

    name = _text(args, "name")
    trigger_type = _text(args, "type")
    validate_trigger_input(name, trigger_type)

    def conditions(key: str) -> list[Condition]:
        text = _text(args, key)
        return _parse_named(text, key, parse_conditions) if text else []

    filter_conditions = conditions("filterJson")
    auto_event_filter = conditions("autoEventFilterJson")
    custom_event_filter = conditions("customEventFilterJson")

    parameter_json = _text(args, "parameterJson")
    parameters = (
        _parse_named(parameter_json, "parameterJson", parse_parameters)
        if parameter_json
        else []
    )

    filter_conditions, auto_event_filter, warning = remap_auto_event_filter(
        trigger_type, filter_conditions, auto_event_filter
    )

    trigger = TriggerInput(
        name=name,
        type=trigger_type,
        filter=filter_conditions,
        auto_event_filter=auto_event_filter,
        custom_event_filter=custom_event_filter,
        parameter=parameters,
        notes=_text(args, "notes"),
    )
    return trigger, warning


def trigger_update_message(warning: str) -> str:
    """Success message for update_trigger, with any remap warning appended."""
    if warning:
        return f"{TRIGGER_UPDATED}. {warning}"
    return TRIGGER_UPDATED
import pytest

from tagserver.validation import (
    ValidationError,
    build_container_path,
    build_workspace_path,
    validate_client_input,
    validate_container_path,
    validate_tag_input,
    validate_transformation_input,
    validate_trigger_input,
    validate_variable_input,
    validate_workspace_path,
)


@pytest.mark.parametrize(
    "name, tag_type, ids, message",
    [
        ("  ", "html", ["1"], "tag name is required"),
        ("a" * 257, "html", ["1"], "tag name must be 256 characters or less"),
        ("Tag", " ", ["1"], "tag type is required"),
        ("Tag", "html", [], "at least one firing trigger ID is required"),
        ("Tag", "html", None, "at least one firing trigger ID is required"),
        ("Tag", "html", ["1", " "], "firing trigger ID cannot be empty"),
    ],
)
def test_validate_tag_input_errors(name, tag_type, ids, message):
    with pytest.raises(ValidationError) as exc:
        validate_tag_input(name, tag_type, ids)
    assert str(exc.value) == message


def test_validate_tag_input_accepts_max_length():
    assert validate_tag_input("a" * 256, "html", ["1"]) is None


def test_name_length_counts_bytes():
    with pytest.raises(ValidationError):
        validate_trigger_input("é" * 129, "pageview")
    assert validate_trigger_input("é" * 128, "pageview") is None


@pytest.mark.parametrize(
    "func, kind",
    [
        (validate_trigger_input, "trigger"),
        (validate_variable_input, "variable"),
        (validate_client_input, "client"),
        (validate_transformation_input, "transformation"),
    ],
)
def test_name_and_type_required(func, kind):
    with pytest.raises(ValidationError, match=f"^{kind} name is required$"):
        func("", "x")
    with pytest.raises(ValidationError, match=f"^{kind} type is required"):
        func("name", "")
    with pytest.raises(ValidationError, match="256 characters or less"):
        func("n" * 257, "x")


def test_transformation_type_message_lists_values():
    with pytest.raises(ValidationError) as exc:
        validate_transformation_input("t", "")
    assert "tf_exclude_params, tf_allow_params, tf_augment_event" in str(exc.value)


def test_validation_error_is_value_error():
    with pytest.raises(ValueError):
        validate_variable_input("", "c")


@pytest.mark.parametrize(
    "args, message",
    [
        (("", "c", "w"), "account ID is required"),
        (("a", " ", "w"), "container ID is required"),
        (("a", "c", ""), "workspace ID is required"),
    ],
)
def test_validate_workspace_path(args, message):
    with pytest.raises(ValidationError) as exc:
        validate_workspace_path(*args)
    assert str(exc.value) == message


def test_validate_container_path():
    assert validate_container_path("1", "2") is None
    with pytest.raises(ValidationError, match="container ID is required"):
        validate_container_path("1", "")


def test_build_paths():
    assert build_workspace_path("1", "2", "3") == "accounts/1/containers/2/workspaces/3"
    assert build_container_path("1", "2") == "accounts/1/containers/2"
    assert build_workspace_path("1", "2", "3").startswith(build_container_path("1", "2"))
"""Custom template and container version summaries for the tool layer."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from tagserver.validation import ValidationError


def _f(name: str, *, omitempty: bool = False, **kwargs: Any) -> Any:
    return field(metadata={"json": name, "omitempty": omitempty}, **kwargs)


def _str(item: Mapping[str, Any], key: str) -> str:
    value = item.get(key)
    return "" if value is None else str(value)


@dataclass
class GalleryReferenceInfo:
    """Where a gallery template came from."""

    owner: str = _f("owner", default="")
    repository: str = _f("repository", default="")
    version: str = _f("version", omitempty=True, default="")
    gallery_template_id: str = _f("galleryTemplateId", omitempty=True, default="")


@dataclass
class TemplateInfo:
    """A custom template with the type string tags must use to refer to it."""

    template_id: str = _f("templateId", default="")
    name: str = _f("name", default="")
    type: str = _f("type", default="")
    gallery_reference: GalleryReferenceInfo | None = _f(
        "galleryReference", omitempty=True, default=None
    )
    tag_manager_url: str = _f("tagManagerUrl", omitempty=True, default="")


@dataclass
class VersionInfo:
    """A container version header."""

    version_id: str = _f("versionId", default="")
    name: str = _f("name", omitempty=True, default="")
    deleted: bool = _f("deleted", omitempty=True, default=False)
    num_tags: str = _f("numTags", omitempty=True, default="")
    num_triggers: str = _f("numTriggers", omitempty=True, default="")
    num_variables: str = _f("numVariables", omitempty=True, default="")
    num_custom_templates: str = _f("numCustomTemplates", omitempty=True, default="")
    path: str = _f("path", default="")


def _gallery_reference(template: Mapping[str, Any]) -> Mapping[str, Any] | None:
    """The template's gallery reference when it names a gallery template."""
    ref = template.get("galleryReference")
    if isinstance(ref, Mapping) and _str(ref, "galleryTemplateId"):
        return ref
    return None


def template_type(container_id: str, template: Mapping[str, Any]) -> str:
    """Type string for a template: cvt_<galleryTemplateId> or cvt_<container>_<id>."""
    ref = _gallery_reference(template)
    if ref is not None:
        return f"cvt_{_str(ref, 'galleryTemplateId')}"
    return f"cvt_{container_id}_{_str(template, 'templateId')}"


def template_info(container_id: str, template: Mapping[str, Any]) -> TemplateInfo:
    """Summarise one API custom template resource."""
    info = TemplateInfo(
        template_id=_str(template, "templateId"),
        name=_str(template, "name"),
        type=template_type(container_id, template),
        tag_manager_url=_str(template, "tagManagerUrl"),
    )
    ref = _gallery_reference(template)
    if ref is not None:
        info.gallery_reference = GalleryReferenceInfo(
            owner=_str(ref, "owner"),
            repository=_str(ref, "repository"),
            version=_str(ref, "version"),
            gallery_template_id=_str(ref, "galleryTemplateId"),
        )
    return info


def list_template_infos(
    container_id: str, response: Mapping[str, Any] | None
) -> list[TemplateInfo]:
    """Summarise every template in a list-templates API response."""
    templates = (response or {}).get("template") or []
    return [template_info(container_id, t) for t in templates]


def import_message(info: TemplateInfo) -> str:
    """Message reported after a gallery template is imported."""
    return (
        f"Template '{info.name}' imported successfully. "
        f"Use type '{info.type}' when creating tags."
    )


def validate_gallery_import(owner: str, repository: str) -> None:
    """Check that a gallery import names both owner and repository."""
    if not owner:
        raise ValidationError("galleryOwner is required")
    if not repository:
        raise ValidationError("galleryRepository is required")


def version_infos(response: Mapping[str, Any] | None) -> list[VersionInfo]:
    """Summarise the version headers of a list-version-headers API response."""
    headers = (response or {}).get("containerVersionHeader") or []
    return [
        VersionInfo(
            version_id=_str(h, "containerVersionId"),
            name=_str(h, "name"),
            deleted=bool(h.get("deleted", False)),
            num_tags=_str(h, "numTags"),
            num_triggers=_str(h, "numTriggers"),
            num_variables=_str(h, "numVariables"),
            num_custom_templates=_str(h, "numCustomTemplates"),
            path=_str(h, "path"),
        )
        for h in headers
    ]


def validate_template_update(template_id: str, name: str, template_data: str) -> None:
    """Check that an update names a template and changes at least one field."""
    if not template_id:
        raise ValidationError("templateId is required")
    if not name and not template_data:
        raise ValidationError("at least one of name or templateData must be provided")


def merge_template_update(
    current: Mapping[str, Any], name: str, template_data: str
) -> dict[str, str]:
    """Template body for an update: current values, overridden where given."""
    return {
        "name": name or _str(current, "name"),
        "templateData": template_data or _str(current, "templateData"),
        "fingerprint": _str(current, "fingerprint"),
    }
import pytest

from tagserver.templates import (
    GalleryReferenceInfo,
    TemplateInfo,
    VersionInfo,
    import_message,
    list_template_infos,
    merge_template_update,
    template_info,
    template_type,
    validate_gallery_import,
    validate_template_update,
    version_infos,
)
from tagserver.types import to_json
from tagserver.validation import ValidationError

GALLERY = {
    "templateId": "12",
    "name": "Cookie Solution",
    "tagManagerUrl": "https://tagmanager.example.com/t/12",
    "galleryReference": {
        "owner": "iubenda",
        "repository": "gtm-cookie-solution",
        "version": "abc",
        "galleryTemplateId": "999",
    },
}

CUSTOM = {"templateId": "5", "name": "Mine"}


def test_template_type_for_gallery_template():
    assert template_type("C1", GALLERY) == "cvt_999"


def test_template_type_for_custom_template():
    assert template_type("C1", CUSTOM) == "cvt_C1_5"


def test_gallery_reference_without_id_counts_as_custom():
    template = {"templateId": "5", "galleryReference": {"owner": "x", "galleryTemplateId": ""}}
    assert template_type("C1", template) == template_type("C1", CUSTOM)
    assert template_info("C1", template).gallery_reference is None


def test_template_info_gallery_fields():
    info = template_info("C1", GALLERY)
    assert info.template_id == "12"
    assert info.name == "Cookie Solution"
    assert info.tag_manager_url == GALLERY["tagManagerUrl"]
    assert info.gallery_reference == GalleryReferenceInfo(
        owner="iubenda",
        repository="gtm-cookie-solution",
        version="abc",
        gallery_template_id="999",
    )


def test_template_info_json_omits_empty_fields():
    data = to_json(template_info("C1", CUSTOM))
    assert "galleryReference" not in data
    assert "tagManagerUrl" not in data
    assert data["templateId"] == "5"
    assert data["type"] == template_type("C1", CUSTOM)


def test_template_info_json_nests_gallery_reference():
    data = to_json(template_info("C1", GALLERY))
    assert data["galleryReference"]["galleryTemplateId"] == "999"
    assert data["galleryReference"]["owner"] == "iubenda"


def test_list_template_infos_preserves_order():
    infos = list_template_infos("C1", {"template": [GALLERY, CUSTOM]})
    assert [i.template_id for i in infos] == ["12", "5"]


@pytest.mark.parametrize("response", [None, {}, {"template": None}])
def test_list_template_infos_empty(response):
    assert list_template_infos("C1", response) == []


def test_import_message():
    info = TemplateInfo(name="Cookie Solution", type="cvt_999")
    assert import_message(info) == (
        "Template 'Cookie Solution' imported successfully. "
        "Use type 'cvt_999' when creating tags."
    )


def test_validate_gallery_import_requires_owner():
    with pytest.raises(ValidationError, match="galleryOwner is required"):
        validate_gallery_import("", "gtm-cookie-solution")


def test_validate_gallery_import_requires_repository():
    with pytest.raises(ValidationError, match="galleryRepository is required"):
        validate_gallery_import("iubenda", "")


def test_validate_gallery_import_accepts_both():
    assert validate_gallery_import("iubenda", "gtm-cookie-solution") is None


def test_version_infos_maps_headers():
    response = {
        "containerVersionHeader": [
            {
                "containerVersionId": "3",
                "name": "Release",
                "numTags": "4",
                "numTriggers": "2",
                "numVariables": "1",
                "numCustomTemplates": "0",
                "path": "accounts/1/containers/2/versions/3",
            },
            {"containerVersionId": "4", "deleted": True, "path": "p"},
        ]
    }
    versions = version_infos(response)
    assert versions[0] == VersionInfo(
        version_id="3",
        name="Release",
        num_tags="4",
        num_triggers="2",
        num_variables="1",
        num_custom_templates="0",
        path="accounts/1/containers/2/versions/3",
    )
    assert versions[1].deleted is True
    assert to_json(versions[1]) == {"versionId": "4", "deleted": True, "path": "p"}


def test_version_infos_empty():
    assert version_infos({}) == []
    assert version_infos(None) == []


def test_validate_template_update_requires_id():
    with pytest.raises(ValidationError, match="templateId is required"):
        validate_template_update("", "n", "")


def test_validate_template_update_requires_a_change():
    with pytest.raises(ValidationError, match="at least one of name or templateData"):
        validate_template_update("7", "", "")


def test_merge_template_update_keeps_current_values():
    current = {"name": "old", "templateData": "code", "fingerprint": "fp"}
    merged = merge_template_update(current, "", "")
    assert merged == {"name": "old", "templateData": "code", "fingerprint": "fp"}


def test_merge_template_update_overrides_given_values():
    current = {"name": "old", "templateData": "code", "fingerprint": "fp"}
    merged = merge_template_update(current, "new", "other")
    assert merged["name"] == "new"
    assert merged["templateData"] == "other"
    assert merged["fingerprint"] == "fp"
    assert current["name"] == "old"
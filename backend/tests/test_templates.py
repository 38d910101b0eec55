import pytest

from landing_hub.domain.errors import UnknownTemplateError
from landing_hub.domain.templates import (
    SEED_COMPANY_NAME,
    TEMPLATE_REGISTRY,
    TemplateType,
    get_template,
    list_templates,
)


def test_registry_covers_every_template_type():
    assert set(TEMPLATE_REGISTRY) == set(TemplateType)
    assert len(list_templates()) == 8


def test_openhouse_requires_partner_and_property():
    spec = get_template("openhouse")
    assert spec.requires_co_brand
    assert spec.requires_property_data
    assert spec.allows_multiple
    assert "property_data.address" in spec.required_params


def test_biolink_is_one_per_owner_without_partner():
    spec = get_template(TemplateType.BIOLINK)
    assert not spec.requires_co_brand
    assert not spec.requires_property_data
    assert not spec.allows_multiple
    assert spec.path_prefix == ""


def test_partner_portal_slug_comes_from_company_name():
    spec = get_template("partner_portal")
    assert spec.slug_seed_field == SEED_COMPANY_NAME
    assert "company_name" in spec.required_params


@pytest.mark.parametrize("value", ["landing", "", None, "BIOLINK"])
def test_unknown_template_raises(value):
    with pytest.raises(UnknownTemplateError) as exc:
        get_template(value)
    assert exc.value.field == "template_type"
    assert exc.value.status_code == 404

"""
Template registry: the fixed set of landing page templates and the rules
the page generator applies to each of them.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Tuple

from .errors import UnknownTemplateError


class TemplateType(str, Enum):
    BIOLINK = "biolink"
    PREQUAL = "prequal"
    OPENHOUSE = "openhouse"
    MORTGAGE_LOAN_APP = "mortgage_loan_app"
    MORTGAGE_RATE_QUOTE = "mortgage_rate_quote"
    CALCULATOR = "calculator"
    VALUATION = "valuation"
    PARTNER_PORTAL = "partner_portal"


SEED_FIRST_NAME = "first_name"
SEED_COMPANY_NAME = "company_name"


@dataclass(frozen=True)
class TemplateSpec:
    template_type: TemplateType
    label: str
    path_prefix: str
    required_params: Tuple[str, ...]
    requires_co_brand: bool
    requires_property_data: bool
    allows_multiple: bool
    slug_seed_field: str
    title_format: str

    def to_dict(self) -> Dict[str, object]:
        return {
            "template_type": self.template_type.value,
            "label": self.label,
            "required_params": list(self.required_params),
            "requires_co_brand": self.requires_co_brand,
            "requires_property_data": self.requires_property_data,
            "allows_multiple": self.allows_multiple,
            "slug_seed_field": self.slug_seed_field,
        }


def _spec(template_type, label, path_prefix, title_format, *, co_brand=False,
          property_data=False, multiple=False, seed=SEED_FIRST_NAME):
    required = ["owner_id"]
    if co_brand:
        required.append("co_brand_partner_id")
    if property_data:
        required.append("property_data.address")
    if seed == SEED_COMPANY_NAME:
        required.append("company_name")
    return TemplateSpec(
        template_type=template_type,
        label=label,
        path_prefix=path_prefix,
        required_params=tuple(required),
        requires_co_brand=co_brand,
        requires_property_data=property_data,
        allows_multiple=multiple,
        slug_seed_field=seed,
        title_format=title_format,
    )


TEMPLATE_REGISTRY: Dict[TemplateType, TemplateSpec] = {
    spec.template_type: spec
    for spec in (
        _spec(TemplateType.BIOLINK, "Bio Link", "", "{owner_name}"),
        _spec(TemplateType.PREQUAL, "Pre-Qualification", "prequal",
              "{owner_first} & {partner_first} - Pre-Qualification",
              co_brand=True, multiple=True),
        _spec(TemplateType.OPENHOUSE, "Open House", "open-house",
              "Open House - {address}",
              co_brand=True, property_data=True, multiple=True),
        _spec(TemplateType.MORTGAGE_LOAN_APP, "Loan Application", "apply",
              "{owner_first} - Apply for Your Home Loan"),
        _spec(TemplateType.MORTGAGE_RATE_QUOTE, "Rate Quote", "rate-quote",
              "{owner_first} - Get Your Mortgage Rate Quote"),
        _spec(TemplateType.CALCULATOR, "Mortgage Calculator", "calculator",
              "{owner_first} - Mortgage Calculator"),
        _spec(TemplateType.VALUATION, "Home Valuation", "valuation",
              "{owner_first} - What's My Home Worth?"),
        _spec(TemplateType.PARTNER_PORTAL, "Partner Company Portal", "partners",
              "{company_name} - Partner Portal",
              multiple=True, seed=SEED_COMPANY_NAME),
    )
}


def get_template(template_type) -> TemplateSpec:
    try:
        return TEMPLATE_REGISTRY[TemplateType(template_type)]
    except ValueError:
        raise UnknownTemplateError(
            f"Unknown template type: {template_type!r}", field="template_type"
        ) from None


def list_templates() -> List[TemplateSpec]:
    return list(TEMPLATE_REGISTRY.values())

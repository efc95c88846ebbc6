"""Pipedrive endpoints and the fields exported for each object type.

List endpoint: https://{company_domain}.pipedrive.com/v1{path}
Field metadata: https://{company_domain}.pipedrive.com/v1{fields_path}
Each metadata record carries `key` (raw field key) and `name` (display label).
"""

from dataclasses import dataclass

from pipedrive_export.models.object_type import ObjectType

BASE_URL_TEMPLATE = "https://{company_domain}.pipedrive.com/v1"

RATE_LIMIT_CODE = 429
RATE_LIMIT_BACKOFF_SECONDS = 2.0
DEFAULT_MAX_RATE_LIMIT_RETRIES = 10

PRICES_FIELD = "prices"
PRICES_FILE_STEM = "product_prices"
PRICE_PARENT_FIELD = "product_name"
PRICE_ID_FIELDS = ("id", "product_id")


@dataclass(frozen=True)
class EndpointDescriptor:
    """API paths and exported field keys for one object type."""

    object_type: ObjectType
    path: str
    fields_path: str
    fields: tuple[str, ...]
    file_stem: str


# fmt: off
ENDPOINTS: dict[ObjectType, EndpointDescriptor] = {
    ObjectType.DEAL: EndpointDescriptor(
        ObjectType.DEAL, "/deals", "/dealFields",
        ("title", "org_name", "person_name", "formatted_value", "currency", "status", "expected_close_date"),
        "deals",
    ),
    ObjectType.PRODUCT: EndpointDescriptor(
        ObjectType.PRODUCT, "/products", "/productFields",
        ("id", "name", "code", "description", "unit", "tax", "category"),
        "products",
    ),
    ObjectType.ACTIVITY: EndpointDescriptor(
        ObjectType.ACTIVITY, "/activities", "/activityFields",
        ("id", "type", "due_date", "due_time", "duration", "subject", "public_description",
         "location_formatted_address", "note"),
        "activities",
    ),
    # Leads share the deal field schema
    ObjectType.LEAD: EndpointDescriptor(
        ObjectType.LEAD, "/leads", "/dealFields",
        ("id", "title", "owner_id", "source_name", "expected_close_date", "note"),
        "leads",
    ),
    ObjectType.PERSON: EndpointDescriptor(
        ObjectType.PERSON, "/persons", "/personFields",
        ("id", "name", "person_name", "open_deals_count", "closed_deals_count",
         "participant_open_deals_count", "participant_closed_deals_count"),
        "persons",
    ),
}
# fmt: on


def descriptor_for(object_type: ObjectType | str) -> EndpointDescriptor:
    """Return the endpoint descriptor for an object type (enum or name)."""
    return ENDPOINTS[ObjectType.parse(object_type)]

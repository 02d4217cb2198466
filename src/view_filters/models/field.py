"""Field catalog definitions: the filterable columns of each record kind."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from view_filters.exceptions import UnknownFieldError, UnknownObjectTypeError
from view_filters.models.operators import OperatorDescriptor, normalize_field_type, operators_for_field_type
from view_filters.models.types import FieldType


class FieldDefinition(BaseModel):
    """One filterable column."""

    field: str = Field(description="Attribute path on the record", min_length=1)
    header_name: str = Field(alias="headerName", description="Column header shown to the user")
    type: FieldType = Field(default=FieldType.TEXT, description="Semantic type of the field")

    model_config = {"frozen": True, "populate_by_name": True}

    @field_validator("type", mode="before")
    @classmethod
    def validate_field_type(cls, v: Any) -> FieldType:
        """Unlisted types are treated as text."""
        if isinstance(v, FieldType):
            return v
        try:
            return FieldType(v)
        except ValueError:
            return FieldType.TEXT

    @property
    def operator_type(self) -> FieldType:
        """The field type whose operator set applies to this field."""
        return normalize_field_type(self.type)

    @property
    def operators(self) -> List[OperatorDescriptor]:
        return operators_for_field_type(self.type)


class FieldCatalog(BaseModel):
    """Ordered list of field definitions with lookup by field name."""

    fields: List[FieldDefinition] = Field(default_factory=list)

    model_config = {"frozen": True}

    def find(self, field_name: str) -> Optional[FieldDefinition]:
        return next((definition for definition in self.fields if definition.field == field_name), None)

    def get_field(self, field_name: str) -> FieldDefinition:
        """Return the definition for a field.

        Raises:
            UnknownFieldError: If the catalog has no such field
        """
        definition = self.find(field_name)
        if definition is None:
            raise UnknownFieldError(f"Field '{field_name}' not found in catalog")
        return definition

    def get_field_names(self) -> List[str]:
        return [definition.field for definition in self.fields]

    def field_type(self, field_name: str) -> FieldType:
        """Semantic type of a field, text when the field is not listed."""
        definition = self.find(field_name)
        return definition.type if definition else FieldType.TEXT

    def search(self, query: str) -> List[FieldDefinition]:
        """Fields whose name or header contains ``query``, case-insensitively."""
        if not query:
            return list(self.fields)
        needle = query.lower()
        return [d for d in self.fields if needle in d.header_name.lower() or needle in d.field.lower()]

    @classmethod
    def from_list(cls, items: List[Dict[str, Any]]) -> "FieldCatalog":
        return cls(fields=[FieldDefinition.model_validate(item) for item in items])


def _catalog(*rows: tuple) -> FieldCatalog:
    return FieldCatalog(fields=[FieldDefinition(field=f, header_name=h, type=t) for f, h, t in rows])


_AUDIT_FIELDS = (
    ("organizationId", "Organization ID", FieldType.ID),
    ("createdBy", "Created By", FieldType.ID),
    ("updatedBy", "Updated By", FieldType.ID),
)

_DELETION_FIELDS = (
    ("isDeleted", "Is Deleted", FieldType.BOOLEAN),
    ("deletedAt", "Deleted At", FieldType.DATE),
    ("deletedBy", "Deleted By", FieldType.ID),
    ("createdAt", "Created at", FieldType.DATE),
    ("updatedAt", "Updated at", FieldType.DATE),
)

_LAST_VIEWED_FIELDS = (
    ("lastViewedAt", "Last Viewed At", FieldType.DATE),
    ("lastViewedBy", "Last Viewed By", FieldType.ID),
)

CONTACT_FIELDS = _catalog(
    ("_id", "Record ID", FieldType.ID),
    ("firstName", "Contact", FieldType.TEXT),
    ("lastName", "Last name", FieldType.TEXT),
    ("image", "Profile Image", FieldType.IMAGE),
    ("title", "Job title", FieldType.TEXT),
    ("email", "Email addresses", FieldType.EMAIL),
    ("phone", "Phone", FieldType.PHONE),
    ("website", "Website", FieldType.URL),
    ("summary", "Description", FieldType.TEXT),
    ("persona", "Persona", FieldType.TEXT),
    ("status", "Status", FieldType.TEXT),
    ("stage", "Stage", FieldType.TEXT),
    ("source", "Source", FieldType.TEXT),
    ("birthday", "Birthday", FieldType.DATE),
    ("age", "Age", FieldType.NUMBER),
    ("spouseName", "Spouse Name", FieldType.TEXT),
    ("buyerNeeds", "Buyer Needs", FieldType.OBJECT),
    ("generatedSummary", "Generated Summary", FieldType.TEXT),
    ("apolloId", "Apollo ID", FieldType.TEXT),
    ("address", "Address", FieldType.OBJECT),
    ("social", "Social", FieldType.OBJECT),
    ("companyId", "Company", FieldType.OBJECT),
    *_AUDIT_FIELDS,
    *_LAST_VIEWED_FIELDS,
    *_DELETION_FIELDS,
)

COMPANY_FIELDS = _catalog(
    ("_id", "Record ID", FieldType.ID),
    ("name", "Company", FieldType.TEXT),
    ("description", "Description", FieldType.TEXT),
    ("industry", "Industry", FieldType.TEXT),
    ("website", "Website", FieldType.URL),
    ("email", "Email", FieldType.EMAIL),
    ("phone", "Phone", FieldType.PHONE),
    ("logo", "Logo", FieldType.IMAGE),
    ("size", "Size", FieldType.TEXT),
    ("address", "Address", FieldType.OBJECT),
    *_AUDIT_FIELDS,
    *_DELETION_FIELDS,
)

PROPERTY_FIELDS = _catalog(
    ("_id", "Record ID", FieldType.ID),
    ("name", "Property", FieldType.TEXT),
    ("recordType", "Record Type", FieldType.TEXT),
    ("image", "Image", FieldType.IMAGE),
    ("propertyType", "Type", FieldType.TEXT),
    ("propertySubType", "Sub Type", FieldType.TEXT),
    ("status", "Status", FieldType.TEXT),
    ("market", "Market", FieldType.TEXT),
    ("subMarket", "Sub Market", FieldType.TEXT),
    ("listingId", "Listing ID", FieldType.TEXT),
    ("apolloId", "Apollo ID", FieldType.TEXT),
    *_AUDIT_FIELDS,
    *_LAST_VIEWED_FIELDS,
    *_DELETION_FIELDS,
)

FIELD_CATALOGS: Dict[str, FieldCatalog] = {
    "contact": CONTACT_FIELDS,
    "company": COMPANY_FIELDS,
    "property": PROPERTY_FIELDS,
}

SEARCH_FIELDS: Dict[str, List[str]] = {
    "contact": ["firstName", "lastName", "email", "phone", "company"],
    "company": ["name", "description", "industry", "email", "phone", "website"],
    "property": ["name", "propertyType", "market", "subMarket", "listingId"],
}


def get_field_catalog(object_type: str) -> FieldCatalog:
    """Return the built-in catalog for a record kind.

    Raises:
        UnknownObjectTypeError: If the record kind is not one of contact, company, property
    """
    try:
        return FIELD_CATALOGS[object_type]
    except KeyError:
        raise UnknownObjectTypeError(f"No field catalog for object type '{object_type}'")


def get_search_fields(object_type: str) -> List[str]:
    """Return the default free-text search fields for a record kind."""
    try:
        return list(SEARCH_FIELDS[object_type])
    except KeyError:
        raise UnknownObjectTypeError(f"No search fields for object type '{object_type}'")

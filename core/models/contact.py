# =============================================================================
# core/models/contact.py - Contact Schemas
# =============================================================================
# These models define the contract for contact records:
# - ContactCreate: Input for creating one contact (single or batch)
# - ContactBatchCreate: Input for creating many contacts in one request
# - ContactUpdate: Partial update carrying only the changed fields
# - Contact: A stored record as returned to clients
#
# The same validation rules run in the API and in the client-side forms,
# so a form that validates locally will not be rejected by the server.
# =============================================================================

from datetime import datetime
from enum import Enum
from typing import Annotated, Any

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    HttpUrl,
    TypeAdapter,
    ValidationError,
    field_validator,
    model_validator,
)

# Fields a client may change after creation. id and created_at are server-owned.
EDITABLE_FIELDS: tuple[str, ...] = ("name", "phone", "email", "age", "image_url")

MIN_AGE = 18
MAX_AGE = 120

# Field-scoped messages shown next to the offending input
FIELD_MESSAGES: dict[str, str] = {
    "name": "Name must be at least 2 characters.",
    "phone": "Please enter a valid phone number.",
    "email": "Please enter a valid email address.",
    "age": "Please enter a valid age.",
    "image_url": "Please enter a valid image URL.",
}
AGE_RANGE_MESSAGE = f"Age must be between {MIN_AGE} and {MAX_AGE}."

_http_url = TypeAdapter(HttpUrl)


def _check_image_url(value: str) -> str:
    # Validate the shape but keep the caller's exact string
    try:
        _http_url.validate_python(value)
    except ValidationError:
        raise ValueError(FIELD_MESSAGES["image_url"])
    return value


ImageUrl = Annotated[str, AfterValidator(_check_image_url)]


class SortField(str, Enum):
    """Scalar columns a listing can be ordered by."""
    ID = "id"
    NAME = "name"
    PHONE = "phone"
    EMAIL = "email"
    AGE = "age"
    IMAGE_URL = "image_url"
    CREATED_AT = "created_at"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


class ContactCreate(BaseModel):
    """
    Schema for creating a new contact.

    Example:
        {
            "name": "John Doe",
            "phone": "1234567890",
            "email": "john@example.com",
            "age": 30,
            "image_url": "https://bucket.s3.amazonaws.com/avatar.png"
        }
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(
        ...,
        min_length=2,
        max_length=255,
        description="Display name (at least 2 characters)"
    )

    # Kept as a string so leading zeros survive
    phone: str = Field(
        ...,
        pattern=r"^\d+$",
        max_length=32,
        description="Phone number, digits only"
    )

    email: EmailStr = Field(
        ...,
        description="Email address"
    )

    # Form inputs send "30"; lax parsing turns digit strings into ints
    age: int = Field(
        ...,
        ge=MIN_AGE,
        le=MAX_AGE,
        description=f"Age in years ({MIN_AGE}-{MAX_AGE})"
    )

    image_url: ImageUrl | None = Field(
        default=None,
        description="Public URL of an uploaded image"
    )


class ContactBatchCreate(BaseModel):
    """Schema for creating several contacts in one request."""

    contacts: list[ContactCreate] = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Contacts to create (at least one)"
    )


class ContactUpdate(BaseModel):
    """
    Schema for a partial update.

    Only the fields present in the request are changed. Use
    model_dump(exclude_unset=True) to get the payload to send.
    image_url may be set to null to detach an image; the other
    fields cannot be cleared.
    """

    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    name: str | None = Field(default=None, min_length=2, max_length=255)
    phone: str | None = Field(default=None, pattern=r"^\d+$", max_length=32)
    email: EmailStr | None = None
    age: int | None = Field(default=None, ge=MIN_AGE, le=MAX_AGE)
    image_url: ImageUrl | None = None

    @model_validator(mode="after")
    def _reject_cleared_required_fields(self) -> "ContactUpdate":
        for field in ("name", "phone", "email", "age"):
            if field in self.model_fields_set and getattr(self, field) is None:
                raise ValueError(f"{field} cannot be cleared")
        return self

    def changes(self) -> dict[str, Any]:
        """Return only the fields the caller actually set."""
        return self.model_dump(mode="json", exclude_unset=True)


class Contact(BaseModel):
    """
    A stored contact as returned by the record store.

    Read models are lenient: rows written before validation existed
    (e.g. numeric phone values) must still be listable.
    """

    id: str = Field(..., description="Server-generated identifier")
    created_at: datetime | None = Field(default=None, description="Creation timestamp")
    name: str
    phone: str
    email: str
    age: int
    image_url: str | None = None

    @field_validator("id", "phone", mode="before")
    @classmethod
    def _stringify(cls, value: Any) -> Any:
        return str(value) if isinstance(value, int) else value

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "Contact":
        """Build a Contact from a Supabase row dict."""
        return cls.model_validate(row)

    def editable_values(self) -> dict[str, Any]:
        """Current values of the fields a client may change."""
        return {field: getattr(self, field) for field in EDITABLE_FIELDS}


def field_errors(exc: ValidationError) -> dict[str, str]:
    """
    Flatten a ValidationError into {field: message}.

    Only the first error per field is kept, matching how forms show one
    message under each input.
    """
    errors: dict[str, str] = {}
    for error in exc.errors():
        loc = [part for part in error.get("loc", ()) if isinstance(part, str)]
        field = loc[-1] if loc else "__root__"
        if field in errors:
            continue
        if field == "age" and error.get("type") in ("greater_than_equal", "less_than_equal"):
            errors[field] = AGE_RANGE_MESSAGE
        elif field in FIELD_MESSAGES:
            errors[field] = FIELD_MESSAGES[field]
        else:
            errors[field] = error.get("msg", "Invalid value")
    return errors

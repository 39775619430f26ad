"""Argument and tool descriptions shared by several tools."""

CUSTOM_FIELD_VALUE_DESCRIPTION = (
    "The value for the custom field. For monetary fields, use currency code prefix format "
    "(e.g., USD10.00, GBP123.45, EUR9.99), NOT trailing symbol format (e.g., 10.00$). "
    "For documentlink fields, use a single document ID (e.g., 123) or an array of document IDs (e.g., [123, 456])."
)

CONFIRM_DESCRIPTION = "Must be true to confirm this destructive operation"

CONFIRM_BULK_DESCRIPTION = "Must be true when operation is 'delete' to confirm destructive operation"

FIELDS_DESCRIPTION = (
    "Optional list of document fields to return, e.g. ['id', 'title', 'tags']. "
    "Without it every field except the full text 'content' is returned."
)

COLOR_PATTERN = r"^#[0-9A-Fa-f]{6}$"

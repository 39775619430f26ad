"""Turns agent-facing tool arguments into bulk edit API parameters.

Paperless distinguishes between an absent parameter and an empty collection: an empty
``add_tags`` list or an empty ``permissions`` object is not a no-op. Every optional
group therefore passes through one empty-is-absent rule before it is sent.
"""

from typing import Any, Mapping

from pydantic import BaseModel

from shared.clients.dms.models.CustomField import CustomFieldValue
from shared.clients.errors import ValidationError
from shared.helper.HelperConfig import HelperConfig
from shared.helper.monetary import ensure_valid_monetary_value

CONFIRMATION_REQUIRED_MESSAGE = "Confirmation required for destructive operation. Set confirm: true to proceed."

DESTRUCTIVE_OPERATION = "delete"

# parameter groups where an empty collection means "not sent"
COLLECTION_PARAMETERS = ("add_tags", "remove_tags", "remove_custom_fields", "permissions")


def array_not_empty(value: list | None) -> list | None:
    return value if value else None


def object_not_empty(value: Mapping | None) -> Mapping | None:
    return value if value else None


def drop_empty(parameters: dict[str, Any], keys: tuple[str, ...] = COLLECTION_PARAMETERS) -> dict[str, Any]:
    """
    Remove unset values, and empty lists or objects for the given collection keys.

    Args:
        parameters (dict[str, Any]): The raw parameters.
        keys (tuple[str, ...]): Keys whose empty collections collapse to "not sent".

    Returns:
        dict[str, Any]: A new dict without the absent entries.
    """
    cleaned: dict[str, Any] = {}
    for key, value in parameters.items():
        if key in keys:
            value = object_not_empty(value) if isinstance(value, Mapping) else array_not_empty(value)
        if value is None:
            continue
        cleaned[key] = value
    return cleaned


def require_confirmation(operation: str | None, confirm: bool | None) -> None:
    """
    Fail fast when a delete operation is not explicitly confirmed.

    Only "delete" removes entities from the whole system. Operations like "remove_tag"
    detach something from the given documents and never need confirmation.

    Raises:
        ValidationError: If operation is "delete" and confirm is not True.
    """
    if operation == DESTRUCTIVE_OPERATION and confirm is not True:
        raise ValidationError(CONFIRMATION_REQUIRED_MESSAGE)


class BulkEditNormalizer:
    """Normalizes document and object bulk edit arguments."""

    def __init__(self, helper_config: HelperConfig) -> None:
        self.logging = helper_config.get_logger()

    ##########################################
    ################ CORE ####################
    ##########################################

    def normalize(self, raw_args: Mapping[str, Any]) -> dict[str, Any]:
        """Build the ``parameters`` object of a document bulk edit.

        Args:
            raw_args (Mapping[str, Any]): Tool arguments other than documents, method and confirm.

        Returns:
            dict[str, Any]: The API parameters, absent groups omitted.

        Raises:
            ValidationError: If a custom field value has a malformed monetary format.
        """
        parameters = {key: self._to_plain(value) for key, value in raw_args.items()}

        assignments = self._collect_custom_field_assignments(parameters)
        if assignments:
            for assignment in assignments:
                ensure_valid_monetary_value(assignment["value"])
            parameters["assign_custom_fields"] = [assignment["field"] for assignment in assignments]
            parameters["assign_custom_fields_values"] = assignments

        return drop_empty(parameters)

    def normalize_object_parameters(
        self,
        operation: str,
        owner: int | None = None,
        permissions: Mapping[str, Any] | None = None,
        merge: bool | None = None,
    ) -> dict[str, Any]:
        """Build the extra body fields of an object bulk edit.

        Args:
            operation (str): "set_permissions" or "delete".
            owner (int | None): New owner for set_permissions.
            permissions (Mapping[str, Any] | None): View/change permissions for set_permissions.
            merge (bool | None): Merge with existing permissions instead of replacing them.

        Returns:
            dict[str, Any]: Extra fields; empty for any operation other than set_permissions.
        """
        if operation != "set_permissions":
            return {}
        return drop_empty(
            {
                "owner": owner,
                "permissions": self._to_plain(permissions),
                "merge": merge,
            }
        )

    ##########################################
    ############### HELPERS ##################
    ##########################################

    def _collect_custom_field_assignments(self, parameters: dict[str, Any]) -> list[dict[str, Any]]:
        """
        Pop the custom field assignment inputs and return them as one canonical
        [{field, value}] list. ``add_custom_fields`` is the canonical input, a plain
        {field_id: value} map in ``assign_custom_fields`` is a deprecated alias.
        """
        assignments = [
            CustomFieldValue.model_validate(item).model_dump()
            for item in parameters.pop("add_custom_fields", None) or []
        ]

        legacy = parameters.pop("assign_custom_fields", None)
        parameters.pop("assign_custom_fields_values", None)
        if isinstance(legacy, list):
            legacy = {field_id: None for field_id in legacy}
        if isinstance(legacy, Mapping) and legacy:
            self.logging.warning("'assign_custom_fields' is deprecated, use 'add_custom_fields' with [{field, value}] instead.")
            assignments.extend(
                CustomFieldValue(field=int(field_id), value=value).model_dump()
                for field_id, value in legacy.items()
            )
        return assignments

    def _to_plain(self, value: Any) -> Any:
        if isinstance(value, BaseModel):
            return value.model_dump(exclude_unset=True)
        if isinstance(value, list):
            return [self._to_plain(item) for item in value]
        return value

from abc import abstractmethod
from typing import Any

from server.core.BulkEditNormalizer import BulkEditNormalizer, require_confirmation
from server.models.tools import PermissionSet
from server.tools.ToolInterface import ToolInterface, build_query_params, drop_unset, to_json
from shared.clients.dms.DMSClientInterface import DMSClientInterface
from shared.clients.dms.models.MatchingAlgorithm import enhance_matching_algorithm, enhance_matching_algorithm_list
from shared.clients.dms.models.ObjectType import ObjectType
from shared.helper.HelperConfig import HelperConfig

DELETED_RESULT = {"status": "deleted"}


class ObjectToolsInterface(ToolInterface):
    """
    Shared implementation of the list/get/create/update/delete/bulk edit tools
    for tags, correspondents, document types and custom fields.
    """

    def __init__(self, helper_config: HelperConfig, dms_client: DMSClientInterface, normalizer: BulkEditNormalizer):
        super().__init__(helper_config=helper_config, dms_client=dms_client)
        self._normalizer = normalizer

    ##########################################
    ################ GETTER ##################
    ##########################################

    @abstractmethod
    def _get_object_type(self) -> ObjectType:
        """
        Returns the kind of object the tools work on. E.g. ObjectType.TAGS
        """
        pass

    def _has_matching_algorithm(self) -> bool:
        """
        Returns True if the objects carry a matching algorithm that should be rendered with its name.
        """
        return True

    ##########################################
    ############### REQUESTS #################
    ##########################################

    async def _list_objects(
        self,
        page: int | None = None,
        page_size: int | None = None,
        name__icontains: str | None = None,
        name__iendswith: str | None = None,
        name__iexact: str | None = None,
        name__istartswith: str | None = None,
        ordering: str | None = None,
    ) -> str:
        params = build_query_params(
            page=page,
            page_size=page_size,
            name__icontains=name__icontains,
            name__iendswith=name__iendswith,
            name__iexact=name__iexact,
            name__istartswith=name__istartswith,
            ordering=ordering,
        )
        collection = await self._dms.do_fetch_objects(self._get_object_type(), params=params)
        if self._has_matching_algorithm():
            collection["results"] = enhance_matching_algorithm_list(collection["results"])
        return to_json(collection)

    async def _get_object(self, object_id: int) -> str:
        item = await self._dms.do_fetch_object(self._get_object_type(), object_id)
        return to_json(self._render(item))

    async def _create_object(self, data: dict[str, Any]) -> str:
        item = await self._dms.do_create_object(self._get_object_type(), drop_unset(data))
        return to_json(self._render(item))

    async def _update_object(self, object_id: int, data: dict[str, Any]) -> str:
        item = await self._dms.do_update_object(self._get_object_type(), object_id, drop_unset(data))
        return to_json(self._render(item))

    async def _delete_object(self, object_id: int, confirm: bool | None) -> str:
        require_confirmation("delete", confirm)
        await self._dms.do_delete_object(self._get_object_type(), object_id)
        return to_json(DELETED_RESULT)

    async def _bulk_edit_objects(
        self,
        object_ids: list[int],
        operation: str,
        confirm: bool | None = None,
        owner: int | None = None,
        permissions: PermissionSet | None = None,
        merge: bool | None = None,
    ) -> str:
        require_confirmation(operation, confirm)
        parameters = self._normalizer.normalize_object_parameters(operation, owner=owner, permissions=permissions, merge=merge)
        self.logging.info("Bulk edit of %d %s: %s", len(object_ids), self._get_object_type().value, operation)
        response = await self._dms.do_bulk_edit_objects(object_ids, self._get_object_type(), operation, parameters)
        return to_json(response)

    ##########################################
    ############### HELPERS ##################
    ##########################################

    def _render(self, item: Any) -> Any:
        if self._has_matching_algorithm() and isinstance(item, dict):
            return enhance_matching_algorithm(item)
        return item

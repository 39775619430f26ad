"""Resolves foreign key ids in documents to named references.

Paperless returns documents with bare ids for correspondent, document type, tags and
custom fields. For an agent those ids are meaningless, so every read path runs the
documents through this service, which fetches the four reference collections
concurrently, builds lookup tables and rewrites each document.

Lookup tables live for one call only. Nothing is cached between tool invocations.
"""

import asyncio
import json
from typing import Any, Iterable

from shared.clients.dms.DMSClientInterface import DMSClientInterface
from shared.clients.dms.models.Collection import Collection
from shared.clients.dms.models.CustomField import EnrichedCustomField
from shared.clients.dms.models.NamedItem import NamedItem
from shared.helper.HelperConfig import HelperConfig

NO_DOCUMENT_FOUND = "No document found"
NO_DOCUMENTS_FOUND = "No documents found"

DEFAULT_EXCLUDED_FIELDS = frozenset({"content"})


class LookupTable:
    """Maps entity ids to names, built from a single collection fetch."""

    def __init__(self, items: Iterable[Any]) -> None:
        self._names: dict[int, str] = {item.id: item.name for item in items if item.name}

    def __len__(self) -> int:
        return len(self._names)

    def get_name(self, entity_id: Any) -> str:
        """
        Returns the name for an id, or the id as a string if the entity is unknown
        (deleted or renamed since the document was loaded).
        """
        return self._names.get(entity_id) or str(entity_id)

    def resolve(self, entity_id: Any) -> dict[str, Any]:
        return NamedItem.model_construct(id=entity_id, name=self.get_name(entity_id)).model_dump()


class ReferenceLookups:
    """The four lookup tables needed to enrich documents."""

    def __init__(self, correspondents: LookupTable, document_types: LookupTable, tags: LookupTable, custom_fields: LookupTable) -> None:
        self.correspondents = correspondents
        self.document_types = document_types
        self.tags = tags
        self.custom_fields = custom_fields


class EnrichmentService:
    """Rewrites raw documents into name-annotated documents."""

    def __init__(self, helper_config: HelperConfig, dms_client: DMSClientInterface) -> None:
        self.logging = helper_config.get_logger()
        self._dms = dms_client

    ##########################################
    ################ CORE ####################
    ##########################################

    async def enrich_document(self, document: dict[str, Any] | None, fields: list[str] | None = None) -> str:
        """Enrich a single document and render it as JSON text.

        Args:
            document (dict[str, Any] | None): The raw document.
            fields (list[str] | None): Optional allow-list of output fields.

        Returns:
            str: The enriched document as JSON, or "No document found" without any request being made.

        Raises:
            RequestError: If one of the reference lookups fails.
        """
        if not document:
            return NO_DOCUMENT_FOUND
        [enriched] = await self.enrich_records([document], fields=fields)
        return json.dumps(enriched)

    async def enrich_collection(self, collection: Collection[dict[str, Any]], fields: list[str] | None = None) -> str:
        """Enrich a page of documents and render it as JSON text.

        The pagination envelope (count, next, previous, all) is kept, only the results are rewritten.

        Args:
            collection (Collection[dict[str, Any]]): One page of raw documents.
            fields (list[str] | None): Optional allow-list of output fields per document.

        Returns:
            str: The enriched page as JSON, or "No documents found" without any request being made.

        Raises:
            RequestError: If one of the reference lookups fails.
        """
        if collection.is_empty():
            return NO_DOCUMENTS_FOUND
        enriched = await self.enrich_records(collection.results, fields=fields)
        payload = collection.model_dump(mode="json")
        payload["results"] = enriched
        return json.dumps(payload)

    async def enrich_records(self, documents: list[dict[str, Any]], fields: list[str] | None = None) -> list[dict[str, Any]]:
        """Resolve the foreign keys of all given documents.

        Args:
            documents (list[dict[str, Any]]): Raw documents.
            fields (list[str] | None): Optional allow-list of output fields.

        Returns:
            list[dict[str, Any]]: Enriched documents in input order. An empty input returns
            an empty list without any request being made.
        """
        if not documents:
            return []

        lookups = await self.fetch_lookups()
        return [self._project(self._enrich(document, lookups), fields) for document in documents]

    async def fetch_lookups(self) -> ReferenceLookups:
        """Fetch the four reference collections concurrently and build the lookup tables.

        Returns:
            ReferenceLookups: Fresh lookup tables for one enrichment call.

        Raises:
            RequestError: If any fetch fails; no partial lookups are returned.
        """
        correspondents, document_types, tags, custom_fields = await asyncio.gather(
            self._dms.do_fetch_correspondents(),
            self._dms.do_fetch_document_types(),
            self._dms.do_fetch_tags(),
            self._dms.do_fetch_custom_fields(),
        )
        lookups = ReferenceLookups(
            correspondents=LookupTable(correspondents.results),
            document_types=LookupTable(document_types.results),
            tags=LookupTable(tags.results),
            custom_fields=LookupTable(custom_fields.results),
        )
        self.logging.debug(
            "Built lookups: correspondents=%d document_types=%d tags=%d custom_fields=%d",
            len(lookups.correspondents),
            len(lookups.document_types),
            len(lookups.tags),
            len(lookups.custom_fields),
        )
        return lookups

    ##########################################
    ############### HELPERS ##################
    ##########################################

    def _enrich(self, document: dict[str, Any], lookups: ReferenceLookups) -> dict[str, Any]:
        enriched = dict(document)
        enriched["correspondent"] = self._resolve_optional(document.get("correspondent"), lookups.correspondents)
        enriched["document_type"] = self._resolve_optional(document.get("document_type"), lookups.document_types)

        tags = document.get("tags")
        if isinstance(tags, list):
            enriched["tags"] = [lookups.tags.resolve(tag_id) for tag_id in tags]

        custom_fields = document.get("custom_fields")
        if isinstance(custom_fields, list):
            enriched["custom_fields"] = [self._resolve_custom_field(instance, lookups.custom_fields) for instance in custom_fields]

        return enriched

    def _resolve_optional(self, entity_id: Any, table: LookupTable) -> dict[str, Any] | None:
        if entity_id is None:
            return None
        return table.resolve(entity_id)

    def _resolve_custom_field(self, instance: Any, table: LookupTable) -> Any:
        if not isinstance(instance, dict):
            return instance
        field_id = instance.get("field")
        return EnrichedCustomField(
            field=field_id,
            name=table.get_name(field_id),
            value=instance.get("value"),
        ).model_dump()

    def _project(self, document: dict[str, Any], fields: list[str] | None) -> dict[str, Any]:
        if fields:
            return {field: document[field] for field in fields if field in document}
        return {key: value for key, value in document.items() if key not in DEFAULT_EXCLUDED_FIELDS}

"""Tests for resolving document foreign keys to names."""

import asyncio
import json

import pytest

from fakes import SAMPLE_TAGS
from server.core.EnrichmentService import NO_DOCUMENT_FOUND, NO_DOCUMENTS_FOUND, EnrichmentService, LookupTable
from shared.clients.dms.models.Collection import Collection
from shared.clients.dms.models.NamedItem import NamedItem
from shared.clients.errors import RequestError

LOOKUP_PATHS = {"/api/correspondents/", "/api/document_types/", "/api/tags/", "/api/custom_fields/"}


@pytest.fixture
def enrichment_service(helper_config, dms_client):
    return EnrichmentService(helper_config=helper_config, dms_client=dms_client)


class TestLookupTable:
    """Test id to name lookups."""

    def test_known_and_unknown_ids(self):
        table = LookupTable([NamedItem(id=1, name="SPAR"), NamedItem(id=2, name="")])
        assert table.get_name(1) == "SPAR"
        assert table.get_name(2) == "2"
        assert table.get_name(99) == "99"
        assert table.resolve(99) == {"id": 99, "name": "99"}


class TestEnrichRecords:
    """Test the rewrite of single documents."""

    @pytest.mark.asyncio
    async def test_resolves_all_references(self, enrichment_service, fake_paperless, sample_document):
        fake_paperless.add_reference_collections()
        [document] = await enrichment_service.enrich_records([sample_document])

        assert document["correspondent"] == {"id": 1, "name": "SPAR"}
        assert document["document_type"] == {"id": 3, "name": "Invoice"}
        assert document["tags"] == [{"id": 5, "name": "Finance"}, {"id": 6, "name": "Inbox"}]
        assert document["custom_fields"] == [{"field": 7, "name": "Amount", "value": "EUR11.48"}]
        assert document["title"] == "SPAR Einkauf 18.11.2024"

    @pytest.mark.asyncio
    async def test_fetches_each_lookup_once(self, enrichment_service, fake_paperless, sample_document):
        """One enrichment call fetches the four collections once, whatever the number of documents."""
        fake_paperless.add_reference_collections()
        await enrichment_service.enrich_records([sample_document, dict(sample_document, id=2)])

        assert sorted(fake_paperless.paths()) == sorted(LOOKUP_PATHS)

    @pytest.mark.asyncio
    async def test_lookups_fetched_concurrently(self, enrichment_service, dms_client, fake_paperless, monkeypatch):
        """All four lookup requests are in flight at the same time."""
        fake_paperless.add_reference_collections()
        in_flight = 0
        max_in_flight = 0

        def track(fetch):
            async def tracked():
                nonlocal in_flight, max_in_flight
                in_flight += 1
                max_in_flight = max(max_in_flight, in_flight)
                try:
                    await asyncio.sleep(0.01)
                    return await fetch()
                finally:
                    in_flight -= 1

            return tracked

        for name in ("do_fetch_correspondents", "do_fetch_document_types", "do_fetch_tags", "do_fetch_custom_fields"):
            monkeypatch.setattr(dms_client, name, track(getattr(dms_client, name)))

        await enrichment_service.fetch_lookups()

        assert max_in_flight == 4
        assert sorted(fake_paperless.paths()) == sorted(LOOKUP_PATHS)

    @pytest.mark.asyncio
    async def test_unknown_ids_fall_back_to_id(self, enrichment_service, fake_paperless, sample_document):
        """An id missing from its lookup is rendered with the id as name."""
        fake_paperless.add_reference_collections()
        document = dict(sample_document, correspondent=42, tags=[5, 77], custom_fields=[{"field": 8, "value": 1}])
        [enriched] = await enrichment_service.enrich_records([document])

        assert enriched["correspondent"] == {"id": 42, "name": "42"}
        assert enriched["tags"][1] == {"id": 77, "name": "77"}
        assert enriched["custom_fields"] == [{"field": 8, "name": "8", "value": 1}]

    @pytest.mark.asyncio
    async def test_null_references_preserved(self, enrichment_service, fake_paperless, sample_document):
        fake_paperless.add_reference_collections()
        document = dict(sample_document, correspondent=None, document_type=None)
        [enriched] = await enrichment_service.enrich_records([document])

        assert enriched["correspondent"] is None
        assert enriched["document_type"] is None

    @pytest.mark.asyncio
    async def test_malformed_lists_pass_through(self, enrichment_service, fake_paperless, sample_document):
        """Non-list tags and custom fields are left unchanged."""
        fake_paperless.add_reference_collections()
        document = dict(sample_document, tags="5,6", custom_fields=None)
        [enriched] = await enrichment_service.enrich_records([document])

        assert enriched["tags"] == "5,6"
        assert enriched["custom_fields"] is None

    @pytest.mark.asyncio
    async def test_custom_field_values_untouched(self, enrichment_service, fake_paperless, sample_document):
        fake_paperless.add_reference_collections()
        values = [[12, 13], {"nested": True}, None, 3.5]
        document = dict(sample_document, custom_fields=[{"field": 7, "value": value} for value in values])
        [enriched] = await enrichment_service.enrich_records([document])

        assert [item["value"] for item in enriched["custom_fields"]] == values

    @pytest.mark.asyncio
    async def test_content_excluded_by_default(self, enrichment_service, fake_paperless, sample_document):
        fake_paperless.add_reference_collections()
        [enriched] = await enrichment_service.enrich_records([sample_document])
        assert "content" not in enriched
        assert "archive_serial_number" in enriched

    @pytest.mark.asyncio
    async def test_field_allow_list(self, enrichment_service, fake_paperless, sample_document):
        """Only requested fields are returned, unknown names are ignored."""
        fake_paperless.add_reference_collections()
        [enriched] = await enrichment_service.enrich_records([sample_document], fields=["id", "tags", "content", "missing"])

        assert enriched == {
            "id": 12345,
            "tags": [{"id": 5, "name": "Finance"}, {"id": 6, "name": "Inbox"}],
            "content": sample_document["content"],
        }

    @pytest.mark.asyncio
    async def test_no_documents_no_requests(self, enrichment_service, fake_paperless):
        """Enriching nothing never fetches the lookups."""
        assert await enrichment_service.enrich_records([]) == []
        assert fake_paperless.requests == []

    @pytest.mark.asyncio
    async def test_lookup_failure_aborts(self, enrichment_service, fake_paperless, sample_document):
        """A failing lookup aborts the whole enrichment, there is no partial result."""
        fake_paperless.add_reference_collections()
        fake_paperless.add("GET", "/api/tags/", status=500, json={"detail": "database is locked"})

        with pytest.raises(RequestError, match="database is locked"):
            await enrichment_service.enrich_records([sample_document])


class TestEnrichDocumentAndCollection:
    """Test the JSON rendering for single documents and pages."""

    @pytest.mark.asyncio
    async def test_missing_document(self, enrichment_service, fake_paperless):
        assert await enrichment_service.enrich_document(None) == NO_DOCUMENT_FOUND
        assert fake_paperless.requests == []

    @pytest.mark.asyncio
    async def test_single_document(self, enrichment_service, fake_paperless, sample_document):
        fake_paperless.add_reference_collections()
        result = json.loads(await enrichment_service.enrich_document(sample_document, fields=["id", "correspondent"]))
        assert result == {"id": 12345, "correspondent": {"id": 1, "name": "SPAR"}}

    @pytest.mark.asyncio
    async def test_empty_collection(self, enrichment_service, fake_paperless):
        collection = Collection[dict].model_validate({"count": 0, "results": []})
        assert await enrichment_service.enrich_collection(collection) == NO_DOCUMENTS_FOUND
        assert fake_paperless.requests == []

    @pytest.mark.asyncio
    async def test_collection_keeps_pagination(self, enrichment_service, fake_paperless, sample_document):
        fake_paperless.add_reference_collections()
        collection = Collection[dict].model_validate(
            {"count": 30, "next": "http://paperless.test:8000/api/documents/?page=2", "previous": None, "all": [12345], "results": [sample_document]}
        )
        result = json.loads(await enrichment_service.enrich_collection(collection))

        assert result["count"] == 30
        assert result["next"].endswith("page=2")
        assert result["all"] == [12345]
        assert result["results"][0]["tags"][0] == {"id": 5, "name": "Finance"}

    @pytest.mark.asyncio
    async def test_lookups_built_from_typed_collections(self, enrichment_service, fake_paperless):
        fake_paperless.add_reference_collections()
        lookups = await enrichment_service.fetch_lookups()
        assert len(lookups.tags) == len(SAMPLE_TAGS["results"])
        assert lookups.document_types.get_name(3) == "Invoice"

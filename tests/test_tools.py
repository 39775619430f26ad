"""Tests for the document and reference object tools."""

import base64
import json

import pytest

from fakes import SAMPLE_TAGS
from server.core.BulkEditNormalizer import BulkEditNormalizer
from server.core.EnrichmentService import EnrichmentService
from server.models.tools import CustomFieldExtraData, DocumentPermissions, PermissionSet
from server.tools.CorrespondentTools import CorrespondentTools
from server.tools.CustomFieldTools import CustomFieldTools
from server.tools.DocumentTools import DocumentTools
from server.tools.TagTools import TagTools
from shared.clients.dms.models.CustomField import CustomFieldValue
from shared.clients.errors import InvalidInputError, ValidationError


@pytest.fixture
def normalizer(helper_config):
    return BulkEditNormalizer(helper_config=helper_config)


@pytest.fixture
def document_tools(helper_config, dms_client, normalizer):
    enrichment_service = EnrichmentService(helper_config=helper_config, dms_client=dms_client)
    return DocumentTools(helper_config=helper_config, dms_client=dms_client, enrichment_service=enrichment_service, normalizer=normalizer)


@pytest.fixture
def tag_tools(helper_config, dms_client, normalizer):
    return TagTools(helper_config=helper_config, dms_client=dms_client, normalizer=normalizer)


@pytest.fixture
def correspondent_tools(helper_config, dms_client, normalizer):
    return CorrespondentTools(helper_config=helper_config, dms_client=dms_client, normalizer=normalizer)


@pytest.fixture
def custom_field_tools(helper_config, dms_client, normalizer):
    return CustomFieldTools(helper_config=helper_config, dms_client=dms_client, normalizer=normalizer)


class TestDocumentReadTools:
    """Test listing, fetching and searching documents."""

    @pytest.mark.asyncio
    async def test_list_documents_filters(self, document_tools, fake_paperless, sample_document):
        """Filters map to the Paperless query names, unset filters are not sent."""
        fake_paperless.add_reference_collections()
        fake_paperless.add("GET", "/api/documents/", json={"count": 1, "results": [sample_document]})

        result = json.loads(await document_tools.list_documents(page_size=3, correspondent=1, tag=5, ordering="-created"))

        params = fake_paperless.requests[0].url.params
        assert dict(params) == {"page_size": "3", "correspondent__id": "1", "tags__id": "5", "ordering": "-created"}
        assert result["count"] == 1
        assert result["results"][0]["correspondent"] == {"id": 1, "name": "SPAR"}
        assert "content" not in result["results"][0]

    @pytest.mark.asyncio
    async def test_list_documents_empty(self, document_tools, fake_paperless):
        fake_paperless.add("GET", "/api/documents/", json={"count": 0, "results": []})
        assert await document_tools.list_documents() == "No documents found"
        assert fake_paperless.paths() == ["/api/documents/"]

    @pytest.mark.asyncio
    async def test_get_document_with_fields(self, document_tools, fake_paperless, sample_document):
        fake_paperless.add_reference_collections()
        fake_paperless.add("GET", "/api/documents/12345/", json=sample_document)

        result = json.loads(await document_tools.get_document(12345, fields=["title", "document_type"]))
        assert result == {"title": "SPAR Einkauf 18.11.2024", "document_type": {"id": 3, "name": "Invoice"}}

    @pytest.mark.asyncio
    async def test_search_documents(self, document_tools, fake_paperless, sample_document):
        fake_paperless.add_reference_collections()
        fake_paperless.add("GET", "/api/documents/", json={"count": 1, "results": [sample_document]})

        result = json.loads(await document_tools.search_documents("butter"))
        assert fake_paperless.requests[0].url.params["query"] == "butter"
        assert result["results"][0]["custom_fields"][0]["name"] == "Amount"


class TestDocumentWriteTools:
    """Test updating, deleting, uploading and bulk editing documents."""

    @pytest.mark.asyncio
    async def test_update_document_patch(self, document_tools, fake_paperless, sample_document):
        fake_paperless.add_reference_collections()
        fake_paperless.add("PATCH", "/api/documents/12345/", json=dict(sample_document, title="Renamed"))

        result = json.loads(
            await document_tools.update_document(12345, title="Renamed", custom_fields=[CustomFieldValue(field=7, value="EUR2.50")])
        )

        body = json.loads(fake_paperless.requests[0].content)
        assert body == {"title": "Renamed", "custom_fields": [{"field": 7, "value": "EUR2.50"}]}
        assert result["title"] == "Renamed"

    @pytest.mark.asyncio
    async def test_update_document_rejects_trailing_symbol(self, document_tools, fake_paperless):
        """The monetary check runs before any request is sent."""
        with pytest.raises(ValidationError, match="EUR9.99"):
            await document_tools.update_document(1, custom_fields=[CustomFieldValue(field=7, value="9.99€")])
        assert fake_paperless.requests == []

    @pytest.mark.asyncio
    async def test_delete_document_needs_confirm(self, document_tools, fake_paperless):
        with pytest.raises(ValidationError, match="Confirmation required"):
            await document_tools.delete_document(1)
        assert fake_paperless.requests == []

    @pytest.mark.asyncio
    async def test_delete_document_confirmed(self, document_tools, fake_paperless):
        fake_paperless.add("DELETE", "/api/documents/1/", status=204)
        assert json.loads(await document_tools.delete_document(1, confirm=True)) == {"status": "deleted"}
        assert fake_paperless.paths("DELETE") == ["/api/documents/1/"]

    @pytest.mark.asyncio
    async def test_post_document_returns_task_status(self, document_tools, fake_paperless):
        fake_paperless.add("POST", "/api/documents/post_document/", json="0b1c6c3e-task")
        payload = "data:application/pdf;base64," + base64.b64encode(b"%PDF-1.7").decode()

        result = json.loads(await document_tools.post_document(payload, "scan.pdf", title="Doc", tags=[5, 6]))

        assert result == {"status": "0b1c6c3e-task"}
        body = fake_paperless.requests[0].content
        assert b"%PDF-1.7" in body
        assert b'name="title"\r\n\r\nDoc\r\n' in body

    @pytest.mark.asyncio
    async def test_post_document_numeric_answer(self, document_tools, fake_paperless):
        fake_paperless.add("POST", "/api/documents/post_document/", json="42")
        result = json.loads(await document_tools.post_document(base64.b64encode(b"x").decode(), "x.txt"))
        assert result == {"id": 42}

    @pytest.mark.asyncio
    async def test_post_document_invalid_base64(self, document_tools, fake_paperless):
        with pytest.raises(InvalidInputError):
            await document_tools.post_document("not base64!", "x.pdf")
        assert fake_paperless.requests == []

    @pytest.mark.asyncio
    async def test_bulk_edit_delete_needs_confirm(self, document_tools, fake_paperless):
        with pytest.raises(ValidationError):
            await document_tools.bulk_edit_documents([1, 2], "delete")
        assert fake_paperless.requests == []

    @pytest.mark.asyncio
    async def test_bulk_edit_remove_tag_without_confirm(self, document_tools, fake_paperless):
        """Removing a tag from documents is not destructive and needs no confirmation."""
        fake_paperless.add("POST", "/api/documents/bulk_edit/", json={"result": "OK"})

        result = json.loads(await document_tools.bulk_edit_documents([1, 2], "remove_tag", tag=5, add_tags=[]))

        assert result == {"result": "OK"}
        body = json.loads(fake_paperless.requests[0].content)
        assert body == {"documents": [1, 2], "method": "remove_tag", "parameters": {"tag": 5}}

    @pytest.mark.asyncio
    async def test_bulk_edit_custom_fields(self, document_tools, fake_paperless):
        fake_paperless.add("POST", "/api/documents/bulk_edit/", json={"result": "OK"})

        await document_tools.bulk_edit_documents(
            [3],
            "modify_custom_fields",
            add_custom_fields=[CustomFieldValue(field=7, value="USD10.00")],
            remove_custom_fields=[],
        )

        parameters = json.loads(fake_paperless.requests[0].content)["parameters"]
        assert parameters == {
            "assign_custom_fields": [7],
            "assign_custom_fields_values": [{"field": 7, "value": "USD10.00"}],
        }

    @pytest.mark.asyncio
    async def test_bulk_edit_permissions(self, document_tools, fake_paperless):
        fake_paperless.add("POST", "/api/documents/bulk_edit/", json={"result": "OK"})
        permissions = DocumentPermissions(owner=2, set_permissions=PermissionSet.model_validate({"view": {"users": [4]}}))

        await document_tools.bulk_edit_documents([3], "set_permissions", permissions=permissions)

        parameters = json.loads(fake_paperless.requests[0].content)["parameters"]
        assert parameters == {"permissions": {"owner": 2, "set_permissions": {"view": {"users": [4]}}}}


class TestDownloadTools:
    """Test binary downloads returned as embedded resources."""

    @pytest.mark.asyncio
    async def test_download_document(self, document_tools, fake_paperless):
        fake_paperless.add(
            "GET",
            "/api/documents/9/download/",
            content=b"%PDF-1.7",
            headers={"Content-Type": "application/pdf", "Content-Disposition": 'attachment; filename="my scan.pdf"'},
        )
        resource = await document_tools.download_document(9)

        assert resource.type == "resource"
        assert resource.resource.mimeType == "application/pdf"
        assert str(resource.resource.uri) == "file:///my%20scan.pdf"
        assert base64.b64decode(resource.resource.blob) == b"%PDF-1.7"

    @pytest.mark.asyncio
    async def test_thumbnail(self, document_tools, fake_paperless):
        fake_paperless.add("GET", "/api/documents/9/thumb/", content=b"RIFF", headers={"Content-Type": "image/webp"})
        resource = await document_tools.get_document_thumbnail(9)

        assert resource.resource.mimeType == "image/webp"
        assert str(resource.resource.uri) == "file:///document-9-thumbnail"


class TestObjectTools:
    """Test the tag, correspondent and custom field tools."""

    @pytest.mark.asyncio
    async def test_list_tags_filters_and_algorithm_names(self, tag_tools, fake_paperless):
        fake_paperless.add("GET", "/api/tags/", json=SAMPLE_TAGS)

        result = json.loads(await tag_tools.list_tags(name__icontains="fin", page_size=100))

        assert dict(fake_paperless.requests[0].url.params) == {"name__icontains": "fin", "page_size": "100"}
        assert result["results"][0]["matching_algorithm"] == {"id": 1, "name": "Any word"}
        assert "matching_algorithm" not in result["results"][1]

    @pytest.mark.asyncio
    async def test_create_tag_drops_unset(self, tag_tools, fake_paperless):
        fake_paperless.add("POST", "/api/tags/", status=201, json={"id": 9, "name": "Tax", "matching_algorithm": 3})

        result = json.loads(await tag_tools.create_tag("Tax", matching_algorithm=3))

        assert json.loads(fake_paperless.requests[0].content) == {"name": "Tax", "matching_algorithm": 3}
        assert result["matching_algorithm"] == {"id": 3, "name": "Exact match"}

    @pytest.mark.asyncio
    async def test_update_correspondent_patch(self, correspondent_tools, fake_paperless):
        fake_paperless.add("PATCH", "/api/correspondents/1/", json={"id": 1, "name": "SPAR AG", "matching_algorithm": 6})

        result = json.loads(await correspondent_tools.update_correspondent(1, name="SPAR AG"))

        assert json.loads(fake_paperless.requests[0].content) == {"name": "SPAR AG"}
        assert result["matching_algorithm"]["name"] == "Automatic"

    @pytest.mark.asyncio
    async def test_delete_tag_needs_confirm(self, tag_tools, fake_paperless):
        with pytest.raises(ValidationError):
            await tag_tools.delete_tag(5)
        assert fake_paperless.requests == []

    @pytest.mark.asyncio
    async def test_delete_tag_confirmed(self, tag_tools, fake_paperless):
        fake_paperless.add("DELETE", "/api/tags/5/", status=204)
        assert json.loads(await tag_tools.delete_tag(5, confirm=True)) == {"status": "deleted"}

    @pytest.mark.asyncio
    async def test_bulk_edit_tags_set_permissions(self, tag_tools, fake_paperless):
        fake_paperless.add("POST", "/api/bulk_edit_objects/", json={"result": "OK"})

        await tag_tools.bulk_edit_tags([5, 6], "set_permissions", owner=3, merge=True)

        body = json.loads(fake_paperless.requests[0].content)
        assert body == {"objects": [5, 6], "object_type": "tags", "operation": "set_permissions", "owner": 3, "merge": True}

    @pytest.mark.asyncio
    async def test_bulk_edit_correspondents_delete_gate(self, correspondent_tools, fake_paperless):
        with pytest.raises(ValidationError):
            await correspondent_tools.bulk_edit_correspondents([1], "delete", confirm=False)
        assert fake_paperless.requests == []

    @pytest.mark.asyncio
    async def test_bulk_delete_custom_fields(self, custom_field_tools, fake_paperless):
        fake_paperless.add("POST", "/api/bulk_edit_objects/", json={"result": "OK"})

        result = json.loads(await custom_field_tools.bulk_edit_custom_fields([7], "delete", confirm=True))

        body = json.loads(fake_paperless.requests[0].content)
        assert body == {"objects": [7], "object_type": "custom_field", "operation": "delete"}
        assert result == {"result": "OK"}

    @pytest.mark.asyncio
    async def test_create_custom_field(self, custom_field_tools, fake_paperless):
        fake_paperless.add("POST", "/api/custom_fields/", status=201, json={"id": 8, "name": "Total", "data_type": "monetary"})

        await custom_field_tools.create_custom_field("Total", "monetary", extra_data=CustomFieldExtraData(default_currency="EUR"))

        body = json.loads(fake_paperless.requests[0].content)
        assert body == {"name": "Total", "data_type": "monetary", "extra_data": {"default_currency": "EUR"}}

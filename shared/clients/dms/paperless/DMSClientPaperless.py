import re
from typing import Any
from urllib.parse import unquote

import httpx

from shared.clients.dms.DMSClientInterface import DMSClientInterface
from shared.clients.dms.models.Document import BinaryResponse, DocumentMetadata
from shared.clients.dms.models.ObjectType import ObjectType
from shared.helper.HelperConfig import HelperConfig
from shared.models.config import EnvConfig

_FILENAME_EXT_REGEX = re.compile(r"filename\*\s*=\s*(?:[\w-]+'[\w-]*')?\"?([^\";]+)\"?", re.IGNORECASE)
_FILENAME_REGEX = re.compile(r"filename\s*=\s*\"?([^\";]+)\"?", re.IGNORECASE)


class DMSClientPaperless(DMSClientInterface):
    API_VERSION = 5

    def __init__(self, helper_config: HelperConfig):
        super().__init__(helper_config=helper_config)
        self._base_url = self.get_config_val("BASE_URL", default=None, val_type="string")
        self._api_key = self.get_config_val("API_KEY", default=None, val_type="string")
        self._public_url = self.get_config_val("PUBLIC_URL", default=self._base_url, val_type="string")

    ##########################################
    ################ GETTER ##################
    ##########################################

    ################ GENERAL ##################
    def _get_engine_name(self) -> str:
        return "Paperless"

    def get_public_url(self) -> str:
        return self._public_url.rstrip("/")

    ################ CONFIG ##################
    def _get_required_config(self) -> list[EnvConfig]:
        return [
            EnvConfig(env_key="BASE_URL", val_type="string", default=None),
            EnvConfig(env_key="API_KEY", val_type="string", default=None),
        ]

    ################ AUTH ##################
    def _get_auth_header(self) -> dict:
        if self._api_key:
            return {"Authorization": f"Token {self._api_key}"}
        else:
            return {}

    def _get_default_headers(self) -> dict:
        return {
            "Accept": f"application/json; version={self.API_VERSION}",
            "Accept-Language": "en-US,en;q=0.9",
        }

    ################ ENDPOINTS ##################
    def _get_base_url(self) -> str:
        return self._base_url

    def _get_endpoint_healthcheck(self) -> str:
        return "/api/"

    def _get_endpoint_documents(self) -> str:
        return "/api/documents/"

    def _get_endpoint_document_details(self, document_id: int) -> str:
        return f"/api/documents/{document_id}/"

    def _get_endpoint_document_download(self, document_id: int) -> str:
        return f"/api/documents/{document_id}/download/"

    def _get_endpoint_document_thumbnail(self, document_id: int) -> str:
        return f"/api/documents/{document_id}/thumb/"

    def _get_endpoint_post_document(self) -> str:
        return "/api/documents/post_document/"

    def _get_endpoint_bulk_edit_documents(self) -> str:
        return "/api/documents/bulk_edit/"

    def _get_endpoint_bulk_edit_objects(self) -> str:
        return "/api/bulk_edit_objects/"

    def _get_endpoint_objects(self, object_type: ObjectType) -> str:
        return f"/api/{object_type.value}/"

    def _get_endpoint_object_details(self, object_type: ObjectType, object_id: int) -> str:
        return f"/api/{object_type.value}/{object_id}/"

    ##########################################
    ############### REQUESTS #################
    ##########################################

    async def do_post_document(self, content: bytes, filename: str, metadata: DocumentMetadata | None = None) -> Any:
        form_fields = (metadata or DocumentMetadata()).to_form_fields()
        self.logging.info("Uploading document %r with fields %s", filename, sorted(form_fields))

        # multipart: httpx sets the boundary content type itself, never send JSON headers here
        response = await self.do_request(
            method="POST",
            endpoint=self._get_endpoint_post_document(),
            data=form_fields,
            files={"document": (filename, content, "application/octet-stream")},
        )
        return self._parse_body(response)

    async def do_download_document(self, document_id: int, original: bool = False) -> BinaryResponse:
        response = await self.do_request(
            method="GET",
            endpoint=self._get_endpoint_document_download(document_id),
            params={"original": "true"} if original else None,
        )
        return self._parse_binary_response(response, fallback_name=f"document-{document_id}", fallback_mime_type="application/pdf")

    async def do_fetch_thumbnail(self, document_id: int) -> BinaryResponse:
        response = await self.do_request(method="GET", endpoint=self._get_endpoint_document_thumbnail(document_id))
        return self._parse_binary_response(response, fallback_name=f"document-{document_id}-thumbnail", fallback_mime_type="image/webp")

    ##########################################
    ########### RESPONSE PARSER ##############
    ##########################################

    def _parse_binary_response(self, response: httpx.Response, fallback_name: str, fallback_mime_type: str) -> BinaryResponse:
        content_type = response.headers.get("content-type", "")
        mime_type = content_type.split(";")[0].strip() or fallback_mime_type
        return BinaryResponse(
            content=response.content,
            filename=self._parse_filename(response.headers, fallback_name),
            mime_type=mime_type,
        )

    def _parse_filename(self, headers: httpx.Headers, fallback: str) -> str:
        """
        Extract the file name from a Content-Disposition header.

        Args:
            headers (httpx.Headers): The response headers.
            fallback (str): The name to use when the header is missing or has no file name.

        Returns:
            str: The file name, RFC 5987 encoded names (filename*=) take precedence.
        """
        disposition = headers.get("content-disposition")
        if not disposition:
            return fallback
        match = _FILENAME_EXT_REGEX.search(disposition)
        if match:
            return unquote(match.group(1)).strip() or fallback
        match = _FILENAME_REGEX.search(disposition)
        if match:
            return match.group(1).strip() or fallback
        return fallback

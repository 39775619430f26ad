"""Paperless document related models.

Documents themselves stay plain dicts: the bridge only rewrites their foreign key
fields and passes every other key through unchanged.
"""

from pydantic import BaseModel


class DocumentMetadata(BaseModel):
    """
    Optional metadata sent along with an uploaded document.
    """
    title: str | None = None
    created: str | None = None
    correspondent: int | None = None
    document_type: int | None = None
    storage_path: int | None = None
    tags: list[int] | None = None
    archive_serial_number: int | str | None = None
    custom_fields: list[int] | None = None

    def to_form_fields(self) -> dict[str, str | list[str]]:
        """
        Render the metadata as multipart form fields. Every value is sent as a string,
        list values become repeated parts. Unset and empty values are left out, zero is kept.

        Returns:
            dict[str, str | list[str]]: The form fields in declaration order.
        """
        fields: dict[str, str | list[str]] = {}
        for key, value in self.model_dump().items():
            if value is None or value == "":
                continue
            if isinstance(value, list):
                if value:
                    fields[key] = [str(item) for item in value]
            else:
                fields[key] = str(value)
        return fields


class BinaryResponse(BaseModel):
    """
    A raw binary response (download, thumbnail) with the metadata needed to return it.
    """
    content: bytes
    filename: str
    mime_type: str


class DownloadedFile(BaseModel):
    """
    A binary file handed back to the tool caller as base64.
    """
    filename: str
    mime_type: str
    blob: str

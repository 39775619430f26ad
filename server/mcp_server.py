"""MCP tool server exposing Paperless-NGX to AI agents."""

from mcp.server.fastmcp import FastMCP
from mcp.server.fastmcp.server import TransportSecuritySettings
from mcp.types import ToolAnnotations

from server.core.BulkEditNormalizer import BulkEditNormalizer
from server.core.EnrichmentService import EnrichmentService
from server.tools.CorrespondentTools import CorrespondentTools
from server.tools.CustomFieldTools import CustomFieldTools
from server.tools.DocumentTools import DocumentTools
from server.tools.DocumentTypeTools import DocumentTypeTools
from server.tools.TagTools import TagTools
from server.tools.ToolInterface import ToolInterface
from server.tools.error_handling import with_error_handling
from shared.clients.dms.DMSClientInterface import DMSClientInterface
from shared.helper.HelperConfig import HelperConfig

SERVER_NAME = "paperless-ngx"

DEFAULT_ALLOWED_HOSTS = [
    "localhost",
    "localhost:*",
    "127.0.0.1",
    "127.0.0.1:*",
]


def build_instructions(public_url: str) -> str:
    return f"""
    Paperless-NGX MCP server for managing documents, tags, correspondents, document types and custom fields.

    ## REMOVE vs DELETE
    - To take a tag off documents use bulk_edit_documents with method "remove_tag" or "modify_tags".
      This only affects the given documents.
    - delete_tag, delete_correspondent, delete_document_type, delete_custom_field and the "delete"
      operation of the bulk edit tools remove the entity from the ENTIRE system. They require confirm: true.
      Only use them when the user explicitly asks for deletion.

    ## Links
    Documents can be opened in the browser at {public_url}/documents/<id>/ .
    Always use this form when sharing a link to a document with the user.

    ## IDs
    Filters take ids. Resolve names first with list_tags, list_correspondents, list_document_types or list_custom_fields.
    """


def build_tool_classes(helper_config: HelperConfig, dms_client: DMSClientInterface) -> list[ToolInterface]:
    """
    Creates all tool classes, wired to one DMS client and one set of services.

    Args:
        helper_config (HelperConfig): The application config.
        dms_client (DMSClientInterface): The DMS client, booted before the first tool call.

    Returns:
        list[ToolInterface]: The tool classes in registration order.
    """
    enrichment_service = EnrichmentService(helper_config=helper_config, dms_client=dms_client)
    normalizer = BulkEditNormalizer(helper_config=helper_config)
    return [
        DocumentTools(helper_config=helper_config, dms_client=dms_client, enrichment_service=enrichment_service, normalizer=normalizer),
        TagTools(helper_config=helper_config, dms_client=dms_client, normalizer=normalizer),
        CorrespondentTools(helper_config=helper_config, dms_client=dms_client, normalizer=normalizer),
        DocumentTypeTools(helper_config=helper_config, dms_client=dms_client, normalizer=normalizer),
        CustomFieldTools(helper_config=helper_config, dms_client=dms_client, normalizer=normalizer),
    ]


def build_mcp_server(helper_config: HelperConfig, dms_client: DMSClientInterface) -> FastMCP:
    """
    Creates the MCP server and registers every tool.

    Args:
        helper_config (HelperConfig): The application config.
        dms_client (DMSClientInterface): The DMS client used by all tools.

    Returns:
        FastMCP: The server, ready for stdio or streamable HTTP.
    """
    logging = helper_config.get_logger()
    allowed_hosts = helper_config.get_list_val("MCP_ALLOWED_HOSTS", default=DEFAULT_ALLOWED_HOSTS)

    mcp = FastMCP(
        SERVER_NAME,
        instructions=build_instructions(dms_client.get_public_url()),
        stateless_http=True,
        transport_security=TransportSecuritySettings(allowed_hosts=allowed_hosts),
    )

    tool_count = 0
    for tool_class in build_tool_classes(helper_config, dms_client):
        for definition in tool_class.get_tool_definitions():
            mcp.add_tool(
                with_error_handling(definition.name, definition.handler, logging),
                name=definition.name,
                description=definition.description,
                annotations=ToolAnnotations(
                    readOnlyHint=definition.read_only,
                    destructiveHint=definition.destructive,
                ),
            )
            tool_count += 1

    logging.info("Registered %d tools on MCP server '%s'.", tool_count, SERVER_NAME, color="cyan")
    return mcp

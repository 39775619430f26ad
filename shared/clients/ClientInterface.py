from abc import ABC, abstractmethod

import httpx
from httpx._types import HeaderTypes, QueryParamTypes, RequestContent, RequestData, RequestFiles
from typing import Any
from shared.models.config import EnvConfig
from shared.clients.errors import NotConfiguredError, RequestError

from shared.helper.HelperConfig import HelperConfig


class ClientInterface(ABC):
    def __init__(self, helper_config: HelperConfig):
        self.logging = helper_config.get_logger()
        self._helper_config = helper_config
        self.timeout = helper_config.get_number_val(f"{self.get_client_type().upper()}_TIMEOUT", default=30.0)

        # client and config
        self._client: httpx.AsyncClient | None = None
        self.validate_full_configuration()

    ##########################################
    ############### CHECKER ##################
    ##########################################

    def validate_full_configuration(self) -> None:
        """
        Validates that all required configuration values for the client are set and valid.

        Raises:
            ValueError: If any required configuration value is missing or invalid.
        """
        req_config = self._get_required_config()
        for config in req_config:
            _ = self.get_config_val(raw_key=config.env_key, default=config.default, val_type=config.val_type)

    def is_booted(self) -> bool:
        """
        Returns True if boot() has been called and the HTTP client is open.
        """
        return self._client is not None

    ##########################################
    ################ GETTER ##################
    ##########################################

    ################ GENERAL ##################
    def get_client_type(self) -> str:
        """
        Returns the type of the client in lowercase. E.g. "dms"
        """
        return self._get_client_type().lower()

    @abstractmethod
    def _get_client_type(self) -> str:
        """
        Returns the type of the client. E.g. "dms"
        """
        pass

    def get_engine_name(self) -> str:
        """
        Returns the name of the engine used by the client. E.g. "paperless"
        """
        return self._get_engine_name().lower()

    @abstractmethod
    def _get_engine_name(self) -> str:
        """
        Returns the name of the engine used by the client. E.g. "Paperless"
        """
        pass

    ################ CONFIG ##################
    @abstractmethod
    def _get_required_config(self) -> list[EnvConfig]:
        """
        Returns all required configurations for the client.

        Returns:
            list[EnvConfig]: A list containing the details of each required configuration key.
        """
        pass

    def _get_config_key_name(self, raw_key:str) -> str:
        """
        Returns:
            str: The full configuration key name for the client. E.g. "DMS_PAPERLESS_API_KEY"
        """
        key_prefix = f"{self.get_client_type().upper()}_{self.get_engine_name().upper()}"
        return f"{key_prefix}_{raw_key.upper()}"

    def get_config_val(self, raw_key:str, default: Any = None, val_type: str = "string") -> Any:
        """
        Retrieves the value of a configuration key for the client.

        Args:
            raw_key (str): The raw configuration key name
            default (Any): The default value to return if the configuration key is not set
            val_type (str): The type of the configuration value ("string", "number", "bool", "list")
        """
        key = self._get_config_key_name(raw_key)
        if val_type == "string":
            return self._helper_config.get_string_val(key, default=default)
        elif val_type == "number":
            return self._helper_config.get_number_val(key, default=default)
        elif val_type == "bool":
            return self._helper_config.get_bool_val(key, default=default)
        elif val_type == "list":
            return self._helper_config.get_list_val(key, default=default)
        else:
            raise ValueError(f"Unsupported config value type '{val_type}' for env key '{raw_key}' in {self.get_client_type().upper()} client '{self.get_engine_name()}'.")

    ################ AUTH ##################
    @abstractmethod
    def _get_auth_header(self) -> dict:
        """
        Returns the authentication header for the client backend server, if an API key is set.

        Returns:
            dict: A dictionary containing the auth data
        """
        pass

    def _get_default_headers(self) -> dict:
        """
        Returns headers sent with every request in addition to the auth header.
        Caller supplied headers override them.
        """
        return {}

    ################ ENDPOINTS ##################
    @abstractmethod
    def _get_base_url(self) -> str:
        """
        Returns the base URL of the client backend server from env variables

        Returns:
            str: The base URL of the client backend server (e.g. "http://localhost:8000")
        """
        pass

    @abstractmethod
    def _get_endpoint_healthcheck(self) -> str:
        """
        Returns the endpoint path for healthcheck requests.

        Returns:
            str: The endpoint path for healthcheck requests (e.g. "/api/")
        """
        pass

    ##########################################
    ############### REQUESTS #################
    ##########################################

    async def do_healthcheck(self) -> httpx.Response:
        """Check if the client backend is healthy by sending a test request.

        Returns:
            httpx.Response: The response from the healthcheck request.
        """
        return await self.do_request(method="GET", endpoint=self._get_endpoint_healthcheck(), raise_on_error=False)

    ##########################################
    ############ CORE REQUESTS ###############
    ##########################################

    async def boot(self, transport: httpx.AsyncBaseTransport | None = None) -> None:
        """Initialise the HTTP client.

        Args:
            transport: Optional transport for the underlying httpx client (tests pass an httpx.MockTransport).
        """
        self._client = httpx.AsyncClient(timeout=self.timeout, transport=transport)

    async def close(self) -> None:
        """Close the HTTP client and any other resources."""
        if self._client:
            await self._client.aclose()
            self._client = None

    def build_headers(self, additional_headers: HeaderTypes | None = None) -> httpx.Headers:
        """Merge auth, default and caller headers. Caller headers win.

        Args:
            additional_headers: A mapping or a sequence of (key, value) pairs.

        Returns:
            httpx.Headers: The merged, case-insensitive header set.
        """
        headers = httpx.Headers(self._get_auth_header())
        headers.update(self._get_default_headers())
        if additional_headers:
            headers.update(httpx.Headers(additional_headers))
        return headers

    async def do_request(
        self,
        method: str = "GET",
        content: RequestContent | None = None,
        data: RequestData | None = None,
        files: RequestFiles | None = None,
        json: Any | None = None,
        params: QueryParamTypes | None = None,
        endpoint: str = "",
        additional_headers: HeaderTypes | None = None,
        raise_on_error: bool = True,
    ) -> httpx.Response:
        """Send an HTTP request to the client backend.

        Args:
            method: HTTP method (GET, POST, PUT, PATCH, DELETE).
            content: Raw bytes / string body.
            data: Form fields (dict); list values become repeated fields.
            files: Multipart file upload.
            json: JSON-serialisable body (sets Content-Type automatically).
            params: URL query parameters.
            endpoint: Path to append to the base URL (leading slash optional).
            additional_headers: Extra headers that override the defaults.
            raise_on_error: Raise RequestError for any status outside [200, 300).

        Returns:
            The raw httpx.Response.

        Raises:
            NotConfiguredError: If boot() was not called.
            RequestError: If the response status is not 2xx (when raise_on_error is True).
        """
        if self._client is None:
            raise NotConfiguredError("HTTP client not initialised. Call boot() before making requests.")

        endpoint = "/" + endpoint.strip().lstrip("/") if endpoint.strip() else ""
        headers = self.build_headers(additional_headers)

        kwargs: dict = {
            "url": f"{self._get_base_url().rstrip('/')}{endpoint}",
            "headers": headers,
            "params": params,
        }

        # add exactly one body argument, multipart may combine data and files
        if content is not None:
            kwargs["content"] = content
        elif files is not None:
            kwargs["files"] = files
            if data is not None:
                kwargs["data"] = data
        elif data is not None:
            kwargs["data"] = data
        elif json is not None:
            kwargs["json"] = json

        response = await self._client.request(method, **kwargs)

        if raise_on_error and not response.is_success:
            message = self._extract_error_message(response)
            self.logging.error(
                "Request %s %s failed with status %d: %s",
                method,
                kwargs["url"],
                response.status_code,
                response.text,
            )
            raise RequestError(message, status_code=response.status_code, response_body=self._parse_body(response))

        return response

    ##########################################
    ########### RESPONSE PARSER ##############
    ##########################################

    def _parse_body(self, response: httpx.Response) -> Any:
        """Parse a response body: JSON when possible, text otherwise, None when empty.

        Args:
            response (httpx.Response): The response to parse.

        Returns:
            Any: The decoded body.
        """
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text

    def _extract_error_message(self, response: httpx.Response) -> str:
        """Pick the most specific error text the backend sent.

        Args:
            response (httpx.Response): A failed response.

        Returns:
            str: The value of 'detail', 'error' or 'message' from the body, or a generic status message.
        """
        body = self._parse_body(response)
        if isinstance(body, dict):
            for key in ("detail", "error", "message"):
                if body.get(key):
                    return str(body[key])
        return f"HTTP error! status: {response.status_code}"

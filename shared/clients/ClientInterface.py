"""Base of the HTTP backend clients.

A concrete client names its type ("catalog") and engine ("Shreddr"), declares
the settings it needs and maps its endpoints. The base resolves those settings
from "<TYPE>_<ENGINE>_<KEY>" environment variables once, owns the
httpx.AsyncClient and turns every transport problem into a TransportError.
"""

from abc import ABC, abstractmethod
from typing import Any

import httpx

from shared.helper.HelperConfig import HelperConfig
from shared.models.config import EnvConfig
from shared.models.errors import DecodeError, TransportError


class ClientInterface(ABC):
    def __init__(self, helper_config: HelperConfig):
        self.logging = helper_config.get_logger()
        self._helper_config = helper_config
        self._settings: dict[str, Any] = self._resolve_settings()
        self.timeout = float(helper_config.get_number_val(f"{self.get_client_type().upper()}_TIMEOUT", default=30.0))

        self._client: httpx.AsyncClient | None = None

    ##########################################
    ################ IDENTITY ################
    ##########################################

    def get_client_type(self) -> str:
        """
        Returns the lowercase client type, e.g. "catalog".
        """
        return self._get_client_type().lower()

    @abstractmethod
    def _get_client_type(self) -> str:
        pass

    def get_engine_name(self) -> str:
        """
        Returns the lowercase engine name, e.g. "shreddr".
        """
        return self._get_engine_name().lower()

    @abstractmethod
    def _get_engine_name(self) -> str:
        """
        Returns the display name of the engine, e.g. "Shreddr". Stored on every parsed record.
        """
        pass

    ##########################################
    ################ SETTINGS ################
    ##########################################

    @abstractmethod
    def _get_required_config(self) -> list[EnvConfig]:
        """
        Returns the settings this client reads at construction time.
        """
        pass

    def get_env_key(self, raw_key: str) -> str:
        """
        Returns:
            str: The environment variable behind a setting, e.g. "CATALOG_SHREDDR_BASE_URL" for "BASE_URL".
        """
        return f"{self.get_client_type().upper()}_{self.get_engine_name().upper()}_{raw_key.upper()}"

    def get_setting(self, raw_key: str) -> Any:
        """
        Returns the resolved value of a declared setting.

        Raises:
            KeyError: If the setting was not declared in _get_required_config().
        """
        return self._settings[raw_key.upper()]

    def _resolve_settings(self) -> dict[str, Any]:
        """
        Reads every declared setting.

        Raises:
            ValueError: If a setting without default is unset, malformed, or of an unsupported type.
        """
        readers = {
            "string": self._helper_config.get_string_val,
            "number": self._helper_config.get_number_val,
        }
        settings: dict[str, Any] = {}
        for config in self._get_required_config():
            env_key = self.get_env_key(config.env_key)
            reader = readers.get(config.val_type)
            if reader is None:
                raise ValueError(f"Unsupported setting type '{config.val_type}' for '{env_key}'.")
            settings[config.env_key.upper()] = reader(env_key, default=config.default)
        return settings

    ##########################################
    ################ BACKEND #################
    ##########################################

    @abstractmethod
    def _get_auth_header(self) -> dict:
        """
        Returns the headers authenticating every request, empty if the backend is open.
        """
        pass

    @abstractmethod
    def _get_base_url(self) -> str:
        """
        Returns the backend root without trailing slash, e.g. "http://localhost:8000".
        """
        pass

    @abstractmethod
    def _get_endpoint_healthcheck(self) -> str:
        """
        Returns a cheap GET endpoint that answers 2xx while the backend is up.
        """
        pass

    ##########################################
    ############### LIFECYCLE ################
    ##########################################

    def is_booted(self) -> bool:
        return self._client is not None

    async def boot(self, transport: httpx.AsyncBaseTransport | None = None) -> None:
        """Open the HTTP client.

        Args:
            transport (httpx.AsyncBaseTransport | None): Replaces the network transport, e.g. httpx.MockTransport in tests.
        """
        self._client = httpx.AsyncClient(timeout=self.timeout, transport=transport)

    async def close(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    async def do_healthcheck(self) -> httpx.Response:
        """
        Raises:
            TransportError: If the backend is unreachable or answers with a non-2xx status.
        """
        response = await self.do_request(method="GET", endpoint=self._get_endpoint_healthcheck())
        self.logging.info("%s backend '%s' is reachable.", self.get_client_type(), self._get_engine_name())
        return response

    ##########################################
    ############### REQUESTS #################
    ##########################################

    async def do_request(
        self,
        method: str,
        endpoint: str,
        params: dict | None = None,
        json: Any = None,
    ) -> httpx.Response:
        """Send one request to the backend.

        Args:
            method (str): HTTP method.
            endpoint (str): Path below the base URL.
            params (dict | None): Query string parameters.
            json (Any): JSON body, omitted if None.

        Returns:
            httpx.Response: The 2xx response.

        Raises:
            RuntimeError: If boot() was not called.
            TransportError: On network failure, timeout or a non-2xx status.
        """
        if self._client is None:
            raise RuntimeError(f"{self.get_client_type()} client '{self.get_engine_name()}' is not booted.")

        url = f"{self._get_base_url()}/{endpoint.strip().lstrip('/')}"
        try:
            response = await self._client.request(method, url, params=params, json=json, headers=self._get_auth_header())
        except httpx.HTTPError as e:
            self.logging.warning("%s %s failed: %s", method, url, e)
            raise TransportError(f"{method} {url} failed: {e}", url=url) from e

        if not response.is_success:
            self.logging.warning("%s %s answered %d: %s", method, url, response.status_code, response.text[:200])
            raise TransportError(
                f"{method} {url} failed with status {response.status_code}",
                status_code=response.status_code,
                url=url,
            )
        return response

    def decode_json(self, response: httpx.Response) -> Any:
        """
        Raises:
            DecodeError: If the body is not valid JSON.
        """
        try:
            return response.json()
        except ValueError as e:
            raise DecodeError(f"Body of {response.request.url} is not valid JSON: {e}") from e

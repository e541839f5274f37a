"""Send Data API JSON commands over HTTP."""

from __future__ import annotations

from typing import Any

import httpx

from ..config import ClientOptions
from ..document import codec
from ..errors import DataAPIResponseError
from ..runtime.logging import get_logger

TOKEN_HEADER = "Token"


class CommandRunner:
    """POST ``{command: payload}`` documents to one keyspace endpoint.

    Responses are returned decoded (extended scalar envelopes turned back into
    Python values). A non-2xx status raises ``httpx.HTTPStatusError``; a body
    with a non-empty ``errors`` array raises ``DataAPIResponseError``.
    """

    def __init__(
        self,
        options: ClientOptions,
        *,
        client: httpx.Client | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.options = options
        self._owns_client = client is None
        if client is None:
            headers = {"Content-Type": "application/json"}
            if options.token:
                headers[TOKEN_HEADER] = options.token
            client = httpx.Client(
                base_url=options.base_url(),
                timeout=httpx.Timeout(options.timeout_sec),
                headers=headers,
                transport=transport,
            )
        self._client = client

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> CommandRunner:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def run(self, collection: str, command: str, payload: dict[str, Any]) -> dict[str, Any]:
        logger = get_logger("http")
        logger.debug("command %s on %s", command, collection)
        response = self._client.post(
            f"/{collection}",
            content=codec.dumps({command: payload}),
        )
        response.raise_for_status()
        body = codec.decode_value(response.json())
        if not isinstance(body, dict):
            raise TypeError(f"expected a JSON object, got {type(body).__name__}")
        errors = body.get("errors")
        if errors:
            logger.warning("command %s on %s failed: %s", command, collection, errors)
            raise DataAPIResponseError.from_payload(command, errors)
        return body


__all__ = ["TOKEN_HEADER", "CommandRunner"]

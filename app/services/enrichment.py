# app/services/enrichment.py
"""Read-through lookups against the user and product services.

One GET per call. Nothing is cached or retried: a collaborator failure is
reported once, as ``ResourceNotFoundError`` or ``ServiceUnavailableError``.
"""

from __future__ import annotations

from typing import Any, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from app.core.logging import get_logger
from app.schemas.enrichment import EnrichedProduct, EnrichedUser
from app.services.exceptions import ResourceNotFoundError, ServiceUnavailableError

logger = get_logger(__name__)

M = TypeVar("M", bound=BaseModel)


class EnrichmentGateway:
    def __init__(
        self,
        user_service_url: str,
        product_service_url: str,
        *,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.user_service_url = user_service_url.rstrip("/")
        self.product_service_url = product_service_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    async def resolve_user(self, user_id: int) -> EnrichedUser:
        return await self._fetch(f"{self.user_service_url}/{user_id}", EnrichedUser, "User", user_id)

    async def resolve_product(self, product_id: int) -> EnrichedProduct:
        return await self._fetch(f"{self.product_service_url}/{product_id}", EnrichedProduct, "Product", product_id)

    async def _fetch(self, url: str, model: type[M], label: str, identifier: int) -> M:
        try:
            async with httpx.AsyncClient(transport=self._transport, timeout=self.timeout) as client:
                response = await client.get(url, headers={"Accept": "application/json"})
        except httpx.HTTPError as exc:
            logger.warning(
                "Collaborator unreachable",
                extra={"url": url, "error": str(exc)},
            )
            raise ServiceUnavailableError(f"{label} service unavailable") from exc

        if response.status_code == 404:
            raise ResourceNotFoundError(f"{label} {identifier} not found")
        if response.is_error:
            logger.warning(
                "Collaborator returned an error",
                extra={"url": url, "status_code": response.status_code},
            )
            raise ServiceUnavailableError(f"{label} service responded with {response.status_code}")

        payload = self._decode(response, label)
        if payload is None:
            raise ResourceNotFoundError(f"{label} {identifier} not found")

        try:
            return model.model_validate(payload)
        except ValidationError as exc:
            logger.warning("Collaborator payload rejected", extra={"url": url, "errors": exc.errors()})
            raise ServiceUnavailableError(f"{label} service returned an invalid payload") from exc

    @staticmethod
    def _decode(response: httpx.Response, label: str) -> Any:
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise ServiceUnavailableError(f"{label} service returned a non-JSON payload") from exc

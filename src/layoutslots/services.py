#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/layoutslots/services.py
"""Collaborators consumed by an editing session.

Three narrow interfaces describe what a session needs from the outside:

- :class:`TemplateStore` loads and saves persisted template markup
- :class:`PreviewCompiler` compiles markup to preview HTML (thumbnails)
- :class:`ProductCatalog` lists catalog products for product blocks

:class:`LayoutApiClient` implements all three over the dashboard REST API
using httpx. :class:`InMemoryTemplateStore` is a local store for offline
use and tests.

Examples
--------
    >>> with LayoutApiClient(ClientOptions(token="secret")) as client:
    ...     markup = client.load_template("64f0c0ffee")
    ...     html = client.compile_to_preview_html(markup)

"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Protocol, runtime_checkable

import httpx

from layoutslots.exceptions import (
    PreviewCompilationError,
    ServiceError,
    TemplateNotFoundError,
    TemplateSaveError,
)
from layoutslots.options.client import ClientOptions

logger = logging.getLogger(__name__)


@runtime_checkable
class TemplateStore(Protocol):
    """Load and save persisted template markup."""

    def load_template(self, template_id: str) -> str:
        """Return the persisted markup of a template."""
        ...

    def save_template(self, template_id: str | None, markup: str, **payload: Any) -> str:
        """Create (``template_id=None``) or update a template; return its id."""
        ...


@runtime_checkable
class PreviewCompiler(Protocol):
    """Compile template markup to preview HTML."""

    def compile_to_preview_html(self, markup: str) -> str:
        """Return HTML for ``markup``."""
        ...


@runtime_checkable
class ProductCatalog(Protocol):
    """List catalog products."""

    def list_catalog_products(self) -> list[CatalogProduct]:
        """Return the products available for product blocks."""
        ...


@dataclass(frozen=True)
class CatalogProduct:
    """A product from the user's catalog.

    Parameters
    ----------
    id : str
        Product id used in product selections
    name : str
        Display name
    price : str or float or None
        Price as returned by the catalog
    image_url : str or None
        Product image
    url : str or None
        Product page
    currency : str or None
        ISO currency code, when provided
    category : str or None
        Catalog category, when provided

    """

    id: str
    name: str = ""
    price: str | float | None = None
    image_url: str | None = None
    url: str | None = None
    currency: str | None = None
    category: str | None = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> CatalogProduct:
        """Build a product from an API record (``_id``/``id``, ``image_url``/``imageUrl``)."""
        product_id = payload.get("_id", payload.get("id"))
        if product_id is None:
            raise ServiceError(f"Catalog product without an id: {dict(payload)!r}")
        return cls(
            id=str(product_id),
            name=str(payload.get("name") or ""),
            price=payload.get("price"),
            image_url=payload.get("image_url", payload.get("imageUrl")),
            url=payload.get("url"),
            currency=payload.get("currency"),
            category=payload.get("category"),
        )


@dataclass
class LayoutListing:
    """Layouts visible to the user: their own and the system defaults."""

    user_layouts: list[dict[str, Any]] = field(default_factory=list)
    system_defaults: list[dict[str, Any]] = field(default_factory=list)


def _extract_products(data: Any) -> list[Any]:
    # The products endpoint has answered with each of these shapes
    if isinstance(data, list):
        return data
    if isinstance(data, dict):
        if isinstance(data.get("products"), list):
            return data["products"]
        nested = data.get("data")
        if isinstance(nested, dict) and isinstance(nested.get("products"), list):
            return nested["products"]
    return []


class LayoutApiClient:
    """REST client for the layout dashboard API.

    Parameters
    ----------
    options : ClientOptions, optional
        Connection settings; defaults to :meth:`ClientOptions.from_env`
    transport : httpx.BaseTransport, optional
        Custom transport (e.g. ``httpx.MockTransport`` in tests)

    Notes
    -----
    Every failure is raised as :class:`~layoutslots.exceptions.ServiceError`
    or one of its subclasses; httpx exceptions never escape.

    """

    def __init__(self, options: ClientOptions | None = None, transport: httpx.BaseTransport | None = None):
        """Initialize the client and its HTTP session."""
        self.options = options if options is not None else ClientOptions.from_env()
        headers = {"Accept": "application/json"}
        if self.options.token:
            headers["Authorization"] = f"Bearer {self.options.token}"
        self._client = httpx.Client(
            base_url=self.options.api_base_url.rstrip("/"),
            timeout=self.options.timeout,
            headers=headers,
            transport=transport,
        )

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self._client.close()

    def __enter__(self) -> LayoutApiClient:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        try:
            response = self._client.request(method, path, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            raise ServiceError(
                f"{method} {path} failed with HTTP {status}", status_code=status, original_error=e
            ) from e
        except httpx.HTTPError as e:
            raise ServiceError(f"{method} {path} failed: {e}", original_error=e) from e

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise ServiceError(
                f"{method} {path} returned invalid JSON", status_code=response.status_code, original_error=e
            ) from e

    # ------------------------------------------------------------------
    # Templates
    # ------------------------------------------------------------------

    def list_layouts(self) -> LayoutListing:
        """Return the user's layouts and the system default templates."""
        data = self._request("GET", "/api/layouts") or {}
        user_layouts = data.get("userLayouts") if isinstance(data, dict) else None
        defaults = data.get("systemDefaults") if isinstance(data, dict) else None
        return LayoutListing(
            user_layouts=user_layouts if isinstance(user_layouts, list) else [],
            system_defaults=defaults if isinstance(defaults, list) else [],
        )

    def get_layout(self, template_id: str) -> dict[str, Any]:
        """Return the full layout record for ``template_id``.

        Raises
        ------
        TemplateNotFoundError
            If the service answers 404

        """
        try:
            data = self._request("GET", f"/api/layouts/{template_id}")
        except ServiceError as e:
            if e.status_code == 404:
                raise TemplateNotFoundError(template_id, original_error=e.original_error) from e
            raise
        if isinstance(data, dict) and isinstance(data.get("layout"), dict):
            data = data["layout"]
        if not isinstance(data, dict):
            raise ServiceError(f"Unexpected layout payload for {template_id!r}")
        return data

    def load_template(self, template_id: str) -> str:
        """Return the persisted markup of a layout."""
        layout = self.get_layout(template_id)
        markup = layout.get("mjmlTemplate")
        if not isinstance(markup, str):
            raise ServiceError(f"Layout {template_id!r} has no template markup")
        return markup

    def save_template(
        self,
        template_id: str | None,
        markup: str,
        *,
        name: str = "",
        thumbnail: str | None = None,
        category: str | None = None,
        product_selections: Mapping[str, list[str]] | None = None,
    ) -> str:
        """Create or update a layout and return its id.

        Parameters
        ----------
        template_id : str or None
            Existing layout to update; ``None`` creates a new layout
        markup : str
            Persisted template markup
        name : str
            Layout name
        thumbnail : str, optional
            Preview HTML stored as the layout thumbnail
        category : str, optional
            Layout category
        product_selections : mapping, optional
            Component id to selected product ids

        Raises
        ------
        TemplateSaveError
            If the service rejects the layout or cannot be reached

        """
        payload: dict[str, Any] = {"name": name, "mjmlTemplate": markup}
        if thumbnail:
            payload["thumbnail"] = thumbnail
        if category:
            payload["category"] = category
        if product_selections:
            payload["productSelections"] = {key: list(value) for key, value in product_selections.items()}

        method, path = ("PUT", f"/api/layouts/{template_id}") if template_id else ("POST", "/api/layouts")
        try:
            data = self._request(method, path, json=payload)
        except ServiceError as e:
            raise TemplateSaveError(str(e), status_code=e.status_code, original_error=e.original_error) from e

        if isinstance(data, dict):
            record = data.get("layout") if isinstance(data.get("layout"), dict) else data
            saved_id = record.get("_id", record.get("id"))
            if saved_id is not None:
                return str(saved_id)
        if template_id:
            return template_id
        raise TemplateSaveError("Service did not return the id of the created layout")

    def delete_template(self, template_id: str) -> None:
        """Delete a layout."""
        self._request("DELETE", f"/api/layouts/{template_id}")

    # ------------------------------------------------------------------
    # Preview and catalog
    # ------------------------------------------------------------------

    def compile_to_preview_html(self, markup: str) -> str:
        """Compile markup to HTML with the service's preview endpoint.

        Raises
        ------
        PreviewCompilationError
            If compilation fails or no HTML is returned

        """
        try:
            data = self._request("POST", "/api/layouts/preview-html", json={"mjml": markup})
        except ServiceError as e:
            raise PreviewCompilationError(str(e), status_code=e.status_code, original_error=e.original_error) from e
        html = data.get("html") if isinstance(data, dict) else None
        if not html:
            raise PreviewCompilationError("Preview endpoint returned no HTML")
        return html

    def list_catalog_products(self) -> list[CatalogProduct]:
        """Return up to ``options.product_limit`` catalog products."""
        data = self._request("GET", "/api/products", params={"limit": self.options.product_limit})
        return [CatalogProduct.from_payload(item) for item in _extract_products(data) if isinstance(item, dict)]


class InMemoryTemplateStore:
    """Template store backed by a dict.

    Parameters
    ----------
    templates : mapping, optional
        Initial template id to markup

    """

    def __init__(self, templates: Mapping[str, str] | None = None):
        """Initialize the store."""
        self.templates: dict[str, str] = dict(templates or {})
        self.payloads: dict[str, dict[str, Any]] = {}
        self._counter = 0

    def load_template(self, template_id: str) -> str:
        """Return the stored markup."""
        try:
            return self.templates[template_id]
        except KeyError:
            raise TemplateNotFoundError(template_id) from None

    def save_template(self, template_id: str | None, markup: str, **payload: Any) -> str:
        """Store markup under ``template_id`` or a new id, and return the id."""
        if template_id is None:
            self._counter += 1
            template_id = f"layout-{self._counter}"
            while template_id in self.templates:
                self._counter += 1
                template_id = f"layout-{self._counter}"
        self.templates[template_id] = markup
        self.payloads[template_id] = dict(payload)
        logger.debug("Stored template %r (%d characters)", template_id, len(markup))
        return template_id

"""Xendit integration for invoice-based payments.

Wraps the Xendit invoice REST API with httpx. The payload models mirror the
provider's JSON; fields we never read are left out and ignored on parse.
"""

import logging

import httpx
from pydantic import BaseModel

logger = logging.getLogger(__name__)

XENDIT_BASE_URL = "https://api.xendit.co"
XENDIT_API_VERSION = "2020-02-01"


class XenditError(Exception):
    """Raised when an invoice cannot be created."""

    def __init__(self, message: str, status_code: int | None = None, body: str | None = None):
        self.status_code = status_code
        self.body = body
        super().__init__(message)


# --- Payloads ---


class InvoiceCustomer(BaseModel):
    given_names: str
    surname: str | None = None
    email: str
    mobile_number: str


class InvoiceItem(BaseModel):
    name: str
    quantity: int
    price: float
    category: str | None = None
    url: str | None = None


class InvoiceRequest(BaseModel):
    external_id: str
    amount: float
    description: str
    invoice_duration: int
    customer: InvoiceCustomer
    success_redirect_url: str
    failure_redirect_url: str
    currency: str
    items: list[InvoiceItem] = []
    metadata: dict | None = None


class InvoiceResponse(BaseModel):
    id: str
    external_id: str
    status: str
    invoice_url: str
    amount: float | None = None
    currency: str | None = None
    expiry_date: str | None = None


class InvoiceCallback(BaseModel):
    """Body of the invoice callback Xendit posts when an invoice changes state."""

    id: str | None = None
    external_id: str
    status: str
    amount: float | None = None
    paid_amount: float | None = None
    paid_at: str | None = None
    currency: str | None = None
    payment_method: str | None = None
    payment_channel: str | None = None
    payment_id: str | None = None


# --- Client ---


class XenditClient:
    """Thin async client for the endpoints the reservation flow needs.

    ``timeout=None`` disables the request timeout entirely. ``transport`` is
    passed through to httpx (tests use ``httpx.MockTransport``).
    """

    def __init__(
        self,
        secret_key: str,
        base_url: str = XENDIT_BASE_URL,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._client = httpx.AsyncClient(
            base_url=base_url,
            auth=(secret_key, ""),
            headers={"X-API-VERSION": XENDIT_API_VERSION},
            timeout=timeout,
            transport=transport,
        )

    async def create_invoice(self, invoice: InvoiceRequest) -> InvoiceResponse:
        """Create an invoice and return the provider's view of it."""
        try:
            resp = await self._client.post("/v2/invoices", json=invoice.model_dump(mode="json", exclude_none=True))
        except httpx.HTTPError as exc:
            raise XenditError(f"failed to send request: {exc}") from exc

        if resp.status_code not in (httpx.codes.OK, httpx.codes.CREATED):
            raise XenditError(f"xendit API error: {resp.text}", status_code=resp.status_code, body=resp.text)

        try:
            created = InvoiceResponse.model_validate(resp.json())
        except ValueError as exc:
            raise XenditError(f"failed to decode response: {exc}", status_code=resp.status_code, body=resp.text) from exc

        logger.info("Created Xendit invoice %s for external id %s", created.id, created.external_id)
        return created

    async def aclose(self) -> None:
        await self._client.aclose()

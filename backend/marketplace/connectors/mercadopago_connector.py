"""
MercadoPago API Connector
Creates Checkout Pro preferences and looks up payments

Author: Mapu Team
Date: 2025-11-18
"""
from typing import Dict, List, Optional, Any
import httpx
import logging

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class PreferenceItem(BaseModel):
    title: str
    description: Optional[str] = None
    picture_url: Optional[str] = None
    quantity: int
    currency_id: str = 'ARS'
    unit_price: float


class PayerPhone(BaseModel):
    area_code: Optional[str] = None
    number: Optional[str] = None


class Payer(BaseModel):
    name: Optional[str] = None
    surname: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[PayerPhone] = None


class BackUrls(BaseModel):
    success: Optional[str] = None
    failure: Optional[str] = None
    pending: Optional[str] = None


class CreatePreferenceData(BaseModel):
    items: List[PreferenceItem]
    payer: Optional[Payer] = None
    back_urls: Optional[BackUrls] = None
    auto_return: Optional[str] = None
    external_reference: Optional[str] = None
    notification_url: Optional[str] = None

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


class PreferenceResponse(BaseModel):
    id: str
    init_point: str
    sandbox_init_point: Optional[str] = None
    client_id: Optional[str] = None
    collector_id: Optional[int] = None
    date_created: Optional[str] = None
    items: List[Dict[str, Any]] = Field(default_factory=list)
    external_reference: Optional[str] = None

    model_config = {'extra': 'ignore'}

    def checkout_url(self, test_mode: bool) -> str:
        """Sandbox URL while testing, production URL otherwise"""
        if test_mode and self.sandbox_init_point:
            return self.sandbox_init_point
        return self.init_point


class MercadoPagoConnector:
    """
    Connector for MercadoPago REST API

    Handles:
    - Preference creation (hosted checkout link)
    - Payment lookup (status after the buyer returns)

    Failures are logged and reported as None; callers decide what to show.
    """

    def __init__(self, access_token: str, base_url: str = "https://api.mercadopago.com",
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        """
        Initialize MercadoPago connector

        Args:
            access_token: Private access token (server side only)
            base_url: API root, overridable for tests
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        if not access_token:
            raise ValueError("MercadoPago credentials not configured. Set MERCADOPAGO_ACCESS_TOKEN")

        self.access_token = access_token
        self.base_url = base_url.rstrip('/')
        self._transport = transport
        self.api_calls = 0

    def _headers(self) -> Dict[str, str]:
        return {
            'Content-Type': 'application/json',
            'Authorization': f'Bearer {self.access_token}',
        }

    async def create_preference(self, data: CreatePreferenceData) -> Optional[PreferenceResponse]:
        """
        Create a payment preference

        Args:
            data: Items, payer, back URLs and external reference

        Returns:
            PreferenceResponse or None if MercadoPago rejected the request
        """
        url = f"{self.base_url}/checkout/preferences"

        async with httpx.AsyncClient(transport=self._transport) as client:
            try:
                response = await client.post(url, headers=self._headers(), json=data.to_payload(), timeout=30.0)
                self.api_calls += 1
                response.raise_for_status()
                return PreferenceResponse(**response.json())

            except httpx.HTTPStatusError as e:
                logger.error(f"MercadoPago API Error: {e.response.status_code} - {e.response.text}")
                return None
            except Exception as e:
                logger.error(f"Error creating payment preference: {e}")
                return None

    async def get_payment_info(self, payment_id: str) -> Optional[Dict[str, Any]]:
        """
        Get payment information

        Returns:
            Raw payment dict (status, status_detail, external_reference, ...) or None
        """
        url = f"{self.base_url}/v1/payments/{payment_id}"

        async with httpx.AsyncClient(transport=self._transport) as client:
            try:
                response = await client.get(url, headers=self._headers(), timeout=30.0)
                self.api_calls += 1
                response.raise_for_status()
                return response.json()

            except httpx.HTTPStatusError as e:
                logger.error(f"Failed to get payment info {payment_id}: {e.response.status_code}")
                return None
            except Exception as e:
                logger.error(f"Error getting payment info: {e}")
                return None

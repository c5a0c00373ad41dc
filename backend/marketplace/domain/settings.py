"""
Settings Domain Models

Key/value platform settings and the ARCA (AFIP) invoicing configuration.

Author: Mapu Team
Date: 2025-11-19
"""
from pydantic import BaseModel, ConfigDict
from typing import Optional, Any
from datetime import datetime


INVOICE_TYPE_NAMES = {
    1: 'Factura A',
    2: 'Nota de Débito A',
    3: 'Nota de Crédito A',
    6: 'Factura B',
    7: 'Nota de Débito B',
    8: 'Nota de Crédito B',
    11: 'Factura C',
    12: 'Nota de Débito C',
    13: 'Nota de Crédito C',
}

IVA_CONDITIONS = {
    1: 'Responsable Inscripto',
    4: 'Exento',
    5: 'Consumidor Final',
    6: 'Monotributo',
}


class Setting(BaseModel):
    key: str
    value: Any = None
    description: Optional[str] = None
    updated_at: Optional[datetime] = None
    updated_by: Optional[str] = None

    model_config = ConfigDict(extra='ignore')


class PlatformSettings(BaseModel):
    """Values edited on the CRM settings page (stored as strings)"""

    minimum_withdrawal_amount: str = '5000'
    marketplace_owner_id: str = ''
    default_commission_rate: str = '10.00'
    mp_public_key: str = ''
    mp_access_token: str = ''
    mp_test_mode: bool = True
    arca_cuit: str = ''
    arca_certificate: str = ''
    arca_private_key: str = ''
    arca_test_mode: bool = True


class ArcaConfig(BaseModel):
    """Stored under settings.key = 'arca_config' (camelCase as the CRM writes it)"""

    cuit: str = ''
    certificate: str = ''
    certificatePassword: str = ''
    pointOfSale: int = 1
    ivaCondition: int = 1
    businessName: str = ''
    address: str = ''
    isHomologation: bool = True


class Invoice(BaseModel):
    id: str
    order_id: Optional[str] = None
    cae: Optional[str] = None
    cae_expiration: Optional[str] = None
    invoice_number: int
    point_of_sale: int
    invoice_type: int
    buyer_doc_number: Optional[str] = None
    buyer_name: Optional[str] = None
    net_amount: float = 0
    iva_amount: float = 0
    total_amount: float = 0
    status: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(extra='ignore')

    @property
    def formatted_number(self) -> str:
        return format_invoice_number(self.point_of_sale, self.invoice_number)

    @property
    def type_name(self) -> str:
        return INVOICE_TYPE_NAMES.get(self.invoice_type, f'Tipo {self.invoice_type}')


def format_invoice_number(point_of_sale: int, invoice_number: int) -> str:
    """0001-00000042 style number"""
    return f"{point_of_sale:04d}-{invoice_number:08d}"

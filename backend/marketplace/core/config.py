"""
Configuración centralizada de la aplicación
"""
from pydantic_settings import BaseSettings
from typing import List, Optional


class Settings(BaseSettings):
    """Configuración de la aplicación"""

    # API Settings
    API_TITLE: str = "Mapu Marketplace API"
    API_VERSION: str = "1.0.0"
    API_DESCRIPTION: str = "Checkout, administración y notificaciones del marketplace"
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000
    API_DEBUG: bool = False

    # Supabase
    SUPABASE_URL: str = ""
    SUPABASE_ANON_KEY: str = ""
    SUPABASE_SERVICE_ROLE_KEY: str = ""
    SUPABASE_JWT_SECRET: str = ""

    # Storefront REST API (shops, products, subscriptions, auth)
    STOREFRONT_API_URL: str = "https://wall-mapuapi-production.up.railway.app/api"
    TOKEN_STORE_PATH: str = ".mapu_session.json"

    # MercadoPago
    MERCADOPAGO_ACCESS_TOKEN: str = ""
    MERCADOPAGO_PUBLIC_KEY: str = ""
    MERCADOPAGO_TEST_MODE: bool = True
    MERCADOPAGO_CURRENCY: str = "ARS"
    APP_SCHEME: str = "sergiomarketplace"

    # Notifications
    EXPO_PUSH_URL: str = "https://exp.host/--/api/v2/push/send"
    RESEND_API_KEY: str = ""
    EMAIL_FROM: str = "Sergio Marketplace <notificaciones@sergiomarketplace.com>"
    NOTIFICATION_BATCH_SIZE: int = 100
    NOTIFICATIONS_API_KEY: str = ""

    # CORS - Can be string (comma-separated) or JSON array
    # Example: "http://localhost:3000,https://crm.example.com" or '["http://localhost:3000"]'
    ALLOWED_ORIGINS: Optional[str] = "http://localhost:5173,http://localhost:3000"

    def get_allowed_origins(self) -> List[str]:
        """Parse ALLOWED_ORIGINS string into list"""
        if not self.ALLOWED_ORIGINS:
            return ["http://localhost:5173"]

        # Try JSON parse first (for array format)
        import json
        try:
            origins = json.loads(self.ALLOWED_ORIGINS)
            if isinstance(origins, list):
                return origins
        except (json.JSONDecodeError, ValueError):
            pass

        # Fall back to comma-separated string
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",")]

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"


settings = Settings()

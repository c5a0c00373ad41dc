"""
Storefront Services - typed wrappers over the storefront REST API

One service per resource (auth, shops, products, categories,
subscriptions). Each method returns an ApiResult whose data is parsed into
the matching DTO; errors come back as ApiResult.error, never raised.

Author: Mapu Team
Date: 2025-11-18
"""
from typing import Any, List, Optional
from urllib.parse import quote

from marketplace.core.config import settings
from marketplace.connectors.storefront_api import (
    ApiClient, ApiResult, TokenStore, FormFile, build_form, build_query,
)
from marketplace.domain.storefront import (
    RegisterDto, LoginDto, UpdateLocationDto, User, AuthResponse,
    CreateShopDto, UpdateShopDto, ShopFilters, Shop,
    CreateProductDto, UpdateProductDto, ProductFilters, Product,
    CreateCategoryDto, UpdateCategoryDto, ApiCategory,
    CreateSubscriptionDto, SubscriptionFilters, Subscription, Page,
)

MIN_SEARCH_LENGTH = 2


def default_client() -> ApiClient:
    return ApiClient(settings.STOREFRONT_API_URL, TokenStore(settings.TOKEN_STORE_PATH))


def _parse_list(model):
    return lambda rows: [model.model_validate(row) for row in rows]


def _shop_files(logo: Optional[Any], banner: Optional[Any]) -> List[FormFile]:
    files: List[FormFile] = []
    if logo is not None:
        files.append(('logo', logo))
    if banner is not None:
        files.append(('banner', banner))
    return files


class AuthService:
    def __init__(self, api: Optional[ApiClient] = None):
        self.api = api or default_client()

    async def _store_session(self, result: ApiResult) -> ApiResult[AuthResponse]:
        parsed = result.map(AuthResponse.model_validate)
        if parsed.data:
            self.api.set_auth_token(parsed.data.access_token)
            self.api.set_user(parsed.data.user.model_dump(mode='json'))
        return parsed

    async def register(self, data: RegisterDto) -> ApiResult[AuthResponse]:
        """Create an account; on success the session is persisted"""
        return await self._store_session(await self.api.post('/auth/register', data.to_payload()))

    async def login(self, data: LoginDto) -> ApiResult[AuthResponse]:
        return await self._store_session(await self.api.post('/auth/login', data.to_payload()))

    async def forgot_password(self, email: str) -> ApiResult:
        return await self.api.post('/auth/forgot-password', {'email': email})

    async def reset_password(self, token: str, password: str) -> ApiResult:
        return await self.api.post('/auth/reset-password', {'token': token, 'password': password})

    async def get_me(self) -> ApiResult[User]:
        return (await self.api.get('/auth/me')).map(User.model_validate)

    async def update_location(self, data: UpdateLocationDto) -> ApiResult[User]:
        return (await self.api.patch('/auth/location', data.to_payload())).map(User.model_validate)

    def logout(self):
        self.api.remove_auth_token()

    def get_current_user(self) -> Optional[User]:
        user = self.api.get_user()
        return User.model_validate(user) if user else None

    def is_authenticated(self) -> bool:
        return self.api.get_user() is not None


class ShopsService:
    def __init__(self, api: Optional[ApiClient] = None):
        self.api = api or default_client()

    async def create(self, data: CreateShopDto, logo: Optional[Any] = None,
                     banner: Optional[Any] = None) -> ApiResult[Shop]:
        """Multipart create; logo/banner are httpx file tuples"""
        result = await self.api.upload_form_data('/shops', build_form(data.to_payload()), _shop_files(logo, banner))
        return result.map(Shop.model_validate)

    async def update(self, shop_id: str, data: UpdateShopDto, logo: Optional[Any] = None,
                     banner: Optional[Any] = None) -> ApiResult[Shop]:
        result = await self.api.upload_form_data(
            f'/shops/{shop_id}', build_form(data.to_payload()), _shop_files(logo, banner)
        )
        return result.map(Shop.model_validate)

    async def list(self, filters: Optional[ShopFilters] = None) -> ApiResult[Page[Shop]]:
        query = build_query(filters.to_payload() if filters else None)
        return (await self.api.get(f'/shops{query}')).map(Page[Shop].model_validate)

    async def get_my_shop(self) -> ApiResult[Shop]:
        return (await self.api.get('/shops/me')).map(Shop.model_validate)

    async def get_by_id(self, shop_id: str, products_page: Optional[int] = None,
                        products_limit: Optional[int] = None) -> ApiResult[Shop]:
        query = build_query({'productsPage': products_page or None, 'productsLimit': products_limit or None})
        return (await self.api.get(f'/shops/{shop_id}{query}')).map(Shop.model_validate)

    async def delete(self, shop_id: str) -> ApiResult:
        return await self.api.delete(f'/shops/{shop_id}')


class ProductsService:
    def __init__(self, api: Optional[ApiClient] = None):
        self.api = api or default_client()

    async def create_for_shop(self, shop_id: str, data: CreateProductDto,
                              images: Optional[List[Any]] = None) -> ApiResult[Product]:
        files = [('images', image) for image in images or []]
        result = await self.api.upload_form_data(f'/products/shop/{shop_id}', build_form(data.to_payload()), files)
        return result.map(Product.model_validate)

    async def list_by_shop(self, shop_id: str, filters: Optional[ProductFilters] = None) -> ApiResult[Page[Product]]:
        query = build_query(filters.to_payload() if filters else None)
        return (await self.api.get(f'/products/shop/{shop_id}{query}')).map(Page[Product].model_validate)

    async def list_all(self, filters: Optional[ProductFilters] = None) -> ApiResult[Page[Product]]:
        query = build_query(filters.to_payload() if filters else None)
        return (await self.api.get(f'/products{query}')).map(Page[Product].model_validate)

    async def search(self, query: str) -> ApiResult[List[Product]]:
        """Full-text search; queries under two characters return [] without a request"""
        if len(query) < MIN_SEARCH_LENGTH:
            return ApiResult(data=[])
        result = await self.api.get(f'/products/search?q={quote(query, safe="")}')
        return result.map(_parse_list(Product))

    async def get_by_id(self, product_id: str) -> ApiResult[Product]:
        return (await self.api.get(f'/products/{product_id}')).map(Product.model_validate)

    async def update(self, product_id: str, data: UpdateProductDto) -> ApiResult[Product]:
        return (await self.api.patch(f'/products/{product_id}', data.to_payload())).map(Product.model_validate)

    async def delete(self, product_id: str) -> ApiResult:
        return await self.api.delete(f'/products/{product_id}')


class CategoriesService:
    def __init__(self, api: Optional[ApiClient] = None):
        self.api = api or default_client()

    async def create(self, data: CreateCategoryDto) -> ApiResult[ApiCategory]:
        return (await self.api.post('/categories', data.to_payload())).map(ApiCategory.model_validate)

    async def list(self) -> ApiResult[List[ApiCategory]]:
        return (await self.api.get('/categories')).map(_parse_list(ApiCategory))

    async def get_by_id(self, category_id: str) -> ApiResult[ApiCategory]:
        return (await self.api.get(f'/categories/{category_id}')).map(ApiCategory.model_validate)

    async def update(self, category_id: str, data: UpdateCategoryDto) -> ApiResult[ApiCategory]:
        return (await self.api.patch(f'/categories/{category_id}', data.to_payload())).map(ApiCategory.model_validate)

    async def delete(self, category_id: str) -> ApiResult:
        return await self.api.delete(f'/categories/{category_id}')

    async def get_products(self, category_id: str, page: Optional[int] = None,
                           limit: Optional[int] = None) -> ApiResult:
        query = build_query({'page': page or None, 'limit': limit or None})
        return await self.api.get(f'/categories/{category_id}/products{query}')


class SubscriptionsService:
    def __init__(self, api: Optional[ApiClient] = None):
        self.api = api or default_client()

    async def create(self, data: CreateSubscriptionDto) -> ApiResult[Subscription]:
        return (await self.api.post('/subscriptions', data.to_payload())).map(Subscription.model_validate)

    async def list(self, filters: Optional[SubscriptionFilters] = None) -> ApiResult[Page[Subscription]]:
        query = build_query(filters.to_payload() if filters else None)
        return (await self.api.get(f'/subscriptions{query}')).map(Page[Subscription].model_validate)

    async def get_history(self) -> ApiResult[List[Subscription]]:
        return (await self.api.get('/subscriptions/history')).map(_parse_list(Subscription))

    async def get_current(self) -> ApiResult[Subscription]:
        return (await self.api.get('/subscriptions/me')).map(Subscription.model_validate)

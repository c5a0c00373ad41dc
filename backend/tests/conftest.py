"""
Pytest fixtures and configuration for the Mapu Marketplace backend tests

Provides an in-memory stand-in for the Supabase client that records every
query chain, plus sample rows shared across test modules.

Author: Mapu Team
Date: 2025-11-25
"""
import os
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

# Settings are read at import time; keep tests independent from a local .env
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-secret")
os.environ.setdefault("MERCADOPAGO_ACCESS_TOKEN", "TEST-token")


class FakeQuery:
    """
    Query builder that records chained calls

    Any builder method (select, eq, order, update...) is accepted and stored
    in `calls`; execute() returns the next response queued for the table.
    """

    def __init__(self, client, table):
        self.client = client
        self.table = table
        self.calls = []

    def __getattr__(self, name):
        def method(*args, **kwargs):
            self.calls.append((name, args, kwargs))
            return self
        return method

    def execute(self):
        return self.client.next_response(self.table)

    def called(self, name):
        """Positional args of every call to `name`"""
        return [args for call, args, _ in self.calls if call == name]

    def kwargs_of(self, name):
        return [kwargs for call, _, kwargs in self.calls if call == name]


class FakeSupabase:
    """
    Minimal Supabase client double

    respond('orders', data=[...]) queues a response for the next execute()
    on that table; the last queued response repeats. RPC calls are keyed as
    'rpc:<function name>'.
    """

    def __init__(self):
        self.responses = {}
        self.queries = []
        self.auth = MagicMock()

    def respond(self, key, data=None, count=None):
        self.responses.setdefault(key, []).append(SimpleNamespace(data=data, count=count))
        return self

    def next_response(self, key):
        queue = self.responses.get(key)
        if not queue:
            return SimpleNamespace(data=[], count=0)
        return queue.pop(0) if len(queue) > 1 else queue[0]

    def table(self, name):
        query = FakeQuery(self, name)
        self.queries.append(query)
        return query

    def rpc(self, fn, params=None):
        query = FakeQuery(self, f'rpc:{fn}')
        query.calls.append(('rpc', (fn, params), {}))
        self.queries.append(query)
        return query

    def queries_for(self, key):
        return [query for query in self.queries if query.table == key]


@pytest.fixture
def supabase():
    """Fresh fake Supabase client per test"""
    return FakeSupabase()


@pytest.fixture
def sample_order_row():
    return {
        'id': 'order-1',
        'order_number': 'MP-0001',
        'buyer_id': 'buyer-1',
        'seller_id': 'seller-1',
        'status': 'pending',
        'payment_method': 'mercadopago',
        'subtotal': 2000.0,
        'shipping_cost': 0,
        'tax': 0,
        'discount': 0,
        'total': 2000.0,
        'buyer_name': 'Ana Pérez',
        'buyer_email': 'ana@example.com',
    }


@pytest.fixture
def sample_item_row():
    return {
        'id': 'item-1',
        'order_id': 'order-1',
        'product_id': 'prod-1',
        'product_name': 'Mate de calabaza',
        'quantity': 2,
        'unit_price': 1000.0,
        'subtotal': 2000.0,
        'seller_id': 'seller-1',
    }


@pytest.fixture
def sample_coupon_row():
    return {
        'id': 'coupon-1',
        'code': 'VERANO10',
        'name': 'Verano',
        'discount_type': 'percentage',
        'discount_value': 10,
        'max_discount': 500,
        'starts_at': '2025-01-01T00:00:00+00:00',
        'expires_at': '2025-03-01T00:00:00+00:00',
        'is_active': True,
    }


@pytest.fixture
def sample_notification_row():
    return {
        'id': 'notif-1',
        'user_id': 'user-1',
        'title': 'Nuevo pedido',
        'body': 'Recibiste un pedido',
        'data': {'type': 'new_order', 'order_id': 'order-1'},
        'status': 'pending',
    }


@pytest.fixture
def checkout_items():
    return [
        {
            'product_id': 'prod-1',
            'product_name': 'Mate de calabaza',
            'quantity': 2,
            'unit_price': 1000.0,
            'seller_id': 'seller-1',
        }
    ]

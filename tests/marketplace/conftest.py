import os

import pytest


@pytest.fixture(scope="session")
def _marketplace_domain(request):
    """Initialize the marketplace domain once per session."""
    os.environ["PROTEAN_ENV"] = request.config.option.env

    from marketplace.domain import marketplace

    marketplace.init()
    return marketplace


@pytest.fixture(autouse=True)
def run_around_tests(_marketplace_domain):
    """Push domain context before each test, cleanup after."""
    ctx = _marketplace_domain.domain_context()
    ctx.push()

    yield

    from protean import current_domain

    for _, provider in current_domain.providers.items():
        provider._data_reset()

    for _, broker in current_domain.brokers.items():
        broker._data_reset()

    current_domain.event_store.store._data_reset()
    ctx.pop()


@pytest.fixture()
def shipping_address():
    return {
        "full_name": "John Doe",
        "street": "123 Main St",
        "city": "Springfield",
        "zip_code": "62701",
        "country": "US",
    }


@pytest.fixture()
def secure_item():
    return {
        "product_id": "prod-camera",
        "name": "Vintage Camera",
        "price": 199.99,
        "image_url": "https://img.example.com/camera.jpg",
        "seller_id": "99",
        "seller_name": "Camera Shop",
        "selling_mode": "secure",
        "condition": "used_good",
        "quantity": 1,
    }


@pytest.fixture()
def direct_item():
    return {
        "product_id": "prod-lamp",
        "name": "Desk Lamp",
        "price": 25.0,
        "seller_id": "77",
        "seller_name": "Lamp Person",
        "selling_mode": "direct",
        "condition": "used_like_new",
        "quantity": 2,
    }

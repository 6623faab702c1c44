import pytest
from fastapi.testclient import TestClient

from main import create_app
from utils.config import Settings

ADMIN_TOKEN = "test-admin-token"


@pytest.fixture
def products_file(tmp_path):
    """Path of a products file inside a fresh temporary directory."""
    return str(tmp_path / "data" / "products.json")


@pytest.fixture
def settings(products_file):
    return Settings(admin_token=ADMIN_TOKEN, store_backend="file", products_file=products_file)


@pytest.fixture
def client(settings):
    """TestClient running the app (and its lifespan) on the file backend."""
    with TestClient(create_app(settings)) as test_client:
        yield test_client


@pytest.fixture
def auth_headers():
    return {"x-api-key": ADMIN_TOKEN}


@pytest.fixture
def created_product(client, auth_headers):
    """A product created through the API with a couple of detail keys and price options."""
    response = client.post(
        "/products",
        json={
            "name": "Shoe",
            "brand": "Acme",
            "category": "footwear",
            "size": "42",
            "image": "shoe.png",
            "alt": "A red shoe",
            "detail": {
                "material": "leather",
                "color": "red",
                "priceOptions": [{"label": "single", "price": 50}],
            },
        },
        headers=auth_headers,
    )
    assert response.status_code == 201
    return response.json()

from sqlalchemy import func, select

from seed import DEMO_PASSWORD, DEMO_PRODUCTS, seed_demo_data
from services.auth_service.models import User
from services.product_service.models import Product


async def test_health(client):
    r = await client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "running"


async def test_metrics_are_exposed(client):
    await client.get("/health")
    r = await client.get("/metrics")
    assert r.status_code == 200
    assert "storefront_checkout" in r.text


async def test_unknown_route_uses_error_body(client):
    r = await client.get("/does-not-exist")
    assert r.status_code == 404
    assert "error" in r.json()


async def test_seed_is_repeatable(client, session_factory):
    await seed_demo_data(session_factory)
    await seed_demo_data(session_factory)

    async with session_factory() as db:
        assert await db.scalar(select(func.count()).select_from(User)) == 2
        assert await db.scalar(select(func.count()).select_from(Product)) == len(DEMO_PRODUCTS)

    r = await client.post("/login", json={"email": "admin@example.com", "password": DEMO_PASSWORD})
    assert r.status_code == 200
    assert r.json()["user"]["role"] == "admin"

    r = await client.post("/login", json={"email": "user@example.com", "password": DEMO_PASSWORD})
    assert r.json()["user"]["role"] == "user"


async def test_health_reports_time_and_uptime(client):
    r = await client.get("/health")
    body = r.json()
    assert body["timestamp"]
    assert body["uptime"] >= 0


async def test_responses_carry_security_headers(client):
    r = await client.get("/health")
    assert r.headers["X-Content-Type-Options"] == "nosniff"
    assert r.headers["X-Frame-Options"] == "DENY"


async def test_large_responses_are_gzipped(client, make_product):
    for n in range(20):
        await make_product(name=f"Product {n}", description="A fairly long description " * 5)

    r = await client.get("/products", headers={"Accept-Encoding": "gzip"})
    assert r.status_code == 200
    assert r.headers["Content-Encoding"] == "gzip"
    assert len(r.json()["products"]) == 20

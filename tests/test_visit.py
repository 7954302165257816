from urllib.parse import parse_qs, urlsplit

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from dealbies.models.click_tracking import ClickTracking
from tests.factories import count_clicks, make_coupon, make_deal


async def test_deal_redirect_adds_affiliate_tag_and_tracks_click(client, session, database, user):
    await make_deal(session, user, slug="abc", deal_url="https://www.amazon.in/x?y=1", merchant="amazon")

    r = await client.get(
        "/visit/abc",
        headers={
            "user-agent": "pytest-agent",
            "x-forwarded-for": "203.0.113.9, 10.0.0.1",
            "referer": "https://dealbies.com/deals/abc",
        },
    )

    assert r.status_code == 302
    location = r.headers["location"]
    q = parse_qs(urlsplit(location).query)
    assert q["tag"] == ["dealbies-21"]
    assert q["y"] == ["1"]
    assert urlsplit(location).netloc == "www.amazon.in"

    assert await count_clicks(database) == 1
    async with database.sessionmaker() as s:
        click = (await s.execute(select(ClickTracking))).scalar_one()
    assert click.type == "deal"
    assert click.slug == "abc"
    assert click.original_url == "https://www.amazon.in/x?y=1"
    assert click.final_url == location
    assert click.merchant == "amazon"
    assert click.user_agent == "pytest-agent"
    assert click.ip_address == "203.0.113.9"
    assert click.referer == "https://dealbies.com/deals/abc"


async def test_coupon_redirect_tracks_coupon_click(client, session, database, user):
    await make_coupon(session, user, slug="myn10", coupon_url="https://www.myntra.com/sale", merchant="Myntra")

    r = await client.get("/visit/myn10", headers={"x-real-ip": "198.51.100.7"})

    assert r.status_code == 302
    assert parse_qs(urlsplit(r.headers["location"]).query) == {"affid": ["dealbies"]}
    assert await count_clicks(database, type="coupon", ip_address="198.51.100.7") == 1


async def test_expired_coupon_goes_to_detail_page_without_click(client, session, database, user):
    await make_coupon(session, user, slug="xyz", expired=True)

    r = await client.get("/visit/xyz")

    assert r.status_code == 302
    assert r.headers["location"] == "http://testserver/coupon/xyz"
    assert await count_clicks(database) == 0


async def test_expired_deal_goes_to_detail_page(client, session, database, user):
    await make_deal(session, user, slug="gone", expired=True)

    r = await client.get("/visit/gone")

    assert r.headers["location"] == "http://testserver/deal/gone"
    assert await count_clicks(database) == 0


async def test_unknown_slug_goes_to_not_found(client, database):
    r = await client.get("/visit/none")

    assert r.status_code == 302
    assert r.headers["location"] == "http://testserver/not-found"
    assert await count_clicks(database) == 0


async def test_deal_slug_shadows_coupon_slug(client, session, database, user):
    await make_deal(session, user, slug="shared", deal_url="https://www.flipkart.com/p")
    await make_coupon(session, user, slug="shared")

    r = await client.get("/visit/shared")

    assert urlsplit(r.headers["location"]).netloc == "www.flipkart.com"
    assert await count_clicks(database, type="deal") == 1
    assert await count_clicks(database, type="coupon") == 0


async def test_unknown_merchant_passes_through(client, session, user):
    await make_deal(session, user, slug="local", deal_url="https://shop.example.org/a?b=2", merchant="shop.example.org")

    r = await client.get("/visit/local")

    assert r.headers["location"] == "https://shop.example.org/a?b=2"


async def test_internal_error_redirects_home(client, database, monkeypatch):
    async def boom(*args, **kwargs):
        raise RuntimeError("database is down")

    monkeypatch.setattr("dealbies.routers.visit.resolve_visit", boom)

    r = await client.get("/visit/abc")

    assert r.status_code == 302
    assert r.headers["location"] == "http://testserver/"


async def test_destination_without_scheme_goes_home(client, session, database, user):
    await make_deal(session, user, slug="bad", deal_url="amazon.in/x?y=1", merchant="amazon")

    r = await client.get("/visit/bad")

    assert r.status_code == 302
    assert r.headers["location"] == "http://testserver/"
    assert await count_clicks(database) == 0


async def test_non_web_destination_goes_home(client, session, database, user):
    await make_coupon(session, user, slug="ftp", coupon_url="ftp://files.example.com/code.txt", merchant=None)

    r = await client.get("/visit/ftp")

    assert r.headers["location"] == "http://testserver/"
    assert await count_clicks(database) == 0


async def test_click_write_failure_redirects_home(client, session, database, user, monkeypatch):
    await make_deal(session, user, slug="abc", deal_url="https://www.amazon.in/x")

    async def failing_insert(db, data):
        raise SQLAlchemyError("click insert failed")

    monkeypatch.setattr("dealbies.services.redirector.record_click", failing_insert)

    r = await client.get("/visit/abc")

    assert r.status_code == 302
    assert r.headers["location"] == "http://testserver/"
    assert await count_clicks(database) == 0

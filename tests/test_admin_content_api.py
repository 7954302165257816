from tests.factories import add_votes, count_clicks, count_votes, make_comment, make_coupon, make_deal


async def test_admin_marks_deal_expired(client, session, database, user, admin_headers):
    deal = await make_deal(session, user, slug="tv")

    r = await client.patch(f"/api/admin/deals/{deal.id}", json={"expired": True}, headers=admin_headers)

    assert r.status_code == 200
    assert r.json()["expired"] is True

    r = await client.get("/visit/tv")
    assert r.headers["location"] == "http://testserver/deal/tv"
    assert await count_clicks(database) == 0


async def test_admin_updates_deal_url_and_merchant(client, session, user, admin_headers):
    deal = await make_deal(session, user)

    r = await client.patch(
        f"/api/admin/deals/{deal.id}",
        json={"dealUrl": "https://www.flipkart.com/item", "price": 10},
        headers=admin_headers,
    )

    assert r.status_code == 200
    body = r.json()
    assert body["dealUrl"] == "https://www.flipkart.com/item"
    assert body["merchant"] == "flipkart.com"
    assert body["price"] == 10


async def test_admin_cannot_null_required_field(client, session, user, admin_headers):
    deal = await make_deal(session, user)

    r = await client.patch(f"/api/admin/deals/{deal.id}", json={"title": None}, headers=admin_headers)

    assert r.status_code == 400


async def test_admin_delete_deal_cascades(client, session, database, user, admin_headers):
    deal = await make_deal(session, user)
    comment = await make_comment(session, user, deal_id=deal.id)
    await add_votes(session, up=2, deal_id=deal.id)
    await add_votes(session, up=1, comment_id=comment.id)

    r = await client.delete(f"/api/admin/deals/{deal.id}", headers=admin_headers)

    assert r.status_code == 200
    assert (await client.get(f"/api/deals/{deal.id}")).status_code == 404
    assert await count_votes(database) == 0


async def test_admin_coupon_update_and_delete(client, session, user, admin_headers):
    coupon = await make_coupon(session, user)

    r = await client.patch(
        f"/api/admin/coupons/{coupon.id}",
        json={"discountCode": "NEWCODE", "discountValue": 25},
        headers=admin_headers,
    )
    assert r.status_code == 200
    assert r.json()["discountCode"] == "NEWCODE"
    assert r.json()["discountValue"] == 25

    r = await client.delete(f"/api/admin/coupons/{coupon.id}", headers=admin_headers)
    assert r.status_code == 200
    assert (await client.get(f"/api/coupons/{coupon.id}")).status_code == 404


async def test_admin_routes_forbidden_for_users(client, session, user, user_headers):
    deal = await make_deal(session, user)

    r = await client.patch(f"/api/admin/deals/{deal.id}", json={"expired": True}, headers=user_headers)
    assert r.status_code == 403

    r = await client.delete(f"/api/admin/deals/{deal.id}", headers=user_headers)
    assert r.status_code == 403


async def test_admin_unknown_ids(client, admin_headers):
    assert (await client.delete("/api/admin/deals/missing", headers=admin_headers)).status_code == 404
    r = await client.patch("/api/admin/coupons/missing", json={"expired": True}, headers=admin_headers)
    assert r.status_code == 404


async def test_admin_coupon_url_change_rederives_merchant(client, session, user, admin_headers):
    coupon = await make_coupon(session, user, merchant="Myntra")

    r = await client.patch(
        f"/api/admin/coupons/{coupon.id}",
        json={"couponUrl": "https://www.ajio.com/offers"},
        headers=admin_headers,
    )
    assert r.status_code == 200
    assert r.json()["merchant"] == "Ajio"

    r = await client.patch(
        f"/api/admin/coupons/{coupon.id}",
        json={"couponUrl": "https://www.nykaa.com/offers", "merchant": "Nykaa Beauty"},
        headers=admin_headers,
    )
    assert r.json()["merchant"] == "Nykaa Beauty"

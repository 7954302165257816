from tests.factories import make_comment, make_coupon, make_deal


async def test_post_comment_and_reply(client, session, user, user_headers):
    deal = await make_deal(session, user)

    r = await client.post(
        "/api/comments",
        json={"content": "Worked for me", "dealId": deal.id},
        headers=user_headers,
    )
    assert r.status_code == 201
    top = r.json()
    assert top["content"] == "Worked for me"
    assert top["score"] == 0
    assert top["postedBy"]["name"] == "alice"
    assert top["replies"] == []

    r = await client.post(
        "/api/comments",
        json={"content": "Same here", "dealId": deal.id, "parentId": top["id"]},
        headers=user_headers,
    )
    assert r.status_code == 201

    r = await client.get(f"/api/deals/{deal.id}/comments")
    [thread] = r.json()
    assert thread["id"] == top["id"]
    assert [rep["content"] for rep in thread["replies"]] == ["Same here"]


async def test_coupon_comments_listing(client, session, user):
    coupon = await make_coupon(session, user)
    await make_comment(session, user, coupon_id=coupon.id, content="older")
    await make_comment(session, user, coupon_id=coupon.id, content="newer")

    r = await client.get(f"/api/coupons/{coupon.id}/comments")

    assert [c["content"] for c in r.json()] == ["newer", "older"]


async def test_nested_reply_rejected(client, session, user, user_headers):
    deal = await make_deal(session, user)
    top = await make_comment(session, user, deal_id=deal.id)
    reply = await make_comment(session, user, deal_id=deal.id, parent_id=top.id)

    r = await client.post(
        "/api/comments",
        json={"content": "deeper", "dealId": deal.id, "parentId": reply.id},
        headers=user_headers,
    )

    assert r.status_code == 400


async def test_reply_must_share_target(client, session, user, user_headers):
    deal = await make_deal(session, user)
    other = await make_deal(session, user)
    top = await make_comment(session, user, deal_id=other.id)

    r = await client.post(
        "/api/comments",
        json={"content": "wrong thread", "dealId": deal.id, "parentId": top.id},
        headers=user_headers,
    )

    assert r.status_code == 400


async def test_comment_target_missing(client, user_headers):
    r = await client.post(
        "/api/comments",
        json={"content": "hello", "couponId": "missing"},
        headers=user_headers,
    )
    assert r.status_code == 404


async def test_comment_needs_exactly_one_target(client, session, user, user_headers):
    deal = await make_deal(session, user)
    coupon = await make_coupon(session, user)

    r = await client.post("/api/comments", json={"content": "x"}, headers=user_headers)
    assert r.status_code == 422

    r = await client.post(
        "/api/comments",
        json={"content": "x", "dealId": deal.id, "couponId": coupon.id},
        headers=user_headers,
    )
    assert r.status_code == 422


async def test_comment_requires_auth(client, session, user):
    deal = await make_deal(session, user)

    r = await client.post("/api/comments", json={"content": "x", "dealId": deal.id})

    assert r.status_code == 401

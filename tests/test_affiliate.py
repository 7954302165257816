from urllib.parse import parse_qs, urlsplit

import pytest

from dealbies.services.affiliate import (
    AFFILIATE_RULES,
    AffiliateRule,
    attach_affiliate_params,
    build_affiliate_rules,
    is_affiliate_merchant,
    is_web_url,
    link_attributes,
    match_rule,
    merchant_from_url,
    merchant_host,
)


def _query(url: str) -> dict:
    return parse_qs(urlsplit(url).query, keep_blank_values=True)


def test_rule_table_is_ordered_and_configurable():
    rules = build_affiliate_rules("tag-1", "partner-1")
    assert [r.domain for r in rules] == [
        "amazon.",
        "flipkart.",
        "myntra.",
        "nykaa.",
        "ajio.",
        "tatacliq.",
    ]
    assert rules[0] == AffiliateRule("amazon.", "tag", "tag-1", "amazon", "Amazon")
    assert all(r.param == "affid" and r.value == "partner-1" for r in rules[1:])


def test_amazon_gets_tag_and_keeps_existing_params():
    out = attach_affiliate_params("https://www.amazon.in/x?y=1", "amazon")
    q = _query(out)
    assert q["tag"] == ["dealbies-21"]
    assert q["y"] == ["1"]
    assert urlsplit(out).path == "/x"


@pytest.mark.parametrize(
    "url",
    [
        "https://www.flipkart.com/p/itm1",
        "https://www.myntra.com/shoes",
        "https://www.nykaa.com/lipstick",
        "https://www.ajio.com/s/men",
        "https://www.tatacliq.com/watch",
    ],
)
def test_partner_domains_get_affid(url):
    assert _query(attach_affiliate_params(url))["affid"] == ["dealbies"]


@pytest.mark.parametrize(
    "url",
    [
        "https://www.amazon.in/x?y=1",
        "https://www.flipkart.com/p?affid=someone-else&q=phone",
        "https://www.myntra.com/shoes?affid=a&affid=b",
    ],
)
def test_augmentation_is_idempotent(url):
    once = attach_affiliate_params(url)
    twice = attach_affiliate_params(once)
    assert twice == once

    rule = match_rule(urlsplit(url).hostname)
    assert len(_query(twice)[rule.param]) == 1
    assert _query(twice)[rule.param] == [rule.value]


def test_existing_param_is_overwritten_in_place():
    out = attach_affiliate_params("https://www.flipkart.com/p?affid=x&q=phone")
    assert urlsplit(out).query == "affid=dealbies&q=phone"


def test_unknown_domain_is_returned_unchanged():
    url = "https://shop.example.org/item?id=7&ref=abc#top"
    assert attach_affiliate_params(url, "Example Store") == url


def test_merchant_hint_is_a_fallback_for_unknown_domains():
    out = attach_affiliate_params("https://amzn.to/3abc", "Amazon India")
    assert _query(out)["tag"] == ["dealbies-21"]


def test_domain_wins_over_merchant_hint():
    out = attach_affiliate_params("https://www.flipkart.com/p", "amazon")
    q = _query(out)
    assert q == {"affid": ["dealbies"]}


@pytest.mark.parametrize(
    "url",
    ["not a url", "", "amazon.in/x", "http://[::1", "https://"],
)
def test_malformed_urls_fail_open(url):
    assert attach_affiliate_params(url, "amazon") == url


def test_custom_rules_table():
    rules = (AffiliateRule("shop.example.", "ref", "us", "example", "Example"),)
    out = attach_affiliate_params("https://shop.example.org/a", rules=rules)
    assert _query(out) == {"ref": ["us"]}
    # default rules are not consulted when a table is passed in
    assert attach_affiliate_params("https://www.amazon.in/a", rules=rules) == "https://www.amazon.in/a"


def test_default_rules_follow_settings():
    assert AFFILIATE_RULES[0].value == "dealbies-21"


@pytest.mark.parametrize(
    "url, expected",
    [
        ("https://www.amazon.in/x", "Amazon"),
        ("https://www.tatacliq.com/x", "Tata CLiQ"),
        ("https://www.bestbuy.com/site", "Bestbuy"),
        ("https://croma.com/tv", "Croma"),
        ("garbage", "Unknown"),
    ],
)
def test_merchant_from_url(url, expected):
    assert merchant_from_url(url) == expected


def test_merchant_host():
    assert merchant_host("https://www.amazon.in/x") == "amazon.in"
    assert merchant_host("https://store.example.com") == "store.example.com"
    assert merchant_host("nope") == "unknown-merchant"


def test_link_attributes():
    assert is_affiliate_merchant("Amazon India")
    assert not is_affiliate_merchant("Croma")
    assert link_attributes("Nykaa") == {"rel": "sponsored", "target": "_blank"}
    assert link_attributes("croma.com") == {"rel": "nofollow", "target": "_blank"}


@pytest.mark.parametrize(
    "url, expected",
    [
        ("https://www.amazon.in/x", True),
        ("HTTP://shop.example.org", True),
        ("amazon.in/x", False),
        ("/deal/abc", False),
        ("ftp://files.example.com/a", False),
        ("http://[::1", False),
    ],
)
def test_is_web_url(url, expected):
    assert is_web_url(url) is expected

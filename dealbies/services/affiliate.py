from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from dealbies.core.config import settings
from dealbies.core.logger import get_logger

logger = get_logger("affiliate")


@dataclass(frozen=True)
class AffiliateRule:
    domain: str  # hostname substring, e.g. "amazon."
    param: str
    value: str
    merchant: str  # partner name matched against merchant hints
    display_name: str


def build_affiliate_rules(amazon_tag: str, partner_id: str) -> tuple[AffiliateRule, ...]:
    """Ordered rule table; the first matching domain wins."""
    return (
        AffiliateRule("amazon.", "tag", amazon_tag, "amazon", "Amazon"),
        AffiliateRule("flipkart.", "affid", partner_id, "flipkart", "Flipkart"),
        AffiliateRule("myntra.", "affid", partner_id, "myntra", "Myntra"),
        AffiliateRule("nykaa.", "affid", partner_id, "nykaa", "Nykaa"),
        AffiliateRule("ajio.", "affid", partner_id, "ajio", "Ajio"),
        AffiliateRule("tatacliq.", "affid", partner_id, "tatacliq", "Tata CLiQ"),
    )


AFFILIATE_RULES = build_affiliate_rules(
    settings.AMAZON_AFFILIATE_TAG,
    settings.PARTNER_AFFILIATE_ID,
)


def _hostname(url: str) -> str | None:
    try:
        parts = urlsplit(url.strip())
        host = parts.hostname
    except ValueError:
        return None
    if not parts.scheme or not host:
        return None
    return host.lower()


def is_web_url(url: str) -> bool:
    """Absolute http(s) URL with a hostname."""
    if _hostname(url) is None:
        return False
    return urlsplit(url.strip()).scheme.lower() in ("http", "https")


def match_rule(
    hostname: str | None,
    merchant: str | None = None,
    rules: tuple[AffiliateRule, ...] | None = None,
) -> AffiliateRule | None:
    rules = AFFILIATE_RULES if rules is None else rules

    if hostname:
        for rule in rules:
            if rule.domain in hostname:
                return rule

    if merchant:
        hint = merchant.lower()
        for rule in rules:
            if rule.merchant in hint:
                return rule

    return None


def set_query_param(url: str, key: str, value: str) -> str:
    """Assign ``key=value`` in the query string.

    The first existing occurrence is replaced in place and later duplicates
    are dropped, so repeated calls never stack parameters.
    """
    parts = urlsplit(url)
    pairs = parse_qsl(parts.query, keep_blank_values=True)

    out: list[tuple[str, str]] = []
    seen = False
    for k, v in pairs:
        if k == key:
            if seen:
                continue
            out.append((k, value))
            seen = True
        else:
            out.append((k, v))
    if not seen:
        out.append((key, value))

    return urlunsplit((parts.scheme, parts.netloc, parts.path, urlencode(out), parts.fragment))


def attach_affiliate_params(
    url: str,
    merchant: str | None = None,
    rules: tuple[AffiliateRule, ...] | None = None,
) -> str:
    """Return ``url`` with the merchant's affiliate parameter set.

    Unknown merchants and unparseable URLs come back unchanged.
    """
    hostname = _hostname(url)
    if hostname is None:
        logger.warning("Could not parse destination url for affiliate params: %r", url)
        return url

    rule = match_rule(hostname, merchant, rules)
    if rule is None:
        return url

    try:
        return set_query_param(url, rule.param, rule.value)
    except ValueError:
        logger.warning("Could not rewrite destination url %r", url)
        return url


def merchant_from_url(url: str, rules: tuple[AffiliateRule, ...] | None = None) -> str:
    """Human-readable merchant name for a destination URL."""
    hostname = _hostname(url)
    if hostname is None:
        return "Unknown"

    rule = match_rule(hostname, rules=rules)
    if rule is not None:
        return rule.display_name

    host = hostname.removeprefix("www.")
    label = host.split(".")[0]
    if not label:
        return "Unknown"
    return label[:1].upper() + label[1:]


def merchant_host(url: str) -> str:
    """Hostname without a leading ``www.``; stored as the merchant on new deals."""
    hostname = _hostname(url)
    if hostname is None:
        return "unknown-merchant"
    return hostname.removeprefix("www.")


def is_affiliate_merchant(merchant: str, rules: tuple[AffiliateRule, ...] | None = None) -> bool:
    rules = AFFILIATE_RULES if rules is None else rules
    hint = (merchant or "").lower()
    return any(rule.merchant in hint for rule in rules)


def link_attributes(merchant: str) -> dict[str, str]:
    return {
        "rel": "sponsored" if is_affiliate_merchant(merchant) else "nofollow",
        "target": "_blank",
    }

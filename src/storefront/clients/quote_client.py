"""HTTP client for the public quote endpoint, with the offline fallback table."""

from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation
from typing import Any

import httpx

from storefront.domain.financing import DEFAULT_DOWN_PCT, Quote, QuoteItem
from storefront.domain.fallback_plans import local_quote
from storefront.domain.quoting import best_per_term, sort_quote_items
from storefront.infra.config import quote_api_base_url

logger = logging.getLogger(__name__)


class FinancingQuoteClient:
    """Thin sync wrapper around GET /v1/financing/quote for preview widgets.

    Whatever comes back (live or fallback) is re-filtered by the allowed
    plan ids, re-ordered and optionally reduced to the best offer per
    term, so a misbehaving server cannot widen the offer.

    Never use this for order totals: on failure it answers from a stale
    hardcoded table.
    """

    def __init__(
        self,
        base_url: str | None = None,
        http_client: httpx.Client | None = None,
        timeout: float = 5.0,
    ) -> None:
        self._base_url = (base_url or quote_api_base_url()).rstrip("/")
        self._http = http_client or httpx.Client(timeout=httpx.Timeout(timeout, connect=2.0))

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> FinancingQuoteClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def get_quote(
        self,
        price: Decimal,
        down_pct: Decimal | None = None,
        plan_ids: tuple[str, ...] = (),
        group_key: str | None = None,
        category: str | None = None,
        best_only: bool = False,
    ) -> Quote:
        params: dict[str, str] = {"price": str(price)}
        if down_pct is not None:
            params["downPct"] = str(down_pct)
        if plan_ids:
            params["planIds"] = ",".join(plan_ids)
        if group_key:
            params["groupKey"] = group_key
        if category:
            params["category"] = category

        try:
            response = self._http.get(f"{self._base_url}/v1/financing/quote", params=params)
            response.raise_for_status()
            quote = self._parse_quote(response.json())
        except (httpx.HTTPError, KeyError, TypeError, ValueError, InvalidOperation) as exc:
            # Transport failure, non-2xx, or a body that is not a quote
            logger.warning(
                "Quote API unavailable, using fallback plans",
                extra={"error": str(exc), "price": str(price)},
            )
            quote = local_quote(price, down_pct if down_pct is not None else DEFAULT_DOWN_PCT)

        items = quote.items
        if plan_ids:
            # Fallback plans carry no live id, so a restricted product gets no offer
            items = tuple(item for item in items if item.plan_id in plan_ids)
        ordered = sort_quote_items(items)
        if best_only:
            ordered = best_per_term(ordered)

        return Quote(
            price=quote.price,
            down_pct=quote.down_pct,
            items=tuple(ordered),
            is_fallback=quote.is_fallback,
        )

    @staticmethod
    def _parse_quote(payload: dict[str, Any]) -> Quote:
        return Quote(
            price=Decimal(str(payload["price"])),
            down_pct=Decimal(str(payload["downPct"])),
            items=tuple(
                QuoteItem(
                    plan_id=item.get("planId"),
                    code=item.get("code"),
                    description=item["description"],
                    months=int(item["months"]),
                    surcharge_pct=Decimal(str(item["surchargePct"])),
                    down_pct=Decimal(str(item["downPct"])),
                    down_amount=Decimal(str(item["downAmount"])),
                    balance=Decimal(str(item["balance"])),
                    surcharge_amount=Decimal(str(item["surchargeAmount"])),
                    total=Decimal(str(item["total"])),
                    monthly=Decimal(str(item["monthly"])),
                )
                for item in payload.get("items", [])
            ),
        )

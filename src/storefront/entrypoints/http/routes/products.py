from fastapi import APIRouter, Depends, Query

from storefront.entrypoints.http.dependencies import get_quote_product_financing_use_case
from storefront.entrypoints.http.dtos.financing import QuoteResponseDTO
from storefront.entrypoints.http.error_responses import ErrorResponse
from storefront.entrypoints.http.mappers.financing_mapper import FinancingMapper
from storefront.use_cases.quote_product_financing import (
    QuoteProductFinancing,
    QuoteProductFinancingRequest,
)


router = APIRouter(tags=["Products"])


@router.get(
    "/products/{product_id}/financing/quote",
    response_model=QuoteResponseDTO,
    summary="Quote financing for a product",
    description="""
    Quote the product's own price (sale price when set) with its financing
    settings applied:

    - `inherit`: every active plan
    - `override`: the chosen plans, or the chosen group when no plans are picked
    - `disabled`: no items

    The product's down payment override replaces the default 0.15, and
    its category is checked against each plan's category lists.
    """,
    responses={404: {"model": ErrorResponse, "description": "Product not found"}},
)
def quote_product_financing(
    product_id: str,
    best: bool = Query(default=True, description="Keep only the best plan per term"),
    use_case: QuoteProductFinancing = Depends(get_quote_product_financing_use_case),
) -> QuoteResponseDTO:
    quote = use_case.execute(QuoteProductFinancingRequest(product_id=product_id, best_only=best))
    return FinancingMapper.to_quote_response(quote)

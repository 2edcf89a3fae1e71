from typing import Any

from fastapi import APIRouter, Body, Depends, Query, Response, status

from storefront.entrypoints.http.dependencies import (
    get_create_plan_use_case,
    get_delete_plan_use_case,
    get_list_plans_use_case,
    get_list_public_plans_use_case,
    get_quote_financing_use_case,
    get_update_plan_use_case,
    get_upsert_plans_use_case,
    require_admin,
)
from storefront.entrypoints.http.dtos.financing import (
    BulkUpsertResponseDTO,
    FinancingPlanDTO,
    FinancingPlanPayloadDTO,
    PublicPlansResponseDTO,
    QuoteResponseDTO,
)
from storefront.entrypoints.http.error_responses import ErrorResponse
from storefront.entrypoints.http.mappers.financing_mapper import FinancingMapper
from storefront.use_cases.financing_plans import (
    CreatePlan,
    DeletePlan,
    ListPlans,
    ListPlansRequest,
    ListPublicPlans,
    UpdatePlan,
    UpsertPlans,
)
from storefront.use_cases.quote_financing import QuoteFinancing


router = APIRouter(tags=["Financing"])


@router.get(
    "/financing/quote",
    response_model=QuoteResponseDTO,
    summary="Quote installment options for a price",
    description="""
    Compute every eligible installment option for a price.

    ## Plan selection
    1. `planIds` (comma separated): only those plans, still requiring them to be active
    2. otherwise `groupKey`: active plans of that group plus ungrouped plans
    3. otherwise: every active plan

    Plans whose price bounds exclude `price`, or whose category lists
    exclude `category`, are never returned.

    ## Calculation
    - downAmount = price × downPct (downPct defaults to 0.15)
    - balance = max(0, price − downAmount)
    - surchargeAmount = balance × surchargePct
    - total = balance + surchargeAmount
    - monthly = total / months

    ## Ordering
    Items are sorted by months, then surcharge. `best=true` keeps only the
    cheapest plan per number of installments.

    An empty `items` list is a valid answer ("no financing available").

    ## Example
    ```
    GET /v1/financing/quote?price=100000&downPct=0.15&groupKey=celulares&best=true
    ```
    """,
    responses={
        422: {"model": ErrorResponse, "description": "downPct outside [0, 1] or not a number"},
    },
)
def quote_financing(
    price: str = Query(description="Price as a decimal string", examples=["100000"]),
    down_pct: str | None = Query(
        default=None, alias="downPct", description="Down payment fraction", examples=["0.15"]
    ),
    plan_ids: str | None = Query(default=None, alias="planIds", description="Comma separated"),
    group_key: str | None = Query(default=None, alias="groupKey"),
    category: str | None = Query(default=None),
    best: bool = Query(default=False, description="Keep only the best plan per term"),
    use_case: QuoteFinancing = Depends(get_quote_financing_use_case),
) -> QuoteResponseDTO:
    """Quote endpoint following parse → execute → map → return pattern."""
    # 1. Map to domain request (string → Decimal)
    request = FinancingMapper.to_quote_request(
        price=price,
        down_pct=down_pct,
        plan_ids=plan_ids,
        group_key=group_key,
        category=category,
    )

    # 2. Execute use case
    quote = use_case.execute(request, best_only=best)

    # 3. Map to response (Decimal → string)
    return FinancingMapper.to_quote_response(quote)


@router.get(
    "/financing/public",
    response_model=PublicPlansResponseDTO,
    summary="Active plans for storefront widgets",
)
def list_public_plans(
    group: str | None = Query(default=None, description="Restrict to a group key"),
    use_case: ListPublicPlans = Depends(get_list_public_plans_use_case),
) -> PublicPlansResponseDTO:
    return FinancingMapper.to_public_response(use_case.execute(group_key=group or None))


@router.get(
    "/financing/plans",
    response_model=list[FinancingPlanDTO],
    summary="List plan records",
    description="""
    Every plan record matching the filter, ordered by months then surcharge.

    Unlike the quote endpoint, plans sharing a term are all returned.
    """,
)
def list_plans(
    group_key: str | None = Query(default=None, alias="groupKey"),
    active_only: bool = Query(default=False, alias="activeOnly"),
    use_case: ListPlans = Depends(get_list_plans_use_case),
) -> list[FinancingPlanDTO]:
    plans = use_case.execute(
        ListPlansRequest(group_key=group_key or None, active_only=active_only)
    )
    return [FinancingMapper.to_plan_dto(plan) for plan in plans]


@router.post(
    "/financing/plans",
    response_model=FinancingPlanDTO,
    status_code=status.HTTP_201_CREATED,
    summary="Create a plan",
    dependencies=[Depends(require_admin)],
    responses={
        401: {"model": ErrorResponse},
        409: {"model": ErrorResponse, "description": "Legacy code already in use"},
        422: {"model": ErrorResponse},
    },
)
def create_plan(
    payload: FinancingPlanPayloadDTO,
    use_case: CreatePlan = Depends(get_create_plan_use_case),
) -> FinancingPlanDTO:
    plan = use_case.execute(FinancingMapper.to_domain_plan(payload))
    return FinancingMapper.to_plan_dto(plan)


@router.post(
    "/financing/plans/bulk",
    response_model=BulkUpsertResponseDTO,
    summary="Bulk import plans",
    dependencies=[Depends(require_admin)],
    description="""
    Insert or update many plans at once.

    Rows are matched by `code`, else by (`description`, `months`). Each row
    is applied on its own: malformed or conflicting rows are reported in
    `rejected` with their position and do not block the rest.

    Category lists may be given as arrays or as `"a|b"` strings.
    """,
    responses={401: {"model": ErrorResponse}},
)
def upsert_plans(
    rows: list[Any] = Body(description="Array of plan payloads"),
    use_case: UpsertPlans = Depends(get_upsert_plans_use_case),
) -> BulkUpsertResponseDTO:
    result = use_case.execute(FinancingMapper.to_upsert_request(rows))
    return FinancingMapper.to_upsert_response(result)


@router.put(
    "/financing/plans/{plan_id}",
    response_model=FinancingPlanDTO,
    summary="Replace a plan",
    dependencies=[Depends(require_admin)],
    description="""
    Replace a plan's terms. Orders already placed keep the terms frozen on
    their items; only later quotes and orders see the change.
    """,
    responses={
        401: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
    },
)
def update_plan(
    plan_id: str,
    payload: FinancingPlanPayloadDTO,
    use_case: UpdatePlan = Depends(get_update_plan_use_case),
) -> FinancingPlanDTO:
    plan = use_case.execute(FinancingMapper.to_domain_plan(payload, plan_id=plan_id))
    return FinancingMapper.to_plan_dto(plan)


@router.delete(
    "/financing/plans/{plan_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a plan",
    dependencies=[Depends(require_admin)],
    responses={401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
def delete_plan(
    plan_id: str,
    use_case: DeletePlan = Depends(get_delete_plan_use_case),
) -> Response:
    use_case.execute(plan_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

from __future__ import annotations

from typing import Any

from pydantic import ValidationError as PydanticValidationError

from storefront.domain.errors import ValidationError
from storefront.domain.financing import (
    DEFAULT_DOWN_PCT,
    FinancingGroup,
    FinancingPlan,
    Quote,
    QuoteItem,
    QuoteRequest,
)
from storefront.entrypoints.http.dtos.financing import (
    BulkUpsertResponseDTO,
    FinancingGroupDTO,
    FinancingGroupPayloadDTO,
    FinancingPlanDTO,
    FinancingPlanPayloadDTO,
    PublicPlansResponseDTO,
    QuoteItemDTO,
    QuoteResponseDTO,
    RejectedRowDTO,
)
from storefront.entrypoints.http.error_responses import ErrorDetail
from storefront.entrypoints.http.mappers.conversions import (
    parse_decimal,
    parse_optional_decimal,
    split_categories,
)
from storefront.use_cases.financing_plans import (
    PublicPlans,
    RejectedRow,
    UpsertPlansRequest,
    UpsertPlansResponse,
)


class FinancingMapper:
    """Maps between REST DTOs and domain models for quotes and plan administration."""

    @staticmethod
    def to_quote_request(
        price: str,
        down_pct: str | None = None,
        plan_ids: str | None = None,
        group_key: str | None = None,
        category: str | None = None,
    ) -> QuoteRequest:
        """
        Converts quote query parameters to a domain QuoteRequest.

        "NaN" and "Infinity" parse as decimals on purpose: the quote engine
        answers them with an empty quote rather than an error.

        Raises:
            ValidationError: If price or downPct are not decimals
        """
        errors: list[dict[str, str]] = []

        parsed_price = parse_decimal(price, "price", errors)
        parsed_down = parse_optional_decimal(down_pct, "downPct", errors)

        if errors:
            raise ValidationError(errors=errors)

        return QuoteRequest(
            price=parsed_price,
            down_pct=parsed_down if parsed_down is not None else DEFAULT_DOWN_PCT,
            plan_ids=tuple(p.strip() for p in (plan_ids or "").split(",") if p.strip()),
            group_key=group_key or None,
            category=category or None,
        )

    @staticmethod
    def to_quote_item_dto(item: QuoteItem) -> QuoteItemDTO:
        return QuoteItemDTO(
            plan_id=item.plan_id,
            code=item.code,
            description=item.description,
            months=item.months,
            surcharge_pct=str(item.surcharge_pct),
            down_pct=str(item.down_pct),
            down_amount=str(item.down_amount),
            balance=str(item.balance),
            surcharge_amount=str(item.surcharge_amount),
            total=str(item.total),
            monthly=str(item.monthly),
        )

    @staticmethod
    def to_quote_response(quote: Quote) -> QuoteResponseDTO:
        return QuoteResponseDTO(
            price=str(quote.price),
            down_pct=str(quote.down_pct),
            items=[FinancingMapper.to_quote_item_dto(item) for item in quote.items],
        )

    @staticmethod
    def to_domain_plan(dto: FinancingPlanPayloadDTO, plan_id: str | None = None) -> FinancingPlan:
        """
        Raises:
            ValidationError: If a decimal field cannot be parsed
        """
        errors: list[dict[str, str]] = []

        surcharge_pct = parse_decimal(dto.surcharge_pct, "surchargePct", errors)
        min_price = parse_optional_decimal(dto.min_price, "minPrice", errors)
        max_price = parse_optional_decimal(dto.max_price, "maxPrice", errors)

        if errors:
            raise ValidationError(errors=errors)

        return FinancingPlan(
            id=plan_id,
            code=dto.code,
            description=dto.description.strip(),
            months=dto.months,
            surcharge_pct=surcharge_pct,
            group_key=dto.group_key.strip() if dto.group_key else None,
            active=dto.active,
            min_price=min_price,
            max_price=max_price,
            include_categories=split_categories(dto.include_categories),
            exclude_categories=split_categories(dto.exclude_categories),
        )

    @staticmethod
    def to_plan_dto(plan: FinancingPlan) -> FinancingPlanDTO:
        return FinancingPlanDTO(
            id=plan.id or "",
            code=plan.code,
            description=plan.description,
            months=plan.months,
            surcharge_pct=str(plan.surcharge_pct),
            group_key=plan.group_key,
            active=plan.active,
            min_price=str(plan.min_price) if plan.min_price is not None else None,
            max_price=str(plan.max_price) if plan.max_price is not None else None,
            include_categories=list(plan.include_categories),
            exclude_categories=list(plan.exclude_categories),
        )

    @staticmethod
    def to_public_response(public: PublicPlans) -> PublicPlansResponseDTO:
        return PublicPlansResponseDTO(
            default_down_pct=str(public.default_down_pct),
            plans=[FinancingMapper.to_plan_dto(plan) for plan in public.plans],
        )

    @staticmethod
    def to_upsert_request(rows: list[Any]) -> UpsertPlansRequest:
        """
        Parse each bulk row on its own.

        Rows failing structural or decimal validation become rejected rows
        instead of failing the whole batch.
        """
        parsed: list[tuple[int, FinancingPlan]] = []
        rejected: list[RejectedRow] = []

        for index, row in enumerate(rows):
            try:
                dto = FinancingPlanPayloadDTO.model_validate(row)
                parsed.append((index, FinancingMapper.to_domain_plan(dto)))
            except PydanticValidationError as exc:
                rejected.append(
                    RejectedRow(
                        index=index,
                        errors=[
                            {
                                "field": ".".join(str(loc) for loc in error["loc"]),
                                "message": error["msg"],
                                "code": error["type"],
                            }
                            for error in exc.errors()
                        ],
                    )
                )
            except ValidationError as exc:
                rejected.append(RejectedRow(index=index, errors=exc.errors or []))

        return UpsertPlansRequest(rows=parsed, rejected=rejected)

    @staticmethod
    def to_upsert_response(response: UpsertPlansResponse) -> BulkUpsertResponseDTO:
        return BulkUpsertResponseDTO(
            count=response.count,
            rejected=[
                RejectedRowDTO(
                    index=row.index,
                    errors=[ErrorDetail(**error) for error in row.errors],
                )
                for row in response.rejected
            ],
        )

    @staticmethod
    def to_domain_group(
        dto: FinancingGroupPayloadDTO, group_id: str | None = None
    ) -> FinancingGroup:
        return FinancingGroup(
            id=group_id,
            key=dto.key.strip(),
            name=dto.name.strip(),
            description=dto.description,
            sort_order=dto.sort_order,
            active=dto.active,
        )

    @staticmethod
    def to_group_dto(group: FinancingGroup) -> FinancingGroupDTO:
        return FinancingGroupDTO(
            id=group.id or "",
            key=group.key,
            name=group.name,
            description=group.description,
            sort_order=group.sort_order,
            active=group.active,
        )

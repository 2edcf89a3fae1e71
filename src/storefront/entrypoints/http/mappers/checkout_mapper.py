from __future__ import annotations

from storefront.domain.checkout import CartLine, CheckoutMessage, CheckoutRequest
from storefront.domain.errors import ValidationError
from storefront.domain.financing import QuoteItem
from storefront.entrypoints.http.dtos.checkout import CheckoutRequestDTO, CheckoutResponseDTO
from storefront.entrypoints.http.dtos.financing import QuoteItemDTO
from storefront.entrypoints.http.mappers.conversions import parse_decimal


class CheckoutMapper:
    @staticmethod
    def _to_quote_item(
        item_id: str, dto: QuoteItemDTO, errors: list[dict[str, str]]
    ) -> QuoteItem:
        prefix = f"selections.{item_id}"
        return QuoteItem(
            plan_id=dto.plan_id,
            code=dto.code,
            description=dto.description,
            months=dto.months,
            surcharge_pct=parse_decimal(dto.surcharge_pct, f"{prefix}.surchargePct", errors),
            down_pct=parse_decimal(dto.down_pct, f"{prefix}.downPct", errors),
            down_amount=parse_decimal(dto.down_amount, f"{prefix}.downAmount", errors),
            balance=parse_decimal(dto.balance, f"{prefix}.balance", errors),
            surcharge_amount=parse_decimal(
                dto.surcharge_amount, f"{prefix}.surchargeAmount", errors
            ),
            total=parse_decimal(dto.total, f"{prefix}.total", errors),
            monthly=parse_decimal(dto.monthly, f"{prefix}.monthly", errors),
        )

    @staticmethod
    def to_domain_request(dto: CheckoutRequestDTO) -> CheckoutRequest:
        """
        Raises:
            ValidationError: If a price or quote figure is not a decimal
        """
        errors: list[dict[str, str]] = []

        lines = tuple(
            CartLine(
                item_id=line.id,
                name=line.name,
                price=parse_decimal(line.price, f"lines.{index}.price", errors),
                quantity=line.quantity,
            )
            for index, line in enumerate(dto.lines)
        )
        selections = {
            item_id: (
                CheckoutMapper._to_quote_item(item_id, selected, errors)
                if selected is not None
                else None
            )
            for item_id, selected in dto.selections.items()
        }

        if errors:
            raise ValidationError(errors=errors)

        return CheckoutRequest(
            customer_name=dto.customer_name,
            lines=lines,
            selections=selections,
            needs_shipping=dto.needs_shipping,
            address=dto.address or None,
        )

    @staticmethod
    def to_response(message: CheckoutMessage) -> CheckoutResponseDTO:
        return CheckoutResponseDTO(
            text=message.text,
            url=message.url,
            subtotal=str(message.subtotal),
            shipping=str(message.shipping),
            total=str(message.total),
        )

"""Build the pre-filled WhatsApp checkout message for a cart."""

from __future__ import annotations

import re
from decimal import Decimal
from urllib.parse import quote

from storefront.domain.checkout import CheckoutMessage, CheckoutRequest
from storefront.domain.errors import ValidationError
from storefront.domain.quoting import to_cents

ZERO = Decimal("0")


def format_ars(amount: Decimal) -> str:
    """es-AR currency format: Decimal("1234.5") -> "$ 1.234,50"."""
    grouped = f"{to_cents(amount):,.2f}"
    return "$ " + grouped.replace(",", "_").replace(".", ",").replace("_", ".")


def _tagline(product_name: str) -> str:
    lowered = product_name.lower()
    if "5g" in lowered:
        return "¡El último modelo en tecnología 5G! 🚀"
    if re.search(r"\ba5\b", lowered):
        return "¡Potencia y estilo en un solo dispositivo! 💪"
    if re.search(r"\ba3\b", lowered):
        return "¡Una excelente opción para todos! 👌"
    return "¡Gran elección para tu día a día! ✨"


class BuildCheckoutMessage:
    """
    Render the cart as a WhatsApp message addressed to the shop.

    Each line is shown cash or financed according to the explicit
    selection map; a missing or None selection means cash. The figures of
    a financed line come from the quote the customer picked and are
    informational only: the order endpoint recomputes them.
    """

    def __init__(self, shop_phone: str, shipping_flat: Decimal) -> None:
        self._shop_phone = re.sub(r"\D", "", shop_phone)
        self._shipping_flat = shipping_flat

    def execute(self, request: CheckoutRequest) -> CheckoutMessage:
        """
        Raises:
            ValidationError: If the customer name is empty or the cart is empty
        """
        self._validate(request)

        subtotal = sum((line.line_total for line in request.lines), ZERO)
        shipping = self._shipping_flat if request.needs_shipping else ZERO
        total = subtotal + shipping

        rows = [
            f"Cliente: {request.customer_name.strip()} 👨",
            "",
            "¡Aprovecha al Máximo tus Compras! 📈",
            "",
        ]

        for line in request.lines:
            rows.append(f"- {line.name}: {_tagline(line.name)}")
            selected = request.selections.get(line.item_id)
            if selected is None:
                rows.append(f"- Precio contado: {format_ars(line.line_total)} 💸")
                rows.append("- ¡Ahorra dinero con nuestra opción de contado!")
            else:
                rows.append(
                    f"- Precio financiado: {selected.months} cuotas de "
                    f"{format_ars(selected.monthly)} 📊"
                )
                rows.append(f"- ¡Total: {format_ars(selected.total)}! 💸")

        rows += ["", "¡Resumen de tu Compra! 📝", "", f"- Subtotal: {format_ars(subtotal)}"]
        if request.needs_shipping:
            if request.address:
                rows.append(f"- Dirección: {request.address}")
            rows.append(f"- Envío: {format_ars(shipping)}")
        rows.append(f"- Total estimado: {format_ars(total)}")

        rows += [
            "",
            "¡Beneficios Exclusivos! 🎁",
            "",
            "- ¡Envío rápido y seguro!",
            "- ¡Soporte técnico especializado!",
            "",
            "¡No Pierdas esta Oportunidad! ⏰",
            "¿Qué esperas? ¡Haz tu pedido ahora y aprovecha al máximo nuestros beneficios!",
        ]

        text = "\n".join(rows)
        url = f"https://wa.me/{self._shop_phone}?text={quote(text, safe='')}"

        return CheckoutMessage(
            text=text,
            url=url,
            subtotal=to_cents(subtotal),
            shipping=to_cents(shipping),
            total=to_cents(total),
        )

    @staticmethod
    def _validate(request: CheckoutRequest) -> None:
        errors: list[dict[str, str]] = []

        if not request.customer_name or not request.customer_name.strip():
            errors.append(
                {"field": "customer_name", "message": "Must not be empty", "code": "REQUIRED"}
            )
        if not request.lines:
            errors.append(
                {"field": "lines", "message": "Must contain at least one item", "code": "REQUIRED"}
            )
        for index, line in enumerate(request.lines):
            if line.quantity < 1:
                errors.append(
                    {
                        "field": f"lines.{index}.quantity",
                        "message": "Must be >= 1",
                        "code": "INVALID_VALUE",
                    }
                )

        if errors:
            raise ValidationError(errors=errors)

from fastapi import APIRouter, Depends

from storefront.entrypoints.http.dependencies import get_build_checkout_message_use_case
from storefront.entrypoints.http.dtos.checkout import CheckoutRequestDTO, CheckoutResponseDTO
from storefront.entrypoints.http.error_responses import ErrorResponse
from storefront.entrypoints.http.mappers.checkout_mapper import CheckoutMapper
from storefront.use_cases.build_checkout_message import BuildCheckoutMessage


router = APIRouter(tags=["Checkout"])


@router.post(
    "/checkout/whatsapp",
    response_model=CheckoutResponseDTO,
    summary="Build the WhatsApp checkout message",
    description="""
    Render the cart as a pre-filled WhatsApp message and a `wa.me` link.

    `selections` maps each cart item id to the quote item the customer
    picked; a null or missing entry means the line is paid cash. Shipping
    adds the flat shipping fee.
    """,
    responses={422: {"model": ErrorResponse}},
)
def build_checkout_message(
    payload: CheckoutRequestDTO,
    use_case: BuildCheckoutMessage = Depends(get_build_checkout_message_use_case),
) -> CheckoutResponseDTO:
    message = use_case.execute(CheckoutMapper.to_domain_request(payload))
    return CheckoutMapper.to_response(message)

import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException

from business.subscription import PLAN_CURRENCY, get_plan, subscription_end_for
from database.supabase.dao.user_settings import UserSettingsDAO
from integrations.razorpay import (
    RazorpayAPIError,
    RazorpayClient,
    RazorpayConfigurationError,
    build_receipt,
)
from models.auth_user import AuthUser
from routers.settings import get_settings_dao
from schemas.payment import (
    CreateOrderRequest,
    CreateOrderResponse,
    VerifyPaymentRequest,
    VerifyPaymentResponse,
)
from utils.middlewares.auth_user import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/payments", tags=["Payments"])


def get_razorpay_client() -> RazorpayClient:
    try:
        return RazorpayClient()
    except RazorpayConfigurationError as e:
        logger.error(f"Razorpay configuration error: {e}")
        raise HTTPException(status_code=500, detail="Payment gateway not configured")


@router.post("/orders", response_model=CreateOrderResponse)
async def create_order(
    payload: CreateOrderRequest,
    current_user: AuthUser = Depends(get_current_user),
    razorpay: RazorpayClient = Depends(get_razorpay_client),
) -> CreateOrderResponse:
    """Create a Razorpay order for a premium plan."""
    plan = get_plan(payload.plan_type)
    if plan is None:
        raise HTTPException(status_code=400, detail="Invalid plan type")

    try:
        order = await razorpay.create_order(
            amount=plan.amount,
            currency=PLAN_CURRENCY,
            receipt=build_receipt(current_user.id),
            notes={
                "user_id": current_user.id,
                "user_email": current_user.email or "",
                "plan_type": payload.plan_type,
                "duration_months": str(plan.duration_months),
            },
        )
    except RazorpayAPIError as e:
        logger.error(f"Razorpay order creation error: {e} {e.description}")
        raise HTTPException(
            status_code=500,
            detail={"error": str(e), "details": e.description},
        )

    return CreateOrderResponse(
        order_id=order["id"],
        amount=order["amount"],
        currency=order["currency"],
        key_id=razorpay.key_id,
        plan_name=plan.name,
        plan_description=plan.description,
    )


@router.post("/verify", response_model=VerifyPaymentResponse)
async def verify_payment(
    payload: VerifyPaymentRequest,
    current_user: AuthUser = Depends(get_current_user),
    razorpay: RazorpayClient = Depends(get_razorpay_client),
    settings_dao: UserSettingsDAO = Depends(get_settings_dao),
) -> VerifyPaymentResponse:
    """
    Verify the checkout signature and activate the premium plan.

    The plan is read from the notes of the paid order, never from the request.
    """
    if not razorpay.verify_signature(
        payload.razorpay_order_id, payload.razorpay_payment_id, payload.razorpay_signature
    ):
        logger.warning(f"Invalid payment signature for user {current_user.id}")
        raise HTTPException(status_code=400, detail="Invalid signature")

    try:
        order = await razorpay.fetch_order(payload.razorpay_order_id)
    except RazorpayAPIError as e:
        logger.error(f"Razorpay order fetch error: {e} {e.description}")
        raise HTTPException(
            status_code=500,
            detail={"error": str(e), "details": e.description},
        )

    notes = order.get("notes") or {}
    if notes.get("user_id") != current_user.id:
        logger.warning(f"Order {payload.razorpay_order_id} was not created for user {current_user.id}")
        raise HTTPException(status_code=400, detail="Order does not belong to this user")

    plan_type = notes.get("plan_type")
    if get_plan(plan_type) is None:
        raise HTTPException(status_code=400, detail="Invalid plan type")

    subscription_end = subscription_end_for(plan_type, datetime.utcnow())
    try:
        await settings_dao.activate_premium(
            current_user.id, subscription_end, payload.razorpay_payment_id
        )
    except Exception as e:
        logger.error(f"Subscription update error: {e}")
        raise HTTPException(status_code=500, detail="Failed to update subscription")

    return VerifyPaymentResponse(
        success=True,
        message="Payment verified and subscription activated",
        subscription_end=subscription_end,
    )

from fastapi import APIRouter

from routers.account import router as account_router
from routers.invoices import router as invoices_router
from routers.payments import router as payments_router
from routers.reports import router as reports_router
from routers.settings import router as settings_router
from routers.transactions import router as transactions_router

router = APIRouter()
router.include_router(transactions_router, tags=["Transactions"])
router.include_router(reports_router, tags=["Reports"])
router.include_router(invoices_router, tags=["Invoices"])
router.include_router(settings_router, tags=["Settings"])
router.include_router(payments_router, tags=["Payments"])
router.include_router(account_router, tags=["Account"])

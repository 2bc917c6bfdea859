from fastapi import APIRouter

from app.routers.crud import register_crud
from app.schemas import CustomerRequest, CustomerResponse

router = APIRouter(prefix="/customers", tags=["customers"])

register_crud(
    router, "", "customer", "customers", CustomerRequest, CustomerResponse,
    lambda uow: uow.customers,
)

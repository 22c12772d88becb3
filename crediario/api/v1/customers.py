"""GET /v1/customers/resolve - look up an existing customer or credit account"""

from fastapi import APIRouter, Depends, Query

from crediario.api.v1.schemas import AccountSchema, CustomerSchema, ResolveResponse
from crediario.api.dependencies import get_resolver, get_store_context
from crediario.domain.customers import CustomerResolver
from crediario.domain.models import Customer, StoreContext

router = APIRouter()


def _customer(customer: Customer | None) -> CustomerSchema | None:
    if customer is None:
        return None
    return CustomerSchema(
        id=customer.id,
        name=customer.name,
        phone=customer.phone,
        email=customer.email,
        address=customer.address,
    )


@router.get("/customers/resolve", response_model=ResolveResponse)
def resolve_customer(
    name: str = Query("", description="Customer name as typed"),
    phone: str = Query("", description="Customer phone, any formatting"),
    ctx: StoreContext = Depends(get_store_context),
    resolver: CustomerResolver = Depends(get_resolver),
):
    """
    Match a name/phone before starting a new operation.

    Returns:
        kind plus the matched customer/account; a name-only match comes back
        as ``suggestion`` and is never applied automatically
    """
    resolution = resolver.resolve(name, phone, ctx)
    return ResolveResponse(
        kind=resolution.kind.value,
        customer=_customer(resolution.customer),
        account=AccountSchema.from_account(resolution.account) if resolution.account else None,
        suggestion=_customer(resolution.suggestion),
    )

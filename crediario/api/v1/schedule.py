"""Live form helpers: installment preview and interactive stock check"""

from fastapi import APIRouter, Depends, HTTPException

from crediario.api.v1.schemas import (
    ScheduleResponse,
    SchedulePreviewRequest,
    StageItemRequest,
    StageItemResponse,
    StockIssueSchema,
)
from crediario.api.dependencies import get_catalog_client, get_store_context
from crediario.infrastructure.clients.catalog import CatalogClient
from crediario.domain.installments import compute_schedule, installment_options
from crediario.domain.stock import stage_line_item
from crediario.domain.exceptions import InvalidScheduleInput, RemoteServiceError
from crediario.domain.models import StoreContext

router = APIRouter()


@router.post("/schedule/preview", response_model=ScheduleResponse)
def preview_schedule(request_body: SchedulePreviewRequest):
    """
    Compute the installment plan for the values currently in the form.

    Pure: safe to call on every keystroke.
    """
    try:
        plan = compute_schedule(
            request_body.total,
            request_body.installments,
            request_body.frequency,
            request_body.first_due_date,
        )
    except InvalidScheduleInput as e:
        raise HTTPException(status_code=422, detail=str(e))

    return ScheduleResponse.from_plan(plan)


@router.get("/schedule/options")
def schedule_options():
    """Installment counts offered by the form selector"""
    return {"installments": installment_options(), "frequencies": ["daily", "weekly", "biweekly", "monthly"]}


@router.post("/line-items/stage", response_model=StageItemResponse)
async def stage_item(
    request_body: StageItemRequest,
    ctx: StoreContext = Depends(get_store_context),
    catalog: CatalogClient = Depends(get_catalog_client),
):
    """Soft stock check when the owner adds one line item to the form"""
    item = request_body.item.to_domain()
    staged = [s.to_domain() for s in request_body.staged]

    try:
        snapshot = {item.product_id: await catalog.get_stock(item.product_id)}
    except RemoteServiceError:
        raise HTTPException(status_code=503, detail="Serviço indisponível, tente novamente")

    issue = stage_line_item(staged, item, snapshot)
    if issue:
        return StageItemResponse(
            accepted=False, issue=StockIssueSchema.from_issue(issue), staged=request_body.staged
        )
    return StageItemResponse(accepted=True, staged=[*request_body.staged, request_body.item])

import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends, Response
from fastapi.responses import JSONResponse

from mealprep.api.dependencies import PlannerServices, get_services
from mealprep.domain.errors import ResolutionError
from mealprep.infra.pdf_utils import generate_pdf_for_grocery_list
from mealprep.utilities.validators import GroceryListRequest

router = APIRouter(prefix="/api/grocery-list", tags=["grocery"])
logger = logging.getLogger(__name__)

RETRY_MESSAGE = "Could not build list, retry"


def grocery_payload(services: PlannerServices) -> dict:
    """Visible (non-removed) grocery items grouped by department."""
    plan = services.plan
    grocery = plan.grocery_list
    sections = plan.visible_sections()
    return {
        "week_label": plan.week_label,
        "recipe_ids": list(grocery.recipe_ids),
        "departments": [s.to_dict() for s in sections],
        "count": sum(len(s.items) for s in sections),
        "hidden": plan.hidden_count(),
        "total": len(grocery),
        "warnings": [str(w) for w in grocery.warnings()],
    }


@router.post("")
async def generate_grocery_list(payload: Optional[GroceryListRequest] = Body(None),
                                services: PlannerServices = Depends(get_services)):
    """Consolidate the planned recipes (or the given ids) into a new grocery list."""
    recipe_ids = payload.recipe_ids if payload else None
    try:
        result = await services.plan.generate_grocery_list(recipe_ids)
    except ResolutionError as e:
        logger.error("Grocery list generation failed for %s: %s", e.recipe_ids, e)
        return JSONResponse(
            status_code=502,
            content={"error": RETRY_MESSAGE, "detail": str(e), "failed_recipe_ids": e.recipe_ids},
        )
    data = grocery_payload(services)
    data["stale"] = result is None
    return data


@router.get("")
def current_grocery_list(services: PlannerServices = Depends(get_services)):
    return grocery_payload(services)


@router.post("/remove/{ingredient_id}")
def remove_item(ingredient_id: str, services: PlannerServices = Depends(get_services)):
    removed = services.plan.remove_grocery_item(ingredient_id)
    return {"removed": removed, **grocery_payload(services)}


@router.post("/reset")
def reset_removals(services: PlannerServices = Depends(get_services)):
    services.plan.reset_grocery_removals()
    return grocery_payload(services)


@router.get("/pdf")
def grocery_pdf(services: PlannerServices = Depends(get_services)):
    plan = services.plan
    pdf_bytes = generate_pdf_for_grocery_list(plan.visible_sections(), plan.week_label)
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": 'attachment; filename="grocery_list.pdf"'},
    )

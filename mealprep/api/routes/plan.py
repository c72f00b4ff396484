import logging
from typing import Literal, Optional

from fastapi import APIRouter, Body, Depends, HTTPException

from mealprep.api.dependencies import PlannerServices, get_services
from mealprep.api.routes.recipes import load_recipes
from mealprep.utilities.validators import AddToBucketInput, SmartFillInput, WeekInput

router = APIRouter(prefix="/api/plan", tags=["plan"])
logger = logging.getLogger(__name__)

Bucket = Literal["breakfast", "main"]


def plan_payload(services: PlannerServices) -> dict:
    """Plan snapshot with recipe titles for both buckets (ids unknown to the catalog keep their id)."""
    plan = services.plan.snapshot()
    titles = services.recipes.titles()
    data = plan.to_dict()
    data["titles"] = {rid: titles.get(rid, rid) for rid in plan.recipe_ids()}
    return data


@router.get("")
async def get_plan(services: PlannerServices = Depends(get_services)):
    await load_recipes(services)
    return plan_payload(services)


# Fixed paths are registered before /{bucket} so they are not captured by it.
@router.post("/clear")
def clear_plan(services: PlannerServices = Depends(get_services)):
    services.plan.clear_buckets()
    return plan_payload(services)


@router.post("/shuffle")
def shuffle_plan(services: PlannerServices = Depends(get_services)):
    services.plan.shuffle()
    return plan_payload(services)


@router.post("/smart-fill")
async def smart_fill(payload: Optional[SmartFillInput] = Body(None),
                     services: PlannerServices = Depends(get_services)):
    """Replace both buckets with a random pick from the catalog."""
    payload = payload or SmartFillInput()
    recipes = await load_recipes(services)
    if not recipes:
        raise HTTPException(status_code=409, detail="No recipes available for smart fill")
    services.plan.smart_fill(recipes, payload.breakfast_count, payload.main_count)
    return plan_payload(services)


@router.put("/week")
def set_week(payload: WeekInput, services: PlannerServices = Depends(get_services)):
    services.plan.set_week(payload.start, payload.end)
    return plan_payload(services)


@router.post("/{bucket}")
async def add_to_bucket(bucket: Bucket, payload: AddToBucketInput,
                        services: PlannerServices = Depends(get_services)):
    recipes = await load_recipes(services)
    if recipes and payload.recipe_id not in {r.id for r in recipes}:
        raise HTTPException(status_code=404, detail="Recipe not found")
    added = services.plan.add_to_bucket(bucket, payload.recipe_id)
    return {"added": added, **plan_payload(services)}


@router.delete("/{bucket}/{recipe_id}")
def remove_from_bucket(bucket: Bucket, recipe_id: str, services: PlannerServices = Depends(get_services)):
    removed = services.plan.remove_from_bucket(bucket, recipe_id)
    return {"removed": removed, **plan_payload(services)}


@router.post("/{bucket}/shuffle")
def shuffle_bucket(bucket: Bucket, services: PlannerServices = Depends(get_services)):
    services.plan.shuffle(bucket)
    return plan_payload(services)

from fastapi import FastAPI, Query, Request
from fastapi.responses import JSONResponse
from typing import Optional
import logging
import random

from mealprep.api.dependencies import PlannerServices
from mealprep.domain.errors import NotFoundError, ResolutionError
from mealprep.infra.Menu_Repository import MenuRepository

# Routers
from mealprep.api.routes import grocery, menus, plan, recipes

# Logging
logger = logging.getLogger("mealprep_app")


def create_app(catalog=None, menu_repository: Optional[MenuRepository] = None,
               rng: Optional[random.Random] = None) -> FastAPI:
    """Build the planner API with its own plan state, stores and event log.

    `catalog` defaults to the configured backend (HTTP when RECIPE_API_BASE_URL
    is set, otherwise the bundled recipes.json).
    """
    app = FastAPI(title="MealPrep Weekly Planner API")
    app.state.services = PlannerServices(catalog=catalog, menus=menu_repository, rng=rng)

    app.include_router(recipes.router)
    app.include_router(plan.router)
    app.include_router(grocery.router)
    app.include_router(menus.router)

    @app.exception_handler(ResolutionError)
    async def _resolution_error(request: Request, exc: ResolutionError):
        logger.error("Unresolved recipe(s) %s on %s: %s", exc.recipe_ids, request.url.path, exc)
        return JSONResponse(status_code=502, content={"error": str(exc), "failed_recipe_ids": exc.recipe_ids})

    @app.exception_handler(NotFoundError)
    async def _not_found(request: Request, exc: NotFoundError):
        logger.warning("Not found on %s: %s", request.url.path, exc)
        return JSONResponse(status_code=404, content={"error": str(exc)})

    @app.get('/api/events')
    def list_events(since: Optional[int] = Query(default=None, description="Return events with id greater than this value")):
        """Recent planner events (bucket changes, grocery outcomes, menu saves) for polling clients."""
        return app.state.services.event_log.get_events(since)

    logger.info("MealPrep API ready (catalog=%s)", type(app.state.services.catalog).__name__)
    return app


app = create_app()

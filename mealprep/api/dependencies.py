"""Per-application service container handed to the routers via request.app.state."""
import random
from typing import Optional

from fastapi import Request

from mealprep.events.Event_Bus import EventBus
from mealprep.events.web_observers import EventLog
from mealprep.infra.Ingredient_Resolver import IngredientResolver
from mealprep.infra.Menu_Repository import MenuRepository
from mealprep.infra.Recipe_Catalog import default_catalog
from mealprep.infra.Recipe_Repository import RecipeRepository
from mealprep.logic.grocery.removal import RemovalOverlay
from mealprep.logic.planning.plan_state import PlanStateManager


class PlannerServices:
    def __init__(self, catalog=None, menus: Optional[MenuRepository] = None,
                 rng: Optional[random.Random] = None):
        self.catalog = catalog if catalog is not None else default_catalog()
        self.resolver = IngredientResolver(self.catalog)
        self.recipes = RecipeRepository(self.catalog, self.resolver)
        self.event_bus = EventBus()
        self.event_log = EventLog().start(self.event_bus)
        self.plan = PlanStateManager(self.resolver, RemovalOverlay(), self.event_bus, rng=rng)
        self.menus = menus if menus is not None else MenuRepository()


def get_services(request: Request) -> PlannerServices:
    return request.app.state.services

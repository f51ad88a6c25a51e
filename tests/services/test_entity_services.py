"""
Tests for the event, recipe, method and container services.

The prep list service has its own module; these cover what differs per
entity (ordering, keys, required fields) plus a save / load / delete pass.
"""

import asyncio

import pytest

from prepchef.errors import AuthRequiredError, ValidationError
from prepchef.schemas.containers import Container
from prepchef.schemas.events import Event
from prepchef.schemas.methods import Method
from prepchef.schemas.recipes import Recipe
from prepchef.services.container_service import delete_container, load_containers, save_container
from prepchef.services.event_service import delete_event, load_events, save_event
from prepchef.services.method_service import delete_method, load_methods, save_method
from prepchef.services.recipe_service import delete_recipe, load_recipes, save_recipe


class TestEventService:
    """Tests for save_event / load_events / delete_event."""

    @pytest.mark.asyncio
    async def test_save_and_load(self, db, supabase_client):
        saved = await save_event(db, {
            "id": "e1",
            "name": " Gala ",
            "date": "2025-06-01",
            "totalServings": "120",
            "prepItems": [{"id": "1", "name": "Canapes", "quantity": "300", "unit": "pieces"}],
        })

        assert saved.name == "Gala"
        assert saved.total_servings == 120
        assert saved.prep_items[0].quantity == "300"
        assert supabase_client.tables["events"][0]["total_servings"] == 120

        loaded = await load_events(db)
        assert [e.id for e in loaded] == ["e1"]

    @pytest.mark.asyncio
    async def test_load_orders_by_event_date(self, db, supabase_client):
        supabase_client.tables["events"] = [
            {"id": "e1", "name": "Brunch", "date": "2025-03-01", "created_at": "2025-02-01T00:00:00+00:00"},
            {"id": "e2", "name": "Gala", "date": "2025-06-01", "created_at": "2025-01-01T00:00:00+00:00"},
        ]

        loaded = await load_events(db)

        assert [e.id for e in loaded] == ["e2", "e1"]

    @pytest.mark.asyncio
    async def test_missing_date_is_rejected(self, db):
        with pytest.raises(ValidationError):
            await save_event(db, Event(id="e1", name="Gala"))

    @pytest.mark.asyncio
    async def test_delete(self, db, supabase_client):
        supabase_client.tables["events"] = [{"id": "e1", "name": "Gala", "date": "2025-06-01"}]

        await delete_event(db, " e1 ")

        assert supabase_client.tables["events"] == []


class TestRecipeService:
    """Tests for save_recipe / load_recipes / delete_recipe."""

    @pytest.mark.asyncio
    async def test_save_and_load(self, db):
        recipe = Recipe(
            id="r1",
            name="Chicken Stock",
            ingredients=["bones", "water"],
            instructions=["Roast", "Simmer"],
            prep_time="20",
            tags=["base", "base", "soup"],
            difficulty="Easy",
        )

        saved = await save_recipe(db, recipe)
        loaded = await load_recipes(db)

        assert saved.prep_time == 20
        assert saved.tags == ["base", "soup"]
        assert loaded[0].ingredients == ["bones", "water"]
        assert loaded[0].difficulty == "Easy"

    @pytest.mark.asyncio
    async def test_key_is_id_only(self, db, supabase_client):
        """A rename inside the window is a new payload, so it is written."""
        await save_recipe(db, Recipe(id="r1", name="Stock"))
        await save_recipe(db, Recipe(id="r1", name="Brown Stock"))

        assert len(supabase_client.writes("recipes", "upsert")) == 2
        assert supabase_client.tables["recipes"][0]["name"] == "Brown Stock"

    @pytest.mark.asyncio
    async def test_requires_authentication(self, anonymous_db):
        with pytest.raises(AuthRequiredError):
            await save_recipe(anonymous_db, Recipe(id="r1", name="Stock"))

    @pytest.mark.asyncio
    async def test_delete(self, db, supabase_client):
        await save_recipe(db, Recipe(id="r1", name="Stock"))
        await delete_recipe(db, "r1")

        assert await load_recipes(db) == []


class TestMethodService:
    """Tests for save_method / load_methods / delete_method."""

    @pytest.mark.asyncio
    async def test_save_and_load(self, db):
        saved = await save_method(db, Method(
            id="m1",
            name="Braising",
            instructions=["Sear", "Cover and cook low"],
            equipment=["Dutch oven"],
            estimated_time=180,
        ))
        loaded = await load_methods(db)

        assert saved.difficulty_level == "Intermediate"
        assert loaded[0].equipment == ["Dutch oven"]
        assert loaded[0].estimated_time == 180

    @pytest.mark.asyncio
    async def test_concurrent_deletes_issue_one_request(self, db, supabase_client):
        supabase_client.tables["methods"] = [{"id": "m1", "name": "Braising"}]

        await asyncio.gather(delete_method(db, "m1"), delete_method(db, "m1"))

        assert len(supabase_client.writes("methods", "delete")) == 1


class TestContainerService:
    """Tests for save_container / load_containers / delete_container."""

    @pytest.mark.asyncio
    async def test_save_and_load(self, db):
        await save_container(db, Container(id="c1", name="Hotel pan", type="storage", size="1/2"))
        loaded = await load_containers(db)

        assert len(loaded) == 1
        assert loaded[0].type == "storage"
        assert loaded[0].created_at is not None

    @pytest.mark.asyncio
    async def test_type_is_required(self, db, supabase_client):
        with pytest.raises(ValidationError, match="Container must have a type"):
            await save_container(db, {"id": "c1", "name": "Hotel pan"})

        assert supabase_client.writes("containers", "upsert") == []

    @pytest.mark.asyncio
    async def test_delete_requires_authentication(self, anonymous_db):
        with pytest.raises(AuthRequiredError):
            await delete_container(anonymous_db, "c1")

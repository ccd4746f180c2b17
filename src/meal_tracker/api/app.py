"""FastAPI application factory."""

import logging
from datetime import date
from uuid import UUID

from fastapi import FastAPI, HTTPException, Query, Request, status
from fastapi.responses import Response

from meal_tracker.api.forms import DailyEntryForm, ReferenceMealForm
from meal_tracker.app_logging import configure_logging
from meal_tracker.containers import AppContainer
from meal_tracker.domain.meals import DailyMealEntry, DailyTotals, ReferenceMeal
from meal_tracker.services.csv_io import CsvReadError, read_csv_upload
from meal_tracker.services.tracker import EntryNotFoundError, MealNotFoundError

EXPORT_FILENAME = "meal_tracker_export.csv"


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    app = FastAPI(title="Meal Tracker")
    app.state.container = container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/meals")
    async def list_meals(request: Request) -> dict[str, object]:
        """Return the catalog in stored order."""
        state_container: AppContainer = request.app.state.container
        meals = state_container.tracker.reference_meals
        return {"meals": [_serialize_meal(meal) for meal in meals]}

    @app.post("/meals", status_code=status.HTTP_201_CREATED)
    async def add_meal(form: ReferenceMealForm, request: Request) -> dict[str, object]:
        """Add a reference meal from the add-meal form."""
        state_container: AppContainer = request.app.state.container
        meal = state_container.tracker.add_reference_meal(
            ReferenceMeal(
                name=form.name,
                calories=form.calories,
                protein=form.protein,
                fat=form.fat,
                carbs=form.carbs,
            )
        )
        return _serialize_meal(meal)

    @app.delete("/meals")
    async def delete_meals(
        request: Request, index: list[int] = Query(...)
    ) -> dict[str, object]:
        """Remove catalog meals at the given positions."""
        state_container: AppContainer = request.app.state.container
        try:
            state_container.tracker.remove_reference_meal(index)
        except IndexError as exc:
            raise HTTPException(status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
        return {"remaining": len(state_container.tracker.reference_meals)}

    @app.post("/meals/import")
    async def import_meals(request: Request) -> dict[str, object]:
        """Import reference meals from an uploaded CSV body."""
        state_container: AppContainer = request.app.state.container
        try:
            text = read_csv_upload(await request.body())
        except CsvReadError as exc:
            logger.warning("Rejected CSV upload", extra={"error": str(exc)})
            raise HTTPException(status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
        imported = state_container.tracker.import_reference_meals_from_csv(text)
        return {
            "imported": len(imported),
            "meals": [_serialize_meal(meal) for meal in imported],
        }

    @app.get("/days/{day}")
    async def day_view(day: date, request: Request) -> dict[str, object]:
        """Return entries and totals for a calendar day."""
        state_container: AppContainer = request.app.state.container
        tracker = state_container.tracker
        return {
            "summary": _serialize_totals(tracker.day_summary(day)),
            "entries": [
                _serialize_entry(entry) for entry in tracker.entries_for_day(day)
            ],
        }

    @app.post("/days/{day}/entries", status_code=status.HTTP_201_CREATED)
    async def add_entry(
        day: date, form: DailyEntryForm, request: Request
    ) -> dict[str, object]:
        """Log a catalog meal on a calendar day."""
        state_container: AppContainer = request.app.state.container
        try:
            entry = state_container.tracker.log_meal(form.meal_id, day, form.portions)
        except MealNotFoundError as exc:
            raise HTTPException(status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
        return _serialize_entry(entry)

    @app.delete("/entries/{entry_id}")
    async def delete_entry(entry_id: UUID, request: Request) -> dict[str, str]:
        """Remove a daily entry by id."""
        state_container: AppContainer = request.app.state.container
        try:
            state_container.tracker.remove_daily_entry_by_id(entry_id)
        except EntryNotFoundError as exc:
            raise HTTPException(status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
        return {"status": "ok"}

    @app.delete("/entries")
    async def delete_entries(
        request: Request, index: list[int] = Query(...)
    ) -> dict[str, object]:
        """Remove daily entries at the given log positions."""
        state_container: AppContainer = request.app.state.container
        try:
            state_container.tracker.remove_daily_entry(index)
        except IndexError as exc:
            raise HTTPException(status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
        return {"remaining": len(state_container.tracker.daily_entries)}

    @app.get("/export")
    async def export_csv(request: Request) -> Response:
        """Return the log as a downloadable CSV file."""
        state_container: AppContainer = request.app.state.container
        return Response(
            content=state_container.tracker.export_to_csv(),
            media_type="text/csv",
            headers={
                "Content-Disposition": f'attachment; filename="{EXPORT_FILENAME}"'
            },
        )

    return app


def _serialize_meal(meal: ReferenceMeal) -> dict[str, object]:
    return {
        "id": str(meal.id),
        "name": meal.name,
        "calories": meal.calories,
        "protein": meal.protein,
        "fat": meal.fat,
        "carbs": meal.carbs,
    }


def _serialize_entry(entry: DailyMealEntry) -> dict[str, object]:
    return {
        "id": str(entry.id),
        "date": entry.date.isoformat(),
        "reference_meal": _serialize_meal(entry.reference_meal),
        "portions": entry.portions,
        "total_calories": entry.total_calories,
        "total_protein": entry.total_protein,
        "total_fat": entry.total_fat,
        "total_carbs": entry.total_carbs,
    }


def _serialize_totals(totals: DailyTotals) -> dict[str, object]:
    return {
        "day": totals.day.isoformat(),
        "calories": totals.calories,
        "protein": totals.protein,
        "fat": totals.fat,
        "carbs": totals.carbs,
    }

import os
from datetime import date
from typing import List, Optional

from fastapi import Depends, FastAPI, Query, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import StreamingResponse

from aggregation import build_insights
from database import MoodJSONStore
from exceptions import EntryNotFoundError, register_exception_handlers
from filters import DatePreset, apply_filters, preset_range, with_location
from logger import setup_logger
from schemas import DailySummary, DayInsight, MoodEntry, MoodEntryCreate, MoodEntryUpdate

setup_logger()


def get_store(request: Request) -> MoodJSONStore:
    return request.app.state.store


def create_app(store: Optional[MoodJSONStore] = None) -> FastAPI:
    app = FastAPI(title="Mood Journal API")
    app.state.store = store if store is not None else MoodJSONStore()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)
    _add_routes(app)
    return app


def _filtered_days(store: MoodJSONStore, q: str, date_from: Optional[date], date_to: Optional[date],
                   min_average: Optional[float], preset: Optional[DatePreset]) -> List[DailySummary]:
    if preset is not None:
        date_from, date_to = preset_range(preset)
    return apply_filters(store.find_all(), q, date_from, date_to, min_average)


def _add_routes(app: FastAPI) -> None:

    @app.get("/")
    def read_root():
        return {"message": "Mood Journal Backend is running"}

    @app.get("/test")
    def test_store(store: MoodJSONStore = Depends(get_store)):
        return {
            "backend": "✅ Running",
            "store_file": str(store.path),
            "store_file_exists": store.path.exists(),
            "entries": len(store.find_all()),
        }

    # -------- Mood Journal Endpoints --------

    @app.post("/api/moods", response_model=MoodEntry, status_code=status.HTTP_201_CREATED)
    def add_mood(body: MoodEntryCreate, store: MoodJSONStore = Depends(get_store)):
        return store.create(body.to_entry())

    @app.get("/api/moods", response_model=List[DailySummary])
    def list_moods(
        q: str = Query("", description="search within notes"),
        date_from: Optional[date] = Query(None),
        date_to: Optional[date] = Query(None),
        min_average: Optional[float] = Query(None),
        preset: Optional[DatePreset] = Query(None),
        store: MoodJSONStore = Depends(get_store),
    ):
        return _filtered_days(store, q, date_from, date_to, min_average, preset)

    @app.get("/api/moods/locations", response_model=List[MoodEntry])
    def list_located_moods(store: MoodJSONStore = Depends(get_store)):
        return with_location(store.find_all())

    @app.get("/api/moods/export")
    def export_moods(store: MoodJSONStore = Depends(get_store)):
        entries = sorted(store.find_all(), key=lambda m: m.timestamp)

        def generate_csv():
            yield "id,timestamp,mood,score,note,sleep,social,hobby,food\n"
            for m in entries:
                note = (m.note or "").replace("\r", " ").replace("\n", " ").replace('"', '""')
                stamp = m.timestamp.replace('"', '""')
                tags = [t.value if t is not None else "" for t in (m.sleep, m.social, m.hobby, m.food)]
                yield f"{m.id},\"{stamp}\",{m.mood_type.value},{m.score},\"{note}\",{','.join(tags)}\n"

        return StreamingResponse(generate_csv(), media_type="text/csv", headers={
            "Content-Disposition": "attachment; filename=moods.csv"
        })

    @app.get("/api/moods/{entry_id}", response_model=MoodEntry)
    def get_mood(entry_id: int, store: MoodJSONStore = Depends(get_store)):
        entry = store.find_by_id(entry_id)
        if entry is None:
            raise EntryNotFoundError(entry_id)
        return entry

    @app.put("/api/moods/{entry_id}", response_model=MoodEntry)
    def update_mood(entry_id: int, body: MoodEntryUpdate, store: MoodJSONStore = Depends(get_store)):
        existing = store.find_by_id(entry_id)
        if existing is None:
            raise EntryNotFoundError(entry_id)
        updated = body.to_entry(existing)
        store.update(updated)
        return updated

    @app.delete("/api/moods/{entry_id}")
    def delete_mood(entry_id: int, store: MoodJSONStore = Depends(get_store)):
        entry = store.find_by_id(entry_id)
        if entry is None:
            return {"status": "not_found", "id": entry_id}
        store.delete(entry)
        return {"status": "deleted", "id": entry_id}

    @app.get("/api/insights", response_model=List[DayInsight])
    def list_insights(
        q: str = Query(""),
        date_from: Optional[date] = Query(None),
        date_to: Optional[date] = Query(None),
        min_average: Optional[float] = Query(None),
        preset: Optional[DatePreset] = Query(None),
        store: MoodJSONStore = Depends(get_store),
    ):
        return build_insights(_filtered_days(store, q, date_from, date_to, min_average, preset))


app = create_app()


if __name__ == "__main__":
    import uvicorn
    port = int(os.getenv("PORT", 8000))
    uvicorn.run(app, host="0.0.0.0", port=port)

from fastapi import FastAPI, Depends, HTTPException, Query, Response, status
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.orm import Session
from typing import List, Optional
import logging
import os
from pathlib import Path
from datetime import date

from workday.database import engine, get_db, Base
from workday import models  # Import all models to register them with Base
from workday.schemas import (
    DayRecordUpdate, DayRecordResponse, DayStatusResponse,
    NoteUpdate, ShiftsUpdate,
    HolidayResponse, HolidayPreferenceUpdate, HolidayRefreshResponse,
    SettingsUpdate, SettingsResponse, LastUpdateResponse,
)
from workday.auth import verify_api_key
from workday.constants import (
    DEFAULT_LOG_DIRECTORY_PROD, DEFAULT_LOG_DIRECTORY_DEV, CORS_ALLOWED_ORIGINS, MAX_RANGE_DAYS,
)
from workday.exceptions import ValidationException, DayRecordNotFoundException
from workday.records import DayRecord
from workday.repositories.day_record_repository import DayRecordRepository
from workday.repositories.settings_repository import SettingsRepository
from workday.services.day_record_service import DayRecordService, status_name
from workday.services.day_status_service import DayStatusResolver, DayStatusResult
from workday.services.holiday_service import HolidayService, FetchResult
from workday.services.holiday_store import HolidayStore
from workday.services.pattern_service import PatternEngine
from workday.services.scheduler_service import start_scheduler, stop_scheduler
from workday.services.settings_service import SettingsService
from workday.database import SessionLocal

LOG_DIR = os.getenv("WORKDAY_LOG_DIR", DEFAULT_LOG_DIRECTORY_PROD)
LOG_FILE = os.getenv("WORKDAY_LOG_FILE", "workday.log")

# Create log directory if it doesn't exist (for development)
try:
    Path(LOG_DIR).mkdir(parents=True, exist_ok=True)
    log_path = Path(LOG_DIR) / LOG_FILE
except PermissionError:
    # Fallback to local directory if no permissions for /var/log
    LOG_DIR = DEFAULT_LOG_DIRECTORY_DEV
    Path(LOG_DIR).mkdir(parents=True, exist_ok=True)
    log_path = Path(LOG_DIR) / LOG_FILE

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.FileHandler(log_path),
        logging.StreamHandler()
    ]
)

logger = logging.getLogger("workday")

# Create database tables
Base.metadata.create_all(bind=engine)

# Holiday overrides shared by all requests; reloaded at startup, replaced on refresh
holiday_store = HolidayStore()

app = FastAPI(
    title="Workday API",
    description="Work day / off day resolution with holiday overlays and shift patterns",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_holiday_store() -> HolidayStore:
    return holiday_store


def get_resolver(
    db: Session = Depends(get_db),
    store: HolidayStore = Depends(get_holiday_store)
) -> DayStatusResolver:
    """Resolver over the current records, holidays and pattern settings"""
    pattern = PatternEngine(SettingsService(db).get_pattern_config())
    return DayStatusResolver(DayRecordRepository.lookup(db), store, pattern)


def to_status_response(result: DayStatusResult) -> DayStatusResponse:
    return DayStatusResponse(
        date=result.date,
        is_work_day=result.is_work_day,
        shifts=sorted(result.shifts),
        source=result.source,
        note=result.note,
        holiday_name=result.holiday_name,
    )


def to_record_response(record: DayRecord) -> DayRecordResponse:
    return DayRecordResponse(
        date=record.date,
        status=status_name(record.status),
        note=record.note,
        shifts=sorted(record.shifts),
    )


def to_refresh_response(db: Session, result: FetchResult) -> HolidayRefreshResponse:
    settings = SettingsRepository.get(db)
    return HolidayRefreshResponse(
        success=result.success,
        record_count=result.record_count,
        error=result.error,
        last_holiday_fetch=settings.last_holiday_fetch,
    )


# Startup event
@app.on_event("startup")
async def startup_event():
    logger.info(f"Workday API started. Logging to: {log_path}")
    db = SessionLocal()
    try:
        HolidayService(db, holiday_store).load()
    finally:
        db.close()
    start_scheduler(holiday_store)

# Shutdown event
@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Shutting down Workday API")
    stop_scheduler()

# Health check (no auth required)
@app.get("/")
async def root():
    return {"message": "Workday API", "status": "active"}


# ===== DAY STATUS ENDPOINTS =====

@app.get("/api/days", response_model=List[DayStatusResponse], dependencies=[Depends(verify_api_key)])
def get_day_range_endpoint(
    start: date = Query(...),
    end: date = Query(...),
    resolver: DayStatusResolver = Depends(get_resolver)
):
    """Resolve every day in [start, end]"""
    if end < start:
        raise HTTPException(status_code=400, detail="end must not be before start")
    if (end - start).days >= MAX_RANGE_DAYS:
        raise HTTPException(status_code=400, detail=f"Range is limited to {MAX_RANGE_DAYS} days")
    return [to_status_response(result) for result in resolver.resolve_range(start, end)]


@app.get("/api/days/{target_date}", response_model=DayStatusResponse, dependencies=[Depends(verify_api_key)])
def get_day_endpoint(target_date: date, resolver: DayStatusResolver = Depends(get_resolver)):
    """Resolve one day"""
    return to_status_response(resolver.resolve(target_date))


# ===== EXPLICIT RECORD ENDPOINTS =====

@app.get("/api/records/{target_date}", response_model=DayRecordResponse, dependencies=[Depends(verify_api_key)])
def get_record_endpoint(target_date: date, db: Session = Depends(get_db)):
    """Get the explicit record of a day"""
    record = DayRecordRepository.get(db, target_date)
    if not record:
        raise HTTPException(status_code=404, detail="Day record not found")
    return to_record_response(record)


@app.put("/api/records/{target_date}", response_model=Optional[DayRecordResponse], dependencies=[Depends(verify_api_key)])
def put_record_endpoint(
    target_date: date,
    update: DayRecordUpdate,
    db: Session = Depends(get_db),
    resolver: DayStatusResolver = Depends(get_resolver)
):
    """Replace the explicit record of a day"""
    try:
        record = DayRecordService(db, resolver).set_status(
            target_date, update.status, update.note, update.shifts
        )
    except ValidationException as e:
        raise HTTPException(status_code=400, detail=str(e))
    return to_record_response(record) if record else None


@app.delete("/api/records/{target_date}", status_code=status.HTTP_204_NO_CONTENT, dependencies=[Depends(verify_api_key)])
def delete_record_endpoint(
    target_date: date,
    db: Session = Depends(get_db),
    resolver: DayStatusResolver = Depends(get_resolver)
):
    """Delete the explicit record of a day"""
    try:
        DayRecordService(db, resolver).delete(target_date)
    except DayRecordNotFoundException:
        raise HTTPException(status_code=404, detail="Day record not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@app.post("/api/records/{target_date}/toggle", response_model=DayStatusResponse, dependencies=[Depends(verify_api_key)])
def toggle_record_endpoint(
    target_date: date,
    db: Session = Depends(get_db),
    resolver: DayStatusResolver = Depends(get_resolver)
):
    """Flip a day between work and rest"""
    return to_status_response(DayRecordService(db, resolver).toggle(target_date))


@app.put("/api/records/{target_date}/note", response_model=DayStatusResponse, dependencies=[Depends(verify_api_key)])
def save_note_endpoint(
    target_date: date,
    update: NoteUpdate,
    db: Session = Depends(get_db),
    resolver: DayStatusResolver = Depends(get_resolver)
):
    """Set or clear the note of a day"""
    try:
        DayRecordService(db, resolver).save_note(target_date, update.note)
    except ValidationException as e:
        raise HTTPException(status_code=400, detail=str(e))
    return to_status_response(resolver.resolve(target_date))


@app.put("/api/records/{target_date}/shifts", response_model=DayStatusResponse, dependencies=[Depends(verify_api_key)])
def set_shifts_endpoint(
    target_date: date,
    update: ShiftsUpdate,
    db: Session = Depends(get_db),
    resolver: DayStatusResolver = Depends(get_resolver)
):
    """Set the active shifts of a day"""
    try:
        DayRecordService(db, resolver).set_shifts(target_date, update.shifts)
    except ValidationException as e:
        raise HTTPException(status_code=400, detail=str(e))
    return to_status_response(resolver.resolve(target_date))


# ===== HOLIDAY ENDPOINTS =====

@app.get("/api/holidays", response_model=List[HolidayResponse], dependencies=[Depends(verify_api_key)])
def get_holidays_endpoint(store: HolidayStore = Depends(get_holiday_store)):
    """Get the current holiday overrides in feed order"""
    return [HolidayResponse.model_validate(record) for record in store.records]


@app.post("/api/holidays/refresh", response_model=HolidayRefreshResponse, dependencies=[Depends(verify_api_key)])
def refresh_holidays_endpoint(
    db: Session = Depends(get_db),
    store: HolidayStore = Depends(get_holiday_store)
):
    """Re-download the holiday feed for the selected source"""
    result = HolidayService(db, store).refresh()
    return to_refresh_response(db, result)


@app.put("/api/holidays/preference", response_model=HolidayRefreshResponse, dependencies=[Depends(verify_api_key)])
def set_holiday_preference_endpoint(
    update: HolidayPreferenceUpdate,
    db: Session = Depends(get_db),
    store: HolidayStore = Depends(get_holiday_store)
):
    """Select the holiday source (0 = none clears all holidays)"""
    result = HolidayService(db, store).set_preference(update.preference)
    return to_refresh_response(db, result)


# ===== SETTINGS ENDPOINTS =====

@app.get("/api/settings", response_model=SettingsResponse, dependencies=[Depends(verify_api_key)])
def get_settings_endpoint(db: Session = Depends(get_db)):
    """Get pattern and holiday settings"""
    service = SettingsService(db)
    return service.to_response(service.get())


@app.put("/api/settings", response_model=SettingsResponse, dependencies=[Depends(verify_api_key)])
def update_settings_endpoint(settings_update: SettingsUpdate, db: Session = Depends(get_db)):
    """Replace the pattern settings"""
    service = SettingsService(db)
    return service.to_response(service.update(settings_update))


# ===== CHANGE NOTIFICATION =====

@app.get("/api/status/last-update", response_model=LastUpdateResponse, dependencies=[Depends(verify_api_key)])
def last_update_endpoint(db: Session = Depends(get_db)):
    """Timestamp of the last data write; clients re-render when it changes"""
    settings = SettingsRepository.get(db)
    return LastUpdateResponse(last_data_update=settings.last_data_update or 0.0)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("workday.main:app", host="0.0.0.0", port=8000, reload=False)

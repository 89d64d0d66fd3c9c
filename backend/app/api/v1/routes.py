from __future__ import annotations

import json
from datetime import date
from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status
from pydantic import ValidationError

from ...insights import CRISIS_RESOURCES, SentimentScorer, detect_extreme_distress
from ...insights.trends import PERIOD_DAYS
from ...metrics import DISTRESS_DETECTIONS
from ...schemas.ai import AdviceRequest, AdviceResponse, ReflectionResponse
from ...schemas.entries import (
    CheckinCreate,
    EntryCreate,
    EntryCreateResponse,
    EntryListResponse,
    JournalEntryModel,
)
from ...schemas.insights import (
    AnalyzeRequest,
    AnalyzeResponse,
    DailyTrendsResponse,
    DayBucketModel,
    DistressRequest,
    DistressResponse,
    MoodCurveResponse,
    MoodPointModel,
)
from ...schemas.settings import (
    ExportPayload,
    ImportResponse,
    ReminderStatusModel,
    SettingsResponse,
    SettingUpdate,
)
from ...services.journal import EmptyEntryError, JournalService
from ...services.reminders import REMINDER_TIME_KEY, parse_reminder_time

router = APIRouter(prefix="/api/v1", tags=["journal"])

TREND_WINDOWS = frozenset(PERIOD_DAYS.values())


def get_journal_service(request: Request) -> JournalService:
    return request.app.state.journal_service


def get_scorer(request: Request) -> SentimentScorer:
    return request.app.state.scorer


def _tag_request(request: Request, kind: str, entry_id: int | None = None) -> None:
    # Picked up by RequestLoggingMiddleware
    request.state.kind = kind
    request.state.entry_id = entry_id


@router.post(
    "/entries",
    response_model=EntryCreateResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_entry(
    payload: EntryCreate,
    request: Request,
    service: JournalService = Depends(get_journal_service),
) -> EntryCreateResponse:
    try:
        saved = await service.save_entry(payload.text, payload.mood)
    except EmptyEntryError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(exc),
        ) from exc
    _tag_request(request, "journal", saved.entry.id)
    return EntryCreateResponse(
        entry=JournalEntryModel.model_validate(saved.entry, from_attributes=True),
        distress=saved.distress,
    )


@router.post(
    "/checkins",
    response_model=EntryCreateResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_checkin(
    payload: CheckinCreate,
    request: Request,
    service: JournalService = Depends(get_journal_service),
) -> EntryCreateResponse:
    entry = await service.save_quick_checkin(payload.mood, payload.stress_level)
    _tag_request(request, "checkin", entry.id)
    return EntryCreateResponse(entry=JournalEntryModel.model_validate(entry, from_attributes=True))


@router.get("/entries", response_model=EntryListResponse)
async def list_entries(
    service: JournalService = Depends(get_journal_service),
    limit: int | None = Query(default=None, ge=1, le=100),
) -> EntryListResponse:
    entries = await service.recent_entries(limit)
    items = [JournalEntryModel.model_validate(e, from_attributes=True) for e in entries]
    return EntryListResponse(items=items)


@router.get("/entries/today", response_model=EntryListResponse)
async def today_timeline(
    service: JournalService = Depends(get_journal_service),
) -> EntryListResponse:
    entries = await service.today_timeline()
    items = [JournalEntryModel.model_validate(e, from_attributes=True) for e in entries]
    return EntryListResponse(items=items)


@router.get("/entries/{entry_id}/reflection", response_model=ReflectionResponse)
async def reflect_on_entry(
    entry_id: int,
    request: Request,
    service: JournalService = Depends(get_journal_service),
) -> ReflectionResponse:
    _tag_request(request, "reflection", entry_id)
    reflection = await service.reflect(entry_id)
    if reflection is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="entry not found")
    return ReflectionResponse(
        entry_id=reflection.entry_id,
        summary=reflection.summary,
        suggestions=reflection.suggestions,
        stress_level=reflection.stress_level,
        source=reflection.source,
    )


@router.delete("/entries/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_entry(
    entry_id: int,
    request: Request,
    service: JournalService = Depends(get_journal_service),
) -> Response:
    _tag_request(request, "delete", entry_id)
    if not await service.delete_entry(entry_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="entry not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/entries")
async def clear_entries(
    service: JournalService = Depends(get_journal_service),
) -> dict[str, int]:
    removed = await service.clear_entries()
    return {"removed": removed}


@router.post("/analyze", response_model=AnalyzeResponse)
async def analyze_text(
    payload: AnalyzeRequest,
    scorer: SentimentScorer = Depends(get_scorer),
) -> AnalyzeResponse:
    analysis = await scorer.analyze_mood(payload.text, payload.mood)
    return AnalyzeResponse(
        sentiment=analysis.sentiment,
        score=analysis.score,
        stress_level=analysis.stress_level,
        mood=analysis.mood,
    )


@router.post("/distress", response_model=DistressResponse)
async def check_distress(payload: DistressRequest) -> DistressResponse:
    if detect_extreme_distress(payload.text):
        DISTRESS_DETECTIONS.labels(origin="check").inc()
        return DistressResponse(distress=True, resources=list(CRISIS_RESOURCES))
    return DistressResponse(distress=False)


@router.get("/trends/daily", response_model=DailyTrendsResponse)
async def daily_trends(
    service: JournalService = Depends(get_journal_service),
    days: int = Query(default=30),
) -> DailyTrendsResponse:
    if days not in TREND_WINDOWS:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"days must be one of {sorted(TREND_WINDOWS)}",
        )
    buckets = await service.daily_trends(days)
    items = [
        DayBucketModel(
            date=bucket.date,
            label=bucket.label,
            average_mood=bucket.average_mood,
            average_stress=bucket.average_stress,
            entries_count=bucket.entries_count,
        )
        for bucket in buckets
    ]
    return DailyTrendsResponse(days=days, items=items)


@router.get("/trends/mood", response_model=MoodCurveResponse)
async def mood_curve(
    service: JournalService = Depends(get_journal_service),
    period: Literal["week", "month"] = Query(default="week"),
) -> MoodCurveResponse:
    points = await service.mood_curve(period)
    items = [MoodPointModel(label=p.label, score=p.score, date=p.date) for p in points]
    return MoodCurveResponse(period=period, items=items)


@router.post("/advice", response_model=AdviceResponse)
async def get_advice(
    payload: AdviceRequest,
    service: JournalService = Depends(get_journal_service),
) -> AdviceResponse:
    result = await service.get_advice(payload.question)
    return AdviceResponse(
        text=result.text,
        source=result.source,
        crisis=result.crisis,
        resources=result.resources,
    )


@router.get("/settings", response_model=SettingsResponse)
async def read_settings(
    service: JournalService = Depends(get_journal_service),
) -> SettingsResponse:
    return SettingsResponse(items=await service.get_settings())


@router.put("/settings/{key}", response_model=SettingsResponse)
async def update_setting(
    key: str,
    payload: SettingUpdate,
    service: JournalService = Depends(get_journal_service),
) -> SettingsResponse:
    if key == REMINDER_TIME_KEY and payload.value is not None:
        try:
            parse_reminder_time(payload.value)
        except ValueError as exc:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail=str(exc),
            ) from exc
    try:
        await service.update_setting(key, payload.value)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(exc),
        ) from exc
    return SettingsResponse(items=await service.get_settings())


@router.get("/reminders", response_model=ReminderStatusModel)
async def reminders(
    service: JournalService = Depends(get_journal_service),
) -> ReminderStatusModel:
    snapshot = await service.reminder_status()
    return ReminderStatusModel(
        enabled=snapshot.enabled,
        reminder_time=snapshot.reminder_time,
        due=snapshot.due,
        title=snapshot.title,
        body=snapshot.body,
        mindfulness_message=snapshot.mindfulness_message,
    )


@router.get("/export")
async def export_data(
    service: JournalService = Depends(get_journal_service),
) -> Response:
    payload = await service.export_data()
    filename = f"mood-journal-{date.today().isoformat()}.json"
    return Response(
        content=json.dumps(payload, indent=2, ensure_ascii=False),
        media_type="application/json",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )


@router.post("/import", response_model=ImportResponse)
async def import_data(
    payload: ExportPayload,
    service: JournalService = Depends(get_journal_service),
) -> ImportResponse:
    try:
        imported = await service.import_data(payload.model_dump(mode="json", by_alias=True))
    except (ValidationError, ValueError) as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(exc),
        ) from exc
    return ImportResponse(imported=imported)

"""Per-calendar user field endpoints: override settings, rendering and capture"""

import logging
from typing import Any, List, Optional, Union

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import HTMLResponse
from pydantic import BaseModel
from sqlmodel import Session

from booking_fields.auth.dependencies import require_permission
from booking_fields.auth.models import EDIT_CALENDARS, User
from booking_fields.config import config
from booking_fields.hooks import FieldHooks, get_field_hooks
from booking_fields.models.database import get_db
from booking_fields.models.field_type import FieldsMode, FieldsPosition
from booking_fields.services.booking_field_service import (
    USER_FIELDS_DATA_KEY,
    BookingFieldService,
)
from booking_fields.services.field_injection_service import FieldInjectionService
from booking_fields.services.field_renderer import FieldRenderer
from booking_fields.services.field_resolver import FieldResolver
from booking_fields.services.field_settings_service import FieldSettingsService
from booking_fields.services.submission_parser import RequiredFieldError

router = APIRouter(prefix="/calendars/{calendar_id}/user-fields", tags=["Calendars"])

logger = logging.getLogger(__name__)


class CalendarSettingsRequest(BaseModel):
    mode: Optional[str] = None
    position: Optional[str] = None
    custom_fields: Optional[Union[List[Any], str]] = None


def _settings_response(service: FieldSettingsService, calendar_id: int) -> dict:
    settings = service.get_calendar_settings(calendar_id)
    if settings is None:
        mode, position = FieldsMode.GLOBAL, FieldsPosition.BEFORE
    else:
        mode, position = settings.mode, settings.position
    return {
        "calendar_id": calendar_id,
        "mode": FieldsMode(mode).value,
        "position": FieldsPosition(position).value,
        "custom_fields": [
            field.model_dump(mode="json")
            for field in service.get_custom_fields(calendar_id)
        ],
    }


@router.get("/settings")
async def get_calendar_settings(
    calendar_id: int,
    db: Session = Depends(get_db),
    hooks: FieldHooks = Depends(get_field_hooks),
    user: User = Depends(require_permission(EDIT_CALENDARS)),
):
    """Return a calendar's override record (defaults when none is stored)"""
    service = FieldSettingsService(db, config, hooks)
    return _settings_response(service, calendar_id)


@router.put("/settings")
async def update_calendar_settings(
    calendar_id: int,
    payload: CalendarSettingsRequest,
    db: Session = Depends(get_db),
    hooks: FieldHooks = Depends(get_field_hooks),
    user: User = Depends(require_permission(EDIT_CALENDARS)),
):
    """Save mode, position and custom fields for a calendar"""
    service = FieldSettingsService(db, config, hooks)
    service.save_calendar_settings(
        calendar_id,
        mode=payload.mode,
        position=payload.position,
        custom_fields=payload.custom_fields,
    )
    logger.info(f"User {user.user_id} updated user field settings for calendar {calendar_id}")
    return _settings_response(service, calendar_id)


@router.get("")
async def get_resolved_fields(
    calendar_id: int,
    db: Session = Depends(get_db),
    hooks: FieldHooks = Depends(get_field_hooks),
):
    """Effective fields and render position for a calendar"""
    resolver = FieldResolver(FieldSettingsService(db, config, hooks))
    return {
        "calendar_id": calendar_id,
        "position": resolver.position_for_calendar(calendar_id).value,
        "fields": [
            field.model_dump(mode="json")
            for field in resolver.resolve_for_calendar(calendar_id)
        ],
    }


@router.get("/render", response_class=HTMLResponse)
async def render_calendar_fields(
    calendar_id: int,
    slot: str = FieldsPosition.BEFORE.value,
    db: Session = Depends(get_db),
    hooks: FieldHooks = Depends(get_field_hooks),
):
    """Markup for the host's render-before / render-after injection point"""
    resolver = FieldResolver(FieldSettingsService(db, config, hooks))
    injection = FieldInjectionService(resolver, FieldRenderer(hooks=hooks))
    return HTMLResponse(injection.render_at(calendar_id, slot))


@router.post("/capture")
async def capture_calendar_fields(
    calendar_id: int,
    request: Request,
    db: Session = Depends(get_db),
    hooks: FieldHooks = Depends(get_field_hooks),
):
    """
    Validate a booking submission and return the booking data with its record.

    A JSON body is taken as the booking payload and searched first; form
    posts are read as the request form. The query string is the last fallback.
    """
    resolver = FieldResolver(FieldSettingsService(db, config, hooks))
    booking_service = BookingFieldService(db, resolver)

    booking_data: dict = {}
    form_data = None
    if request.headers.get("content-type", "").startswith("application/json"):
        try:
            payload = await request.json()
        except (ValueError, RecursionError):
            raise HTTPException(status_code=400, detail="Invalid JSON body")
        if not isinstance(payload, dict):
            raise HTTPException(status_code=400, detail="Booking data must be an object")
        booking_data.update(payload)
    else:
        form_data = await request.form()
    booking_data["calendar_id"] = calendar_id

    try:
        booking_data = booking_service.capture_user_fields(
            booking_data, form_data=form_data, query_params=request.query_params
        )
    except RequiredFieldError as e:
        raise HTTPException(status_code=400, detail=e.message)

    return {**booking_data, USER_FIELDS_DATA_KEY: booking_data.get(USER_FIELDS_DATA_KEY, {})}

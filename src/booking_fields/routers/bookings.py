"""Booking user field data endpoints"""

import logging
from pathlib import Path
from typing import Any, Dict

from fastapi import APIRouter, Depends, Request
from fastapi.templating import Jinja2Templates
from pydantic import BaseModel, Field
from sqlmodel import Session

from booking_fields.auth.dependencies import require_permission
from booking_fields.auth.models import MANAGE_BOOKINGS, User
from booking_fields.config import config
from booking_fields.hooks import FieldHooks, get_field_hooks
from booking_fields.models.database import get_db
from booking_fields.models.field_descriptor import humanize_name
from booking_fields.services.booking_field_service import BookingFieldService
from booking_fields.services.field_resolver import FieldResolver
from booking_fields.services.field_settings_service import FieldSettingsService

router = APIRouter(prefix="/bookings/{booking_id}/user-fields", tags=["Bookings"])

template_dir = Path(__file__).parent.parent / "templates"
templates = Jinja2Templates(directory=str(template_dir))

logger = logging.getLogger(__name__)


class BookingDataRequest(BaseModel):
    booking_data: Dict[str, Any] = Field(
        ..., description="Booking payload carrying user_fields_data"
    )


def _booking_service(db: Session, hooks: FieldHooks) -> BookingFieldService:
    return BookingFieldService(db, FieldResolver(FieldSettingsService(db, config, hooks)))


@router.put("")
async def store_booking_fields(
    booking_id: int,
    payload: BookingDataRequest,
    db: Session = Depends(get_db),
    hooks: FieldHooks = Depends(get_field_hooks),
    user: User = Depends(require_permission(MANAGE_BOOKINGS)),
):
    """Persist the submission record after the host created a booking"""
    service = _booking_service(db, hooks)
    record = service.store_user_fields(booking_id, payload.booking_data)
    return {
        "booking_id": booking_id,
        "stored": record is not None,
        "user_fields_data": service.get_user_fields(booking_id),
    }


@router.get("")
async def get_booking_fields(
    booking_id: int,
    db: Session = Depends(get_db),
    hooks: FieldHooks = Depends(get_field_hooks),
    user: User = Depends(require_permission(MANAGE_BOOKINGS)),
):
    service = _booking_service(db, hooks)
    return {"booking_id": booking_id, "user_fields_data": service.get_user_fields(booking_id)}


@router.get("/view")
async def view_booking_fields(
    request: Request,
    booking_id: int,
    db: Session = Depends(get_db),
    hooks: FieldHooks = Depends(get_field_hooks),
    user: User = Depends(require_permission(MANAGE_BOOKINGS)),
):
    """Admin table of a booking's user field values"""
    data = _booking_service(db, hooks).get_user_fields(booking_id)
    rows = [(humanize_name(name), value) for name, value in data.items()]
    return templates.TemplateResponse(
        request,
        "admin/booking_fields.html",
        {"booking_id": booking_id, "rows": rows},
    )

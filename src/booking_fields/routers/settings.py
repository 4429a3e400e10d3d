"""Global user field settings endpoints"""

import logging
from typing import Any, List, Union

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel, Field
from sqlmodel import Session

from booking_fields.auth.dependencies import require_permission
from booking_fields.auth.models import MANAGE_OPTIONS, User
from booking_fields.config import config
from booking_fields.hooks import FieldHooks, get_field_hooks
from booking_fields.models.database import get_db
from booking_fields.services.field_settings_service import FieldSettingsService

router = APIRouter(prefix="/settings/user-fields", tags=["Settings"])

logger = logging.getLogger(__name__)


class FieldsUpdateRequest(BaseModel):
    fields: Union[List[Any], str] = Field(
        ..., description="Field list as records or as the editor's JSON text"
    )


def _fields_response(service: FieldSettingsService, fields) -> dict:
    return {
        "option_name": service.option_name,
        "fields": [field.model_dump(mode="json") for field in fields],
    }


@router.get("")
async def get_global_fields(
    db: Session = Depends(get_db),
    hooks: FieldHooks = Depends(get_field_hooks),
    user: User = Depends(require_permission(MANAGE_OPTIONS)),
):
    """Return the stored global field list"""
    service = FieldSettingsService(db, config, hooks)
    return _fields_response(service, service.get_global_fields())


@router.put("")
async def update_global_fields(
    payload: FieldsUpdateRequest,
    db: Session = Depends(get_db),
    hooks: FieldHooks = Depends(get_field_hooks),
    user: User = Depends(require_permission(MANAGE_OPTIONS)),
):
    """Sanitize and save the global field list"""
    service = FieldSettingsService(db, config, hooks)
    clean = service.save_global_fields(payload.fields)
    logger.info(f"User {user.user_id} saved {len(clean)} global user fields")
    return _fields_response(service, clean)


@router.post("")
async def submit_global_fields_form(
    request: Request,
    db: Session = Depends(get_db),
    hooks: FieldHooks = Depends(get_field_hooks),
    user: User = Depends(require_permission(MANAGE_OPTIONS)),
):
    """Save from a settings form post; the list is read from the input named after the option"""
    service = FieldSettingsService(db, config, hooks)
    form_data = await request.form()
    raw = form_data.get(service.option_name)
    if raw is None:
        raise HTTPException(status_code=400, detail="Missing field list payload")

    clean = service.save_global_fields(raw)
    logger.info(f"User {user.user_id} saved {len(clean)} global user fields")
    return _fields_response(service, clean)

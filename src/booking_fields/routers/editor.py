"""Field list editor sessions for administrators"""

import logging
from pathlib import Path
from typing import Literal, Optional, Union

import redis
from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.templating import Jinja2Templates
from pydantic import BaseModel, Field
from sqlmodel import Session

from booking_fields.auth.dependencies import get_current_user
from booking_fields.auth.models import EDIT_CALENDARS, MANAGE_OPTIONS, User
from booking_fields.config import config
from booking_fields.hooks import FieldHooks, get_field_hooks
from booking_fields.models.database import get_db, get_redis
from booking_fields.models.field_type import FieldsMode
from booking_fields.services.editor_state_manager import (
    GLOBAL_SCOPE,
    EditorStateManager,
    calendar_scope,
    scope_calendar_id,
)
from booking_fields.services.field_list_editor import EDITOR_TYPES, FieldListEditor
from booking_fields.services.field_settings_service import FieldSettingsService

router = APIRouter(prefix="/admin/editor", tags=["Editor"])

template_dir = Path(__file__).parent.parent / "templates"
templates = Jinja2Templates(directory=str(template_dir))

logger = logging.getLogger(__name__)


class OpenEditorRequest(BaseModel):
    calendar_id: Optional[int] = Field(
        default=None, description="Edit this calendar's custom list instead of the global list"
    )


class EditorEvent(BaseModel):
    action: Literal[
        "add", "remove", "move", "toggle", "label", "name", "type", "required", "hint", "options"
    ]
    index: Optional[int] = None
    to_index: Optional[int] = None
    value: Optional[Union[bool, str]] = None
    confirmed: bool = Field(default=False, description="Confirmation for remove")


class CommitRequest(BaseModel):
    mode: Optional[str] = None
    position: Optional[str] = None


def get_state_manager(redis_client: redis.Redis = Depends(get_redis)) -> EditorStateManager:
    return EditorStateManager(redis_client, ttl_seconds=config["editor_ttl_seconds"])


def scope_target_input(scope: str) -> str:
    """Name of the hidden input that carries the transport value"""
    if scope == GLOBAL_SCOPE:
        return config["user_fields_option_name"]
    return "codobuf_calendar_custom_fields"


def _require_scope_permission(user: User, scope: str) -> None:
    permission = MANAGE_OPTIONS if scope == GLOBAL_SCOPE else EDIT_CALENDARS
    if not user.can(permission):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Missing permission: {permission}",
        )


def _load_session(
    session_id: str, manager: EditorStateManager, user: User, confirmed: bool = False
) -> tuple:
    state = manager.get_session(session_id)
    if state is None:
        raise HTTPException(status_code=404, detail="Editor session not found or expired")
    scope = state["scope"]
    _require_scope_permission(user, scope)
    editor = FieldListEditor.from_state(state, confirm=lambda item: confirmed)
    return scope, editor


def _state_response(session_id: str, scope: str, editor: FieldListEditor) -> dict:
    return {
        "session_id": session_id,
        "scope": scope,
        "items": [
            {
                **item.model_dump(),
                "preview_label": item.preview_label,
                "options_visible": item.options_visible,
            }
            for item in editor.items
        ],
        "transport_value": editor.transport_value,
    }


def _apply_event(editor: FieldListEditor, event: EditorEvent) -> None:
    if event.action == "add":
        editor.add()
        return

    if event.index is None:
        raise HTTPException(status_code=400, detail=f"'{event.action}' needs an index")

    value = event.value
    text = value if isinstance(value, str) else ""
    index = event.index

    if event.action == "remove":
        editor.remove(index)
    elif event.action == "move":
        if event.to_index is None:
            raise HTTPException(status_code=400, detail="'move' needs a to_index")
        editor.move(index, event.to_index)
    elif event.action == "toggle":
        editor.toggle(index)
    elif event.action == "label":
        editor.edit_label(index, text)
    elif event.action == "name":
        editor.edit_name(index, text)
    elif event.action == "type":
        editor.change_type(index, text)
    elif event.action == "required":
        editor.edit_required(index, value is True or text in ("1", "true", "on"))
    elif event.action == "hint":
        editor.edit_hint(index, text)
    elif event.action == "options":
        editor.edit_options(index, text)


@router.post("/sessions")
async def open_editor_session(
    payload: OpenEditorRequest,
    db: Session = Depends(get_db),
    hooks: FieldHooks = Depends(get_field_hooks),
    manager: EditorStateManager = Depends(get_state_manager),
    user: User = Depends(get_current_user),
):
    """Start editing the global list or one calendar's custom list"""
    service = FieldSettingsService(db, config, hooks)
    if payload.calendar_id is None:
        scope = GLOBAL_SCOPE
        _require_scope_permission(user, scope)
        fields = service.get_global_fields()
    else:
        scope = calendar_scope(payload.calendar_id)
        _require_scope_permission(user, scope)
        fields = service.get_custom_fields(payload.calendar_id)

    editor = FieldListEditor.from_fields(fields)
    session_id = manager.create_session(scope, editor)
    return _state_response(session_id, scope, editor)


@router.get("/sessions/{session_id}")
async def get_editor_session(
    session_id: str,
    manager: EditorStateManager = Depends(get_state_manager),
    user: User = Depends(get_current_user),
):
    scope, editor = _load_session(session_id, manager, user)
    return _state_response(session_id, scope, editor)


@router.get("/sessions/{session_id}/view")
async def view_editor_session(
    request: Request,
    session_id: str,
    manager: EditorStateManager = Depends(get_state_manager),
    user: User = Depends(get_current_user),
):
    """Admin markup for the editor list"""
    scope, editor = _load_session(session_id, manager, user)
    return templates.TemplateResponse(
        request,
        "admin/field_list.html",
        {
            "session_id": session_id,
            "scope": scope,
            "items": editor.items,
            "types": EDITOR_TYPES,
            "transport_value": editor.transport_value,
            "target_input": scope_target_input(scope),
        },
    )


@router.post("/sessions/{session_id}/events")
async def apply_editor_event(
    session_id: str,
    event: EditorEvent,
    manager: EditorStateManager = Depends(get_state_manager),
    user: User = Depends(get_current_user),
):
    """Apply one editor event and return the re-serialized state"""
    scope, editor = _load_session(session_id, manager, user, confirmed=event.confirmed)
    try:
        _apply_event(editor, event)
    except IndexError as e:
        raise HTTPException(status_code=400, detail=str(e))

    manager.save_session(session_id, scope, editor)
    return _state_response(session_id, scope, editor)


@router.post("/sessions/{session_id}/commit")
async def commit_editor_session(
    session_id: str,
    payload: CommitRequest,
    db: Session = Depends(get_db),
    hooks: FieldHooks = Depends(get_field_hooks),
    manager: EditorStateManager = Depends(get_state_manager),
    user: User = Depends(get_current_user),
):
    """Save the session's transport value through the sanitizer and close it"""
    scope, editor = _load_session(session_id, manager, user)
    service = FieldSettingsService(db, config, hooks)
    calendar_id = scope_calendar_id(scope)

    if calendar_id is None:
        clean = service.save_global_fields(editor.transport_value)
    else:
        existing = service.get_calendar_settings(calendar_id)
        mode = payload.mode or (existing.mode if existing else FieldsMode.CUSTOM)
        position = payload.position or (existing.position if existing else None)
        service.save_calendar_settings(
            calendar_id,
            mode=mode,
            position=position,
            custom_fields=editor.transport_value,
        )
        clean = service.get_custom_fields(calendar_id)

    manager.clear_session(session_id)
    logger.info(f"User {user.user_id} committed editor session {session_id} ({scope})")
    return {
        "scope": scope,
        "fields": [field.model_dump(mode="json") for field in clean],
    }

"""Extension points for host and theme code.

A single FieldHooks instance is attached to the application state and passed
to the services that need it:

- ``default_fields``: ``() -> list[dict]`` supplying the field list used when
  no global list has been saved yet
- ``render_override``: ``(field, value) -> str | None``; a non-None return
  replaces the built-in markup for that field entirely
- saved observers: ``(fields) -> None`` called with the clean list after
  every successful normalization
"""

import logging
from typing import Callable, List, Optional

from fastapi import Request

logger = logging.getLogger(__name__)


class FieldHooks:
    """Registry of callbacks around the field lifecycle"""

    def __init__(
        self,
        default_fields: Optional[Callable[[], list]] = None,
        render_override: Optional[Callable] = None,
    ):
        self.default_fields = default_fields
        self.render_override = render_override
        self.saved_observers: List[Callable[[list], None]] = []

    def on_fields_saved(self, callback: Callable[[list], None]):
        """Register an observer; usable as a decorator"""
        self.saved_observers.append(callback)
        return callback

    def notify_fields_saved(self, fields: list) -> None:
        for callback in self.saved_observers:
            try:
                callback(list(fields))
            except Exception:
                logger.exception(
                    f"Saved-fields observer {getattr(callback, '__name__', callback)} failed"
                )

    def get_default_fields(self) -> list:
        if self.default_fields is None:
            return []
        try:
            defaults = self.default_fields()
        except Exception:
            logger.exception("Default fields provider failed, using no defaults")
            return []
        return list(defaults or [])

    def override_render(self, field, value) -> Optional[str]:
        if self.render_override is None:
            return None
        return self.render_override(field, value)


def get_field_hooks(request: Request) -> FieldHooks:
    """FastAPI dependency: the application's hook registry"""
    hooks = getattr(request.app.state, "field_hooks", None)
    if hooks is None:
        hooks = FieldHooks()
        request.app.state.field_hooks = hooks
    return hooks

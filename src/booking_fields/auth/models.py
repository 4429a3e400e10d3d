"""Authentication models for FastAPI"""

from pydantic import BaseModel

# Permission names carried in the token's "permissions" claim
MANAGE_OPTIONS = "manage_options"
EDIT_CALENDARS = "edit_calendars"
MANAGE_BOOKINGS = "manage_bookings"


class User(BaseModel):
    user_id: str
    claims: dict

    @property
    def permissions(self) -> list:
        return list(self.claims.get("permissions") or [])

    def can(self, permission: str) -> bool:
        return permission in self.permissions

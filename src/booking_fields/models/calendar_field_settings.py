"""SQLModel CalendarFieldSettings model - per-calendar field override"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Column, Text
from sqlalchemy import Enum as SAEnum
from sqlmodel import Field, SQLModel

from booking_fields.models.field_type import FieldsMode, FieldsPosition


class CalendarFieldSettings(SQLModel, table=True):
    """Override record attached to one calendar"""

    __tablename__ = "calendar_field_settings"

    calendar_id: int = Field(primary_key=True)
    mode: FieldsMode = Field(
        default=FieldsMode.GLOBAL,
        sa_column=Column(
            SAEnum(
                FieldsMode,
                name="calendar_fields_mode",
                values_callable=lambda enum: [e.value for e in enum],
            ),
            nullable=False,
            server_default=FieldsMode.GLOBAL.value,
        ),
    )
    position: FieldsPosition = Field(
        default=FieldsPosition.BEFORE,
        sa_column=Column(
            SAEnum(
                FieldsPosition,
                name="calendar_fields_position",
                values_callable=lambda enum: [e.value for e in enum],
            ),
            nullable=False,
            server_default=FieldsPosition.BEFORE.value,
        ),
    )
    # JSON array of field descriptors, same shape as the global option
    custom_fields: str = Field(default="[]", sa_column=Column(Text, nullable=False))
    updated_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )

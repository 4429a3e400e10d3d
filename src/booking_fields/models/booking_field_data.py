"""SQLModel BookingFieldData model - submitted user field values per booking"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Column, Text
from sqlmodel import Field, SQLModel


class BookingFieldData(SQLModel, table=True):
    """Submission record attached to a booking, stored as a JSON object"""

    __tablename__ = "booking_field_data"

    booking_id: int = Field(primary_key=True)
    data: str = Field(sa_column=Column(Text, nullable=False))
    created_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )

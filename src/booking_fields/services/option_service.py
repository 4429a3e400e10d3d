"""Option service - key/value configuration store backed by the options table"""

import logging
from datetime import datetime, timezone
from typing import Optional

from sqlmodel import Session

from booking_fields.models.option import Option

logger = logging.getLogger(__name__)


class OptionService:
    """Read and write named text options"""

    def __init__(self, db_session: Session):
        self.db = db_session

    def get_option(self, name: str, default: Optional[str] = None) -> Optional[str]:
        option = self.db.get(Option, name)
        if option is None:
            return default
        return option.value

    def update_option(self, name: str, value: str) -> Option:
        """Insert or replace an option value and commit"""
        option = self.db.get(Option, name)
        if option is None:
            option = Option(name=name, value=value)
        else:
            option.value = value
            option.updated_at = datetime.now(timezone.utc)

        try:
            self.db.add(option)
            self.db.commit()
            self.db.refresh(option)
        except Exception as e:
            self.db.rollback()
            logger.error(f"Error saving option {name}: {e}")
            raise

        logger.info(f"Saved option {name}")
        return option


from datetime import datetime

from sqlalchemy import String, Text, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from .database import Base


class AnalysisRecord(Base):
    __tablename__ = "analyses"

    # "<epoch millis>-<file name>", same value as the blob name
    id: Mapped[str] = mapped_column(String(512), primary_key=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    file_name: Mapped[str] = mapped_column(String(255))
    blob_url: Mapped[str] = mapped_column(Text)
    # Stored as a JSON object, camelCase keys
    analysis: Mapped[str] = mapped_column(Text)

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional, Protocol

from fastapi.concurrency import run_in_threadpool

from .extraction import TextExtractor
from .schemas import AnalysisResult, PersistedRecord
from .scoring import analyze_text

logger = logging.getLogger(__name__)


class BlobStore(Protocol):
    async def upload(self, name: str, data: bytes, content_type: str = "") -> str: ...

    async def close(self) -> None: ...


class RecordStore(Protocol):
    async def setup(self) -> None: ...

    async def save(self, record: PersistedRecord) -> None: ...

    async def close(self) -> None: ...


@dataclass(frozen=True)
class UploadedResume:
    filename: str
    content_type: str
    data: bytes


EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def blob_name_for(filename: str, now: datetime) -> str:
    """Timestamp-prefixed storage key; every upload gets a new one."""
    millis = (now - EPOCH) // timedelta(milliseconds=1)
    return f"{millis}-{filename}"


def isoformat(now: datetime) -> str:
    return now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class ResumeAnalysisService:
    """Extract, score and persist one uploaded resume.

    Each step may raise; the first failure aborts the request. The upload
    and the record write are independent, so a failed record write leaves
    the uploaded blob behind.
    """

    def __init__(
        self,
        extractor: TextExtractor,
        blob_store: BlobStore,
        record_store: RecordStore,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.extractor = extractor
        self.blob_store = blob_store
        self.record_store = record_store
        self._clock = clock or _utcnow

    async def analyze(self, resume: UploadedResume) -> AnalysisResult:
        text = await run_in_threadpool(
            self.extractor.extract, resume.data, resume.content_type, resume.filename
        )
        analysis = analyze_text(text)
        logger.info(
            "Scored %s: overall %d", resume.filename, analysis.overall_score
        )

        now = self._clock()
        blob_name = blob_name_for(resume.filename, now)
        blob_url = await self.blob_store.upload(blob_name, resume.data, resume.content_type)

        record = PersistedRecord(
            id=blob_name,
            file_name=resume.filename,
            blob_url=blob_url,
            analysis=analysis,
            timestamp=isoformat(now),
        )
        try:
            await self.record_store.save(record)
        except Exception:
            logger.error("Record write failed; blob %s has no analysis record", blob_name)
            raise

        return analysis

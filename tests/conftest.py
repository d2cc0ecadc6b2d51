import pytest

from resume_analyzer.extraction import TextExtractor
from resume_analyzer.service import ResumeAnalysisService

from .fakes import START, FakeBlobStore, FakeRecordStore, SteppingClock


@pytest.fixture
def blob_store():
    return FakeBlobStore()


@pytest.fixture
def record_store():
    return FakeRecordStore()


@pytest.fixture
def clock():
    return SteppingClock(START)


@pytest.fixture
def service(blob_store, record_store, clock):
    return ResumeAnalysisService(TextExtractor(), blob_store, record_store, clock=clock)

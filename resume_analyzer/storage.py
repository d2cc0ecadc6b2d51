import json
import logging
from datetime import datetime

from azure.cosmos import PartitionKey
from azure.cosmos.aio import CosmosClient
from azure.storage.blob import ContentSettings
from azure.storage.blob.aio import BlobServiceClient
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker

from .config import Settings
from .database import Base, make_engine
from .models import AnalysisRecord
from .schemas import PersistedRecord

logger = logging.getLogger(__name__)


class AzureBlobStore:
    """Keeps the original uploaded files in an Azure Storage container."""

    def __init__(self, service_client: BlobServiceClient, container: str):
        self._service_client = service_client
        self._container = service_client.get_container_client(container)

    @classmethod
    def from_connection_string(cls, connection_string: str, container: str) -> "AzureBlobStore":
        return cls(BlobServiceClient.from_connection_string(connection_string), container)

    async def upload(self, name: str, data: bytes, content_type: str = "") -> str:
        blob = self._container.get_blob_client(name)
        content_settings = ContentSettings(content_type=content_type) if content_type else None
        await blob.upload_blob(data, content_settings=content_settings)
        logger.info("Uploaded blob %s (%d bytes)", name, len(data))
        return blob.url

    async def close(self) -> None:
        await self._service_client.close()


class CosmosRecordStore:
    """Writes analysis records as documents into a Cosmos DB container."""

    def __init__(self, client: CosmosClient, database: str, container: str):
        self._client = client
        self._database_name = database
        self._container_name = container
        self._container = client.get_database_client(database).get_container_client(container)

    @classmethod
    def from_settings(cls, settings: Settings) -> "CosmosRecordStore":
        client = CosmosClient(settings.cosmos_endpoint, credential=settings.cosmos_key)
        return cls(client, settings.cosmos_database, settings.cosmos_container)

    async def setup(self) -> None:
        """Create the database and container on first start; records are partitioned by id."""
        database = await self._client.create_database_if_not_exists(id=self._database_name)
        self._container = await database.create_container_if_not_exists(
            id=self._container_name, partition_key=PartitionKey(path="/id")
        )

    async def save(self, record: PersistedRecord) -> None:
        await self._container.create_item(body=record.model_dump(by_alias=True))
        logger.info("Saved analysis record %s", record.id)

    async def close(self) -> None:
        await self._client.close()


class SqlRecordStore:
    """Writes analysis records as rows through SQLAlchemy."""

    def __init__(self, engine: AsyncEngine):
        self._engine = engine
        self._sessions = async_sessionmaker(engine, expire_on_commit=False)

    @classmethod
    def from_url(cls, database_url: str) -> "SqlRecordStore":
        return cls(make_engine(database_url))

    async def setup(self) -> None:
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def save(self, record: PersistedRecord) -> None:
        row = AnalysisRecord(
            id=record.id,
            created_at=datetime.fromisoformat(record.timestamp.replace("Z", "+00:00")),
            file_name=record.file_name,
            blob_url=record.blob_url,
            analysis=json.dumps(record.analysis.model_dump(by_alias=True)),
        )
        async with self._sessions() as session:
            session.add(row)
            await session.commit()
        logger.info("Saved analysis record %s", record.id)

    async def close(self) -> None:
        await self._engine.dispose()


def build_blob_store(settings: Settings) -> AzureBlobStore:
    return AzureBlobStore.from_connection_string(
        settings.storage_connection_string, settings.storage_container
    )


def build_record_store(settings: Settings):
    """Cosmos DB when its endpoint and key are set, otherwise the SQL database."""
    if settings.use_cosmos:
        logger.info("Using Cosmos DB record store (%s)", settings.cosmos_database)
        return CosmosRecordStore.from_settings(settings)
    logger.info("Using SQL record store")
    return SqlRecordStore.from_url(settings.database_url)

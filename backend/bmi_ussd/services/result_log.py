# /bmi_ussd/services/result_log.py

import logging
from abc import ABC, abstractmethod
from collections import defaultdict, deque
from typing import Deque, Dict, List, Optional

from motor.motor_asyncio import AsyncIOMotorClient
from pymongo import DESCENDING

from bmi_ussd.config.settings import Settings
from bmi_ussd.models.session import BmiResult

# Append-only record of computed BMIs per caller, read back newest first by
# the history screen.

logger = logging.getLogger(__name__)

# Per caller, the in-memory log keeps only what the history screen can show.
IN_MEMORY_RESULTS_PER_CALLER = 50


class ResultLog(ABC):
    @abstractmethod
    async def append(self, caller_id: str, result: BmiResult) -> None:
        ...

    @abstractmethod
    async def list_recent(self, caller_id: str, n: int) -> List[BmiResult]:
        """Returns up to ``n`` results for the caller, newest first."""

    async def ping(self) -> bool:
        return True

    async def close(self) -> None:
        return None


class InMemoryResultLog(ResultLog):
    def __init__(self, max_per_caller: int = IN_MEMORY_RESULTS_PER_CALLER):
        self._results: Dict[str, Deque[BmiResult]] = defaultdict(lambda: deque(maxlen=max_per_caller))

    async def append(self, caller_id: str, result: BmiResult) -> None:
        self._results[caller_id].appendleft(result.model_copy())

    async def list_recent(self, caller_id: str, n: int) -> List[BmiResult]:
        if caller_id not in self._results:
            return []
        return [r.model_copy() for r in list(self._results[caller_id])[:n]]


class MongoResultLog(ResultLog):
    """
    Stores results in the ``bmi_results`` collection, one document per
    calculation, indexed by caller and creation time.
    """

    def __init__(self, mongo_uri: str, database: str, timeout_ms: int = 2000, client: Optional[AsyncIOMotorClient] = None):
        try:
            self.client = client if client is not None else AsyncIOMotorClient(
                mongo_uri,
                tz_aware=True,
                serverSelectionTimeoutMS=timeout_ms,
                connectTimeoutMS=timeout_ms
            )
            self.db = self.client[database]
            self.collection = self.db.bmi_results
            logger.info("MongoDB result log initialized successfully.")
        except Exception as e:
            logger.error(f"Error initializing MongoDB client: {e}")
            raise

    async def create_indexes(self):
        await self.collection.create_index([("caller_id", 1), ("created_at", DESCENDING)])
        logger.info("Result log indexes ensured.")

    async def append(self, caller_id: str, result: BmiResult) -> None:
        document = result.model_dump(mode="python")
        document["caller_id"] = caller_id
        document["category"] = result.category.value
        await self.collection.insert_one(document)

    async def list_recent(self, caller_id: str, n: int) -> List[BmiResult]:
        cursor = self.collection.find(
            {"caller_id": caller_id},
            {"_id": 0}
        ).sort("created_at", DESCENDING).limit(n)
        documents = await cursor.to_list(length=n)
        return [BmiResult.model_validate(doc) for doc in documents]

    async def ping(self) -> bool:
        await self.db.command("ping")
        return True

    async def close(self) -> None:
        self.client.close()


def create_result_log(settings: Settings) -> Optional[ResultLog]:
    """Builds the log selected by RESULT_LOG_BACKEND; None disables history."""
    if settings.result_log_backend == "mongo":
        timeout_ms = int(settings.store_timeout_seconds * 1000)
        return MongoResultLog(settings.mongo_uri, settings.mongo_database, timeout_ms=timeout_ms)
    if settings.result_log_backend == "none":
        logger.info("Result log disabled; history screen will be empty.")
        return None
    return InMemoryResultLog()

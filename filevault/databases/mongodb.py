from typing import List, Optional, Type
from pymongo import AsyncMongoClient
from pymongo.errors import ServerSelectionTimeoutError
from beanie import init_beanie, Document

from filevault.configs.settings import settings
from filevault.utils.logging import get_logger

logger = get_logger(__name__)


class MongoDB:
    """MongoDB connection manager using Beanie ODM"""

    def __init__(self):
        self.client: Optional[AsyncMongoClient] = None
        self.database = None

    async def connect(self, document_models: List[Type[Document]] = None):
        """Connect to MongoDB and initialize Beanie"""
        try:
            self.client = AsyncMongoClient(
                settings.MONGO_URL,
                serverSelectionTimeoutMS=8000,
                connectTimeoutMS=8000,
                socketTimeoutMS=10000,
                maxPoolSize=50,
                minPoolSize=0,
            )

            # Test connection
            await self.client.admin.command('ping')

            self.database = self.client[settings.MONGO_DB]

            if document_models:
                await init_beanie(
                    database=self.database,
                    document_models=document_models
                )
                logger.info(
                    f"Beanie initialized with {len(document_models)} document models")

            return True

        except ServerSelectionTimeoutError as e:
            logger.error(
                f"Failed to connect to MongoDB (timeout) at {settings.MONGO_HOST or 'localhost'}:{settings.MONGO_PORT}: {e}")
            raise ConnectionError("Cannot connect to MongoDB server")
        except Exception as e:
            logger.error(f"Failed to connect to MongoDB: {str(e)}")
            raise

    async def disconnect(self):
        """Disconnect from MongoDB"""
        if self.client:
            await self.client.close()
            self.client = None
            logger.info("Disconnected from MongoDB")


# Global MongoDB instance
mongodb = MongoDB()

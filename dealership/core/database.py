from motor.motor_asyncio import AsyncIOMotorClient
from beanie import init_beanie
from dealership.core.config import settings


async def init_db():
    """
    Initialize MongoDB connection and Beanie ODM.
    """
    client = AsyncIOMotorClient(settings.DATABASE_URL)

    # Selecting the database name from the URL or default
    default_db = client.get_default_database(default=settings.DATABASE_NAME)
    db_name = default_db.name or settings.DATABASE_NAME

    # Import documents only when the Mongo backend is in use
    from dealership.repositories.documents import DOCUMENT_MODELS

    # Initialize Beanie
    await init_beanie(
        database=client[db_name],
        document_models=DOCUMENT_MODELS
    )

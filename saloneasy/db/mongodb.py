from motor.motor_asyncio import AsyncIOMotorClient
from pymongo import ASCENDING, DESCENDING
from saloneasy.core.config import settings
import logging

logger = logging.getLogger(__name__)

class Database:
    client: AsyncIOMotorClient = None
    db = None

db = Database()

async def connect_to_mongo():
    """Connect to MongoDB."""
    try:
        logger.info("Connecting to MongoDB...")
        db.client = AsyncIOMotorClient(settings.MONGO_URI)
        db.db = db.client[settings.DB_NAME]
        logger.info("Connected to MongoDB.")
        
        # Create indexes for collections
        await create_indexes()
        
    except Exception as e:
        logger.error(f"Could not connect to MongoDB: {e}")
        raise e

async def close_mongo_connection():
    """Close MongoDB connection."""
    if db.client:
        logger.info("Closing MongoDB connection...")
        db.client.close()
        logger.info("MongoDB connection closed.")

async def get_database():
    """Get MongoDB database instance."""
    return db.db

async def create_booking_slot_index():
    """
    Unique index behind single occupancy: at most one active booking per
    (salon, date, time). ``occupiesSlot`` mirrors pending/confirmed.

    Raises when the index cannot be built, for example over existing
    duplicate active bookings; the app must not run without it.
    """
    try:
        await db.db.bookings.create_index(
            [("salon", ASCENDING), ("date", ASCENDING), ("time", ASCENDING)],
            name="active_slot_unique",
            unique=True,
            partialFilterExpression={"occupiesSlot": True},
        )
    except Exception as e:
        logger.error(f"Failed to create the active slot index: {e}")
        raise

async def create_indexes():
    """Create indexes for collections."""
    await create_booking_slot_index()

    try:
        # Users collection indexes
        await db.db.users.create_index("email", unique=True)
        
        # Salons collection indexes
        await db.db.salons.create_index("owner")
        await db.db.salons.create_index("status")
        
        # Services collection indexes
        await db.db.services.create_index([("salon", ASCENDING), ("isActive", ASCENDING)])
        
        # Bookings collection indexes
        await db.db.bookings.create_index("bookingId", unique=True)
        await db.db.bookings.create_index([("customer", ASCENDING), ("createdAt", DESCENDING)])
        await db.db.bookings.create_index([("salon", ASCENDING), ("date", ASCENDING)])
        
        # Payments collection indexes; a booking is paid at most once
        await db.db.payments.create_index(
            "booking",
            name="completed_payment_unique",
            unique=True,
            partialFilterExpression={"status": "completed"},
        )
        await db.db.payments.create_index([("customer", ASCENDING), ("createdAt", DESCENDING)])
        
        # Reviews collection indexes; one review per customer and salon
        await db.db.reviews.create_index([("customer", ASCENDING), ("salon", ASCENDING)], unique=True)
        await db.db.reviews.create_index([("salon", ASCENDING), ("createdAt", DESCENDING)])
        
        # Notifications collection indexes
        await db.db.notifications.create_index([("userId", ASCENDING), ("createdAt", DESCENDING)])
        await db.db.notifications.create_index([("userId", ASCENDING), ("read", ASCENDING)])
        
        logger.info("MongoDB indexes created successfully.")
    except Exception as e:
        logger.error(f"Failed to create MongoDB indexes: {e}")

from pymongo import MongoClient, ASCENDING, DESCENDING
from pymongo.errors import PyMongoError
import redis
from edumanage.config import settings
from edumanage.app_logger import get_logger

logger = get_logger("database")

# --- 1. MONGODB ---
mongo_client = None
mongo_db = None

# --- 2. REDIS ---
redis_client = None


def ensure_indexes(db):
    db.configurations.create_index([("key", ASCENDING)], unique=True)
    db.configurations.create_index([("category", ASCENDING), ("isPublic", ASCENDING)])
    db.configurations.create_index([("key", ASCENDING), ("category", ASCENDING)])
    db.configuration_history.create_index([("key", ASCENDING), ("changedAt", DESCENDING)])
    db.users.create_index([("email", ASCENDING)], unique=True)


def connect_mongo(uri=None, db_name=None):
    global mongo_client, mongo_db
    uri = uri or settings.MONGO_URI
    try:
        mongo_client = MongoClient(uri, serverSelectionTimeoutMS=5000)
        mongo_client.admin.command('ping')
    except PyMongoError as e:
        logger.error("Could not connect to MongoDB at %s: %s", uri, e)
        raise ConnectionError("MongoDB is not available. Check MONGO_URI.") from e
    mongo_db = mongo_client[db_name or settings.MONGO_DB]
    ensure_indexes(mongo_db)
    logger.info("MongoDB connected (%s)", mongo_db.name)
    return mongo_db


def use_mongo(db):
    """Install an already built database handle (mongomock in tests)."""
    global mongo_db
    mongo_db = db
    ensure_indexes(mongo_db)
    return mongo_db


def connect_redis(host=None, port=None, db=None):
    global redis_client
    try:
        client = redis.Redis(host=host or settings.REDIS_HOST, port=port or settings.REDIS_PORT,
                             db=settings.REDIS_DB if db is None else db,
                             decode_responses=True, socket_connect_timeout=5)
        client.ping()
        redis_client = client
        logger.info("Redis connected")
    except redis.RedisError as e:
        # The public projection is then served straight from MongoDB
        logger.warning("Redis not available, public cache disabled: %s", e)
        redis_client = None
    return redis_client


def use_redis(client):
    global redis_client
    redis_client = client
    return redis_client


def get_mongo():
    if mongo_db is None:
        raise ConnectionError("MongoDB is not available. Check the connection.")
    return mongo_db


def get_redis():
    return redis_client

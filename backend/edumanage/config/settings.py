"""
Runtime settings for EduManage, read from environment variables.
Every value has a development default so `python run.py` works out of the box.
"""
import os

# --- MONGODB ---
MONGO_URI = os.getenv('MONGO_URI', 'mongodb://localhost:27017/')
MONGO_DB = os.getenv('MONGO_DB', 'edumanage_db')

# --- REDIS (cache of the public projection) ---
REDIS_ENABLED = os.getenv('REDIS_ENABLED', 'true').lower() == 'true'
REDIS_HOST = os.getenv('REDIS_HOST', 'localhost')
REDIS_PORT = int(os.getenv('REDIS_PORT', 6379))
REDIS_DB = int(os.getenv('REDIS_DB', 0))
PUBLIC_CACHE_TTL = int(os.getenv('PUBLIC_CACHE_TTL', 300))

# --- AUTH ---
JWT_SECRET = os.getenv('JWT_SECRET', 'edumanage-dev-secret')
JWT_EXPIRES_IN = int(os.getenv('JWT_EXPIRES_IN', 7 * 24 * 3600))

# --- ADMIN BOOTSTRAP (data_seed.py) ---
ADMIN_EMAIL = os.getenv('ADMIN_EMAIL', 'admin@edumanage.com')
ADMIN_PASSWORD = os.getenv('ADMIN_PASSWORD', 'admin123')

# --- HTTP ---
CLIENT_URL = os.getenv('CLIENT_URL', 'http://localhost:3000')
PORT = int(os.getenv('PORT', 5000))
DEBUG = os.getenv('FLASK_DEBUG', 'false').lower() == 'true'


def as_dict():
    """Settings in the shape Flask's app.config expects."""
    return {
        "MONGO_URI": MONGO_URI,
        "MONGO_DB": MONGO_DB,
        "REDIS_ENABLED": REDIS_ENABLED,
        "REDIS_HOST": REDIS_HOST,
        "REDIS_PORT": REDIS_PORT,
        "REDIS_DB": REDIS_DB,
        "PUBLIC_CACHE_TTL": PUBLIC_CACHE_TTL,
        "JWT_SECRET": JWT_SECRET,
        "JWT_EXPIRES_IN": JWT_EXPIRES_IN,
        "CLIENT_URL": CLIENT_URL,
    }

"""
Seeds the default configuration entries (and the admin account they are
attributed to). Idempotent: existing keys and an existing admin are left alone.

    python data_seed.py              # admin + configurations
    python data_seed.py --clean      # drop configurations/history first
"""
import argparse
from datetime import datetime, timezone
from edumanage.config import settings
from edumanage.config.database import connect_mongo, connect_redis, get_mongo
from edumanage.config.defaults import default_configurations
from edumanage.models.configuration import ConfigurationEntry
from edumanage.services.auth_service import AuthService
from edumanage.services.public_cache import PublicCache
from edumanage.app_logger import get_logger

logger = get_logger("seed")


def ensure_admin(email=None, password=None):
    """Returns the first admin, creating one from ADMIN_EMAIL/ADMIN_PASSWORD if none exists."""
    db = get_mongo()
    admin = db.users.find_one({"role": "admin"})
    if admin:
        return admin
    admin = AuthService.create_user({
        "firstName": "System",
        "lastName": "Administrator",
        "email": email or settings.ADMIN_EMAIL,
        "password": password or settings.ADMIN_PASSWORD,
    }, 'admin')
    logger.info("Admin user created: %s", admin['email'])
    return admin


def seed_configurations(admin_id):
    db = get_mongo()
    created = 0
    for data in default_configurations():
        if db.configurations.find_one({"key": data['key']}):
            logger.info("Configuration '%s' already exists, skipping...", data['key'])
            continue

        now = datetime.now(timezone.utc)
        entry = ConfigurationEntry(
            key=data['key'],
            value=data['value'],
            type=data['type'],
            category=data['category'],
            description=data['description'],
            is_public=data.get('isPublic', False),
            is_editable=data.get('isEditable', True),
            validation=data.get('validation'),
            default_value=data.get('defaultValue'),
            last_modified_by=admin_id,
            tags=data.get('tags'),
            version=1,
            created_at=now,
            updated_at=now,
        )
        entry.check_value()
        db.configurations.insert_one(entry.to_document())
        created += 1
        logger.info("Created configuration: %s", data['key'])
    return created


def clean_configurations():
    db = get_mongo()
    db.configurations.delete_many({})
    db.configuration_history.delete_many({})
    logger.info("Configurations and history removed")


def run_seed(clean=False):
    if clean:
        clean_configurations()
    admin = ensure_admin()
    created = seed_configurations(admin['_id'])
    if created or clean:
        PublicCache.invalidate()
    logger.info("Configuration seeding completed: %d created, %d defaults known",
                created, len(default_configurations()))
    return created


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed EduManage default configurations")
    parser.add_argument("--clean", action="store_true", help="remove existing configurations first")
    args = parser.parse_args()
    connect_mongo()
    connect_redis()
    run_seed(clean=args.clean)

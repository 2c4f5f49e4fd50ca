import csv
import io
import json
import math
import re
from datetime import datetime, timezone
from bson import ObjectId
from edumanage.config.database import get_mongo
from edumanage.errors import NotFoundError, ValidationError, NotEditableError, ConflictError
from edumanage.models.configuration import (
    ConfigurationEntry, CONFIG_TYPES, CATEGORIES, display_name, to_bool, to_number,
)
from edumanage.services.history_service import HistoryService
from edumanage.services.public_cache import PublicCache
from edumanage.app_logger import get_logger

logger = get_logger("configuration_service")

EXPORT_FIELDS = ['key', 'value', 'type', 'category', 'description',
                 'isPublic', 'isEditable', 'lastModifiedBy', 'updatedAt']


class ConfigurationService:

    # --- helpers ---

    @staticmethod
    def _find(key):
        db = get_mongo()
        doc = db.configurations.find_one({"key": key})
        if not doc:
            raise NotFoundError("Configuration not found")
        return ConfigurationEntry.from_document(doc)

    @staticmethod
    def _persist(entry, validate=True):
        """
        Writes the whole entry back. The value is checked again right before the
        write, whatever path assigned it.
        """
        if validate:
            entry.check_value()
        db = get_mongo()
        db.configurations.replace_one({"_id": entry.id}, entry.to_document())
        PublicCache.invalidate()
        return entry

    @staticmethod
    def _modifiers(entries):
        """lastModifiedBy populated with the admin's name and email."""
        ids = {e.last_modified_by for e in entries if isinstance(e.last_modified_by, ObjectId)}
        if not ids:
            return {}
        db = get_mongo()
        users = db.users.find({"_id": {"$in": list(ids)}},
                              {"firstName": 1, "lastName": 1, "email": 1})
        return {u['_id']: {"_id": str(u['_id']),
                           "firstName": u.get('firstName', ''),
                           "lastName": u.get('lastName', ''),
                           "email": u.get('email', '')} for u in users}

    @staticmethod
    def _to_json_list(entries):
        modifiers = ConfigurationService._modifiers(entries)
        return [e.to_json(modifiers.get(e.last_modified_by)) for e in entries]

    @staticmethod
    def _tags(raw):
        """A single tag string is taken as a one-element list; None when not strings."""
        if isinstance(raw, str):
            return [raw]
        if isinstance(raw, list) and all(isinstance(t, str) for t in raw):
            return list(raw)
        return None

    @staticmethod
    def _field_errors(data):
        """Type checks shared by create and update for the optional fields."""
        errors = []
        for field in ('isPublic', 'isEditable'):
            if field in data and to_bool(data[field]) is None:
                errors.append(f"{field} must be a boolean")
        if data.get('tags') is not None and ConfigurationService._tags(data['tags']) is None:
            errors.append("Tags must be an array of strings")
        return errors

    @staticmethod
    def _rule_errors(validation):
        if validation is None:
            return []
        if not isinstance(validation, dict):
            return ["Validation must be an object"]
        errors = []
        for bound in ('min', 'max'):
            raw = validation.get(bound)
            if raw is not None and (isinstance(raw, bool) or to_number(raw) is None):
                errors.append(f"Validation {bound} must be a number")
        pattern = validation.get('pattern')
        if pattern is not None and isinstance(pattern, (bool, dict, list)):
            errors.append("Validation pattern must be a string")
        options = validation.get('options')
        if options is not None and not isinstance(options, (list, str)):
            errors.append("Validation options must be an array of strings")
        if 'required' in validation and to_bool(validation['required']) is None:
            errors.append("Validation required must be a boolean")
        return errors

    @staticmethod
    def _version(raw):
        if isinstance(raw, bool):
            return None
        try:
            return int(raw)
        except (TypeError, ValueError):
            return None

    @staticmethod
    def _as_object_id(user_id):
        if isinstance(user_id, ObjectId) or user_id is None:
            return user_id
        return ObjectId(user_id) if ObjectId.is_valid(user_id) else user_id

    # --- read ---

    @staticmethod
    def list_configurations(category=None, is_public=None, search=None, page=1, limit=20):
        if page < 1 or limit < 1:
            raise ValidationError(["page and limit must be positive integers"], "Validation errors")
        db = get_mongo()
        query = {}
        if category:
            query["category"] = category
        if is_public is not None:
            query["isPublic"] = is_public
        if search:
            pattern = re.escape(search)
            query["$or"] = [
                {"key":         {"$regex": pattern, "$options": "i"}},
                {"description": {"$regex": pattern, "$options": "i"}},
            ]

        cursor = (db.configurations.find(query)
                  .sort([("category", 1), ("key", 1)])
                  .skip((page - 1) * limit)
                  .limit(limit))
        entries = [ConfigurationEntry.from_document(d) for d in cursor]
        total = db.configurations.count_documents(query)

        return {
            "configurations": ConfigurationService._to_json_list(entries),
            "pagination": {
                "current": page,
                "pages": math.ceil(total / limit),
                "total": total,
                "limit": limit,
            },
        }

    @staticmethod
    def get_categories():
        db = get_mongo()
        stats = []
        for category in sorted(db.configurations.distinct("category")):
            stats.append({
                "name": category,
                "displayName": display_name(category),
                "count": db.configurations.count_documents({"category": category}),
                "publicCount": db.configurations.count_documents({"category": category, "isPublic": True}),
            })
        return stats

    @staticmethod
    def get_public(category=None):
        """
        Flat key -> formattedValue map of the public entries only.
        It is the only read non-admin clients get, so it is cached in redis.
        """
        cached = PublicCache.get(category)
        if cached is not None:
            return cached

        db = get_mongo()
        query = {"isPublic": True}
        if category:
            query["category"] = category
        projection = {}
        for doc in db.configurations.find(query).sort([("category", 1), ("key", 1)]):
            entry = ConfigurationEntry.from_document(doc)
            projection[entry.key] = entry.formatted_value

        PublicCache.set(projection, category)
        return projection

    @staticmethod
    def get_by_key(key):
        entry = ConfigurationService._find(key)
        return entry.to_json(ConfigurationService._modifiers([entry]).get(entry.last_modified_by))

    @staticmethod
    def get_by_category(category, include_private=False):
        db = get_mongo()
        query = {"category": category}
        if not include_private:
            query["isPublic"] = True
        return [ConfigurationEntry.from_document(d)
                for d in db.configurations.find(query).sort("key", 1)]

    @staticmethod
    def get_value(key, default=None):
        db = get_mongo()
        doc = db.configurations.find_one({"key": key})
        return ConfigurationEntry.from_document(doc).formatted_value if doc else default

    # --- write ---

    @staticmethod
    def validate_create_payload(data):
        errors = []
        if data is None:
            return ["Request body must be JSON"]
        if not str(data.get('key') or '').strip():
            errors.append("Key is required")
        if data.get('value') is None or data.get('value') == '':
            errors.append("Value is required")
        if data.get('type') not in CONFIG_TYPES:
            errors.append("Invalid type")
        if data.get('category') not in CATEGORIES:
            errors.append("Invalid category")
        if not str(data.get('description') or '').strip():
            errors.append("Description is required")
        errors += ConfigurationService._field_errors(data)
        errors += ConfigurationService._rule_errors(data.get('validation'))
        return errors

    @staticmethod
    def create(data, modifier_id):
        errors = ConfigurationService.validate_create_payload(data)
        if errors:
            raise ValidationError(errors, "Validation errors")

        db = get_mongo()
        key = str(data['key']).strip()
        if db.configurations.find_one({"key": key}):
            raise ConflictError("Configuration key already exists")

        now = datetime.now(timezone.utc)
        entry = ConfigurationEntry(
            key=key,
            value=data['value'],
            type=data['type'],
            category=data['category'],
            description=str(data['description']).strip(),
            is_public=to_bool(data.get('isPublic', False)),
            is_editable=to_bool(data.get('isEditable', True)),
            validation=data.get('validation') or {},
            default_value=data.get('defaultValue'),
            last_modified_by=ConfigurationService._as_object_id(modifier_id),
            tags=ConfigurationService._tags(data.get('tags') or []),
            version=1,
            created_at=now,
            updated_at=now,
        )
        entry.check_value()

        # A concurrent insert of the same key ends in DuplicateKeyError (500)
        res = db.configurations.insert_one(entry.to_document())
        entry.id = res.inserted_id
        PublicCache.invalidate()
        HistoryService.record(key, "create", None, entry.value, entry.version, entry.last_modified_by)
        logger.info("Configuration '%s' created", key)
        return entry.to_json()

    @staticmethod
    def validate_update_payload(data):
        if data is None:
            return ["Request body must be JSON"]
        errors = []
        if 'value' in data and (data['value'] is None or data['value'] == ''):
            errors.append("Value cannot be empty")
        if 'description' in data and not str(data['description'] or '').strip():
            errors.append("Description cannot be empty")
        errors += ConfigurationService._field_errors(data)
        expected = data.get('expectedVersion')
        if expected is not None and ConfigurationService._version(expected) is None:
            errors.append("expectedVersion must be an integer")
        return errors

    @staticmethod
    def update(key, data, modifier_id):
        """
        Partial update of value / description / isPublic / tags.
        `expectedVersion` is optional; when present it must match the stored version.
        """
        errors = ConfigurationService.validate_update_payload(data)
        if errors:
            raise ValidationError(errors, "Validation errors")

        entry = ConfigurationService._find(key)
        if not entry.is_editable:
            raise NotEditableError("This configuration is not editable")

        expected = data.get('expectedVersion')
        if expected is not None and ConfigurationService._version(expected) != entry.version:
            raise ConflictError(
                f"Version mismatch: expected {expected}, current is {entry.version}")

        previous = entry.value
        if 'value' in data:
            result = entry.validate_value(data['value'])
            if not result.is_valid:
                raise ValidationError(result.errors)
            entry.value = data['value']
        if 'description' in data:
            entry.description = str(data['description']).strip()
        if 'isPublic' in data:
            entry.is_public = to_bool(data['isPublic'])
        if 'tags' in data:
            entry.tags = ConfigurationService._tags(data['tags'] or [])

        entry.touch(ConfigurationService._as_object_id(modifier_id))
        ConfigurationService._persist(entry)
        HistoryService.record(key, "update", previous, entry.value, entry.version, entry.last_modified_by)
        return entry.to_json()

    @staticmethod
    def set_value(key, value, modifier_id, description=None, tags=None):
        entry = ConfigurationService._find(key)
        previous = entry.value
        entry.value = value  # raises ValidationError with the aggregated message

        if description:
            entry.description = description
        if tags:
            entry.tags = list(tags)
        entry.touch(ConfigurationService._as_object_id(modifier_id))
        ConfigurationService._persist(entry)
        HistoryService.record(key, "set_value", previous, value, entry.version, entry.last_modified_by)
        return entry

    @staticmethod
    def delete(key, modifier_id):
        entry = ConfigurationService._find(key)
        if not entry.is_editable:
            raise NotEditableError("This configuration cannot be deleted")

        db = get_mongo()
        db.configurations.delete_one({"_id": entry.id})
        PublicCache.invalidate()
        HistoryService.record(key, "delete", entry.value, None, entry.version,
                              ConfigurationService._as_object_id(modifier_id))
        logger.info("Configuration '%s' deleted", key)
        return True

    @staticmethod
    def bulk_update(items, modifier_id):
        """
        Each item is applied on its own, in order: a failed item is reported and
        skipped, it never stops or rolls back the others.
        """
        if not isinstance(items, list):
            raise ValidationError(["Configurations must be an array"], "Validation errors")
        errors = []
        for i, item in enumerate(items):
            if not isinstance(item, dict) or not str(item.get('key') or '').strip():
                errors.append(f"Key is required for each configuration (item {i})")
            elif item.get('value') is None or item.get('value') == '':
                errors.append(f"Value is required for each configuration (item {i})")
        if errors:
            raise ValidationError(errors, "Validation errors")

        modifier = ConfigurationService._as_object_id(modifier_id)
        results = []
        failures = []
        for item in items:
            key = item['key']
            try:
                entry = ConfigurationService._find(key)
                if not entry.is_editable:
                    failures.append({"key": key, "error": "Configuration is not editable"})
                    continue

                result = entry.validate_value(item['value'])
                if not result.is_valid:
                    failures.append({
                        "key": key,
                        "error": f"Validation failed: {', '.join(result.errors)}",
                        "errors": result.errors,
                    })
                    continue

                previous = entry.value
                entry.value = item['value']
                entry.touch(modifier)
                ConfigurationService._persist(entry)
                HistoryService.record(key, "bulk_update", previous, entry.value, entry.version, modifier)
                results.append({"key": key, "success": True, "version": entry.version})
            except NotFoundError:
                failures.append({"key": key, "error": "Configuration not found"})
            except Exception as e:
                logger.exception("Bulk update failed for '%s'", key)
                failures.append({"key": key, "error": str(e)})

        return {
            "message": f"Bulk update completed. {len(results)} successful, {len(failures)} failed.",
            "successful": len(results),
            "failed": len(failures),
            "results": results,
            "errors": failures,
        }

    @staticmethod
    def reset(key, modifier_id):
        """
        Copies defaultValue into value. The default is trusted: it is not checked
        against the current validation rules.
        """
        entry = ConfigurationService._find(key)
        if entry.default_value is None:
            raise ValidationError([], "No default value available for this configuration")

        previous = entry.value
        entry.assign_trusted(entry.default_value)
        entry.touch(ConfigurationService._as_object_id(modifier_id))
        ConfigurationService._persist(entry, validate=False)
        HistoryService.record(key, "reset", previous, entry.value, entry.version, entry.last_modified_by)
        return entry.to_json()

    # --- export ---

    @staticmethod
    def export(category=None):
        db = get_mongo()
        query = {"category": category} if category else {}
        entries = [ConfigurationEntry.from_document(d)
                   for d in db.configurations.find(query).sort([("category", 1), ("key", 1)])]
        configurations = ConfigurationService._to_json_list(entries)
        return {
            "exportedAt": datetime.now(timezone.utc).isoformat(),
            "count": len(configurations),
            "configurations": configurations,
        }

    @staticmethod
    def export_rows(category=None):
        """One flat row per entry: scalar value, modifier full name, timestamps."""
        rows = []
        for c in ConfigurationService.export(category)["configurations"]:
            value = c['value']
            modifier = c.get('lastModifiedBy')
            rows.append({
                "key": c['key'],
                "value": json.dumps(value) if isinstance(value, (dict, list)) else value,
                "type": c['type'],
                "category": c['category'],
                "description": c['description'],
                "isPublic": c['isPublic'],
                "isEditable": c['isEditable'],
                "lastModifiedBy": (f"{modifier['firstName']} {modifier['lastName']}"
                                   if isinstance(modifier, dict) else ''),
                "updatedAt": c.get('updatedAt'),
            })
        return rows

    @staticmethod
    def export_csv(category=None):
        buffer = io.StringIO()
        writer = csv.DictWriter(buffer, fieldnames=EXPORT_FIELDS)
        writer.writeheader()
        writer.writerows(ConfigurationService.export_rows(category))
        return buffer.getvalue()

    @staticmethod
    def get_history(key):
        ConfigurationService._find(key)
        return HistoryService.get_history(key)

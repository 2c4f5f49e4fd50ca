from datetime import datetime, timezone
from edumanage.config.database import get_mongo


class HistoryService:
    @staticmethod
    def record(key, action, previous_value, new_value, version, modified_by):
        """
        Appends an immutable snapshot to configuration_history.
        Used by every mutation (create, update, bulk item, reset, delete) so an
        admin can see which value was live at any point.
        """
        db = get_mongo()
        db.configuration_history.insert_one({
            "key":           key,
            "action":        action,
            "previousValue": previous_value,
            "newValue":      new_value,
            "version":       version,
            "modifiedBy":    modified_by,
            "changedAt":     datetime.now(timezone.utc),
        })

    @staticmethod
    def get_history(key, limit=50):
        db = get_mongo()
        rows = list(db.configuration_history.find({"key": key}).sort("changedAt", -1).limit(limit))
        for r in rows:
            r['_id'] = str(r['_id'])
            r['modifiedBy'] = str(r['modifiedBy']) if r.get('modifiedBy') is not None else None
            changed = r.get('changedAt')
            r['changedAt'] = changed.isoformat() if hasattr(changed, 'isoformat') else changed
        return rows

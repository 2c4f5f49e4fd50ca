"""
Read-only client for the public configuration projection.

`ConfigurationClient.refresh()` fetches GET /api/configurations/public once and
returns an immutable `ConfigurationSnapshot`. Callers keep a reference to the
snapshot and call refresh() again when they know the settings changed; there is
no polling. When the backend cannot be reached the snapshot is built from the
seed defaults, so every getter always has a usable value.
"""
import math
from datetime import datetime, timezone
from types import MappingProxyType

import requests

from edumanage.config.defaults import public_defaults
from edumanage.app_logger import get_logger

logger = get_logger("client")

PUBLIC_PATH = "/api/configurations/public"

_DEFAULTS = public_defaults()


def _round_half_up(x):
    return int(math.floor(x + 0.5))


class ConfigurationSnapshot:

    def __init__(self, values, error=None, fetched_at=None, is_fallback=False, loading=False):
        self._values = MappingProxyType(dict(values))
        self.error = error
        self.fetched_at = fetched_at
        self.is_fallback = is_fallback
        self.loading = loading

    @classmethod
    def loading_state(cls):
        return cls({}, loading=True)

    @classmethod
    def fallback(cls, error):
        return cls(public_defaults(), error=error, fetched_at=datetime.now(timezone.utc), is_fallback=True)

    @property
    def values(self):
        return self._values

    def get_config(self, key, fallback=None):
        value = self._values.get(key)
        return fallback if value is None else value

    def get_configs(self, keys):
        return {key: self.get_config(key) for key in keys}

    def _get(self, key):
        return self.get_config(key, _DEFAULTS.get(key))

    # === grouped getters ===

    def is_maintenance_mode(self):
        return bool(self._get('maintenance_mode'))

    def is_registration_open(self, role):
        if role == 'student':
            return bool(self._get('student_registration_open'))
        if role == 'instructor':
            return bool(self._get('instructor_registration_open'))
        return False

    def get_site_config(self):
        return {
            "name": self._get('site_name'),
            "description": self._get('site_description'),
        }

    def get_file_upload_config(self):
        max_size = self._get('max_file_size')
        return {
            "max_size": max_size,
            "allowed_types": list(self._get('allowed_file_types')),
            "max_size_mb": _round_half_up(max_size / 1024 / 1024),
        }

    def get_theme_config(self):
        return {
            "primary_color": self._get('theme_primary_color'),
            "secondary_color": self._get('theme_secondary_color'),
            "dashboard_widgets": list(self._get('dashboard_widgets')),
        }

    def get_course_config(self):
        return {
            "max_capacity": self._get('max_course_capacity'),
            "approval_required": self._get('course_approval_required'),
            "instructor_verification_required": self._get('instructor_verification_required'),
        }

    def get_assignment_config(self):
        return {
            "late_penalty": self._get('assignment_late_penalty'),
            "auto_grade": self._get('assignment_auto_grade'),
        }

    def get_attendance_config(self):
        return {"required_percentage": self._get('attendance_required_percentage')}

    def get_notification_config(self):
        return {
            "email_enabled": self._get('email_notifications_enabled'),
            "push_enabled": self._get('push_notifications_enabled'),
        }

    def get_security_config(self):
        return {"password_min_length": self._get('password_min_length')}


class ConfigurationClient:

    def __init__(self, base_url, session=None, timeout=10, autoload=True):
        self.base_url = base_url.rstrip('/')
        self.session = session or requests.Session()
        self.timeout = timeout
        self.loading = False
        self.snapshot = ConfigurationSnapshot.loading_state()
        if autoload:
            self.refresh()

    def refresh(self):
        """Fetch the public projection; a failure yields the fallback snapshot, never raises."""
        self.loading = True
        try:
            response = self.session.get(self.base_url + PUBLIC_PATH, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
            if not isinstance(data, dict):
                raise ValueError("public configuration payload is not an object")
            snapshot = ConfigurationSnapshot(data, fetched_at=datetime.now(timezone.utc))
        except (requests.RequestException, ValueError) as e:
            logger.warning("Error fetching configurations, using defaults: %s", e)
            snapshot = ConfigurationSnapshot.fallback(str(e))
        except Exception as e:
            logger.exception("Unexpected error fetching configurations, using defaults")
            snapshot = ConfigurationSnapshot.fallback(str(e))
        finally:
            self.loading = False
        self.snapshot = snapshot
        return snapshot

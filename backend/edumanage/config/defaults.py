"""
Default configuration entries written by data_seed.py.
The client cache builds its offline snapshot from the public ones, so both
sides always agree on the known key set.
"""
import copy

FILE_TYPES = ['pdf', 'doc', 'docx', 'ppt', 'pptx', 'txt', 'jpg', 'jpeg', 'png', 'gif', 'mp4', 'avi', 'mov']
DASHBOARD_WIDGETS = ['recent_activity', 'course_stats', 'assignment_deadlines', 'attendance_summary']

DEFAULT_CONFIGURATIONS = [
    # --- SYSTEM ---
    {
        "key": "site_name",
        "value": "EduManage",
        "type": "string",
        "category": "system",
        "description": "Name of the educational management system",
        "isPublic": True,
        "validation": {"min": 1, "max": 100},
        "defaultValue": "EduManage",
        "tags": ["branding", "ui"],
    },
    {
        "key": "site_description",
        "value": "Comprehensive Course Management System",
        "type": "string",
        "category": "system",
        "description": "Description of the system",
        "isPublic": True,
        "validation": {"min": 10, "max": 500},
        "defaultValue": "Comprehensive Course Management System",
        "tags": ["branding", "ui"],
    },
    {
        "key": "maintenance_mode",
        "value": False,
        "type": "boolean",
        "category": "system",
        "description": "Enable maintenance mode to restrict access",
        "isPublic": True,
        "defaultValue": False,
        "tags": ["maintenance", "system"],
    },
    # --- FILE UPLOAD ---
    {
        "key": "max_file_size",
        "value": 10485760,
        "type": "number",
        "category": "file_upload",
        "description": "Maximum file upload size in bytes (10MB)",
        "isPublic": True,
        "validation": {"min": 1048576, "max": 104857600},  # 1MB to 100MB
        "defaultValue": 10485760,
        "tags": ["upload", "files"],
    },
    {
        "key": "allowed_file_types",
        "value": list(FILE_TYPES),
        "type": "array",
        "category": "file_upload",
        "description": "Allowed file types for uploads",
        "isPublic": True,
        "validation": {"options": FILE_TYPES + ['zip', 'rar']},
        "defaultValue": list(FILE_TYPES),
        "tags": ["upload", "files", "security"],
    },
    # --- COURSE ---
    {
        "key": "max_course_capacity",
        "value": 50,
        "type": "number",
        "category": "course",
        "description": "Maximum number of students per course",
        "isPublic": True,
        "validation": {"min": 1, "max": 1000},
        "defaultValue": 50,
        "tags": ["course", "enrollment"],
    },
    {
        "key": "course_approval_required",
        "value": True,
        "type": "boolean",
        "category": "course",
        "description": "Require admin approval for new courses",
        "isPublic": True,
        "defaultValue": True,
        "tags": ["course", "approval"],
    },
    # --- USER ---
    {
        "key": "instructor_verification_required",
        "value": True,
        "type": "boolean",
        "category": "user",
        "description": "Require document verification for instructors",
        "isPublic": True,
        "defaultValue": True,
        "tags": ["user", "verification", "instructor"],
    },
    {
        "key": "student_registration_open",
        "value": True,
        "type": "boolean",
        "category": "user",
        "description": "Allow new student registrations",
        "isPublic": True,
        "defaultValue": True,
        "tags": ["user", "registration", "student"],
    },
    {
        "key": "instructor_registration_open",
        "value": True,
        "type": "boolean",
        "category": "user",
        "description": "Allow new instructor registrations",
        "isPublic": True,
        "defaultValue": True,
        "tags": ["user", "registration", "instructor"],
    },
    # --- ASSIGNMENT ---
    {
        "key": "assignment_late_penalty",
        "value": 10,
        "type": "number",
        "category": "assignment",
        "description": "Late submission penalty percentage",
        "isPublic": True,
        "validation": {"min": 0, "max": 100},
        "defaultValue": 10,
        "tags": ["assignment", "grading"],
    },
    {
        "key": "assignment_auto_grade",
        "value": False,
        "type": "boolean",
        "category": "assignment",
        "description": "Enable automatic grading for assignments",
        "isPublic": True,
        "defaultValue": False,
        "tags": ["assignment", "grading", "automation"],
    },
    # --- ATTENDANCE ---
    {
        "key": "attendance_required_percentage",
        "value": 75,
        "type": "number",
        "category": "attendance",
        "description": "Minimum attendance percentage required",
        "isPublic": True,
        "validation": {"min": 0, "max": 100},
        "defaultValue": 75,
        "tags": ["attendance", "requirements"],
    },
    # --- NOTIFICATION ---
    {
        "key": "email_notifications_enabled",
        "value": True,
        "type": "boolean",
        "category": "notification",
        "description": "Enable email notifications",
        "isPublic": True,
        "defaultValue": True,
        "tags": ["notification", "email"],
    },
    {
        "key": "push_notifications_enabled",
        "value": True,
        "type": "boolean",
        "category": "notification",
        "description": "Enable push notifications",
        "isPublic": True,
        "defaultValue": True,
        "tags": ["notification", "push"],
    },
    # --- SECURITY ---
    {
        "key": "session_timeout",
        "value": 3600,
        "type": "number",
        "category": "security",
        "description": "Session timeout in seconds (1 hour)",
        "isPublic": False,
        "validation": {"min": 300, "max": 86400},  # 5 minutes to 24 hours
        "defaultValue": 3600,
        "tags": ["security", "session"],
    },
    {
        "key": "password_min_length",
        "value": 8,
        "type": "number",
        "category": "security",
        "description": "Minimum password length",
        "isPublic": True,
        "validation": {"min": 6, "max": 32},
        "defaultValue": 8,
        "tags": ["security", "password"],
    },
    {
        "key": "max_login_attempts",
        "value": 5,
        "type": "number",
        "category": "security",
        "description": "Maximum login attempts before lockout",
        "isPublic": False,
        "validation": {"min": 3, "max": 10},
        "defaultValue": 5,
        "tags": ["security", "login"],
    },
    # --- UI ---
    {
        "key": "theme_primary_color",
        "value": "#3B82F6",
        "type": "string",
        "category": "ui",
        "description": "Primary theme color (hex)",
        "isPublic": True,
        "validation": {"pattern": "^#[0-9A-Fa-f]{6}$"},
        "defaultValue": "#3B82F6",
        "tags": ["ui", "theme", "colors"],
    },
    {
        "key": "theme_secondary_color",
        "value": "#10B981",
        "type": "string",
        "category": "ui",
        "description": "Secondary theme color (hex)",
        "isPublic": True,
        "validation": {"pattern": "^#[0-9A-Fa-f]{6}$"},
        "defaultValue": "#10B981",
        "tags": ["ui", "theme", "colors"],
    },
    {
        "key": "dashboard_widgets",
        "value": list(DASHBOARD_WIDGETS),
        "type": "array",
        "category": "ui",
        "description": "Available dashboard widgets",
        "isPublic": True,
        "validation": {
            "options": DASHBOARD_WIDGETS + ['grade_chart', 'announcements']
        },
        "defaultValue": list(DASHBOARD_WIDGETS),
        "tags": ["ui", "dashboard", "widgets"],
    },
    # --- ANALYTICS ---
    {
        "key": "analytics_tracking_enabled",
        "value": True,
        "type": "boolean",
        "category": "analytics",
        "description": "Enable analytics tracking",
        "isPublic": False,
        "defaultValue": True,
        "tags": ["analytics", "tracking"],
    },
    {
        "key": "data_retention_days",
        "value": 365,
        "type": "number",
        "category": "analytics",
        "description": "Data retention period in days",
        "isPublic": False,
        "validation": {"min": 30, "max": 2555},  # 30 days to 7 years
        "defaultValue": 365,
        "tags": ["analytics", "data", "retention"],
    },
]


def default_configurations():
    """Deep copy of the seed list, safe to mutate."""
    return copy.deepcopy(DEFAULT_CONFIGURATIONS)


def public_defaults():
    return {c["key"]: copy.deepcopy(c["defaultValue"]) for c in DEFAULT_CONFIGURATIONS if c.get("isPublic")}

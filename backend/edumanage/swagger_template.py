"""
OpenAPI/Swagger specification for the EduManage API.
Served by Flasgger as interactive documentation at /apidocs
"""
from edumanage.models.configuration import CONFIG_TYPES, CATEGORIES

_KEY = {"in": "path", "name": "key", "required": True, "type": "string"}
_AUTH = [{"Bearer": []}]

SWAGGER_TEMPLATE = {
    "swagger": "2.0",
    "info": {
        "title": "EduManage API",
        "description": "EduManage course administration API: authentication and the dynamic configuration store.",
        "version": "1.0.0",
        "contact": {
            "name": "EduManage"
        }
    },
    "basePath": "/api",
    "schemes": ["http"],
    "consumes": ["application/json"],
    "produces": ["application/json"],
    "securityDefinitions": {
        "Bearer": {"type": "apiKey", "name": "Authorization", "in": "header",
                   "description": "JWT as 'Bearer <token>'"}
    },
    "tags": [
        {"name": "Auth", "description": "Registration, login and current user"},
        {"name": "Configurations", "description": "Typed key/value settings (admin)"},
        {"name": "Public", "description": "Read-only projection for every client"},
    ],
    "paths": {
        # --- AUTH ---
        "/auth/register": {
            "post": {
                "tags": ["Auth"],
                "summary": "Register a student or instructor",
                "parameters": [{
                    "in": "body",
                    "name": "body",
                    "required": True,
                    "schema": {
                        "type": "object",
                        "required": ["firstName", "lastName", "email", "password"],
                        "properties": {
                            "firstName": {"type": "string"},
                            "lastName": {"type": "string"},
                            "email": {"type": "string", "format": "email"},
                            "password": {"type": "string"},
                            "role": {"type": "string", "enum": ["student", "instructor"]}
                        }
                    }
                }],
                "responses": {"201": {"description": "User created, token returned"},
                              "400": {"description": "Validation errors"},
                              "403": {"description": "Registration closed for the role"},
                              "409": {"description": "Email already registered"}}
            }
        },
        "/auth/login": {
            "post": {
                "tags": ["Auth"],
                "summary": "Login and obtain a bearer token",
                "parameters": [{"in": "body", "name": "body", "required": True, "schema": {
                    "type": "object",
                    "properties": {"email": {"type": "string"}, "password": {"type": "string"}}
                }}],
                "responses": {"200": {"description": "Token"}, "401": {"description": "Invalid credentials"}}
            }
        },
        "/auth/me": {
            "get": {"tags": ["Auth"], "summary": "Current user", "security": _AUTH,
                    "responses": {"200": {"description": "User"}, "401": {"description": "No or invalid token"}}}
        },
        # --- CONFIGURATIONS ---
        "/configurations": {
            "get": {
                "tags": ["Configurations"],
                "summary": "Paginated, filterable list sorted by category and key",
                "security": _AUTH,
                "parameters": [
                    {"in": "query", "name": "category", "type": "string", "enum": list(CATEGORIES)},
                    {"in": "query", "name": "isPublic", "type": "string", "enum": ["true", "false"]},
                    {"in": "query", "name": "search", "type": "string"},
                    {"in": "query", "name": "page", "type": "integer", "default": 1},
                    {"in": "query", "name": "limit", "type": "integer", "default": 20}
                ],
                "responses": {"200": {"description": "configurations + pagination"}}
            },
            "post": {
                "tags": ["Configurations"],
                "summary": "Create a configuration (version starts at 1)",
                "security": _AUTH,
                "parameters": [{
                    "in": "body",
                    "name": "body",
                    "required": True,
                    "schema": {
                        "type": "object",
                        "required": ["key", "value", "type", "category", "description"],
                        "properties": {
                            "key": {"type": "string", "example": "site_name"},
                            "value": {},
                            "type": {"type": "string", "enum": list(CONFIG_TYPES)},
                            "category": {"type": "string", "enum": list(CATEGORIES)},
                            "description": {"type": "string"},
                            "isPublic": {"type": "boolean", "default": False},
                            "isEditable": {"type": "boolean", "default": True},
                            "validation": {"type": "object", "properties": {
                                "min": {"type": "number"}, "max": {"type": "number"},
                                "pattern": {"type": "string"},
                                "options": {"type": "array", "items": {"type": "string"}},
                                "required": {"type": "boolean"}
                            }},
                            "defaultValue": {},
                            "tags": {"type": "array", "items": {"type": "string"}}
                        }
                    }
                }],
                "responses": {"201": {"description": "Created"}, "400": {"description": "Validation errors"},
                              "409": {"description": "Key already exists"}}
            }
        },
        "/configurations/categories": {
            "get": {"tags": ["Configurations"], "summary": "Categories with total and public counts",
                    "security": _AUTH, "responses": {"200": {"description": "Category rollup"}}}
        },
        "/configurations/public": {
            "get": {
                "tags": ["Public"],
                "summary": "Flat key -> value map of public settings",
                "parameters": [{"in": "query", "name": "category", "type": "string"}],
                "responses": {"200": {"description": "Public settings"}}
            }
        },
        "/configurations/export": {
            "get": {
                "tags": ["Configurations"],
                "summary": "Export as JSON envelope, CSV file or flat rows",
                "security": _AUTH,
                "produces": ["application/json", "text/csv"],
                "parameters": [
                    {"in": "query", "name": "category", "type": "string"},
                    {"in": "query", "name": "format", "type": "string", "enum": ["json", "csv", "rows"], "default": "json"}
                ],
                "responses": {"200": {"description": "Export"}}
            }
        },
        "/configurations/bulk-update": {
            "post": {
                "tags": ["Configurations"],
                "summary": "Batch value update with per-key results",
                "security": _AUTH,
                "parameters": [{"in": "body", "name": "body", "required": True, "schema": {
                    "type": "object",
                    "properties": {"configurations": {"type": "array", "items": {
                        "type": "object", "properties": {"key": {"type": "string"}, "value": {}}
                    }}}
                }}],
                "responses": {"200": {"description": "results / errors per key"}}
            }
        },
        "/configurations/reset/{key}": {
            "post": {"tags": ["Configurations"], "summary": "Restore defaultValue", "security": _AUTH,
                     "parameters": [_KEY],
                     "responses": {"200": {"description": "Reset"}, "400": {"description": "No default value"},
                                   "404": {"description": "Not found"}}}
        },
        "/configurations/{key}": {
            "get": {"tags": ["Configurations"], "summary": "Single configuration", "security": _AUTH,
                    "parameters": [_KEY],
                    "responses": {"200": {"description": "Configuration"}, "404": {"description": "Not found"}}},
            "put": {
                "tags": ["Configurations"],
                "summary": "Update value / description / isPublic / tags",
                "security": _AUTH,
                "parameters": [
                    _KEY,
                    {"in": "body", "name": "body", "schema": {"type": "object", "properties": {
                        "value": {}, "description": {"type": "string"}, "isPublic": {"type": "boolean"},
                        "tags": {"type": "array", "items": {"type": "string"}},
                        "expectedVersion": {"type": "integer"}
                    }}}
                ],
                "responses": {"200": {"description": "Updated"}, "400": {"description": "Validation failed or not editable"},
                              "404": {"description": "Not found"}, "409": {"description": "Version mismatch"}}
            },
            "delete": {"tags": ["Configurations"], "summary": "Delete (editable entries only)", "security": _AUTH,
                       "parameters": [_KEY],
                       "responses": {"200": {"description": "Deleted"}, "400": {"description": "Not editable"},
                                     "404": {"description": "Not found"}}}
        },
        "/configurations/{key}/history": {
            "get": {"tags": ["Configurations"], "summary": "Change history, newest first", "security": _AUTH,
                    "parameters": [_KEY], "responses": {"200": {"description": "History"}}}
        }
    }
}

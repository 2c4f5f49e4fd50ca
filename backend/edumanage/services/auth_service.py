from datetime import datetime, timedelta, timezone
import jwt
from bson import ObjectId
from flask import current_app
from pymongo.errors import DuplicateKeyError
from werkzeug.security import generate_password_hash, check_password_hash
from edumanage.config.database import get_mongo
from edumanage.errors import AuthenticationError, AuthorizationError, ConflictError, ValidationError
from edumanage.services.configuration_service import ConfigurationService

ROLES = ('student', 'instructor', 'admin')
SELF_REGISTER_ROLES = ('student', 'instructor')


def serialize_user(user):
    user = dict(user)
    user.pop('password', None)
    user['_id'] = str(user['_id'])
    created = user.get('createdAt')
    if hasattr(created, 'isoformat'):
        user['createdAt'] = created.isoformat()
    return user


class AuthService:

    @staticmethod
    def generate_token(user_id):
        expires = datetime.now(timezone.utc) + timedelta(seconds=current_app.config["JWT_EXPIRES_IN"])
        return jwt.encode({"userId": str(user_id), "exp": expires},
                          current_app.config["JWT_SECRET"], algorithm="HS256")

    @staticmethod
    def user_from_token(token):
        """Resolves a bearer token to the (active) user document."""
        try:
            payload = jwt.decode(token, current_app.config["JWT_SECRET"], algorithms=["HS256"])
        except jwt.ExpiredSignatureError:
            raise AuthenticationError("Token has expired")
        except jwt.InvalidTokenError:
            raise AuthenticationError("Token is not valid")

        user_id = payload.get("userId")
        if not user_id or not ObjectId.is_valid(user_id):
            raise AuthenticationError("Token is not valid")
        user = get_mongo().users.find_one({"_id": ObjectId(user_id)})
        if not user:
            raise AuthenticationError("Token is not valid")
        if not user.get('isActive', True):
            raise AuthenticationError("Account is deactivated")
        return user

    @staticmethod
    def create_user(data, role):
        db = get_mongo()
        email = str(data['email']).strip().lower()
        if db.users.find_one({"email": email}):
            raise ConflictError("User already exists with this email")
        doc = {
            "firstName": str(data['firstName']).strip(),
            "lastName":  str(data['lastName']).strip(),
            "email":     email,
            "password":  generate_password_hash(data['password']),
            "role":      role,
            "isActive":  True,
            "isApproved": role != 'instructor',
            "createdAt": datetime.now(timezone.utc),
        }
        try:
            res = db.users.insert_one(doc)
        except DuplicateKeyError:
            raise ConflictError("User already exists with this email")
        doc['_id'] = res.inserted_id
        return doc

    @staticmethod
    def register(data):
        """
        Self-registration for students and instructors. Whether it is open and
        the minimum password length come from the configuration store.
        """
        if data is None:
            raise ValidationError(["Request body must be JSON"], "Validation errors")
        errors = []
        for field, label in (('firstName', 'First name'), ('lastName', 'Last name')):
            if not str(data.get(field) or '').strip():
                errors.append(f"{label} is required")
        email = str(data.get('email') or '').strip()
        if '@' not in email or '.' not in email.split('@')[-1]:
            errors.append("Please enter a valid email")
        role = data.get('role', 'student')
        if role not in SELF_REGISTER_ROLES:
            errors.append("Invalid role")

        min_length = ConfigurationService.get_value('password_min_length', 6)
        if len(str(data.get('password') or '')) < min_length:
            errors.append(f"Password must be at least {min_length} characters")
        if errors:
            raise ValidationError(errors, "Validation errors")

        if not ConfigurationService.get_value(f"{role}_registration_open", True):
            raise AuthorizationError(f"Registration is currently closed for {role}s")

        user = AuthService.create_user(data, role)
        return {"token": AuthService.generate_token(user['_id']), "user": serialize_user(user)}

    @staticmethod
    def login(data):
        data = data or {}
        email = str(data.get('email') or '').strip().lower()
        user = get_mongo().users.find_one({"email": email})
        if not user or not check_password_hash(user['password'], str(data.get('password') or '')):
            raise AuthenticationError("Invalid credentials")
        if not user.get('isActive', True):
            raise AuthenticationError("Account is deactivated")
        return {"token": AuthService.generate_token(user['_id']), "user": serialize_user(user)}

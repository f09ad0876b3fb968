from flask import current_app
from flask_jwt_extended import create_access_token
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from werkzeug.security import generate_password_hash, check_password_hash

from library_api.errors import AuthenticationError, InternalError, UserExistsError, ValidationError
from library_api.extensions import db
from library_api.models.user import User
from library_api.repositories.user_repo import UserRepo
from library_api.utils.validators import normalize_email, require_strong_password, require_text

class AuthService:
    @staticmethod
    def hash_password(password: str) -> str:
        return generate_password_hash(password, method=current_app.config["PASSWORD_HASH_METHOD"])

    @staticmethod
    def verify_password(user: User, password: str) -> bool:
        if not user or not user.password_hash or not isinstance(password, str) or not password:
            return False
        return check_password_hash(user.password_hash, password)

    @staticmethod
    def issue_token(user: User) -> str:
        # expiry comes from JWT_ACCESS_TOKEN_EXPIRES (10 days)
        return create_access_token(identity=str(user.id))

    @staticmethod
    def register(name: str, email: str, password: str, admin: bool = False):
        name = require_text({"name": name}, "name")
        email = normalize_email(email)
        if UserRepo.get_by_email(email):
            raise UserExistsError()
        require_strong_password(password)

        user = User(
            name=name,
            email=email,
            password_hash=AuthService.hash_password(password),
            admin=bool(admin),
        )
        try:
            UserRepo.create(user)
        except IntegrityError as exc:
            db.session.rollback()
            raise UserExistsError() from exc
        except SQLAlchemyError as exc:
            db.session.rollback()
            current_app.logger.exception(f"[auth] Registration failed for {email}: {exc}")
            raise InternalError() from exc

        current_app.logger.info(f"[auth] Registered user id={user.id} email={user.email}")
        return user

    @staticmethod
    def login(email: str, password: str):
        try:
            user = UserRepo.get_by_email(normalize_email(email))
        except ValidationError:
            user = None

        if not AuthService.verify_password(user, password):
            current_app.logger.warning(f"[auth] Rejected login for {email!r}")
            raise AuthenticationError("Invalid login credentials")

        return AuthService.issue_token(user), user

    @staticmethod
    def update_profile(user: User, data: dict):
        if data.get("name"):
            user.name = require_text(data, "name")

        if data.get("email"):
            email = normalize_email(data["email"])
            if email != user.email:
                other = UserRepo.get_by_email(email)
                if other is not None and other.id != user.id:
                    raise UserExistsError()
                user.email = email

        # only re-hash when a new password is supplied
        if data.get("password"):
            password = require_strong_password(data["password"])
            user.password_hash = AuthService.hash_password(password)

        try:
            UserRepo.update()
        except SQLAlchemyError as exc:
            db.session.rollback()
            current_app.logger.exception(f"[auth] Profile update failed for user id={user.id}: {exc}")
            raise InternalError("Update failed") from exc

        current_app.logger.info(f"[auth] Updated profile for user id={user.id}")
        return AuthService.issue_token(user), user

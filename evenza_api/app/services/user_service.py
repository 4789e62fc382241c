"""
Business logic for users.

Covers self-registration, credential checks, profile management, the
admin user screens and the one-off admin bootstrap.  Passwords are
stored as PBKDF2 hashes (see ``core.security``).
"""

import logging
import secrets
import sqlite3
from typing import Any, Dict, List, Optional, Tuple

from evenza_api.app.core.db import build_update, get_connection
from evenza_api.app.core.exceptions import ConflictError, NotFoundError, PermissionDenied
from evenza_api.app.core.security import (
    ADMIN_ROLES,
    ROLE_SUPER_ADMIN,
    hash_password,
    verify_password,
)
from evenza_api.app.schemas.user import (
    SetupAdminRequest,
    UserCreate,
    UserRead,
    UserRegister,
)
from evenza_api.app.services.activity_service import ActivityService


logger = logging.getLogger(__name__)

USER_COLUMNS = (
    "id, name, email, role, phone, student_id, department, year, bio, "
    "profile_picture, disabled, last_login, created_at"
)

MIN_NEW_PASSWORD_LENGTH = 8


def _row_to_user(row: sqlite3.Row) -> UserRead:
    return UserRead(**dict(row))


class UserService:
    """Сервис для работы с пользователями.

    Все операции выполняются над таблицей ``users``.  Роли: ``user``,
    ``admin`` и ``super_admin``; права суперадминистратора нужны для
    назначения и удаления других суперадминистраторов.
    """

    @classmethod
    async def _insert(cls, conn: sqlite3.Connection, name: str, email: str, password: str, role: str, **extra: Any) -> int:
        columns = ["name", "email", "password", "role"] + list(extra)
        values = [name, email, hash_password(password), role] + list(extra.values())
        placeholders = ", ".join("?" for _ in columns)
        try:
            cursor = conn.execute(
                f"INSERT INTO users ({', '.join(columns)}) VALUES ({placeholders})",
                tuple(values),
            )
        except sqlite3.IntegrityError as e:
            raise ConflictError("User with this email already exists") from e
        return cursor.lastrowid

    @classmethod
    async def register(cls, data: UserRegister) -> UserRead:
        """Create a regular user account from the public sign-up form."""
        logger.info("Registering user %s", data.email)
        conn = get_connection()
        try:
            exists = conn.execute("SELECT 1 FROM users WHERE email = ?", (data.email,)).fetchone()
            if exists:
                raise ConflictError("User with this email already exists")
            user_id = await cls._insert(conn, data.name.strip(), data.email, data.password, "user")
            conn.commit()
            row = conn.execute(f"SELECT {USER_COLUMNS} FROM users WHERE id = ?", (user_id,)).fetchone()
        finally:
            conn.close()
        await ActivityService.record(user_id, "user_registered", "user", user_id)
        return _row_to_user(row)

    @classmethod
    async def authenticate(cls, email: str, password: str) -> Optional[Dict[str, Any]]:
        """Check credentials and stamp ``last_login``.

        Returns the user as a dict (without the password) when the email
        exists, the password matches and the account is enabled;
        otherwise ``None``.
        """
        conn = get_connection()
        try:
            row = conn.execute(
                f"SELECT {USER_COLUMNS}, password FROM users WHERE email = ?",
                (email.strip().lower(),),
            ).fetchone()
            if not row or not verify_password(password, row["password"]):
                return None
            if row["disabled"]:
                logger.info("Login attempt for disabled account %s", row["email"])
                return None
            conn.execute("UPDATE users SET last_login = CURRENT_TIMESTAMP WHERE id = ?", (row["id"],))
            conn.commit()
            user = dict(row)
            user.pop("password")
            return user
        finally:
            conn.close()

    @classmethod
    async def get_user(cls, user_id: int) -> UserRead:
        conn = get_connection()
        try:
            row = conn.execute(f"SELECT {USER_COLUMNS} FROM users WHERE id = ?", (user_id,)).fetchone()
        finally:
            conn.close()
        if not row:
            raise NotFoundError(f"User {user_id} not found")
        return _row_to_user(row)

    @classmethod
    async def list_users(
        cls,
        page: int = 1,
        limit: int = 10,
        search: Optional[str] = None,
        role: Optional[str] = None,
    ) -> Tuple[List[UserRead], int]:
        """Вернуть страницу пользователей и их общее количество.

        ``search`` ищет подстроку в имени, email и номере студенческого;
        ``role`` фильтрует по роли.  Сортировка: новые сверху.
        """
        conn = get_connection()
        try:
            where_clauses: List[str] = []
            params: List[Any] = []
            if search:
                where_clauses.append("(name LIKE ? OR email LIKE ? OR student_id LIKE ?)")
                params.extend([f"%{search}%"] * 3)
            if role:
                where_clauses.append("role = ?")
                params.append(role)
            where_sql = " WHERE " + " AND ".join(where_clauses) if where_clauses else ""
            total = conn.execute(f"SELECT COUNT(*) FROM users{where_sql}", tuple(params)).fetchone()[0]
            rows = conn.execute(
                f"SELECT {USER_COLUMNS} FROM users{where_sql} ORDER BY created_at DESC, id DESC LIMIT ? OFFSET ?",
                tuple(params) + (limit, (page - 1) * limit),
            ).fetchall()
            return [_row_to_user(row) for row in rows], total
        finally:
            conn.close()

    @classmethod
    async def create_user(cls, data: UserCreate, current_user: Dict[str, Any]) -> UserRead:
        """Create a user from the admin panel."""
        if data.role == ROLE_SUPER_ADMIN and current_user.get("role") != ROLE_SUPER_ADMIN:
            raise PermissionDenied("Only a super admin can create super admins")
        password = data.password or secrets.token_urlsafe(12)
        conn = get_connection()
        try:
            user_id = await cls._insert(
                conn,
                data.name.strip(),
                data.email,
                password,
                data.role,
                phone=data.phone,
                student_id=data.student_id,
                department=data.department,
                year=data.year,
            )
            conn.commit()
        finally:
            conn.close()
        logger.info("User %s created by %s", data.email, current_user.get("email"))
        await ActivityService.record(current_user.get("user_id"), "create", "user", user_id, {"email": data.email})
        return await cls.get_user(user_id)

    @classmethod
    async def update_user(cls, user_id: int, updates: Dict[str, Any], current_user: Dict[str, Any]) -> UserRead:
        """Update any user's profile, role, status or password (admin only).

        Promoting to or demoting from ``super_admin`` requires the caller
        to be a super admin.
        """
        target = await cls.get_user(user_id)
        new_role = updates.get("role")
        touches_super = new_role is not None and ROLE_SUPER_ADMIN in (new_role, target.role) and new_role != target.role
        if touches_super and current_user.get("role") != ROLE_SUPER_ADMIN:
            raise PermissionDenied("Only a super admin can change super admin roles")
        if target.role == ROLE_SUPER_ADMIN and current_user.get("role") != ROLE_SUPER_ADMIN:
            raise PermissionDenied("Only a super admin can modify a super admin")
        if updates.get("password"):
            updates["password"] = hash_password(updates["password"])
        if not updates:
            return target
        set_sql, values = build_update(updates)
        conn = get_connection()
        try:
            try:
                conn.execute(f"UPDATE users SET {set_sql} WHERE id = ?", tuple(values) + (user_id,))
            except sqlite3.IntegrityError as e:
                raise ConflictError("User with this email already exists") from e
            conn.commit()
        finally:
            conn.close()
        logged = {k: v for k, v in updates.items() if k != "password"}
        await ActivityService.record(current_user.get("user_id"), "update", "user", user_id, logged)
        return await cls.get_user(user_id)

    @classmethod
    async def delete_user(cls, user_id: int, current_user: Dict[str, Any]) -> None:
        target = await cls.get_user(user_id)
        if user_id == current_user.get("user_id"):
            raise ValueError("You cannot delete your own account")
        if target.role == ROLE_SUPER_ADMIN and current_user.get("role") != ROLE_SUPER_ADMIN:
            raise PermissionDenied("Only a super admin can delete a super admin")
        conn = get_connection()
        try:
            conn.execute("DELETE FROM users WHERE id = ?", (user_id,))
            conn.commit()
        finally:
            conn.close()
        logger.info("User %s deleted by %s", target.email, current_user.get("email"))
        await ActivityService.record(current_user.get("user_id"), "delete", "user", user_id, {"email": target.email})

    @classmethod
    async def update_profile(cls, user_id: int, updates: Dict[str, Any]) -> UserRead:
        """Update the caller's own profile fields."""
        await cls.get_user(user_id)
        if updates:
            set_sql, values = build_update(updates)
            conn = get_connection()
            try:
                conn.execute(f"UPDATE users SET {set_sql} WHERE id = ?", tuple(values) + (user_id,))
                conn.commit()
            finally:
                conn.close()
            await ActivityService.record(user_id, "profile_updated", "user", user_id, {"fields": sorted(updates)})
        return await cls.get_user(user_id)

    @classmethod
    async def change_password(cls, user_id: int, current_password: str, new_password: str) -> None:
        """Replace the caller's password after checking the current one.

        Raises ``ValueError`` if the new password is shorter than eight
        characters or the current password does not match.
        """
        if len(new_password) < MIN_NEW_PASSWORD_LENGTH:
            raise ValueError(f"New password must be at least {MIN_NEW_PASSWORD_LENGTH} characters long")
        conn = get_connection()
        try:
            row = conn.execute("SELECT password FROM users WHERE id = ?", (user_id,)).fetchone()
            if not row:
                raise NotFoundError(f"User {user_id} not found")
            if not verify_password(current_password, row["password"]):
                raise ValueError("Current password is incorrect")
            conn.execute(
                "UPDATE users SET password = ?, updated_at = CURRENT_TIMESTAMP WHERE id = ?",
                (hash_password(new_password), user_id),
            )
            # Other devices must sign in again
            conn.execute("DELETE FROM sessions WHERE user_id = ?", (user_id,))
            conn.commit()
        finally:
            conn.close()
        await ActivityService.record(user_id, "password_changed", "user", user_id)

    @classmethod
    async def setup_admin(
        cls,
        data: SetupAdminRequest,
        current_user: Optional[Dict[str, Any]],
    ) -> Tuple[bool, str, UserRead]:
        """Create or promote an administrator.

        Open to anyone while the platform has no administrator; the first
        one becomes ``super_admin``.  Afterwards only a super admin may
        call it.  Returns ``(created, message, user)``.
        """
        conn = get_connection()
        try:
            admin_count = conn.execute(
                "SELECT COUNT(*) FROM users WHERE role IN (?, ?)", ADMIN_ROLES
            ).fetchone()[0]
            if admin_count and (not current_user or current_user.get("role") != ROLE_SUPER_ADMIN):
                raise PermissionDenied("An administrator already exists")
            role = ROLE_SUPER_ADMIN if admin_count == 0 else "admin"
            row = conn.execute("SELECT id, role FROM users WHERE email = ?", (data.email,)).fetchone()
            if row and row["role"] in ADMIN_ROLES:
                created, message, user_id = False, "User is already an admin", row["id"]
            elif row:
                conn.execute(
                    "UPDATE users SET role = ?, updated_at = CURRENT_TIMESTAMP WHERE id = ?",
                    (role, row["id"]),
                )
                created, message, user_id = False, "User promoted to admin", row["id"]
            else:
                user_id = await cls._insert(conn, data.name.strip(), data.email, data.password, role)
                created, message = True, "Admin user created successfully"
            conn.commit()
        finally:
            conn.close()
        logger.info("%s: %s", message, data.email)
        actor = current_user.get("user_id") if current_user else None
        await ActivityService.record(actor, "admin_setup", "user", user_id, {"email": data.email})
        return created, message, await cls.get_user(user_id)

from __future__ import annotations

from typing import Any

import bcrypt

_users: dict[str, dict[str, Any]] = {}

ROLES = ("student", "faculty", "admin")


def _hash_password(plain: str) -> str:
    return bcrypt.hashpw(plain.encode(), bcrypt.gensalt()).decode()


def _verify_password(plain: str, hashed: str) -> bool:
    return bcrypt.checkpw(plain.encode(), hashed.encode())


def _add_user(
    username: str,
    password: str,
    role: str,
    semester: int | None = None,
    department: str | None = None,
) -> None:
    if role not in ROLES:
        raise ValueError(f"Unknown role: {role}")
    _users[username] = {
        "password_hash": _hash_password(password),
        "role": role,
        "semester": semester,
        "department": department,
    }


def _seed_users() -> None:
    """Pre-seed demo users on import."""
    _add_user("student", "student123", "student", semester=3, department="CSE")
    _add_user("priya", "priya123", "student", semester=3, department="CSE")
    _add_user("arjun", "arjun123", "student", semester=3, department="CSE")
    _add_user("meera", "meera123", "student", semester=5, department="ECE")
    _add_user("faculty", "faculty123", "faculty", department="CSE")
    _add_user("admin", "admin123", "admin")


def _public(username: str, record: dict[str, Any]) -> dict[str, Any]:
    return {
        "username": username,
        "role": record["role"],
        "semester": record["semester"],
        "department": record["department"],
    }


def authenticate(username: str, password: str) -> dict[str, Any] | None:
    """Verify credentials. Returns the public profile or ``None``."""
    record = _users.get(username)
    if record and _verify_password(password, record["password_hash"]):
        return _public(username, record)
    return None


def list_users() -> list[dict[str, Any]]:
    """Public profiles of all users, in registration order."""
    return [_public(name, record) for name, record in _users.items()]


_seed_users()

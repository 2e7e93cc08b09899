"""Permission strings and the checks the UI relies on.

A permission is ``"<module>:<action>"``. Parent modules (``interview``)
are viewable when any of their sub-modules is.
"""

from __future__ import annotations

from typing import Any, Iterable, Optional, Sequence

from ..core.enums import SystemRole
from ..core.exceptions import ValidationError

BASE_ACTIONS = ("view", "read", "create", "update", "delete")

SUB_MODULES: dict[str, tuple[str, ...]] = {
    "interview": (
        "job_openings",
        "candidates",
        "interview_appointments",
        "interview_process",
        "offer_letter",
        "document_collection",
        "background_verification",
        "refer_candidate",
    ),
}

MODULES = (
    "dashboard",
    "interview",
    *SUB_MODULES["interview"],
    "staff",
    "performance",
    "payroll",
    "lms",
    "assets",
    "company-policy",
    "integrations",
    "settings",
    "hrms-geo",
)

# Module-specific actions on top of BASE_ACTIONS.
EXTRA_ACTIONS: dict[str, tuple[str, ...]] = {
    "job_openings": ("add", "edit"),
    "candidates": ("add", "start_interview", "view_profile", "convert_to_staff", "view_offer"),
    "interview_appointments": ("schedule", "edit"),
    "offer_letter": ("template", "generate", "add_dummy"),
}

ACTIONS = tuple(dict.fromkeys(BASE_ACTIONS + tuple(a for extra in EXTRA_ACTIONS.values() for a in extra)))

VIEW_ACTIONS = ("read", "view")


def permission_key(module: str, action: str) -> str:
    return f"{module}:{action}"


def split_permission(permission: str) -> tuple[str, str]:
    module, sep, action = str(permission).partition(":")
    if not sep or not module or not action:
        raise ValidationError(f"Invalid permission {permission!r}, expected 'module:action'")
    return module, action


def normalize_permissions(raw: Optional[Iterable[Any]]) -> tuple[str, ...]:
    """Accept ``"module:action"`` strings or ``{"module", "actions"}`` objects.

    Unknown modules or actions are rejected; duplicates are dropped and
    first-seen order is kept.
    """

    if raw is None:
        return ()
    if isinstance(raw, (str, bytes)) or not hasattr(raw, "__iter__"):
        raise ValidationError("permissions must be a list")

    out: list[str] = []
    for item in raw:
        if isinstance(item, dict):
            module = item.get("module")
            actions = item.get("actions") or []
            if not isinstance(actions, list):
                raise ValidationError("permission actions must be a list")
            pairs = [(module, action) for action in actions]
        else:
            pairs = [split_permission(item)]

        for module, action in pairs:
            if module not in MODULES:
                raise ValidationError(f"Unknown permission module: {module}")
            if action not in ACTIONS:
                raise ValidationError(f"Unknown permission action: {action}")
            key = permission_key(module, action)
            if key not in out:
                out.append(key)
    return tuple(out)


def group_permissions(permissions: Iterable[str]) -> list[dict[str, Any]]:
    grouped: dict[str, list[str]] = {}
    for permission in permissions:
        module, action = split_permission(permission)
        grouped.setdefault(module, []).append(action)
    return [{"module": module, "actions": actions} for module, actions in grouped.items()]


def has_action(permissions: Iterable[str], module: str, action: str) -> bool:
    return permission_key(module, action) in set(permissions)


def can_view_module(permissions: Sequence[str], module: str) -> bool:
    if any(has_action(permissions, module, a) for a in VIEW_ACTIONS):
        return True
    return any(
        has_action(permissions, sub, a) for sub in SUB_MODULES.get(module, ()) for a in VIEW_ACTIONS
    )


def admin_permissions() -> tuple[str, ...]:
    return tuple(
        permission_key(module, action)
        for module in MODULES
        for action in BASE_ACTIONS + EXTRA_ACTIONS.get(module, ())
    )


def effective_permissions(role_name: Optional[str], role=None) -> tuple[str, ...]:
    """Admin always has full access; otherwise the active role's own list."""

    if role_name and role_name.lower() == SystemRole.ADMIN.value.lower():
        return admin_permissions()
    if role is None or not role.is_active:
        return ()
    return tuple(role.permissions)

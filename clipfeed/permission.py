"""Role and permission checks backed by a repository and an in-memory RBAC cache."""

from __future__ import annotations

import copy
import logging
from typing import Any

from .errors import PERMISSION_DENIED

_log = logging.getLogger(__name__)


class PermissionUsecase:
    """Business rules for roles and permissions.

    ``role_repo`` provides ``get_role_by_name``, ``get_user_roles``,
    ``assign_role``, ``remove_role`` and ``has_role``; ``permission_repo``
    provides ``get_user_permissions`` and ``has_permission``.  The RBAC
    manager is a fast in-memory layer with ``has_permission``,
    ``assign_role``, ``remove_role`` and ``clear_user_cache``.
    """

    def __init__(self, role_repo: Any, permission_repo: Any, rbac_manager: Any) -> None:
        self._role_repo = role_repo
        self._permission_repo = permission_repo
        self._rbac = rbac_manager

    def check_permission(self, user_id: int, resource: str, action: str) -> bool:
        """Check the in-memory manager first, then fall back to the repository."""
        if self._rbac.has_permission(user_id, resource, action):
            return True
        return self._permission_repo.has_permission(user_id, resource, action)

    def get_user_roles(self, user_id: int) -> list:
        """Load the user's roles and mirror them into the in-memory manager."""
        roles = self._role_repo.get_user_roles(user_id)
        for role in roles:
            self._rbac.assign_role(user_id, role.id)
        return roles

    def get_user_permissions(self, user_id: int) -> list:
        return self._permission_repo.get_user_permissions(user_id)

    def assign_role(self, user_id: int, role_id: int) -> None:
        _log.info("Assign role %d to user %d", role_id, user_id)
        self._role_repo.assign_role(user_id, role_id)
        self._rbac.assign_role(user_id, role_id)

    def remove_role(self, user_id: int, role_id: int) -> None:
        _log.info("Remove role %d from user %d", role_id, user_id)
        self._role_repo.remove_role(user_id, role_id)
        self._rbac.remove_role(user_id, role_id)

    def has_role(self, user_id: int, role_id: int) -> bool:
        return self._role_repo.has_role(user_id, role_id)

    def init_user_default_role(self, user_id: int) -> None:
        """Give a new user the ``user`` role."""
        _log.info("Init default role for user: %d", user_id)
        default_role = self._role_repo.get_role_by_name("user")
        self.assign_role(user_id, default_role.id)

    def is_admin(self, user_id: int) -> bool:
        return self._has_named_role(user_id, "admin")

    def is_moderator(self, user_id: int) -> bool:
        return self._has_named_role(user_id, "moderator")

    def clear_user_permission_cache(self, user_id: int) -> None:
        _log.info("Clear permission cache for user: %d", user_id)
        self._rbac.clear_user_cache(user_id)

    def check_video_permission(self, user_id: int, action: str) -> bool:
        return self.check_permission(user_id, "/video", action)

    def check_comment_permission(self, user_id: int, action: str) -> bool:
        return self.check_permission(user_id, "/comment", action)

    def check_user_permission(self, user_id: int, action: str) -> bool:
        return self.check_permission(user_id, "/user", action)

    def validate_resource_access(self, user_id: int, resource: str, action: str) -> None:
        """Raise ``PERMISSION_DENIED`` unless the user may act on the resource."""
        if not self.check_permission(user_id, resource, action):
            raise copy.copy(PERMISSION_DENIED)

    def _has_named_role(self, user_id: int, name: str) -> bool:
        role = self._role_repo.get_role_by_name(name)
        return self.has_role(user_id, role.id)
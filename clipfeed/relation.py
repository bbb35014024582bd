"""Follow relations between users."""

from __future__ import annotations

import logging
from typing import Any

from .errors import bad_request

_log = logging.getLogger(__name__)

_DEFAULT_PAGE_SIZE = 20
_MAX_PAGE_SIZE = 50


def _normalise_page(page: int, size: int) -> tuple[int, int]:
    if page <= 0:
        page = 1
    if size <= 0 or size > _MAX_PAGE_SIZE:
        size = _DEFAULT_PAGE_SIZE
    return page, size


class RelationUsecase:
    """Business rules for following users.

    The repository provides ``follow``, ``unfollow``, ``is_following``,
    ``get_follow_list``, ``get_follower_list`` and ``get_friend_list``;
    the paged lists return a ``(users, total)`` pair.
    """

    def __init__(self, repo: Any) -> None:
        self._repo = repo

    def follow(self, user_id: int, follow_user_id: int) -> None:
        """Make ``user_id`` follow ``follow_user_id``."""
        _log.info("User %d follows user %d", user_id, follow_user_id)
        if user_id == follow_user_id:
            raise bad_request("INVALID_FOLLOW", "cannot follow yourself")
        self._repo.follow(user_id, follow_user_id)

    def unfollow(self, user_id: int, follow_user_id: int) -> None:
        """Make ``user_id`` stop following ``follow_user_id``."""
        _log.info("User %d unfollows user %d", user_id, follow_user_id)
        self._repo.unfollow(user_id, follow_user_id)

    def is_following(self, user_id: int, follow_user_id: int) -> bool:
        return self._repo.is_following(user_id, follow_user_id)

    def get_follow_list(self, user_id: int, page: int, size: int) -> tuple[list, int]:
        """Return one page of the users ``user_id`` follows, and the total."""
        page, size = _normalise_page(page, size)
        return self._repo.get_follow_list(user_id, page, size)

    def get_follower_list(self, user_id: int, page: int, size: int) -> tuple[list, int]:
        """Return one page of the users following ``user_id``, and the total."""
        page, size = _normalise_page(page, size)
        return self._repo.get_follower_list(user_id, page, size)

    def get_friend_list(self, user_id: int) -> list:
        """Return the users who follow ``user_id`` back."""
        return self._repo.get_friend_list(user_id)
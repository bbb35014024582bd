from dataclasses import dataclass
from unittest.mock import Mock, call

import pytest

from clipfeed.errors import ALREADY_FOLLOW, NOT_FOLLOW, ServiceError
from clipfeed.relation import RelationUsecase


@dataclass
class _User:
    id: int
    username: str
    nickname: str
    is_follow: bool


class _DatabaseError(Exception):
    pass


@pytest.fixture
def repo():
    return Mock()


@pytest.fixture
def uc(repo):
    return RelationUsecase(repo)


# Follow


def test_follow_success(uc, repo):
    repo.follow.return_value = None
    assert uc.follow(1, 2) is None
    assert repo.follow.call_args_list == [call(1, 2)]


def test_follow_self(uc, repo):
    with pytest.raises(ServiceError) as info:
        uc.follow(1, 1)
    assert "cannot follow yourself" in str(info.value)
    assert repo.follow.call_count == 0


def test_follow_already_following(uc, repo):
    repo.follow.side_effect = ALREADY_FOLLOW
    with pytest.raises(ServiceError) as info:
        uc.follow(1, 2)
    assert info.value == ALREADY_FOLLOW


def test_follow_database_error(uc, repo):
    failure = _DatabaseError("boom")
    repo.follow.side_effect = failure
    with pytest.raises(_DatabaseError) as info:
        uc.follow(1, 2)
    assert info.value is failure


# Unfollow


def test_unfollow_success(uc, repo):
    repo.unfollow.return_value = None
    assert uc.unfollow(1, 2) is None
    assert repo.unfollow.call_args_list == [call(1, 2)]


def test_unfollow_not_following(uc, repo):
    repo.unfollow.side_effect = NOT_FOLLOW
    with pytest.raises(ServiceError) as info:
        uc.unfollow(1, 2)
    assert info.value == NOT_FOLLOW


def test_unfollow_database_error(uc, repo):
    failure = _DatabaseError("boom")
    repo.unfollow.side_effect = failure
    with pytest.raises(_DatabaseError) as info:
        uc.unfollow(1, 2)
    assert info.value is failure


# IsFollowing


@pytest.mark.parametrize("answer", [True, False])
def test_is_following(uc, repo, answer):
    repo.is_following.return_value = answer
    assert uc.is_following(1, 2) is answer
    assert repo.is_following.call_args_list == [call(1, 2)]


def test_is_following_database_error(uc, repo):
    repo.is_following.side_effect = _DatabaseError("boom")
    with pytest.raises(_DatabaseError):
        uc.is_following(1, 2)
    assert repo.is_following.call_count == 1


# GetFollowList


def test_get_follow_list_success(uc, repo):
    expected = [
        _User(2, "user2", "User 2", True),
        _User(3, "user3", "User 3", True),
    ]
    repo.get_follow_list.return_value = (expected, 2)
    users, total = uc.get_follow_list(1, 1, 20)
    assert len(users) == 2
    assert total == 2
    assert users[0].id == expected[0].id
    assert users[0].is_follow
    assert repo.get_follow_list.call_args_list == [call(1, 1, 20)]


def test_get_follow_list_default_pagination(uc, repo):
    repo.get_follow_list.return_value = ([], 0)
    users, total = uc.get_follow_list(1, 0, 0)
    assert users == []
    assert total == 0
    assert repo.get_follow_list.call_args_list == [call(1, 1, 20)]


def test_get_follow_list_large_page_size(uc, repo):
    repo.get_follow_list.return_value = ([], 0)
    users, total = uc.get_follow_list(1, 1, 100)
    assert users == []
    assert total == 0
    assert repo.get_follow_list.call_args_list == [call(1, 1, 20)]


def test_get_follow_list_database_error(uc, repo):
    failure = _DatabaseError("boom")
    repo.get_follow_list.side_effect = failure
    with pytest.raises(_DatabaseError) as info:
        uc.get_follow_list(1, 1, 20)
    assert info.value is failure


# GetFollowerList


def test_get_follower_list_success(uc, repo):
    expected = [
        _User(2, "user2", "User 2", False),
        _User(3, "user3", "User 3", True),
    ]
    repo.get_follower_list.return_value = (expected, 2)
    users, total = uc.get_follower_list(1, 1, 20)
    assert len(users) == 2
    assert total == 2
    assert users[0].id == expected[0].id
    assert not users[0].is_follow
    assert users[1].is_follow


def test_get_follower_list_default_pagination(uc, repo):
    repo.get_follower_list.return_value = ([], 0)
    users, total = uc.get_follower_list(1, -1, 0)
    assert users == []
    assert total == 0
    assert repo.get_follower_list.call_args_list == [call(1, 1, 20)]


def test_get_follower_list_database_error(uc, repo):
    failure = _DatabaseError("boom")
    repo.get_follower_list.side_effect = failure
    with pytest.raises(_DatabaseError) as info:
        uc.get_follower_list(1, 1, 20)
    assert info.value is failure


# GetFriendList


def test_get_friend_list_success(uc, repo):
    expected = [
        _User(2, "user2", "User 2", True),
        _User(3, "user3", "User 3", True),
    ]
    repo.get_friend_list.return_value = expected
    users = uc.get_friend_list(1)
    assert len(users) == 2
    assert users[0].id == expected[0].id
    assert users[0].is_follow and users[1].is_follow
    assert repo.get_friend_list.call_args_list == [call(1)]


def test_get_friend_list_empty(uc, repo):
    repo.get_friend_list.return_value = []
    assert uc.get_friend_list(1) == []


def test_get_friend_list_database_error(uc, repo):
    failure = _DatabaseError("boom")
    repo.get_friend_list.side_effect = failure
    with pytest.raises(_DatabaseError) as info:
        uc.get_friend_list(1)
    assert info.value is failure


# Error types


def test_error_types(uc, repo):
    repo.follow.side_effect = ALREADY_FOLLOW
    with pytest.raises(ServiceError, match="already followed"):
        uc.follow(1, 2)
    repo.unfollow.side_effect = NOT_FOLLOW
    with pytest.raises(ServiceError, match="not followed"):
        uc.unfollow(1, 2)


# Pagination validation

_PAGINATION_CASES = [
    pytest.param(2, 10, 2, 10, id="NormalValues"),
    pytest.param(0, 10, 1, 10, id="ZeroPage"),
    pytest.param(-1, 10, 1, 10, id="NegativePage"),
    pytest.param(1, 0, 1, 20, id="ZeroSize"),
    pytest.param(1, -1, 1, 20, id="NegativeSize"),
    pytest.param(1, 100, 1, 20, id="LargeSize"),
    pytest.param(1, 50, 1, 50, id="MaxSize"),
    pytest.param(1, 51, 1, 20, id="OverMaxSize"),
]


@pytest.mark.parametrize("page,size,expected_page,expected_size", _PAGINATION_CASES)
def test_pagination_follow_list(uc, repo, page, size, expected_page, expected_size):
    repo.get_follow_list.return_value = ([], 0)
    assert uc.get_follow_list(1, page, size) == ([], 0)
    assert repo.get_follow_list.call_args_list == [call(1, expected_page, expected_size)]


@pytest.mark.parametrize("page,size,expected_page,expected_size", _PAGINATION_CASES)
def test_pagination_follower_list(uc, repo, page, size, expected_page, expected_size):
    repo.get_follower_list.return_value = ([], 0)
    assert uc.get_follower_list(1, page, size) == ([], 0)
    assert repo.get_follower_list.call_args_list == [
        call(1, expected_page, expected_size)
    ]
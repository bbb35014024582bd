# clipfeed

The business layer of a short-video service, in plain Python with no
third-party dependencies. It does not store anything itself. You pass in the
repositories, caches, storage back ends and event publishers, and clipfeed
applies the service's rules to them. Every collaborator is duck-typed: any
object with the right methods will work.

## Modules

### `clipfeed.errors`

`ServiceError` is an exception that carries an HTTP-style `code`, a machine
`reason` and a human `message`. Two errors compare equal when their code and
reason match, and the message is ignored. You build errors with
`bad_request` (400), `forbidden` (403) and `not_found` (404). The module also
defines these ready-made errors:

- `ALREADY_FOLLOW`
- `NOT_FOLLOW`
- `PERMISSION_DENIED`
- `ROLE_NOT_FOUND`
- `INVALID_ROLE`

### `clipfeed.relation.RelationUsecase`

Handles follows between users. The repository must provide `follow`,
`unfollow`, `is_following`, `get_follow_list`, `get_follower_list` and
`get_friend_list`. The two paged lists return a `(users, total)` pair.

- `follow(user_id, follow_user_id)` raises a `ServiceError` with reason
  `INVALID_FOLLOW` when a user tries to follow themselves. The repository is
  not called in that case.
- `get_follow_list` and `get_follower_list` normalise paging before they call
  the repository. A page below 1 becomes 1. A size below 1 or above 50
  becomes 20.
- Errors raised by the repository reach the caller unchanged.

### `clipfeed.permission.PermissionUsecase`

Role-based access checks. It uses a role repository, a permission repository
and an in-memory RBAC manager.

- `check_permission(user_id, resource, action)` asks the RBAC manager first.
  If the manager says no, it asks the permission repository.
- `check_video_permission`, `check_comment_permission` and
  `check_user_permission` are shortcuts for the resources `/video`,
  `/comment` and `/user`.
- `validate_resource_access` raises `PERMISSION_DENIED` when the check fails.
- `assign_role` and `remove_role` update the repository first and then the
  RBAC manager.
- `get_user_roles` loads the user's roles and copies them into the RBAC
  manager.
- `init_user_default_role` gives a new user the role named `user`.
- `is_admin` and `is_moderator` look up the roles `admin` and `moderator` by
  name.
- `has_role`, `get_user_permissions` and `clear_user_permission_cache` do what
  their names say.

### `clipfeed.video`

`VideoUsecase` implements the video rules. Its constructor takes these
collaborators:

| Argument | Must provide |
| --- | --- |
| `repo` | persistence for videos |
| `cache` | `get_feed_videos`, which returns `None` on a miss, plus `set_feed_videos`, `incr_video_stats` and `delete_video` |
| `storage` | `upload_video`, `upload_cover` and `delete`. It may also support multipart and resumable uploads. |
| `processor` | `validate_format`, `generate_default_thumbnail`, `max_file_size` and `supported_formats` |
| `validator` | `validate_video_title`, `validate_user_id` and `validate_video_id` |
| `config` | a `BusinessConfig` |
| `id_generator` | a callable that returns fresh ids |
| `events` | optional. If given, it must have `send_video_upload_event`, `send_video_stats_event` and `send_video_process_event`, each called as `(topic, event_dict)`. |

What each method does:

- **`publish_video`**
  - Validates the title and the format.
  - Uploads the file under a random object name. If the upload fails it
    raises `RuntimeError("video upload failed")`.
  - Uploads a default thumbnail as the cover. If that fails, the cover URL is
    left empty.
  - Records the video as `VideoStatus.PUBLISHED`. If recording fails, it
    deletes the uploaded files and re-raises the error.
  - Sends an upload event and a transcode request. Failures to send events
    are logged, not raised.
- **Multipart uploads**: `initiate_multipart_upload` (4 MiB chunks),
  `upload_part`, `complete_multipart_upload`, `abort_multipart_upload` and
  `list_uploaded_parts`. They need a storage that implements
  `initiate_multipart_upload`, `upload_part`, `complete_multipart_upload`,
  `abort_multipart_upload` and `list_parts`. Otherwise they raise
  `RuntimeError`. A completed upload is recorded as `VideoStatus.PENDING`.
- **`get_feed(latest_time, limit)`**
  - Clamps `limit` to `config.default_feed_limit`.
  - Serves from the cache when it holds enough videos.
  - Otherwise reads from the repository and caches any result.
  - Returns `(videos, next_time)`. `next_time` is a Unix timestamp, or 0 when
    there are no videos.
- **Reading videos**
  - `get_publish_list` returns up to 100 of the user's videos.
  - `get_videos` returns `[]` for an empty list of ids.
  - `get_video` fetches a video and then increments its play count. A failed
    increment is only logged.
- **Counters**
  - `update_video_stats(video_id, stats_type, delta)` accepts `favorite`,
    `comment` or `play`. Any other type raises `ValueError`.
  - It updates the repository and the cache, then sends a stats event.
  - Shortcuts: `increment_play_count`, `increment_favorite_count`,
    `decrement_favorite_count`, `increment_comment_count` and
    `decrement_comment_count`.
- **`get_upload_config` and `get_upload_progress`**
  - `get_upload_config` returns an `UploadConfig`.
  - `get_upload_progress` returns an `UploadProgress`. If the storage has
    `get_upload_progress` it reports the uploaded size with status
    `uploading` and a fixed progress of 50. Otherwise it reports `completed`
    at 100.
- **`update_video_cover` and `update_video_play_url`** update the repository
  and then evict the video from the cache.

The module also defines the data classes `Video`, `VideoStatus`,
`BusinessConfig`, `UploadConfig` and `UploadProgress`.

## What it does not do

clipfeed has no HTTP or RPC server, no command-line program and no database,
cache, object-storage or message-broker clients. It does not handle user
accounts, login or tokens, and it does not process video. All of these belong
to the objects you pass in.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Example

```python
from clipfeed.errors import ServiceError
from clipfeed.relation import RelationUsecase

class InMemoryRelations:
    def __init__(self):
        self.edges = set()
    def follow(self, user_id, follow_user_id):
        self.edges.add((user_id, follow_user_id))
    def unfollow(self, user_id, follow_user_id):
        self.edges.discard((user_id, follow_user_id))
    def is_following(self, user_id, follow_user_id):
        return (user_id, follow_user_id) in self.edges
    def get_follow_list(self, user_id, page, size):
        return [], 0
    def get_follower_list(self, user_id, page, size):
        return [], 0
    def get_friend_list(self, user_id):
        return []

relations = RelationUsecase(InMemoryRelations())
relations.follow(1, 2)
assert relations.is_following(1, 2)

try:
    relations.follow(1, 1)
except ServiceError as err:
    print(err.reason)  # INVALID_FOLLOW
```
"""Service layer exports."""
from .feed_service import FeedEntry, friends_feed
from .friend_request_service import (
    FriendRequestView,
    list_requests_for_user,
    respond_to_request,
    send_friend_request,
)
from .friendship_service import are_friends, link, list_friend_ids, list_friends, stage_link, unlink
from .identity_service import (
    create_user,
    get_user,
    get_user_by_external_id,
    get_user_by_public_id,
    search_users,
    update_bio,
    update_tokens,
    upsert_from_provider,
)
from .mood_post_service import create_mood_post, delete_mood_post, get_mood_post, list_posts_by_author
from .notification_stream import NotificationHub, build_event, get_notification_hub
from .profile_service import friendship_status, get_profile, update_own_bio
from .session_service import (
    CallerContext,
    authenticate_session,
    create_session,
    decode_session_token,
    destroy_session,
    get_caller,
    issue_session_token,
    load_session,
    resolve_session,
)

__all__ = [
    "CallerContext",
    "FeedEntry",
    "FriendRequestView",
    "NotificationHub",
    "are_friends",
    "authenticate_session",
    "build_event",
    "create_mood_post",
    "create_session",
    "create_user",
    "decode_session_token",
    "delete_mood_post",
    "destroy_session",
    "friends_feed",
    "friendship_status",
    "get_caller",
    "get_mood_post",
    "get_notification_hub",
    "get_profile",
    "get_user",
    "get_user_by_external_id",
    "get_user_by_public_id",
    "issue_session_token",
    "link",
    "list_friend_ids",
    "list_friends",
    "list_posts_by_author",
    "list_requests_for_user",
    "load_session",
    "resolve_session",
    "respond_to_request",
    "search_users",
    "send_friend_request",
    "stage_link",
    "unlink",
    "update_bio",
    "update_own_bio",
    "update_tokens",
    "upsert_from_provider",
]

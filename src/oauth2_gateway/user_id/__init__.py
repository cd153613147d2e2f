from oauth2_gateway.user_id.header_user_id_provider import HeaderUserIdProvider
from oauth2_gateway.user_id.request_user_id_provider import RequestUserIdProvider
from oauth2_gateway.user_id.session_user_id_provider import SessionUserIdProvider
from oauth2_gateway.user_id.user_id_provider import UserIdProvider

__all__ = [
    "UserIdProvider",
    "RequestUserIdProvider",
    "SessionUserIdProvider",
    "HeaderUserIdProvider",
]

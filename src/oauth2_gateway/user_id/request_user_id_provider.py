from fastapi import Request

from oauth2_gateway.user_id.user_id_provider import UserIdProvider


class RequestUserIdProvider(UserIdProvider):
    """Reads ``user_id`` from the query string, then from the form body."""

    PARAMETER = "user_id"

    async def resolve(self, request: Request) -> str | None:
        user_id = request.query_params.get(self.PARAMETER)
        if user_id:
            return user_id

        content_type = request.headers.get("content-type", "")
        if content_type.startswith(("application/x-www-form-urlencoded", "multipart/form-data")):
            form = await request.form()
            value = form.get(self.PARAMETER)
            if isinstance(value, str) and value:
                return value
        return None

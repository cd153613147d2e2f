"""
WWW-Authenticate challenges for rejected resource requests (RFC 6750).
"""


def build_www_authenticate_header(
    error: str | None = None,
    error_description: str | None = None,
    scope: str | None = None,
    realm: str | None = None,
) -> str:
    """
    Build a Bearer WWW-Authenticate header value.

    Args:
        error: OAuth error code (e.g., "invalid_token", "insufficient_scope");
            omitted when the request carried no credentials at all
        error_description: Human-readable error description
        scope: Required scope(s) (space-separated)
        realm: Protection realm

    Example:
        >>> build_www_authenticate_header(realm="Service", error="invalid_token")
        'Bearer realm="Service", error="invalid_token"'
    """
    parts = []

    if realm:
        parts.append(f'realm="{realm}"')

    if error:
        parts.append(f'error="{error}"')

    if error_description:
        parts.append(f'error_description="{error_description}"')

    if scope:
        parts.append(f'scope="{scope}"')

    if not parts:
        return "Bearer"
    return "Bearer " + ", ".join(parts)

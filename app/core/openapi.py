"""
OpenAPI schema customizations for drf-spectacular.

This module provides hooks to customize the generated OpenAPI schema,
including natural language summaries for SimpleJWT endpoints and tag
groupings for better documentation organization in ReDoc/Swagger UI.

Tag naming follows the pattern: [App Name] - [Group Name]
Examples:
- Auth (token issuance)
- Auth - User (current user, user lookup)
- Chat - Chats (conversation lookup and group management)
- Chat - Messages (history, sending, read receipts)
"""

# Natural language summaries for SimpleJWT endpoints
# Maps operation_id to (summary, description)
JWT_SUMMARIES = {
    "auth_token_create": (
        "Obtain token pair",
        "Authenticate with email and password to receive access and refresh JWTs.",
    ),
    "auth_token_refresh_create": (
        "Refresh access token",
        "Get a new access token using a valid refresh token.",
    ),
}

TAG_DESCRIPTIONS = [
    {
        "name": "Auth",
        "description": "Token issuance and refresh.",
    },
    {
        "name": "Auth - User",
        "description": "Current user retrieval and user existence checks.",
    },
    {
        "name": "Chat - Chats",
        "description": "Direct chat lookup, group creation, renaming, and membership/admin management.",
    },
    {
        "name": "Chat - Messages",
        "description": "Message history, sending, and read receipts.",
    },
]


def group_auth_endpoints(result, generator, request, public):
    """
    Postprocessing hook to group API endpoints by function.

    Chat endpoints set their tags via @extend_schema; this hook tags the
    token endpoints, adds their summaries, and attaches tag descriptions.
    """
    paths = result.get("paths", {})

    for path, methods in paths.items():
        for method, operation in methods.items():
            if not isinstance(operation, dict):
                continue

            operation_id = operation.get("operationId", "")

            if operation_id in JWT_SUMMARIES:
                summary, description = JWT_SUMMARIES[operation_id]
                operation["summary"] = summary
                operation["description"] = description
                operation["tags"] = ["Auth"]

    result["tags"] = TAG_DESCRIPTIONS

    return result

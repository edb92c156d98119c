"""Session identity for conversations with the generation service."""

import uuid


def new_session_token() -> str:
    """Generate a random session token.

    Returns:
        A UUID4 string, unique for practical purposes across all clients.
    """
    return str(uuid.uuid4())

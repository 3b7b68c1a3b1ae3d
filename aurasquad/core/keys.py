"""Key-naming scheme for entities stored in the key-value backend."""

from __future__ import annotations


def squad(squad_id: str) -> str:
    return f"squad:{squad_id}"


def squad_list(user_id: str) -> str:
    """Ids of squads the user leads."""
    return f"squad:list:{user_id}"


def squad_member(user_id: str) -> str:
    """Ids of squads the user joined as a non-leader member."""
    return f"squad:member:{user_id}"


def chat_message(message_id: str) -> str:
    return f"chat:{message_id}"


def squad_chat(squad_id: str) -> str:
    return f"chat:squad:{squad_id}"


def contributions(squad_id: str, user_id: str) -> str:
    return f"contrib:{squad_id}:{user_id}"


def analytics_queries(day: str) -> str:
    return f"analytics:queries:{day}"


def analytics_tokens(day: str) -> str:
    return f"analytics:tokens:{day}"


ANALYTICS_ACTIVE_USERS = "analytics:active_users"

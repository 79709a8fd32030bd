"""Shared test helpers."""


def auth_header(user) -> dict[str, str]:
    from rewear.services.users import token_for_user
    return {"Authorization": f"Bearer {token_for_user(user)}"}


async def reload(doc):
    """Re-read a document from the database."""
    return await type(doc).get(doc.id)

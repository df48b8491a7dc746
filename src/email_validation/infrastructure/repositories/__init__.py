"""Repository adapters package: explicit public exports.

Call `get_repositories(db_session)` to obtain repository instances.
"""

from weakref import WeakKeyDictionary

# Repositories memoized per db_session so callers get stable instances
_repos_map: "WeakKeyDictionary[object, dict]" = WeakKeyDictionary()


def get_repositories(db_session):
    """Return a simple container of repository instances wired to the given db_session."""
    existing = _repos_map.get(db_session)
    if existing is not None:
        return existing

    # import concrete implementations lazily so callers obtain repositories
    # only via the factory API (get_repositories) rather than top-level imports
    from .email_validation_repository import SqlAlchemyEmailValidationTokenRepository
    from .users_repository import SqlAlchemyUserRepository

    result = {
        "users": SqlAlchemyUserRepository(db_session),
        "email_validation_tokens": SqlAlchemyEmailValidationTokenRepository(db_session),
    }
    _repos_map[db_session] = result
    return result


__all__ = ["get_repositories"]

from dataclasses import asdict

from univerify.api.models import AuthUser
from univerify.session.token_store import TokenStore


class Session:
    """Current bearer token and account shared by every outgoing request.

    When a ``TokenStore`` is attached, ``set_auth`` and ``clear`` write
    through to it so the session survives a restart of the client.
    """

    def __init__(
        self,
        token: str | None = None,
        user: AuthUser | None = None,
        store: TokenStore | None = None,
    ) -> None:
        self._token = token
        self._user = user
        self._store = store

    @classmethod
    def load(cls, store: TokenStore) -> "Session":
        """Build a session from whatever the store holds."""
        data = store.load()
        if data is None:
            return cls(store=store)
        raw_user = data.get("user")
        user = None
        if isinstance(raw_user, dict) and isinstance(raw_user.get("id"), str):
            user = AuthUser(
                id=raw_user["id"],
                email=str(raw_user.get("email") or ""),
                name=str(raw_user.get("name") or ""),
                wallet_address=str(raw_user.get("wallet_address") or ""),
            )
        return cls(token=data["token"], user=user, store=store)

    @property
    def token(self) -> str | None:
        return self._token

    @property
    def user(self) -> AuthUser | None:
        return self._user

    @property
    def is_authenticated(self) -> bool:
        return bool(self._token)

    def set_auth(self, token: str, user: AuthUser | None = None) -> None:
        self._token = token
        self._user = user
        if self._store is not None:
            self._store.save(
                {"token": token, "user": asdict(user) if user is not None else None}
            )

    def clear(self) -> None:
        self._token = None
        self._user = None
        if self._store is not None:
            self._store.clear()

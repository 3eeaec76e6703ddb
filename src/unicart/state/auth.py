"""Authentication store.

Holds the signed-in user and the bearer token.  The user record and the
``is_authenticated`` flag are mirrored to the ``unicart_auth`` slot; the
token lives in its own ``auth_token`` slot so transports can read it
without decoding the store state.

Backend failures never raise out of :meth:`AuthStore.login` or
:meth:`AuthStore.register`; they come back as a failed
:class:`ActionResult` carrying the backend's message.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable

from pydantic import ValidationError

from unicart._constants import AUTH_SLOT, GENERIC_ERROR, NETWORK_ERROR, TOKEN_SLOT
from unicart.client import ShopClient
from unicart.exceptions import AuthenticationError, TransportError, UnicartError
from unicart.models._base import UnicartBaseModel
from unicart.models.result import ActionResult
from unicart.models.user import AuthSession, User
from unicart.state.base import DomainStore
from unicart.state.persistence import PersistencePort, SlotStorage

_logger = logging.getLogger(__name__)


class AuthState(UnicartBaseModel):
    user: User | None = None
    is_authenticated: bool = False
    is_loading: bool = False


class AuthStore(DomainStore[AuthState]):
    persisted_fields = frozenset({"user", "is_authenticated"})

    def __init__(
        self,
        client: ShopClient,
        *,
        token_storage: SlotStorage | None = None,
        persistence: PersistencePort | None = None,
        name: str = AUTH_SLOT,
    ) -> None:
        self._client = client
        self._token_storage = token_storage
        self._token: str | None = None
        super().__init__(name, AuthState(), persistence=persistence)
        client.set_token_provider(self.token_provider)

    @property
    def token(self) -> str | None:
        return self._token

    @property
    def user(self) -> User | None:
        return self.state.user

    @property
    def is_authenticated(self) -> bool:
        return self.state.is_authenticated

    def token_provider(self) -> str | None:
        return self._token

    # ------------------------------------------------------------------
    # Token slot
    # ------------------------------------------------------------------

    def _read_token(self) -> str | None:
        if self._token_storage is None:
            return None
        try:
            return self._token_storage.get_item(TOKEN_SLOT) or None
        except (OSError, ValueError) as exc:
            _logger.warning("Could not read the auth token slot: %s", exc)
            return None

    def _write_token(self, token: str | None) -> None:
        self._token = token
        if self._token_storage is None:
            return
        try:
            if token is None:
                self._token_storage.remove_item(TOKEN_SLOT)
            else:
                self._token_storage.set_item(TOKEN_SLOT, token)
        except OSError as exc:
            _logger.warning("Could not update the auth token slot; token kept in memory only: %s", exc)

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    async def _authenticate(self, request: Awaitable[AuthSession], action: str) -> ActionResult[User]:
        self._store.set({"is_loading": True})
        try:
            session = await request
        except TransportError as exc:
            _logger.warning("%s failed: %s", action, exc)
            return ActionResult.failure(NETWORK_ERROR, error=exc)
        except UnicartError as exc:
            _logger.info("%s rejected: %s", action, exc)
            return ActionResult.failure(str(exc) or f"{action} failed", error=exc)
        except ValidationError as exc:
            _logger.warning("%s returned an unexpected payload: %s", action, exc)
            return ActionResult.failure(GENERIC_ERROR, error=exc)
        finally:
            self._store.set({"is_loading": False})

        self._write_token(session.token)
        self._store.set({"user": session.user, "is_authenticated": True})
        return ActionResult.success(session.user)

    async def login(self, email: str, password: str) -> ActionResult[User]:
        return await self._authenticate(self._client.login(email, password), "Login")

    async def register(
        self,
        email: str,
        password: str,
        *,
        first_name: str | None = None,
        last_name: str | None = None,
    ) -> ActionResult[User]:
        request = self._client.register(email, password, first_name=first_name, last_name=last_name)
        return await self._authenticate(request, "Registration")

    async def refresh_user(self) -> ActionResult[User]:
        """Reload the profile with the current token; a rejected token signs out."""
        if self._token is None:
            return ActionResult.failure("Not signed in")
        try:
            user = await self._client.get_me()
        except AuthenticationError as exc:
            self.logout()
            return ActionResult.failure(str(exc), error=exc)
        except TransportError as exc:
            return ActionResult.failure(NETWORK_ERROR, error=exc)
        except (UnicartError, ValidationError) as exc:
            return ActionResult.failure(str(exc), error=exc)
        self._store.set({"user": user, "is_authenticated": True})
        return ActionResult.success(user)

    async def update_profile(
        self,
        *,
        first_name: str | None = None,
        last_name: str | None = None,
        phone: str | None = None,
    ) -> ActionResult[User]:
        """Save profile fields on the backend and commit the returned user."""
        if self._token is None or self.state.user is None:
            return ActionResult.failure("Not signed in")
        try:
            user = await self._client.update_me(first_name=first_name, last_name=last_name, phone=phone)
        except AuthenticationError as exc:
            self.logout()
            return ActionResult.failure(str(exc), error=exc)
        except TransportError as exc:
            _logger.warning("Profile update failed: %s", exc)
            return ActionResult.failure(NETWORK_ERROR, error=exc)
        except UnicartError as exc:
            _logger.info("Profile update rejected: %s", exc)
            return ActionResult.failure(str(exc) or "Profile update failed", error=exc)
        except ValidationError as exc:
            _logger.warning("Profile update returned an unexpected payload: %s", exc)
            return ActionResult.failure(GENERIC_ERROR, error=exc)
        self._store.set({"user": user})
        return ActionResult.success(user)

    def logout(self) -> None:
        self._write_token(None)
        self._store.set({"user": None, "is_authenticated": False})

    def check_auth(self) -> bool:
        """Restore the session from storage.

        The session counts only when both the token slot and the persisted
        user are present; a half-restored session is cleared.
        """
        token = self._read_token()
        user = self.state.user
        if token and user is not None:
            self._token = token
            self._store.set({"is_authenticated": True})
            return True
        if token or self.state.is_authenticated:
            _logger.info("Discarding incomplete stored session")
            self.logout()
        return False

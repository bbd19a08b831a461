# Author: PB
# Date: 2026-10-19
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ---
# src/fairos/user.py

"""
User account operations.

Signup, login and import capture the fairOS-dfs session cookie and keep it
under the username; delete and logout drop it.
"""

import logging

from fairos.errors import (
    FairOSUserError,
    InvalidPasswordError,
    InvalidUsernameError,
    UsernameAlreadyExistsError,
)
from fairos.mnemonic import generate_mnemonic
from fairos.transport import APIGroup
from fairos.types import SignupResult, UserExport, UserInfo

logger = logging.getLogger(__name__)

SIGNUP_ERRORS = {
    "user signup: user name already present": UsernameAlreadyExistsError,
}

LOGIN_ERRORS = {
    "user login: invalid user name": InvalidUsernameError,
    "user login: invalid password": InvalidPasswordError,
}


class UserAPI(APIGroup):
    """User account endpoints (/user/*)."""

    generate_mnemonic = staticmethod(generate_mnemonic)

    def _store_session(self, username: str, cookie: str | None) -> None:
        if cookie is None:
            raise FairOSUserError(f"Server returned no session cookie for {username!r}")
        self.transport.set_cookie(username, cookie)
        logger.debug(f"Session stored for {username!r}")

    async def signup(
        self, username: str, password: str, mnemonic: str = None
    ) -> SignupResult:
        """
        Create a new account and log in.

        Args:
            username: New user name
            password: Account password
            mnemonic: Optional 12-word phrase; the server generates one if omitted

        Returns:
            SignupResult with the account address and, when the server
            generated it, the mnemonic.

        Raises:
            UsernameAlreadyExistsError: If the name is taken
            FairOSUserError: For any other server error
        """
        data, cookie = await self._post(
            "/user/signup",
            {"user_name": username, "password": password, "mnemonic": mnemonic},
            error=FairOSUserError,
            known=SIGNUP_ERRORS,
        )
        self._store_session(username, cookie)
        return SignupResult(address=data["address"], mnemonic=data.get("mnemonic") or None)

    async def login(self, username: str, password: str) -> None:
        """
        Log in and keep the session cookie.

        Raises:
            InvalidUsernameError: If the user does not exist
            InvalidPasswordError: If the password is wrong
        """
        _, cookie = await self._post(
            "/user/login",
            {"user_name": username, "password": password},
            error=FairOSUserError,
            known=LOGIN_ERRORS,
        )
        self._store_session(username, cookie)

    async def import_with_address(self, username: str, password: str, address: str) -> str:
        """Import an existing account by address. Returns the address."""
        data, cookie = await self._post(
            "/user/import",
            {"user_name": username, "password": password, "address": address},
            error=FairOSUserError,
        )
        self._store_session(username, cookie)
        return data["address"]

    async def import_with_mnemonic(self, username: str, password: str, mnemonic: str) -> str:
        """Import an existing account from its mnemonic. Returns the address."""
        data, cookie = await self._post(
            "/user/import",
            {"user_name": username, "password": password, "mnemonic": mnemonic},
            error=FairOSUserError,
        )
        self._store_session(username, cookie)
        return data["address"]

    async def delete_user(self, username: str, password: str) -> None:
        await self._delete(
            "/user/delete", {"password": password}, username, error=FairOSUserError
        )
        self.transport.remove_cookie(username)

    async def user_exists(self, username: str) -> bool:
        data = await self._get(
            "/user/present", {"user_name": username}, error=FairOSUserError
        )
        return bool(data.get("present"))

    async def is_logged_in(self, username: str) -> bool:
        data = await self._get(
            "/user/isloggedin", {"user_name": username}, error=FairOSUserError
        )
        return bool(data.get("loggedin"))

    async def logout(self, username: str) -> None:
        await self._post("/user/logout", username=username, error=FairOSUserError)
        self.transport.remove_cookie(username)

    async def export_user(self, username: str) -> UserExport:
        data, _ = await self._post("/user/export", username=username, error=FairOSUserError)
        return UserExport.from_api(data)

    async def user_info(self, username: str) -> UserInfo:
        data = await self._get("/user/stat", username=username, error=FairOSUserError)
        return UserInfo.from_api(data)

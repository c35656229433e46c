"""Static wallet signer.

No key material involved. Useful for local development against a backend
that does not check signatures, and for tests.
"""

from univerify.wallet.base import WalletSigner


class StaticWalletSigner(WalletSigner):
    """Returns the same signature for every message."""

    def __init__(self, address: str, signature: str = "0x") -> None:
        self._address = address
        self._signature = signature

    @property
    def address(self) -> str:
        return self._address

    async def sign_message(self, message: str) -> str:
        _ = message
        return self._signature

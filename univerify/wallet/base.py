from abc import ABC, abstractmethod


class WalletSigner(ABC):
    """Contract for wallets that sign upload and login consent messages."""

    @property
    @abstractmethod
    def address(self) -> str:
        """Checksummed wallet address."""

    @abstractmethod
    async def sign_message(self, message: str) -> str:
        """Return a hex signature of ``message`` using personal_sign semantics."""

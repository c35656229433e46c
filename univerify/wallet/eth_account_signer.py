from eth_account import Account
from eth_account.messages import encode_defunct

from univerify.wallet.base import WalletSigner


class EthAccountSigner(WalletSigner):
    """Signs messages locally with an Ethereum private key (EIP-191)."""

    def __init__(self, private_key: str) -> None:
        self._account = Account.from_key(private_key)

    @property
    def address(self) -> str:
        return self._account.address

    async def sign_message(self, message: str) -> str:
        signed = self._account.sign_message(encode_defunct(text=message))
        signature = signed.signature.hex()
        return signature if signature.startswith("0x") else f"0x{signature}"

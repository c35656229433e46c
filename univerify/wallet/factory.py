from univerify.config.settings import Settings
from univerify.wallet.base import WalletSigner
from univerify.wallet.eth_account_signer import EthAccountSigner


class WalletSignerFactory:
    """Creates the configured wallet signer, if any."""

    @classmethod
    def create(cls, settings: Settings) -> WalletSigner | None:
        key = settings.wallet_private_key.strip()
        if not key:
            return None
        return EthAccountSigner(key)

"""Wallet handle: public key plus (in live mode) the signing keypair.

The secret key is held only inside the solders Keypair and is never logged.
"""

import base58
from solders.keypair import Keypair
from solders.transaction import VersionedTransaction

from meanrev.config import WalletSettings
from meanrev.exceptions import StartupError, SwapError


class Wallet:
    """Trading wallet.

    Args:
        public_key: Base58 wallet address.
        keypair: Signing keypair. None for a watch-only (paper) wallet.
    """

    def __init__(self, public_key: str, keypair: Keypair | None = None) -> None:
        self._public_key = public_key
        self._keypair = keypair

    @classmethod
    def from_settings(cls, settings: WalletSettings) -> "Wallet":
        """Build a wallet from settings.

        A configured private key makes a signing wallet whose address is
        derived from the key; otherwise the wallet is watch-only.

        Raises:
            StartupError: If the private key cannot be decoded or does not
                match the configured public key.
        """
        secret = settings.private_key.get_secret_value()
        if not secret:
            return cls.paper(settings.public_key)

        try:
            keypair = Keypair.from_bytes(base58.b58decode(secret))
        except ValueError as e:
            raise StartupError("WALLET_PRIVATE_KEY is not a valid base58 keypair") from e

        derived = str(keypair.pubkey())
        if settings.public_key and settings.public_key != derived:
            raise StartupError(
                f"WALLET_PUBLIC_KEY {settings.public_key} does not match the private key ({derived})"
            )
        return cls(derived, keypair)

    @classmethod
    def paper(cls, public_key: str = "") -> "Wallet":
        """Watch-only wallet for paper trading."""
        return cls(public_key, None)

    @property
    def public_key(self) -> str:
        return self._public_key

    @property
    def can_sign(self) -> bool:
        return self._keypair is not None

    def sign(self, transaction: VersionedTransaction) -> VersionedTransaction:
        """Return ``transaction`` signed by this wallet's keypair.

        Raises:
            SwapError: If the wallet is watch-only.
        """
        if self._keypair is None:
            raise SwapError("Wallet has no private key; cannot sign transactions")
        return VersionedTransaction(transaction.message, [self._keypair])

    def __repr__(self) -> str:
        return f"Wallet(public_key={self._public_key!r}, can_sign={self.can_sign})"

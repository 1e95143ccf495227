"""Tests for Wallet construction and signing."""

import pytest
from solders.hash import Hash
from solders.keypair import Keypair
from solders.message import MessageV0
from solders.signature import Signature
from solders.transaction import VersionedTransaction

from meanrev.config import WalletSettings
from meanrev.exceptions import StartupError, SwapError
from meanrev.execution.wallet import Wallet


def make_unsigned_transaction(payer: Keypair) -> VersionedTransaction:
    """Build an unsigned (default-signature) v0 transaction paid by ``payer``."""
    message = MessageV0.try_compile(payer.pubkey(), [], [], Hash.default())
    return VersionedTransaction.populate(message, [Signature.default()])


class TestFromSettings:

    def test_no_private_key_gives_watch_only_wallet(self) -> None:
        wallet = Wallet.from_settings(WalletSettings(public_key="WatchOnly111"))

        assert wallet.public_key == "WatchOnly111"
        assert wallet.can_sign is False

    def test_private_key_derives_public_key(self) -> None:
        keypair = Keypair()

        wallet = Wallet.from_settings(WalletSettings(private_key=str(keypair)))

        assert wallet.public_key == str(keypair.pubkey())
        assert wallet.can_sign is True

    def test_invalid_private_key_is_startup_error(self) -> None:
        with pytest.raises(StartupError, match="base58"):
            Wallet.from_settings(WalletSettings(private_key="not-a-key"))

    def test_wrong_length_key_is_startup_error(self) -> None:
        # Valid base58 that decodes to 4 bytes, not a 64-byte keypair
        with pytest.raises(StartupError, match="base58"):
            Wallet.from_settings(WalletSettings(private_key="1111"))

    def test_mismatched_public_key_is_startup_error(self) -> None:
        keypair = Keypair()
        other = Keypair()

        with pytest.raises(StartupError, match="does not match"):
            Wallet.from_settings(
                WalletSettings(public_key=str(other.pubkey()), private_key=str(keypair))
            )

    def test_repr_hides_secret(self) -> None:
        keypair = Keypair()
        wallet = Wallet.from_settings(WalletSettings(private_key=str(keypair)))

        assert str(keypair) not in repr(wallet)


class TestSign:

    def test_watch_only_wallet_cannot_sign(self) -> None:
        payer = Keypair()

        with pytest.raises(SwapError):
            Wallet.paper(str(payer.pubkey())).sign(make_unsigned_transaction(payer))

    def test_sign_fills_payer_signature(self) -> None:
        payer = Keypair()
        wallet = Wallet(str(payer.pubkey()), payer)

        signed = wallet.sign(make_unsigned_transaction(payer))

        assert len(signed.signatures) == 1
        assert signed.signatures[0] != Signature.default()

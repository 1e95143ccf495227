"""Custom exceptions for the mean-reversion swap bot.

Every error the trading loop can recover from, and the one it cannot
(StartupError), lives here to avoid circular imports between modules.
"""


class BotError(Exception):
    """Base exception for all bot errors."""


class QuoteError(BotError):
    """Raised when a price quote or token lookup fails (network or API)."""


class PersistenceError(BotError):
    """Raised when the price history snapshot cannot be loaded or saved."""


class SwapError(BotError):
    """Raised when a swap cannot be quoted, built, signed, sent or confirmed."""


class StartupError(BotError):
    """Raised when startup metadata is unavailable. Fatal: the bot does not start."""

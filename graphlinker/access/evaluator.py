"""Authorization evaluator: which senders may be acted for, and which receivers they may address."""

from typing import Iterable, Optional

from graphlinker.access.models import AllowedAccount, AuthorizationConfig
from graphlinker.access.patterns import ReceiverPattern, compile_patterns, fold_address


def _same_address(left: str, right: str) -> bool:
    return fold_address(left) == fold_address(right)


class AccessEvaluator:
    """Pure decisions over an immutable AuthorizationConfig.

    Receiver patterns are compiled once per account at construction. All methods
    are total over string input: a non-match is a False/None result, never an error.
    """

    def __init__(self, config: AuthorizationConfig):
        self._config = config
        self._patterns: dict[int, tuple[ReceiverPattern, ...]] = {
            id(account): compile_patterns(account.allowed_receivers) for account in config
        }

    @property
    def config(self) -> AuthorizationConfig:
        return self._config

    def lookup_account(self, email: str) -> Optional[AllowedAccount]:
        """First configured account whose email matches case-insensitively, or None."""
        if not isinstance(email, str) or not email:
            return None
        for account in self._config:
            if _same_address(account.email, email):
                return account
        return None

    def is_sender_allowed(self, email: str) -> bool:
        return self.lookup_account(email) is not None

    def match_receiver(self, sender_email: str, receiver_email: str) -> Optional[str]:
        """Return the first pattern of the sender's account that matches the receiver, or None."""
        account = self.lookup_account(sender_email)
        if account is None:
            return None
        for pattern in self._patterns[id(account)]:
            if pattern.matches(receiver_email):
                return pattern.pattern
        return None

    def is_receiver_allowed(self, sender_email: str, receiver_email: str) -> bool:
        return self.match_receiver(sender_email, receiver_email) is not None

    def first_disallowed(self, sender_email: str, receivers: Iterable[str]) -> Optional[str]:
        """Return the first receiver, in order, that the sender may not address."""
        for receiver in receivers:
            if not self.is_receiver_allowed(sender_email, receiver):
                return receiver
        return None

"""Credential verifier interface."""

from __future__ import annotations

from abc import ABC, abstractmethod


class AbstractCredentialVerifier(ABC):
    """Checks whether an identifier/secret pair is valid."""

    @abstractmethod
    def verify(self, identifier: str, secret: str) -> bool:
        """Return True when the secret matches the account behind identifier.

        Unknown identifiers return False; implementations never raise for
        bad credentials.
        """
        raise NotImplementedError

"""Certificate validators supplied to the transport to override default trust verification."""

import hashlib
import logging
import ssl
from typing import FrozenSet, Iterable

import httpx

from webrequest.exceptions import ResourceReleasedError

logger = logging.getLogger(__name__)


class CertificateValidator:
    """Base certificate validator.

    A validator contributes two things to a request: the SSL context used for the
    TLS handshake, and a check of the peer's DER-encoded certificate once the
    connection is established. The base class keeps httpx's default trust store
    and accepts every certificate that passes the handshake.

    A validator may be shared across requests. It is disposed only by a request
    that was told to dispose it, after which it can no longer be used.
    """

    def __init__(self) -> None:
        self._disposed = False

    @property
    def disposed(self) -> bool:
        return self._disposed

    def create_ssl_context(self) -> ssl.SSLContext:
        """Returns the SSL context for the handshake."""
        self._ensure_usable()
        return self._build_ssl_context()

    def check_certificate(self, certificate: bytes) -> bool:
        """Returns True if the peer certificate is trusted."""
        self._ensure_usable()
        return self.validate_certificate(certificate)

    def validate_certificate(self, certificate: bytes) -> bool:
        """Override to apply custom verification to the DER-encoded peer certificate."""
        return True

    def dispose(self) -> None:
        if self._disposed:
            return
        self._disposed = True
        logger.debug(f"Disposed certificate validator {self.__class__.__name__}")

    def _build_ssl_context(self) -> ssl.SSLContext:
        return httpx.create_ssl_context()

    def _ensure_usable(self) -> None:
        if self._disposed:
            raise ResourceReleasedError(f"{self.__class__.__name__} has already been disposed")


class AcceptAllCertificateValidator(CertificateValidator):
    """Trusts every peer certificate. Intended for local development against self-signed servers."""

    def _build_ssl_context(self) -> ssl.SSLContext:
        return _unverified_context()


class PinnedCertificateValidator(CertificateValidator):
    """Trusts only peers whose certificate SHA-256 fingerprint is pinned.

    Chain and hostname verification are replaced by the pin check, so a pinned
    self-signed certificate is accepted.

    Args:
        fingerprints: Hex SHA-256 fingerprints of the DER certificates to trust.
            Case and ``:`` separators are ignored.
    """

    def __init__(self, fingerprints: Iterable[str]) -> None:
        super().__init__()
        self.fingerprints: FrozenSet[str] = frozenset(normalize_fingerprint(fp) for fp in fingerprints)
        if not self.fingerprints:
            raise ValueError("PinnedCertificateValidator requires at least one fingerprint")

    def _build_ssl_context(self) -> ssl.SSLContext:
        return _unverified_context()

    def validate_certificate(self, certificate: bytes) -> bool:
        fingerprint = certificate_fingerprint(certificate)
        if fingerprint in self.fingerprints:
            return True
        logger.warning(f"Peer certificate fingerprint {fingerprint} is not pinned")
        return False


def normalize_fingerprint(fingerprint: str) -> str:
    return fingerprint.replace(":", "").strip().lower()


def certificate_fingerprint(certificate: bytes) -> str:
    """Returns the lowercase hex SHA-256 fingerprint of a DER certificate."""
    return hashlib.sha256(certificate).hexdigest()


def _unverified_context() -> ssl.SSLContext:
    context = ssl.create_default_context()
    context.check_hostname = False
    context.verify_mode = ssl.CERT_NONE
    return context

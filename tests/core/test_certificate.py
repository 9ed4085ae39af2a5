import hashlib
import ssl

import pytest
from webrequest.core.certificate import (
    AcceptAllCertificateValidator,
    CertificateValidator,
    PinnedCertificateValidator,
    certificate_fingerprint,
    normalize_fingerprint,
)
from webrequest.exceptions import ResourceReleasedError

CERTIFICATE = b"example-der-bytes"


def test_default_validator_verifies_chain_and_hostname():
    context = CertificateValidator().create_ssl_context()

    assert isinstance(context, ssl.SSLContext)
    assert context.verify_mode == ssl.CERT_REQUIRED
    assert context.check_hostname is True


def test_default_validator_accepts_any_handshaken_certificate():
    assert CertificateValidator().check_certificate(CERTIFICATE) is True


def test_accept_all_validator_disables_verification():
    context = AcceptAllCertificateValidator().create_ssl_context()

    assert context.verify_mode == ssl.CERT_NONE
    assert context.check_hostname is False


@pytest.mark.parametrize(
    "pin",
    [
        hashlib.sha256(CERTIFICATE).hexdigest(),
        hashlib.sha256(CERTIFICATE).hexdigest().upper(),
        ":".join(
            hashlib.sha256(CERTIFICATE).hexdigest()[i : i + 2] for i in range(0, 64, 2)
        ),
    ],
)
def test_pinned_validator_matches_normalized_fingerprints(pin):
    validator = PinnedCertificateValidator([pin])

    assert validator.check_certificate(CERTIFICATE) is True
    assert validator.check_certificate(b"other-certificate") is False


def test_pinned_validator_replaces_chain_verification():
    context = PinnedCertificateValidator(["ab" * 32]).create_ssl_context()

    assert context.verify_mode == ssl.CERT_NONE


def test_pinned_validator_requires_a_fingerprint():
    with pytest.raises(ValueError):
        PinnedCertificateValidator([])


def test_pinned_validator_logs_rejection(caplog):
    validator = PinnedCertificateValidator(["ab" * 32])

    validator.check_certificate(CERTIFICATE)

    assert certificate_fingerprint(CERTIFICATE) in caplog.text


def test_disposed_validator_cannot_be_used():
    validator = CertificateValidator()
    validator.dispose()
    validator.dispose()

    assert validator.disposed is True
    with pytest.raises(ResourceReleasedError):
        validator.create_ssl_context()
    with pytest.raises(ResourceReleasedError):
        validator.check_certificate(CERTIFICATE)


def test_normalize_fingerprint():
    assert normalize_fingerprint(" AB:cd:EF ") == "abcdef"

"""Unit tests for Blake3ContentHashService."""

import blake3
import pytest

from posta.application.services.content_hash_service import Blake3ContentHashService


@pytest.fixture
def service() -> Blake3ContentHashService:
    return Blake3ContentHashService()


class TestFingerprint:
    def test_digest_is_32_bytes(self, service: Blake3ContentHashService) -> None:
        assert len(service.fingerprint("I need school fees")) == 32

    def test_matches_blake3_of_normalized_text(self, service: Blake3ContentHashService) -> None:
        expected = blake3.blake3(b"i need school fees").digest()

        assert service.fingerprint("  I NEED School Fees\n") == expected

    def test_distinct_messages_differ(self, service: Blake3ContentHashService) -> None:
        assert service.fingerprint("school fees") != service.fingerprint("school uniform")

    def test_inner_whitespace_is_significant(self, service: Blake3ContentHashService) -> None:
        assert service.fingerprint("school fees") != service.fingerprint("school  fees")

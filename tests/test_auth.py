"""
Tests for ravenlite.auth module

Pure function testing with deterministic inputs/outputs.
"""

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from ravenlite import __version__
from ravenlite.auth import auth_header, client_id, unix_seconds


class TestAuthHeader:
    """Test X-Sentry-Auth header construction."""

    def test_exact_format(self):
        ts = datetime(2023, 11, 14, 22, 13, 20, tzinfo=timezone.utc)

        header = auth_header(ts, "pubkey")

        assert header == (
            "Sentry sentry_version=2.0, "
            f"sentry_client=ravenlite/{__version__}, "
            "sentry_timestamp=1700000000, "
            "sentry_key=pubkey"
        )

    def test_deterministic(self):
        ts = datetime(2024, 5, 1, 8, 0, 0, tzinfo=timezone.utc)

        assert auth_header(ts, "k") == auth_header(ts, "k")

    def test_starts_with_protocol_version(self):
        assert auth_header(0, "k").startswith("Sentry sentry_version=2.0")

    def test_epoch_seconds_accepted(self):
        assert "sentry_timestamp=1700000000," in auth_header(1700000000.9, "k")

    def test_secret_key_never_included(self):
        """Only the public key is sent."""
        header = auth_header(0, "public-only")

        assert "sentry_secret" not in header
        assert header.endswith("sentry_key=public-only")


class TestUnixSeconds:
    """Test timestamp conversion."""

    def test_aware_datetime(self):
        ts = datetime(1970, 1, 1, 0, 1, 0, tzinfo=timezone.utc)

        assert unix_seconds(ts) == 60

    def test_naive_datetime_is_utc(self):
        assert unix_seconds(datetime(1970, 1, 1, 0, 0, 10)) == 10

    def test_offset_datetime(self):
        ts = datetime(1970, 1, 1, 1, 0, 0, tzinfo=timezone(timedelta(hours=1)))

        assert unix_seconds(ts) == 0

    def test_fraction_truncated(self):
        ts = datetime(1970, 1, 1, 0, 0, 5, 999999, tzinfo=timezone.utc)

        assert unix_seconds(ts) == 5


def test_client_id():
    assert client_id() == f"ravenlite/{__version__}"

"""Tests for PostHog event tracking."""

from unittest.mock import MagicMock

import pytest

from app import analytics


class TestAnalytics:
    def test_missing_key_disables_tracking(self):
        analytics.init_posthog("")
        analytics.track_prize_issued("p", "tx-1")  # no client, no error
        assert analytics._posthog_client is None

    def test_events_are_captured(self, monkeypatch: pytest.MonkeyPatch):
        fake_client = MagicMock()
        monkeypatch.setattr(analytics, "_posthog_client", fake_client)

        analytics.track_prize_failed("p", "Minting service returned 500", 500)

        fake_client.capture.assert_called_once()
        kwargs = fake_client.capture.call_args.kwargs
        assert kwargs["event"] == "prize_issue_failed"
        assert kwargs["properties"]["status_code"] == 500

    def test_capture_errors_are_logged_not_raised(self, monkeypatch: pytest.MonkeyPatch):
        fake_client = MagicMock()
        fake_client.capture.side_effect = RuntimeError("network")
        monkeypatch.setattr(analytics, "_posthog_client", fake_client)

        analytics.track_game_exhausted("p", 20)

        fake_client.capture.assert_called_once()

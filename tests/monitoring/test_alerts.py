"""
Unit tests for alert message builders and test-mode fixtures.
It asserts expected behavior and guards against regressions in the corresponding component.
"""

from datetime import UTC, datetime

from squid_manager.monitoring.alerts import out_of_sync_alert, squid_details_url
from squid_manager.monitoring.fixtures import mock_squids
from squid_manager.squids.networks import Network

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)


def test_details_url_encodes_service_and_network() -> None:
    squid = mock_squids(now=NOW)[0]

    url = squid_details_url("https://decentraland.zone/squid-management-ui", squid, "MATIC")

    assert url == (
        "https://decentraland.zone/squid-management-ui?squid=mock-marketplace-squid-server&network=MATIC"
    )


def test_out_of_sync_alert_layout() -> None:
    squid = mock_squids(now=NOW)[0]
    metric = squid.metrics[Network.ETHEREUM]

    message = out_of_sync_alert(
        squid=squid, network="ETHEREUM", metric=metric, env_prefix="[DEV]", base_url="https://ui", now=NOW
    )

    assert message.text.startswith("[DEV]")
    blocks = message.blocks_payload()
    assert blocks is not None
    assert [block["type"] for block in blocks] == ["header", "section", "section", "section", "context"]
    field_texts = [item["text"] for item in blocks[2]["fields"]]
    assert "*⏱️ Current ETA:* 30 seconds" in field_texts
    assert "*📦 Last block:* 18500000" in field_texts
    assert blocks[4]["elements"][0]["text"] == "*🕒 Date:* 2026-03-01 12:00:00 UTC"


def test_mock_squids_are_fresh_and_active() -> None:
    first = mock_squids(now=NOW)
    first[0].metrics.clear()

    second = mock_squids(now=NOW)
    assert second[0].is_active
    assert second[0].metrics[Network.MATIC].sync_eta_seconds == 0.0
    assert mock_squids(force_eta_unavailable=True, now=NOW)[0].metrics[Network.MATIC].sync_eta_seconds is None

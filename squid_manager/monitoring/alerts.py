# This module builds the Slack messages the squid monitor sends.
# It exists so alert wording and layout live in one place and tests can assert on message content.
# Every builder returns a fallback text plus header, body, field grid, and a dated context footer.

from __future__ import annotations

from datetime import datetime
from urllib.parse import urlencode

from squid_manager.notifications.slack import MessageBlock, SlackMessage, context, fields, header, section
from squid_manager.squids.types import Squid, SquidMetric


def squid_details_url(base_url: str, squid: Squid, network: str) -> str:
    return f"{base_url}?{urlencode({'squid': squid.service_name, 'network': network})}"


def _format_number(value: float | None) -> str:
    if value is None:
        return "n/a"
    if float(value).is_integer():
        return str(int(value))
    return str(value)


def _date_footer(now: datetime) -> MessageBlock:
    return context(f"*🕒 Date:* {now.strftime('%Y-%m-%d %H:%M:%S %Z').strip()}")


def no_metrics_alert(*, squid: Squid, network: str, env_prefix: str, base_url: str, now: datetime) -> SlackMessage:
    url = squid_details_url(base_url, squid, network)
    return SlackMessage(
        text=f"{env_prefix} ⚠️ ALERT: No metrics for Squid '{squid.name}' on network {network}",
        blocks=(
            header(f"{env_prefix} ⚠️ ALERT: No metrics"),
            section(f"📭 No metrics could be read for Squid *{squid.name}* on network *{network}*"),
            fields(f"*🆔 ID:* {squid.service_name}", f"*📊 Schema:* {squid.schema_name}"),
            section(f"*⚙️ Please check the Squid status:* <{url}|View Details>"),
            _date_footer(now),
        ),
    )


def eta_unavailable_alert(
    *, squid: Squid, network: str, env_prefix: str, base_url: str, now: datetime
) -> SlackMessage:
    url = squid_details_url(base_url, squid, network)
    return SlackMessage(
        text=f"{env_prefix} ⚠️ ALERT: Cannot read ETA for Squid '{squid.name}' on network {network}",
        blocks=(
            header(f"{env_prefix} ⚠️ ALERT: ETA unavailable"),
            section(f"🔍 Cannot read ETA for Squid *{squid.name}* on network *{network}*"),
            fields(f"*🆔 ID:* {squid.service_name}", f"*📊 Schema:* {squid.schema_name}"),
            section(f"*⚙️ Please check the Squid status:* <{url}|View Details>"),
            _date_footer(now),
        ),
    )


def out_of_sync_alert(
    *,
    squid: Squid,
    network: str,
    metric: SquidMetric,
    env_prefix: str,
    base_url: str,
    now: datetime,
) -> SlackMessage:
    url = squid_details_url(base_url, squid, network)
    return SlackMessage(
        text=f"{env_prefix} ⚠️ ALERT: Squid '{squid.name}' on network {network} is out of sync",
        blocks=(
            header(f"{env_prefix} ⚠️ ALERT: Squid out of sync"),
            section(f"🔄 Squid *{squid.name}* on network *{network}* is out of sync"),
            fields(
                f"*🆔 ID:* {squid.service_name}",
                f"*📊 Schema:* {squid.schema_name}",
                f"*⏱️ Current ETA:* {_format_number(metric.sync_eta_seconds)} seconds",
                f"*📦 Last block:* {_format_number(metric.last_block)}",
                f"*⛓️ Chain height:* {_format_number(metric.chain_height)}",
            ),
            section(f"*🛠️ Actions:* <{url}|View Details>"),
            _date_footer(now),
        ),
    )


def monitor_error_alert(*, error_message: str, env_prefix: str, now: datetime) -> SlackMessage:
    return SlackMessage(
        text=f"{env_prefix} 🚨 ERROR: There was a problem monitoring the Squids",
        blocks=(
            header(f"{env_prefix} 🚨 ERROR: Squid Monitoring"),
            section(f"*❌ There was a problem monitoring the Squids:* {error_message}"),
            _date_footer(now),
        ),
    )

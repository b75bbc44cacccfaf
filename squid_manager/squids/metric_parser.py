"""
Parser for the plaintext metrics exposition served by each squid processor.
Only four processor gauges are read; anything the blob does not carry comes back as None.
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Final

from squid_manager.squids.types import SquidMetric

SYNC_ETA_SECONDS: Final[str] = "sqd_processor_sync_eta_seconds"
MAPPING_BLOCKS_PER_SECOND: Final[str] = "sqd_processor_mapping_blocks_per_second"
LAST_BLOCK: Final[str] = "sqd_processor_last_block"
CHAIN_HEIGHT: Final[str] = "sqd_processor_chain_height"

_FLOAT_PATTERN: Final[str] = r"[-+]?\d+(?:\.\d*)?(?:[eE][-+]?\d+)?"


@lru_cache(maxsize=32)
def _metric_regex(metric_name: str) -> re.Pattern[str]:
    # Anchored so `foo_last_block` or `last_block_total` never match `last_block`.
    return re.compile(
        rf"^{re.escape(metric_name)}(?:\{{[^}}]*\}})?\s+({_FLOAT_PATTERN})",
        re.MULTILINE,
    )


def parse_metric_value(metrics_text: str, metric_name: str) -> float | None:
    match = _metric_regex(metric_name).search(metrics_text)
    if match is None:
        return None
    return float(match.group(1))


def parse_squid_metric(metrics_text: str) -> SquidMetric:
    return SquidMetric(
        sync_eta_seconds=parse_metric_value(metrics_text, SYNC_ETA_SECONDS),
        mapping_blocks_per_second=parse_metric_value(metrics_text, MAPPING_BLOCKS_PER_SECOND),
        last_block=parse_metric_value(metrics_text, LAST_BLOCK),
        chain_height=parse_metric_value(metrics_text, CHAIN_HEIGHT),
    )

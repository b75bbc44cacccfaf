"""
Unit tests for schema registry queries.
It asserts expected behavior and guards against regressions in the corresponding component.
"""

from squid_manager.squids.registry import SchemaRegistry
from tests.squids.fakes import FakeDatabase, RegistryState, marketplace_state


def test_schema_for_service_returns_latest_indexer_schema() -> None:
    registry = SchemaRegistry(dapps_db=FakeDatabase(marketplace_state()))

    assert registry.schema_for_service("marketplace-squid-server-a-blue-92e812a", "marketplace") == (
        "squid_marketplace_a_blue"
    )
    assert registry.schema_for_service("unknown-squid-server-x", "unknown") is None


def test_active_schema_for_project_reads_squids_table() -> None:
    registry = SchemaRegistry(dapps_db=FakeDatabase(marketplace_state()))

    assert registry.active_schema_for_project("marketplace") == "squid_marketplace_b_green"
    assert registry.active_schema_for_project("missing") is None


def test_credits_project_is_routed_to_credits_database() -> None:
    dapps = FakeDatabase(marketplace_state())
    credits = FakeDatabase(RegistryState(squids={"credits": "squid_credits_a"}))
    registry = SchemaRegistry(dapps_db=dapps, credits_db=credits)

    assert registry.active_schema_for_project("credits") == "squid_credits_a"
    assert registry.database_for_project("credits") is credits
    assert registry.database_for_project("marketplace") is dapps
    assert dapps.queries == []


def test_credits_falls_back_to_dapps_database_when_not_configured() -> None:
    dapps = FakeDatabase(RegistryState(squids={"credits": "squid_credits_a"}))
    registry = SchemaRegistry(dapps_db=dapps)

    assert registry.active_schema_for_project("credits") == "squid_credits_a"


def test_lookups_use_bound_parameters() -> None:
    database = FakeDatabase(marketplace_state())
    registry = SchemaRegistry(dapps_db=database)

    registry.schema_for_service("x'; DROP TABLE public.indexers; --", "x")

    assert all("DROP TABLE" not in query for query in database.queries)
    assert ":service_name" in database.queries[0]

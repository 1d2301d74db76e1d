"""Unit tests for the post-processing pipeline stages."""

import pytest

from infrasizer.shared.schemas import (
    Component,
    DeploymentContext,
    Environment,
    LoadTier,
    NetworkZone,
    ServerRole,
    ServerSpec,
)
from infrasizer.sizing.pipeline import (
    DR_MESSAGE,
    apply_disaster_recovery,
    duplicate_for_high_availability,
    high_availability_applies,
    label_nodes,
    run_post_processing,
    split_combined_servers,
)


def make_server(server_id: str, role: ServerRole, component: Component, name: str = "") -> ServerSpec:
    return ServerSpec(
        id=server_id,
        name=name or server_id,
        cpu_cores=4,
        ram_gb=16,
        storage_gb=300,
        os="RHEL 9",
        load_category=LoadTier.LOW,
        network_zone=NetworkZone.INTERNAL,
        role=role,
        component=component,
    )


@pytest.fixture
def raw_servers():
    """Server list as emitted by the sizers for CRM + marketing + analytics + bot."""
    return [
        make_server("crm-server", ServerRole.COMBINED_APP_DB, Component.CRM, "PROD APP+DB Server (CRM)"),
        make_server("talend-server", ServerRole.AUXILIARY, Component.INTEGRATION),
        make_server("mkt-app-server", ServerRole.APP_SERVER, Component.MARKETING),
        make_server("mkt-db-server", ServerRole.DB_SERVER, Component.MARKETING),
        make_server("analytics-server", ServerRole.ANALYTICS, Component.ANALYTICS),
        make_server("bot-server", ServerRole.APP_SERVER, Component.CONVERSATIONAL_AI),
        make_server("bot-gpu-worker", ServerRole.ACCELERATOR, Component.CONVERSATIONAL_AI),
    ]


class TestSplit:
    """Tests for the production split stage."""

    def test_combined_server_replaced_in_place(self, raw_servers):
        result = split_combined_servers(raw_servers, Environment.PROD)

        assert [s.id for s in result[:3]] == ["crm-app-server", "crm-db-server", "talend-server"]
        assert result[0].name == "PROD APP Server (CRM)"
        assert result[1].name == "PROD DB Server (CRM)"
        assert result[0].role == ServerRole.APP_SERVER
        assert result[1].role == ServerRole.DB_SERVER

    def test_halves_inherit_resources(self, raw_servers):
        app, db = split_combined_servers(raw_servers, Environment.UAT)[:2]

        assert (app.cpu_cores, app.ram_gb, app.storage_gb) == (4, 16, 300)
        assert (db.cpu_cores, db.ram_gb, db.storage_gb) == (4, 16, 300)
        assert app.name.startswith("UAT ")

    def test_no_combined_server_survives(self, raw_servers):
        result = split_combined_servers(raw_servers, Environment.DEV)

        assert all(s.role != ServerRole.COMBINED_APP_DB for s in result)
        assert len(result) == len(raw_servers) + 1

    def test_input_list_not_mutated(self, raw_servers):
        split_combined_servers(raw_servers, Environment.PROD)
        assert raw_servers[0].role == ServerRole.COMBINED_APP_DB


class TestHighAvailability:
    """Tests for HA eligibility and duplication."""

    @pytest.mark.parametrize(
        "environment,ha_enabled,users,expected",
        [
            (Environment.PROD, True, 10, True),
            (Environment.PROD, False, 5000, False),
            (Environment.UAT, True, 200, True),
            (Environment.UAT, True, 100, False),
            (Environment.UAT, True, 50, False),
            (Environment.DEV, True, 5000, False),
        ],
    )
    def test_applies(self, environment, ha_enabled, users, expected):
        context = DeploymentContext(environment=environment, ha_enabled=ha_enabled)
        assert high_availability_applies(context, users) is expected

    def test_only_crm_app_and_db_duplicated(self, raw_servers):
        split = split_combined_servers(raw_servers, Environment.PROD)

        result = duplicate_for_high_availability(split)

        ids = [s.id for s in result]
        assert ids[:4] == [
            "crm-app-server-1",
            "crm-app-server-2",
            "crm-db-server-1",
            "crm-db-server-2",
        ]
        assert ids.count("mkt-app-server") == 1
        assert ids.count("bot-server") == 1
        assert ids.count("bot-gpu-worker") == 1
        assert ids.count("analytics-server") == 1
        assert len(result) == len(split) + 2

    def test_nodes_are_named_and_annotated(self, raw_servers):
        result = duplicate_for_high_availability(
            split_combined_servers(raw_servers, Environment.PROD)
        )

        assert result[0].name == "PROD APP Server (CRM) 1"
        assert result[1].name == "PROD APP Server (CRM) 2"
        assert "HA node 2 of 2" in result[1].additional_notes


class TestDisasterRecovery:
    """Tests for the advisory DR stage."""

    def test_prod_servers_flagged_without_duplication(self, raw_servers):
        context = DeploymentContext(environment=Environment.PROD, dr_enabled=True)

        result, message = apply_disaster_recovery(raw_servers, context)

        assert message == DR_MESSAGE
        assert len(result) == len(raw_servers)
        assert all(s.dr_enabled for s in result)

    @pytest.mark.parametrize(
        "environment,dr_enabled",
        [(Environment.UAT, True), (Environment.DEV, True), (Environment.PROD, False)],
    )
    def test_no_op_outside_prod_or_when_disabled(self, raw_servers, environment, dr_enabled):
        context = DeploymentContext(environment=environment, dr_enabled=dr_enabled)

        result, message = apply_disaster_recovery(raw_servers, context)

        assert message is None
        assert not any(s.dr_enabled for s in result)


class TestLabeling:
    """Tests for node labeling and stage ordering."""

    def test_sequential_labels(self, raw_servers):
        result = label_nodes(raw_servers)

        assert result[0].name == "PROD APP+DB Server (CRM) (Node 1)"
        assert result[-1].name.endswith(f"(Node {len(raw_servers)})")

    def test_labels_reflect_final_order(self, raw_servers):
        context = DeploymentContext(environment=Environment.PROD, ha_enabled=True, dr_enabled=True)

        result, message = run_post_processing(raw_servers, context, crm_active_users=50)

        assert message == DR_MESSAGE
        assert len(result) == len(raw_servers) + 3
        for index, server in enumerate(result, start=1):
            assert server.name.endswith(f"(Node {index})")
        assert result[1].name == "PROD APP Server (CRM) 2 (Node 2)"
        assert result[1].dr_enabled

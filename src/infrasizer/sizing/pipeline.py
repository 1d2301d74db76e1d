"""Post-processing of the assembled server list.

Stages run in a fixed order and each consumes the full output of the previous
one:

1. production split of combined APP+DB servers
2. high-availability duplication of the CRM APP/DB pair
3. disaster-recovery advisory
4. sequential node labeling

Stages select servers by ``role`` and ``component`` tags only.
"""

import logging

from ..shared.schemas import (
    Component,
    DeploymentContext,
    Environment,
    ServerRole,
    ServerSpec,
)

logger = logging.getLogger(__name__)

COMPONENT_LABELS = {
    Component.CRM: "CRM",
    Component.MARKETING: "Marketing",
    Component.CONVERSATIONAL_AI: "R-Yabot",
    Component.MESSAGING: "Rocket.Chat",
}

HA_ROLES = {ServerRole.APP_SERVER, ServerRole.DB_SERVER}
HA_COMPONENTS = {Component.CRM}

DR_MESSAGE = (
    "Disaster Recovery enabled: all production servers are marked DR-enabled. "
    "Provision an equivalent standby footprint at the secondary site and replicate "
    "databases and file storage asynchronously."
)


def split_combined_servers(servers: list[ServerSpec], environment: Environment) -> list[ServerSpec]:
    """
    Replace every combined APP+DB server with separate APP and DB servers.

    Both halves inherit the combined server's resources. Servers with any other
    role (including consolidated analytics servers) pass through untouched.

    Args:
        servers: Raw server list from the sizers
        environment: Environment tier used in the new display names

    Returns:
        New server list with the same ordering, split servers in place
    """
    result: list[ServerSpec] = []
    for server in servers:
        if server.role != ServerRole.COMBINED_APP_DB:
            result.append(server)
            continue

        label = COMPONENT_LABELS.get(server.component, server.component.value)
        result.append(
            server.model_copy(
                update={
                    "id": f"{server.component.value}-app-server",
                    "name": f"{environment.value} APP Server ({label})",
                    "specification": "Application Server",
                    "role": ServerRole.APP_SERVER,
                }
            )
        )
        result.append(
            server.model_copy(
                update={
                    "id": f"{server.component.value}-db-server",
                    "name": f"{environment.value} DB Server ({label})",
                    "specification": "Database Server",
                    "role": ServerRole.DB_SERVER,
                }
            )
        )
        logger.debug(f"Split {server.id} into APP and DB servers")
    return result


def high_availability_applies(
    context: DeploymentContext, crm_active_users: int, uat_user_threshold: int = 100
) -> bool:
    """HA runs for PROD, or for UAT above the concurrent-user threshold. Never for DEV."""
    if not context.ha_enabled:
        return False
    if context.environment == Environment.PROD:
        return True
    if context.environment == Environment.UAT:
        return crm_active_users > uat_user_threshold
    return False


def duplicate_for_high_availability(servers: list[ServerSpec]) -> list[ServerSpec]:
    """
    Duplicate the CRM APP and DB servers into two nodes each.

    Conversational-AI, analytics, BI, accelerator, marketing and messaging
    servers are never duplicated.

    Args:
        servers: Server list after the production split

    Returns:
        New server list with each eligible server replaced by nodes 1 and 2
    """
    result: list[ServerSpec] = []
    for server in servers:
        if server.role not in HA_ROLES or server.component not in HA_COMPONENTS:
            result.append(server)
            continue
        for node in (1, 2):
            result.append(
                server.model_copy(
                    update={
                        "id": f"{server.id}-{node}",
                        "name": f"{server.name} {node}",
                        "additional_notes": f"HA node {node} of 2 (active/standby pair)",
                    }
                )
            )
    return result


def apply_disaster_recovery(
    servers: list[ServerSpec], context: DeploymentContext
) -> tuple[list[ServerSpec], str | None]:
    """
    Mark production servers as covered by disaster recovery.

    DR is advisory only: servers are flagged, never duplicated.

    Returns:
        Tuple of (server list, DR advisory message or None)
    """
    if not context.dr_enabled or context.environment != Environment.PROD:
        return servers, None
    flagged = [server.model_copy(update={"dr_enabled": True}) for server in servers]
    return flagged, DR_MESSAGE


def label_nodes(servers: list[ServerSpec]) -> list[ServerSpec]:
    """Append a sequential "(Node N)" suffix based on final list order."""
    return [
        server.model_copy(update={"name": f"{server.name} (Node {index})"})
        for index, server in enumerate(servers, start=1)
    ]


def run_post_processing(
    servers: list[ServerSpec],
    context: DeploymentContext,
    crm_active_users: int,
    uat_user_threshold: int = 100,
) -> tuple[list[ServerSpec], str | None]:
    """
    Run every post-processing stage in order.

    Args:
        servers: Raw server list from the sizers
        context: Deployment context (environment, HA and DR toggles)
        crm_active_users: CRM concurrent users, used by the UAT HA rule
        uat_user_threshold: Concurrent users above which HA applies to UAT

    Returns:
        Tuple of (final server list, DR advisory message or None)
    """
    servers = split_combined_servers(servers, context.environment)

    if high_availability_applies(context, crm_active_users, uat_user_threshold):
        servers = duplicate_for_high_availability(servers)
        logger.info(f"High availability applied ({context.environment.value})")

    servers, dr_message = apply_disaster_recovery(servers, context)

    return label_nodes(servers), dr_message

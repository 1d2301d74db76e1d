"""Infrastructure calculation engine.

Pure and synchronous: the resolved ``ConfigTable`` is passed in, nothing is
read from or written to shared state, and identical inputs always produce an
identical ``CalculationResult``. Callers that need several environment tiers
invoke the engine once per tier.
"""

import logging
from typing import Any

from ..knowledge_base.calculation_config import resolve_config
from ..shared.schemas import (
    CalculationResult,
    CloudCostEstimate,
    ConfigTable,
    DeploymentModel,
    ServerSpec,
    SizingRequest,
)
from .metrics import application_metrics, bot_metrics
from .pipeline import run_post_processing
from .sizers import ServerSizer

logger = logging.getLogger(__name__)

SAAS_MESSAGE = (
    "Fully-managed (SaaS) deployment: infrastructure is provisioned and operated by "
    "the provider under usage-based pricing. No customer servers are required."
)


def calculate_infra(
    request: SizingRequest, config: ConfigTable | dict[str, Any] | None = None
) -> CalculationResult:
    """
    Size the infrastructure for one request in one environment tier.

    Args:
        request: Workload, component selection and deployment context
        config: Resolved tuning table, a raw config snapshot, or None for defaults

    Returns:
        CalculationResult with the final server list, metrics and advisories
    """
    if not isinstance(config, ConfigTable):
        config = resolve_config(config)

    context = request.context
    workload = request.workload
    logger.info(
        f"Calculating infra for client={request.client_name or 'N/A'} "
        f"env={context.environment.value} model={context.deployment_model.value}"
    )

    crm_metrics = application_metrics(workload.crm)
    result_fields: dict[str, Any] = {
        "client_name": request.client_name,
        "industry": context.industry,
        "environment": context.environment,
        "solution_type": context.deployment_model,
        "crm_metrics": crm_metrics,
        "marketing_metrics": application_metrics(workload.marketing),
        "bot_metrics": bot_metrics(workload.bot),
    }

    if context.deployment_model == DeploymentModel.FULLY_MANAGED:
        logger.info("Fully-managed deployment model: skipping server sizing")
        return CalculationResult(servers=[], saas_message=SAAS_MESSAGE, **result_fields)

    servers, cloud_cost = _size_components(request, config)
    servers, dr_message = run_post_processing(
        servers,
        context,
        crm_metrics.active_load_users,
        uat_user_threshold=config.ha_uat_concurrent_users,
    )
    logger.info(f"Sized {len(servers)} server nodes for {context.environment.value}")

    return CalculationResult(
        servers=servers,
        rya_bot_cloud_cost=cloud_cost,
        dr_message=dr_message,
        **result_fields,
    )


def _size_components(
    request: SizingRequest, config: ConfigTable
) -> tuple[list[ServerSpec], CloudCostEstimate | None]:
    """Run each enabled sizer and assemble the raw server list."""
    sizer = ServerSizer(request, config)
    solutions = request.solutions
    servers: list[ServerSpec] = []
    cloud_cost = None

    if solutions.crm:
        servers.extend(sizer.size_crm())
    if solutions.marketing:
        servers.extend(sizer.size_marketing())

    # Analytics runs regardless of its selection flags
    servers.extend(sizer.size_analytics())

    if solutions.conversational_ai:
        bot_servers, cloud_cost = sizer.size_conversational_ai()
        servers.extend(bot_servers)
    if solutions.messaging:
        servers.append(sizer.size_messaging())
    if sizer.requires_forward_proxy():
        servers.append(sizer.size_forward_proxy())

    return servers, cloud_cost

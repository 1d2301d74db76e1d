"""Per-component server sizing.

Each sizer maps derived load metrics to a load tier using the config table's
two ordered thresholds, picks the tier's base resource tuple, scales it by the
environment multiplier and applies component floors. Servers are tagged with a
structural role and origin component so the post-processing pipeline never
has to inspect display names.
"""

import logging
import math

from ..shared.schemas import (
    AcceleratorSpec,
    BotMode,
    CloudCostEstimate,
    Component,
    ConfigTable,
    DeploymentModel,
    Industry,
    LoadTier,
    NetworkZone,
    ResourceSpec,
    ServerRole,
    ServerSpec,
    SizingRequest,
)
from ..shared.schemas.config import ResourceFloor
from .metrics import active_users, bot_metrics, triggers_per_second
from .tiers import (
    classify_application_tier,
    classify_load_tier,
    scale_resources,
    spec_for_tier,
)

logger = logging.getLogger(__name__)

LINUX_OS = "RHEL 9 / Centos stream 9 x86_64 bit"
WINDOWS_OS = "Windows Server 2016+"

# Effective conversational-AI hosting for each (deployment model, bot mode) pair.
# Cloud deployments always consume the model through a managed API.
BOT_HOSTING = {
    (DeploymentModel.ON_PREM, BotMode.SELF_HOSTED): BotMode.SELF_HOSTED,
    (DeploymentModel.ON_PREM, BotMode.MANAGED_API): BotMode.MANAGED_API,
    (DeploymentModel.ON_CLOUD, BotMode.SELF_HOSTED): BotMode.MANAGED_API,
    (DeploymentModel.ON_CLOUD, BotMode.MANAGED_API): BotMode.MANAGED_API,
}


def resolve_bot_hosting(deployment_model: DeploymentModel, bot_mode: BotMode) -> BotMode:
    """Look up the effective conversational-AI hosting mode."""
    return BOT_HOSTING.get((deployment_model, bot_mode), bot_mode)


class ServerSizer:
    """Size the servers of every optional software component."""

    def __init__(self, request: SizingRequest, config: ConfigTable):
        """
        Initialize the sizer for one request.

        Args:
            request: Workload, component selection and deployment context
            config: Resolved tuning table
        """
        self.request = request
        self.config = config
        self.env = request.context.environment
        self.multiplier = config.multiplier_for(self.env)

        workload = request.workload
        self.crm_active_users = active_users(workload.crm)
        self.crm_triggers_per_sec = triggers_per_second(workload.crm)
        self.marketing_active_users = active_users(workload.marketing)
        self.marketing_triggers_per_sec = triggers_per_second(workload.marketing)
        self.bot = bot_metrics(workload.bot)

    def _server(
        self,
        server_id: str,
        name: str,
        resources: tuple[int, int, int],
        tier: LoadTier,
        zone: NetworkZone,
        role: ServerRole,
        component: Component,
        specification: str = "",
        os: str = LINUX_OS,
        **extra,
    ) -> ServerSpec:
        cpu, ram, hdd = resources
        return ServerSpec(
            id=server_id,
            name=name,
            specification=specification,
            cpu_cores=cpu,
            ram_gb=ram,
            storage_gb=hdd,
            os=os,
            load_category=tier,
            network_zone=zone,
            role=role,
            component=component,
            **extra,
        )

    @staticmethod
    def _fixed(spec: ResourceSpec) -> tuple[int, int, int]:
        return math.ceil(spec.cpu), math.ceil(spec.ram), math.ceil(spec.hdd)

    def size_crm(self) -> list[ServerSpec]:
        """
        Size the CRM application + database host and its integration server.

        The combined host is split into separate APP and DB servers later in
        the pipeline.

        Returns:
            [combined APP+DB server, integration/ETL server]
        """
        config = self.config
        tier = classify_application_tier(
            self.crm_triggers_per_sec, self.crm_active_users, config.crm_thresholds
        )
        cpu, ram, hdd = scale_resources(
            spec_for_tier(config.crm_specs, tier),
            self.multiplier,
            floor=config.crm_floor,
            power_of_two=config.power_of_two_cpu.crm,
        )
        hdd = max(hdd, math.ceil(self.request.workload.data_volume_gb * config.crm_storage_factor))
        logger.debug(
            f"CRM tier={tier.value} (triggers/sec={self.crm_triggers_per_sec:.2f}, "
            f"concurrent_users={self.crm_active_users}) -> {cpu} cores / {ram} GB / {hdd} GB"
        )

        crm_server = self._server(
            "crm-server",
            f"{self.env.value} APP+DB Server (CRM)",
            (cpu, ram, hdd),
            tier,
            NetworkZone.INTERNAL,
            ServerRole.COMBINED_APP_DB,
            Component.CRM,
        )
        return [crm_server, self.size_integration()]

    def size_integration(self) -> ServerSpec:
        """Fixed-spec Windows integration/ETL server that always accompanies CRM."""
        return self._server(
            "talend-server",
            f"{self.env.value} Talend Server",
            self._fixed(self.config.talend_server),
            LoadTier.MEDIUM,
            NetworkZone.INTERNAL,
            ServerRole.AUXILIARY,
            Component.INTEGRATION,
            specification="Integration Server",
            os=WINDOWS_OS,
        )

    def size_marketing(self) -> list[ServerSpec]:
        """Size the marketing application and database servers (identical specs)."""
        config = self.config
        tier = classify_application_tier(
            self.marketing_triggers_per_sec,
            self.marketing_active_users,
            config.marketing_thresholds,
        )
        resources = scale_resources(
            spec_for_tier(config.marketing_specs, tier),
            self.multiplier,
            floor=config.marketing_floor,
            power_of_two=config.power_of_two_cpu.marketing,
        )
        logger.debug(f"Marketing tier={tier.value} -> {resources}")

        return [
            self._server(
                "mkt-app-server",
                f"{self.env.value} Web Server + Marketing APP",
                resources,
                tier,
                NetworkZone.DMZ,
                ServerRole.APP_SERVER,
                Component.MARKETING,
                specification="Web Server",
            ),
            self._server(
                "mkt-db-server",
                f"{self.env.value} Marketing DB Server",
                resources,
                tier,
                NetworkZone.INTERNAL,
                ServerRole.DB_SERVER,
                Component.MARKETING,
                specification="Database Server",
            ),
        ]

    def _analytics_storage(self) -> int:
        clickhouse = self.config.clickhouse_server
        return math.ceil(
            max(
                clickhouse.base_hdd,
                self.request.workload.data_volume_gb * clickhouse.storage_multiplier,
            )
        )

    def size_analytics(self) -> list[ServerSpec]:
        """
        Size the OLAP and BI servers.

        Small deployments (CRM concurrent users below the split threshold) get
        one consolidated server; larger ones get a dedicated OLAP server and a
        separate BI server.

        Returns:
            One consolidated server, or [OLAP server, BI server]
        """
        config = self.config
        storage = self._analytics_storage()
        scale = config.clickhouse_scale

        if self.crm_active_users < scale.split_concurrent_users:
            clickhouse = config.clickhouse_server
            logger.debug(
                f"Analytics consolidated ({self.crm_active_users} concurrent users "
                f"< {scale.split_concurrent_users})"
            )
            return [
                self._server(
                    "analytics-server",
                    f"{self.env.value} Analytical + Clickhouse + Metabase",
                    (math.ceil(clickhouse.cpu), math.ceil(clickhouse.ram), storage),
                    LoadTier.MEDIUM,
                    NetworkZone.INTERNAL,
                    ServerRole.ANALYTICS,
                    Component.ANALYTICS,
                    specification="Consolidated OLAP + BI",
                )
            ]

        large = self.request.workload.crm.named_users >= scale.user_threshold
        base = scale.large if large else scale.standard
        cpu, ram, _ = scale_resources(
            base,
            self.multiplier,
            floor=ResourceFloor(cpu=base.cpu, ram=base.ram),
            power_of_two=config.power_of_two_cpu.analytics,
        )
        return [
            self._server(
                "clickhouse-server",
                f"{self.env.value} Analytical + Clickhouse",
                (cpu, ram, storage),
                LoadTier.HIGH if large else LoadTier.MEDIUM,
                NetworkZone.INTERNAL,
                ServerRole.ANALYTICS,
                Component.ANALYTICS,
                specification="OLAP Database",
            ),
            self._server(
                "metabase-server",
                f"{self.env.value} Metabase Visualization",
                self._fixed(config.metabase_server),
                LoadTier.LOW,
                NetworkZone.INTERNAL,
                ServerRole.ANALYTICS,
                Component.BI,
                specification="Reporting Engine",
            ),
        ]

    def size_conversational_ai(self) -> tuple[list[ServerSpec], CloudCostEstimate | None]:
        """
        Size the conversational-AI component.

        Returns:
            Tuple of (servers, cloud cost estimate or None when self-hosted)
        """
        context = self.request.context
        hosting = resolve_bot_hosting(context.deployment_model, context.bot_mode)

        if hosting == BotMode.MANAGED_API:
            servers = [self._bot_proxy_server()]
            cost = self.estimate_cloud_cost()
        else:
            servers = self._self_hosted_servers()
            cost = None

        if not self.request.solutions.crm:
            servers.append(self._bot_frontend_server())

        return servers, cost

    def estimate_cloud_cost(self) -> CloudCostEstimate:
        """Monthly token cost: tpm * minutes/month / 1M * cost per million tokens."""
        cloud = self.config.cloud_cost
        monthly_tokens = self.bot.tpm * cloud.minutes_per_month
        monthly_cost = round(monthly_tokens / 1_000_000 * cloud.cost_per_million_tokens, 2)
        return CloudCostEstimate(
            tpm=self.bot.tpm,
            monthly_cost_usd=monthly_cost,
            provider=cloud.provider,
            notes=(
                f"{monthly_tokens:,.0f} tokens/month at "
                f"${cloud.cost_per_million_tokens:.2f} per 1M tokens"
            ),
        )

    def _bot_proxy_server(self) -> ServerSpec:
        return self._server(
            "bot-proxy-server",
            f"{self.env.value} R-Yabot API Proxy Server",
            self._fixed(self.config.bot_proxy_server),
            LoadTier.LOW,
            NetworkZone.INTERNAL,
            ServerRole.AUXILIARY,
            Component.CONVERSATIONAL_AI,
            specification="Managed LLM API Gateway",
            additional_notes="Inference is consumed from a managed API; no GPU required.",
        )

    def _bot_frontend_server(self) -> ServerSpec:
        return self._server(
            "bot-frontend-server",
            f"{self.env.value} R-Yabot Frontend Server",
            self._fixed(self.config.frontend_server),
            LoadTier.LOW,
            NetworkZone.DMZ,
            ServerRole.AUXILIARY,
            Component.CONVERSATIONAL_AI,
            specification="Web Server",
            additional_notes="Hosts the bot UI because no CRM server is deployed.",
        )

    def _self_hosted_servers(self) -> list[ServerSpec]:
        config = self.config
        tpm, rpm = self.bot.tpm, self.bot.requests_per_minute
        tier = classify_load_tier(
            (tpm, rpm),
            (config.bot_thresholds.low_to_medium, config.bot_rpm_thresholds.low_to_medium),
            (config.bot_thresholds.medium_to_high, config.bot_rpm_thresholds.medium_to_high),
        )
        resources = scale_resources(
            spec_for_tier(config.bot_specs, tier),
            self.multiplier,
            floor=config.bot_floor,
            power_of_two=config.power_of_two_cpu.bot_control,
            scale_storage=False,
        )
        logger.debug(f"Bot control tier={tier.value} (tpm={tpm}, rpm={rpm}) -> {resources}")

        servers = [
            self._server(
                "bot-server",
                f"{self.env.value} R-Yabot Control Server",
                resources,
                tier,
                NetworkZone.INTERNAL,
                ServerRole.APP_SERVER,
                Component.CONVERSATIONAL_AI,
                specification="Orchestration / API",
            )
        ]
        if rpm > config.gpu_worker.rpm_threshold:
            servers.append(self._gpu_worker_server())
        return servers

    def _gpu_worker_server(self) -> ServerSpec:
        worker = self.config.gpu_worker
        performance = self.request.workload.bot.performance
        accelerator = getattr(worker.accelerators, performance)
        band = worker.large if self.bot.tpm > worker.tpm_band_threshold else worker.standard
        resources = scale_resources(
            band,
            self.multiplier,
            power_of_two=self.config.power_of_two_cpu.bot_worker,
            scale_storage=False,
        )
        logger.debug(f"GPU worker ({performance}) -> {resources}")

        return self._server(
            "bot-gpu-worker",
            f"{self.env.value} R-Yabot GPU Worker",
            resources,
            LoadTier.ENTERPRISE if performance == "high" else LoadTier.HIGH,
            NetworkZone.PRIVATE,
            ServerRole.ACCELERATOR,
            Component.CONVERSATIONAL_AI,
            specification="LLM Inference Node",
            gpu=AcceleratorSpec(type=accelerator.type, memory=accelerator.memory),
        )

    def size_messaging(self) -> ServerSpec:
        """Standard or large messaging server depending on CRM concurrent users."""
        scale = self.config.rocket_chat
        large = self.crm_active_users > scale.user_threshold
        # Fixed spec: no environment multiplier
        resources = scale_resources(
            scale.large if large else scale.standard,
            1.0,
            power_of_two=self.config.power_of_two_cpu.messaging,
        )
        return self._server(
            "rocketchat-server",
            f"{self.env.value} Rocket.Chat Server",
            resources,
            LoadTier.HIGH if large else LoadTier.MEDIUM,
            NetworkZone.INTERNAL,
            ServerRole.APP_SERVER,
            Component.MESSAGING,
            specification="Messaging Platform",
        )

    def requires_forward_proxy(self) -> bool:
        """BFSI deployments route outbound marketing / AI traffic through a proxy."""
        solutions = self.request.solutions
        return self.request.context.industry == Industry.BFSI and (
            solutions.marketing or solutions.conversational_ai
        )

    def size_forward_proxy(self) -> ServerSpec:
        """Shared forward-proxy server in the DMZ."""
        return self._server(
            "forward-proxy-server",
            f"{self.env.value} Forward Proxy Server",
            self._fixed(self.config.forward_proxy_server),
            LoadTier.LOW,
            NetworkZone.DMZ,
            ServerRole.AUXILIARY,
            Component.SHARED,
            specification="Outbound Proxy",
            additional_notes="Shared by Marketing and R-Yabot for regulated outbound traffic.",
        )

"""Tuning table consumed by the sizing engine.

Every field has a default, so ``ConfigTable()`` is the hardcoded fallback used
whenever the externally stored configuration is missing or malformed. Keys are
accepted in the camelCase form written by the admin configuration store
(``envMultipliers``, ``crmThresholds``, ...) as well as in snake_case.
"""

from pydantic import BaseModel, ConfigDict, Field, PositiveFloat, model_validator
from pydantic.alias_generators import to_camel

from .workload import Environment


class ConfigModel(BaseModel):
    """Base for immutable config sections."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class EnvMultipliers(ConfigModel):
    """Scaling factor per environment tier, keyed DEV / UAT / PROD in the config store."""

    dev: PositiveFloat = Field(0.8, alias="DEV")
    uat: PositiveFloat = Field(1.0, alias="UAT")
    prod: PositiveFloat = Field(1.5, alias="PROD")


class ResourceSpec(ConfigModel):
    """Base resource tuple for one server."""

    cpu: float = Field(..., ge=0, description="CPU cores")
    ram: float = Field(..., ge=0, description="RAM (GB)")
    hdd: float = Field(0, ge=0, description="Storage (GB)")


class TierSpecs(ConfigModel):
    """Resource tuples for the Low / Medium / High load tiers."""

    low: ResourceSpec
    medium: ResourceSpec
    high: ResourceSpec


class ThresholdPair(ConfigModel):
    """One tier boundary on (triggers/sec, users)."""

    triggers_per_sec: float = Field(..., ge=0)
    named_users: float = Field(
        ..., ge=0, description="User-count boundary, compared with concurrent (active) users"
    )


class ApplicationThresholds(ConfigModel):
    """Two ordered boundaries defining Low / Medium / High for an application component."""

    low_to_medium: ThresholdPair
    medium_to_high: ThresholdPair

    @model_validator(mode="after")
    def check_order(self) -> "ApplicationThresholds":
        lower, upper = self.low_to_medium, self.medium_to_high
        if (
            lower.triggers_per_sec > upper.triggers_per_sec
            or lower.named_users > upper.named_users
        ):
            raise ValueError("lowToMedium must not exceed mediumToHigh")
        return self


class ScalarThresholds(ConfigModel):
    """Two ordered boundaries on a single metric."""

    low_to_medium: float = Field(..., ge=0)
    medium_to_high: float = Field(..., ge=0)

    @model_validator(mode="after")
    def check_order(self) -> "ScalarThresholds":
        if self.low_to_medium > self.medium_to_high:
            raise ValueError("lowToMedium must not exceed mediumToHigh")
        return self


class ResourceFloor(ConfigModel):
    """Minimums enforced after environment scaling."""

    cpu: float = 0
    ram: float = 0


class ClickhouseServer(ConfigModel):
    """Consolidated OLAP + BI server used for small deployments."""

    cpu: float = 4
    ram: float = 16
    base_hdd: float = Field(80, description="Storage floor (GB)")
    storage_multiplier: float = Field(1.5, description="Storage per GB of raw data volume")


class ClickhouseScale(ConfigModel):
    """Dedicated OLAP server sizing for larger deployments."""

    split_concurrent_users: int = Field(
        100, description="CRM concurrent users at which OLAP and BI get separate servers"
    )
    user_threshold: int = Field(1000, description="CRM named users at which the large spec applies")
    standard: ResourceSpec = ResourceSpec(cpu=8, ram=24)
    large: ResourceSpec = ResourceSpec(cpu=16, ram=64)


class MessagingScale(ConfigModel):
    """Messaging server sizing on CRM concurrent users."""

    user_threshold: int = 50
    standard: ResourceSpec = ResourceSpec(cpu=4, ram=16, hdd=100)
    large: ResourceSpec = ResourceSpec(cpu=8, ram=24, hdd=100)


class AcceleratorOption(ConfigModel):
    """GPU class offered for a performance preference."""

    type: str
    memory: str


class AcceleratorChoice(ConfigModel):
    """Accelerator offered for each performance preference."""

    average: AcceleratorOption = AcceleratorOption(type="NVIDIA A100", memory="80GB")
    high: AcceleratorOption = AcceleratorOption(type="NVIDIA H100", memory="80GB")


class GpuWorker(ConfigModel):
    """Accelerator-bearing inference worker for self-hosted conversational AI."""

    rpm_threshold: float = Field(200, description="Requests/min above which a worker is added")
    tpm_band_threshold: float = Field(20000, description="TPM above which the large band applies")
    standard: ResourceSpec = ResourceSpec(cpu=8, ram=32, hdd=200)
    large: ResourceSpec = ResourceSpec(cpu=16, ram=64, hdd=200)
    accelerators: AcceleratorChoice = AcceleratorChoice()


class CloudCost(ConfigModel):
    """Token pricing for managed-API conversational AI."""

    cost_per_million_tokens: float = 3.50
    provider: str = "Cloud LLM Provider"
    minutes_per_month: int = 60 * 24 * 30


class CpuRoundingPolicy(ConfigModel):
    """Components whose CPU count is rounded up to the next power of two."""

    crm: bool = True
    marketing: bool = False
    analytics: bool = False
    messaging: bool = False
    bot_control: bool = False
    bot_worker: bool = True


class ConfigTable(ConfigModel):
    """Immutable snapshot of every threshold and base spec the engine uses."""

    env_multipliers: EnvMultipliers = EnvMultipliers()

    crm_thresholds: ApplicationThresholds = ApplicationThresholds(
        low_to_medium=ThresholdPair(triggers_per_sec=10, named_users=300),
        medium_to_high=ThresholdPair(triggers_per_sec=100, named_users=3000),
    )
    crm_specs: TierSpecs = TierSpecs(
        low=ResourceSpec(cpu=2, ram=8, hdd=200),
        medium=ResourceSpec(cpu=4, ram=16, hdd=300),
        high=ResourceSpec(cpu=8, ram=32, hdd=500),
    )
    crm_floor: ResourceFloor = ResourceFloor(cpu=4, ram=16)
    crm_storage_factor: float = Field(1.2, description="CRM storage per GB of raw data volume")

    marketing_thresholds: ApplicationThresholds = ApplicationThresholds(
        low_to_medium=ThresholdPair(triggers_per_sec=10, named_users=300),
        medium_to_high=ThresholdPair(triggers_per_sec=100, named_users=3000),
    )
    marketing_specs: TierSpecs = TierSpecs(
        low=ResourceSpec(cpu=2, ram=8, hdd=80),
        medium=ResourceSpec(cpu=4, ram=12, hdd=120),
        high=ResourceSpec(cpu=8, ram=24, hdd=200),
    )
    marketing_floor: ResourceFloor = ResourceFloor(cpu=4, ram=12)

    bot_thresholds: ScalarThresholds = ScalarThresholds(low_to_medium=5000, medium_to_high=20000)
    bot_rpm_thresholds: ScalarThresholds = ScalarThresholds(low_to_medium=60, medium_to_high=200)
    bot_specs: TierSpecs = TierSpecs(
        low=ResourceSpec(cpu=4, ram=12, hdd=100),
        medium=ResourceSpec(cpu=6, ram=16, hdd=100),
        high=ResourceSpec(cpu=8, ram=32, hdd=100),
    )
    bot_floor: ResourceFloor = ResourceFloor(cpu=0, ram=16)
    gpu_worker: GpuWorker = GpuWorker()
    bot_proxy_server: ResourceSpec = ResourceSpec(cpu=2, ram=8, hdd=50)
    frontend_server: ResourceSpec = ResourceSpec(cpu=2, ram=4, hdd=50)
    cloud_cost: CloudCost = CloudCost()

    talend_server: ResourceSpec = ResourceSpec(cpu=4, ram=16, hdd=200)
    forward_proxy_server: ResourceSpec = ResourceSpec(cpu=2, ram=4, hdd=50)

    clickhouse_server: ClickhouseServer = ClickhouseServer()
    clickhouse_scale: ClickhouseScale = ClickhouseScale()
    metabase_server: ResourceSpec = ResourceSpec(cpu=4, ram=8, hdd=80)

    rocket_chat: MessagingScale = MessagingScale()

    power_of_two_cpu: CpuRoundingPolicy = CpuRoundingPolicy()

    ha_uat_concurrent_users: int = Field(
        100, description="CRM concurrent users above which HA also applies to UAT"
    )

    def multiplier_for(self, environment: Environment) -> float:
        """Scaling factor of an environment tier."""
        return getattr(self.env_multipliers, environment.value.lower())

"""Output schemas: server specifications and the calculation result."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, computed_field

from .workload import DeploymentModel, Environment, Industry


class LoadTier(str, Enum):
    """Load classification of a server."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    ENTERPRISE = "Enterprise"


class NetworkZone(str, Enum):
    DMZ = "DMZ"
    INTERNAL = "Internal"
    PRIVATE = "Private"


class ServerRole(str, Enum):
    """Structural role of a server, used by the post-processing pipeline."""

    APP_SERVER = "AppServer"
    DB_SERVER = "DbServer"
    COMBINED_APP_DB = "CombinedAppDb"
    ACCELERATOR = "Accelerator"
    ANALYTICS = "Analytics"
    AUXILIARY = "Auxiliary"


class Component(str, Enum):
    """Software component a server was sized for."""

    CRM = "crm"
    INTEGRATION = "integration"
    MARKETING = "marketing"
    CONVERSATIONAL_AI = "conversational_ai"
    ANALYTICS = "analytics"
    BI = "bi"
    MESSAGING = "messaging"
    SHARED = "shared"


class AcceleratorSpec(BaseModel):
    """GPU attached to an inference worker."""

    model_config = ConfigDict(frozen=True)

    type: str = Field(..., description="Accelerator class (e.g., NVIDIA A100)")
    memory: str = Field(..., description="Accelerator memory (e.g., 80GB)")


class ServerSpec(BaseModel):
    """One recommended server.

    Instances are frozen: pipeline stages derive new specs with ``model_copy``.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Stable identifier")
    name: str = Field(..., description="Human-readable server name")
    specification: str = Field("", description="Optional specification label")
    cpu_cores: int = Field(..., ge=0)
    ram_gb: int = Field(..., ge=0)
    storage_gb: int = Field(..., ge=0)
    storage_note: str = Field("Available", description="Qualifier appended to the storage figure")
    os: str
    load_category: LoadTier
    network_zone: NetworkZone
    role: ServerRole
    component: Component
    gpu: AcceleratorSpec | None = None
    additional_notes: str | None = None
    dr_enabled: bool = Field(False, description="Covered by the disaster-recovery advisory")

    @computed_field
    @property
    def cpu(self) -> str:
        return f"{self.cpu_cores} Core Xeon Processor or equivalent"

    @computed_field
    @property
    def ram(self) -> str:
        return f"{self.ram_gb} GB"

    @computed_field
    @property
    def hdd(self) -> str:
        return f"{self.storage_gb} GB {self.storage_note}".rstrip()


class ApplicationMetrics(BaseModel):
    """Derived load of a user-facing application component."""

    triggers_per_second: float = 0.0
    active_load_users: int = 0


class BotMetrics(BaseModel):
    """Derived load of the conversational-AI component."""

    requests_per_minute: float = 0.0
    tpm: float = Field(0.0, description="Tokens per minute")


class CloudCostEstimate(BaseModel):
    """Monthly token cost of managed-API conversational AI."""

    tpm: float
    monthly_cost_usd: float
    provider: str
    notes: str


class CalculationResult(BaseModel):
    """Terminal artifact of one engine invocation."""

    model_config = ConfigDict(frozen=True)

    client_name: str = ""
    industry: Industry
    environment: Environment
    solution_type: DeploymentModel
    servers: list[ServerSpec] = Field(default_factory=list)
    crm_metrics: ApplicationMetrics = Field(default_factory=ApplicationMetrics)
    marketing_metrics: ApplicationMetrics = Field(default_factory=ApplicationMetrics)
    bot_metrics: BotMetrics = Field(default_factory=BotMetrics)
    rya_bot_cloud_cost: CloudCostEstimate | None = None
    saas_message: str | None = None
    dr_message: str | None = None

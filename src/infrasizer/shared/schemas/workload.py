"""Input schemas: workload parameters, component selection and deployment context."""

from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class Environment(str, Enum):
    """Deployment tier. Each tier carries a scaling multiplier in the config table."""

    DEV = "DEV"
    UAT = "UAT"
    PROD = "PROD"


class DeploymentModel(str, Enum):
    """How the whole solution is delivered."""

    ON_PREM = "on-prem"
    ON_CLOUD = "on-cloud"
    FULLY_MANAGED = "saas"


class BotMode(str, Enum):
    """Conversational-AI hosting mode."""

    SELF_HOSTED = "premise"
    MANAGED_API = "cloud"


class Industry(str, Enum):
    """Industry / regulatory category of the client."""

    BFSI = "BFSI"
    NON_BFSI = "Non BFSI/Healthcare"


class ApplicationLoad(BaseModel):
    """Load parameters for a user-facing application component (CRM, Marketing)."""

    named_users: int = Field(0, ge=0, description="Total named (licensed) users")
    concurrency_rate: float = Field(
        0, ge=0, le=100, description="Share of named users active at once (percent)"
    )
    triggers_per_minute: float = Field(
        0, ge=0, description="Workflow triggers fired per active user per minute"
    )


class BotLoad(BaseModel):
    """Load parameters for the conversational-AI component."""

    active_users: int = Field(0, ge=0, description="Concurrent active bot users")
    requests_per_minute: float = Field(0, ge=0, description="Requests per user per minute")
    avg_tokens_per_request: float = Field(0, ge=0, description="Average tokens per request")
    performance: Literal["average", "high"] = Field(
        "average", description="Accelerator performance preference for self-hosted inference"
    )


class WorkloadInput(BaseModel):
    """Per-component load parameters."""

    crm: ApplicationLoad = Field(default_factory=ApplicationLoad)
    marketing: ApplicationLoad = Field(default_factory=ApplicationLoad)
    bot: BotLoad = Field(default_factory=BotLoad)
    data_volume_gb: float = Field(0, ge=0, description="Raw data volume (GB/month)")


class ComponentSelection(BaseModel):
    """Optional software components to size. Unknown keys are ignored."""

    model_config = ConfigDict(extra="ignore")

    crm: bool = True
    marketing: bool = False
    conversational_ai: bool = False
    analytics_olap: bool = True
    bi_visualization: bool = True
    messaging: bool = False


class DeploymentContext(BaseModel):
    """Where and how the sized servers will run."""

    environment: Environment = Environment.PROD
    deployment_model: DeploymentModel = DeploymentModel.ON_PREM
    bot_mode: BotMode = BotMode.SELF_HOSTED
    industry: Industry = Industry.BFSI
    ha_enabled: bool = Field(False, description="High-availability duplication of CRM app/db")
    dr_enabled: bool = Field(False, description="Disaster-recovery advisory for production")


class SizingRequest(BaseModel):
    """Complete input of one engine invocation."""

    client_name: str = Field("", description="Client the sizing is prepared for")
    workload: WorkloadInput = Field(default_factory=WorkloadInput)
    solutions: ComponentSelection = Field(default_factory=ComponentSelection)
    context: DeploymentContext = Field(default_factory=DeploymentContext)

    def for_environment(self, environment: Environment) -> "SizingRequest":
        """Return a copy of this request targeting another environment tier."""
        context = self.context.model_copy(update={"environment": environment})
        return self.model_copy(update={"context": context})

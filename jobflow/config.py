# jobflow/config.py

import os
from dataclasses import dataclass, field

# --- Base paths ---
# Project root can be overridden if needed (e.g. for tests or deployment)
BASE_DIR = os.path.abspath(os.getenv("JOBFLOW_BASE_DIR", os.path.join(os.path.dirname(__file__), "..")))


# ---------------------------
# Wizard constants
# ---------------------------

STEP_LABELS = ["Basic Information", "Select Resources", "Configure Job", "Summary"]

GENERIC_SUBMIT_FAILURE = "Failed to create job"


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return float(default)
    return float(raw)


# ---------------------------
# Structured configuration
# ---------------------------

@dataclass(frozen=True)
class WorkflowConfig:
    """Job submission wizard settings.

    Values can be overridden via environment variables:
    - JOBFLOW_NAVIGATION_DELAY_SECONDS
    - JOBFLOW_DEFAULT_RUNTIME_HOURS
    - JOBFLOW_DEFAULT_PRICE_PER_HOUR
    - JOBFLOW_CURRENCY
    - JOBFLOW_SUCCESS_ROUTE
    - JOBFLOW_CATALOG_DIR
    - JOBFLOW_EVENT_LOG_DIR
    """

    # Time the success notification stays visible before navigating away.
    navigation_delay_seconds: float = field(
        default_factory=lambda: _env_float("JOBFLOW_NAVIGATION_DELAY_SECONDS", 2.0)
    )
    default_runtime_hours: float = field(
        default_factory=lambda: _env_float("JOBFLOW_DEFAULT_RUNTIME_HOURS", 1.0)
    )
    # Applied to catalog records that carry no (or a zero) hourly price.
    default_price_per_hour: float = field(
        default_factory=lambda: _env_float("JOBFLOW_DEFAULT_PRICE_PER_HOUR", 1.0)
    )
    currency: str = field(default_factory=lambda: os.getenv("JOBFLOW_CURRENCY", "CAL"))
    success_route: str = field(default_factory=lambda: os.getenv("JOBFLOW_SUCCESS_ROUTE", "/dashboard"))
    catalog_dir: str = field(
        default_factory=lambda: os.getenv("JOBFLOW_CATALOG_DIR", os.path.join(BASE_DIR, "catalog"))
    )
    event_log_dir: str = field(
        default_factory=lambda: os.getenv(
            "JOBFLOW_EVENT_LOG_DIR", os.path.join(BASE_DIR, "ui_state", "submissions")
        )
    )


@dataclass(frozen=True)
class IntakeConfig:
    """Connection settings for the remote job-intake API.

    - JOBFLOW_API_URL
    - JOBFLOW_API_TIMEOUT_SECONDS
    - JOBFLOW_API_TOKEN
    """

    api_url: str = field(default_factory=lambda: os.getenv("JOBFLOW_API_URL", "http://localhost:5000"))
    timeout_seconds: float = field(default_factory=lambda: _env_float("JOBFLOW_API_TIMEOUT_SECONDS", 30.0))
    token: str | None = field(default_factory=lambda: os.getenv("JOBFLOW_API_TOKEN") or None)

    def jobs_url(self) -> str:
        return self.api_url.rstrip("/") + "/jobs"


# Instantiate structured configs
WORKFLOW = WorkflowConfig()
INTAKE = IntakeConfig()

# Flat aliases for callers that need a single value
NAVIGATION_DELAY_SECONDS = WORKFLOW.navigation_delay_seconds
DEFAULT_PRICE_PER_HOUR = WORKFLOW.default_price_per_hour
DEFAULT_RUNTIME_HOURS = WORKFLOW.default_runtime_hours
CURRENCY = WORKFLOW.currency


def get_workflow_config() -> WorkflowConfig:
    """Return a fresh :class:`WorkflowConfig` read from the current environment."""
    return WorkflowConfig()


def get_intake_config() -> IntakeConfig:
    """Return a fresh :class:`IntakeConfig` read from the current environment."""
    return IntakeConfig()

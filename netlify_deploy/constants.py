"""Global constants for netlify-deploy"""

from enum import Enum
import re

APP_NAME = "netlify-deploy"
LOG_FORMAT = "%(message)s"

# Version related
CONFIG_VERSION = "1.0"
STATE_VERSION = "1.0"

# Project identification
PROJECT_CONFIG_FILE = ".netlify-deploy.yaml"
DEFAULT_STATE_DIR = ".netlify-deploy"
DEFAULT_STATE_FILE = f"{DEFAULT_STATE_DIR}/state.json"

# Netlify CLI
DEFAULT_TOOL_COMMAND = "ntl"
DEFAULT_TOOL_PACKAGE = "netlify-cli"
DEFAULT_PACKAGE_MANAGER = "npm"
DEPLOY_VERB = "deploy"
LOGIN_VERB = "login"

# Local Netlify state written by the CLI itself
NETLIFY_FOLDER_NAME = ".netlify"
NETLIFY_STATE_FILE_NAME = "state.json"
NETLIFY_STATE_FILE_PATH = f"{NETLIFY_FOLDER_NAME}/{NETLIFY_STATE_FILE_NAME}"

# Build output
DEFAULT_BUILD_DIR = "dist"

# Executable lookup
DEFAULT_PATHEXT = ".COM;.EXE;.BAT;.CMD"

# Redaction
REDACT_CHAR = "*"
REDACT_MASK_LENGTH = 5

# Process handling
PROCESS_TERMINATE_TIMEOUT = 5.0  # seconds
PROCESS_STREAM_LIMIT = 16 * 1024 * 1024  # bytes buffered per output line
DEFAULT_MAX_PARALLEL = 1

# Prompting
MAX_PROMPT_ATTEMPTS = 3


class StepName:
    """Pipeline step identifiers"""

    CHECK_CLI = "netlify-check-cli"
    INSTALL_CLI = "netlify-install-cli"
    AUTHENTICATE_CLI = "netlify-authenticate-cli"
    RESOLVE_SITE_ID = "netlify-resolve-site-id"
    DEPLOY = "netlify-deploy"

    _FRIENDLY_NAMES = {
        CHECK_CLI: "🔍 Check for Netlify CLI",
        INSTALL_CLI: "📦 Install Netlify CLI",
        AUTHENTICATE_CLI: "🔐 Authenticate with Netlify",
        RESOLVE_SITE_ID: "✅ Resolve Netlify Site ID",
        DEPLOY: "🚀 Deploy to Netlify",
    }

    @classmethod
    def friendly_name(cls, step_name: str) -> str:
        """Get display name for a step, falling back to the identifier"""
        return cls._FRIENDLY_NAMES.get(step_name, step_name)


class SiteSource(Enum):
    """Where a site identifier came from"""
    STATE = "state"
    CONFIGURED = "configured"
    LOCAL_STATE = "local-state"
    PROMPT = "prompt"
    ENVIRONMENT = "environment"
    CREATE_SITE = "create-site"
    NONE = "none"


# Error codes
class ErrorCode:
    TOOL_NOT_FOUND = "ND001"
    INSTALL_FAILED = "ND002"
    AUTHENTICATION_FAILED = "ND003"
    IDENTITY_UNRESOLVED = "ND004"
    DEPLOY_PROCESS_FAILED = "ND005"
    OUTPUT_PARSE_FAILED = "ND006"
    DEPLOY_CANCELLED = "ND007"
    STEP_GRAPH_INVALID = "ND008"
    CONFIG_FORMAT_ERROR = "ND009"
    STATE_STORE_ERROR = "ND010"
    PROCESS_LAUNCH_FAILED = "ND011"


# Environment variables
ENV_AUTH_TOKEN = "NETLIFY_AUTH_TOKEN"
ENV_SITE_ID = "NETLIFY_SITE_ID"
ENV_CONFIG_PATH = "NETLIFY_DEPLOY_CONFIG"
ENV_STATE_PATH = "NETLIFY_DEPLOY_STATE"
ENV_LOG_LEVEL = "NETLIFY_DEPLOY_LOG_LEVEL"

# A broad, non-exhaustive list of CI / pipeline variables
KNOWN_CI_VARIABLES = (
    "CI",
    "CONTINUOUS_INTEGRATION",
    "BUILD_NUMBER",
    "RUN_ID",
    "RUN_NUMBER",
    "GITHUB_ACTIONS",
    "GITHUB_RUN_ID",
    "GITHUB_RUN_NUMBER",
    "GITLAB_CI",
    "GITLAB_CI_PIPELINE_ID",
    "GITLAB_CI_PIPELINE_IID",
    "TF_BUILD",
    "AZP",
    "SYSTEM_TEAMPROJECT",
    "SYSTEM_COLLECTIONURI",
    "AGENT_ID",
    "BUILD_REASON",
    "JENKINS_URL",
    "JOB_NAME",
    "BUILD_TAG",
    "BUILD_ID",
    "BUILD_URL",
    "TEAMCITY_VERSION",
    "BAMBOO_BUILDKEY",
    "BITBUCKET_BUILD_NUMBER",
    "BITBUCKET_COMMIT",
    "BITRISE_BUILD_SLUG",
    "CIRCLECI",
    "DRONE",
    "DRONE_BUILD_NUMBER",
    "DRONE_BUILD_ID",
    "TRAVIS",
    "TRAVIS_BUILD_ID",
    "TRAVIS_PULL_REQUEST",
    "HEROKU_TEST_RUN_ID",
    "WERCKER",
    "WERCKER_GIT_BRANCH",
    "APPVEYOR",
    "APPVEYOR_BUILD_ID",
    "APPVEYOR_REPO_NAME",
    "SEMAPHORE",
    "SEMAPHORE_JOB_ID",
    "WOODPECKER",
    "CI_SYSTEM_NAME",
    "CI_WORKFLOW",
    "CI_PIPELINE_ID",
    "CI_JOB_ID",
    "CI_JOB_NAME",
    "CI_SERVER_URL",
    "CI_SERVER_NAME",
)

# Output scraping patterns
DRAFT_DEPLOY_URL_PATTERN = re.compile(
    r"https?://[A-Za-z0-9-]+(?:--[A-Za-z0-9-]+)?\.netlify\.app\b",
    re.IGNORECASE
)
DEPLOY_LOGS_URL_PATTERN = re.compile(
    r"https?://[^\s|]*?/deploys/[A-Za-z0-9]+[^\s|]*",
    re.IGNORECASE
)

# Validation patterns
TARGET_NAME_PATTERN = re.compile(r"^[a-zA-Z][a-zA-Z0-9_.-]*$")

# Display constants
EMOJI_SUCCESS = "✓"
EMOJI_ERROR = "✗"
EMOJI_WARNING = "⚠"
EMOJI_INFO = "ℹ"
EMOJI_ARROW = "→"
EMOJI_LINK = "🔗"
EMOJI_LOGS = "🪵"
EMOJI_SKIP = "⏭"

# Messages templates
MSG_DEPLOY_SUCCESS = "Deployed successfully"
MSG_DEPLOY_URL = f"\n    {EMOJI_LINK} URL: {{url}}"
MSG_DEPLOY_LOGS = f"\n    {EMOJI_LOGS} Logs: {{logs}}"
MSG_DEPLOY_EXIT_CODE = "Deployment failed with exit code {exit_code}"
MSG_INSTALL_EXIT_CODE = "{package_manager} install exited with code {exit_code}"
MSG_TOKEN_SKIP_LOGIN = "Using provided Netlify auth token for '{target}', skipping login step."

# Interactive prompts
PROMPT_SITE_ID_TITLE = "Netlify project/site ID"
PROMPT_SITE_ID_MESSAGE = (
    "Please provide the Netlify Project/Site ID for '{target}'.\n\n"
    "It can be found in your project configuration, under \"Project information\".\n"
    "Copy the \"Project ID\" value, and paste it here:"
)
PROMPT_SITE_ID_LABEL = "Netlify Project ID"
PROMPT_SITE_ID_PLACEHOLDER = "00000000-0000-0000-0000-000000000000"
PROMPT_SITE_ID_INVALID = "The project/site ID must be a GUID."

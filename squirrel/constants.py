"""
Squirrel CLI Constants

Centralized constants for magic values, defaults, and configuration.
"""

# Configuration files
CONFIG_FILENAME = "squirrel.yml"
PACKAGE_JSON_FILENAME = "package.json"
PACKAGE_JSON_SECTION = "squirrel"
CONFIG_PATH_ENV_VAR = "SQUIRREL_CONFIG"

# Default SSH Configuration
DEFAULT_SSH_PORT = 22
DEFAULT_STRICT_HOST_KEY_CHECKING = "no"
REMOTE_SHELL = "bash -ic"

# Repository
SUPPORTED_REPOSITORY_TYPE = "git"
UPSTREAM_REMOTE = "origin"

# Remote package commands
INSTALL_COMMAND = "npm install"
PRUNE_COMMAND = "npm prune"
START_COMMAND = "authbind --deep npm start"
STOP_COMMAND = "npm stop"
DEPLOY_COMMAND = "npm run deploy"
DEPLOY_ABORT_COMMAND = "npm run deploy-abort"
DEFAULT_MONITOR_COMMAND = "tail -f *.log"

# Diff
DEFAULT_DIFF_FORMAT = "%h %an: %s"

# Notifications
NOTIFICATION_TIMEOUT = 10
DEFAULT_CHAT_USERNAME = "squirrel"

# Exit codes
SPAWN_FAILURE_EXIT_CODE = 255
INTERRUPTED_EXIT_CODE = 130

# Log Configuration
LOG_DIR = ".squirrel/logs"
LOG_DATE_FORMAT = "%Y-%m-%d"
LOG_TIME_FORMAT = "%H-%M-%S"

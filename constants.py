### Common constants ###
# File paths
CONFIG_DIR = "configs"
ALARMS_CONFIG = f"{CONFIG_DIR}/alarms.yml"

# Logging
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


### AWS constants ###
DEFAULT_REGION = "ap-southeast-1"
DEFAULT_SESSION = "AlarmEngine"

# CLI actions
ACTIONS = ["plan", "deploy", "scan", "delete"]

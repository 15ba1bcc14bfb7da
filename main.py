import logging
from pathlib import Path
from typing import List, Optional

import boto3

# Internal Module Imports
from session import SessionManager
from logger import LoggerSetup
from resource_discovery import ResourceScanner
from alarm_engine import AlarmDeployer, ConfigLoader, MonitoringSession
from alarm_engine.alarm_config import AlarmRecord, describe
from utils import dump_yaml, validate_config_paths
from cli_parser import CliParser, CliArgs

# Constants & Config
from constants import LOG_FORMAT

BASE_DIR = Path(__file__).parent


def resolve_config_path(config: str) -> Path:
    """Relative config paths are looked up from the working directory, then BASE_DIR."""
    path = Path(config)
    if path.is_absolute() or path.exists():
        return path
    return BASE_DIR / path


def build_session(
    config_path: Path, aws_session: boto3.Session, logger: logging.Logger
) -> MonitoringSession:
    """Validate and load the alarm configuration, then build the session's alarms."""
    validate_config_paths({"alarms": config_path}, logger)
    config = ConfigLoader.load(config_path)
    scanner = ResourceScanner(aws_session)
    return MonitoringSession.from_config(config, timeout_lookup=scanner.get_timeout_ms)


def log_plan(records: List[AlarmRecord], logger: logging.Logger) -> None:
    if not records:
        logger.info("No alarms defined.")
        return
    logger.info(f"{len(records)} alarms defined:\n{dump_yaml([describe(r) for r in records])}")


def process_alarms(args: CliArgs, logger: logging.Logger) -> None:
    """
    Build the monitoring session from configuration and plan, deploy, scan
    or delete its alarms based on the provided action.
    """
    aws_session = SessionManager.get_session(
        region=args.region, account_id=args.account_id, role=args.role
    )
    session = build_session(resolve_config_path(args.config), aws_session, logger)
    records = session.created_alarms()

    if args.action == "plan":
        log_plan(records, logger)
        return

    deployer = AlarmDeployer(aws_session)
    if args.action == "deploy":
        if args.dry_run:
            logger.info("Dry run mode enabled. No alarms will be deployed.")
            log_plan(records, logger)
        else:
            deployer.deploy_alarms(records)
            logger.info(f"Completed deployment of {len(records)} alarms.")
    elif args.action == "scan":
        alarms = deployer.scan_alarms(session.defaults.alarm_name_prefix)
        logger.info(f"Scanned alarms: {len(alarms)}")
        for alarm in sorted(alarms):
            logger.info(f"  {alarm}")
        missing = [record.name for record in records if record.name not in alarms]
        if missing:
            logger.info(f"Not yet deployed: {missing}")
    elif args.action == "delete":
        if args.dry_run:
            logger.info(f"Dry run mode enabled. Would delete: {[r.name for r in records]}")
        else:
            deployer.delete_alarms(records)
            logger.info(f"Deleted {len(records)} alarms.")
    else:
        logger.error(f"Unknown action: {args.action}")


def main(argv: Optional[List[str]] = None) -> None:
    # Parse CLI arguments using CliParser
    args: CliArgs = CliParser.parse_arguments(argv)

    # Initialize logger (configured once)
    level = logging.DEBUG if args.verbose else logging.INFO
    logger = LoggerSetup(LOG_FORMAT, level).get_logger("main")
    logger.info(f"Starting alarm engine: action={args.action}, config={args.config}")

    try:
        process_alarms(args, logger)
    except Exception as e:
        logger.exception(f"Error processing alarms from {args.config}: {e}")
        raise


if __name__ == "__main__":
    main()

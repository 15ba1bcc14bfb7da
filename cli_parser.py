import argparse
from typing import List, NamedTuple, Optional

from constants import ACTIONS, ALARMS_CONFIG, DEFAULT_REGION


class CliArgs(NamedTuple):
    config: str
    action: str
    dry_run: bool
    region: str
    account_id: Optional[str]
    role: Optional[str]
    verbose: bool


class CliParser:
    @staticmethod
    def parse_arguments(argv: Optional[List[str]] = None) -> CliArgs:
        parser = argparse.ArgumentParser(description="CloudWatch Alarm Engine")
        parser.add_argument(
            "--config",
            "-c",
            type=str,
            default=ALARMS_CONFIG,
            help=f"Path to the alarm configuration file (default: {ALARMS_CONFIG}).",
        )
        parser.add_argument(
            "--action",
            "-a",
            type=str,
            choices=ACTIONS,
            required=True,
            help="Action to perform: 'plan', 'deploy', 'scan', or 'delete'.",
        )
        parser.add_argument(
            "--dry-run",
            "-dr",
            action="store_true",
            help="Log the alarms that would be deployed or deleted without applying any changes.",
        )
        parser.add_argument(
            "--region",
            "-r",
            type=str,
            default=DEFAULT_REGION,
            help=f"AWS region (default: {DEFAULT_REGION}).",
        )
        parser.add_argument(
            "--account-id",
            type=str,
            help="Target AWS account. Requires --role.",
        )
        parser.add_argument(
            "--role",
            type=str,
            help="IAM role to assume in the target account.",
        )
        parser.add_argument(
            "--verbose",
            "-v",
            action="store_true",
            help="Enable debug logging.",
        )
        args = parser.parse_args(argv)
        if bool(args.account_id) != bool(args.role):
            parser.error("--account-id and --role must be given together")

        return CliArgs(
            config=args.config,
            action=args.action,
            dry_run=args.dry_run,
            region=args.region,
            account_id=args.account_id,
            role=args.role,
            verbose=args.verbose,
        )

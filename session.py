import boto3
import logging
from typing import Dict, Optional

from constants import DEFAULT_REGION, DEFAULT_SESSION

logger = logging.getLogger(__name__)


def assume_role(
    account_id: str,
    role: str,
    region: str = DEFAULT_REGION,
    role_session_name: str = DEFAULT_SESSION,
) -> boto3.Session:
    """Assumes a specified role in an AWS account and returns a boto3 Session."""
    role_arn = f"arn:aws:iam::{account_id}:role/{role}"
    try:
        sts_client = boto3.client("sts")
        credentials = sts_client.assume_role(
            RoleArn=role_arn, RoleSessionName=f"{account_id}-{role_session_name}"
        )["Credentials"]

        return boto3.Session(
            aws_access_key_id=credentials["AccessKeyId"],
            aws_secret_access_key=credentials["SecretAccessKey"],
            aws_session_token=credentials["SessionToken"],
            region_name=region,
        )
    except Exception as e:
        logger.error(f"Failed to assume role {role_arn}: {e}")
        raise


class SessionManager:
    _sessions: Dict[str, boto3.Session] = {}

    @classmethod
    def get_session(
        cls,
        region: str = DEFAULT_REGION,
        account_id: Optional[str] = None,
        role: Optional[str] = None,
    ) -> boto3.Session:
        """
        Get or create a boto3 Session. Without an account and role the default
        credential chain is used.
        """
        session_key = f"{account_id}:{role}:{region}"

        if session_key not in cls._sessions:
            if account_id and role:
                cls._sessions[session_key] = assume_role(account_id, role, region)
            else:
                cls._sessions[session_key] = boto3.Session(region_name=region)

        return cls._sessions[session_key]

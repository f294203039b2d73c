"""
helpers shared by the constructs: context lookup, naming and enum conversions
"""
import logging

from aws_cdk import RemovalPolicy
from aws_cdk.aws_logs import RetentionDays
from constructs import Construct

logger = logging.getLogger(__name__)


def get_context(scope: Construct, context: str, required=()) -> dict:
    """
    returns a copy of the named context block, failing on missing blocks or keys
    """
    block = scope.node.try_get_context(context)
    if block is None:
        raise ValueError(f"context block '{context}' is not defined")
    block = dict(block)

    missing = [key for key in required if key not in block]
    if missing:
        raise ValueError(f"context block '{context}' is missing keys: {', '.join(missing)}")

    logger.debug("loaded context block %s with keys %s", context, sorted(block))
    return block


def bucket_name(prefix: str, region: str, account: str) -> str:
    """
    returns the bucket name for the given purpose, region and account
    """
    return f"{prefix}-{region}-{account}"


def get_removal_policy(removal_policy: str) -> RemovalPolicy:
    """
    returns the RemovalPolicy for a context value such as 'destroy' or 'retain'
    """
    try:
        return RemovalPolicy[removal_policy.upper()]
    except KeyError:
        raise ValueError(f"unknown removal policy '{removal_policy}'") from None


def get_log_retention_days(retention: str) -> RetentionDays:
    """
    returns the RetentionDays for a context value such as 'one_week' or 'infinite'
    """
    try:
        return RetentionDays[retention.upper()]
    except KeyError:
        raise ValueError(f"unsupported log retention '{retention}'") from None


def get_log_level(level: str) -> int:
    """
    returns the logging level for a name such as 'debug' or 'INFO'
    """
    value = logging.getLevelName(level.upper())
    if not isinstance(value, int):
        raise ValueError(f"unknown log level '{level}'")
    return value

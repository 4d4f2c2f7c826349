"""Sparkplug 접속 설정 유스케이스 레이어.

domain 레이어만 의존하며, infra 레이어 의존성은 없다.
"""

from sparkplug_client.usecase.validate_connection_options import (
    ConfigIssue,
    check_connection_options,
    validate_connection_options,
)

__all__ = [
    "ConfigIssue",
    "check_connection_options",
    "validate_connection_options",
]

"""접속 설정 적합성 검사 유스케이스.

ConnectionOptions는 생성과 수정 시 검증하지 않으므로,
연결 계층은 세션을 열기 전에 이 모듈로 설정을 한 번 검사한다.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from enum import StrEnum
import logging

from sparkplug_client.domain.entities.connection_options import (
    ConnectionOptions,
)
from sparkplug_client.domain.enums import ProxyType, TlsVersion
from sparkplug_client.domain.exceptions import (
    ConnectionOptionsError,
    InconsistentTransportConfigError,
    InvalidAddressError,
    InvalidIdentifierError,
    InvalidPortError,
    InvalidReconnectIntervalError,
    InvalidTransportParametersError,
    MissingCredentialError,
)

logger = logging.getLogger(__name__)

MIN_PORT = 1
MAX_PORT = 65535

# MQTT 토픽 레벨에 사용할 수 없는 문자
_TOPIC_RESERVED_CHARS = frozenset('/+#')


@dataclass(frozen=True)
class ConfigIssue:
    """적합성 검사에서 검출된 설정 문제.

    Args:
        field: 문제가 된 필드 이름.
        error_type: 연결 시 발생시킬 예외 타입.
        message: 사람이 읽을 수 있는 설명.
    """

    field: str
    error_type: type[ConnectionOptionsError]
    message: str


def check_connection_options(options: ConnectionOptions) -> list[ConfigIssue]:
    """설정을 검사하여 문제 목록을 반환한다.

    예외를 발생시키지 않는다. TLS 미사용 시의 tls_parameters처럼
    무시되는 값은 문제로 보지 않는다.

    Args:
        options: 검사할 접속 설정.

    Returns:
        검출된 ConfigIssue 목록. 문제가 없으면 빈 리스트.
    """
    issues: list[ConfigIssue] = []
    issues.extend(_check_address(options))
    issues.extend(_check_port(options))
    issues.extend(_check_identifiers(options))
    issues.extend(_check_reconnect_interval(options))
    issues.extend(_check_credentials(options))
    issues.extend(_check_transport(options))
    return issues


def validate_connection_options(
    options: ConnectionOptions,
) -> ConnectionOptions:
    """설정을 검사하고 문제가 있으면 예외를 발생시킨다.

    첫 번째 문제의 예외 타입을 사용하며, 메시지와 issues 속성에는
    검출된 모든 문제가 담긴다.

    Args:
        options: 검사할 접속 설정.

    Returns:
        변경되지 않은 options.

    Raises:
        ConnectionOptionsError: 하나 이상의 문제가 검출되었을 때.
    """
    issues = check_connection_options(options)
    if not issues:
        return options

    for issue in issues:
        logger.warning('Connection options rejected: %s', issue.message)

    message = '; '.join(issue.message for issue in issues)
    raise issues[0].error_type(
        f'접속 설정이 유효하지 않습니다: {message}',
        fields=[issue.field for issue in issues],
        issues=issues,
    )


def _check_address(options: ConnectionOptions) -> list[ConfigIssue]:
    address = options.broker_address
    if not isinstance(address, str) or not address.strip():
        return [
            ConfigIssue(
                'broker_address',
                InvalidAddressError,
                'broker_address가 비어 있습니다.',
            )
        ]
    return []


def _check_port(options: ConnectionOptions) -> list[ConfigIssue]:
    port = options.port
    # bool은 int의 하위 타입이므로 별도로 제외
    if (
        not isinstance(port, int)
        or isinstance(port, bool)
        or not MIN_PORT <= port <= MAX_PORT
    ):
        return [
            ConfigIssue(
                'port',
                InvalidPortError,
                f'port는 {MIN_PORT}~{MAX_PORT} 범위의 정수여야 합니다 '
                f'(현재: {port!r}).',
            )
        ]
    return []


def _check_identifiers(options: ConnectionOptions) -> list[ConfigIssue]:
    issues = []
    for name in ('client_id', 'scada_host_identifier'):
        value = getattr(options, name)
        if not isinstance(value, str) or not value:
            issues.append(
                ConfigIssue(
                    name, InvalidIdentifierError, f'{name}가 비어 있습니다.'
                )
            )

    host_id = options.scada_host_identifier
    if isinstance(host_id, str) and _TOPIC_RESERVED_CHARS & set(host_id):
        issues.append(
            ConfigIssue(
                'scada_host_identifier',
                InvalidIdentifierError,
                'scada_host_identifier에 토픽 예약 문자(/, +, #)를 '
                f'사용할 수 없습니다 (현재: {host_id!r}).',
            )
        )
    return issues


def _check_reconnect_interval(
    options: ConnectionOptions,
) -> list[ConfigIssue]:
    interval = options.reconnect_interval
    if not isinstance(interval, timedelta) or interval <= timedelta(0):
        return [
            ConfigIssue(
                'reconnect_interval',
                InvalidReconnectIntervalError,
                'reconnect_interval은 0보다 큰 timedelta여야 합니다 '
                f'(현재: {interval!r}).',
            )
        ]
    return []


def _check_credentials(options: ConnectionOptions) -> list[ConfigIssue]:
    issues = []
    for name in ('user_name', 'password'):
        value = getattr(options, name)
        if not isinstance(value, str):
            issues.append(
                ConfigIssue(
                    name,
                    MissingCredentialError,
                    f'{name}는 문자열이어야 합니다 '
                    f'(현재: {type(value).__name__}).',
                )
            )
    if issues:
        return issues

    if options.password and not options.user_name:
        return [
            ConfigIssue(
                'password',
                MissingCredentialError,
                'user_name 없이 password가 지정되었습니다.',
            )
        ]
    return []


def _check_transport(options: ConnectionOptions) -> list[ConfigIssue]:
    issues = []
    if (
        options.proxy_options is not None
        and options.web_socket_parameters is None
    ):
        issues.append(
            ConfigIssue(
                'proxy_options',
                InconsistentTransportConfigError,
                'proxy_options는 web_socket_parameters와 함께만 '
                '사용할 수 있습니다.',
            )
        )

    tls = options.effective_tls_parameters
    if tls is not None and not _is_member(TlsVersion, tls.tls_version):
        issues.append(
            ConfigIssue(
                'tls_parameters.tls_version',
                InvalidTransportParametersError,
                f'알 수 없는 tls_version입니다 (현재: {tls.tls_version!r}, '
                f'허용: {", ".join(TlsVersion)}).',
            )
        )

    proxy = options.effective_proxy_options
    if proxy is not None and not _is_member(ProxyType, proxy.proxy_type):
        issues.append(
            ConfigIssue(
                'proxy_options.proxy_type',
                InvalidTransportParametersError,
                f'알 수 없는 proxy_type입니다 (현재: {proxy.proxy_type!r}, '
                f'허용: {", ".join(ProxyType)}).',
            )
        )
    return issues


def _is_member(enum_type: type[StrEnum], value: object) -> bool:
    try:
        enum_type(value)
    except ValueError:
        return False
    return True

"""Sparkplug 접속 설정 도메인 예외 정의."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any


class DomainError(Exception):
    """도메인 계층 기본 예외."""


class ConnectionOptionsError(DomainError):
    """접속 설정이 연결에 사용할 수 없는 상태일 때.

    Args:
        message: 사람이 읽을 수 있는 거부 사유.
        fields: 문제가 된 필드 이름 목록.
        issues: 검출된 전체 이슈 목록.
    """

    def __init__(
        self,
        message: str,
        fields: Sequence[str] = (),
        issues: Sequence[Any] = (),
    ) -> None:
        super().__init__(message)
        self.fields = tuple(fields)
        self.issues = tuple(issues)


class InvalidAddressError(ConnectionOptionsError):
    """브로커 주소가 비어 있거나 해석할 수 없을 때."""


class InvalidPortError(ConnectionOptionsError):
    """포트가 1~65535 범위를 벗어났을 때."""


class InvalidReconnectIntervalError(ConnectionOptionsError):
    """재연결 간격이 0 이하일 때."""


class InconsistentTransportConfigError(ConnectionOptionsError):
    """WebSocket 설정 없이 프록시가 지정되었을 때."""


class MissingCredentialError(ConnectionOptionsError):
    """인증 정보가 불완전하거나 브로커가 인증을 거부했을 때."""


class InvalidIdentifierError(ConnectionOptionsError):
    """client_id 또는 SCADA host 식별자가 사용할 수 없는 값일 때."""


class InvalidTransportParametersError(ConnectionOptionsError):
    """TLS 또는 프록시 파라미터에 알 수 없는 값이 있을 때."""


class MqttConnectionError(DomainError):
    """MQTT 브로커 연결 실패 시."""

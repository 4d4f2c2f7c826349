"""Sparkplug 브로커 접속 설정 및 MQTT 연결 계층."""

from sparkplug_client.domain.entities.connection_options import (
    ConnectionOptions,
)
from sparkplug_client.domain.value_objects.transport import (
    ProxyOptions,
    TlsParameters,
    WebSocketParameters,
)
from sparkplug_client.usecase.validate_connection_options import (
    check_connection_options,
    validate_connection_options,
)

__all__ = [
    'ConnectionOptions',
    'ProxyOptions',
    'TlsParameters',
    'WebSocketParameters',
    'check_connection_options',
    'validate_connection_options',
]

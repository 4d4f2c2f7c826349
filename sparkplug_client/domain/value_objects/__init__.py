"""전송 계층 값 객체 (불변, 동등성 기반 비교)."""

from sparkplug_client.domain.value_objects.transport import (
    ProxyOptions,
    TlsParameters,
    WebSocketParameters,
)

__all__ = [
    'ProxyOptions',
    'TlsParameters',
    'WebSocketParameters',
]

"""Sparkplug 접속 설정 엔티티."""

from sparkplug_client.domain.entities.connection_options import (
    DEFAULT_BROKER,
    DEFAULT_CLIENT_ID,
    DEFAULT_PASSWORD,
    DEFAULT_PORT,
    DEFAULT_RECONNECT_INTERVAL,
    DEFAULT_SCADA_HOST_IDENTIFIER,
    DEFAULT_USE_TLS,
    DEFAULT_USER_NAME,
    ConnectionOptions,
)

__all__ = [
    'DEFAULT_BROKER',
    'DEFAULT_CLIENT_ID',
    'DEFAULT_PASSWORD',
    'DEFAULT_PORT',
    'DEFAULT_RECONNECT_INTERVAL',
    'DEFAULT_SCADA_HOST_IDENTIFIER',
    'DEFAULT_USE_TLS',
    'DEFAULT_USER_NAME',
    'ConnectionOptions',
]

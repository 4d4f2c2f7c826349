"""공통 테스트 fixture."""

from datetime import timedelta

import pytest

from sparkplug_client.domain.entities.connection_options import (
    ConnectionOptions,
)
from sparkplug_client.domain.value_objects.transport import (
    ProxyOptions,
    TlsParameters,
    WebSocketParameters,
)


@pytest.fixture
def default_options():
    return ConnectionOptions.default()


@pytest.fixture
def tls_options():
    return ConnectionOptions(
        broker_address="broker.example.com",
        port=8883,
        client_id="edge-01",
        user_name="operator",
        password="secret",
        use_tls=True,
        scada_host_identifier="scada-main",
        reconnect_interval=timedelta(seconds=5),
        tls_parameters=TlsParameters(),
    )


@pytest.fixture
def websocket_options():
    return ConnectionOptions(
        broker_address="broker.example.com",
        port=443,
        client_id="edge-02",
        user_name="",
        password="",
        use_tls=False,
        scada_host_identifier="scada-main",
        reconnect_interval=timedelta(seconds=10),
        web_socket_parameters=WebSocketParameters(
            path="/ws", request_headers=(("X-Site", "plant-a"),)
        ),
        proxy_options=ProxyOptions(
            address="proxy.example.com",
            port=3128,
            user_name="proxy-user",
            password="proxy-pass",
        ),
    )

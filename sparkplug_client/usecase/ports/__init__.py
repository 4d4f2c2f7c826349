"""유스케이스 포트 인터페이스 (ABC)."""

from sparkplug_client.usecase.ports.config_port import ConfigPort

__all__ = ["ConfigPort"]

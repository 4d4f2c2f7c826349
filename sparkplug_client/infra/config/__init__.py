"""설정 로더 구현체 (ConfigPort 구현)."""

from sparkplug_client.infra.config.yaml_config_loader import YamlConfigLoader

__all__ = ["YamlConfigLoader"]

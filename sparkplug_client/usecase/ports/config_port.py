"""설정 포트 인터페이스.

접속 설정의 로딩을 추상화한다.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from sparkplug_client.domain.entities.connection_options import (
    ConnectionOptions,
)


class ConfigPort(ABC):
    """설정 로더 인터페이스."""

    @abstractmethod
    def load(self) -> ConnectionOptions:
        """설정 소스에서 접속 설정을 읽는다.

        로더는 값을 검증하지 않는다.

        Returns:
            채워진 ConnectionOptions.
        """

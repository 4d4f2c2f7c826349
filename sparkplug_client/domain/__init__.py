"""Sparkplug 접속 설정 도메인 레이어."""

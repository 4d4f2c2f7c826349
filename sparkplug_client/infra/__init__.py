"""Sparkplug 클라이언트 인프라 레이어."""

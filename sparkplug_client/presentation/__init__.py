"""Sparkplug 클라이언트 진입점."""

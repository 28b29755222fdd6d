"""Инфраструктура: браузеры, метрики, health checks."""

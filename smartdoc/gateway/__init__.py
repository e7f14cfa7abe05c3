"""
API Gateway Module

Centralized entry point for the reference backend: middleware, error
rendering, router registration and health checks.
"""
from .gateway import APIGateway

__all__ = ["APIGateway"]

"""
Analytics Installer: interactive setup wizard for the Analytics stack

Prepares .env and config.yaml, then builds and starts the services with
docker compose while showing live progress.
"""

try:
    from importlib.metadata import version
    __version__ = version("analytics-installer")
except Exception:
    __version__ = "0.0.0"  # Fallback for development

__all__ = ["__version__"]

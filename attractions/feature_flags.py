"""
Feature flags for the attraction sync service.

Uses pydantic-settings for typed, validated,
environment-variable-backed feature flags.

Toggle via env vars: FEATURE_PARALLEL_FETCH=true
All flags default to False so a sync run reproduces the reference
at-most-once, sequential behavior unless explicitly changed.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings


class FeatureFlags(BaseSettings):
    """Feature flags backed by environment variables."""

    # Download images through a bounded worker pool instead of one by one
    feature_parallel_fetch: bool = False
    # Clear the cache only after the external insert succeeded
    feature_staged_commit: bool = False

    model_config = {
        "env_prefix": "",
        "case_sensitive": False,
    }


@lru_cache()
def get_feature_flags() -> FeatureFlags:
    """Cached singleton. Use FastAPI Depends() for injection."""
    return FeatureFlags()

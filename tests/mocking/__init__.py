"""Test utilities shared across the MobSF tool suite."""
from .mobsf import MockMobSF, TEST_CONFIG, form_data

__all__ = ["MockMobSF", "TEST_CONFIG", "form_data"]

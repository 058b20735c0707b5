"""Local business directory with a multi-step onboarding wizard."""

__version__ = "0.1.0"

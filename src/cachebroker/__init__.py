"""Service broker provisioning AWS ElastiCache clusters."""

__version__ = "0.1.0"

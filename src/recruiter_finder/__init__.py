"""Recruiter and hiring-manager contact finder."""

__version__ = "1.0.0"

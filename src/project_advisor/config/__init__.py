"""Configuration for Project Advisor."""

from project_advisor.config.settings import AppSettings, get_settings

__all__ = ["AppSettings", "get_settings"]

"""Workflow services: credentials, cache, issue resolution, git, orchestration."""

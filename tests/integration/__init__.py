"""Integration tests for imagectl.

This package contains integration tests that drive the CLI end to end
through Typer's test runner.

Test Structure:
- test_url_commands.py: URL resolution, transformation and record workflows
- test_config_profiles.py: Profile management and origin selection
"""

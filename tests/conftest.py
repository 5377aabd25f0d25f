"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

import pytest


@pytest.fixture
def plain_config_text() -> str:
    """Sample Key=Value config file with two sections."""
    return (
        "; vendor settings\n"
        "[General]\n"
        "InstallDir=C:\\Program Files\\Vendor\n"
        "Language=en\n"
        "\n"
        "[Network]\n"
        "Proxy=\n"
        "Port=8080\n"
    )


@pytest.fixture
def cli_config_text() -> str:
    """Sample CLI config file using quoted values."""
    return (
        "[Settings]\n"
        "AutoUpdate = TRUE\n"
        "Timeout = 180\n"
        'Feed = "https://download.example.com/feed"\n'
    )


@pytest.fixture
def listing_output() -> str:
    """Sample package listing: Field: value blocks split by three blank lines."""
    return (
        "Package: ni-visa\n"
        "Version: 24.0.0\n"
        "Section: Drivers\n"
        "Description: NI-VISA driver\n"
        "\n\n\n"
        "Package: ni-labview-2024\n"
        "Version: 24.1.0\n"
        "Section: Programming Environments\n"
        "\n\n\n"
        "Package: ni-daqmx\n"
        "Version: 24.3.0\n"
        "Section: Drivers\n"
        "\n\n\n"
        "Package: ni-measurement-studio\n"
        "Version: 23.0.0\n"
        "Section: Application Software\n"
        "\n\n\n"
        "Package: ni-max\n"
        "Version: 24.0.0\n"
        "Section: Utilities\n"
        "\n\n\n"
        "Package: ni-runtime-base\n"
        "Version: 1.0.0\n"
        "Section: Infrastructure\n"
    )


@pytest.fixture
def installed_output() -> str:
    """Sample installed-package listing."""
    return "Package: ni-visa\nVersion: 24.0.0\nSection: Drivers\n"

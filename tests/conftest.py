"""Shared pytest fixtures for unit and integration tests.

This module provides:
- A fixed reference date so lifecycle classification is reproducible
- Sample document and notification snapshots
- Temporary configuration and feed files for loader and CLI tests
"""

from __future__ import annotations

import tempfile
from datetime import date
from pathlib import Path
from typing import Any, Dict, Generator, List

import pytest
import yaml

from reporting import data_models
from tests.fixtures import sample_input


@pytest.fixture
def tmp_test_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory that's cleaned up after each test.

    Real-world significance:
    - Isolates file I/O tests from each other
    - Prevents exports and logs from polluting the file system

    Yields
    ------
    Path
        Absolute path to temporary directory (automatically deleted after test)
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def reference_date() -> date:
    """Fixed 'today' used across tests (2025-01-15).

    Real-world significance:
    - Classification depends on the current date; a fixed date keeps
      expiring/expired expectations stable
    """
    return date.fromisoformat(sample_input.REFERENCE_DATE)


@pytest.fixture
def sample_documents() -> List[data_models.DocumentRecord]:
    """One document per lifecycle state (see create_test_document_set)."""
    return sample_input.create_test_document_set()


@pytest.fixture
def sample_notifications() -> List[data_models.NotificationRecord]:
    """Two SENT, one FAILED and one PENDING notification."""
    return sample_input.create_test_notification_set()


@pytest.fixture
def default_config() -> Dict[str, Any]:
    """Provide a complete configuration dictionary.

    Real-world significance:
    - Mirrors config/parameters.yaml
    - Tests can override single keys without repeating the rest
    """
    return {
        "classification": {"horizon_days": 30},
        "trend": {"max_buckets": 6},
        "export": {
            "locale": "en_US",
            "date_format": "medium",
            "file_prefix": "comprehensive_report",
            "format": "xlsx",
        },
    }


@pytest.fixture
def config_file(tmp_test_dir: Path, default_config: Dict[str, Any]) -> Path:
    """Write default_config to a YAML file and return its path."""
    config_path = tmp_test_dir / "parameters.yaml"
    with config_path.open("w", encoding="utf-8") as f:
        yaml.dump(default_config, f)
    return config_path


@pytest.fixture
def document_feed(tmp_test_dir: Path) -> Path:
    """JSON document feed in the file service's envelope shape.

    Contents (relative to 2025-01-15):
    - id 1 North/Distributor, expires 2025-06-30 (active), uploaded by 7
    - id 2 North/Retailer, expires 2025-01-25 (expiring), uploaded by 8,
      assigned to 7
    - id 3 South/Distributor, expired 2025-01-01, uploaded by 8
    """
    records = [
        sample_input.create_raw_document(
            1, "contract.pdf", "2025-06-30", "2024-12-03", "North", "Distributor", 7
        ),
        sample_input.create_raw_document(
            2, "lease.pdf", "2025-01-25", "2025-01-04", "North", "Retailer", 8, 7
        ),
        sample_input.create_raw_document(
            3, "permit.pdf", "2025-01-01", "2025-01-09", "South", "Distributor", 8
        ),
    ]
    return sample_input.write_test_feed(
        tmp_test_dir / "feeds" / "files.json", records, envelope="body"
    )


@pytest.fixture
def notification_feed(tmp_test_dir: Path) -> Path:
    """JSON notification feed with SENT, FAILED and PENDING entries."""
    records = [
        sample_input.create_raw_notification(1, "SENT", 7, 2, "lease.pdf"),
        sample_input.create_raw_notification(2, "FAILED", 8, 3, None, -14),
        sample_input.create_raw_notification(3, "PENDING", 7, 1, "contract.pdf"),
    ]
    return sample_input.write_test_feed(
        tmp_test_dir / "feeds" / "notifications.json", records, envelope="data"
    )

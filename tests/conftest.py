from datetime import datetime
from pathlib import Path
import sys

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.append(str(ROOT))

from core.notifications import NotificationCenter
from core.registry import Registry
from core.storage import MemoryStorage


FIXED_NOW = datetime(2024, 1, 5, 9, 7, 3)


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def registry(storage):
    return Registry(storage, clock=lambda: FIXED_NOW)


@pytest.fixture
def notifications():
    center = NotificationCenter()
    center.received = []
    center.subscribe(center.received.append)
    return center


@pytest.fixture
def budi(registry):
    return registry.add("Budi Santoso", "3201012345678901", "Jl. Merdeka No. 1", "5000000")

from datetime import datetime, timezone

import pytest

from calmoment.config import override_settings

NOW = datetime(2024, 3, 10, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def fixed_settings():
    """Pin zone, locale and clock so tests don't depend on the host."""
    with override_settings(zone="UTC", locale="en_US", clock=lambda: NOW) as settings:
        yield settings

import pytest

from infrastructure.container import container
from infrastructure.events import reset_event_bus


@pytest.fixture(autouse=True)
def fresh_container():
    """Each test gets its own mock backends and in-memory event bus."""
    reset_event_bus()
    container.reset()
    yield
    container.reset()
    reset_event_bus()

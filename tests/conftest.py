import pytest
from tenacity import wait_none

from polybets.polymarket import client
from polybets.polymarket.circuit import CircuitBreaker
from polybets.services import bets_service
from polybets.settings import settings


@pytest.fixture(autouse=True)
def _isolate_external_state(monkeypatch):
    monkeypatch.setattr(client, "GAMMA_BREAKER", CircuitBreaker("polymarket", 5, 60))
    monkeypatch.setattr(settings, "CACHE_ENABLED", False)
    monkeypatch.setattr(bets_service, "RETRY_WAIT", wait_none())

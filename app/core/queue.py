"""
Queue infrastructure module.

This module provides the Dramatiq broker used to run extraction jobs off the
request path:
- RedisBroker in every environment except tests
- StubBroker when APP_ENV=test, so actors can be sent without Redis
"""

import dramatiq
from dramatiq.brokers.redis import RedisBroker
from dramatiq.brokers.stub import StubBroker
from dramatiq.middleware import AsyncIO

from app.core.config import Settings

settings = Settings()

# ============================================================================
# Dramatiq Task Queue
# ============================================================================
if settings.APP_ENV == "test":
    dramatiq_broker = StubBroker()
else:
    dramatiq_broker = RedisBroker(url=settings.REDIS_URL)

# Add AsyncIO middleware to support async actors
dramatiq_broker.add_middleware(AsyncIO())

dramatiq.set_broker(dramatiq_broker)

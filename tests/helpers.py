import asyncio
from datetime import datetime, timedelta


class FrozenClock:
    """Callable clock returning a fixed UTC time that tests can advance."""

    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


def run(coro):
    return asyncio.run(coro)

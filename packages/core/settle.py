# settle-all join: every task gets an outcome, none cancels its siblings
import asyncio
from dataclasses import dataclass
from typing import Awaitable, Generic, Iterable, List, Optional, TypeVar

T = TypeVar("T")


@dataclass
class Outcome(Generic[T]):
    value: Optional[T] = None
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None


async def settle_all(aws: Iterable[Awaitable[T]]) -> List[Outcome[T]]:
    results = await asyncio.gather(*aws, return_exceptions=True)
    return [Outcome(error=r) if isinstance(r, BaseException) else Outcome(value=r) for r in results]

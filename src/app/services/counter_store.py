from abc import ABC, abstractmethod


def ip_attempts_key(ip: str) -> str:
    return f"rate-limit:ip:{ip}"


def user_attempts_key(email: str) -> str:
    return f"rate-limit:user:{email.lower()}"


def ip_blacklist_key(ip: str) -> str:
    return f"blacklist:ip:{ip}"


class ICounterStore(ABC):
    """
    Expiring counter and flag store - application layer.

    Expired entries are logically absent: reads after expiry return 0/False
    even if the entry has not been physically evicted yet.
    """

    @abstractmethod
    async def increment(self, key: str, window_seconds: int) -> int:
        """
        Atomically increment a counter.

        Creates the counter with value 1 and a fresh TTL when absent or
        expired; otherwise increments and keeps the original expiry.
        """
        pass

    @abstractmethod
    async def get(self, key: str) -> int:
        """Current counter value, 0 when absent or expired"""
        pass

    @abstractmethod
    async def set_flag(self, key: str, ttl_seconds: int) -> None:
        """Set a flag that expires after ttl_seconds"""
        pass

    @abstractmethod
    async def has_flag(self, key: str) -> bool:
        """True while the flag is set and unexpired"""
        pass

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove a counter or flag"""
        pass

    async def close(self) -> None:
        """Release backend connections"""
        return None

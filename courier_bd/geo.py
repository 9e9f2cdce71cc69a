import logging
from abc import ABC, abstractmethod
from typing import Callable, Iterable, Mapping


def normalize_name(name: str | None) -> str:
    """Lower-case and drop whitespace, so "Old Dhaka" matches "olddhaka"."""
    return "".join((name or "").lower().split())


class GeoResolver(ABC):
    @abstractmethod
    def resolve(self, name: str | None) -> int:
        """
        Map a place name to the courier's numeric id

        Parameters
        ----------
        name : str | None
            City, zone or area name as typed by the customer

        Returns
        -------
        int
            The courier's id for that place
        """
        pass


class StaticGeoResolver(GeoResolver):
    def __init__(self, mapping: Mapping[str, int], default: int):
        self.mapping = {normalize_name(k): v for k, v in mapping.items()}
        self.default = default

    def resolve(self, name: str | None) -> int:
        return self.mapping.get(normalize_name(name), self.default)


class ApiGeoResolver(GeoResolver):
    """Resolver backed by a courier's own location list.

    `fetch` returns `(name, id)` pairs. The first successful result is cached
    for the resolver's lifetime; a failed fetch is retried on the next lookup.
    Names missing from the list, or a failed fetch, fall through to `fallback`.
    """

    def __init__(
        self,
        fetch: Callable[[], Iterable[tuple[str, int]]],
        fallback: GeoResolver,
        tag: str = "Geo",
    ):
        self.fetch = fetch
        self.fallback = fallback
        self.tag = tag
        self._cache: dict[str, int] | None = None

    def _load(self) -> dict[str, int]:
        if self._cache is None:
            try:
                self._cache = {normalize_name(name): int(id_) for name, id_ in self.fetch()}
                logging.info(f"[{self.tag}] Cached {len(self._cache)} locations")
            except Exception as e:
                # left unset so the next lookup fetches again
                logging.warning(f"[{self.tag}] Location list unavailable, using static map: {e}")
                return {}
        return self._cache

    def resolve(self, name: str | None) -> int:
        cache = self._load()
        key = normalize_name(name)
        if key in cache:
            return cache[key]
        return self.fallback.resolve(name)

"""Core data models shared across recipegen components."""

from dataclasses import dataclass
from typing import Optional, Sequence, Union

FileSpec = Sequence[Union[str, Sequence]]


@dataclass(frozen=True)
class HostedFetcher:
    """Repository on a known hosting service, e.g. ``github`` + ``owner/name``."""

    service: str
    repo: str


@dataclass(frozen=True)
class UrlFetcher:
    """Plain git URL used when the remote matches no known hosting service."""

    url: str


FetcherSpec = Union[HostedFetcher, UrlFetcher]


@dataclass(frozen=True)
class RecipeRecord:
    """Persisted description of how to fetch and package one package."""

    name: str
    fetcher: FetcherSpec
    files: Optional[FileSpec] = None

"""Storage backends consulted for file existence and plain URLs."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING, Iterable

from cftransforms.exceptions import ConfigError
from cftransforms.logging_config import get_logger

if TYPE_CHECKING:
    from cftransforms.config import DiskConfig

logger = get_logger(__name__)


def join_url(base: str, path: str) -> str:
    """Join a base URL and a relative path with exactly one slash."""
    if not base:
        return path
    return f"{base.rstrip('/')}/{path.lstrip('/')}"


class StorageBackend(ABC):
    """Abstract base class for storage disks.

    A backend answers two questions about a path relative to the disk:
    does the file exist, and what is its plain (untransformed) URL.

    Example:
        storage = get_storage("public", disk_config)
        if storage.exists("photos/cat.jpg"):
            print(storage.url("photos/cat.jpg"))
    """

    def __init__(self, name: str, base_url: str = "", prefix: str = ""):
        self.name = name
        self.base_url = base_url
        self.prefix = prefix

    @abstractmethod
    def exists(self, path: str) -> bool:
        """Check whether a file exists at the given path on this disk."""

    def url(self, path: str) -> str:
        """Return the plain URL for a path, with the disk prefix applied."""
        if self.prefix:
            path = join_url(self.prefix, path)
        return join_url(self.base_url, path)


class LocalStorage(StorageBackend):
    """Disk backed by a directory on the local filesystem."""

    driver = "local"

    def __init__(
        self,
        name: str,
        root: Path,
        base_url: str = "",
        prefix: str = "",
    ):
        super().__init__(name, base_url=base_url, prefix=prefix)
        self.root = Path(root)

    def exists(self, path: str) -> bool:
        root = self.root.resolve()
        relative = join_url(self.prefix, path) if self.prefix else path
        candidate = (root / relative.lstrip("/")).resolve()
        # Refuse anything that resolves outside the disk root
        if candidate != root and root not in candidate.parents:
            logger.debug("Path %s resolves outside disk root %s", path, root)
            return False
        return candidate.is_file()


class MockStorage(StorageBackend):
    """In-memory disk for tests and dry runs.

    Records every existence check for verification in tests.

    Example:
        storage = MockStorage(files=["photo.jpg"])
        assert storage.exists("photo.jpg")
        assert storage.exists_calls == ["photo.jpg"]
    """

    driver = "mock"

    def __init__(
        self,
        name: str = "mock",
        files: Iterable[str] | None = None,
        base_url: str = "https://example.com",
        prefix: str = "",
    ):
        super().__init__(name, base_url=base_url, prefix=prefix)
        self.files = set(files or [])
        self.exists_calls: list[str] = []

    def exists(self, path: str) -> bool:
        self.exists_calls.append(path)
        return path in self.files

    def add(self, *paths: str) -> None:
        """Register files as present."""
        self.files.update(paths)

    def reset(self) -> None:
        """Clear recorded existence checks."""
        self.exists_calls.clear()


def get_storage(name: str, disk_config: "DiskConfig") -> StorageBackend:
    """Create a storage backend for a configured disk.

    Args:
        name: Disk name (e.g. 'public')
        disk_config: Parsed disk configuration

    Returns:
        StorageBackend instance

    Raises:
        ConfigError: If the driver is not recognized
    """
    backends = {
        "local": lambda: LocalStorage(
            name,
            root=disk_config.root,
            base_url=disk_config.url,
            prefix=disk_config.prefix,
        ),
        "mock": lambda: MockStorage(
            name,
            files=disk_config.files,
            base_url=disk_config.url,
            prefix=disk_config.prefix,
        ),
    }

    if disk_config.driver not in backends:
        available = ", ".join(sorted(backends.keys()))
        raise ConfigError(
            f"Unknown storage driver: '{disk_config.driver}'. Available: {available}",
            context={"disk": name},
        )

    return backends[disk_config.driver]()

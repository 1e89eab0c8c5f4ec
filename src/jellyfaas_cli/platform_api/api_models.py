"""Platform API response entities."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any


def _mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def _sequence(value: Any) -> Sequence[Any]:
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes)):
        return value
    return ()


def _text(payload: Mapping[str, Any], key: str) -> str:
    value = payload.get(key)
    return "" if value is None else str(value)


def _int(payload: Mapping[str, Any], key: str) -> int:
    value = payload.get(key)
    if isinstance(value, bool) or not isinstance(value, int):
        return 0
    return value


@dataclass(frozen=True)
class DeployedDetails:
    """One deployment target (size tier) created by an upload."""

    size: str
    operation_id: str
    function_url: str

    @staticmethod
    def from_payload(payload: Mapping[str, Any]) -> DeployedDetails:
        return DeployedDetails(
            size=_text(payload, "Size") or _text(payload, "size"),
            operation_id=_text(payload, "opid"),
            function_url=_text(payload, "urlLocation"),
        )


@dataclass(frozen=True)
class DeployedFunction:
    """Upload response."""

    function: str
    function_id: str
    deployed_details: tuple[DeployedDetails, ...]
    current_version: int = 0
    deploying_version: int = 0
    new: bool = False

    @property
    def operation_ids(self) -> tuple[str, ...]:
        return tuple(detail.operation_id for detail in self.deployed_details)

    @staticmethod
    def from_payload(payload: Mapping[str, Any]) -> DeployedFunction:
        return DeployedFunction(
            function=_text(payload, "function"),
            function_id=_text(payload, "function_id"),
            deployed_details=tuple(
                DeployedDetails.from_payload(_mapping(item))
                for item in _sequence(payload.get("deployedDetails"))
            ),
            current_version=_int(payload, "currentVersion"),
            deploying_version=_int(payload, "deployingVersion"),
            new=bool(payload.get("new", False)),
        )


@dataclass(frozen=True)
class BadBuild:
    created_at: str
    build_id: str
    name: str
    function_id: str
    error_message: str

    @staticmethod
    def from_payload(payload: Mapping[str, Any]) -> BadBuild:
        return BadBuild(
            created_at=_text(payload, "createdAt"),
            build_id=_text(payload, "buildId"),
            name=_text(payload, "name"),
            function_id=_text(payload, "functionId"),
            error_message=_text(payload, "errorDetails"),
        )


@dataclass(frozen=True)
class BadBuildListing:
    count: int
    bad_builds: tuple[BadBuild, ...]

    @staticmethod
    def from_payload(payload: Mapping[str, Any]) -> BadBuildListing:
        return BadBuildListing(
            count=_int(payload, "count"),
            bad_builds=_bad_builds(payload),
        )


@dataclass(frozen=True)
class BadBuildCleanup:
    build_id: str
    functions: tuple[str, ...]

    @staticmethod
    def from_payload(payload: Mapping[str, Any]) -> BadBuildCleanup:
        return BadBuildCleanup(
            build_id=_text(payload, "buildId"),
            functions=tuple(str(item) for item in _sequence(payload.get("functions"))),
        )


@dataclass(frozen=True)
class LibraryItem:
    name: str
    function_id: str
    owner: str
    versions: int
    created_at: str
    last_release: str
    description: str

    @staticmethod
    def from_payload(payload: Mapping[str, Any]) -> LibraryItem:
        return LibraryItem(
            name=_text(payload, "name"),
            function_id=_text(payload, "functionId"),
            owner=_text(payload, "owner"),
            versions=_int(payload, "versions"),
            created_at=_text(payload, "createdAt"),
            last_release=_text(payload, "lastRelease"),
            description=_text(payload, "description"),
        )


@dataclass(frozen=True)
class LibraryListing:
    count: int
    items: tuple[LibraryItem, ...]
    bad_builds: tuple[BadBuild, ...]

    @staticmethod
    def from_payload(payload: Mapping[str, Any]) -> LibraryListing:
        return LibraryListing(
            count=_int(payload, "count"),
            items=tuple(
                LibraryItem.from_payload(_mapping(item))
                for item in _sequence(payload.get("libraryItem"))
            ),
            bad_builds=_bad_builds(payload),
        )


@dataclass(frozen=True)
class VersionSize:
    size: str
    function_id: str


@dataclass(frozen=True)
class VersionDetails:  # pylint: disable=too-many-instance-attributes
    """One published version of a library function."""

    version: int
    latest: bool
    release_date: str
    runtime: str
    entry_point: str
    description: str
    sizes: tuple[VersionSize, ...]
    readme_encoded: str = ""
    changelog_encoded: str = ""
    requirements: Mapping[str, Any] = field(default_factory=dict)

    @staticmethod
    def from_payload(payload: Mapping[str, Any]) -> VersionDetails:
        return VersionDetails(
            version=_int(payload, "version"),
            latest=bool(payload.get("latest", False)),
            release_date=_text(payload, "releaseDate"),
            runtime=_text(payload, "runtime"),
            entry_point=_text(payload, "entryPoint"),
            description=_text(payload, "description"),
            sizes=tuple(
                VersionSize(size=_text(item, "size"), function_id=_text(item, "functionId"))
                for item in (_mapping(raw) for raw in _sequence(payload.get("sizes")))
            ),
            readme_encoded=_text(payload, "readmeFile"),
            changelog_encoded=_text(payload, "changeLog"),
            requirements=dict(_mapping(payload.get("requirements"))),
        )


@dataclass(frozen=True)
class LibraryItemDetails:  # pylint: disable=too-many-instance-attributes
    name: str
    function_id: str
    owner: str
    owner_description: str
    version_count: int
    created_at: str
    updated_at: str
    versions: tuple[VersionDetails, ...]

    @property
    def latest_version(self) -> VersionDetails | None:
        for version in self.versions:
            if version.latest:
                return version
        return None

    @staticmethod
    def from_payload(payload: Mapping[str, Any]) -> LibraryItemDetails:
        return LibraryItemDetails(
            name=_text(payload, "name"),
            function_id=_text(payload, "functionId"),
            owner=_text(payload, "owner"),
            owner_description=_text(payload, "ownerDescription"),
            version_count=_int(payload, "versionCount"),
            created_at=_text(payload, "createdAt"),
            updated_at=_text(payload, "updatedAt"),
            versions=tuple(
                VersionDetails.from_payload(_mapping(item))
                for item in _sequence(payload.get("versions"))
            ),
        )


@dataclass(frozen=True)
class UserDetails:
    name: str
    email: str
    created_at: str
    updated_at: str

    @staticmethod
    def from_payload(payload: Mapping[str, Any]) -> UserDetails:
        return UserDetails(
            name=_text(payload, "name"),
            email=_text(payload, "email"),
            created_at=_text(payload, "createdAt"),
            updated_at=_text(payload, "updatedAt"),
        )


@dataclass(frozen=True)
class TokenDetails:
    token: str
    expiry: str


def _bad_builds(payload: Mapping[str, Any]) -> tuple[BadBuild, ...]:
    return tuple(
        BadBuild.from_payload(_mapping(item)) for item in _sequence(payload.get("badBuilds"))
    )

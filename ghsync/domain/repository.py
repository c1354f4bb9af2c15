"""
Repository descriptor domain object for ghsync.

A descriptor is the metadata record for one remote repository as returned
by the GitHub listing endpoints. Descriptors are immutable once fetched.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Tuple


class Visibility(Enum):
    """Repository visibility as far as filtering is concerned."""
    PRIVATE = "private"
    PUBLIC = "public"


@dataclass(frozen=True)
class RepositoryDescriptor:
    """
    One remote repository.

    Attributes:
        owner: Login of the owning organization or user
        name: Repository name
        clone_url: URL handed to ``git clone``
        visibility: Private or public
        archived: Whether the repository is archived
        is_fork: Whether the repository is a fork
    """
    owner: str
    name: str
    clone_url: str
    visibility: Visibility = Visibility.PUBLIC
    archived: bool = False
    is_fork: bool = False

    @property
    def key(self) -> Tuple[str, str]:
        """Structured ledger key: (owner, name)."""
        return (self.owner, self.name)

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"

    @property
    def is_private(self) -> bool:
        return self.visibility is Visibility.PRIVATE

    @classmethod
    def from_api_response(cls, data: Dict[str, Any]) -> 'RepositoryDescriptor':
        """
        Create from a GitHub repository object.

        Raises:
            ValueError: If the object lacks an owner login, name or clone URL
        """
        if not isinstance(data, dict):
            raise ValueError(f"Expected a repository object, got {type(data).__name__}")

        owner = data.get('owner')
        owner_login = owner.get('login') if isinstance(owner, dict) else None
        name = data.get('name')
        clone_url = data.get('clone_url')

        if not owner_login or not name or not clone_url:
            raise ValueError(
                f"Repository object is missing owner.login, name or clone_url: "
                f"{data.get('full_name') or name or '<unknown>'}"
            )

        return cls(
            owner=owner_login,
            name=name,
            clone_url=clone_url,
            visibility=Visibility.PRIVATE if data.get('private') else Visibility.PUBLIC,
            archived=bool(data.get('archived', False)),
            is_fork=bool(data.get('fork', False)),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            'owner': self.owner,
            'name': self.name,
            'clone_url': self.clone_url,
            'visibility': self.visibility.value,
            'archived': self.archived,
            'is_fork': self.is_fork,
        }

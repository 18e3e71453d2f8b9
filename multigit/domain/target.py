"""
Target and command template domain objects for multigit.

A Target is one unit of fan-out work; a CommandSpec is the argument
template run once per target.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple


class TargetKind(Enum):
    """Where a target lives."""
    LOCAL = "local"
    REMOTE = "remote"


@dataclass(frozen=True)
class Target:
    """
    One unit of work.

    Attributes:
        name: Identifier shown in reports
        kind: LOCAL checkout directory or REMOTE repository
        address: Directory path (local) or full clone address (remote)
    """
    name: str
    kind: TargetKind
    address: str

    @classmethod
    def local(cls, name: str, path: str) -> 'Target':
        return cls(name=name, kind=TargetKind.LOCAL, address=path)

    @classmethod
    def remote(cls, name: str, prefix: str) -> 'Target':
        return cls(name=name, kind=TargetKind.REMOTE, address=prefix + name)


@dataclass(frozen=True)
class CommandSpec:
    """
    Command-line template executed once per target.

    Local targets run `executable *args` inside the target directory.
    Remote targets run in `cwd` with the target address appended, or
    substituted wherever `placeholder` occurs in an argument.
    """
    args: Tuple[str, ...]
    executable: str = "git"
    cwd: Optional[str] = None
    placeholder: Optional[str] = None

    def argv_for(self, target: Target) -> List[str]:
        """Build the argument vector for one target."""
        if target.kind is TargetKind.LOCAL:
            return [self.executable, *self.args]

        if self.placeholder and any(self.placeholder in arg for arg in self.args):
            return [self.executable, *(arg.replace(self.placeholder, target.address) for arg in self.args)]

        return [self.executable, *self.args, target.address]

    def cwd_for(self, target: Target) -> Optional[str]:
        """Working directory for one target's child process."""
        if target.kind is TargetKind.LOCAL:
            return target.address
        return self.cwd

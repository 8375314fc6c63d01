"""Configuration data models for nativeboot.

Defines the typed configuration that represents ``config.yml``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from nativeboot.bootstrap.versions import OVERWRITE_AUTO, OVERWRITE_POLICIES


@dataclass
class NativeBootConfig:
    """Complete nativeboot configuration.

    Example config.yml:
        subdir: .myapp
        overwrite: auto
        exclude:
          - "*.pdb"
        preload:
          - winpthread-1
          - myapp_core
    """

    home: Optional[str] = None  # Base directory, None = user home
    subdir: str = ""  # Sub directory below home
    overwrite: str = OVERWRITE_AUTO  # auto, always, never
    resource_prefix: Optional[str] = None  # None = detected platform prefix
    include: List[str] = field(default_factory=list)  # Empty = everything
    exclude: List[str] = field(default_factory=list)
    update_environment: bool = True
    preload: List[str] = field(default_factory=list)  # Loaded in order after extraction

    # Metadata (not from YAML, set by loader)
    _config_sources: List[str] = field(default_factory=list, repr=False)

    @property
    def config_sources(self) -> List[str]:
        return list(self._config_sources)

    def is_valid_overwrite(self) -> bool:
        return self.overwrite in OVERWRITE_POLICIES

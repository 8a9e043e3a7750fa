# adstudio/lib/credentials.py
from __future__ import annotations

import json
import os
from enum import Enum
from pathlib import Path
from typing import Dict, Optional, Protocol

from adstudio.errors import NoCredentialAvailable
from adstudio.logger import get_logger

log = get_logger(__name__)

MANUAL_KEY_NAME = "manualApiKey"


class CallClass(str, Enum):
    GENERAL = "general"
    VIDEO = "video"


class CredentialStore(Protocol):
    def get(self, name: str) -> Optional[str]: ...
    def put(self, name: str, value: str) -> None: ...
    def delete(self, name: str) -> None: ...


class PlatformCredentialChooser(Protocol):
    """Host-provided key picker (video call class only)."""

    def open_select(self) -> None: ...
    def has_selection(self) -> bool: ...


class MemoryCredentialStore:
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._values: Dict[str, str] = dict(initial or {})

    def get(self, name: str) -> Optional[str]:
        return self._values.get(name)

    def put(self, name: str, value: str) -> None:
        self._values[name] = value

    def delete(self, name: str) -> None:
        self._values.pop(name, None)


class JsonFileCredentialStore:
    """Named string values in one small JSON file (same read-modify-write as the job manifests)."""

    def __init__(self, path: Path | str):
        self.path = Path(path)

    def _load(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        with open(self.path, "r") as f:
            return json.load(f)

    def _save(self, values: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(".tmp")
        with open(tmp, "w") as f:
            json.dump(values, f, indent=2)
        os.replace(tmp, self.path)

    def get(self, name: str) -> Optional[str]:
        return self._load().get(name)

    def put(self, name: str, value: str) -> None:
        values = self._load()
        values[name] = value
        self._save(values)

    def delete(self, name: str) -> None:
        values = self._load()
        if values.pop(name, None) is not None:
            self._save(values)


class CredentialContext:
    """
    Decides which API key an outbound call uses.

    Priority: a manually supplied key (persisted through `store`), then the
    environment default. Video calls additionally need the platform selection
    flag when a `chooser` is attached. Callers resolve once at the start of a
    call and keep the returned string, so a later `set()` never changes a call
    that is already running.
    """

    def __init__(
        self,
        *,
        env_default: Optional[str] = None,
        store: Optional[CredentialStore] = None,
        chooser: Optional[PlatformCredentialChooser] = None,
    ):
        self.env_default = (env_default or "").strip() or None
        self.store = store or MemoryCredentialStore()
        self.chooser = chooser
        self._manual: Optional[str] = None
        self._platform_selected = False

    def load(self) -> None:
        stored = self.store.get(MANUAL_KEY_NAME)
        self._manual = (stored or "").strip() or None
        if self._manual:
            log.info("Loaded manual API key from credential store")
        if self.chooser is not None:
            self._platform_selected = bool(self.chooser.has_selection())

    def set(self, token: Optional[str]) -> None:
        token = (token or "").strip()
        if token:
            self._manual = token
            self.store.put(MANUAL_KEY_NAME, token)
            log.info("Manual API key saved")
        else:
            self._manual = None
            self.store.delete(MANUAL_KEY_NAME)
            log.info("Manual API key cleared; falling back to environment key")

    def clear(self) -> None:
        self.set(None)

    @property
    def has_manual(self) -> bool:
        return self._manual is not None

    @property
    def has_environment(self) -> bool:
        return self.env_default is not None

    def has_platform_credential(self) -> bool:
        return self._platform_selected

    def request_platform_credential(self) -> bool:
        if self.chooser is None:
            return False
        self.chooser.open_select()
        # has_selection() can lag right after the dialog closes; a completed open_select counts as success
        self._platform_selected = True
        return True

    def reset_platform_credential(self) -> None:
        if self._platform_selected:
            log.info("Platform credential selection reset")
        self._platform_selected = False

    def is_available(self, call_class: CallClass = CallClass.GENERAL) -> bool:
        try:
            self.resolve(call_class)
        except NoCredentialAvailable:
            return False
        return True

    def resolve(self, call_class: CallClass = CallClass.GENERAL) -> str:
        """
        Return the manual token, else the environment default.

        The platform flag gates video calls when a chooser is attached, but it
        never stands in for a token: this server still needs a manual or
        environment key to call the provider, so video needs the flag AND a key.
        """
        if call_class is CallClass.VIDEO and self.chooser is not None and not self.has_platform_credential():
            raise NoCredentialAvailable(
                "Video generation requires a selected API key. Select one before generating a video."
            )
        token = self._manual or self.env_default
        if not token:
            raise NoCredentialAvailable()
        return token

    def status(self) -> Dict[str, bool]:
        return {
            "has_manual": self.has_manual,
            "has_environment": self.has_environment,
            "has_platform": self.has_platform_credential(),
            "platform_required": self.chooser is not None,
            "available": self.is_available(CallClass.GENERAL),
        }


class FlagPlatformChooser:
    """
    Chooser for hosts without an interactive picker: the selection is a flag
    flipped by the HTTP layer (POST /credentials/platform/select).
    """

    def __init__(self) -> None:
        self._selected = False

    def open_select(self) -> None:
        self._selected = True

    def has_selection(self) -> bool:
        return self._selected

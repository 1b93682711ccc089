"""Client-side session snapshot, its persistence and change notification.

A ``SessionContext`` owns reads and writes of the persisted snapshot and tells
its subscribers about every change. Contexts opened on the same storage share
a ``SessionBroadcast`` channel, so a logout in one view (or "tab") is observed
by all the others without reloading.
"""
import json
import logging
import os
import threading
from enum import Enum
from pathlib import Path
from typing import Callable, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, ValidationError

logger = logging.getLogger(__name__)


class View(str, Enum):
    LOGIN = "login"
    REGISTER = "register"
    OTP = "otp"
    DASHBOARD = "dashboard"


class SessionEvent(str, Enum):
    UPDATED = "updated"
    CLEARED = "cleared"


class SessionUser(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: Optional[str] = None
    phoneNumber: str
    fullname: Optional[str] = None
    isVerified: bool = False


class SessionSnapshot(BaseModel):
    model_config = ConfigDict(extra="ignore")

    user: Optional[SessionUser] = None
    accessToken: Optional[str] = None
    isVerified: bool = False
    currentView: View = View.LOGIN

    @classmethod
    def pending(cls, phone_number: str, fullname: Optional[str]) -> "SessionSnapshot":
        return cls(
            user=SessionUser(phoneNumber=phone_number, fullname=fullname, isVerified=False),
            accessToken=None,
            isVerified=False,
            currentView=View.OTP,
        )

    @classmethod
    def authenticated(cls, user: SessionUser, access_token: str) -> "SessionSnapshot":
        return cls(user=user, accessToken=access_token, isVerified=True, currentView=View.DASHBOARD)

    @property
    def is_authenticated(self) -> bool:
        return self.isVerified and bool(self.accessToken)

    @property
    def is_pending_verification(self) -> bool:
        return not self.isVerified and self.user is not None and bool(self.user.phoneNumber)


class SessionStorage:
    """JSON file holding one snapshot; the browser-storage stand-in."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def read(self) -> Optional[SessionSnapshot]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            logger.warning(f"Could not read session file {self.path}: {e}")
            return None
        try:
            return SessionSnapshot.model_validate(json.loads(raw))
        except (json.JSONDecodeError, ValidationError, TypeError) as e:
            # unreadable snapshot means no session
            logger.warning(f"Discarding unreadable session snapshot: {e}")
            return None

    def write(self, snapshot: SessionSnapshot) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_name(self.path.name + ".tmp")
        tmp.write_text(snapshot.model_dump_json(), encoding="utf-8")
        os.replace(tmp, self.path)

    def remove(self) -> None:
        try:
            self.path.unlink()
        except FileNotFoundError:
            pass


BroadcastListener = Callable[[SessionEvent, object], None]
SessionListener = Callable[[SessionEvent, Optional[SessionSnapshot]], None]


class SessionBroadcast:
    """Named in-process channel, one per storage location."""

    _channels: Dict[str, "SessionBroadcast"] = {}
    _lock = threading.Lock()

    def __init__(self, name: str):
        self.name = name
        self._listeners: List[BroadcastListener] = []

    @classmethod
    def channel(cls, name: str) -> "SessionBroadcast":
        with cls._lock:
            if name not in cls._channels:
                cls._channels[name] = cls(name)
            return cls._channels[name]

    def subscribe(self, listener: BroadcastListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def publish(self, event: SessionEvent, origin: object) -> None:
        for listener in list(self._listeners):
            listener(event, origin)


class SessionContext:
    def __init__(self, storage: SessionStorage, channel: Optional[SessionBroadcast] = None):
        self.storage = storage
        self.channel = channel or SessionBroadcast.channel(str(storage.path.resolve()))
        self._listeners: List[SessionListener] = []
        self._unsubscribe = self.channel.subscribe(self._on_broadcast)

    @property
    def snapshot(self) -> Optional[SessionSnapshot]:
        return self.storage.read()

    def update(self, snapshot: SessionSnapshot) -> None:
        self.storage.write(snapshot)
        self._notify(SessionEvent.UPDATED, snapshot)
        self.channel.publish(SessionEvent.UPDATED, self)

    def clear(self) -> None:
        self.storage.remove()
        self._notify(SessionEvent.CLEARED, None)
        self.channel.publish(SessionEvent.CLEARED, self)

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def close(self) -> None:
        self._unsubscribe()
        self._listeners.clear()

    def _on_broadcast(self, event: SessionEvent, origin: object) -> None:
        if origin is self:
            return
        # re-read: the other context may have written something newer
        self._notify(event, self.snapshot)

    def _notify(self, event: SessionEvent, snapshot: Optional[SessionSnapshot]) -> None:
        for listener in list(self._listeners):
            try:
                listener(event, snapshot)
            except Exception:
                logger.exception(f"Session listener failed on {event.value}")

# vehicle_registry/services/providers/http.py
"""
Transport ל-data.gov.il: GET יחיד עם טיימר, טוקן ביטול, ובלי retries.
כל קריאה מחזירה בדיוק תוצאה אחת: TransportSuccess / TransportTimeout / TransportNetworkFailure.
"""
import logging
import socket
import threading
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Union

import requests

from vehicle_registry.config import DEFAULT_UA
from vehicle_registry.services.query import QueryDescriptor

logger = logging.getLogger(__name__)

CHUNK_SIZE = 8192


class RequestCancelled(Exception):
    pass


class CancellationToken:
    """
    Cooperative cancellation shared between the caller, the timeout timer and
    the in-flight request. Callbacks registered before cancel() run once on
    cancel(); callbacks registered after it run immediately.
    """

    def __init__(self):
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._callbacks: List[Callable[[], None]] = []

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        with self._lock:
            if self._event.is_set():
                return
            self._event.set()
            callbacks, self._callbacks = self._callbacks, []
        for cb in callbacks:
            try:
                cb()
            except Exception:
                logger.debug("cancel callback failed", exc_info=True)

    def register(self, callback: Callable[[], None]) -> Callable[[], None]:
        """Returns a function that unregisters the callback."""
        with self._lock:
            if not self._event.is_set():
                self._callbacks.append(callback)

                def _unregister() -> None:
                    with self._lock:
                        try:
                            self._callbacks.remove(callback)
                        except ValueError:
                            pass

                return _unregister
        callback()
        return lambda: None

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise RequestCancelled()


@dataclass(frozen=True)
class TransportSuccess:
    status_code: int
    body: bytes


@dataclass(frozen=True)
class TransportTimeout:
    pass


@dataclass(frozen=True)
class TransportNetworkFailure:
    message: str


TransportOutcome = Union[TransportSuccess, TransportTimeout, TransportNetworkFailure]


class Transport:
    """
    עטיפת requests ל-GET יחיד. הבקשה רצה ב-thread משלה, והקורא מחכה לתוצאה או לביטול -
    מה שקודם. ביטול סוגר את ה-socket הפעיל, כך שגם שרת שמטפטף בתים לא מחזיק את הקריאה.
    """

    def __init__(self, base_url: str, user_agent: str = DEFAULT_UA,
                 session_factory: Callable[[], requests.Session] = requests.Session):
        self.base_url = base_url
        self.user_agent = user_agent or DEFAULT_UA
        self.session_factory = session_factory

    def execute(self, descriptor: QueryDescriptor, timeout_ms: int,
                cancellation_token: Optional[CancellationToken] = None) -> TransportOutcome:
        # scope פרטי לקריאה: ביטול חיצוני נכנס פנימה, הטיימר לא יוצא החוצה
        scope = CancellationToken()
        unlink = cancellation_token.register(scope.cancel) if cancellation_token else (lambda: None)
        timed_out = threading.Event()

        def _expire() -> None:
            timed_out.set()
            scope.cancel()

        timer = threading.Timer(timeout_ms / 1000.0, _expire)
        timer.daemon = True

        session = self.session_factory()
        session.headers.update({"User-Agent": self.user_agent, "Accept": "application/json"})
        state: Dict[str, Any] = {}
        wake = threading.Event()
        scope.register(lambda: self._abort(session, state))
        scope.register(wake.set)

        timer.start()
        try:
            if scope.cancelled:
                return self._timeout(timed_out)
            worker = threading.Thread(
                target=self._fetch,
                args=(session, descriptor, timeout_ms / 1000.0, scope, state, wake),
                daemon=True,
            )
            worker.start()
            wake.wait()

            outcome = state.get("outcome")
            if outcome is None or isinstance(outcome, TransportTimeout):
                return self._timeout(timed_out)
            return outcome
        finally:
            timer.cancel()
            unlink()
            if "outcome" in state:
                session.close()

    def _fetch(self, session, descriptor: QueryDescriptor, timeout_s: float,
               scope: CancellationToken, state: Dict[str, Any], wake: threading.Event) -> None:
        try:
            response = session.get(
                self.base_url,
                params=descriptor.to_params(),
                timeout=timeout_s,
                stream=True,
            )
            state["response"] = response
            try:
                # ביטול שקרה לפני שה-response נשמר לא הספיק לסגור את ה-socket
                scope.raise_if_cancelled()
                body = self._read_body(response, scope)
            finally:
                response.close()
            state["outcome"] = TransportSuccess(status_code=response.status_code, body=body)
        except (RequestCancelled, requests.Timeout):
            state["outcome"] = TransportTimeout()
        except (requests.RequestException, OSError) as e:
            # socket שנסגר בביטול מגיע לכאן כשגיאת חיבור
            if scope.cancelled:
                state["outcome"] = TransportTimeout()
            else:
                logger.error("Registry request failed: %s", e)
                state["outcome"] = TransportNetworkFailure(message=str(e) or "Failed to fetch vehicle data")
        except Exception as e:
            # חריגה שלא נתפסת כאן הייתה נבלעת ב-thread והקורא היה מחכה לשווא
            logger.exception("Registry request crashed")
            state["outcome"] = TransportNetworkFailure(message=str(e) or "Failed to fetch vehicle data")
        finally:
            wake.set()

    @staticmethod
    def _abort(session, state: Dict[str, Any]) -> None:
        """Shuts down the live socket; Session.close() alone leaves a checked-out connection open."""
        response = state.get("response")
        if response is not None:
            conn = getattr(getattr(response, "raw", None), "_connection", None)
            sock = getattr(conn, "sock", None)
            if sock is not None:
                try:
                    sock.shutdown(socket.SHUT_RDWR)
                except OSError:
                    pass
            response.close()
        session.close()

    @staticmethod
    def _read_body(response, token: CancellationToken) -> bytes:
        chunks = []
        for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
            token.raise_if_cancelled()
            if chunk:
                chunks.append(chunk)
        token.raise_if_cancelled()
        return b"".join(chunks)

    @staticmethod
    def _timeout(timed_out: threading.Event) -> TransportTimeout:
        if timed_out.is_set():
            logger.error("Registry request timed out")
        else:
            logger.info("Registry request cancelled by caller")
        return TransportTimeout()

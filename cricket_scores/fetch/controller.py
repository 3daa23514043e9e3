"""
Retrying acquisition around a single score source.

Attempts run one at a time. Attempt n waits min(backoff_base * 2**n, cap)
before starting (attempt 0 starts immediately) and must finish within
base_timeout * (n + 1). Timeouts, connection failures and 5xx responses are
retried while budget remains; 4xx responses and unparseable bodies end the run.
"""
import asyncio
import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Awaitable, Callable, List, Optional

import httpx

from cricket_scores.fetch.base import AttemptRecord, ScorePayloadError, ScoreSource
from cricket_scores.schemas import ErrorKind, FetchConfig, FetchFailure, FetchOutcome, FetchSuccess

logger = logging.getLogger(__name__)

class FetchState(str, Enum):
    IDLE = "idle"
    ATTEMPTING = "attempting"
    BACKOFF = "backoff"
    SUCCEEDED = "succeeded"
    TERMINAL_FAILURE = "terminal_failure"
    RETRIES_EXHAUSTED = "retries_exhausted"

@dataclass
class ClassifiedError:
    kind: ErrorKind
    message: str
    status_code: Optional[int] = None
    expected: bool = True

def backoff_delay_ms(config: FetchConfig, attempt: int) -> int:
    """Delay before the given attempt; zero for attempt 0."""
    if attempt <= 0:
        return 0
    return min(config.backoff_base_ms * 2 ** attempt, config.backoff_cap_ms)

def attempt_timeout_ms(config: FetchConfig, attempt: int) -> int:
    return config.base_timeout_ms * (attempt + 1)

def classify_error(exc: BaseException) -> ClassifiedError:
    # Timeouts first: httpx.TimeoutException is a TransportError and TimeoutError is an OSError
    if isinstance(exc, (asyncio.TimeoutError, httpx.TimeoutException)):
        return ClassifiedError(ErrorKind.TIMEOUT, "Request timed out")
    if isinstance(exc, httpx.HTTPStatusError):
        status = exc.response.status_code
        return ClassifiedError(ErrorKind.HTTP_ERROR, f"HTTP error! Status: {status}", status_code=status)
    if isinstance(exc, ScorePayloadError):
        return ClassifiedError(ErrorKind.PARSE_ERROR, str(exc))
    if isinstance(exc, (httpx.TransportError, OSError)):
        return ClassifiedError(ErrorKind.NETWORK_ERROR, str(exc) or type(exc).__name__)
    return ClassifiedError(ErrorKind.NETWORK_ERROR, f"{type(exc).__name__}: {exc}", expected=False)

def is_retryable(error: ClassifiedError) -> bool:
    if error.kind is ErrorKind.HTTP_ERROR:
        return not (400 <= (error.status_code or 0) < 500)
    return error.kind in (ErrorKind.TIMEOUT, ErrorKind.NETWORK_ERROR)

@dataclass
class _AcquisitionRun:
    config: FetchConfig
    attempts: List[AttemptRecord] = field(default_factory=list)
    superseded: bool = False

class FetchController:
    """
    Runs one acquisition at a time against a score source.

    A new acquire() cancels the run still in flight on the same controller;
    the superseded caller gets a FetchFailure with reason CANCELLED.
    """

    def __init__(
        self,
        source: ScoreSource,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        on_attempt: Optional[Callable[[AttemptRecord], None]] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.source = source
        self.state = FetchState.IDLE
        self._sleep = sleep
        self._on_attempt = on_attempt
        self._clock = clock
        self._inflight: Optional[asyncio.Task] = None
        self._inflight_run: Optional[_AcquisitionRun] = None

    async def acquire(self, config: Optional[FetchConfig] = None) -> FetchOutcome:
        run = _AcquisitionRun(config=config or FetchConfig())
        self.cancel()

        task = asyncio.ensure_future(self._execute(run))
        self._inflight, self._inflight_run = task, run
        try:
            return await task
        except asyncio.CancelledError:
            if not run.superseded:
                self.state = FetchState.IDLE
                raise
            if run.attempts and run.attempts[-1].error_kind is None:
                run.attempts[-1].error_kind = ErrorKind.CANCELLED
            logger.info("FETCH CANCELLED after %d attempt(s)", len(run.attempts))
            return FetchFailure(
                reason=ErrorKind.CANCELLED,
                attempts=len(run.attempts),
                last_message="Request cancelled",
            )
        finally:
            if self._inflight is task:
                self._inflight, self._inflight_run = None, None

    def cancel(self) -> bool:
        """Cancel the in-flight run, releasing its deadline timer and HTTP request."""
        task, run = self._inflight, self._inflight_run
        if task is None or task.done():
            return False
        run.superseded = True
        task.cancel()
        return True

    async def _execute(self, run: _AcquisitionRun) -> FetchOutcome:
        config = run.config
        total = config.max_attempts
        outcome: Optional[FetchOutcome] = None
        last_error: Optional[ClassifiedError] = None

        for n in range(total):
            delay_ms = backoff_delay_ms(config, n)
            if delay_ms:
                self.state = FetchState.BACKOFF
                logger.info("FETCH BACKOFF: waiting %dms before attempt %d/%d", delay_ms, n + 1, total)
                await self._sleep(delay_ms / 1000)

            timeout_ms = attempt_timeout_ms(config, n)
            record = AttemptRecord(index=n, started_at=self._clock(), timeout_ms=timeout_ms, delay_ms=delay_ms)
            run.attempts.append(record)
            self.state = FetchState.ATTEMPTING
            logger.info("FETCH ATTEMPT %d/%d: source=%s, timeout=%dms", n + 1, total, self.source.name, timeout_ms)

            try:
                records = await asyncio.wait_for(self.source.fetch(), timeout=timeout_ms / 1000)
            except Exception as e:
                last_error = classify_error(e)
                record.error_kind = last_error.kind
                record.status_code = last_error.status_code
                record.message = last_error.message
                record.timed_out = last_error.kind is ErrorKind.TIMEOUT
                self._notify(record)

                if not is_retryable(last_error):
                    logger.warning(
                        "FETCH TERMINAL ERROR on attempt %d/%d (%s): %s",
                        n + 1, total, last_error.kind.value, last_error.message,
                    )
                    self.state = FetchState.TERMINAL_FAILURE
                    outcome = self._failure(last_error, len(run.attempts))
                    break

                logger.warning(
                    "FETCH ATTEMPT %d/%d FAILED (%s): %s",
                    n + 1, total, last_error.kind.value, last_error.message,
                    exc_info=e if not last_error.expected else None,
                )
                continue

            record.message = f"{len(records)} records"
            self._notify(record)
            logger.info("FETCH SUCCESS on attempt %d/%d: %d records", n + 1, total, len(records))
            self.state = FetchState.SUCCEEDED
            outcome = FetchSuccess(records=tuple(records), attempts=n + 1)
            break

        if outcome is None:
            logger.error("FETCH RETRIES EXHAUSTED after %d attempts: %s", len(run.attempts), last_error.message)
            self.state = FetchState.RETRIES_EXHAUSTED
            outcome = self._failure(last_error, len(run.attempts))

        return outcome

    def _notify(self, record: AttemptRecord) -> None:
        if self._on_attempt is None:
            return
        try:
            self._on_attempt(record)
        except Exception:
            logger.exception("FETCH OBSERVER FAILED on attempt %d", record.index + 1)

    @staticmethod
    def _failure(error: ClassifiedError, attempts: int) -> FetchFailure:
        return FetchFailure(
            reason=error.kind,
            status_code=error.status_code,
            attempts=attempts,
            last_message=error.message,
        )

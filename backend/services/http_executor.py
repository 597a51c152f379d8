"""Resilient outbound HTTP requests with bounded exponential backoff.

Every upstream call (geocoding, routing, places, reviews) goes through
``execute``. A failed attempt is retried only when it looks transient: no
response at all, or a 5xx. Anything else is surfaced to the caller on the
spot.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional

import httpx

from domain.errors import UpstreamServerError, error_for_status
from domain.models import (
    DEFAULT_RETRY_POLICY,
    AttemptOutcome,
    FatalFailure,
    RequestDescriptor,
    RetryableFailure,
    RetryPolicy,
    Success,
    UpstreamResponse,
)
from settings import settings

logger = logging.getLogger(__name__)

SleepFn = Callable[[float], Awaitable[Any]]


def _parse_body(response: httpx.Response) -> Any:
    """Decode JSON when possible, fall back to text."""
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


def _to_upstream_response(response: httpx.Response) -> UpstreamResponse:
    return UpstreamResponse(
        status_code=response.status_code,
        body=_parse_body(response),
        url=str(response.url),
        headers=dict(response.headers),
    )


def classify_response(response: UpstreamResponse) -> AttemptOutcome:
    """Success below 400, retryable from 500 up, fatal in between."""
    if response.ok:
        return Success(response)
    error = error_for_status(
        response.status_code,
        f"Request failed with status code {response.status_code}",
        url=response.url,
        body=response.body,
    )
    if response.status_code >= 500:
        return RetryableFailure(error)
    return FatalFailure(error)


async def _attempt(client: httpx.AsyncClient, descriptor: RequestDescriptor) -> AttemptOutcome:
    try:
        response = await client.request(
            descriptor.method,
            descriptor.url,
            params=dict(descriptor.params),
            headers=dict(descriptor.headers),
        )
    except httpx.RequestError as exc:
        error = UpstreamServerError(
            f"No response from upstream: {exc.__class__.__name__}: {exc}",
            status_code=None,
            url=descriptor.url,
        )
        error.__cause__ = exc
        return RetryableFailure(error)
    return classify_response(_to_upstream_response(response))


async def _execute_with_client(
    client: httpx.AsyncClient,
    descriptor: RequestDescriptor,
    policy: RetryPolicy,
    sleep: SleepFn,
) -> UpstreamResponse:
    attempt = 0
    while True:
        attempt += 1
        outcome = await _attempt(client, descriptor)
        if isinstance(outcome, Success):
            return outcome.response
        if isinstance(outcome, FatalFailure) or attempt > policy.max_attempts:
            raise outcome.error

        delay_ms = policy.delay_ms(attempt)
        logger.warning(
            "Transient upstream failure on %s %s params=%s (status=%s). attempt=%d/%d sleep=%dms",
            descriptor.method,
            descriptor.url,
            descriptor.redacted_params(),
            getattr(outcome.error, "status_code", None),
            attempt,
            policy.total_attempts,
            delay_ms,
        )
        await sleep(delay_ms / 1000.0)


async def execute(
    descriptor: RequestDescriptor,
    policy: RetryPolicy = DEFAULT_RETRY_POLICY,
    *,
    client: Optional[httpx.AsyncClient] = None,
    sleep: SleepFn = asyncio.sleep,
) -> UpstreamResponse:
    """
    Perform ``descriptor`` and return the upstream response.

    Retryable failures are retried up to ``policy.max_attempts`` times, waiting
    ``base_delay_ms * 2**(k-1)`` after failed attempt k. The last error is
    raised once retries run out. Fatal failures (4xx) are raised immediately.

    When no client is passed a short-lived one is opened for this call only.
    """
    if client is not None:
        return await _execute_with_client(client, descriptor, policy, sleep)

    async with httpx.AsyncClient(
        timeout=httpx.Timeout(settings.HTTP_TIMEOUT_SECONDS),
        follow_redirects=True,
    ) as own_client:
        return await _execute_with_client(own_client, descriptor, policy, sleep)

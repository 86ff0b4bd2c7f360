"""
Sequential multi-provider cascade.

Providers are tried one at a time in the given order. Each call is bounded by
a timeout that cancels the in-flight request. The first provider whose output
passes interpretation wins; no provider is retried and later providers are
never called once a result exists.

Ordinary provider failures never escape as exceptions: they are recorded as
Attempts on the returned CascadeOutcome.
"""

import asyncio
import logging
import time
from typing import Callable, Optional, Sequence, TypeVar

import httpx

from scholarcast.config import settings
from scholarcast.models.cascade import Attempt, CascadeOutcome, FailureReason
from scholarcast.providers.base import (
    BaseProvider,
    ProviderError,
    ProviderOutput,
    ProviderResponseError,
)
from scholarcast.utils.time import elapsed_ms

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CascadeConfigurationError(ValueError):
    """The cascade was called with an unusable provider list."""


def _failed(
    provider: BaseProvider,
    reason: FailureReason,
    error: str,
    started: float,
    model: Optional[str] = None,
) -> Attempt:
    return Attempt(
        provider=provider.name,
        succeeded=False,
        failure_reason=reason,
        error=error,
        model=model or provider.model,
        duration_ms=elapsed_ms(started),
    )


async def run_cascade(
    providers: Sequence[BaseProvider],
    prompt,
    interpret: Callable[[ProviderOutput], Optional[T]],
    timeout: Optional[float] = None,
) -> CascadeOutcome[T]:
    """Try providers in order until one yields an interpretable result.

    Args:
        providers: Enabled providers, highest priority first
        prompt: Provider input (TextPrompt or ImagePrompt)
        interpret: Extract + validate a provider output; None means invalid
        timeout: Per-call timeout in seconds (defaults to settings.provider_timeout)

    Returns:
        CascadeOutcome with the first valid result (or None) and every attempt

    Raises:
        CascadeConfigurationError: if `providers` is empty
    """
    if not providers:
        raise CascadeConfigurationError("run_cascade() needs at least one provider")

    call_timeout = float(timeout if timeout is not None else settings.provider_timeout)
    outcome: CascadeOutcome[T] = CascadeOutcome()

    for provider in providers:
        started = time.monotonic()
        try:
            output = await asyncio.wait_for(provider.invoke(prompt), timeout=call_timeout)
        except (asyncio.TimeoutError, httpx.TimeoutException):
            logger.warning(f"Cascade: {provider.name} timed out after {call_timeout}s")
            outcome.attempts.append(_failed(
                provider, FailureReason.TIMEOUT, f"Timeout after {call_timeout}s", started
            ))
            continue
        except ProviderResponseError as e:
            logger.warning(f"Cascade: {provider.name} returned an unusable response: {e}")
            outcome.attempts.append(_failed(
                provider, FailureReason.INVALID_RESPONSE, str(e), started
            ))
            continue
        except (httpx.HTTPError, ProviderError) as e:
            logger.warning(f"Cascade: {provider.name} transport error: {e!r}")
            outcome.attempts.append(_failed(
                provider, FailureReason.TRANSPORT_ERROR, str(e) or type(e).__name__, started
            ))
            continue
        except Exception as e:
            logger.exception(f"Cascade: {provider.name} failed")
            outcome.attempts.append(_failed(
                provider, FailureReason.TRANSPORT_ERROR, str(e) or type(e).__name__, started
            ))
            continue

        result = interpret(output)
        if result is None:
            logger.warning(f"Cascade: {provider.name} output failed extraction/validation")
            outcome.attempts.append(_failed(
                provider,
                FailureReason.INVALID_RESPONSE,
                "No valid structured payload in response",
                started,
                model=output.model,
            ))
            continue

        outcome.attempts.append(Attempt(
            provider=provider.name,
            succeeded=True,
            model=output.model,
            duration_ms=elapsed_ms(started),
        ))
        outcome.result = result
        outcome.provider_used = provider.name
        outcome.model_used = output.model
        logger.info(
            f"Cascade: {provider.name} succeeded after {len(outcome.attempts)} attempt(s)"
        )
        return outcome

    logger.warning(
        f"Cascade exhausted: {[(a.provider, a.failure_reason.value) for a in outcome.attempts]}"
    )
    return outcome

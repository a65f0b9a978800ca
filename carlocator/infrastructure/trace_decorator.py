"""
Trace decorator for async location handlers.

Wraps an async callable (gateway lookup or MCP tool) with an
OpenTelemetry span and records duration and outcome as a workflow step.

Usage:
    @traced(span_name="geocoding.forward_lookup", handler_type="gateway")
    async def forward_lookup(self, query: str) -> CandidateLookup:
        ...
"""

from __future__ import annotations

import functools
import inspect
import time
from typing import Any, Callable

from loguru import logger

from carlocator.infrastructure.observability import get_observability_manager


def traced(
    span_name: str,
    handler_type: str = "tool",
) -> Callable:
    """
    Decorator that wraps an async handler with an OpenTelemetry span.

    Args:
        span_name: The span name (e.g. "mcp.tool.find_service_centers").
        handler_type: "tool" or "gateway".
    """

    def decorator(func: Callable) -> Callable:
        sig = inspect.signature(func)

        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            observability = get_observability_manager()

            bound = sig.bind(*args, **kwargs)
            bound.apply_defaults()

            span_attributes: dict[str, Any] = {
                "carlocator.handler.type": handler_type,
                "carlocator.handler.name": func.__name__,
            }
            for param_name, param_value in bound.arguments.items():
                if param_name == "self":
                    continue
                attr_key = f"carlocator.{handler_type}.param.{param_name}"
                span_attributes[attr_key] = str(param_value)

            start_time = time.monotonic()

            with observability.create_span(
                name=span_name,
                attributes=span_attributes,
            ):
                try:
                    result = await func(*args, **kwargs)
                except Exception as e:
                    duration_ms = (time.monotonic() - start_time) * 1000
                    observability.record_workflow_step(
                        step_name=func.__name__,
                        step_type=handler_type,
                        duration_ms=round(duration_ms, 2),
                        success=False,
                        metadata={"error": str(e)},
                    )
                    logger.error(
                        f"[trace] {span_name} failed after {duration_ms:.1f}ms: {e}"
                    )
                    raise

                duration_ms = (time.monotonic() - start_time) * 1000
                observability.record_workflow_step(
                    step_name=func.__name__,
                    step_type=handler_type,
                    duration_ms=round(duration_ms, 2),
                    success=True,
                )
                logger.debug(f"[trace] {span_name} completed in {duration_ms:.1f}ms")
                return result

        return wrapper

    return decorator

"""
Configuration watching.

watch_config_settings() is the single entry point the controllers use to
follow settings: it subscribes to the host source and delivers the current
snapshot right away, so a listener never misses the initial state.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from .schemas import AppConfig

if TYPE_CHECKING:
    from reqhost.host.events import Disposable, Listener
    from reqhost.host.protocol import ConfigurationSource

logger = logging.getLogger(__name__)


async def watch_config_settings(
    source: ConfigurationSource,
    listener: Listener[AppConfig],
) -> Disposable:
    """
    Follow configuration changes.

    The listener is subscribed first and then called with the current
    snapshot. Changes fired while that first call is suspended are
    delivered as well. If the first call raises, the listener is
    unsubscribed and the error propagates.

    Args:
        source: Host configuration source
        listener: Callback receiving each snapshot (sync or async)

    Returns:
        Subscription handle
    """
    subscription = source.on_did_change(listener)
    try:
        result = listener(source.get())
        if inspect.isawaitable(result):
            await result
    except BaseException:
        subscription.dispose()
        raise
    return subscription


def merge_config(config: AppConfig, changes: Mapping[str, Any]) -> AppConfig:
    """
    Produce a new snapshot with changes applied.

    Keys may be attribute names or their camelCase aliases.
    """
    data = config.model_dump(by_alias=True)
    for key, value in changes.items():
        field = AppConfig.model_fields.get(key)
        data[field.alias if field is not None and field.alias else key] = value
    return AppConfig.model_validate(data)

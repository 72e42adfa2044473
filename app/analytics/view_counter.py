"""
Article view counter.

Increments ``articles.views`` after a visit is logged. The increment is a
single atomic RPC executed off the request thread; failures are logged and
never reach the visitor.
"""

import logging
import threading
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)

INCREMENT_FUNCTION = "increment_article_views"


def run_in_background(target: Callable, *args: Any) -> None:
    thread = threading.Thread(target=target, args=args, daemon=True, name="ViewCounter")
    thread.start()


class ViewCounter:
    """Best-effort, fire-and-forget view increments."""

    def __init__(self, client, runner: Optional[Callable[..., None]] = None):
        """
        Args:
            client: Store client exposing ``rpc``
            runner: Callable scheduling ``target(*args)``; defaults to a daemon thread
        """
        self.client = client
        self.runner = runner or run_in_background

    def schedule(self, article_id: str) -> None:
        """Queue an increment for the article and return immediately."""
        self.runner(self.increment, article_id)

    def increment(self, article_id: str) -> bool:
        """Run the atomic increment. Returns False if the store rejected it."""
        try:
            self.client.rpc(INCREMENT_FUNCTION, {"article_id_input": article_id}).execute()
            return True
        except Exception as e:
            logger.warning(f"Failed to increment views for article {article_id}: {e}")
            return False

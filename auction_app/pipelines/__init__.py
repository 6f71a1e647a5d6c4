"""
Pipelines - stateless orchestration of multi-service flows.
"""

from auction_app.pipelines import auth

__all__ = ["auth"]

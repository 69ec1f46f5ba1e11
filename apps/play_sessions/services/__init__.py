"""
Play sessions app services layer.

Services contain business logic and orchestrate operations across models.
All state-changing operations use transactions and lock the session row.
"""

from .exceptions import (
    PlaySessionsServiceError,
    SessionNotFoundError,
    SessionClosedError,
    VoteNotFoundError,
    ProxyVoteNotFoundError,
)

from .audit import record_audit

from .session_management import (
    get_session,
    lock_open_session,
    list_sessions,
    get_or_create_session,
    update_session_counts,
    complete_session,
    deactivate_session,
    find_expired_data,
    cleanup_old_data,
)

from .vote_management import (
    cast_vote,
    retract_vote,
    cast_proxy_vote,
    cast_bulk_proxy_votes,
    remove_proxy_vote,
    get_proxy_votes,
)

from .statistics import get_statistics


__all__ = [
    # Exceptions
    'PlaySessionsServiceError',
    'SessionNotFoundError',
    'SessionClosedError',
    'VoteNotFoundError',
    'ProxyVoteNotFoundError',

    # Audit
    'record_audit',

    # Session lifecycle
    'get_session',
    'lock_open_session',
    'list_sessions',
    'get_or_create_session',
    'update_session_counts',
    'complete_session',
    'deactivate_session',
    'find_expired_data',
    'cleanup_old_data',

    # Votes
    'cast_vote',
    'retract_vote',
    'cast_proxy_vote',
    'cast_bulk_proxy_votes',
    'remove_proxy_vote',
    'get_proxy_votes',

    # Statistics
    'get_statistics',
]

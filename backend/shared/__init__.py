"""
Shared building blocks for the Ronda backend.

- shared.config: settings (pydantic-settings), structured logging, constants
- shared.infrastructure: SQLAlchemy engine/sessions, transactions, request correlation
- shared.utils: domain exceptions, the `Result` envelope, pydantic schemas

IMPORT EXAMPLES:
    from shared.config.settings import settings
    from shared.config.constants import TableStatus, ReservationStatus
    from shared.infrastructure.db import get_db, transaction
    from shared.utils.exceptions import NotFoundError, ConflictError
    from shared.utils.result import Result, as_result
"""

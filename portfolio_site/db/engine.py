"""Database engine construction for the portfolio back-office.

Repositories receive the engine and open short-lived connections per call.
"""

from sqlalchemy import Engine, create_engine


def db_create_engine(database_url: str, pool_size: int = 5) -> Engine:
    """Create the SQLAlchemy engine used by every repository.

    Args:
        database_url: SQLAlchemy database URL.
        pool_size: Persistent connection pool size.

    Returns:
        Engine: Configured SQLAlchemy engine.

    Raises:
        ValueError: Raised when the database URL is blank or pool size is invalid.
    """

    normalized_url = database_url.strip()
    if not normalized_url:
        raise ValueError("database_url must not be blank")
    if pool_size < 1:
        raise ValueError("pool_size must be positive")

    if normalized_url.startswith("sqlite"):
        return create_engine(normalized_url)
    return create_engine(normalized_url, pool_pre_ping=True, pool_size=pool_size)

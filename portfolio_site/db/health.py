"""Database health service checking connectivity and schema readiness."""

from sqlalchemy import Engine, bindparam, text
from sqlalchemy.exc import SQLAlchemyError

from portfolio_site.domain import HealthStatus

from .interfaces import DatabaseHealthPort

_DB_REQUIRED_TABLES = ("analytics_event", "category", "portfolio_item")


class SQLAlchemyDatabaseHealthService(DatabaseHealthPort):
    """Health service reporting whether the analytics schema is reachable."""

    def __init__(self, engine: Engine):
        """Initialize database health service.

        Args:
            engine: SQLAlchemy engine used for connectivity checks.

        Raises:
            ValueError: Raised when engine is None.
        """

        if engine is None:
            raise ValueError("engine must not be None")
        self._engine = engine

    def db_connection_label(self) -> str:
        """Return the target database URL with the password masked."""

        return self._engine.url.render_as_string(hide_password=True)

    def db_check_health(self) -> HealthStatus:
        """Verify connectivity and report missing application tables.

        Returns:
            HealthStatus: `ok` when every table exists, `degraded` otherwise.

        Raises:
            ConnectionError: Raised when the database cannot be queried.
        """

        try:
            with self._engine.connect() as connection:
                rows = connection.execute(
                    text(
                        "SELECT table_name FROM information_schema.tables "
                        "WHERE table_schema = current_schema() AND table_name IN :table_names"
                    ).bindparams(bindparam("table_names", expanding=True)),
                    {"table_names": list(_DB_REQUIRED_TABLES)},
                ).all()
        except SQLAlchemyError as error:
            raise ConnectionError("database connectivity check failed") from error

        present_tables = {row[0] for row in rows}
        missing_tables = [table_name for table_name in _DB_REQUIRED_TABLES if table_name not in present_tables]
        if missing_tables:
            return HealthStatus(status="degraded", detail=f"missing tables: {', '.join(missing_tables)}")
        return HealthStatus(status="ok", detail="database connectivity and schema verified")

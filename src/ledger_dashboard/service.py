"""Dashboard service: fetch one ledger and build its report."""

from datetime import date
from typing import Optional

from ledger_dashboard.config import Config
from ledger_dashboard.models.ledger import DataShapeError, Ledger
from ledger_dashboard.models.report import Report
from ledger_dashboard.processing.report_generator import generate_report
from ledger_dashboard.store import LedgerNotFoundError, LedgerStore
from ledger_dashboard.utils.logging_config import LogContext, get_logger

logger = get_logger(__name__)


class DashboardService:
    """Builds dashboard reports for users of a ledger store.

    Each call fetches the document afresh; nothing is cached or shared
    between requests, so concurrent calls need no coordination.
    """

    def __init__(self, store: LedgerStore, config: Optional[Config] = None):
        """Initialize the service.

        Args:
            store: Source of raw ledger documents.
            config: Configuration (taxonomy and report settings).
        """
        self.store = store
        self.config = config or Config()

    async def build_report(
        self,
        user_id: str,
        selected_year: Optional[str] = None,
        today: Optional[date] = None,
    ) -> Report:
        """Fetch a user's ledger and build the dashboard report.

        Args:
            user_id: User whose ledger to report on.
            selected_year: Year to scope year-level figures to, if any.
            today: Reference date; defaults to the current date.

        Returns:
            The dashboard report.

        Raises:
            LedgerNotFoundError: If the user has no ledger.
            DataShapeError: If the document's top-level fields are malformed.
        """
        with LogContext(
            logger,
            "build_report",
            expected=(LedgerNotFoundError, DataShapeError),
            user_id=user_id,
            selected_year=selected_year,
        ):
            logger.info(f"Fetching data for userId: {user_id}")
            document = await self.store.fetch(user_id)

            ledger = Ledger.from_document(document)
            return generate_report(
                ledger,
                self.config.taxonomy,
                self.config.report,
                today or date.today(),
                selected_year,
            )

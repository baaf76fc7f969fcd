import logging
from abc import ABC, abstractmethod
from typing import Any, Optional

from shipplan.session import PlanSession

logger = logging.getLogger(__name__)


class DataPipeline(ABC):
    """
    Abstract base class for plan pipelines (Import, Check, ...).
    Follows an Extract -> Transform -> Load (ETL) pattern against one PlanSession.
    """

    def __init__(self, report_type: str, session: PlanSession, test_mode: bool = False):
        self.report_type = report_type
        self.session = session
        self.test_mode = test_mode
        # Filled by load(): what the run produced, for the caller to report.
        self.summary: dict[str, Any] = {}

    def run(self) -> Optional[dict[str, Any]]:
        """
        Orchestrates the pipeline execution.
        Returns the run summary, or None when nothing was loaded.
        """
        logger.info(f"🚀 STEP: {self.report_type.upper()}")
        logger.info("-" * 30)

        # --- 1. EXTRACT ---
        raw_data = self.extract()
        if raw_data is None or len(raw_data) == 0:
            logger.warning(f"⚠️ No data extracted for {self.report_type}.")
            return None

        # --- 2. TRANSFORM ---
        validated_data = self.transform(raw_data)
        if validated_data is None:
            logger.error(f"❌ Transformation failed for {self.report_type}.")
            return None

        # --- 3. LOAD ---
        self.load(validated_data)

        logger.info(f"✅ {self.report_type.capitalize()} Pipeline Finished.\n")
        logger.info("=" * 60)
        return self.summary

    @abstractmethod
    def extract(self) -> Any:
        """
        Responsible for finding the input report and returning its raw rows.
        """
        pass

    @abstractmethod
    def transform(self, raw_data: Any) -> Any:
        """
        Responsible for turning raw rows into validated entries.
        Returns None when the input cannot be used.
        """
        pass

    @abstractmethod
    def load(self, validated_data: Any) -> None:
        """
        Persists the result and fills self.summary.
        """
        pass

import os
import logging
from datetime import datetime
from typing import Dict, Any, Optional

logger = logging.getLogger(__name__)

# Default report location: <project root>/reports
current_directory = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
report_directory = os.path.join(current_directory, 'reports')


class CalculationAudit:
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(CalculationAudit, cls).__new__(cls)
            cls._instance.initialized = False
        return cls._instance

    def __init__(self):
        if self.initialized:
            return

        self.enabled = False
        self.session_id = None
        self.log_dir = report_directory
        self.log_file = None
        self.initialized = True

    def enable(self, log_dir: Optional[str] = None) -> str:
        """
        Start a new audit session and return the path of its log file.
        Nothing is written before this is called.
        """
        self.session_id = datetime.now().strftime("%Y%m%d_%H%M%S")
        self.log_dir = log_dir or report_directory
        os.makedirs(self.log_dir, exist_ok=True)
        self.log_file = os.path.join(self.log_dir, f"audit_{self.session_id}.txt")

        with open(self.log_file, "w", encoding="utf-8") as f:
            f.write("=== ROUTE EMISSION CALCULATION AUDIT LOG ===\n")
            f.write(f"Session: {self.session_id}\n")
            f.write("===========================================\n\n")

        self.enabled = True
        logger.info(f"Audit log: {self.log_file}")
        return self.log_file

    def disable(self):
        self.enabled = False

    def log_calculation(self, context: str, formula: str, variables: Dict[str, Any], result: float, unit: str = ""):
        """
        Log a calculation step to the audit file.

        Args:
            context: What is being calculated (e.g., "Segment 1 (train) of route-0")
            formula: Text representation of the equation (e.g., "Distance(km) * EF")
            variables: Actual values used (e.g., {"Distance_km": 100, "EF": 0.041})
            result: The final result
            unit: Unit of the result (e.g., "kgCO2e")
        """
        if not self.enabled:
            return

        try:
            with open(self.log_file, "a", encoding="utf-8") as f:
                f.write(f"[{datetime.now().strftime('%H:%M:%S')}] {context}\n")
                f.write(f"  Formula: {formula}\n")

                vars_str = ", ".join([f"{k}={v}" for k, v in variables.items()])
                f.write(f"  Inputs:  {vars_str}\n")

                f.write(f"  Result:  {result:.4f} {unit}\n")
                f.write("-" * 40 + "\n")
        except OSError as e:
            logger.error(f"Failed to write to audit log: {e}")


# Global Accessor
audit_logger = CalculationAudit()

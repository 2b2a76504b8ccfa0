import csv
from pathlib import Path

from core.strategies.triangular import TriadOpportunity


class OpportunityLogger:
    """Logs profitable triads to a CSV file"""

    def __init__(self, filename: str = "triad_opportunities.csv"):
        self.filename = filename
        self.headers = [
            "Timestamp",
            "Route",
            "Start Token",
            "Start Amount",
            "Final Amount",
            "Profit",
            "Profit %",
            "Pools"
        ]
        self._ensure_file()

    def _ensure_file(self):
        """Create file with headers if it doesn't exist"""
        file_path = Path(self.filename)
        if not file_path.exists():
            with open(self.filename, mode='w', newline='', encoding='utf-8') as f:
                writer = csv.writer(f)
                writer.writerow(self.headers)

    def log(self, opportunities: list[TriadOpportunity]):
        """Log a list of opportunities"""
        if not opportunities:
            return

        with open(self.filename, mode='a', newline='', encoding='utf-8') as f:
            writer = csv.writer(f)
            for opp in opportunities:
                writer.writerow([
                    opp.timestamp.strftime("%Y-%m-%d %H:%M:%S"),
                    opp.description,
                    opp.start_token,
                    str(opp.start_amount),
                    f"{opp.final_amount:.18f}",
                    f"{opp.profit:.18f}",
                    f"{opp.profit_pct:.4f}%",
                    " ".join(opp.route.pools),
                ])

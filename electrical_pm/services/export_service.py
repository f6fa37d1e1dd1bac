import csv
import pandas as pd
from typing import List, Sequence
from io import BytesIO


class ExportService:
    """Service for exporting report rows to downloadable formats."""

    @staticmethod
    def to_csv_text(rows: List[dict], columns: Sequence[str]) -> str:
        """
        Render rows as CSV with every cell quoted.

        Args:
            rows: List of dictionaries keyed by column name
            columns: Header row, also fixing the column order

        Returns:
            CSV text, header included even when there are no rows
        """
        df = pd.DataFrame(rows, columns=list(columns))

        # Convert datetime columns to string
        for col in df.columns:
            if pd.api.types.is_datetime64_any_dtype(df[col]):
                df[col] = df[col].dt.strftime('%Y-%m-%d %H:%M:%S')

        return df.to_csv(index=False, quoting=csv.QUOTE_ALL, lineterminator="\n")

    @staticmethod
    def export_to_csv(rows: List[dict], columns: Sequence[str]) -> BytesIO:
        """Same as to_csv_text, as a UTF-8 buffer ready for streaming."""
        buffer = BytesIO(ExportService.to_csv_text(rows, columns).encode('utf-8'))
        buffer.seek(0)
        return buffer


# Singleton instance
export_service = ExportService()

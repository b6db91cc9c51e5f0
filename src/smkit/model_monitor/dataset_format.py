"""Dataset formats understood by the model monitor analyzer container."""
from typing import Any, Dict


class DatasetFormat(object):
    """Represents a Dataset Format that is used when calling a DefaultModelMonitor."""

    @staticmethod
    def csv(header: bool = True, output_columns_position: str = "START") -> Dict[str, Any]:
        """Returns a DatasetFormat JSON string for use with a DefaultModelMonitor.

        Args:
            header (bool): Whether the csv dataset to baseline and monitor has a header. Default: True.
            output_columns_position (str): The position of the output columns. Must be one of ("START", "END").
                Default: "START".

        Returns:
            dict: JSON string containing DatasetFormat to be used by DefaultModelMonitor.
        """
        if output_columns_position not in ("START", "END"):
            raise ValueError(f"output_columns_position must be START or END, got {output_columns_position}")
        return {"csv": {"header": header, "output_columns_position": output_columns_position}}

    @staticmethod
    def json(lines: bool = True) -> Dict[str, Any]:
        """Returns a DatasetFormat JSON string for use with a DefaultModelMonitor.

        Args:
            lines (bool): Whether the file should be read as a json object per line. Default: True.

        Returns:
            dict: JSON string containing DatasetFormat to be used by DefaultModelMonitor.
        """
        return {"json": {"lines": lines}}

    @staticmethod
    def sagemaker_capture_json() -> Dict[str, Any]:
        """Returns a DatasetFormat SageMaker Capture Json string for use with a DefaultModelMonitor."""
        return {"sagemakerCaptureJson": {}}

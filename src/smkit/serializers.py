"""Encode inference request data for the ``InvokeEndpoint`` API."""
import abc
import csv
import io
import json
from typing import Any, Optional

import numpy as np


class BaseSerializer(abc.ABC):
    """Abstract base class for creation of new serializers.

    Provides a skeleton for customization requiring the overriding of the method serialize and the class
    attribute CONTENT_TYPE.
    """

    @abc.abstractmethod
    def serialize(self, data: Any) -> Any:
        """Serialize data into the media type specified by CONTENT_TYPE."""

    @property
    @abc.abstractmethod
    def CONTENT_TYPE(self) -> str:  # noqa: N802
        """The MIME type of the data sent to the inference endpoint."""


class SimpleBaseSerializer(BaseSerializer):
    """Abstract base class for serializers with a fixed content type."""

    def __init__(self, content_type: str = "application/json"):
        if not isinstance(content_type, str):
            raise ValueError(
                f"content_type must be a string specifying the MIME type of the data sent in requests: "
                f"e.g. 'application/json', 'text/csv', etc. Got {content_type}"
            )
        self.content_type = content_type

    @property
    def CONTENT_TYPE(self) -> str:  # noqa: N802
        return self.content_type


class CSVSerializer(SimpleBaseSerializer):
    """Serialize data of various formats to a CSV-formatted string."""

    def __init__(self, content_type: str = "text/csv"):
        super().__init__(content_type=content_type)

    def serialize(self, data: Any) -> str:
        """Serialize data of various formats to a CSV-formatted string.

        Args:
            data (object): Data to be serialized. Can be a NumPy array, pandas DataFrame, list, or str. A 2D
                array-like is serialized one row per line.

        Returns:
            str: The data serialized as a CSV-formatted string.
        """
        if hasattr(data, "to_csv"):
            stream = io.StringIO()
            data.to_csv(stream, header=False, index=False)
            return stream.getvalue()

        if isinstance(data, str):
            return data.strip()

        if hasattr(data, "__len__") and len(data) == 0:
            raise ValueError("Cannot serialize empty array")

        if _is_sequence_like(data) and len(data) > 0 and _is_sequence_like(data[0]):
            return "\n".join([self._serialize_row(row) for row in data])

        return self._serialize_row(data)

    @staticmethod
    def _serialize_row(data) -> str:
        if isinstance(data, str):
            return data

        if isinstance(data, np.ndarray):
            data = np.ndarray.flatten(data)

        if hasattr(data, "__len__"):
            if len(data) == 0:
                raise ValueError("Cannot serialize empty array")
            csv_buffer = io.StringIO()
            csv_writer = csv.writer(csv_buffer, delimiter=",")
            csv_writer.writerow(data)
            return csv_buffer.getvalue().rstrip("\r\n")

        raise ValueError(f"Unable to handle input format: {type(data)}")


class JSONSerializer(SimpleBaseSerializer):
    """Serialize data to a JSON formatted string."""

    def serialize(self, data: Any) -> str:
        """Serialize data of various formats to a JSON formatted string.

        Args:
            data (object): Data to be serialized. NumPy arrays are converted to nested lists.

        Returns:
            str: The data serialized as a JSON string.
        """
        if isinstance(data, dict):
            # convert each value in dict from a numpy array to a list if necessary, so they can be json serialized
            return json.dumps({k: _ndarray_to_list(v) for k, v in data.items()})

        # files and buffers
        if hasattr(data, "read"):
            return data.read()

        return json.dumps(_ndarray_to_list(data))


class NumpySerializer(SimpleBaseSerializer):
    """Serialize data to a buffer using the .npy format."""

    def __init__(self, dtype: Optional[str] = None, content_type: str = "application/x-npy"):
        super().__init__(content_type=content_type)
        self.dtype = dtype

    def serialize(self, data: Any) -> bytes:
        """Serialize data to a buffer using the .npy format.

        Args:
            data (object): Data to be serialized. Can be a NumPy array, list, file, or buffer.

        Returns:
            bytes: A buffer containing data serialzied in the .npy format.
        """
        if isinstance(data, np.ndarray):
            if data.size == 0:
                raise ValueError("Cannot serialize empty array.")
            return self._serialize_array(data)

        if isinstance(data, list):
            if len(data) == 0:
                raise ValueError("Cannot serialize empty array.")
            return self._serialize_array(np.array(data, self.dtype))

        # files and buffers. Assumed to hold npy-formatted data.
        if hasattr(data, "read"):
            return data.read()

        return self._serialize_array(np.array(data))

    @staticmethod
    def _serialize_array(array: np.ndarray) -> bytes:
        buffer = io.BytesIO()
        np.save(buffer, array)
        return buffer.getvalue()


class IdentitySerializer(SimpleBaseSerializer):
    """Serialize data by returning data without modification.

    This serializer may be useful if, for example, you're sending raw bytes such as from an image file's
    .read() method.
    """

    def __init__(self, content_type: str = "application/octet-stream"):
        super().__init__(content_type=content_type)

    def serialize(self, data: Any) -> Any:
        return data


def _is_sequence_like(obj) -> bool:
    return hasattr(obj, "__iter__") and hasattr(obj, "__getitem__") and not isinstance(obj, str)


def _ndarray_to_list(data):
    return data.tolist() if isinstance(data, np.ndarray) else data

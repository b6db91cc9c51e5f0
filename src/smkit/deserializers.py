"""Decode ``InvokeEndpoint`` response bodies."""
import abc
import codecs
import csv
import io
import json
from typing import Any, List, Optional, Tuple, Union

import numpy as np
import pandas as pd


class BaseDeserializer(abc.ABC):
    """Abstract base class for creation of new deserializers.

    Provides a skeleton for customization requiring the overriding of the method deserialize and the class
    attribute ACCEPT.
    """

    @abc.abstractmethod
    def deserialize(self, stream, content_type: str) -> Any:
        """Deserialize data received from an inference endpoint.

        Args:
            stream (botocore.response.StreamingBody): Data to be deserialized.
            content_type (str): The MIME type of the data.

        Returns:
            object: The data deserialized into an object.
        """

    @property
    @abc.abstractmethod
    def ACCEPT(self) -> Tuple[str, ...]:  # noqa: N802
        """The content types that are expected from the inference endpoint."""


class SimpleBaseDeserializer(BaseDeserializer):
    """Abstract base class for deserializers with fixed accepted content types."""

    def __init__(self, accept: Union[str, Tuple[str, ...]] = "*/*"):
        self.accept = accept

    @property
    def ACCEPT(self) -> Tuple[str, ...]:  # noqa: N802
        if isinstance(self.accept, str):
            return (self.accept,)
        return self.accept


class BytesDeserializer(SimpleBaseDeserializer):
    """Deserialize a stream of bytes into a bytes object."""

    def deserialize(self, stream, content_type: str) -> bytes:
        try:
            return stream.read()
        finally:
            stream.close()


class StringDeserializer(SimpleBaseDeserializer):
    """Deserialize data from an inference endpoint into a decoded string."""

    def __init__(self, encoding: str = "UTF-8", accept: Union[str, Tuple[str, ...]] = "application/json"):
        super().__init__(accept=accept)
        self.encoding = encoding

    def deserialize(self, stream, content_type: str) -> str:
        try:
            return stream.read().decode(self.encoding)
        finally:
            stream.close()


class CSVDeserializer(SimpleBaseDeserializer):
    """Deserialize a stream of bytes into a list of lists.

    Consider using :class:`~smkit.deserializers.NumpyDeserializer` or
    :class:`~smkit.deserializers.PandasDeserializer` instead, if you'd like to convert text/csv responses
    directly into other data types.
    """

    def __init__(self, encoding: str = "utf-8", accept: Union[str, Tuple[str, ...]] = "text/csv"):
        super().__init__(accept=accept)
        self.encoding = encoding

    def deserialize(self, stream, content_type: str) -> List[List[str]]:
        try:
            decoded_string = stream.read().decode(self.encoding)
            return list(csv.reader(decoded_string.splitlines()))
        finally:
            stream.close()


class JSONDeserializer(SimpleBaseDeserializer):
    """Deserialize JSON data from an inference endpoint into a Python object."""

    def __init__(self, accept: Union[str, Tuple[str, ...]] = "application/json"):
        super().__init__(accept=accept)

    def deserialize(self, stream, content_type: str) -> Any:
        try:
            return json.load(codecs.getreader("utf-8")(stream))
        finally:
            stream.close()


class NumpyDeserializer(SimpleBaseDeserializer):
    """Deserialize a stream of data in .npy, CSV or JSON format to a NumPy array."""

    def __init__(
        self,
        dtype: Optional[str] = None,
        accept: Union[str, Tuple[str, ...]] = "application/x-npy",
        allow_pickle: bool = True,
    ):
        super().__init__(accept=accept)
        self.dtype = dtype
        self.allow_pickle = allow_pickle

    def deserialize(self, stream, content_type: str) -> np.ndarray:
        """Deserialize data from an inference endpoint into a NumPy array.

        Raises:
            ValueError: on an unsupported content type.
        """
        try:
            if content_type == "text/csv":
                return np.genfromtxt(codecs.getreader("utf-8")(stream), delimiter=",", dtype=self.dtype)
            if content_type == "application/json":
                return np.array(json.load(codecs.getreader("utf-8")(stream)), dtype=self.dtype)
            if content_type == "application/x-npy":
                return np.load(io.BytesIO(stream.read()), allow_pickle=self.allow_pickle)
        finally:
            stream.close()

        raise ValueError(f"{content_type} cannot be deserialized.")


class PandasDeserializer(SimpleBaseDeserializer):
    """Deserialize CSV or JSON data from an inference endpoint into a pandas dataframe."""

    def __init__(self, accept: Union[str, Tuple[str, ...]] = ("text/csv", "application/json")):
        super().__init__(accept=accept)

    def deserialize(self, stream, content_type: str) -> pd.DataFrame:
        """Deserialize CSV or JSON data from an inference endpoint into a pandas dataframe.

        If the data is JSON, the data should be formatted in the 'columns' orient.
        See https://pandas.pydata.org/pandas-docs/stable/reference/api/pandas.DataFrame.to_json.html

        Raises:
            ValueError: on an unsupported content type.
        """
        try:
            if content_type == "text/csv":
                return pd.read_csv(io.BytesIO(stream.read()))
            if content_type == "application/json":
                return pd.read_json(io.BytesIO(stream.read()))
        finally:
            stream.close()

        raise ValueError(f"{content_type} cannot be deserialized.")

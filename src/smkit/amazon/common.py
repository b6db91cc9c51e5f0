"""RecordIO-wrapped protobuf encoding of numpy arrays and scipy sparse matrices."""
import io
import struct
from typing import BinaryIO, Iterator, List, Optional

import numpy as np
from scipy.sparse import issparse

from ..deserializers import SimpleBaseDeserializer
from ..serializers import SimpleBaseSerializer
from .record_pb2 import Record

RECORDIO_PROTOBUF = "application/x-recordio-protobuf"


class RecordSerializer(SimpleBaseSerializer):
    """Serialize a NumPy array for an inference request."""

    def __init__(self, content_type: str = RECORDIO_PROTOBUF):
        super().__init__(content_type=content_type)

    def serialize(self, data: np.ndarray) -> io.BytesIO:
        """Serialize a NumPy array into a buffer containing RecordIO records.

        Args:
            data (numpy.ndarray): The data to serialize. A 1D array is sent as a single record.

        Returns:
            io.BytesIO: A buffer containing the data serialized as records.

        Raises:
            ValueError: if ``data`` is neither 1D nor 2D.
        """
        if len(data.shape) == 1:
            data = data.reshape(1, data.shape[0])

        if len(data.shape) != 2:
            raise ValueError(f"Expected a 1D or 2D array, but got a {len(data.shape)}D array instead.")

        buffer = io.BytesIO()
        write_numpy_to_dense_tensor(buffer, data)
        buffer.seek(0)

        return buffer


class RecordDeserializer(SimpleBaseDeserializer):
    """Deserialize RecordIO Protobuf data from an inference endpoint."""

    def __init__(self, accept: str = RECORDIO_PROTOBUF):
        super().__init__(accept=accept)

    def deserialize(self, data, content_type: str) -> List[Record]:
        """Deserialize RecordIO Protobuf data from an inference endpoint.

        Args:
            data (object): The protobuf message to deserialize.
            content_type (str): The MIME type of the data.

        Returns:
            list: A list of records.
        """
        try:
            return read_records(data)
        finally:
            data.close()


def _write_feature_tensor(resolved_type: str, record: Record, vector):
    if resolved_type == "Int32":
        record.features["values"].int32_tensor.values.extend(vector)
    elif resolved_type == "Float64":
        record.features["values"].float64_tensor.values.extend(vector)
    elif resolved_type == "Float32":
        record.features["values"].float32_tensor.values.extend(vector)


def _write_label_tensor(resolved_type: str, record: Record, scalar):
    if resolved_type == "Int32":
        record.label["values"].int32_tensor.values.extend([scalar])
    elif resolved_type == "Float64":
        record.label["values"].float64_tensor.values.extend([scalar])
    elif resolved_type == "Float32":
        record.label["values"].float32_tensor.values.extend([scalar])


def _write_keys_tensor(resolved_type: str, record: Record, vector):
    if resolved_type == "Int32":
        record.features["values"].int32_tensor.keys.extend(vector)
    elif resolved_type == "Float64":
        record.features["values"].float64_tensor.keys.extend(vector)
    elif resolved_type == "Float32":
        record.features["values"].float32_tensor.keys.extend(vector)


def _write_shape(resolved_type: str, record: Record, scalar):
    if resolved_type == "Int32":
        record.features["values"].int32_tensor.shape.extend([scalar])
    elif resolved_type == "Float64":
        record.features["values"].float64_tensor.shape.extend([scalar])
    elif resolved_type == "Float32":
        record.features["values"].float32_tensor.shape.extend([scalar])


def _validate_labels(array, labels):
    if not len(labels.shape) == 1:
        raise ValueError("Labels must be a Vector")
    if labels.shape[0] not in array.shape:
        raise ValueError(f"Label shape {labels.shape} not compatible with array shape {array.shape}")


def write_numpy_to_dense_tensor(file: BinaryIO, array: np.ndarray, labels: Optional[np.ndarray] = None):
    """Writes a numpy array to a dense tensor, one record per row.

    Raises:
        ValueError: if ``array`` is not 2D, or ``labels`` is not a vector matching the rows of ``array``.
    """
    # Validate shape of array and labels, resolve array and label types
    if not len(array.shape) == 2:
        raise ValueError("Array must be a Matrix")
    resolved_label_type = None
    if labels is not None:
        _validate_labels(array, labels)
        resolved_label_type = _resolve_type(labels.dtype)
    resolved_type = _resolve_type(array.dtype)

    # Write each vector in array into a Record in the file object
    record = Record()
    for index, vector in enumerate(array):
        record.Clear()
        _write_feature_tensor(resolved_type, record, vector)
        if labels is not None:
            _write_label_tensor(resolved_label_type, record, labels[index])
        _write_recordio(file, record.SerializeToString())


def write_spmatrix_to_sparse_tensor(file: BinaryIO, array, labels: Optional[np.ndarray] = None):
    """Writes a scipy sparse matrix to a sparse tensor, one record per row with keys and shape.

    Raises:
        TypeError: if ``array`` is not a scipy sparse matrix.
        ValueError: if ``labels`` is not a vector matching the rows of ``array``.
    """
    if not issparse(array):
        raise TypeError("Array must be sparse")

    # Validate shape of array and labels, resolve array and label types
    if not len(array.shape) == 2:
        raise ValueError("Array must be a Matrix")
    resolved_label_type = None
    if labels is not None:
        _validate_labels(array, labels)
        resolved_label_type = _resolve_type(labels.dtype)
    resolved_type = _resolve_type(array.dtype)

    csr_array = array.tocsr()
    n_rows, n_cols = csr_array.shape

    record = Record()
    for row_idx in range(n_rows):
        record.Clear()
        row = csr_array.getrow(row_idx)
        # Write values
        _write_feature_tensor(resolved_type, record, row.data)
        # Write keys
        _write_keys_tensor(resolved_type, record, row.indices.astype(np.uint64))

        # Write labels
        if labels is not None:
            _write_label_tensor(resolved_label_type, record, labels[row_idx])

        # Write shape
        _write_shape(resolved_type, record, n_cols)

        _write_recordio(file, record.SerializeToString())


def read_records(file: BinaryIO) -> List[Record]:
    """Eagerly read a collection of amazon Record protobuf objects from file."""
    records = []
    for record_data in read_recordio(file):
        record = Record()
        record.ParseFromString(record_data)
        records.append(record)
    return records


# MXNet requires recordio records have length in bytes that's a multiple of 4
# This sets up padding bytes to append to the end of the record, for diferent
# amounts of padding required.
padding = {}
for amount in range(4):
    padding[amount] = bytearray([0x00 for _ in range(amount)])

_kmagic = 0xCED7230A


def _write_recordio(f: BinaryIO, data: bytes):
    """Writes a single data point as a RecordIO record to the given file."""
    length = len(data)
    f.write(struct.pack("<I", _kmagic))
    f.write(struct.pack("<I", length))
    pad = (((length + 3) >> 2) << 2) - length
    f.write(data)
    f.write(padding[pad])


def read_recordio(f: BinaryIO) -> Iterator[bytes]:
    """Yield the payload of each RecordIO record in ``f``.

    Raises:
        ValueError: on a record that does not start with the RecordIO magic number.
    """
    while True:
        try:
            (read_kmagic,) = struct.unpack("<I", f.read(4))
        except struct.error:
            return
        if read_kmagic != _kmagic:
            raise ValueError(f"Invalid RecordIO magic number: {read_kmagic:#x}")
        (len_record,) = struct.unpack("<I", f.read(4))
        pad = (((len_record + 3) >> 2) << 2) - len_record
        yield f.read(len_record)
        if pad:
            f.read(pad)


def _resolve_type(dtype) -> str:
    if dtype in (np.dtype(int), np.dtype("int32")):
        return "Int32"
    if dtype == np.dtype(float):
        return "Float64"
    if dtype == np.dtype("float32"):
        return "Float32"
    raise ValueError(f"Unsupported dtype {dtype} on array")

import io

import numpy as np
import pandas as pd
import pytest

from smkit.deserializers import (
    BytesDeserializer,
    CSVDeserializer,
    JSONDeserializer,
    NumpyDeserializer,
    PandasDeserializer,
    StringDeserializer,
)
from smkit.serializers import CSVSerializer, IdentitySerializer, JSONSerializer, NumpySerializer


def test_content_type_must_be_a_string():
    with pytest.raises(ValueError, match="content_type must be a string"):
        JSONSerializer(content_type=["application/json"])


@pytest.mark.parametrize(
    "data,expected",
    [
        ([1, 2, 3], "1,2,3"),
        (np.array([1, 2, 3]), "1,2,3"),
        ([[1, 2], [3, 4]], "1,2\n3,4"),
        (np.array([[1, 2], [3, 4]]), "1,2\n3,4"),
        ("1,2,3\n", "1,2,3"),
    ],
)
def test_csv_serializer(data, expected):
    assert CSVSerializer().serialize(data) == expected


def test_csv_serializer_dataframe():
    assert CSVSerializer().serialize(pd.DataFrame({"a": [1, 3], "b": [2, 4]})) == "1,2\n3,4\n"


@pytest.mark.parametrize("data", [[], np.array([]), [[]]])
def test_csv_serializer_empty(data):
    with pytest.raises(ValueError, match="empty"):
        CSVSerializer().serialize(data)


def test_json_serializer():
    serializer = JSONSerializer()
    assert serializer.CONTENT_TYPE == "application/json"
    assert serializer.serialize([1, 2]) == "[1, 2]"
    assert serializer.serialize(np.array([[1, 2], [3, 4]])) == "[[1, 2], [3, 4]]"
    assert serializer.serialize({"a": np.array([1, 2]), "b": "c"}) == '{"a": [1, 2], "b": "c"}'
    assert serializer.serialize(io.StringIO('{"raw": true}')) == '{"raw": true}'


def test_numpy_serializer():
    serializer = NumpySerializer(dtype="float32")
    assert serializer.CONTENT_TYPE == "application/x-npy"

    array = np.load(io.BytesIO(serializer.serialize([[1, 2], [3, 4]])))
    assert array.dtype == np.float32
    np.testing.assert_array_equal(array, [[1.0, 2.0], [3.0, 4.0]])

    assert np.load(io.BytesIO(serializer.serialize(7))) == 7

    with pytest.raises(ValueError, match="empty"):
        serializer.serialize(np.array([]))
    with pytest.raises(ValueError, match="empty"):
        serializer.serialize([])


def test_identity_serializer():
    serializer = IdentitySerializer(content_type="image/jpeg")
    assert serializer.CONTENT_TYPE == "image/jpeg"
    assert serializer.serialize(b"\xff\xd8") == b"\xff\xd8"


def test_bytes_and_string_deserializers_close_stream():
    stream = io.BytesIO(b"caf\xc3\xa9")
    assert BytesDeserializer().deserialize(stream, "application/octet-stream") == b"caf\xc3\xa9"
    assert stream.closed

    stream = io.BytesIO(b"caf\xc3\xa9")
    assert StringDeserializer().deserialize(stream, "text/plain") == "café"
    assert stream.closed


def test_csv_deserializer():
    result = CSVDeserializer().deserialize(io.BytesIO(b"1,2\n3,4"), "text/csv")
    assert result == [["1", "2"], ["3", "4"]]


def test_json_deserializer():
    assert JSONDeserializer().deserialize(io.BytesIO(b'{"scores": [0.1, 0.9]}'), "application/json") == {
        "scores": [0.1, 0.9]
    }


def test_numpy_deserializer():
    deserializer = NumpyDeserializer()
    np.testing.assert_array_equal(
        deserializer.deserialize(io.BytesIO(b"1,2\n3,4"), "text/csv"), np.array([[1.0, 2.0], [3.0, 4.0]])
    )
    np.testing.assert_array_equal(deserializer.deserialize(io.BytesIO(b"[1, 2]"), "application/json"), [1, 2])

    buffer = io.BytesIO()
    np.save(buffer, np.arange(3))
    array = deserializer.deserialize(io.BytesIO(buffer.getvalue()), "application/x-npy")
    np.testing.assert_array_equal(array, [0, 1, 2])

    stream = io.BytesIO(b"")
    with pytest.raises(ValueError, match="text/plain cannot be deserialized"):
        deserializer.deserialize(stream, "text/plain")
    assert stream.closed


def test_pandas_deserializer():
    deserializer = PandasDeserializer()
    assert deserializer.ACCEPT == ("text/csv", "application/json")

    frame = deserializer.deserialize(io.BytesIO(b"a,b\n1,2\n3,4"), "text/csv")
    pd.testing.assert_frame_equal(frame, pd.DataFrame({"a": [1, 3], "b": [2, 4]}))

    frame = deserializer.deserialize(io.BytesIO(b'{"a": {"0": 1, "1": 3}}'), "application/json")
    assert list(frame["a"]) == [1, 3]

    with pytest.raises(ValueError):
        deserializer.deserialize(io.BytesIO(b""), "application/x-npy")


def test_accept_is_always_a_tuple():
    assert JSONDeserializer().ACCEPT == ("application/json",)
    assert BytesDeserializer().ACCEPT == ("*/*",)
    assert CSVDeserializer(accept=("text/csv", "text/plain")).ACCEPT == ("text/csv", "text/plain")

# tests/test_io.py
"""
Text ingestion and formatting.
"""

from __future__ import annotations

import io

import pytest
import torch

from apcluster.base.data_structures import Matrix
from apcluster.base.exceptions import InputFormatError
from apcluster.io import read_data_matrix, format_matrix, write_matrix


def test_read_comma_delimited(tmp_path):
    path = tmp_path / "data.csv"
    path.write_text("3,4,3\n4,3,5\n\n-1,0,2\n")
    X = read_data_matrix(path)
    assert X.dtype == torch.int64
    assert X.tolist() == [[3, 4, 3], [4, 3, 5], [-1, 0, 2]]


def test_read_custom_delimiter_from_stream():
    X = read_data_matrix(io.StringIO("1;2\n3;4\n"), delimiter=";")
    assert X.tolist() == [[1, 2], [3, 4]]


def test_read_single_row_is_2d():
    X = read_data_matrix(io.StringIO("7,8,9\n"))
    assert X.shape == (1, 3)


def test_ragged_rows_rejected(tmp_path):
    path = tmp_path / "ragged.csv"
    path.write_text("1,2,3\n4,5\n")
    with pytest.raises(InputFormatError):
        read_data_matrix(path)


def test_non_integer_field_rejected():
    with pytest.raises(InputFormatError):
        read_data_matrix(io.StringIO("1,abc\n2,3\n"))


def test_empty_input_rejected(tmp_path):
    path = tmp_path / "empty.csv"
    path.write_text("")
    with pytest.raises(InputFormatError):
        read_data_matrix(path)


def test_input_format_error_is_value_error():
    assert issubclass(InputFormatError, ValueError)


def test_format_matrix_rows():
    expected = "1 0 \n0 1 \n"
    assert format_matrix(torch.tensor([[1, 0], [0, 1]])) == expected
    assert format_matrix(Matrix.from_values([[1, 0], [0, 1]])) == expected
    assert format_matrix([[1, 0], [0, 1]]) == expected


def test_write_matrix_to_stream():
    out = io.StringIO()
    write_matrix([[-3, 4]], out)
    assert out.getvalue() == "-3 4 \n"

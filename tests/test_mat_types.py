import sys
from pathlib import Path

import numpy as np
import pytest
import torch

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.append(REPO_ROOT.as_posix())
from pcs_detection.mat_types import type2str, mat_type, cv_make_type, cv_mat_depth, cv_mat_cn
from pcs_detection.constants import CV_8U, CV_16S, CV_32F, CV_64F
from pcs_detection.exceptions import UnsupportedDtype


def test_type2str_table():
    assert type2str(cv_make_type(CV_8U, 3)) == "8UC3"
    assert type2str(cv_make_type(CV_64F, 1)) == "64FC1"
    assert type2str(cv_make_type(CV_16S, 4)) == "16SC4"
    assert type2str(cv_make_type(CV_32F, 2)) == "32FC2"


def test_type2str_matches_opencv_codes():
    # CV_8UC3 and CV_64FC1 as defined in OpenCV's interface.h
    assert type2str(16) == "8UC3"
    assert type2str(6) == "64FC1"


def test_type2str_unknown_depth():
    # Depth 7 is CV_16F, which isn't in the table.
    assert type2str(cv_make_type(7, 2)) == "UserC2"
    assert type2str(7) == "UserC1"


def test_make_type_components():
    code = cv_make_type(CV_32F, 3)
    assert cv_mat_depth(code) == CV_32F
    assert cv_mat_cn(code) == 3

    with pytest.raises(ValueError):
        cv_make_type(CV_8U, 0)


def test_mat_type_numpy():
    assert type2str(mat_type(np.zeros((4, 5, 3), dtype=np.uint8))) == "8UC3"
    assert type2str(mat_type(np.zeros((4, 5), dtype=np.float64))) == "64FC1"
    assert type2str(mat_type(np.zeros((4, 5, 2), dtype=np.int32))) == "32SC2"


def test_mat_type_torch():
    assert type2str(mat_type(torch.zeros((4, 5, 3), dtype=torch.float32))) == "32FC3"


@pytest.mark.skipif(not hasattr(torch, "uint16"), reason="torch has no uint16")
def test_mat_type_torch_uint16():
    img = torch.zeros((2, 2), dtype=torch.uint16)

    assert type2str(mat_type(img)) == "16UC1"
    assert mat_type(img) == mat_type(np.zeros((2, 2), dtype=np.uint16))


def test_mat_type_unsupported():
    with pytest.raises(UnsupportedDtype):
        mat_type(np.zeros((4, 5), dtype=np.int64))

    with pytest.raises(ValueError):
        mat_type(np.zeros((4,), dtype=np.uint8))

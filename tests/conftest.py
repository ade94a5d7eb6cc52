import os
import random
import sys

import pytest

# 프로젝트 루트를 sys.path에 추가 (app.py, api_routes.py)
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from zkmul import snark


@pytest.fixture(scope="session")
def small_bounds():
    """작은 setup 한도 (C, V, N). 진단 회로(제약 2, 변수 6, non-zero 2)까지 들어간다."""
    return (2, 6, 2)


@pytest.fixture(scope="session")
def small_srs(small_bounds):
    return snark.universal_setup(*small_bounds, random.Random(0)).value
